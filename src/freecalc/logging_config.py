"""Structured logging configuration for freecalc."""

from __future__ import annotations

import logging
import sys
from datetime import datetime

_ROOT_LOGGER = "freecalc"


class StructuredFormatter(logging.Formatter):
    """Formatter that emits ``timestamp [LEVEL] logger: message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> logging.Logger:
    """Set up logging for the application.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to in addition to stderr

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child of the package logger, e.g. ``get_logger("values")``."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
