"""Centralized configuration for freecalc.

Every setting can be overridden through an environment variable prefixed with
``FREECALC_``; the CLI flags in ``cli.py`` take precedence over these.
"""

from __future__ import annotations

import os
from typing import Final

# Parsed expression trees are immutable, so repeated inputs reuse them.
PARSE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("FREECALC_PARSE_CACHE_MAX", "256")))

LOG_LEVEL: Final[str] = os.environ.get("FREECALC_LOG_LEVEL", "WARNING")
LOG_FILE: Final[str | None] = os.environ.get("FREECALC_LOG_FILE") or None

# Interactive prompt; ``{index}`` is replaced by the index the next result will get.
PROMPT: Final[str] = os.environ.get("FREECALC_PROMPT", "[{index}]: ")
