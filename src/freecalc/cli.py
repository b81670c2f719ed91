"""Command-line front end: evaluate one expression, or run an interactive session."""

from __future__ import annotations

import argparse
import sys

from . import config
from .context import Context
from .errors import CalcError, CalcParseError
from .logging_config import get_logger, setup_logging
from .render import DEFAULT_FORMAT, OutputFormat

_log = get_logger("cli")


def _describe(err: CalcError, source: str) -> str:
    if isinstance(err, CalcParseError):
        return err.diagnostic(source)
    return str(err)


def _run_once(ctx: Context, source: str) -> int:
    try:
        print(ctx.evaluate_annotated(source))
    except CalcError as err:
        _log.info("evaluation of %r failed: %s", source, err)
        print(_describe(err, source), file=sys.stderr)
        return 1
    return 0


def _run_shell(ctx: Context) -> int:
    while True:
        try:
            line = input(config.PROMPT.format(index=len(ctx)))
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line.strip():
            continue
        try:
            print(ctx.evaluate_annotated(line))
        except CalcError as err:
            _log.info("evaluation of %r failed: %s", line, err)
            print(_describe(err, line), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="freecalc",
        description="Evaluate freehand arithmetic expressions. Without an expression, start an interactive shell.",
    )
    parser.add_argument(
        "-F",
        "--format",
        default=None,
        help="default output format annotation, e.g. '_' or '08x' (a trailing ':fmt' on a line overrides it)",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="logging level (default from FREECALC_LOG_LEVEL)")
    parser.add_argument("--log-file", default=config.LOG_FILE, help="also write logs to this file")
    parser.add_argument("expression", nargs=argparse.REMAINDER, help="expression to evaluate")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    default_format = DEFAULT_FORMAT
    if args.format is not None:
        try:
            default_format = OutputFormat.parse(args.format)
        except CalcError as err:
            parser.error(str(err))

    ctx = Context(default_format=default_format)
    if args.expression:
        return _run_once(ctx, " ".join(args.expression))
    return _run_shell(ctx)


if __name__ == "__main__":
    raise SystemExit(main())
