"""freecalc public API."""

from .parser import ParseError, parse
from .errors import (
    ArithmeticErrorKind,
    CalcArithmeticError,
    CalcError,
    CalcParseError,
    FormatError,
    HistoryOutOfBoundsError,
    ImproperlyFloatError,
    NestingTooDeepError,
    ParseValueError,
)
from .values import Order, Value, match_orders
from .evaluator import evaluate_expr, lookup_history
from .render import OutputBase, OutputFormat, Separator, render
from .context import Context, evaluate

__all__ = [
    "ArithmeticErrorKind",
    "CalcArithmeticError",
    "CalcError",
    "CalcParseError",
    "Context",
    "FormatError",
    "HistoryOutOfBoundsError",
    "ImproperlyFloatError",
    "NestingTooDeepError",
    "Order",
    "OutputBase",
    "OutputFormat",
    "ParseError",
    "ParseValueError",
    "Separator",
    "Value",
    "evaluate",
    "evaluate_expr",
    "lookup_history",
    "match_orders",
    "parse",
    "render",
]
