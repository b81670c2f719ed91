"""Recursive evaluation of expression trees against a result history."""

from __future__ import annotations

from typing import Callable, Final, Sequence

from .ast import Expr, Func, Group, HistoryIndexKind, HistoryRef, Infix, Literal, LiteralBase, NamedConstant, Prefix
from .errors import HistoryOutOfBoundsError
from .logging_config import get_logger
from .ops import apply_function, apply_infix, apply_prefix, constant_value
from .values import Value

_log = get_logger("evaluator")

_LITERAL_PARSERS: Final[dict[LiteralBase, Callable[[str], Value]]] = {
    LiteralBase.BINARY: Value.parse_binary,
    LiteralBase.OCTAL: Value.parse_octal,
    LiteralBase.DECIMAL: Value.parse_decimal,
    LiteralBase.HEX: Value.parse_hex,
}


def lookup_history(history: Sequence[Value], kind: HistoryIndexKind, index: int) -> Value:
    """Resolve a history reference.

    Absolute indices count from the oldest result (``@0``); relative indices count
    back from the newest (``@`` is the last result, ``@@`` the one before).
    """
    length = len(history)
    if kind is HistoryIndexKind.RELATIVE:
        if index > length:
            raise HistoryOutOfBoundsError(kind, index, length)
        real_index = length - index
    else:
        real_index = index
    if not 0 <= real_index < length:
        raise HistoryOutOfBoundsError(kind, index, length)
    _log.debug("%s history index %d resolved to slot %d", kind.value, index, real_index)
    return history[real_index]


def evaluate_expr(expr: Expr, history: Sequence[Value]) -> Value:
    if isinstance(expr, Literal):
        return _LITERAL_PARSERS[expr.base](expr.text)

    if isinstance(expr, NamedConstant):
        return constant_value(expr.constant)

    if isinstance(expr, HistoryRef):
        return lookup_history(history, expr.kind, expr.index)

    if isinstance(expr, Prefix):
        operand = evaluate_expr(expr.expr, history)
        return apply_prefix(expr.op, operand)

    if isinstance(expr, Infix):
        left = evaluate_expr(expr.left, history)
        right = evaluate_expr(expr.right, history)
        return apply_infix(expr.op, left, right)

    if isinstance(expr, Func):
        operand = evaluate_expr(expr.expr, history)
        return apply_function(expr.function, operand)

    if isinstance(expr, Group):
        return evaluate_expr(expr.expr, history)

    raise TypeError(f"Unsupported expression node {type(expr).__name__}")
