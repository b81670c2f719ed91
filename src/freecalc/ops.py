"""Operator dispatch: which Value method implements each piece of syntax."""

from __future__ import annotations

from typing import Callable, Final

from .ast import Constant, Function, InfixOperator, PrefixOperator
from .values import Value

UnaryOp = Callable[[Value], Value]
BinaryOp = Callable[[Value, Value], Value]

PREFIX_OPS: Final[dict[PrefixOperator, UnaryOp]] = {
    PrefixOperator.NEGATION: Value.neg,
    PrefixOperator.NOT: Value.bit_not,
}

INFIX_OPS: Final[dict[InfixOperator, BinaryOp]] = {
    InfixOperator.ADD: Value.add,
    InfixOperator.SUB: Value.sub,
    InfixOperator.MUL: Value.mul,
    InfixOperator.DIV: Value.div,
    InfixOperator.TRUNC_DIV: Value.trunc_div,
    InfixOperator.POW: Value.pow,
    InfixOperator.REM: Value.rem,
    InfixOperator.LSHIFT: Value.shl,
    InfixOperator.RSHIFT: Value.shr,
    InfixOperator.ROTATE_L: Value.rotate_left,
    InfixOperator.ROTATE_R: Value.rotate_right,
    InfixOperator.BIT_AND: Value.bit_and,
    InfixOperator.BIT_OR: Value.bit_or,
    InfixOperator.BIT_XOR: Value.bit_xor,
}

FUNCTIONS: Final[dict[Function, UnaryOp]] = {
    Function.ABS: Value.abs,
    Function.CEIL: Value.ceil,
    Function.FLOOR: Value.floor,
    Function.ROUND: Value.round,
    Function.SIN: Value.sin,
    Function.COS: Value.cos,
    Function.TAN: Value.tan,
    Function.SINH: Value.sinh,
    Function.COSH: Value.cosh,
    Function.TANH: Value.tanh,
    Function.ASIN: Value.asin,
    Function.ACOS: Value.acos,
    Function.ATAN: Value.atan,
    Function.ASINH: Value.asinh,
    Function.ACOSH: Value.acosh,
    Function.ATANH: Value.atanh,
    Function.RAD: Value.rad,
    Function.DEG: Value.deg,
    Function.SQRT: Value.sqrt,
    Function.CBRT: Value.cbrt,
    Function.LOG: Value.log,
    Function.LG: Value.lg,
    Function.LN: Value.ln,
    Function.EXP: Value.exp,
}

CONSTANTS: Final[dict[Constant, Value]] = {
    Constant.E: Value.E,
    Constant.PI: Value.PI,
}

# Raise ImproperlyFloatError when either operand is (or promotes to) a float.
INTEGER_ONLY_OPERATORS: Final[frozenset[PrefixOperator | InfixOperator]] = frozenset(
    {
        PrefixOperator.NOT,
        InfixOperator.LSHIFT,
        InfixOperator.RSHIFT,
        InfixOperator.ROTATE_L,
        InfixOperator.ROTATE_R,
        InfixOperator.BIT_AND,
        InfixOperator.BIT_OR,
        InfixOperator.BIT_XOR,
    }
)


def apply_prefix(op: PrefixOperator, operand: Value) -> Value:
    return PREFIX_OPS[op](operand)


def apply_infix(op: InfixOperator, left: Value, right: Value) -> Value:
    return INFIX_OPS[op](left, right)


def apply_function(function: Function, operand: Value) -> Value:
    return FUNCTIONS[function](operand)


def constant_value(constant: Constant) -> Value:
    return CONSTANTS[constant]
