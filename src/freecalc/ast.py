"""AST nodes for freehand arithmetic expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class LiteralBase(int, Enum):
    BINARY = 2
    OCTAL = 8
    DECIMAL = 10
    HEX = 16


class HistoryIndexKind(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"


class Constant(str, Enum):
    E = "e"
    PI = "pi"


class PrefixOperator(str, Enum):
    NEGATION = "-"
    NOT = "!"


class InfixOperator(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    TRUNC_DIV = "//"
    POW = "**"
    REM = "%"
    LSHIFT = "<<"
    RSHIFT = ">>"
    ROTATE_L = "<<<"
    ROTATE_R = ">>>"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"


class Function(str, Enum):
    ABS = "abs"
    CEIL = "ceil"
    FLOOR = "floor"
    ROUND = "round"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    SINH = "sinh"
    COSH = "cosh"
    TANH = "tanh"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    ASINH = "asinh"
    ACOSH = "acosh"
    ATANH = "atanh"
    RAD = "rad"
    DEG = "deg"
    SQRT = "sqrt"
    CBRT = "cbrt"
    LOG = "log"
    LG = "lg"
    LN = "ln"
    EXP = "exp"


@dataclass(frozen=True)
class Literal:
    """Numeric literal exactly as written, base prefix and underscores included."""

    text: str
    base: LiteralBase = LiteralBase.DECIMAL


@dataclass(frozen=True)
class NamedConstant:
    constant: Constant


@dataclass(frozen=True)
class HistoryRef:
    kind: HistoryIndexKind
    index: int


@dataclass(frozen=True)
class Prefix:
    op: PrefixOperator
    expr: "Expr"


@dataclass(frozen=True)
class Infix:
    left: "Expr"
    op: InfixOperator
    right: "Expr"


@dataclass(frozen=True)
class Func:
    function: Function
    expr: "Expr"


@dataclass(frozen=True)
class Group:
    """Explicit parentheses; kept so the tree can be printed back faithfully."""

    expr: "Expr"


Term = Union[Literal, NamedConstant, HistoryRef]
Expr = Union[Literal, NamedConstant, HistoryRef, Prefix, Infix, Func, Group]
