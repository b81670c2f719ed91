"""Structured error types for parse/evaluation separation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .ast import HistoryIndexKind
from .parser import ParseError


class CalcError(Exception):
    """Base class for structured freecalc errors."""


class ArithmeticErrorKind(str, Enum):
    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    DIVIDE_BY_0 = "attempt to divide by 0"


class CalcArithmeticError(CalcError):
    """Integer arithmetic left every representable range, or divided by zero."""

    def __init__(self, kind: ArithmeticErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind

    @classmethod
    def overflow(cls) -> "CalcArithmeticError":
        return cls(ArithmeticErrorKind.OVERFLOW)

    @classmethod
    def underflow(cls) -> "CalcArithmeticError":
        return cls(ArithmeticErrorKind.UNDERFLOW)

    @classmethod
    def divide_by_zero(cls) -> "CalcArithmeticError":
        return cls(ArithmeticErrorKind.DIVIDE_BY_0)

    def __str__(self) -> str:
        return self.kind.value


class ImproperlyFloatError(CalcError):
    """An integer-only operation was applied to a float value."""

    def __init__(self) -> None:
        super().__init__(
            "attempted to perform an operation which only makes sense for integers, "
            "but value is currently a float"
        )


@dataclass(frozen=True)
class HistoryOutOfBoundsError(CalcError):
    kind: HistoryIndexKind
    requested: int
    length: int

    def __str__(self) -> str:
        return f"{self.kind.value} history index {self.requested} out of bounds: [0..{self.length})"


@dataclass(frozen=True)
class ParseValueError(CalcError):
    """No numeric representation accepted a literal."""

    text: str
    radix: int | None = None

    def __str__(self) -> str:
        if self.radix is None:
            return f'"{self.text}" cannot be parsed as Value'
        return f'"{self.text}" cannot be parsed as Value given radix {self.radix}'


@dataclass(frozen=True)
class CalcParseError(CalcError):
    """Wraps parser failures with explicit parse-stage typing."""

    message: str
    start: int
    end: int
    expected: tuple[str, ...] = ()
    found: str | None = None

    @classmethod
    def from_parse_error(cls, err: ParseError) -> "CalcParseError":
        return cls(
            message=err.message,
            start=err.start,
            end=err.end,
            expected=err.expected,
            found=err.found,
        )

    def __str__(self) -> str:
        expected = ""
        if self.expected:
            expected = f"; expected {', '.join(self.expected)}"
        found = ""
        if self.found is not None:
            found = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected}{found}"

    def diagnostic(self, source: str) -> str:
        """Render the message, the source line and a caret line under the span."""
        width = max(1, self.end - self.start)
        return f"{self.message}\n{source}\n{' ' * self.start}{'^' * width}"


class FormatError(CalcError):
    """Output format annotation could not be parsed or applied."""


class NestingTooDeepError(CalcError):
    """The expression tree is too deep to evaluate."""

    def __init__(self) -> None:
        super().__init__("expression nested too deeply")
