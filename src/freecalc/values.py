"""Numeric value tower: five fixed-width representations with automatic promotion.

Every calculation works on a single :class:`Value` type which is concretely
represented by one of five *orders*::

    u64 < u128 < i64 < i128 < f64

Lower orders have a narrower scope and higher orders a broader one, so a value
can always be promoted to a compatible higher order when it needs room.

Promotion rules:

- ``u64`` is unconditionally promoted to ``u128``; that conversion is lossless.
- ``u128`` goes to the next order which can hold it: ``u64::MAX`` skips ``i64``
  and lands in ``i128``; anything above ``i128::MAX`` becomes ``f64`` even
  though that loses precision.
- ``i64`` is unconditionally promoted to ``i128``.
- ``i128`` is promoted to ``f64``, which approximates very large values best.
- ``f64`` stays ``f64``.

For each pair of operands the lower order is promoted until both match, and the
operation then runs at that order. Addition, subtraction, multiplication,
negation and exponentiation retry one order higher whenever the result does not
fit, so they never overflow; they end at ``f64`` in the worst case.

Equality and ordering are defined on the logical values: ``42u64 == 42.0``.
Use :meth:`Value.strict_eq` and :meth:`Value.strict_cmp` to also compare orders.
"""

from __future__ import annotations

import math
import operator
import re
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, ClassVar, Final, Union

import numpy as np

from .errors import CalcArithmeticError, ImproperlyFloatError, ParseValueError
from .logging_config import get_logger

_log = get_logger("values")

U32_MAX: Final[int] = 2**32 - 1
U64_MAX: Final[int] = 2**64 - 1
U128_MAX: Final[int] = 2**128 - 1
I64_MIN: Final[int] = -(2**63)
I64_MAX: Final[int] = 2**63 - 1
I128_MIN: Final[int] = -(2**127)
I128_MAX: Final[int] = 2**127 - 1


class Order(IntEnum):
    """Representational rank of a value, independent of its magnitude."""

    UNSIGNED_INT = 0
    UNSIGNED_BIG_INT = 1
    SIGNED_INT = 2
    SIGNED_BIG_INT = 3
    FLOAT = 4

    @property
    def is_integer(self) -> bool:
        return self is not Order.FLOAT

    @property
    def is_signed(self) -> bool:
        return self >= Order.SIGNED_INT

    @property
    def width(self) -> int:
        return _WIDTHS[self]

    def fits(self, n: int) -> bool:
        low, high = _BOUNDS[self]
        return low <= n <= high


_WIDTHS: Final[dict[Order, int]] = {
    Order.UNSIGNED_INT: 64,
    Order.UNSIGNED_BIG_INT: 128,
    Order.SIGNED_INT: 64,
    Order.SIGNED_BIG_INT: 128,
    Order.FLOAT: 64,
}

_BOUNDS: Final[dict[Order, tuple[int, int]]] = {
    Order.UNSIGNED_INT: (0, U64_MAX),
    Order.UNSIGNED_BIG_INT: (0, U128_MAX),
    Order.SIGNED_INT: (I64_MIN, I64_MAX),
    Order.SIGNED_BIG_INT: (I128_MIN, I128_MAX),
}

_INTEGER_ORDERS: Final[tuple[Order, ...]] = (
    Order.UNSIGNED_INT,
    Order.UNSIGNED_BIG_INT,
    Order.SIGNED_INT,
    Order.SIGNED_BIG_INT,
)

_CONSTRUCTOR_NAMES: Final[dict[Order, str]] = {
    Order.UNSIGNED_INT: "from_u64",
    Order.UNSIGNED_BIG_INT: "from_u128",
    Order.SIGNED_INT: "from_i64",
    Order.SIGNED_BIG_INT: "from_i128",
    Order.FLOAT: "from_f64",
}

_RADIX_DIGITS: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"
_FLOAT_RE: Final = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def _float_kernel(fn: Callable[..., np.floating], *args: float) -> float:
    """Run a numpy ufunc on float64 scalars, keeping IEEE results (inf, NaN) silent."""
    with np.errstate(all="ignore"):
        return float(fn(*(np.float64(arg) for arg in args)))


def _float_pow(base: float, exponent: float) -> float:
    # libm pow is correctly rounded; numpy supplies the IEEE result where libm signals a domain or range error.
    try:
        return math.pow(base, exponent)
    except (OverflowError, ValueError):
        return _float_kernel(np.power, base, exponent)


def _round_half_away(x: np.float64) -> np.float64:
    truncated = np.trunc(x)
    if np.abs(x - truncated) >= 0.5:
        truncated += np.copysign(1.0, x)
    return truncated


def _from_bits(order: Order, bits: int) -> int:
    """Reinterpret the low ``order.width`` bits as a value of ``order``."""
    bits &= (1 << order.width) - 1
    if order.is_signed and bits >> (order.width - 1):
        bits -= 1 << order.width
    return bits


def _rotate_left_bits(order: Order, n: int, amount: int) -> int:
    width = order.width
    shift = amount % width
    bits = n & ((1 << width) - 1)
    return _from_bits(order, (bits << shift) | (bits >> (width - shift)))


def _checked_int_pow(order: Order, base: int, exponent: int) -> int | None:
    magnitude = abs(base)
    # A lower bound on the result's bit length; skips building huge integers.
    if magnitude > 1 and (magnitude.bit_length() - 1) * exponent >= order.width:
        return None
    result = base**exponent
    return result if order.fits(result) else None


def _parse_int(text: str, radix: int) -> int | None:
    digits = text[1:] if text[:1] in "+-" else text
    allowed = _RADIX_DIGITS[:radix]
    if not digits or any(ch not in allowed for ch in digits.lower()):
        return None
    return int(text, radix)


def _clean_input(text: str, prefix: str) -> str:
    """Strip underscores and a leading base marker."""
    return text.replace("_", "").removeprefix(prefix)


def _float_key(x: float) -> tuple[int, float, int]:
    # Total order: -0.0 before +0.0, every NaN equal to every other and above all numbers.
    if math.isnan(x):
        return (1, 0.0, 0)
    return (0, x, 0 if math.copysign(1.0, x) < 0 else 1)


def _compare_same_order(order: Order, left: int | float, right: int | float) -> int:
    if order is Order.FLOAT:
        lkey, rkey = _float_key(left), _float_key(right)
        return (lkey > rkey) - (lkey < rkey)
    return (left > right) - (left < right)


def format_float(x: float) -> str:
    """Shortest round-tripping positional decimal, without a trailing ``.0``."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return np.format_float_positional(x, trim="-")


@dataclass(frozen=True, eq=False)
class Value:
    """A numeric value tagged with its in-memory order."""

    order: Order
    n: int | float

    PI: ClassVar["Value"]
    E: ClassVar["Value"]

    def __post_init__(self) -> None:
        if self.order is Order.FLOAT:
            if type(self.n) is not float:
                object.__setattr__(self, "n", float(self.n))
            return
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise TypeError(f"{self.order.name} values hold integers, got {type(self.n).__name__}")
        if not self.order.fits(self.n):
            raise ValueError(f"{self.n} does not fit in {self.order.name}")

    # ------------------------------------------------------------------
    # construction

    @classmethod
    def from_u64(cls, n: int) -> "Value":
        return cls(Order.UNSIGNED_INT, n)

    @classmethod
    def from_u128(cls, n: int) -> "Value":
        return cls(Order.UNSIGNED_BIG_INT, n)

    @classmethod
    def from_i64(cls, n: int) -> "Value":
        return cls(Order.SIGNED_INT, n)

    @classmethod
    def from_i128(cls, n: int) -> "Value":
        return cls(Order.SIGNED_BIG_INT, n)

    @classmethod
    def from_f64(cls, x: float) -> "Value":
        return cls(Order.FLOAT, float(x))

    @classmethod
    def from_int(cls, n: int) -> "Value":
        """Wrap ``n`` in the narrowest integer order that holds it."""
        for order in _INTEGER_ORDERS:
            if order.fits(n):
                return cls(order, n)
        if n > 0:
            raise CalcArithmeticError.overflow()
        raise CalcArithmeticError.underflow()

    # ------------------------------------------------------------------
    # parsing

    @classmethod
    def from_str_radix(cls, text: str, radix: int) -> "Value":
        """Parse digits in ``radix``, trying u64, u128, i64 and i128 in turn.

        The text is an optional sign followed by digits only; whitespace,
        prefixes and underscores are errors here.
        """
        n = _parse_int(text, radix)
        if n is not None:
            for order in _INTEGER_ORDERS:
                if order.fits(n):
                    return cls(order, n)
        raise ParseValueError(text, radix)

    @classmethod
    def parse(cls, text: str) -> "Value":
        """Parse a decimal integer or float, using the narrowest order that fits."""
        n = _parse_int(text, 10)
        if n is not None:
            for order in _INTEGER_ORDERS:
                if order.fits(n):
                    return cls(order, n)
        if _FLOAT_RE.fullmatch(text):
            return cls.from_f64(float(text))
        raise ParseValueError(text)

    @classmethod
    def parse_binary(cls, text: str) -> "Value":
        return cls.from_str_radix(_clean_input(text, "0b"), 2)

    @classmethod
    def parse_octal(cls, text: str) -> "Value":
        return cls.from_str_radix(_clean_input(text, "0o"), 8)

    @classmethod
    def parse_decimal(cls, text: str) -> "Value":
        return cls.parse(_clean_input(text, "0d"))

    @classmethod
    def parse_hex(cls, text: str) -> "Value":
        return cls.from_str_radix(_clean_input(text, "0x"), 16)

    # ------------------------------------------------------------------
    # promotion and demotion

    def promote(self) -> "Value":
        """Move one order up; the target for ``u128`` depends on the value."""
        if self.order is Order.UNSIGNED_INT:
            return Value(Order.UNSIGNED_BIG_INT, self.n)
        if self.order is Order.UNSIGNED_BIG_INT:
            if self.n <= I64_MAX:
                return Value(Order.SIGNED_INT, self.n)
            if self.n <= I128_MAX:
                return Value(Order.SIGNED_BIG_INT, self.n)
            return Value(Order.FLOAT, float(self.n))
        if self.order is Order.SIGNED_INT:
            return Value(Order.SIGNED_BIG_INT, self.n)
        if self.order is Order.SIGNED_BIG_INT:
            return Value(Order.FLOAT, float(self.n))
        return self

    def promote_to_signed(self) -> "Value":
        value = self
        while value.order <= Order.UNSIGNED_BIG_INT:
            value = value.promote()
        return value

    def promote_to_float(self) -> "Value":
        if self.order is Order.FLOAT:
            return self
        return Value(Order.FLOAT, float(self.n))

    def as_float(self) -> float:
        return float(self.n)

    def demote(self) -> "Value":
        """Narrow an integral value to the smallest integer order that holds it.

        Non-finite floats stay floats, as does anything beyond ``i128``.
        """
        if self.order.is_integer:
            n = self.n
        else:
            x = self.n
            if not math.isfinite(x):
                return self
            assert abs(math.modf(x)[0]) < sys.float_info.epsilon, "only integral values may be demoted"
            n = int(x)
        for order in _INTEGER_ORDERS:
            if order.fits(n):
                return Value(order, n)
        return self.promote_to_float()

    def match_orders(self, other: "Operand") -> tuple["Value", "Value"]:
        """Promote the lower-order side until both orders are equal."""
        left, right = self, _coerce(other)
        while left.order != right.order:
            if left.order < right.order:
                left = left.promote()
            else:
                right = right.promote()
        return left, right

    def as_u32(self) -> int:
        """Interpret this value as a shift/rotate/exponent count."""
        if self.order is Order.FLOAT:
            x = self.n
            if x < 0:
                raise CalcArithmeticError.overflow()
            if not math.isfinite(x) or not x.is_integer():
                raise ImproperlyFloatError()
            n = int(x)
        else:
            n = self.n
        if not 0 <= n <= U32_MAX:
            raise CalcArithmeticError.overflow()
        return n

    # ------------------------------------------------------------------
    # arithmetic

    def add(self, other: "Operand") -> "Value":
        return _promoting(self, _coerce(other), operator.add, np.add, "add")

    def sub(self, other: "Operand") -> "Value":
        left, right = self, _coerce(other)
        if right > left:
            left = left.promote_to_signed()
        return _promoting(left, right, operator.sub, np.subtract, "sub")

    def mul(self, other: "Operand") -> "Value":
        return _promoting(self, _coerce(other), operator.mul, np.multiply, "mul")

    def div(self, other: "Operand") -> "Value":
        """True division; always produces a float."""
        left, right = self.match_orders(other)
        if left.order.is_integer and right.n == 0:
            raise CalcArithmeticError.divide_by_zero()
        return Value.from_f64(_float_kernel(np.divide, left.as_float(), right.as_float()))

    def trunc_div(self, other: "Operand") -> "Value":
        """Divide, then floor the quotient to the next lowest integer."""
        quotient = self.div(other)
        return Value.from_f64(_float_kernel(np.floor, quotient.n)).demote()

    def rem(self, other: "Operand") -> "Value":
        """Remainder with the sign of the dividend."""
        left, right = self.match_orders(other)
        if left.order is Order.FLOAT:
            return Value.from_f64(_float_kernel(np.fmod, left.n, right.n))
        if right.n == 0:
            raise CalcArithmeticError.divide_by_zero()
        remainder = abs(left.n) % abs(right.n)
        return Value(left.order, -remainder if left.n < 0 else remainder)

    def pow(self, other: "Operand") -> "Value":
        base, exponent = self.match_orders(other)
        if base.order is Order.FLOAT:
            return Value.from_f64(_float_pow(base.n, exponent.n))
        power = exponent.as_u32()
        while base.order.is_integer:
            result = _checked_int_pow(base.order, base.n, power)
            if result is not None:
                return Value(base.order, result)
            _log.debug("pow overflowed %s; promoting", base.order.name)
            base = base.promote()
        return Value.from_f64(_float_pow(base.n, float(power)))

    def neg(self) -> "Value":
        value = self.promote_to_signed()
        # The minimum of a signed order has no negation at that order.
        while value.order.is_integer:
            if value.order.fits(-value.n):
                return Value(value.order, -value.n)
            value = value.promote()
        return Value.from_f64(-value.n)

    # ------------------------------------------------------------------
    # bitwise (integer orders only)

    def _integer_pair(self, other: "Operand") -> tuple["Value", "Value"]:
        left, right = self.match_orders(other)
        if left.order is Order.FLOAT:
            raise ImproperlyFloatError()
        return left, right

    def bit_and(self, other: "Operand") -> "Value":
        left, right = self._integer_pair(other)
        return Value(left.order, left.n & right.n)

    def bit_or(self, other: "Operand") -> "Value":
        left, right = self._integer_pair(other)
        return Value(left.order, left.n | right.n)

    def bit_xor(self, other: "Operand") -> "Value":
        left, right = self._integer_pair(other)
        return Value(left.order, left.n ^ right.n)

    def bit_not(self) -> "Value":
        if self.order is Order.FLOAT:
            raise ImproperlyFloatError()
        return Value(self.order, _from_bits(self.order, ~self.n))

    def shl(self, other: "Operand") -> "Value":
        """Shift left within the order's width; bits shifted out are lost."""
        left, right = self._integer_pair(other)
        amount = right.as_u32()
        if amount >= left.order.width:
            raise CalcArithmeticError.overflow()
        return Value(left.order, _from_bits(left.order, left.n << amount))

    def shr(self, other: "Operand") -> "Value":
        """Shift right; arithmetic for signed orders, logical for unsigned ones."""
        left, right = self._integer_pair(other)
        amount = right.as_u32()
        if amount >= left.order.width:
            raise CalcArithmeticError.overflow()
        return Value(left.order, left.n >> amount)

    def rotate_left(self, other: "Operand") -> "Value":
        """Shift left, wrapping the bits around within the order's width."""
        left, right = self._integer_pair(other)
        return Value(left.order, _rotate_left_bits(left.order, left.n, right.as_u32()))

    def rotate_right(self, other: "Operand") -> "Value":
        """Shift right, wrapping the bits around within the order's width."""
        left, right = self._integer_pair(other)
        width = left.order.width
        return Value(left.order, _rotate_left_bits(left.order, left.n, width - right.as_u32() % width))

    # ------------------------------------------------------------------
    # rounding and magnitude

    def abs(self) -> "Value":
        value = self
        while value.order.is_integer:
            if value.order.fits(abs(value.n)):
                return Value(value.order, abs(value.n))
            value = value.promote()
        return Value.from_f64(abs(value.n))

    def _integral(self, fn: Callable[[np.float64], np.float64]) -> "Value":
        if self.order.is_integer:
            return self
        return Value.from_f64(_float_kernel(fn, self.n)).demote()

    def ceil(self) -> "Value":
        return self._integral(np.ceil)

    def floor(self) -> "Value":
        return self._integral(np.floor)

    def round(self) -> "Value":
        """Round to the nearest integer; halfway cases away from zero."""
        return self._integral(_round_half_away)

    # ------------------------------------------------------------------
    # float-only functions

    def _map_float(self, fn: Callable[[np.float64], np.float64]) -> "Value":
        return Value.from_f64(_float_kernel(fn, self.as_float()))

    def sin(self) -> "Value":
        return self._map_float(np.sin)

    def cos(self) -> "Value":
        return self._map_float(np.cos)

    def tan(self) -> "Value":
        return self._map_float(np.tan)

    def sinh(self) -> "Value":
        return self._map_float(np.sinh)

    def cosh(self) -> "Value":
        return self._map_float(np.cosh)

    def tanh(self) -> "Value":
        return self._map_float(np.tanh)

    def asin(self) -> "Value":
        return self._map_float(np.arcsin)

    def acos(self) -> "Value":
        return self._map_float(np.arccos)

    def atan(self) -> "Value":
        return self._map_float(np.arctan)

    def asinh(self) -> "Value":
        return self._map_float(np.arcsinh)

    def acosh(self) -> "Value":
        return self._map_float(np.arccosh)

    def atanh(self) -> "Value":
        return self._map_float(np.arctanh)

    def rad(self) -> "Value":
        """Convert degrees to radians."""
        return self._map_float(np.deg2rad)

    def deg(self) -> "Value":
        """Convert radians to degrees."""
        return self._map_float(np.rad2deg)

    def sqrt(self) -> "Value":
        return self._map_float(np.sqrt)

    def cbrt(self) -> "Value":
        return self._map_float(np.cbrt)

    def log(self) -> "Value":
        """Base-10 logarithm."""
        return self._map_float(np.log10)

    def lg(self) -> "Value":
        """Base-2 logarithm."""
        return self._map_float(np.log2)

    def ln(self) -> "Value":
        return self._map_float(np.log)

    def exp(self) -> "Value":
        return self._map_float(np.exp)

    # ------------------------------------------------------------------
    # comparison

    def cmp(self, other: "Operand") -> int:
        """Compare logical values: -1, 0 or 1."""
        left, right = self.match_orders(other)
        return _compare_same_order(left.order, left.n, right.n)

    def strict_eq(self, other: "Operand") -> bool:
        """Equal only when both the order and the value match, without promotion."""
        other = _coerce(other)
        return self.order is other.order and _compare_same_order(self.order, self.n, other.n) == 0

    def strict_cmp(self, other: "Operand") -> int:
        """Order first by :class:`Order`, then by value when the orders match."""
        other = _coerce(other)
        if self.order != other.order:
            return -1 if self.order < other.order else 1
        return _compare_same_order(self.order, self.n, other.n)

    def __eq__(self, other: object) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.cmp(other) == 0

    def __lt__(self, other: "Operand") -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.cmp(other) < 0

    def __le__(self, other: "Operand") -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.cmp(other) <= 0

    def __gt__(self, other: "Operand") -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.cmp(other) > 0

    def __ge__(self, other: "Operand") -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.cmp(other) >= 0

    def __hash__(self) -> int:
        # Loosely equal values always agree once promoted to float.
        x = self.as_float()
        if math.isnan(x):
            return hash((Order.FLOAT, "NaN"))
        return hash(x)

    # ------------------------------------------------------------------
    # python protocol

    def __add__(self, other: "Operand") -> "Value":
        return self.add(other)

    def __radd__(self, other: "Operand") -> "Value":
        return _coerce(other).add(self)

    def __sub__(self, other: "Operand") -> "Value":
        return self.sub(other)

    def __rsub__(self, other: "Operand") -> "Value":
        return _coerce(other).sub(self)

    def __mul__(self, other: "Operand") -> "Value":
        return self.mul(other)

    def __rmul__(self, other: "Operand") -> "Value":
        return _coerce(other).mul(self)

    def __truediv__(self, other: "Operand") -> "Value":
        return self.div(other)

    def __rtruediv__(self, other: "Operand") -> "Value":
        return _coerce(other).div(self)

    def __floordiv__(self, other: "Operand") -> "Value":
        return self.trunc_div(other)

    def __mod__(self, other: "Operand") -> "Value":
        return self.rem(other)

    def __pow__(self, other: "Operand") -> "Value":
        return self.pow(other)

    def __lshift__(self, other: "Operand") -> "Value":
        return self.shl(other)

    def __rshift__(self, other: "Operand") -> "Value":
        return self.shr(other)

    def __and__(self, other: "Operand") -> "Value":
        return self.bit_and(other)

    def __or__(self, other: "Operand") -> "Value":
        return self.bit_or(other)

    def __xor__(self, other: "Operand") -> "Value":
        return self.bit_xor(other)

    def __invert__(self) -> "Value":
        return self.bit_not()

    def __neg__(self) -> "Value":
        return self.neg()

    def __abs__(self) -> "Value":
        return self.abs()

    def __int__(self) -> int:
        return int(self.n)

    def __float__(self) -> float:
        return self.as_float()

    def __str__(self) -> str:
        if self.order is Order.FLOAT:
            return format_float(self.n)
        return str(self.n)

    def __repr__(self) -> str:
        return f"Value.{_CONSTRUCTOR_NAMES[self.order]}({self.n!r})"


Value.PI = Value.from_f64(math.pi)
Value.E = Value.from_f64(math.e)

Operand = Union[Value, int, float]


def _is_operand(obj: object) -> bool:
    if isinstance(obj, bool):
        return False
    if isinstance(obj, int):
        # Ints no integer order can hold are not comparable with a Value.
        return any(order.fits(obj) for order in _INTEGER_ORDERS)
    return isinstance(obj, (Value, float))


def _coerce(operand: Operand) -> Value:
    if isinstance(operand, Value):
        return operand
    if isinstance(operand, bool):
        raise TypeError("bool is not a numeric Value")
    if isinstance(operand, int):
        return Value.from_int(operand)
    if isinstance(operand, float):
        return Value.from_f64(operand)
    raise TypeError(f"cannot use {type(operand).__name__} as a Value")


def _promoting(
    left: Value,
    right: Value,
    int_op: Callable[[int, int], int],
    float_op: Callable[..., np.floating],
    name: str,
) -> Value:
    """Run ``int_op`` at the matched order, promoting one step per overflow."""
    while True:
        left, right = left.match_orders(right)
        if left.order is Order.FLOAT:
            return Value.from_f64(_float_kernel(float_op, left.n, right.n))
        result = int_op(left.n, right.n)
        if left.order.fits(result):
            return Value(left.order, result)
        _log.debug("%s overflowed %s; promoting", name, left.order.name)
        left = left.promote()


def match_orders(left: Operand, right: Operand) -> tuple[Value, Value]:
    return _coerce(left).match_orders(right)
