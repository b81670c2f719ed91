"""Output format annotations and rendering of finished values.

An annotation is a compact string such as ``08x_4`` read as::

    [0][width][base][separator][group size]

``0`` pads with zeros instead of spaces, ``width`` is the minimum width,
``base`` is one of ``b o d x``, ``separator`` is one of ``n _ , s`` (none,
underscore, comma, space) and ``group size`` is the number of digits per
group (default 3; 0 disables grouping).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .errors import FormatError
from .values import Order, Value


class OutputBase(int, Enum):
    BINARY = 2
    OCTAL = 8
    DECIMAL = 10
    HEX = 16


class Separator(str, Enum):
    NONE = ""
    UNDERSCORE = "_"
    COMMA = ","
    SPACE = " "


_BASE_CODES: Final[dict[str, OutputBase]] = {
    "b": OutputBase.BINARY,
    "o": OutputBase.OCTAL,
    "d": OutputBase.DECIMAL,
    "x": OutputBase.HEX,
}
_SEPARATOR_CODES: Final[dict[str, Separator]] = {
    "n": Separator.NONE,
    "_": Separator.UNDERSCORE,
    ",": Separator.COMMA,
    "s": Separator.SPACE,
}
_BASE_FORMATS: Final[dict[OutputBase, str]] = {
    OutputBase.BINARY: "b",
    OutputBase.OCTAL: "o",
    OutputBase.DECIMAL: "d",
    OutputBase.HEX: "x",
}

_OUTPUT_FORMAT_RE: Final = re.compile(
    r"(?P<zero_pad>0)?(?P<pad_width>[1-9][0-9]*)?(?P<base>[bodx])?(?P<separator>[n_,s])?(?P<group_size>[0-9]+)?"
)


@dataclass(frozen=True)
class OutputFormat:
    zero_pad: bool = False
    pad_width: int = 0
    base: OutputBase = OutputBase.DECIMAL
    separator: Separator = Separator.NONE
    group_size: int = 3

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """Parse an annotation; the whole string must match."""
        match = _OUTPUT_FORMAT_RE.fullmatch(text.strip())
        if match is None:
            raise FormatError(f"invalid output format {text!r}")
        fields = match.groupdict()
        return cls(
            zero_pad=fields["zero_pad"] is not None,
            pad_width=int(fields["pad_width"] or 0),
            base=_BASE_CODES[fields["base"] or "d"],
            separator=_SEPARATOR_CODES[fields["separator"] or "n"],
            group_size=3 if fields["group_size"] is None else int(fields["group_size"]),
        )


DEFAULT_FORMAT: Final[OutputFormat] = OutputFormat()


def _group(digits: str, separator: Separator, size: int) -> str:
    if separator is Separator.NONE or size == 0 or len(digits) <= size:
        return digits
    head = len(digits) % size or size
    groups = [digits[:head]]
    groups.extend(digits[i : i + size] for i in range(head, len(digits), size))
    return separator.value.join(groups)


def render(value: Value, fmt: OutputFormat = DEFAULT_FORMAT) -> str:
    """Render ``value`` according to ``fmt``.

    Integers render their magnitude in the requested base with a leading ``-``
    when negative and no base prefix. Floats render in decimal only.
    """
    if value.order is Order.FLOAT:
        if fmt.base is not OutputBase.DECIMAL:
            raise FormatError(f"cannot render float {value} in base {fmt.base.value}")
        text = str(value)
        if not math.isfinite(value.n):
            return text.rjust(fmt.pad_width)
        sign = "-" if text.startswith("-") else ""
        integer, dot, fraction = text.removeprefix("-").partition(".")
    else:
        sign = "-" if value.n < 0 else ""
        integer = format(abs(value.n), _BASE_FORMATS[fmt.base])
        dot = fraction = ""

    if fmt.zero_pad:
        # The sign and any fractional part count toward the width.
        integer = integer.rjust(fmt.pad_width - len(sign) - len(dot) - len(fraction), "0")

    text = f"{sign}{_group(integer, fmt.separator, fmt.group_size)}{dot}{fraction}"
    return text.rjust(fmt.pad_width)
