"""Tokenization for freehand arithmetic expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


class LexError(SyntaxError):
    """A character sequence that starts no token."""

    def __init__(self, message: str, pos: int, end: int) -> None:
        super().__init__(f"{message} at index {pos}")
        self.message = message
        self.pos = pos
        self.end = end


_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
}

# Longest spelling first so that "<<<" is never read as "<<" followed by "<".
_OPERATORS = ("<<<", ">>>", "**", "//", "<<", ">>", "+", "-", "*", "/", "%", "&", "|", "^", "!")

_NUMBER_RE = re.compile(
    r"""
    (?:
        0x[0-9a-fA-F_]*[0-9a-fA-F][0-9a-fA-F_]*     # hex
      | 0o[0-7_]*[0-7][0-7_]*                        # octal
      | 0b[01_]*[01][01_]*                           # binary
      | 0d[0-9_]*[0-9][0-9_]*                        # explicit decimal
      | (?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)
        (?:[eE][+\-]?[0-9]+)?                        # decimal, maybe fractional
    )
    """,
    re.VERBOSE,
)

_ABSOLUTE_HISTORY_RE = re.compile(r"@([0-9]+)")


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def _scan_while(source: str, start: int, predicate) -> tuple[str, int]:
    i = start
    while i < len(source) and predicate(source[i]):
        i += 1
    return source[start:i], i


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into tokens, ending with an ``EOF`` token.

    Kinds: ``NUMBER`` (text as written, prefix and underscores included),
    ``HISTORY`` (``@``, ``@@``, ... or ``@N``), ``OP``, ``NAME``, ``LPAREN``,
    ``RPAREN`` and ``EOF``.
    """
    tokens: list[Token] = []
    i = 0
    while i < len(source):
        ch = source[i]

        if ch.isspace():
            i += 1
            continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i += 1
            continue

        if ch == "@":
            absolute = _ABSOLUTE_HISTORY_RE.match(source, i)
            if absolute is not None:
                tokens.append(Token("HISTORY", absolute.group(0), i, absolute.end()))
                i = absolute.end()
                continue
            text, end = _scan_while(source, i, lambda c: c == "@")
            tokens.append(Token("HISTORY", text, i, end))
            i = end
            continue

        if ch.isdigit() or (ch == "." and i + 1 < len(source) and source[i + 1].isdigit()):
            number = _NUMBER_RE.match(source, i)
            if number is None:
                raise LexError("invalid token", i, i + 1)
            tokens.append(Token("NUMBER", number.group(0), i, number.end()))
            i = number.end()
            continue

        op = next((spelling for spelling in _OPERATORS if source.startswith(spelling, i)), None)
        if op is not None:
            tokens.append(Token("OP", op, i, i + len(op)))
            i += len(op)
            continue

        if _is_ident_start(ch):
            ident, end = _scan_while(source, i, _is_ident_continue)
            tokens.append(Token("NAME", ident, i, end))
            i = end
            continue

        raise LexError("invalid token", i, i + 1)

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
