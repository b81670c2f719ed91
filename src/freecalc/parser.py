"""Parser for freehand arithmetic expressions."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .ast import (
    Constant,
    Expr,
    Func,
    Function,
    Group,
    HistoryIndexKind,
    HistoryRef,
    Infix,
    InfixOperator,
    Literal,
    LiteralBase,
    NamedConstant,
    Prefix,
    PrefixOperator,
)
from .config import PARSE_CACHE_MAX
from .lexer import LexError, Token, tokenize

_CONSTANT_NAMES = {
    "e": Constant.E,
    "pi": Constant.PI,
    "π": Constant.PI,
}
_FUNCTION_NAMES = {function.value: function for function in Function}

_LITERAL_PREFIXES = {
    "0b": LiteralBase.BINARY,
    "0o": LiteralBase.OCTAL,
    "0d": LiteralBase.DECIMAL,
    "0x": LiteralBase.HEX,
}

_PREFIX_OPS = {op.value: op for op in PrefixOperator}
_INFIX_OPS = {op.value: op for op in InfixOperator}

# (left, right) binding powers; a higher right power makes the operator left-associative.
_BINDING_POWERS: dict[InfixOperator, tuple[int, int]] = {
    InfixOperator.ADD: (10, 11),
    InfixOperator.SUB: (10, 11),
    InfixOperator.BIT_OR: (20, 21),
    InfixOperator.BIT_XOR: (30, 31),
    InfixOperator.BIT_AND: (40, 41),
    InfixOperator.LSHIFT: (50, 51),
    InfixOperator.RSHIFT: (50, 51),
    InfixOperator.ROTATE_L: (50, 51),
    InfixOperator.ROTATE_R: (50, 51),
    InfixOperator.MUL: (60, 61),
    InfixOperator.DIV: (60, 61),
    InfixOperator.TRUNC_DIV: (60, 61),
    InfixOperator.REM: (60, 61),
    InfixOperator.POW: (71, 70),
}

_ATOM_STARTS = ("NUMBER", "HISTORY", "NAME", "LPAREN", "OP(-)", "OP(!)")


class ParseError(SyntaxError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


@dataclass
class _Parser:
    tokens: list[Token]
    index: int = 0

    def parse_expression_only(self) -> Expr:
        expr = self._parse_expression(0)
        tok = self._peek()
        if tok.kind != "EOF":
            self._error(tok, message="extra token", expected=("EOF",))
        return expr

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _expect(self, kind: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            self._error(tok, expected=(kind,))
        return self._advance()

    def _error(self, tok: Token | None = None, *, message: str | None = None, expected: tuple[str, ...] = ()) -> None:
        token = tok if tok is not None else self._peek()
        if message is not None:
            detail = message
        elif token.kind == "EOF":
            detail = "unexpected EOF"
        else:
            detail = "unexpected token"
        if token.kind == "EOF":
            found = "EOF"
        else:
            found = f"{token.kind}({token.text})"
        raise ParseError(detail, token.pos, token.end, expected=tuple(dict.fromkeys(expected)), found=found)

    def _match(self, kind: str) -> bool:
        if self._peek().kind == kind:
            self._advance()
            return True
        return False

    def _parse_expression(self, min_bp: int) -> Expr:
        left = self._parse_prefix()

        while True:
            tok = self._peek()
            if tok.kind != "OP" or tok.text not in _INFIX_OPS:
                break
            op = _INFIX_OPS[tok.text]
            lbp, rbp = _BINDING_POWERS[op]
            if lbp < min_bp:
                break
            self._advance()
            right = self._parse_expression(rbp)
            left = Infix(left=left, op=op, right=right)

        return left

    def _parse_prefix(self) -> Expr:
        tok = self._peek()
        if tok.kind == "OP" and tok.text in _PREFIX_OPS:
            self._advance()
            return Prefix(op=_PREFIX_OPS[tok.text], expr=self._parse_prefix())
        return self._parse_atom()

    def _parse_atom(self) -> Expr:
        tok = self._peek()

        if tok.kind == "NUMBER":
            self._advance()
            base = _LITERAL_PREFIXES.get(tok.text[:2], LiteralBase.DECIMAL)
            return Literal(text=tok.text, base=base)

        if tok.kind == "HISTORY":
            self._advance()
            if tok.text[1:].isdigit():
                return HistoryRef(kind=HistoryIndexKind.ABSOLUTE, index=int(tok.text[1:]))
            return HistoryRef(kind=HistoryIndexKind.RELATIVE, index=len(tok.text))

        if tok.kind == "NAME":
            self._advance()
            constant = _CONSTANT_NAMES.get(tok.text)
            if constant is not None:
                return NamedConstant(constant=constant)
            function = _FUNCTION_NAMES.get(tok.text)
            if function is None:
                self._error(tok, message=f"unknown name {tok.text!r}")
            self._expect("LPAREN")
            argument = self._parse_expression(0)
            self._expect("RPAREN")
            return Func(function=function, expr=argument)

        if self._match("LPAREN"):
            inner = self._parse_expression(0)
            self._expect("RPAREN")
            return Group(expr=inner)

        self._error(tok, expected=_ATOM_STARTS)
        raise AssertionError("unreachable")


def _tokenize(source: str) -> list[Token]:
    try:
        return tokenize(source)
    except LexError as err:
        raise ParseError(err.message, err.pos, err.end, found=repr(source[err.pos : err.end])) from err


@lru_cache(maxsize=PARSE_CACHE_MAX)
def parse(source: str) -> Expr:
    """Parse one expression; the returned tree is immutable and shared between calls."""
    parser = _Parser(tokens=_tokenize(source))
    try:
        return parser.parse_expression_only()
    except RecursionError:
        tok = parser._peek()
        raise ParseError("expression nested too deeply", tok.pos, tok.end) from None
