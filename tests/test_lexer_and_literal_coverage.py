from __future__ import annotations

import unittest

from freecalc.ast import Literal, LiteralBase
from freecalc.lexer import LexError, tokenize
from freecalc.parser import ParseError, parse


class LexerAndLiteralCoverageTests(unittest.TestCase):
    def _tokens(self, source: str, *, with_spans: bool = False):
        if with_spans:
            return [(tok.kind, tok.text, tok.pos, tok.end) for tok in tokenize(source) if tok.kind != "EOF"]
        return [(tok.kind, tok.text) for tok in tokenize(source) if tok.kind != "EOF"]

    def test_token_golden_operators_and_spans(self) -> None:
        tokens = self._tokens("(1+0x1f)**2", with_spans=True)
        self.assertEqual(
            tokens,
            [
                ("LPAREN", "(", 0, 1),
                ("NUMBER", "1", 1, 2),
                ("OP", "+", 2, 3),
                ("NUMBER", "0x1f", 3, 7),
                ("RPAREN", ")", 7, 8),
                ("OP", "**", 8, 10),
                ("NUMBER", "2", 10, 11),
            ],
        )

    def test_longest_operator_spelling_wins(self) -> None:
        self.assertEqual(
            self._tokens("a <<< b >>> c << d >> e // f"),
            [
                ("NAME", "a"),
                ("OP", "<<<"),
                ("NAME", "b"),
                ("OP", ">>>"),
                ("NAME", "c"),
                ("OP", "<<"),
                ("NAME", "d"),
                ("OP", ">>"),
                ("NAME", "e"),
                ("OP", "//"),
                ("NAME", "f"),
            ],
        )

    def test_history_tokens(self) -> None:
        self.assertEqual(
            self._tokens("@ @@@ @12", with_spans=True),
            [
                ("HISTORY", "@", 0, 1),
                ("HISTORY", "@@@", 2, 5),
                ("HISTORY", "@12", 6, 9),
            ],
        )

    def test_number_forms(self) -> None:
        self.assertEqual(
            self._tokens("1_000 0b1010 0o17 0d99 .5 2.5e-3 7."),
            [
                ("NUMBER", "1_000"),
                ("NUMBER", "0b1010"),
                ("NUMBER", "0o17"),
                ("NUMBER", "0d99"),
                ("NUMBER", ".5"),
                ("NUMBER", "2.5e-3"),
                ("NUMBER", "7."),
            ],
        )

    def test_pi_symbol_is_a_name(self) -> None:
        self.assertEqual(self._tokens("2*π"), [("NUMBER", "2"), ("OP", "*"), ("NAME", "π")])

    def test_eof_token_sits_at_end_of_source(self) -> None:
        eof = tokenize("1 + 2  ")[-1]
        self.assertEqual((eof.kind, eof.pos, eof.end), ("EOF", 7, 7))

    def test_invalid_character_reports_position(self) -> None:
        with self.assertRaises(LexError) as ctx:
            tokenize("1 $ 2")
        self.assertEqual(ctx.exception.pos, 2)
        self.assertEqual(ctx.exception.end, 3)
        self.assertIn("at index 2", str(ctx.exception))

    def test_literal_base_follows_prefix(self) -> None:
        self.assertEqual(parse("0x1F"), Literal(text="0x1F", base=LiteralBase.HEX))
        self.assertEqual(parse("0b_1"), Literal(text="0b_1", base=LiteralBase.BINARY))
        self.assertEqual(parse("0o7"), Literal(text="0o7", base=LiteralBase.OCTAL))
        self.assertEqual(parse("0d7"), Literal(text="0d7", base=LiteralBase.DECIMAL))
        self.assertEqual(parse("1_5.25"), Literal(text="1_5.25", base=LiteralBase.DECIMAL))

    def test_base_prefixes_are_lowercase_only(self) -> None:
        self.assertEqual([tok.kind for tok in tokenize("0XFF")], ["NUMBER", "NAME", "EOF"])
        with self.assertRaises(ParseError) as ctx:
            parse("0XFF")
        self.assertEqual(ctx.exception.message, "extra token")
        self.assertEqual(ctx.exception.found, "NAME(XFF)")

    def test_invalid_token_becomes_parse_error(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("1 $")
        self.assertEqual(ctx.exception.message, "invalid token")
        self.assertEqual((ctx.exception.start, ctx.exception.end), (2, 3))


if __name__ == "__main__":
    unittest.main()
