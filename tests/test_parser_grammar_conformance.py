from __future__ import annotations

import unittest

from freecalc.ast import (
    Constant,
    Func,
    Function,
    Group,
    HistoryIndexKind,
    HistoryRef,
    Infix,
    InfixOperator,
    Literal,
    NamedConstant,
    Prefix,
    PrefixOperator,
)
from freecalc.errors import CalcParseError
from freecalc.parser import ParseError, parse


def _lit(text: str) -> Literal:
    return Literal(text=text)


class ParserGrammarConformanceTests(unittest.TestCase):
    def test_multiplication_binds_tighter_than_addition(self) -> None:
        self.assertEqual(
            parse("1 + 2 * 3"),
            Infix(_lit("1"), InfixOperator.ADD, Infix(_lit("2"), InfixOperator.MUL, _lit("3"))),
        )

    def test_subtraction_is_left_associative(self) -> None:
        self.assertEqual(
            parse("8 - 4 - 2"),
            Infix(Infix(_lit("8"), InfixOperator.SUB, _lit("4")), InfixOperator.SUB, _lit("2")),
        )

    def test_pow_is_right_associative(self) -> None:
        self.assertEqual(
            parse("2 ** 3 ** 2"),
            Infix(_lit("2"), InfixOperator.POW, Infix(_lit("3"), InfixOperator.POW, _lit("2"))),
        )

    def test_unary_operators_bind_tightest(self) -> None:
        self.assertEqual(
            parse("-2 ** 2"),
            Infix(Prefix(PrefixOperator.NEGATION, _lit("2")), InfixOperator.POW, _lit("2")),
        )
        self.assertEqual(
            parse("!-1"),
            Prefix(PrefixOperator.NOT, Prefix(PrefixOperator.NEGATION, _lit("1"))),
        )

    def test_bitwise_precedence_ladder(self) -> None:
        self.assertEqual(
            parse("1 | 2 ^ 3 & 4"),
            Infix(
                _lit("1"),
                InfixOperator.BIT_OR,
                Infix(_lit("2"), InfixOperator.BIT_XOR, Infix(_lit("3"), InfixOperator.BIT_AND, _lit("4"))),
            ),
        )

    def test_shifts_sit_between_bit_and_and_multiplication(self) -> None:
        self.assertEqual(
            parse("1 & 2 << 3 * 4"),
            Infix(
                _lit("1"),
                InfixOperator.BIT_AND,
                Infix(_lit("2"), InfixOperator.LSHIFT, Infix(_lit("3"), InfixOperator.MUL, _lit("4"))),
            ),
        )
        self.assertEqual(
            parse("1 + 2 <<< 3"),
            Infix(_lit("1"), InfixOperator.ADD, Infix(_lit("2"), InfixOperator.ROTATE_L, _lit("3"))),
        )

    def test_groups_are_kept(self) -> None:
        self.assertEqual(parse("(1)"), Group(_lit("1")))
        self.assertEqual(
            parse("(1 + 2) * 3"),
            Infix(Group(Infix(_lit("1"), InfixOperator.ADD, _lit("2"))), InfixOperator.MUL, _lit("3")),
        )

    def test_function_calls_and_constants(self) -> None:
        self.assertEqual(parse("sqrt(4)"), Func(Function.SQRT, _lit("4")))
        self.assertEqual(parse("ln(e)"), Func(Function.LN, NamedConstant(Constant.E)))
        self.assertEqual(parse("pi"), NamedConstant(Constant.PI))
        self.assertEqual(parse("π"), NamedConstant(Constant.PI))

    def test_history_references(self) -> None:
        self.assertEqual(parse("@"), HistoryRef(HistoryIndexKind.RELATIVE, 1))
        self.assertEqual(parse("@@@"), HistoryRef(HistoryIndexKind.RELATIVE, 3))
        self.assertEqual(parse("@0"), HistoryRef(HistoryIndexKind.ABSOLUTE, 0))
        self.assertEqual(
            parse("@ + @2"),
            Infix(HistoryRef(HistoryIndexKind.RELATIVE, 1), InfixOperator.ADD, HistoryRef(HistoryIndexKind.ABSOLUTE, 2)),
        )

    def test_parse_results_are_cached(self) -> None:
        self.assertIs(parse("1 + 1"), parse("1 + 1"))

    def test_unexpected_eof(self) -> None:
        for source, position in (("1 +", 3), ("(1", 2), ("sqrt(", 5)):
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    parse(source)
                self.assertEqual(ctx.exception.message, "unexpected EOF")
                self.assertEqual((ctx.exception.start, ctx.exception.end), (position, position))
                self.assertEqual(ctx.exception.found, "EOF")

    def test_unexpected_token(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("* 2")
        self.assertEqual(ctx.exception.message, "unexpected token")
        self.assertEqual((ctx.exception.start, ctx.exception.end), (0, 1))
        self.assertEqual(ctx.exception.found, "OP(*)")

    def test_extra_token(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("1 22")
        self.assertEqual(ctx.exception.message, "extra token")
        self.assertEqual((ctx.exception.start, ctx.exception.end), (2, 4))
        self.assertEqual(str(ctx.exception), "extra token at span [2, 4); expected EOF; found NUMBER(22)")

    def test_unknown_name_and_missing_call_parens(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("foo(1)")
        self.assertEqual(ctx.exception.message, "unknown name 'foo'")

        with self.assertRaises(ParseError) as ctx:
            parse("sqrt 4")
        self.assertEqual(ctx.exception.message, "unexpected token")
        self.assertEqual(ctx.exception.expected, ("LPAREN",))

    def test_caret_diagnostic(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("1 22")
        err = CalcParseError.from_parse_error(ctx.exception)
        self.assertEqual(err.diagnostic("1 22"), "extra token\n1 22\n  ^^")
        self.assertEqual(
            CalcParseError("unexpected EOF", 3, 3).diagnostic("1 +"),
            "unexpected EOF\n1 +\n   ^",
        )

    def test_deep_nesting_is_a_parse_error(self) -> None:
        for source in ("(" * 3000 + "1" + ")" * 3000, "-" * 3000 + "1", "2" + " ** 2" * 3000):
            with self.subTest(source=source[:10]):
                with self.assertRaises(ParseError) as ctx:
                    parse(source)
                self.assertEqual(ctx.exception.message, "expression nested too deeply")
                self.assertLess(ctx.exception.start, len(source))


if __name__ == "__main__":
    unittest.main()
