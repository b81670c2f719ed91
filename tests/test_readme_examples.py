from __future__ import annotations

import math
import unittest

from freecalc import Context, evaluate
from freecalc.errors import CalcArithmeticError, CalcParseError, FormatError, HistoryOutOfBoundsError, NestingTooDeepError
from freecalc.render import OutputFormat
from freecalc.values import Value


class ExpressionModeExamplesTests(unittest.TestCase):
    def test_nested_groups(self) -> None:
        result = evaluate("1/(2+(3*(4-5)))")
        self.assertEqual(result, -1)
        self.assertEqual(str(result), "-1")

    def test_round_of_division(self) -> None:
        result = evaluate("round(12345 / 543)")
        self.assertTrue(result.strict_eq(Value.from_u64(23)))

    def test_module_level_evaluate_starts_fresh(self) -> None:
        self.assertEqual(evaluate("2 ** 10"), 1024)
        with self.assertRaises(HistoryOutOfBoundsError):
            evaluate("@")


class ShellModeExamplesTests(unittest.TestCase):
    def test_session(self) -> None:
        ctx = Context()
        session = [
            ("1 + 1", "2"),
            ("3*(5/(3-4))", "-15"),
            ("3*pi**2", "29.608813203268074"),
            ("@+1", "30.608813203268074"),
            ("@@@*2", "-30"),
            ("ln(-1)", "NaN"),
        ]
        for index, (line, expected) in enumerate(session):
            with self.subTest(line=line):
                self.assertEqual(len(ctx), index)
                self.assertEqual(ctx.evaluate_annotated(line), expected)
        self.assertEqual(len(ctx.history), len(session))
        self.assertTrue(math.isnan(ctx.history[-1].n))

    def test_history_is_read_only_view(self) -> None:
        ctx = Context()
        ctx.evaluate("1")
        self.assertIsInstance(ctx.history, tuple)
        self.assertEqual(ctx.history, (Value.from_u64(1),))

    def test_absolute_references(self) -> None:
        ctx = Context()
        ctx.evaluate("10")
        ctx.evaluate("20")
        self.assertEqual(ctx.evaluate("@0 + @1"), 30)
        self.assertEqual(ctx.evaluate("@2 - @0"), 20)


class FailedEvaluationLeavesHistoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = Context()
        self.ctx.evaluate("5285")

    def _assert_unchanged(self) -> None:
        self.assertEqual(self.ctx.history, (Value.from_u64(5285),))

    def test_parse_error(self) -> None:
        with self.assertRaises(CalcParseError) as ctx:
            self.ctx.evaluate("1 +")
        self.assertEqual(ctx.exception.message, "unexpected EOF")
        self.assertEqual(ctx.exception.start, 3)
        self._assert_unchanged()

    def test_evaluation_error(self) -> None:
        with self.assertRaises(CalcArithmeticError):
            self.ctx.evaluate("@ / 0")
        with self.assertRaises(HistoryOutOfBoundsError):
            self.ctx.evaluate("@@")
        self._assert_unchanged()

    def test_format_errors(self) -> None:
        with self.assertRaises(FormatError):
            self.ctx.evaluate_annotated("1:zz")
        with self.assertRaises(FormatError):
            self.ctx.evaluate_annotated("1.5:x")
        self._assert_unchanged()

    def test_too_deep_to_evaluate(self) -> None:
        with self.assertRaises(NestingTooDeepError) as ctx:
            self.ctx.evaluate(" + ".join(["1"] * 5000))
        self.assertEqual(str(ctx.exception), "expression nested too deeply")
        self._assert_unchanged()

    def test_too_deep_to_parse(self) -> None:
        with self.assertRaises(CalcParseError) as ctx:
            self.ctx.evaluate("-" * 3000 + "1")
        self.assertEqual(ctx.exception.message, "expression nested too deeply")
        self._assert_unchanged()


class AnnotatedEvaluationTests(unittest.TestCase):
    def test_annotation_selects_format_and_records_bare_value(self) -> None:
        ctx = Context()
        self.assertEqual(ctx.evaluate_annotated("255:x"), "ff")
        self.assertTrue(ctx.history[-1].strict_eq(Value.from_u64(255)))
        self.assertEqual(ctx.evaluate_annotated("@ * 4:08b"), "1111111100")
        self.assertEqual(ctx.evaluate_annotated("1000000:,"), "1,000,000")
        self.assertEqual(ctx.evaluate_annotated("1000000"), "1000000")

    def test_default_format(self) -> None:
        ctx = Context(default_format=OutputFormat.parse("_"))
        self.assertEqual(ctx.evaluate_annotated("1234567"), "1_234_567")
        self.assertEqual(ctx.evaluate_annotated("1234567:"), "1234567")


if __name__ == "__main__":
    unittest.main()
