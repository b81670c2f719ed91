"""Evaluation context: owns the result history and ties parsing, evaluation and rendering together."""

from __future__ import annotations

from .errors import CalcParseError, NestingTooDeepError
from .evaluator import evaluate_expr
from .logging_config import get_logger
from .parser import ParseError, parse
from .render import DEFAULT_FORMAT, OutputFormat, render
from .values import Value

_log = get_logger("context")

_ANNOTATION_MARKER = ":"


class Context:
    """Append-only history of results, addressed by ``@`` references.

    Only successful evaluations are recorded; a parse, format or evaluation
    error leaves the history exactly as it was.
    """

    def __init__(self, default_format: OutputFormat = DEFAULT_FORMAT) -> None:
        self._history: list[Value] = []
        self.default_format = default_format

    @property
    def history(self) -> tuple[Value, ...]:
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def _compute(self, text: str) -> Value:
        try:
            expr = parse(text)
        except ParseError as err:
            raise CalcParseError.from_parse_error(err) from err
        try:
            return evaluate_expr(expr, self._history)
        except RecursionError:
            raise NestingTooDeepError() from None

    def _record(self, text: str, result: Value) -> None:
        self._history.append(result)
        _log.debug("[%d] %r -> %r", len(self._history) - 1, text, result)

    def evaluate(self, text: str) -> Value:
        """Parse and evaluate ``text``, then record and return the result."""
        result = self._compute(text)
        self._record(text, result)
        return result

    def evaluate_annotated(self, text: str) -> str:
        """Evaluate ``text`` and render the result.

        A trailing ``:fmt`` annotation selects the output format for this line;
        the bare value is what gets recorded in history.
        """
        expression, marker, annotation = text.partition(_ANNOTATION_MARKER)
        fmt = OutputFormat.parse(annotation) if marker else self.default_format
        result = self._compute(expression)
        # Render before recording so an unrenderable result never reaches history.
        rendered = render(result, fmt)
        self._record(expression, result)
        return rendered


def evaluate(text: str) -> Value:
    """Evaluate a single expression in a fresh context."""
    return Context().evaluate(text)
