"""Dev-mode tracing of manager operations."""

from typing import Any

from rich.console import Console
from rich.markup import escape

from snapstack.exceptions import SnapstackError
from snapstack.models import Outcome

START_COLOR = "#8FB9A8"
LOG_COLOR = "#FEFAD4"
ERROR_COLOR = "#F1828D"


def _summarize(detail: object, limit: int = 120) -> str:
    text = repr(detail)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class Tracer:
    """
    Prints one trace block per operation to stderr while dev mode is on.

    A block opens with ``start``, may carry ``log`` lines and closes with ``end``,
    which flags failures. Nothing is printed while ``enabled`` is False.
    """

    enabled: bool
    console: Console
    _depth: int

    def __init__(self, enabled: bool = False, console: Console | None = None) -> None:
        self.enabled = enabled
        self.console = console if console is not None else Console(stderr=True, highlight=False)
        self._depth = 0

    def start(self, title: str, detail: object | None = None) -> None:
        if not self.enabled:
            return
        line = f"[{START_COLOR}]{escape(title)}[/]"
        if detail is not None:
            line += f" {escape(_summarize(detail))}"
        self._print(line)
        self._depth += 1

    def log(self, title: str, detail: Any = None) -> None:
        if not self.enabled:
            return
        line = f"[{LOG_COLOR}]{escape(title)}[/]"
        if detail is not None:
            line += f" {escape(_summarize(detail))}"
        self._print(line)

    def end(self, outcome: Outcome[Any]) -> None:
        if not self.enabled:
            return
        self._depth = max(self._depth - 1, 0)
        if outcome.error is None:
            self._print(f"[dim]ok[/dim] {escape(_summarize(outcome.value))}", indent=self._depth + 1)
        else:
            self._print(f"[black on {ERROR_COLOR}]^ Failed [/]")

    def abort(self, exc: BaseException) -> None:
        """Closes the open block when an operation raised instead of returning an outcome."""
        if not self.enabled:
            return
        self._depth = max(self._depth - 1, 0)
        self._print(f"[black on {ERROR_COLOR}]^ Raised {escape(type(exc).__name__)} [/]")

    def error(self, error: SnapstackError) -> None:
        """Default error sink, used when no ``on_error`` handler was supplied."""
        if not self.enabled:
            return
        self._print(f"[{ERROR_COLOR}]{escape(error.message)}[/]")

    def _print(self, markup: str, indent: int | None = None) -> None:
        depth = self._depth if indent is None else indent
        self.console.print("  " * depth + markup)
