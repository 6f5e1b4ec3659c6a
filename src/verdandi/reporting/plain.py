"""
Plain text reporter.

Writes one line per outcome with no formatting or colors. Works in any
terminal and with piped output.
"""

import sys as _sys
import threading as _threading
import typing as _typing

import verdandi.constants as constants
import verdandi.reporting.base as base
import verdandi.reporting.icons as icons
import verdandi.runner.outcomes as outcomes

if _typing.TYPE_CHECKING:
    import verdandi.core.elements as elements


def format_outcome(outcome: outcomes.Outcome) -> str:
    """Render an outcome as a single line (without newline)."""
    line = f"{icons.status_icon(outcome.status)}{outcome.description}"
    if outcome.kind is not outcomes.OutcomeKind.EXAMPLE:
        line += f" [{outcome.kind.value}]"
    message = outcome.message
    if len(message) > constants.DEFAULT_MESSAGE_TRUNCATE_LENGTH:
        message = message[: constants.DEFAULT_MESSAGE_TRUNCATE_LENGTH] + "... (truncated)"
    if message:
        line += f": {message}"
    return line


def format_counts(report: outcomes.RunReport) -> str:
    """Render the summary line, e.g. "3 passed, 1 failed, 0 skipped"."""
    return ", ".join(f"{count} {status}" for status, count in report.counts().items())


class PlainTextReporter(base.Reporter):
    """
    Simple plain text reporter.

    Outputs to stdout (or a custom stream). Lines are written under a lock
    so concurrent examples never interleave within a line.
    """

    def __init__(
        self,
        output: _typing.TextIO | None = None,
        *,
        show_passed: bool = True,
    ) -> None:
        """
        Initialize the plain text reporter.

        Args:
            output: Stream for output (default: sys.stdout).
            show_passed: If False, only failures and skips are printed.
        """
        self._output = output or _sys.stdout
        self._show_passed = show_passed
        self._lock = _threading.Lock()

    def _write(self, text: str) -> None:
        with self._lock:
            self._output.write(text + "\n")
            self._output.flush()

    def run_started(self, group: "elements.Group") -> None:
        """Print the root group's name."""
        if group.description:
            self._write(f"Running {group.description}")

    def record(self, outcome: outcomes.Outcome) -> None:
        """Print one line for the outcome."""
        if outcome.status is outcomes.OutcomeStatus.PASSED and not self._show_passed:
            return
        self._write(format_outcome(outcome))

    def run_finished(self, report: outcomes.RunReport) -> None:
        """Print the summary line."""
        self._write(format_counts(report))
