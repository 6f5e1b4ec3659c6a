"""
Rich console reporter.

Outputs colored outcome lines and a summary table using the Rich library.
"""

import threading as _threading
import typing as _typing

import rich.console as _rich_console
import rich.markup as _rich_markup
import rich.table as _rich_table

import verdandi.reporting.base as base
import verdandi.reporting.icons as icons
import verdandi.runner.outcomes as outcomes

if _typing.TYPE_CHECKING:
    import verdandi.core.elements as elements

_STYLES = {
    outcomes.OutcomeStatus.PASSED: "green",
    outcomes.OutcomeStatus.FAILED: "bold red",
    outcomes.OutcomeStatus.SKIPPED: "yellow",
}


class RichConsoleReporter(base.Reporter):
    """Rich console reporter with colors and a summary table."""

    def __init__(
        self,
        console: _rich_console.Console | None = None,
        *,
        show_passed: bool = True,
        force_terminal: bool | None = None,
        no_color: bool = False,
    ) -> None:
        """
        Initialize the Rich reporter.

        Args:
            console: Rich Console instance (created if not provided).
            show_passed: If False, only failures and skips are printed.
            force_terminal: Force terminal mode even if not detected.
            no_color: Disable all colors.
        """
        self._console = console or _rich_console.Console(
            force_terminal=force_terminal,
            no_color=no_color,
        )
        self._show_passed = show_passed
        self._lock = _threading.Lock()

    def run_started(self, group: "elements.Group") -> None:
        """Print a rule with the root group's name."""
        with self._lock:
            self._console.rule(_rich_markup.escape(group.description or "run"))

    def record(self, outcome: outcomes.Outcome) -> None:
        """Print one colored line for the outcome."""
        if outcome.status is outcomes.OutcomeStatus.PASSED and not self._show_passed:
            return
        style = _STYLES[outcome.status]
        line = (
            f"[{style}]{icons.status_icon(outcome.status)}[/{style}]"
            f"{_rich_markup.escape(outcome.description)}"
        )
        if outcome.kind is not outcomes.OutcomeKind.EXAMPLE:
            line += f" [dim]({outcome.kind.value})[/dim]"
        if outcome.message:
            line += f" [{style}]{_rich_markup.escape(outcome.message)}[/{style}]"
        with self._lock:
            self._console.print(line)

    def run_finished(self, report: outcomes.RunReport) -> None:
        """Print a summary table of the counts per status."""
        table = _rich_table.Table(show_header=True, header_style="bold")
        for status in outcomes.OutcomeStatus:
            table.add_column(status.value, style=_STYLES[status], justify="right")
        counts = report.counts()
        table.add_row(*(str(counts[status.value]) for status in outcomes.OutcomeStatus))
        with self._lock:
            self._console.print(table)
