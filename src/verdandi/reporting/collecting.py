"""In-memory reporter, mainly for tests and harness adapters."""

import threading as _threading
import typing as _typing

import verdandi.reporting.base as base

if _typing.TYPE_CHECKING:
    import verdandi.core.elements as elements
    import verdandi.runner.outcomes as outcomes


class CollectingReporter(base.Reporter):
    """Keeps every outcome and lifecycle call in memory."""

    def __init__(self) -> None:
        self._lock = _threading.Lock()
        self.outcomes: list["outcomes.Outcome"] = []
        self.started: list["elements.Group"] = []
        self.finished: list["outcomes.RunReport"] = []

    def run_started(self, group: "elements.Group") -> None:
        with self._lock:
            self.started.append(group)

    def record(self, outcome: "outcomes.Outcome") -> None:
        with self._lock:
            self.outcomes.append(outcome)

    def run_finished(self, report: "outcomes.RunReport") -> None:
        with self._lock:
            self.finished.append(report)

    @property
    def descriptions(self) -> list[str]:
        """Descriptions of the recorded outcomes, in order."""
        with self._lock:
            return [outcome.description for outcome in self.outcomes]
