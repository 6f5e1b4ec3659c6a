"""
Base class for outcome reporters.

A reporter is the adapter between the runner and whatever presents
results: a console, a test harness, a collector used in tests. All
reporters implement the same interface, so runs can be observed without
depending on a particular output.

Reporters may be called from several threads at once when a concurrent
group runs in the blocking runner.
"""

import abc as _abc
import typing as _typing

if _typing.TYPE_CHECKING:
    import verdandi.core.elements as elements
    import verdandi.runner.outcomes as outcomes


class Reporter(_abc.ABC):
    """Abstract base class for all reporters."""

    def run_started(self, group: "elements.Group") -> None:  # noqa: B027
        """
        Called once before the root group starts.

        Note: Not abstract because most reporters don't need this.
        """

    @_abc.abstractmethod
    def record(self, outcome: "outcomes.Outcome") -> None:
        """Called for every outcome as soon as it is known."""
        ...

    def run_finished(self, report: "outcomes.RunReport") -> None:  # noqa: B027
        """
        Called once after the root group finished, with the full report.

        Not called when the run aborted with an error.
        """
