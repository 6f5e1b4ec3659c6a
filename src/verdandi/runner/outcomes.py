"""
Run outcomes.

Every executed example, every failing hook and every skipped group
produces one Outcome. A RunReport collects them for a whole run and is
returned by the runners.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import threading as _threading
import typing as _typing

import verdandi.constants as constants


class OutcomeStatus(_enum.Enum):
    """How an element ended."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class OutcomeKind(_enum.Enum):
    """What kind of element an outcome is about."""

    EXAMPLE = "example"
    HOOK = "hook"
    GROUP = "group"


@_dataclasses.dataclass(frozen=True)
class Outcome:
    """
    Result of executing one element.

    Attributes:
        description: Full description of the element, e.g. "Root, Mid, Leaf".
        status: Passed, failed or skipped.
        kind: Example, hook or group.
        message: Error message or skip reason (empty when passed).
        error: The exception for failures, None otherwise.
        duration: Wall-clock seconds, 0.0 when not measured.
    """

    description: str
    status: OutcomeStatus
    kind: OutcomeKind = OutcomeKind.EXAMPLE
    message: str = ""
    error: BaseException | None = None
    duration: float = 0.0

    @property
    def summary(self) -> str:
        """Description followed by the message, if any."""
        if not self.message:
            return self.description
        return f"{self.description} {self.message}"

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to a JSON-serializable dict."""
        message = self.message
        if len(message) > constants.DEFAULT_MESSAGE_TRUNCATE_LENGTH:
            message = message[: constants.DEFAULT_MESSAGE_TRUNCATE_LENGTH] + "..."
        return {
            "description": self.description,
            "status": self.status.value,
            "kind": self.kind.value,
            "message": message,
            "error_type": type(self.error).__name__ if self.error is not None else None,
            "duration": round(self.duration, 6),
        }


class RunReport:
    """
    Ordered, thread-safe collection of outcomes for one run.

    Outcomes from concurrent siblings are appended in completion order.
    """

    def __init__(self) -> None:
        self._lock = _threading.Lock()
        self._outcomes: list[Outcome] = []

    def add(self, outcome: Outcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)

    @property
    def outcomes(self) -> list[Outcome]:
        with self._lock:
            return list(self._outcomes)

    def _with_status(self, status: OutcomeStatus) -> list[Outcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def passed(self) -> list[Outcome]:
        return self._with_status(OutcomeStatus.PASSED)

    @property
    def failed(self) -> list[Outcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def skipped(self) -> list[Outcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        """True if nothing failed."""
        return not self.failed

    def counts(self) -> dict[str, int]:
        """Number of outcomes per status value."""
        result = {status.value: 0 for status in OutcomeStatus}
        for outcome in self.outcomes:
            result[outcome.status.value] += 1
        return result

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "ok": self.ok,
            "counts": self.counts(),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self) -> _typing.Iterator[Outcome]:
        return iter(self.outcomes)
