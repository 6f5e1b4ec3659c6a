"""
Run context and the ambient "current run" binding.

A RunContext tracks the stack of elements currently executing so that
the full description of the running element is available to callbacks
and reporters. The active context is bound to a contextvars.ContextVar,
which asyncio tasks inherit and which the blocking runner copies into
its worker threads.
"""

from __future__ import annotations

import contextlib as _contextlib
import contextvars as _contextvars
import logging as _logging
import threading as _threading
import typing as _typing

import verdandi.constants as constants
import verdandi.core.elements as elements
import verdandi.runner.outcomes as outcomes

if _typing.TYPE_CHECKING:
    import verdandi.reporting.base as _reporting_base

_logger = _logging.getLogger(__name__)

_current: _contextvars.ContextVar[RunContext | None] = _contextvars.ContextVar(
    "verdandi_current_run", default=None
)


class RunContext:
    """
    Mutable state for one top-level run.

    The element stack is guarded by a lock. Concurrent branches each work
    on a fork() of the context, so every branch sees its own ancestry
    while sharing the report and reporters of the run.
    """

    def __init__(
        self,
        report: outcomes.RunReport | None = None,
        reporters: _typing.Sequence[_reporting_base.Reporter] = (),
        stack: _typing.Iterable[elements.Element] = (),
    ) -> None:
        self._lock = _threading.RLock()
        self._stack: list[elements.Element] = list(stack)
        self.report = report if report is not None else outcomes.RunReport()
        self.reporters = tuple(reporters)

    @property
    def stack(self) -> tuple[elements.Element, ...]:
        """Elements currently executing, outermost first."""
        with self._lock:
            return tuple(self._stack)

    @property
    def current(self) -> elements.Element | None:
        """The innermost executing element."""
        with self._lock:
            return self._stack[-1] if self._stack else None

    @property
    def description(self) -> str:
        """
        Comma-joined descriptions of every element on the stack.

        Elements with an empty name contribute nothing, so no empty
        segment or doubled separator appears.
        """
        return constants.DESCRIPTION_SEPARATOR.join(
            element.description for element in self.stack if element.description
        )

    def describe(self, element: elements.Element) -> str:
        """Full description the element would have if pushed now."""
        with self.entered(element):
            return self.description

    @_contextlib.contextmanager
    def entered(self, element: elements.Element) -> _typing.Iterator[RunContext]:
        """Push an element for the duration of the block."""
        with self._lock:
            self._stack.append(element)
        try:
            yield self
        finally:
            with self._lock:
                # Remove by identity from the top; siblings may interleave.
                for index in range(len(self._stack) - 1, -1, -1):
                    if self._stack[index] is element:
                        del self._stack[index]
                        break

    def fork(self) -> RunContext:
        """Copy of this context with its own stack and the shared report."""
        return RunContext(self.report, self.reporters, self.stack)

    def record(self, outcome: outcomes.Outcome) -> None:
        """Add an outcome to the report and forward it to every reporter."""
        self.report.add(outcome)
        for reporter in self.reporters:
            reporter.record(outcome)


def current_run() -> RunContext | None:
    """
    Get the run context of the executing callback.

    Returns None outside of a run. Inside an example or hook,
    current_run().description is the full description of that element.
    """
    return _current.get()


@_contextlib.contextmanager
def bind(run: RunContext) -> _typing.Iterator[RunContext]:
    """Make run the current run for the duration of the block."""
    token = _current.set(run)
    try:
        yield run
    finally:
        _current.reset(token)
