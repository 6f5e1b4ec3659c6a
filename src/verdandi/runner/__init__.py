"""
Execution engine for Verdandi.

- SyncRunner: blocking runner (thread pool for concurrent groups)
- AsyncRunner: asyncio runner (tasks for concurrent groups)
- RunContext / current_run(): what is executing right now
- Outcome / RunReport: results of a run
"""

import typing as _typing

from verdandi.runner.async_runner import AsyncRunner
from verdandi.runner.context import RunContext, current_run
from verdandi.runner.outcomes import Outcome, OutcomeKind, OutcomeStatus, RunReport
from verdandi.runner.sync_runner import SyncRunner

if _typing.TYPE_CHECKING:
    import verdandi.core.elements as elements


def run(group: "elements.Group", **kwargs: _typing.Any) -> RunReport:
    """Run group with a SyncRunner. Keyword arguments go to the runner."""
    return SyncRunner(**kwargs).run(group)


async def run_async(group: "elements.Group", **kwargs: _typing.Any) -> RunReport:
    """Run group with an AsyncRunner. Keyword arguments go to the runner."""
    return await AsyncRunner(**kwargs).run(group)


__all__ = [
    "AsyncRunner",
    "Outcome",
    "OutcomeKind",
    "OutcomeStatus",
    "RunContext",
    "RunReport",
    "SyncRunner",
    "current_run",
    "run",
    "run_async",
]
