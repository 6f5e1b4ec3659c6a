"""
Verdandi - BDD example runner

Organizes examples into nested groups with setup/teardown hooks, hooks
that wrap example execution, focus/exclude markers and concurrent
groups. Runs blocking or under asyncio.
Named after the Norn of what is happening now.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("verdandi")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Verdandi Contributors"

from verdandi.core import (  # noqa: E402
    CallbackKindError,
    Continuation,
    Example,
    ExamplesFailedError,
    Group,
    Hook,
    HookFailedError,
    HookPhase,
    SkipSignal,
    StructuralError,
    Trait,
    VerdandiError,
    WrapHook,
    skip,
)
from verdandi.builder import (  # noqa: E402
    GroupScope,
    SequenceRule,
    after_all,
    after_each,
    around_each,
    before_all,
    before_each,
    context,
    describe,
    each,
    either,
    fdescribe,
    fit,
    it,
    within,
    xdescribe,
    xit,
)
from verdandi.runner import (  # noqa: E402
    AsyncRunner,
    Outcome,
    OutcomeStatus,
    RunContext,
    RunReport,
    SyncRunner,
    current_run,
    run,
    run_async,
)
from verdandi.config import Settings  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "AsyncRunner",
    "CallbackKindError",
    "Continuation",
    "Example",
    "ExamplesFailedError",
    "Group",
    "GroupScope",
    "Hook",
    "HookFailedError",
    "HookPhase",
    "Outcome",
    "OutcomeStatus",
    "RunContext",
    "RunReport",
    "SequenceRule",
    "Settings",
    "SkipSignal",
    "StructuralError",
    "SyncRunner",
    "Trait",
    "VerdandiError",
    "WrapHook",
    "after_all",
    "after_each",
    "around_each",
    "before_all",
    "before_each",
    "context",
    "current_run",
    "describe",
    "each",
    "either",
    "fdescribe",
    "fit",
    "it",
    "run",
    "run_async",
    "skip",
    "within",
    "xdescribe",
    "xit",
]
