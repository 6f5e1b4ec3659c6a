"""
Core element model for Verdandi.

Elements, traits, the focus/exclude filter pass and the error hierarchy.
"""

from verdandi.core.elements import (
    Callback,
    Continuation,
    Element,
    Example,
    ExampleElement,
    Group,
    Hook,
    HookPhase,
    WrapCallback,
    WrapHook,
)
from verdandi.core.errors import (
    CallbackKindError,
    ExamplesFailedError,
    HookFailedError,
    SkipSignal,
    StructuralError,
    VerdandiError,
    skip,
)
from verdandi.core.filtering import select_executable
from verdandi.core.traits import Trait

__all__ = [
    "Callback",
    "CallbackKindError",
    "Continuation",
    "Element",
    "Example",
    "ExampleElement",
    "ExamplesFailedError",
    "Group",
    "Hook",
    "HookFailedError",
    "HookPhase",
    "SkipSignal",
    "StructuralError",
    "Trait",
    "VerdandiError",
    "WrapCallback",
    "WrapHook",
    "select_executable",
    "skip",
]
