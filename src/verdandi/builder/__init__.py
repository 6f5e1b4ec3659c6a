"""
Declaration builder for Verdandi.

Validates declaration order with a phase state machine and assembles
immutable Groups, through either the functional API (describe/it/...)
or the context-manager API (GroupScope).
"""

from verdandi.builder.declarations import Branch, Declaration, Loop, each, either
from verdandi.builder.dsl import (
    after_all,
    after_each,
    around_each,
    before_all,
    before_each,
    context,
    describe,
    fdescribe,
    fit,
    hook,
    it,
    within,
    xdescribe,
    xit,
)
from verdandi.builder.rules import DeclarationKind, SequencePhase, SequenceRule
from verdandi.builder.scope import GroupScope
from verdandi.builder.sequence import SequenceBuilder, build_group

__all__ = [
    "Branch",
    "Declaration",
    "DeclarationKind",
    "GroupScope",
    "Loop",
    "SequenceBuilder",
    "SequencePhase",
    "SequenceRule",
    "after_all",
    "after_each",
    "around_each",
    "before_all",
    "before_each",
    "build_group",
    "context",
    "describe",
    "each",
    "either",
    "fdescribe",
    "fit",
    "hook",
    "it",
    "within",
    "xdescribe",
    "xit",
]
