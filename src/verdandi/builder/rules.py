"""
Declaration ordering rules.

A group body is a sequence of declarations that must follow the phase
order before-all, before-each/around-each, examples, after-each,
after-all. The rules are expressed as a small state machine: every
declaration advances the current phase or is rejected with a
SequenceRule naming the violation.
"""

from __future__ import annotations

import enum as _enum

import verdandi.core.errors as errors


class SequenceRule(_enum.Enum):
    """Ordering violations. Values are the stable error messages."""

    EMPTY = "examples must not be empty"
    NO_EXAMPLES = "group must have examples"
    BEFORE_ALL_ORDER = "before-all must precede before-each/around-each"
    BEFORE_AFTER_EXAMPLES = "before hooks cannot appear after examples"
    AROUND_AFTER_EXAMPLES = "around-each cannot appear after examples"
    AFTER_EACH_ORDER = "after-each must precede after-all"
    AFTER_BEFORE_EXAMPLES = "after hooks must follow examples"
    EXAMPLE_AFTER_AFTER = "examples cannot appear after after hooks"
    LOOP_END = "loop must end in example or after element"
    BRANCH_MISMATCH = "conditional branches must resolve to the same phase"


class SequencePhase(_enum.Enum):
    """The phase reached by the declarations seen so far."""

    START = "start"
    BEFORE_ALL = "before all"
    BEFORE_EACH = "before each"
    EXAMPLE = "example"
    AFTER_EACH = "after each"
    AFTER_ALL = "after all"

    @property
    def is_terminal(self) -> bool:
        """Whether a sequence may end in this phase."""
        return self in _TERMINAL


class DeclarationKind(_enum.Enum):
    """What a single declaration contributes to the sequence."""

    BEFORE_ALL = "before all"
    BEFORE_EACH = "before each"
    AROUND_EACH = "around each"
    EXAMPLE = "example"
    AFTER_EACH = "after each"
    AFTER_ALL = "after all"


_TERMINAL = frozenset(
    {SequencePhase.EXAMPLE, SequencePhase.AFTER_EACH, SequencePhase.AFTER_ALL}
)

_P = SequencePhase
_K = DeclarationKind
_R = SequenceRule

_TRANSITIONS: dict[SequencePhase, dict[DeclarationKind, SequencePhase | SequenceRule]] = {
    _P.START: {
        _K.BEFORE_ALL: _P.BEFORE_ALL,
        _K.BEFORE_EACH: _P.BEFORE_EACH,
        _K.AROUND_EACH: _P.BEFORE_EACH,
        _K.EXAMPLE: _P.EXAMPLE,
        _K.AFTER_EACH: _R.AFTER_BEFORE_EXAMPLES,
        _K.AFTER_ALL: _R.AFTER_BEFORE_EXAMPLES,
    },
    _P.BEFORE_ALL: {
        _K.BEFORE_ALL: _P.BEFORE_ALL,
        _K.BEFORE_EACH: _P.BEFORE_EACH,
        _K.AROUND_EACH: _P.BEFORE_EACH,
        _K.EXAMPLE: _P.EXAMPLE,
        _K.AFTER_EACH: _R.AFTER_BEFORE_EXAMPLES,
        _K.AFTER_ALL: _R.AFTER_BEFORE_EXAMPLES,
    },
    _P.BEFORE_EACH: {
        _K.BEFORE_ALL: _R.BEFORE_ALL_ORDER,
        _K.BEFORE_EACH: _P.BEFORE_EACH,
        _K.AROUND_EACH: _P.BEFORE_EACH,
        _K.EXAMPLE: _P.EXAMPLE,
        _K.AFTER_EACH: _R.AFTER_BEFORE_EXAMPLES,
        _K.AFTER_ALL: _R.AFTER_BEFORE_EXAMPLES,
    },
    _P.EXAMPLE: {
        _K.BEFORE_ALL: _R.BEFORE_AFTER_EXAMPLES,
        _K.BEFORE_EACH: _R.BEFORE_AFTER_EXAMPLES,
        _K.AROUND_EACH: _R.AROUND_AFTER_EXAMPLES,
        _K.EXAMPLE: _P.EXAMPLE,
        _K.AFTER_EACH: _P.AFTER_EACH,
        _K.AFTER_ALL: _P.AFTER_ALL,
    },
    _P.AFTER_EACH: {
        _K.BEFORE_ALL: _R.BEFORE_AFTER_EXAMPLES,
        _K.BEFORE_EACH: _R.BEFORE_AFTER_EXAMPLES,
        _K.AROUND_EACH: _R.AROUND_AFTER_EXAMPLES,
        _K.EXAMPLE: _R.EXAMPLE_AFTER_AFTER,
        _K.AFTER_EACH: _P.AFTER_EACH,
        _K.AFTER_ALL: _P.AFTER_ALL,
    },
    _P.AFTER_ALL: {
        _K.BEFORE_ALL: _R.BEFORE_AFTER_EXAMPLES,
        _K.BEFORE_EACH: _R.BEFORE_AFTER_EXAMPLES,
        _K.AROUND_EACH: _R.AROUND_AFTER_EXAMPLES,
        _K.EXAMPLE: _R.EXAMPLE_AFTER_AFTER,
        _K.AFTER_EACH: _R.AFTER_EACH_ORDER,
        _K.AFTER_ALL: _P.AFTER_ALL,
    },
}


def advance(
    phase: SequencePhase, kind: DeclarationKind, detail: str | None = None
) -> SequencePhase:
    """
    Apply one declaration to the current phase.

    Args:
        phase: Phase reached by the previous declarations.
        kind: Kind of the next declaration.
        detail: Optional description of the declaration, for the error.

    Returns:
        The phase after the declaration.

    Raises:
        StructuralError: If the declaration is not allowed here.
    """
    result = _TRANSITIONS[phase][kind]
    if isinstance(result, SequenceRule):
        raise errors.StructuralError(result, detail)
    return result


def finish(phase: SequencePhase) -> SequencePhase:
    """
    Check that a sequence may end in the given phase.

    Raises:
        StructuralError: EMPTY when nothing was declared, NO_EXAMPLES when
            only before hooks were declared.
    """
    if phase is SequencePhase.START:
        raise errors.StructuralError(SequenceRule.EMPTY)
    if not phase.is_terminal:
        raise errors.StructuralError(SequenceRule.NO_EXAMPLES)
    return phase


def validate(kinds: list[DeclarationKind]) -> SequencePhase:
    """Validate a flat sequence of declaration kinds from the start phase."""
    phase = SequencePhase.START
    for kind in kinds:
        phase = advance(phase, kind)
    return finish(phase)
