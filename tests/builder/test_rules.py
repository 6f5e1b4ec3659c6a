"""Tests for the declaration ordering state machine."""

import pytest as _pytest

import verdandi.builder.rules as rules
import verdandi.core.errors as errors

K = rules.DeclarationKind
P = rules.SequencePhase
R = rules.SequenceRule


class TestRuleMessages:
    """The rule messages are a stable interface."""

    @_pytest.mark.parametrize(
        ("rule", "message"),
        [
            (R.EMPTY, "examples must not be empty"),
            (R.NO_EXAMPLES, "group must have examples"),
            (R.BEFORE_ALL_ORDER, "before-all must precede before-each/around-each"),
            (R.BEFORE_AFTER_EXAMPLES, "before hooks cannot appear after examples"),
            (R.AROUND_AFTER_EXAMPLES, "around-each cannot appear after examples"),
            (R.AFTER_EACH_ORDER, "after-each must precede after-all"),
            (R.AFTER_BEFORE_EXAMPLES, "after hooks must follow examples"),
            (R.EXAMPLE_AFTER_AFTER, "examples cannot appear after after hooks"),
            (R.LOOP_END, "loop must end in example or after element"),
            (R.BRANCH_MISMATCH, "conditional branches must resolve to the same phase"),
        ],
    )
    def test_message(self, rule: rules.SequenceRule, message: str) -> None:
        """Each rule's value is its user-facing message."""
        assert rule.value == message


class TestValidSequences:
    """Sequences the state machine accepts."""

    @_pytest.mark.parametrize(
        ("kinds", "end"),
        [
            ([K.EXAMPLE], P.EXAMPLE),
            ([K.EXAMPLE, K.EXAMPLE, K.EXAMPLE], P.EXAMPLE),
            ([K.BEFORE_ALL, K.BEFORE_ALL, K.EXAMPLE], P.EXAMPLE),
            ([K.BEFORE_EACH, K.AROUND_EACH, K.BEFORE_EACH, K.EXAMPLE], P.EXAMPLE),
            ([K.BEFORE_ALL, K.AROUND_EACH, K.EXAMPLE, K.AFTER_EACH], P.AFTER_EACH),
            ([K.EXAMPLE, K.AFTER_EACH, K.AFTER_EACH, K.AFTER_ALL], P.AFTER_ALL),
            ([K.EXAMPLE, K.AFTER_ALL, K.AFTER_ALL], P.AFTER_ALL),
            (
                [K.BEFORE_ALL, K.BEFORE_EACH, K.EXAMPLE, K.AFTER_EACH, K.AFTER_ALL],
                P.AFTER_ALL,
            ),
        ],
    )
    def test_accepted(self, kinds: list[rules.DeclarationKind], end: rules.SequencePhase) -> None:
        """Well-ordered sequences end in a terminal phase."""
        assert rules.validate(kinds) is end


class TestInvalidSequences:
    """Every invalid ordering fails with exactly its rule."""

    @_pytest.mark.parametrize(
        ("kinds", "rule"),
        [
            ([], R.EMPTY),
            ([K.BEFORE_EACH, K.BEFORE_ALL, K.EXAMPLE], R.BEFORE_ALL_ORDER),
            ([K.AROUND_EACH, K.BEFORE_ALL, K.EXAMPLE], R.BEFORE_ALL_ORDER),
            ([K.EXAMPLE, K.BEFORE_ALL], R.BEFORE_AFTER_EXAMPLES),
            ([K.EXAMPLE, K.BEFORE_EACH], R.BEFORE_AFTER_EXAMPLES),
            ([K.EXAMPLE, K.AFTER_EACH, K.BEFORE_EACH], R.BEFORE_AFTER_EXAMPLES),
            ([K.EXAMPLE, K.AFTER_ALL, K.AFTER_EACH], R.AFTER_EACH_ORDER),
            ([K.EXAMPLE, K.AROUND_EACH], R.AROUND_AFTER_EXAMPLES),
            ([K.BEFORE_ALL], R.NO_EXAMPLES),
            ([K.BEFORE_EACH], R.NO_EXAMPLES),
            ([K.AROUND_EACH], R.NO_EXAMPLES),
            ([K.AFTER_EACH], R.AFTER_BEFORE_EXAMPLES),
            ([K.BEFORE_ALL, K.AFTER_ALL], R.AFTER_BEFORE_EXAMPLES),
            ([K.EXAMPLE, K.AFTER_EACH, K.EXAMPLE], R.EXAMPLE_AFTER_AFTER),
            ([K.EXAMPLE, K.AFTER_ALL, K.EXAMPLE], R.EXAMPLE_AFTER_AFTER),
        ],
    )
    def test_rejected(
        self, kinds: list[rules.DeclarationKind], rule: rules.SequenceRule
    ) -> None:
        """The structural error names the violated rule."""
        with _pytest.raises(errors.StructuralError) as exc_info:
            rules.validate(kinds)
        assert exc_info.value.rule is rule
        assert str(exc_info.value).startswith(rule.value)


class TestAdvance:
    """Tests for single transitions."""

    def test_error_carries_detail(self) -> None:
        """The detail passed to advance() appears in the message."""
        with _pytest.raises(errors.StructuralError, match=r"\(before all: db\)"):
            rules.advance(P.EXAMPLE, K.BEFORE_ALL, "before all: db")

    def test_terminal_phases(self) -> None:
        """Only example and after phases may end a sequence."""
        assert {phase for phase in P if phase.is_terminal} == {
            P.EXAMPLE,
            P.AFTER_EACH,
            P.AFTER_ALL,
        }
