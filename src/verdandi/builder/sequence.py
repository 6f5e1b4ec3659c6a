"""
Append-only sequence builder.

SequenceBuilder validates every declaration the moment it is appended,
accumulates hooks into per-phase lists and examples into an ordered
child list, and assembles the immutable Group on build().
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import verdandi.builder.declarations as declarations
import verdandi.builder.rules as rules
import verdandi.core.elements as elements
import verdandi.core.errors as errors
import verdandi.core.traits as core_traits

_logger = _logging.getLogger(__name__)

_HOOK_KINDS = {
    elements.HookPhase.BEFORE_ALL: rules.DeclarationKind.BEFORE_ALL,
    elements.HookPhase.BEFORE_EACH: rules.DeclarationKind.BEFORE_EACH,
    elements.HookPhase.AFTER_EACH: rules.DeclarationKind.AFTER_EACH,
    elements.HookPhase.AFTER_ALL: rules.DeclarationKind.AFTER_ALL,
}


def classify(declaration: declarations.Declaration) -> rules.DeclarationKind:
    """Get the declaration kind of a single (non-compound) declaration."""
    if isinstance(declaration, elements.Hook):
        return _HOOK_KINDS[declaration.phase]
    if isinstance(declaration, elements.WrapHook):
        return rules.DeclarationKind.AROUND_EACH
    return rules.DeclarationKind.EXAMPLE


def describe_declaration(declaration: declarations.Declaration) -> str:
    """Short label for a declaration, used in structural error details."""
    if isinstance(declaration, elements.Example):
        return f"example {declaration.name!r}"
    if isinstance(declaration, elements.Group):
        return f"group {declaration.name!r}"
    return declaration.description


@_dataclasses.dataclass
class _Parts:
    """Elements accumulated from a sequence of declarations."""

    before_all: list[elements.Hook] = _dataclasses.field(default_factory=list)
    before_each: list[elements.Hook] = _dataclasses.field(default_factory=list)
    around_each: list[elements.WrapHook] = _dataclasses.field(default_factory=list)
    after_each: list[elements.Hook] = _dataclasses.field(default_factory=list)
    after_all: list[elements.Hook] = _dataclasses.field(default_factory=list)
    children: list[elements.ExampleElement] = _dataclasses.field(default_factory=list)

    def append(self, declaration: declarations.Declaration) -> None:
        if isinstance(declaration, elements.Hook):
            self._hook_list(declaration.phase).append(declaration)
        elif isinstance(declaration, elements.WrapHook):
            self.around_each.append(declaration)
        elif isinstance(declaration, (elements.Example, elements.Group)):
            self.children.append(declaration)
        else:
            raise TypeError(f"Cannot append {type(declaration).__name__}")

    def merge(self, other: _Parts) -> None:
        self.before_all.extend(other.before_all)
        self.before_each.extend(other.before_each)
        self.around_each.extend(other.around_each)
        self.after_each.extend(other.after_each)
        self.after_all.extend(other.after_all)
        self.children.extend(other.children)

    def _hook_list(self, phase: elements.HookPhase) -> list[elements.Hook]:
        return {
            elements.HookPhase.BEFORE_ALL: self.before_all,
            elements.HookPhase.BEFORE_EACH: self.before_each,
            elements.HookPhase.AFTER_EACH: self.after_each,
            elements.HookPhase.AFTER_ALL: self.after_all,
        }[phase]


def _apply(
    phase: rules.SequencePhase,
    declaration: declarations.Declaration,
    parts: _Parts,
) -> rules.SequencePhase:
    """
    Validate one declaration against the current phase and accumulate it.

    Compound declarations are staged in a scratch _Parts and merged only
    once they validate, so parts is untouched when this raises.
    """
    detail = describe_declaration(declaration)

    if isinstance(declaration, declarations.Loop):
        staged = _Parts()
        for body in declaration.iterations:
            end = _apply_all(rules.SequencePhase.START, body, staged)
            if end is rules.SequencePhase.START:
                raise errors.StructuralError(rules.SequenceRule.EMPTY, detail)
            if not end.is_terminal:
                raise errors.StructuralError(rules.SequenceRule.LOOP_END, detail)
        phase = rules.advance(phase, rules.DeclarationKind.EXAMPLE, detail)
        parts.merge(staged)
        return phase

    if isinstance(declaration, declarations.Branch):
        taken = _Parts()
        taken_phase = _apply_all(phase, declaration.selected, taken)
        other_phase = _apply_all(phase, declaration.rejected, _Parts())
        if taken_phase is not other_phase:
            raise errors.StructuralError(
                rules.SequenceRule.BRANCH_MISMATCH,
                f"{taken_phase.value} vs {other_phase.value}",
            )
        parts.merge(taken)
        return taken_phase

    phase = rules.advance(phase, classify(declaration), detail)
    parts.append(declaration)
    return phase


def _apply_all(
    phase: rules.SequencePhase,
    body: _typing.Iterable[declarations.Declaration],
    parts: _Parts,
) -> rules.SequencePhase:
    for declaration in body:
        phase = _apply(phase, declaration, parts)
    return phase


class SequenceBuilder:
    """
    Validates and accumulates the declarations of one group body.

    Usage:
        builder = SequenceBuilder()
        builder.add(before_each(setup))
        builder.add(it("works", check))
        group = builder.build("feature")
    """

    def __init__(self) -> None:
        self._phase = rules.SequencePhase.START
        self._parts = _Parts()

    @property
    def phase(self) -> rules.SequencePhase:
        """Phase reached by the declarations added so far."""
        return self._phase

    def add(self, declaration: declarations.Declaration) -> None:
        """
        Append one declaration.

        Raises:
            StructuralError: If the declaration is not allowed here. The
                builder is left unchanged.
            TypeError: If the value is not a declaration.
        """
        if not declarations.is_declaration(declaration):
            raise TypeError(f"Expected a declaration, got {type(declaration).__name__}")
        self._phase = _apply(self._phase, declaration, self._parts)

    def extend(self, body: declarations.Body) -> None:
        """Append several declarations in order."""
        for declaration in declarations.flatten(body):
            self.add(declaration)

    def build(
        self,
        name: str,
        traits: _typing.Iterable[core_traits.TraitLike] = (),
        enclosure: elements.WrapHook | None = None,
    ) -> elements.Group:
        """
        Assemble the Group.

        Raises:
            StructuralError: EMPTY or NO_EXAMPLES if the sequence cannot end
                here, or EMPTY if only empty loops contributed examples.
        """
        rules.finish(self._phase)
        if not self._parts.children:
            raise errors.StructuralError(rules.SequenceRule.EMPTY, f"group {name!r}")
        parts = self._parts
        group = elements.Group(
            name=name,
            children=tuple(parts.children),
            before_all=tuple(parts.before_all),
            before_each=tuple(parts.before_each),
            around_each=tuple(parts.around_each),
            after_each=tuple(parts.after_each),
            after_all=tuple(parts.after_all),
            traits=core_traits.normalize(traits),
            enclosure=enclosure,
        )
        _logger.debug(
            "Built group %r: %d children, %d hooks",
            name,
            len(group.children),
            len(parts.before_all)
            + len(parts.before_each)
            + len(parts.around_each)
            + len(parts.after_each)
            + len(parts.after_all),
        )
        return group


def build_group(
    name: str,
    body: declarations.Body,
    traits: _typing.Iterable[core_traits.TraitLike] = (),
    enclosure: elements.WrapHook | None = None,
) -> elements.Group:
    """Validate a whole body and assemble its Group in one step."""
    builder = SequenceBuilder()
    builder.extend(body)
    return builder.build(name, traits, enclosure)
