"""
Functional construction API.

Every function here returns a declaration; describe() validates its
declarations eagerly and returns an immutable Group:

    tree = describe(
        "stack",
        before_each(reset),
        it("starts empty", check_empty),
        describe("after push", before_each(push), it("has one item", check_one)),
        after_all(cleanup),
    )
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import verdandi.builder.declarations as declarations
import verdandi.builder.sequence as sequence
import verdandi.constants as constants
import verdandi.core.elements as elements
import verdandi.core.traits as core_traits

_logger = _logging.getLogger(__name__)

Traits = _typing.Iterable[core_traits.TraitLike]

_HOOK_TRAITS = frozenset({core_traits.Trait.EXCLUDED})


def _flatten_all(body: tuple[declarations.Body, ...]) -> list[declarations.Declaration]:
    return [declaration for part in body for declaration in declarations.flatten(part)]


def _example_traits(name: str, traits: Traits) -> frozenset[core_traits.Trait]:
    normalized = core_traits.normalize(traits)
    for trait in normalized:
        if trait.group_only:
            _logger.warning(
                "Trait %r has no effect on example %r; it only applies to groups",
                trait.value,
                name,
            )
    return normalized


def _hook_traits(description: str, traits: Traits) -> frozenset[core_traits.Trait]:
    normalized = core_traits.normalize(traits)
    for trait in normalized - _HOOK_TRAITS:
        _logger.warning("Trait %r has no effect on hook %r", trait.value, description)
    return normalized


def describe(
    name: str,
    *body: declarations.Body,
    traits: Traits = (),
) -> elements.Group:
    """
    Declare a group.

    Args:
        name: Group description. May be empty, in which case the group
            is left out of the full descriptions below it: example "a"
            in an unnamed group inside "Root" reads "Root, a".
        *body: Declarations in order. Sequences are flattened.
        traits: Traits for the group (e.g. Trait.CONCURRENT or "focused").

    Raises:
        StructuralError: If the declarations are not in a valid order.
    """
    return sequence.build_group(name, _flatten_all(body), traits)


context = describe


def fdescribe(name: str, *body: declarations.Body, traits: Traits = ()) -> elements.Group:
    """Declare a focused group."""
    return describe(name, *body, traits=core_traits.with_trait(traits, core_traits.Trait.FOCUSED))


def xdescribe(name: str, *body: declarations.Body, traits: Traits = ()) -> elements.Group:
    """Declare an excluded group."""
    return describe(name, *body, traits=core_traits.with_trait(traits, core_traits.Trait.EXCLUDED))


def within(
    name: str,
    executor: elements.WrapCallback,
    *body: declarations.Body,
    traits: Traits = (),
) -> elements.Group:
    """
    Declare a group whose whole execution runs inside executor.

    executor receives a continuation that runs the group's hooks and
    children; it must call (or await) it exactly once.
    """
    enclosure = elements.WrapHook(executor, name=name)
    return sequence.build_group(name, _flatten_all(body), traits, enclosure)


def it(name: str, callback: elements.Callback, traits: Traits = ()) -> elements.Example:
    """Declare an example."""
    return elements.Example(name, callback, _example_traits(name, traits))


def fit(name: str, callback: elements.Callback, traits: Traits = ()) -> elements.Example:
    """Declare a focused example."""
    return it(name, callback, core_traits.with_trait(traits, core_traits.Trait.FOCUSED))


def xit(name: str, callback: elements.Callback, traits: Traits = ()) -> elements.Example:
    """Declare an excluded example."""
    return it(name, callback, core_traits.with_trait(traits, core_traits.Trait.EXCLUDED))


def hook(
    phase: elements.HookPhase,
    callback: elements.Callback,
    name: str = "",
    traits: Traits = (),
) -> elements.Hook:
    """Declare a hook for an arbitrary phase."""
    description = elements.hook_description(phase.phase_name, name)
    return elements.Hook(phase, callback, name, _hook_traits(description, traits))


def before_all(callback: elements.Callback, name: str = "", traits: Traits = ()) -> elements.Hook:
    """Declare a hook run once before the group's first element."""
    return hook(elements.HookPhase.BEFORE_ALL, callback, name, traits)


def before_each(callback: elements.Callback, name: str = "", traits: Traits = ()) -> elements.Hook:
    """Declare a hook run before every element of the group."""
    return hook(elements.HookPhase.BEFORE_EACH, callback, name, traits)


def after_each(callback: elements.Callback, name: str = "", traits: Traits = ()) -> elements.Hook:
    """Declare a hook run after every element of the group."""
    return hook(elements.HookPhase.AFTER_EACH, callback, name, traits)


def after_all(callback: elements.Callback, name: str = "", traits: Traits = ()) -> elements.Hook:
    """Declare a hook run once after the group's last element."""
    return hook(elements.HookPhase.AFTER_ALL, callback, name, traits)


def around_each(
    callback: elements.WrapCallback, name: str = "", traits: Traits = ()
) -> elements.WrapHook:
    """
    Declare a hook wrapped around every element of the group.

    callback receives a continuation and must call it (or await it, for
    coroutine functions) to run the element.
    """
    description = elements.hook_description(constants.AROUND_EACH_PHASE_NAME, name)
    return elements.WrapHook(callback, name, _hook_traits(description, traits))


each = declarations.each
either = declarations.either
