"""
Element model for example trees.

A tree is built from four element kinds:
- Group: named node owning hooks and ordered children
- Example: a leaf holding one callback
- Hook: a before-all / before-each / after-each / after-all callback
- WrapHook: an around-each callback that receives a continuation

All elements are immutable once built. Callbacks may be ordinary
functions or coroutine functions; the runner decides how to call them.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import inspect as _inspect
import typing as _typing

import verdandi.constants as constants
import verdandi.core.traits as core_traits

if _typing.TYPE_CHECKING:
    import verdandi.runner.outcomes as _outcomes

Callback = _typing.Callable[[], _typing.Any]
"""Zero-argument callback; may be a coroutine function."""

Continuation = _typing.Callable[[], _typing.Any]
"""Passed to a wrap hook; runs the wrapped scope when called."""

WrapCallback = _typing.Callable[[Continuation], _typing.Any]
"""Around-each callback; must call (or await) the continuation."""


def is_coroutine_callable(fn: _typing.Any) -> bool:
    """Check whether calling fn produces a coroutine."""
    if _inspect.iscoroutinefunction(fn):
        return True
    call = getattr(fn, "__call__", None)  # noqa: B004
    return call is not None and _inspect.iscoroutinefunction(call)


class HookPhase(_enum.Enum):
    """The four phases a Hook can be bound to."""

    BEFORE_ALL = "before all"
    BEFORE_EACH = "before each"
    AFTER_EACH = "after each"
    AFTER_ALL = "after all"

    @property
    def phase_name(self) -> str:
        """Human-readable phase name used in descriptions."""
        return self.value

    @property
    def is_before(self) -> bool:
        """Whether hooks of this phase run before the elements they pair with."""
        return self in {HookPhase.BEFORE_ALL, HookPhase.BEFORE_EACH}


def hook_description(phase_name: str, name: str) -> str:
    """Phase name plus the optional discriminating name."""
    if not name:
        return phase_name
    return f"{phase_name}{constants.HOOK_NAME_SEPARATOR}{name}"


class _TraitsMixin:
    """Trait queries shared by every element kind."""

    traits: frozenset[core_traits.Trait]

    def has_trait(self, trait: core_traits.Trait) -> bool:
        """Check whether the element carries a trait."""
        return trait in self.traits

    @property
    def is_focused(self) -> bool:
        return core_traits.Trait.FOCUSED in self.traits

    @property
    def is_excluded(self) -> bool:
        return core_traits.Trait.EXCLUDED in self.traits


_E = _typing.TypeVar("_E", bound=_TraitsMixin)


def _included(items: _typing.Iterable[_E]) -> _typing.Iterator[_E]:
    return (item for item in items if not item.is_excluded)


@_dataclasses.dataclass(frozen=True, eq=False)
class Hook(_TraitsMixin):
    """
    A setup or teardown callback bound to one phase.

    Attributes:
        phase: When the hook runs relative to the group's elements.
        callback: Zero-argument callable (sync or coroutine function).
        name: Optional name distinguishing hooks of the same phase.
        traits: Markers; only EXCLUDED has an effect on hooks.
    """

    phase: HookPhase
    callback: Callback
    name: str = ""
    traits: frozenset[core_traits.Trait] = frozenset()

    @property
    def description(self) -> str:
        """Phase name plus the optional name, e.g. "before each: db"."""
        return hook_description(self.phase.phase_name, self.name)

    @property
    def is_async(self) -> bool:
        return is_coroutine_callable(self.callback)


@_dataclasses.dataclass(frozen=True, eq=False)
class WrapHook(_TraitsMixin):
    """
    An around-each hook.

    The callback receives a continuation and is responsible for invoking
    it. If it never does, the wrapped element does not run. Several wrap
    hooks on one group nest outer-to-inner in declaration order.
    """

    callback: WrapCallback
    name: str = ""
    traits: frozenset[core_traits.Trait] = frozenset()

    @property
    def description(self) -> str:
        return hook_description(constants.AROUND_EACH_PHASE_NAME, self.name)

    @property
    def is_async(self) -> bool:
        return is_coroutine_callable(self.callback)


@_dataclasses.dataclass(frozen=True, eq=False)
class Example(_TraitsMixin):
    """A single executable test case."""

    name: str
    callback: Callback
    traits: frozenset[core_traits.Trait] = frozenset()

    @property
    def description(self) -> str:
        return self.name

    @property
    def is_async(self) -> bool:
        return is_coroutine_callable(self.callback)

    @property
    def is_deep_focused(self) -> bool:
        return self.is_focused


@_dataclasses.dataclass(frozen=True, eq=False)
class Group(_TraitsMixin):
    """
    A named node owning hooks and ordered child elements.

    Groups are produced by the builder, which guarantees at least one
    child. The runner only reads them.

    Attributes:
        name: Caller-supplied description (may be empty).
        children: Child groups and examples in declaration order.
        before_all: Hooks run once before the first selected child.
        before_each: Hooks run before every selected child.
        around_each: Wrap hooks nested around every selected child.
        after_each: Hooks run after every selected child.
        after_all: Hooks run once after the last selected child.
        traits: Markers (FOCUSED, EXCLUDED, CONCURRENT).
        enclosure: Optional wrap hook around the whole group execution.
    """

    name: str
    children: tuple[Group | Example, ...]
    before_all: tuple[Hook, ...] = ()
    before_each: tuple[Hook, ...] = ()
    around_each: tuple[WrapHook, ...] = ()
    after_each: tuple[Hook, ...] = ()
    after_all: tuple[Hook, ...] = ()
    traits: frozenset[core_traits.Trait] = frozenset()
    enclosure: WrapHook | None = None

    @property
    def description(self) -> str:
        return self.name

    @property
    def is_concurrent(self) -> bool:
        return core_traits.Trait.CONCURRENT in self.traits

    @property
    def is_deep_focused(self) -> bool:
        """
        True if this group or any descendant, at any depth, is focused.

        Exclusion does not stop the search: an excluded subgroup holding a
        focused example still marks its ancestors focused, even though the
        filter pass drops the subgroup itself.
        """
        return self.is_focused or any(child.is_deep_focused for child in self.children)

    def hooks(self, phase: HookPhase) -> tuple[Hook, ...]:
        """Get the hooks declared for a phase."""
        return {
            HookPhase.BEFORE_ALL: self.before_all,
            HookPhase.BEFORE_EACH: self.before_each,
            HookPhase.AFTER_EACH: self.after_each,
            HookPhase.AFTER_ALL: self.after_all,
        }[phase]

    def iter_callbacks(self) -> _typing.Iterator[Hook | WrapHook | Example]:
        """
        Yield every callback-holding element in this subtree that can run.

        Excluded elements are left out, along with everything below an
        excluded group.
        """
        if self.enclosure is not None and not self.enclosure.is_excluded:
            yield self.enclosure
        yield from _included(self.before_all)
        yield from _included(self.before_each)
        yield from _included(self.around_each)
        for child in _included(self.children):
            if isinstance(child, Group):
                yield from child.iter_callbacks()
            else:
                yield child
        yield from _included(self.after_each)
        yield from _included(self.after_all)

    @property
    def is_async(self) -> bool:
        """
        True if any callback in this subtree that can run is a coroutine function.

        Excluded elements never run, so they do not make a group async.
        """
        return any(element.is_async for element in self.iter_callbacks())

    def named(self, name: str) -> Group:
        """Return a copy of the group with a different name."""
        return _dataclasses.replace(self, name=name)

    def with_traits(self, *extra: core_traits.TraitLike) -> Group:
        """Return a copy of the group with additional traits."""
        return _dataclasses.replace(self, traits=self.traits | core_traits.normalize(extra))

    def run(self, **kwargs: _typing.Any) -> _outcomes.RunReport:
        """Run this group with the blocking runner. See runner.SyncRunner."""
        import verdandi.runner.sync_runner as sync_runner

        return sync_runner.SyncRunner(**kwargs).run(self)

    async def run_async(self, **kwargs: _typing.Any) -> _outcomes.RunReport:
        """Run this group with the asyncio runner. See runner.AsyncRunner."""
        import verdandi.runner.async_runner as async_runner

        return await async_runner.AsyncRunner(**kwargs).run(self)


Element = Group | Example | Hook | WrapHook
"""Every node kind that can appear on the run context stack."""

ExampleElement = Group | Example
"""Node kinds that can be a group's child."""
