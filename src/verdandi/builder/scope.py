"""
Context-manager construction API.

    with GroupScope("stack") as stack:

        @stack.before_each
        def reset():
            items.clear()

        @stack.it("starts empty")
        def _():
            assert not items

        with stack.describe("after push") as pushed:
            ...

    stack.group.run()

Each registration is validated when it is made; leaving the block builds
the Group and appends it to the parent scope, if any.
"""

from __future__ import annotations

import types as _types
import typing as _typing

import verdandi.builder.declarations as declarations
import verdandi.builder.dsl as dsl
import verdandi.builder.sequence as sequence
import verdandi.core.elements as elements
import verdandi.core.errors as errors

_F = _typing.TypeVar("_F", bound=_typing.Callable[..., _typing.Any])


class GroupScope:
    """Builds one group from registrations made inside a with block."""

    def __init__(
        self,
        name: str = "",
        traits: dsl.Traits = (),
        parent: GroupScope | None = None,
        executor: elements.WrapCallback | None = None,
    ) -> None:
        """
        Initialize the scope.

        Args:
            name: Group description.
            traits: Traits for the group.
            parent: Scope that receives the built group on exit.
            executor: Optional enclosing executor, as in within().
        """
        self.name = name
        self._traits = tuple(traits)
        self._parent = parent
        self._enclosure = (
            elements.WrapHook(executor, name=name) if executor is not None else None
        )
        self._builder = sequence.SequenceBuilder()
        self._group: elements.Group | None = None

    def __enter__(self) -> GroupScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: _types.TracebackType | None,
    ) -> None:
        if exc_type is not None:
            return
        self._group = self._builder.build(self.name, self._traits, self._enclosure)
        if self._parent is not None:
            self._parent.add(self._group)

    @property
    def group(self) -> elements.Group:
        """
        The built group.

        Raises:
            VerdandiError: If the with block has not completed.
        """
        if self._group is None:
            raise errors.VerdandiError(f"Group {self.name!r} has not been built yet")
        return self._group

    def add(self, declaration: declarations.Declaration) -> declarations.Declaration:
        """Append a declaration built with the functional API."""
        self._builder.add(declaration)
        return declaration

    # Nested scopes

    def describe(self, name: str, traits: dsl.Traits = ()) -> GroupScope:
        """Open a child group scope."""
        return GroupScope(name, traits, parent=self)

    context = describe

    def within(
        self, name: str, executor: elements.WrapCallback, traits: dsl.Traits = ()
    ) -> GroupScope:
        """Open a child group scope whose execution runs inside executor."""
        return GroupScope(name, traits, parent=self, executor=executor)

    # Decorators

    def it(self, name: str, traits: dsl.Traits = ()) -> _typing.Callable[[_F], _F]:
        """Register the decorated function as an example."""

        def decorator(fn: _F) -> _F:
            self.add(dsl.it(name, fn, traits))
            return fn

        return decorator

    def fit(self, name: str, traits: dsl.Traits = ()) -> _typing.Callable[[_F], _F]:
        """Register the decorated function as a focused example."""

        def decorator(fn: _F) -> _F:
            self.add(dsl.fit(name, fn, traits))
            return fn

        return decorator

    def xit(self, name: str, traits: dsl.Traits = ()) -> _typing.Callable[[_F], _F]:
        """Register the decorated function as an excluded example."""

        def decorator(fn: _F) -> _F:
            self.add(dsl.xit(name, fn, traits))
            return fn

        return decorator

    def _hook_decorator(
        self,
        phase: elements.HookPhase,
        fn: _F | None,
        name: str,
        traits: dsl.Traits,
    ) -> _typing.Any:
        def decorator(callback: _F) -> _F:
            self.add(dsl.hook(phase, callback, name, traits))
            return callback

        if fn is not None:
            return decorator(fn)
        return decorator

    def before_all(
        self, fn: _F | None = None, *, name: str = "", traits: dsl.Traits = ()
    ) -> _typing.Any:
        """Register a before-all hook. Usable bare or with arguments."""
        return self._hook_decorator(elements.HookPhase.BEFORE_ALL, fn, name, traits)

    def before_each(
        self, fn: _F | None = None, *, name: str = "", traits: dsl.Traits = ()
    ) -> _typing.Any:
        """Register a before-each hook. Usable bare or with arguments."""
        return self._hook_decorator(elements.HookPhase.BEFORE_EACH, fn, name, traits)

    def after_each(
        self, fn: _F | None = None, *, name: str = "", traits: dsl.Traits = ()
    ) -> _typing.Any:
        """Register an after-each hook. Usable bare or with arguments."""
        return self._hook_decorator(elements.HookPhase.AFTER_EACH, fn, name, traits)

    def after_all(
        self, fn: _F | None = None, *, name: str = "", traits: dsl.Traits = ()
    ) -> _typing.Any:
        """Register an after-all hook. Usable bare or with arguments."""
        return self._hook_decorator(elements.HookPhase.AFTER_ALL, fn, name, traits)

    def around_each(
        self, fn: _F | None = None, *, name: str = "", traits: dsl.Traits = ()
    ) -> _typing.Any:
        """Register an around-each hook. Usable bare or with arguments."""

        def decorator(callback: _F) -> _F:
            self.add(dsl.around_each(callback, name, traits))
            return callback

        if fn is not None:
            return decorator(fn)
        return decorator

    # Compound declarations

    def each(
        self,
        items: _typing.Iterable[_typing.Any],
        body: _typing.Callable[[_typing.Any], declarations.Body],
    ) -> declarations.Loop:
        """Register a loop. See declarations.each()."""
        loop = declarations.each(items, body)
        self.add(loop)
        return loop

    def either(
        self,
        condition: _typing.Any,
        if_true: declarations.Body,
        if_false: declarations.Body = None,
    ) -> declarations.Branch:
        """Register a conditional. See declarations.either()."""
        branch = declarations.either(condition, if_true, if_false)
        self.add(branch)
        return branch
