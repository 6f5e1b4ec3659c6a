"""
Compound declarations: loops and conditionals.

Both expand into ordinary declarations when a group body is evaluated;
the sequence builder validates them as described on each type.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import typing as _typing

import verdandi.core.elements as elements

_T = _typing.TypeVar("_T")

_LEAF_TYPES = (elements.Hook, elements.WrapHook, elements.Example, elements.Group)


@_dataclasses.dataclass(frozen=True)
class Loop:
    """
    A block repeated once per item.

    Every iteration is validated as an independent sequence that must end
    in the example phase or an after phase. In the enclosing sequence the
    whole loop counts as examples; hooks declared by the body are added
    to the enclosing group once per iteration.
    """

    iterations: tuple[tuple[Declaration, ...], ...]
    label: str = "each"

    @property
    def description(self) -> str:
        return self.label


@_dataclasses.dataclass(frozen=True)
class Branch:
    """
    A conditional block.

    Both arms are validated against the current phase and must leave the
    sequence in the same phase. Only the selected arm contributes
    elements.
    """

    condition: bool
    if_true: tuple[Declaration, ...]
    if_false: tuple[Declaration, ...] = ()

    @property
    def description(self) -> str:
        return "either"

    @property
    def selected(self) -> tuple[Declaration, ...]:
        return self.if_true if self.condition else self.if_false

    @property
    def rejected(self) -> tuple[Declaration, ...]:
        return self.if_false if self.condition else self.if_true


Declaration = (
    elements.Hook | elements.WrapHook | elements.Example | elements.Group | Loop | Branch
)
"""Anything that can appear in a group body."""

Body = Declaration | _typing.Iterable[Declaration] | None
"""One declaration, several declarations, or nothing."""


def is_declaration(value: _typing.Any) -> bool:
    """Check whether a value can appear in a group body."""
    return isinstance(value, (*_LEAF_TYPES, Loop, Branch))


def flatten(body: Body) -> tuple[Declaration, ...]:
    """
    Normalize a body into a tuple of declarations.

    Raises:
        TypeError: If the body contains something that is not a declaration.
    """
    if body is None:
        return ()
    if is_declaration(body):
        return (_typing.cast(Declaration, body),)
    if isinstance(body, (str, bytes)) or not isinstance(body, _abc.Iterable):
        raise TypeError(f"Expected a declaration, got {type(body).__name__}")
    result = tuple(body)
    for item in result:
        if not is_declaration(item):
            raise TypeError(f"Expected a declaration, got {type(item).__name__}")
    return result


def each(
    items: _typing.Iterable[_T],
    body: _typing.Callable[[_T], Body],
    label: str = "each",
) -> Loop:
    """
    Declare a block once per item.

    Args:
        items: Values to iterate; consumed immediately.
        body: Called with each item; returns the declarations for it.
        label: Name used in structural error details.

    Example:
        describe(
            "parsing",
            each(["1", "22"], lambda s: it(f"parses {s}", lambda: int(s))),
        )
    """
    return Loop(tuple(flatten(body(item)) for item in items), label)


def either(condition: _typing.Any, if_true: Body, if_false: Body = None) -> Branch:
    """
    Declare one of two blocks depending on a condition.

    The condition is evaluated once, when the declaration is made.
    """
    return Branch(bool(condition), flatten(if_true), flatten(if_false))
