"""
Focus and exclusion filtering.

Evaluated independently at every group level while running: an element
is removed when excluded, and when any remaining sibling is focused
(directly or through a descendant) only the focused siblings run.
"""

from __future__ import annotations

import typing as _typing

import verdandi.core.elements as elements


def select_executable(
    children: _typing.Sequence[elements.ExampleElement],
) -> list[elements.ExampleElement]:
    """
    Compute which of a group's children run.

    Args:
        children: The group's direct children in declaration order.

    Returns:
        The executable subset, in declaration order. Empty when every
        child was excluded.
    """
    remaining = [child for child in children if not child.is_excluded]
    focused = [child for child in remaining if child.is_deep_focused]
    return focused if focused else remaining


def select_hooks(hooks: _typing.Iterable[elements.Hook]) -> list[elements.Hook]:
    """Drop excluded hooks."""
    return [hook for hook in hooks if not hook.is_excluded]


def select_wrap_hooks(
    hooks: _typing.Iterable[elements.WrapHook],
) -> list[elements.WrapHook]:
    """Drop excluded wrap hooks."""
    return [hook for hook in hooks if not hook.is_excluded]
