"""
Traits attached to test elements.

Traits are markers consulted by the filter pass and the runner:
- FOCUSED: narrows execution in the containing group to focused branches
- EXCLUDED: removes the element from execution
- CONCURRENT: runs a group's children concurrently

Focusing and excluding are development-time tools and should usually not
be committed.
"""

from __future__ import annotations

import enum as _enum
import typing as _typing


class Trait(_enum.Enum):
    """Markers that change how an element is selected or executed."""

    FOCUSED = "focused"
    """Only focused branches of the containing group run."""

    EXCLUDED = "excluded"
    """The element is removed from execution."""

    CONCURRENT = "concurrent"
    """The group's children run concurrently."""

    @property
    def group_only(self) -> bool:
        """Whether the trait only has meaning on a group."""
        return self is Trait.CONCURRENT


TraitLike = Trait | str
"""A trait or its string value (e.g. "focused")."""


def normalize(traits: _typing.Iterable[TraitLike] | None) -> frozenset[Trait]:
    """
    Convert an iterable of traits or trait names into a frozenset of Trait.

    Raises:
        ValueError: If a string does not name a known trait.
    """
    if not traits:
        return frozenset()
    result: set[Trait] = set()
    for trait in traits:
        if isinstance(trait, Trait):
            result.add(trait)
            continue
        try:
            result.add(Trait(str(trait).lower()))
        except ValueError:
            known = ", ".join(t.value for t in Trait)
            raise ValueError(f"Unknown trait {trait!r} (known: {known})") from None
    return frozenset(result)


def with_trait(traits: _typing.Iterable[TraitLike] | None, trait: Trait) -> frozenset[Trait]:
    """Return the normalized traits with one more trait added."""
    return normalize(traits) | {trait}
