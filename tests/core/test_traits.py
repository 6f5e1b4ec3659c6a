"""Tests for element traits."""

import pytest as _pytest

import verdandi.core.traits as traits


class TestNormalize:
    """Tests for normalize()."""

    def test_empty_inputs_give_empty_set(self) -> None:
        """None and empty iterables normalize to an empty frozenset."""
        assert traits.normalize(None) == frozenset()
        assert traits.normalize(()) == frozenset()

    def test_accepts_traits_and_names(self) -> None:
        """Trait members and their string values can be mixed."""
        result = traits.normalize([traits.Trait.FOCUSED, "concurrent"])
        assert result == frozenset({traits.Trait.FOCUSED, traits.Trait.CONCURRENT})

    def test_names_are_case_insensitive(self) -> None:
        """Names are matched case-insensitively."""
        assert traits.normalize(["Excluded"]) == frozenset({traits.Trait.EXCLUDED})

    def test_duplicates_collapse(self) -> None:
        """The same trait given twice appears once."""
        assert len(traits.normalize(["focused", traits.Trait.FOCUSED])) == 1

    def test_unknown_name_raises(self) -> None:
        """Unknown names raise ValueError listing the known traits."""
        with _pytest.raises(ValueError, match="Unknown trait 'slow'") as exc_info:
            traits.normalize(["slow"])
        assert "focused" in str(exc_info.value)


class TestTrait:
    """Tests for Trait members."""

    def test_only_concurrent_is_group_only(self) -> None:
        """CONCURRENT only applies to groups."""
        assert traits.Trait.CONCURRENT.group_only
        assert not traits.Trait.FOCUSED.group_only
        assert not traits.Trait.EXCLUDED.group_only

    def test_with_trait_adds_one(self) -> None:
        """with_trait() adds a trait to the normalized input."""
        result = traits.with_trait(["concurrent"], traits.Trait.FOCUSED)
        assert result == frozenset({traits.Trait.CONCURRENT, traits.Trait.FOCUSED})
