"""Tests for config section types."""

import pydantic as _pydantic
import pytest as _pytest

import verdandi.config.types as types


class TestConfigBase:
    """Tests for extra field introspection."""

    def test_extra_fields_are_kept(self) -> None:
        """Unknown keys end up in get_extra_fields()."""
        section = types.ExecutionConfig(max_workers=2, max_worker=3)  # type: ignore[call-arg]
        assert section.max_workers == 2
        assert section.get_extra_fields() == {"max_worker": 3}

    def test_collect_uses_dotted_prefix(self) -> None:
        """collect_all_extra_fields() prefixes keys with the section path."""
        section = types.ReportingConfig(colour=True)  # type: ignore[call-arg]
        assert section.collect_all_extra_fields("reporting") == {"reporting.colour": True}

    def test_no_extras(self) -> None:
        """A section without unknown keys reports nothing."""
        assert types.ExecutionConfig().collect_all_extra_fields() == {}


class TestSections:
    """Tests for section validation."""

    def test_console_choices(self) -> None:
        """console accepts none, plain and rich only."""
        for choice in ("none", "plain", "rich"):
            assert types.ReportingConfig(console=choice).console == choice
        with _pytest.raises(_pydantic.ValidationError):
            types.ReportingConfig(console="html")  # type: ignore[arg-type]

    def test_max_workers_bounds(self) -> None:
        """max_workers is None or at least one."""
        assert types.ExecutionConfig(max_workers=None).max_workers is None
        with _pytest.raises(_pydantic.ValidationError):
            types.ExecutionConfig(max_workers=0)
