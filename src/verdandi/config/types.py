"""Configuration section types for Verdandi settings.

These are the nested sections of the main Settings class:
- ExecutionConfig: thread pool size, failure policy
- ReportingConfig: console reporter selection and verbosity

All sections use `extra="allow"` so unknown keys are preserved and can
be listed with `collect_all_extra_fields()` when auditing a config file.
"""

import typing as _typing

import pydantic as _pydantic

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config sections.

    Unknown fields are kept in model_extra rather than dropped, so typos
    in config files can be reported.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but are not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self, prefix: str = "") -> dict[str, _typing.Any]:
        """
        Recursively collect unknown fields from this section and its children.

        Returns a flat dict keyed by dotted path, e.g.
        {"execution.max_worker": 4}.
        """
        result: dict[str, _typing.Any] = {}
        for key, value in self.get_extra_fields().items():
            result[f"{prefix}.{key}" if prefix else key] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Execution Settings
# =============================================================================


class ExecutionConfig(ConfigBase):
    """
    Runner settings.

    YAML section: execution.*
    """

    max_workers: int | None = _pydantic.Field(default=None, ge=1)
    """Thread pool size for concurrent groups in the blocking runner (None = default)."""

    raise_on_failure: bool = True
    """Raise ExamplesFailedError at the end of a run with failed examples."""


# =============================================================================
# Reporting Settings
# =============================================================================


class ReportingConfig(ConfigBase):
    """
    Console reporting settings.

    YAML section: reporting.*
    """

    console: _typing.Literal["none", "plain", "rich"] = "none"
    """Reporter the runner adds automatically."""

    show_passed: bool = True
    """Print passed examples, not only failures and skips."""
