"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with VERDANDI_ prefix
3. .env file named by VERDANDI_ENV_FILE (if set and present)
4. Layered YAML config files:
   - Project config: .verdandi/config.yaml (highest)
   - User config: ~/.config/verdandi/config.yaml

Nested config uses double underscore delimiter:
  VERDANDI_EXECUTION__MAX_WORKERS=4
  VERDANDI_REPORTING__CONSOLE=rich
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import verdandi.config.sources as sources
import verdandi.config.types as types
import verdandi.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit VERDANDI_ENV_FILE is honoured. If it is set but the
    file does not exist, nothing is loaded.
    """
    if env_file := _os.environ.get(constants.ENV_FILE_VAR):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Walks up from start_path looking for a .verdandi directory or a
    common project marker, falling back to start_path itself.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    markers = [constants.PROJECT_CONFIG_DIR, "pyproject.toml", "setup.py", "setup.cfg", ".git"]
    current = start_path.resolve()
    while current != current.parent:
        for marker in markers:
            if (current / marker).exists():
                return current
        current = current.parent

    return start_path


class Settings(_pydantic_settings.BaseSettings):
    """
    Verdandi configuration settings.

    All settings can be overridden via environment variables with VERDANDI_ prefix.
    For nested config, use double underscore: VERDANDI_EXECUTION__MAX_WORKERS=4

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (VERDANDI_*)
    3. .env file
    4. Project config (.verdandi/config.yaml)
    5. User config (~/.config/verdandi/config.yaml)
    6. Field defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # VERDANDI_EXECUTION__MAX_WORKERS
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (VERDANDI_* env vars)
        3. dotenv_settings (.env file)
        4. yaml settings (project, then user config.yaml)
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without .env
        interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Nested config sections
    # =========================================================================

    execution: types.ExecutionConfig = _pydantic.Field(
        default_factory=types.ExecutionConfig
    )
    """Runner settings (max_workers, raise_on_failure)."""

    reporting: types.ReportingConfig = _pydantic.Field(
        default_factory=types.ReportingConfig
    )
    """Console reporting settings."""

    def get_unknown_fields(self) -> dict[str, _typing.Any]:
        """
        Collect unknown keys from every level of the config.

        Returns:
            Flat dict of dotted path to value.
        """
        result: dict[str, _typing.Any] = dict(self.model_extra or {})
        for name in ("execution", "reporting"):
            section: types.ConfigBase = getattr(self, name)
            result.update(section.collect_all_extra_fields(name))
        return result
