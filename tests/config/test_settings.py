"""Tests for configuration settings."""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pydantic as _pydantic
import pytest as _pytest

import verdandi.config as config


def _write(path: _pathlib.Path, text: str) -> _pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestSettingsDefaults:
    """Test Settings default values when environment is clean."""

    def test_execution_defaults(self, clean_settings: config.Settings) -> None:
        """The pool size is left to the executor and failures raise."""
        assert clean_settings.execution.max_workers is None
        assert clean_settings.execution.raise_on_failure is True

    def test_reporting_defaults(self, clean_settings: config.Settings) -> None:
        """No console reporter is added by default."""
        assert clean_settings.reporting.console == "none"
        assert clean_settings.reporting.show_passed is True

    def test_no_unknown_fields(self, clean_settings: config.Settings) -> None:
        """A clean config has nothing to report."""
        assert clean_settings.get_unknown_fields() == {}


class TestEnvironmentOverrides:
    """Test VERDANDI_* environment variables."""

    def test_nested_env_vars(self, clean_env: dict[str, str]) -> None:
        """Double underscore reaches nested sections."""
        env = {
            **clean_env,
            "VERDANDI_EXECUTION__MAX_WORKERS": "8",
            "VERDANDI_REPORTING__CONSOLE": "rich",
        }
        with _mock.patch.dict(_os.environ, env, clear=True):
            settings = config.Settings.construct_without_dotenv()
        assert settings.execution.max_workers == 8
        assert settings.reporting.console == "rich"

    def test_invalid_console_is_rejected(self, clean_env: dict[str, str]) -> None:
        """Only known reporter names are accepted."""
        env = {**clean_env, "VERDANDI_REPORTING__CONSOLE": "fancy"}
        with _mock.patch.dict(_os.environ, env, clear=True):
            with _pytest.raises(_pydantic.ValidationError):
                config.Settings.construct_without_dotenv()

    def test_max_workers_must_be_positive(self, isolated_env: _typing.Any) -> None:
        """A pool of zero workers is rejected."""
        with isolated_env:
            with _pytest.raises(_pydantic.ValidationError):
                config.Settings.construct_without_dotenv(execution={"max_workers": 0})

    def test_constructor_beats_env(self, clean_env: dict[str, str]) -> None:
        """Constructor arguments have the highest precedence."""
        env = {**clean_env, "VERDANDI_EXECUTION__RAISE_ON_FAILURE": "true"}
        with _mock.patch.dict(_os.environ, env, clear=True):
            settings = config.Settings.construct_without_dotenv(
                execution={"raise_on_failure": False}
            )
        assert settings.execution.raise_on_failure is False

    def test_env_file(self, clean_env: dict[str, str], tmp_path: _pathlib.Path) -> None:
        """VERDANDI_ENV_FILE names a dotenv file read at construction."""
        env_file = _write(tmp_path / "test.env", "VERDANDI_REPORTING__SHOW_PASSED=false\n")
        env = {**clean_env}
        with _mock.patch.dict(_os.environ, env, clear=True):
            settings = config.Settings(_env_file=str(env_file))  # type: ignore[call-arg]
        assert settings.reporting.show_passed is False


class TestYamlLayers:
    """Test the user and project YAML layers."""

    def test_user_config(self, clean_env: dict[str, str]) -> None:
        """The user config file is read from VERDANDI_CONFIG_DIR."""
        _write(
            _pathlib.Path(clean_env["VERDANDI_CONFIG_DIR"]) / "config.yaml",
            "execution:\n  max_workers: 3\n",
        )
        with _mock.patch.dict(_os.environ, clean_env, clear=True):
            settings = config.Settings.construct_without_dotenv()
        assert settings.execution.max_workers == 3

    def test_project_overrides_user(
        self,
        clean_env: dict[str, str],
        tmp_path: _pathlib.Path,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> None:
        """Project config wins key by key over user config."""
        _write(
            _pathlib.Path(clean_env["VERDANDI_CONFIG_DIR"]) / "config.yaml",
            "execution:\n  max_workers: 3\n  raise_on_failure: false\n",
        )
        project = tmp_path / "project"
        _write(project / ".verdandi" / "config.yaml", "execution:\n  max_workers: 6\n")
        monkeypatch.chdir(project)
        with _mock.patch.dict(_os.environ, clean_env, clear=True):
            settings = config.Settings.construct_without_dotenv()
        assert settings.execution.max_workers == 6
        assert settings.execution.raise_on_failure is False

    def test_env_overrides_yaml(self, clean_env: dict[str, str]) -> None:
        """Environment variables win over config files."""
        _write(
            _pathlib.Path(clean_env["VERDANDI_CONFIG_DIR"]) / "config.yaml",
            "reporting:\n  console: plain\n",
        )
        env = {**clean_env, "VERDANDI_REPORTING__CONSOLE": "rich"}
        with _mock.patch.dict(_os.environ, env, clear=True):
            settings = config.Settings.construct_without_dotenv()
        assert settings.reporting.console == "rich"

    def test_unknown_fields_are_reported(self, clean_env: dict[str, str]) -> None:
        """Typos in config files are kept and listed by dotted path."""
        _write(
            _pathlib.Path(clean_env["VERDANDI_CONFIG_DIR"]) / "config.yaml",
            "execution:\n  max_worker: 3\ncolour: true\n",
        )
        with _mock.patch.dict(_os.environ, clean_env, clear=True):
            settings = config.Settings.construct_without_dotenv()
        assert settings.get_unknown_fields() == {
            "colour": True,
            "execution.max_worker": 3,
        }

    def test_malformed_yaml_fails(self, clean_env: dict[str, str]) -> None:
        """A broken config file is an error, not silently ignored."""
        _write(
            _pathlib.Path(clean_env["VERDANDI_CONFIG_DIR"]) / "config.yaml",
            "execution: [unclosed\n",
        )
        with _mock.patch.dict(_os.environ, clean_env, clear=True):
            with _pytest.raises(config.ConfigFileError, match="invalid YAML"):
                config.Settings.construct_without_dotenv()


class TestFindProjectRoot:
    """Tests for find_project_root()."""

    def test_finds_marker_directory(self, tmp_path: _pathlib.Path) -> None:
        """A .verdandi directory marks the root."""
        (tmp_path / ".verdandi").mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert config.find_project_root(nested) == tmp_path.resolve()

    def test_finds_pyproject(self, tmp_path: _pathlib.Path) -> None:
        """pyproject.toml marks the root."""
        _write(tmp_path / "pyproject.toml", "")
        nested = tmp_path / "src"
        nested.mkdir()
        assert config.find_project_root(nested) == tmp_path.resolve()
