"""
Shared pytest fixtures for Verdandi tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import verdandi.config as config
import verdandi.reporting as reporting

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "VERDANDI_ENV_FILE",
    "VERDANDI_CONFIG_DIR",
    "VERDANDI_EXECUTION__MAX_WORKERS",
    "VERDANDI_EXECUTION__RAISE_ON_FAILURE",
    "VERDANDI_REPORTING__CONSOLE",
    "VERDANDI_REPORTING__SHOW_PASSED",
]


@_pytest.fixture
def clean_env(tmp_path: _pathlib.Path) -> dict[str, str]:
    """
    Return environment dict with Verdandi keys removed.

    VERDANDI_CONFIG_DIR points at an empty directory so the user's own
    config file is never read.
    """
    env = {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    env["VERDANDI_CONFIG_DIR"] = str(config_dir)
    return env


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]) -> _typing.Any:
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def clean_settings(isolated_env: _typing.Any) -> config.Settings:
    """Settings instance isolated from environment and .env file."""
    with isolated_env:
        return config.Settings.construct_without_dotenv()


@_pytest.fixture
def quiet_settings(clean_settings: config.Settings) -> config.Settings:
    """Settings that do not raise at the end of a run with failures."""
    clean_settings.execution.raise_on_failure = False
    return clean_settings


@_pytest.fixture
def collector() -> reporting.CollectingReporter:
    """Reporter that keeps every outcome in memory."""
    return reporting.CollectingReporter()


@_pytest.fixture
def calls() -> list[str]:
    """Ordered record of callback invocations (list.append is thread-safe)."""
    return []
