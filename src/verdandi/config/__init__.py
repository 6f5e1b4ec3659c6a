"""
Configuration module for Verdandi.

Uses pydantic-settings for environment variable loading.
"""

from verdandi.config.settings import Settings, find_project_root
from verdandi.config.sources import ConfigFileError
from verdandi.config.types import ExecutionConfig, ReportingConfig

__all__ = [
    "ConfigFileError",
    "ExecutionConfig",
    "ReportingConfig",
    "Settings",
    "find_project_root",
]
