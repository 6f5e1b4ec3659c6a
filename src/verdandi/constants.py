"""
Shared constants for Verdandi.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Configuration
ENV_PREFIX = "VERDANDI_"
"""Prefix for all environment variables read by Settings."""

ENV_CONFIG_DIR = "VERDANDI_CONFIG_DIR"
"""Overrides the user config directory (default: ~/.config/verdandi)."""

ENV_FILE_VAR = "VERDANDI_ENV_FILE"
"""Names an explicit .env file to load."""

PROJECT_CONFIG_DIR = ".verdandi"
"""Project-level config directory, relative to the project root."""

CONFIG_FILE_NAME = "config.yaml"
"""File name used for both user and project config."""

# Descriptions
DESCRIPTION_SEPARATOR = ", "
"""Joins element descriptions into a full description."""

HOOK_NAME_SEPARATOR = ": "
"""Separates a hook's phase name from its optional name."""

AROUND_EACH_PHASE_NAME = "around each"
"""Phase name used in wrap hook descriptions."""

# Reporting
DEFAULT_MESSAGE_TRUNCATE_LENGTH = 500
"""Failure messages longer than this are truncated by console reporters."""
