"""XDG-compliant path management for rebackup.

This module provides standardized paths following the XDG Base Directory
Specification for configuration storage.

XDG defaults:
- Config: ~/.config/rebackup/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "rebackup"

PROFILE_FILENAME = "profile.toml"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/rebackup/ (or XDG_CONFIG_HOME/rebackup/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_profile_path() -> Path:
    """Get the default walk profile path.

    Returns:
        Path to ~/.config/rebackup/profile.toml.
    """
    return get_config_dir() / PROFILE_FILENAME
