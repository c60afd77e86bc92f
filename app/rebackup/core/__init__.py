"""Core services for rebackup.

This module exports profile handling, configuration paths and files
list rendering.
"""

from rebackup.core.output import NonUtf8Policy, format_file_list, write_file_list
from rebackup.core.paths import get_config_dir, get_profile_path
from rebackup.core.profile import WalkProfile, load_profile, merge_profile, save_profile

__all__ = [
    "NonUtf8Policy",
    "WalkProfile",
    "format_file_list",
    "get_config_dir",
    "get_profile_path",
    "load_profile",
    "merge_profile",
    "save_profile",
    "write_file_list",
]
