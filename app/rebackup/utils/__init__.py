"""Utility modules for rebackup.

This module exports commonly used utility functions.
"""

from rebackup.utils.formatting import (
    console,
    create_settings_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from rebackup.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_settings_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
