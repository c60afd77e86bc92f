"""CLI commands for rebackup.

This package contains all subcommand implementations.
"""

from rebackup.cli.commands import config, listing

__all__ = ["config", "listing"]
