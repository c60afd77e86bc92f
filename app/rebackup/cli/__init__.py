"""CLI package for rebackup.

This package contains the Typer application and all subcommands.
"""

from rebackup.cli.main import app

__all__ = ["app"]
