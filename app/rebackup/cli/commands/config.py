"""Profile management commands.

Provides commands to create, inspect and locate the walk profile.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from rebackup.core.paths import get_profile_path
from rebackup.core.profile import ProfileError, WalkProfile, load_profile, save_profile
from rebackup.rules.presets import PRESETS
from rebackup.utils.formatting import (
    console,
    create_settings_table,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Manage walk profiles.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option("--path", help="Profile file to create (default: XDG config dir)."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing profile."),
    ] = False,
) -> None:
    """Create a profile with default settings."""
    profile_path = path or get_profile_path()

    if profile_path.exists() and not force:
        print_error(f"Profile already exists: {profile_path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_profile(WalkProfile(), profile_path)
    except ProfileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Profile created: {saved}")


@app.command()
def show(
    path: Annotated[
        Path | None,
        typer.Option("--path", help="Profile file to show (default: XDG config dir)."),
    ] = None,
) -> None:
    """Display the settings of a profile."""
    profile_path = path or get_profile_path()

    try:
        profile = load_profile(profile_path)
    except ProfileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = create_settings_table(f"Profile ({profile_path})")
    table.add_row("follow_symlinks", str(profile.follow_symlinks))
    table.add_row("drop_empty_dirs", str(profile.drop_empty_dirs))
    table.add_row("include_absolute", _format_list(profile.include_absolute))
    table.add_row("include_only", _format_list(profile.include_only))
    table.add_row("exclude", _format_list(profile.exclude))
    table.add_row("filter_with", _format_list(profile.filter_with))
    table.add_row("presets", _format_list(profile.presets))
    table.add_row("shell", escape(profile.shell.shell or "") or "[muted](platform default)[/]")
    table.add_row("shell.head_args", _format_list(profile.shell.head_args))
    table.add_row("shell.tail_args", _format_list(profile.shell.tail_args))
    table.add_row("shell.display_output", str(profile.shell.display_output))
    console.print(table)

    console.print(f"\n[dim]{profile.rule_count} rule(s) configured[/dim]")


@app.command()
def path() -> None:
    """Print the default profile location."""
    typer.echo(str(get_profile_path()))


@app.command()
def presets() -> None:
    """List the built-in rules available with --preset."""
    table = create_settings_table("Presets", key_header="Preset", value_header="Description")
    for name, factory in PRESETS.items():
        table.add_row(name, factory().display_description)
    console.print(table)


def _format_list(values: list[str]) -> str:
    """Format a list of settings for table display."""
    if not values:
        return "[muted]-[/]"
    return "\n".join(escape(value) for value in values)
