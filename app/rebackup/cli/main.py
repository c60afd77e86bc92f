"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from rebackup import __version__
from rebackup.cli.commands import config, listing
from rebackup.utils.logging import configure_logging, level_from_flags

# Create main Typer app
app = typer.Typer(
    name="rebackup",
    help="Build the list of files to back up from a directory tree.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rebackup version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Display debug information.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only display errors.",
        ),
    ] = False,
) -> None:
    """rebackup - build the list of files to back up from a directory tree.

    Walks a source directory, applies include/exclude rules, and prints
    the resulting files list for backup tools to consume.
    """
    configure_logging(level_from_flags(verbose, quiet))

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="list")(listing.list_files)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
