"""List command implementation.

Walks a source directory and prints (or writes) the files list.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from rebackup.core.output import (
    NonUtf8PathError,
    NonUtf8Policy,
    PathOutsideSourceError,
    format_file_list,
    write_file_list,
)
from rebackup.core.profile import ProfileError, WalkProfile, load_profile, merge_profile
from rebackup.rules.builder import build_config
from rebackup.rules.glob_patterns import InvalidPatternError
from rebackup.rules.presets import UnknownPresetError
from rebackup.utils.formatting import print_error, print_info, print_success, print_warning
from rebackup.walker.engine import walk
from rebackup.walker.errors import WalkerError

logger = logging.getLogger(__name__)

# Exit codes
EXIT_BAD_SOURCE = 2
EXIT_WALK_FAILED = 3
EXIT_NON_UTF8 = 4
EXIT_WRITE_FAILED = 5
EXIT_BAD_RULES = 10


def list_files(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(help="Source directory."),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (prints to STDOUT if empty)."),
    ] = None,
    absolute: Annotated[
        bool,
        typer.Option("--absolute", "-a", help="Output absolute paths (default is relative)."),
    ] = False,
    prefix: Annotated[
        str | None,
        typer.Option("--prefix", "-p", help="Prefix all output lines with a specific string."),
    ] = None,
    no_sort: Annotated[
        bool,
        typer.Option("--no-sort", help="Don't sort the items by path."),
    ] = False,
    allow_non_utf8_filenames: Annotated[
        bool,
        typer.Option(
            "--allow-non-utf8-filenames",
            help="Convert invalid UTF-8 filenames to lossy filenames.",
        ),
    ] = False,
    ignore_non_utf8_filenames: Annotated[
        bool,
        typer.Option(
            "--ignore-non-utf8-filenames",
            "-i",
            help="Don't back up items with invalid UTF-8 filenames.",
        ),
    ] = False,
    follow_symlinks: Annotated[
        bool,
        typer.Option("--follow-symlinks", "-s", help="Follow symbolic links."),
    ] = False,
    drop_empty_dirs: Annotated[
        bool,
        typer.Option("--drop-empty-dirs", help="Drop empty directories."),
    ] = False,
    filter_with: Annotated[
        list[str] | None,
        typer.Option(
            "--filter-with",
            "-f",
            help="Exclude items when the command fails (item path in $REBACKUP_ITEM).",
        ),
    ] = None,
    shell: Annotated[
        str | None,
        typer.Option("--shell", help="Shell binary used for filtering."),
    ] = None,
    shell_head_args: Annotated[
        list[str] | None,
        typer.Option("--shell-head-args", help="Shell arguments provided before commands."),
    ] = None,
    shell_tail_args: Annotated[
        list[str] | None,
        typer.Option("--shell-tail-args", help="Shell arguments provided after commands."),
    ] = None,
    display_shell_output: Annotated[
        bool,
        typer.Option("--display-shell-output", help="Print commands' STDOUT and STDERR."),
    ] = False,
    include_absolute: Annotated[
        list[str] | None,
        typer.Option("--include-absolute", help="Ignore all following rules when matching."),
    ] = None,
    include_only: Annotated[
        list[str] | None,
        typer.Option("--include-only", help="Include items matching a glob pattern."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-e", help="Exclude items matching a glob pattern."),
    ] = None,
    preset: Annotated[
        list[str] | None,
        typer.Option("--preset", help="Enable a built-in rule (e.g. dotgit, gitignore)."),
    ] = None,
    profile_path: Annotated[
        Path | None,
        typer.Option("--profile", "-c", help="Load walk settings from a TOML profile."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Build the list without printing or writing it (useful for debugging).",
        ),
    ] = False,
) -> None:
    """Walk SOURCE and print the list of files to back up.

    Rules run in this order: shell filters, glob patterns (absolute
    includes, includes, excludes), then presets. Rules from a profile run
    before the ones given on the command line.

    Examples:
        rebackup list ~/docs                            # Relative, sorted list
        rebackup list ~/docs -e '*.tmp' -e 'cache'      # Exclude patterns
        rebackup list ~/code --preset gitignore -o list.txt
        rebackup list ~/docs -f 'test -r "$REBACKUP_ITEM"'
    """
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))

    base = WalkProfile()
    if profile_path is not None:
        try:
            base = load_profile(profile_path)
        except ProfileError as e:
            print_error(f"Failed to load profile: {e}")
            raise typer.Exit(code=EXIT_BAD_RULES) from e

    if (shell_head_args or shell_tail_args) and shell is None and base.shell.shell is None:
        print_error("--shell-head-args and --shell-tail-args require --shell.")
        raise typer.Exit(code=EXIT_BAD_SOURCE)

    try:
        settings = merge_profile(
            base,
            follow_symlinks=follow_symlinks,
            drop_empty_dirs=drop_empty_dirs,
            include_absolute=include_absolute,
            include_only=include_only,
            exclude=exclude,
            filter_with=filter_with,
            presets=preset,
            shell=shell,
            shell_head_args=shell_head_args,
            shell_tail_args=shell_tail_args,
            display_shell_output=display_shell_output,
        )
        config = build_config(settings)
    except (ProfileError, InvalidPatternError, UnknownPresetError) as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_BAD_RULES) from e

    if not source.is_dir():
        print_error(f"Source directory was not found at path: {source}")
        raise typer.Exit(code=EXIT_BAD_SOURCE)

    try:
        canonical_source = source.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        print_error(f"Failed to canonicalize source directory: {e} (from path {source})")
        raise typer.Exit(code=EXIT_BAD_SOURCE) from e

    logger.info("Building files list...")

    try:
        items = walk(canonical_source, config)
    except WalkerError as e:
        print_error(f"Failed to build files list: {e}")
        raise typer.Exit(code=EXIT_WALK_FAILED) from e

    logger.debug("Converting filenames...")

    if allow_non_utf8_filenames and ignore_non_utf8_filenames:
        print_warning("--allow-non-utf8-filenames overrides --ignore-non-utf8-filenames.")

    if allow_non_utf8_filenames:
        policy = NonUtf8Policy.LOSSY
    elif ignore_non_utf8_filenames:
        policy = NonUtf8Policy.IGNORE
    else:
        policy = NonUtf8Policy.FAIL

    try:
        lines = format_file_list(
            items,
            canonical_source,
            absolute=absolute,
            prefix=prefix,
            sort=not no_sort,
            non_utf8=policy,
        )
    except NonUtf8PathError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_NON_UTF8) from e
    except PathOutsideSourceError as e:
        print_error(f"Internal: {e}")
        raise typer.Exit(code=EXIT_WALK_FAILED) from e

    if dry_run:
        if not quiet:
            print_info(f"Dry-run: {len(lines)} item(s) would be listed.")
        return

    if output is None:
        typer.echo("\n".join(lines))
        return

    try:
        dest = write_file_list(lines, output)
    except OSError as e:
        print_error(f"Failed to write output file: {e}")
        raise typer.Exit(code=EXIT_WRITE_FAILED) from e

    if not quiet:
        print_success(f"Wrote {len(lines)} item(s) to {dest}")

    logger.debug("Done!")
