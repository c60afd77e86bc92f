"""Walk profile: reusable walker settings stored as TOML.

A profile gathers everything the command line can configure about a walk
(patterns, shell filters, presets, symlink and empty directory handling)
so it can be kept in a file and combined with command line flags.

The default profile is stored in ~/.config/rebackup/profile.toml
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from rebackup.core.paths import get_profile_path
from rebackup.rules.presets import PRESETS


class ShellSettings(BaseModel):
    """Shell used to run the commands of shell filters.

    Attributes:
        shell: Shell binary. If None, the platform default is used
            (``sh -c`` on POSIX, ``cmd.exe /C`` on Windows).
        head_args: Shell arguments placed before the command.
        tail_args: Shell arguments placed after the command.
        display_output: Let commands print to the terminal.
    """

    model_config = ConfigDict(extra="forbid")

    shell: Annotated[str | None, Field(description="Shell binary")] = None
    head_args: Annotated[
        list[str],
        Field(default_factory=list, description="Arguments before the command"),
    ]
    tail_args: Annotated[
        list[str],
        Field(default_factory=list, description="Arguments after the command"),
    ]
    display_output: Annotated[bool, Field(description="Show commands' output")] = False

    @model_validator(mode="after")
    def validate_args_require_shell(self) -> ShellSettings:
        """Validate that custom shell arguments come with a custom shell."""
        if (self.head_args or self.tail_args) and self.shell is None:
            msg = "Shell head/tail arguments require a custom shell"
            raise ValueError(msg)
        return self


class WalkProfile(BaseModel):
    """Complete set of walker settings.

    Attributes:
        follow_symlinks: Follow symbolic links.
        drop_empty_dirs: Drop empty directories from the list.
        include_absolute: Glob patterns whose matches skip all following rules.
        include_only: Glob patterns of items to include.
        exclude: Glob patterns of items to exclude.
        filter_with: Shell commands; items are excluded when a command fails.
        presets: Names of built-in rules to enable.
        shell: Shell settings for ``filter_with`` commands.
    """

    model_config = ConfigDict(extra="forbid")

    follow_symlinks: Annotated[bool, Field(description="Follow symbolic links")] = False
    drop_empty_dirs: Annotated[bool, Field(description="Drop empty directories")] = False
    include_absolute: Annotated[
        list[str],
        Field(default_factory=list, description="Patterns skipping all following rules"),
    ]
    include_only: Annotated[
        list[str],
        Field(default_factory=list, description="Patterns of items to include"),
    ]
    exclude: Annotated[
        list[str],
        Field(default_factory=list, description="Patterns of items to exclude"),
    ]
    filter_with: Annotated[
        list[str],
        Field(default_factory=list, description="Shell commands filtering items"),
    ]
    presets: Annotated[
        list[str],
        Field(default_factory=list, description="Built-in rules to enable"),
    ]
    shell: Annotated[
        ShellSettings,
        Field(default_factory=ShellSettings, description="Shell settings"),
    ]

    @field_validator("presets")
    @classmethod
    def validate_presets(cls, value: list[str]) -> list[str]:
        """Validate that every preset name is known."""
        unknown = [name for name in value if name not in PRESETS]
        if unknown:
            msg = f"Unknown presets: {', '.join(unknown)} (available: {', '.join(PRESETS)})"
            raise ValueError(msg)
        return value

    @property
    def rule_count(self) -> int:
        """Number of rules this profile produces."""
        return (
            len(self.filter_with)
            + len(self.include_absolute)
            + len(self.include_only)
            + len(self.exclude)
            + len(self.presets)
        )


class ProfileError(Exception):
    """Base exception for profile-related errors."""


class ProfileNotFoundError(ProfileError):
    """Raised when the profile file is not found."""


class ProfileParseError(ProfileError):
    """Raised when the profile file cannot be parsed."""


class ProfileValidationError(ProfileError):
    """Raised when the profile content is invalid."""


def load_profile(path: Path | None = None) -> WalkProfile:
    """Load and validate a walk profile from a TOML file.

    Args:
        path: Path to the profile file. If None, uses the default profile path.

    Returns:
        Validated WalkProfile object.

    Raises:
        ProfileNotFoundError: If the profile file doesn't exist.
        ProfileParseError: If the TOML syntax is invalid or the file is not UTF-8.
        ProfileValidationError: If the content doesn't match the schema.
    """
    profile_path = path or get_profile_path()

    if not profile_path.exists():
        raise ProfileNotFoundError(f"Profile not found: {profile_path}")

    try:
        with open(profile_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ProfileParseError(f"Invalid TOML syntax: {e}") from e
    except UnicodeDecodeError as e:
        raise ProfileParseError(f"Profile is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ProfileError(f"Failed to read profile: {e}") from e

    try:
        return WalkProfile.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(f"Invalid profile content: {e}") from e


def save_profile(profile: WalkProfile, path: Path | None = None) -> Path:
    """Save a walk profile to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        profile: The WalkProfile object to save.
        path: Path to save the profile. If None, uses the default profile path.

    Returns:
        Path where the profile was saved.

    Raises:
        ProfileError: If the file cannot be written.
    """
    import os
    from tempfile import NamedTemporaryFile

    profile_path = path or get_profile_path()

    # Ensure parent directory exists
    profile_path.parent.mkdir(parents=True, exist_ok=True)

    data = _profile_to_dict(profile)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=profile_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(profile_path))
    except OSError as e:
        # Cleanup temp file on failure
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ProfileError(f"Failed to write profile: {e}") from e

    return profile_path


def merge_profile(
    base: WalkProfile,
    *,
    follow_symlinks: bool = False,
    drop_empty_dirs: bool = False,
    include_absolute: list[str] | None = None,
    include_only: list[str] | None = None,
    exclude: list[str] | None = None,
    filter_with: list[str] | None = None,
    presets: list[str] | None = None,
    shell: str | None = None,
    shell_head_args: list[str] | None = None,
    shell_tail_args: list[str] | None = None,
    display_shell_output: bool = False,
) -> WalkProfile:
    """Fold command line settings into a profile.

    Lists are appended after the profile's own entries (so profile rules
    run first), flags are OR-ed, and a shell given on the command line
    replaces the profile's shell along with its arguments.

    Args:
        base: Profile loaded from file (or the default profile).

    Returns:
        New validated WalkProfile.

    Raises:
        ProfileValidationError: If the merged settings are invalid.
    """
    shell_data = base.shell.model_dump()
    if shell is not None:
        shell_data.update(shell=shell, head_args=[], tail_args=[])
    if shell_head_args:
        shell_data["head_args"] = shell_head_args
    if shell_tail_args:
        shell_data["tail_args"] = shell_tail_args
    shell_data["display_output"] = shell_data["display_output"] or display_shell_output

    data = {
        "follow_symlinks": base.follow_symlinks or follow_symlinks,
        "drop_empty_dirs": base.drop_empty_dirs or drop_empty_dirs,
        "include_absolute": [*base.include_absolute, *(include_absolute or [])],
        "include_only": [*base.include_only, *(include_only or [])],
        "exclude": [*base.exclude, *(exclude or [])],
        "filter_with": [*base.filter_with, *(filter_with or [])],
        "presets": [*base.presets, *(presets or [])],
        "shell": shell_data,
    }

    try:
        return WalkProfile.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(f"Invalid walk settings: {e}") from e


def _profile_to_dict(profile: WalkProfile) -> dict[str, object]:
    """Convert a WalkProfile to a dictionary for TOML serialization.

    TOML has no null value, so an unset shell is left out.

    Args:
        profile: The WalkProfile to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    shell: dict[str, object] = {
        "head_args": profile.shell.head_args,
        "tail_args": profile.shell.tail_args,
        "display_output": profile.shell.display_output,
    }
    if profile.shell.shell is not None:
        shell["shell"] = profile.shell.shell

    return {
        "follow_symlinks": profile.follow_symlinks,
        "drop_empty_dirs": profile.drop_empty_dirs,
        "include_absolute": profile.include_absolute,
        "include_only": profile.include_only,
        "exclude": profile.exclude,
        "filter_with": profile.filter_with,
        "presets": profile.presets,
        "shell": shell,
    }
