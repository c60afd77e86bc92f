"""Turn a walk profile into a walker configuration."""

from rebackup.core.profile import WalkProfile
from rebackup.rules.glob_patterns import make_pattern_filters
from rebackup.rules.presets import get_preset
from rebackup.rules.shell_filters import make_shell_cmd_filters
from rebackup.walker.config import WalkerConfig, WalkerRule


def build_rules(profile: WalkProfile) -> list[WalkerRule]:
    """Build the ordered rule list described by a profile.

    Order: shell filters, then glob patterns (absolute includes, includes,
    excludes), then presets.

    Raises:
        InvalidPatternError: If a glob pattern is malformed.
        UnknownPresetError: If a preset name is not registered.
    """
    rules = make_shell_cmd_filters(
        profile.filter_with,
        shell=profile.shell.shell,
        head_args=profile.shell.head_args,
        tail_args=profile.shell.tail_args,
        display_output=profile.shell.display_output,
    )
    rules.extend(
        make_pattern_filters(
            include_absolute=profile.include_absolute,
            include_only=profile.include_only,
            exclude=profile.exclude,
        )
    )
    rules.extend(get_preset(name) for name in profile.presets)
    return rules


def build_config(profile: WalkProfile) -> WalkerConfig:
    """Build the complete walker configuration described by a profile."""
    return WalkerConfig(
        rules=tuple(build_rules(profile)),
        follow_symlinks=profile.follow_symlinks,
        drop_empty_dirs=profile.drop_empty_dirs,
    )
