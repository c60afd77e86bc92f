"""Rule providers for the walker.

This module provides glob pattern rules, shell command filters and
built-in presets. Rule assembly from a profile lives in
rebackup.rules.builder, which is kept out of this namespace because it
depends on the profile model.
"""

from rebackup.rules.glob_patterns import InvalidPatternError, make_pattern_filters
from rebackup.rules.presets import PRESETS, UnknownPresetError, get_preset
from rebackup.rules.shell_filters import make_shell_cmd_filters

__all__ = [
    "PRESETS",
    "InvalidPatternError",
    "UnknownPresetError",
    "get_preset",
    "make_pattern_filters",
    "make_shell_cmd_filters",
]
