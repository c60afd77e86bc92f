"""Glob pattern rules.

Patterns are matched against an item's path relative to the walk's
source directory, using case-sensitive glob matching where ``*`` may
also cross directory separators. A ``**`` component matches zero or
more directories, so ``**/cache`` also matches ``cache`` at the root.
"""

import fnmatch
from collections.abc import Iterable
from pathlib import Path

from rebackup.walker.config import WalkerConfig, WalkerRule
from rebackup.walker.models import (
    RuleResult,
    exclude_item,
    include_item,
    include_item_absolute,
)

INCLUDE_ABSOLUTE_RULE = "include-pattern-absolute"
INCLUDE_RULE = "include-pattern"
EXCLUDE_RULE = "exclude-pattern"


class InvalidPatternError(ValueError):
    """Raised when a glob pattern is malformed."""


def validate_pattern(pattern: str) -> None:
    """Check that a glob pattern is well formed.

    Rejects empty patterns, unclosed character classes, and ``**``
    wildcards that are not a whole path component (``a**`` or ``***``).

    Raises:
        InvalidPatternError: If the pattern is malformed.
    """
    if not pattern:
        raise InvalidPatternError("Pattern cannot be empty")

    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "[":
            # fnmatch treats a leading "!" or "]" as part of the class
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                msg = f"Invalid pattern '{pattern}': unclosed character class at index {i}"
                raise InvalidPatternError(msg)
            i = close + 1
            continue
        i += 1

    for component in pattern.split("/"):
        if "**" in component and component != "**":
            msg = f"Invalid pattern '{pattern}': '**' must form a whole path component"
            raise InvalidPatternError(msg)


def expand_globstar(pattern: str) -> list[str]:
    """Expand a pattern into fnmatch patterns covering empty ``**/`` matches.

    Each ``**/`` component is either kept or dropped, so ``a/**/b`` gives
    ``a/**/b`` and ``a/b``.
    """
    *parents, name = pattern.split("/")
    variants = [""]
    for component in parents:
        if component == "**":
            variants = [v + choice for v in variants for choice in ("**/", "")]
        else:
            variants = [v + component + "/" for v in variants]
    return list(dict.fromkeys(v + name for v in variants))


def relative_item_path(item_path: Path, source: Path) -> str:
    """Render an item path relative to the source, with forward slashes.

    Paths outside the source are rendered in full.
    """
    try:
        return item_path.relative_to(source).as_posix()
    except ValueError:
        return item_path.as_posix()


def make_pattern_rule(name: str, result: RuleResult, pattern: str) -> WalkerRule:
    """Create a rule returning ``result`` for items matching ``pattern``.

    Args:
        name: Rule name.
        result: Result returned when the pattern matches.
        pattern: Glob pattern, relative to the source directory.

    Returns:
        WalkerRule applying to every item type.

    Raises:
        InvalidPatternError: If the pattern is malformed.
    """
    validate_pattern(pattern)
    variants = expand_globstar(pattern)

    def matches(item_path: Path, _config: WalkerConfig, source: Path) -> bool:
        relative = relative_item_path(item_path, source)
        return any(fnmatch.fnmatchcase(relative, variant) for variant in variants)

    def action(_item_path: Path, _config: WalkerConfig, _source: Path) -> RuleResult:
        return result

    return WalkerRule(
        name=name,
        description=f"Pattern: {pattern}",
        matches=matches,
        action=action,
    )


def make_pattern_filters(
    include_absolute: Iterable[str] = (),
    include_only: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> list[WalkerRule]:
    """Build pattern rules, grouped in evaluation order.

    Absolute includes come first so they can shield items from the
    exclusions that follow.

    Args:
        include_absolute: Patterns whose matches skip all following rules.
        include_only: Patterns of items to include.
        exclude: Patterns of items to exclude.

    Returns:
        List of rules, one per pattern.

    Raises:
        InvalidPatternError: If any pattern is malformed.
    """
    rules: list[WalkerRule] = []

    for pattern in include_absolute:
        rules.append(make_pattern_rule(INCLUDE_ABSOLUTE_RULE, include_item_absolute(), pattern))

    for pattern in include_only:
        rules.append(make_pattern_rule(INCLUDE_RULE, include_item(), pattern))

    for pattern in exclude:
        rules.append(make_pattern_rule(EXCLUDE_RULE, exclude_item(), pattern))

    return rules
