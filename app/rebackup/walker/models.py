"""Walker domain models.

This module defines the data structures exchanged between the traversal
engine, the rule evaluator and rule providers: item types, rule results
and the directives the evaluator hands back to the engine.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ItemType(str, Enum):
    """Type of a filesystem item, determined without following symlinks.

    Attributes:
        DIRECTORY: Regular directory.
        FILE: Regular file, or any other non-directory entry (FIFO, socket, device).
        SYMLINK: Symbolic link, whatever its target.
    """

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"


class RuleResultType(Enum):
    """Outcome reported by a rule's action.

    Attributes:
        STR_ERROR: The rule failed with a custom error message.
        SKIP_RULE: The rule realized it should not apply after all.
        INCLUDE_ITEM: Include the item; following rules still run.
        INCLUDE_ITEM_ABSOLUTE: Include the item and ignore all following rules.
        EXCLUDE_ITEM: Drop the item (and its whole subtree).
        MAP_AS_LIST: Replace the item with an explicit list of descendant paths.
    """

    STR_ERROR = "str_error"
    SKIP_RULE = "skip_rule"
    INCLUDE_ITEM = "include_item"
    INCLUDE_ITEM_ABSOLUTE = "include_item_absolute"
    EXCLUDE_ITEM = "exclude_item"
    MAP_AS_LIST = "map_as_list"


@dataclass(frozen=True, slots=True)
class RuleResult:
    """Result returned by a rule's action.

    Use the factory functions (``include_item()``, ``map_as_list()``, ...)
    rather than building instances by hand.

    Attributes:
        result_type: Which outcome the rule reported.
        message: Error message, only set for STR_ERROR.
        paths: Mapped paths, only set for MAP_AS_LIST. Relative paths are
            resolved against the item the rule ran on.
        absolute: For MAP_AS_LIST, whether mapped paths are emitted as-is
            instead of being walked like freshly discovered items.
    """

    result_type: RuleResultType
    message: str | None = None
    paths: tuple[Path, ...] = ()
    absolute: bool = False

    def __post_init__(self) -> None:
        """Validate that payload fields match the result type."""
        if self.result_type == RuleResultType.STR_ERROR and not self.message:
            msg = "STR_ERROR results require an error message"
            raise ValueError(msg)
        if self.result_type != RuleResultType.MAP_AS_LIST and self.paths:
            msg = f"Only MAP_AS_LIST results can carry paths, got {self.result_type.name}"
            raise ValueError(msg)


def str_error(message: str) -> RuleResult:
    """Create a result that makes the rule fail with a custom message."""
    return RuleResult(result_type=RuleResultType.STR_ERROR, message=message)


def skip_rule() -> RuleResult:
    """Create a result telling the walker to ignore this rule for the item."""
    return RuleResult(result_type=RuleResultType.SKIP_RULE)


def include_item() -> RuleResult:
    """Create a result including the item without stopping evaluation."""
    return RuleResult(result_type=RuleResultType.INCLUDE_ITEM)


def include_item_absolute() -> RuleResult:
    """Create a result including the item and skipping all following rules."""
    return RuleResult(result_type=RuleResultType.INCLUDE_ITEM_ABSOLUTE)


def exclude_item() -> RuleResult:
    """Create a result excluding the item."""
    return RuleResult(result_type=RuleResultType.EXCLUDE_ITEM)


def map_as_list(paths: Iterable[str | Path], absolute: bool = False) -> RuleResult:
    """Create a result replacing the item with a list of paths.

    Only valid on directories and symlinks; the walker rejects it on files.

    Args:
        paths: Absolute paths, or paths relative to the mapped item. All of
            them must exist and live under the mapped item.
        absolute: If True, mapped paths are appended to the output directly.
            If False, each one is walked as if it had just been discovered.

    Returns:
        RuleResult configured for mapping.
    """
    return RuleResult(
        result_type=RuleResultType.MAP_AS_LIST,
        paths=tuple(Path(p) for p in paths),
        absolute=absolute,
    )


class DirectiveType(Enum):
    """Control signal returned by the rule evaluator for one item.

    Attributes:
        NOTHING: No rule short-circuited; apply default handling.
        SKIP_FOLLOWING_RULES: Stop evaluating rules; apply default handling.
        SKIP_ITEM: Drop the item.
        MAP_ITEM: Replace the item with the directive's paths.
    """

    NOTHING = "nothing"
    SKIP_FOLLOWING_RULES = "skip_following_rules"
    SKIP_ITEM = "skip_item"
    MAP_ITEM = "map_item"


@dataclass(frozen=True, slots=True)
class Directive:
    """Directive produced by the rule evaluator.

    Attributes:
        directive_type: What the traversal engine should do with the item.
        paths: Validated absolute paths for MAP_ITEM.
        absolute: For MAP_ITEM, whether the paths bypass the walk pipeline.
    """

    directive_type: DirectiveType
    paths: tuple[Path, ...] = ()
    absolute: bool = False

    @property
    def is_mapping(self) -> bool:
        """Check if the item is replaced by a list of paths."""
        return self.directive_type == DirectiveType.MAP_ITEM


class SkipReason(str, Enum):
    """Why the walker silently dropped an item (soft, non-fatal conditions).

    Attributes:
        ALREADY_VISITED: The item path was already walked on.
        SYMLINK_DISABLED: Item is a symlink and symlinks are not followed.
        SYMLINK_CYCLE: The symlink's target was already walked on.
        SYMLINK_ALIAS: The item resolves to a location already walked on.
    """

    ALREADY_VISITED = "already_visited"
    SYMLINK_DISABLED = "symlink_disabled"
    SYMLINK_CYCLE = "symlink_cycle"
    SYMLINK_ALIAS = "symlink_alias"
