"""Walker configuration and rule definitions.

The walker is configured through WalkerConfig. Rules are defined with
WalkerRule and evaluated in the order they appear in the configuration.

Example:
    >>> nomedia = WalkerRule(
    ...     name="nomedia",
    ...     only_for=ItemType.DIRECTORY,
    ...     matches=lambda path, _config, _source: (path / ".nomedia").is_file(),
    ...     action=lambda _path, _config, _source: exclude_item(),
    ... )
    >>> config = WalkerConfig(rules=(nomedia,), follow_symlinks=True)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from rebackup.walker.errors import NO_RULE_DESCRIPTION
from rebackup.walker.models import ItemType, RuleResult

# Arguments are the item's absolute path, the walker's configuration,
# and the canonicalized source directory.
RuleMatcher = Callable[[Path, "WalkerConfig", Path], bool]
RuleAction = Callable[[Path, "WalkerConfig", Path], RuleResult]


@dataclass(frozen=True, slots=True)
class WalkerRule:
    """A named predicate/action pair run on individual items.

    Attributes:
        name: Stable identifier used in diagnostics (unique by convention).
        matches: Cheap predicate telling whether the rule applies to an item.
            Called for every item the rule is applicable to.
        action: Decides what to do with a matching item. May raise OSError,
            which the walker reports as a rule failure.
        description: Optional human-readable description.
        only_for: If set, the rule is only applied on items of this type.
    """

    name: str
    matches: RuleMatcher
    action: RuleAction
    description: str | None = None
    only_for: ItemType | None = None

    def __post_init__(self) -> None:
        """Validate rule data after initialization."""
        if not self.name:
            msg = "Rule name cannot be empty"
            raise ValueError(msg)

    @property
    def display_description(self) -> str:
        """Description to show in diagnostics, with a placeholder if missing."""
        return self.description or NO_RULE_DESCRIPTION

    def applies_to(self, item_type: ItemType) -> bool:
        """Check if the rule's type filter accepts the given item type."""
        return self.only_for is None or self.only_for == item_type


@dataclass(frozen=True, slots=True)
class WalkerConfig:
    """Configuration for one walk.

    Attributes:
        rules: Rules to apply on items, in evaluation order.
        follow_symlinks: Follow symbolic links instead of skipping them.
        drop_empty_dirs: Omit directories that contribute no items.
    """

    rules: tuple[WalkerRule, ...] = ()
    follow_symlinks: bool = False
    drop_empty_dirs: bool = False

    def __post_init__(self) -> None:
        """Freeze the rule sequence so evaluation order cannot change mid-walk."""
        object.__setattr__(self, "rules", tuple(self.rules))

    @classmethod
    def from_rules(cls, rules: Sequence[WalkerRule]) -> WalkerConfig:
        """Create a configuration with default flags from a list of rules."""
        return cls(rules=tuple(rules))
