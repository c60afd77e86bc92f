"""Filesystem walker module.

This module provides the traversal engine, the rule evaluation state
machine, the visit history guarding against cycles and duplicates, and
the error taxonomy of a walk.
"""

from rebackup.walker.config import RuleAction, RuleMatcher, WalkerConfig, WalkerRule
from rebackup.walker.engine import classify, walk
from rebackup.walker.errors import (
    DirNotFoundError,
    FailedToCanonicalizeError,
    FailedToGetItemMetadataError,
    FailedToReadDirEntryError,
    FailedToReadSymlinkTargetError,
    FailedToWalkDirError,
    RuleDomainFailure,
    RuleError,
    RuleFailedToRunError,
    RuleFailure,
    RuleIOFailure,
    RuleMappedFileAsDirError,
    RuleMappingContainsExternalItemError,
    RuleMappingContainsNonExistingItemError,
    WalkerError,
)
from rebackup.walker.evaluator import evaluate_rules, run_rule
from rebackup.walker.history import VisitHistory
from rebackup.walker.models import (
    Directive,
    DirectiveType,
    ItemType,
    RuleResult,
    RuleResultType,
    SkipReason,
    exclude_item,
    include_item,
    include_item_absolute,
    map_as_list,
    skip_rule,
    str_error,
)

__all__ = [
    "Directive",
    "DirectiveType",
    "DirNotFoundError",
    "FailedToCanonicalizeError",
    "FailedToGetItemMetadataError",
    "FailedToReadDirEntryError",
    "FailedToReadSymlinkTargetError",
    "FailedToWalkDirError",
    "ItemType",
    "RuleAction",
    "RuleDomainFailure",
    "RuleError",
    "RuleFailedToRunError",
    "RuleFailure",
    "RuleIOFailure",
    "RuleMappedFileAsDirError",
    "RuleMappingContainsExternalItemError",
    "RuleMappingContainsNonExistingItemError",
    "RuleMatcher",
    "RuleResult",
    "RuleResultType",
    "SkipReason",
    "VisitHistory",
    "WalkerConfig",
    "WalkerError",
    "WalkerRule",
    "classify",
    "evaluate_rules",
    "exclude_item",
    "include_item",
    "include_item_absolute",
    "map_as_list",
    "run_rule",
    "skip_rule",
    "str_error",
    "walk",
]
