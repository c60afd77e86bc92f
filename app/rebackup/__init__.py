"""rebackup - build the list of files to back up from a directory tree.

Walks a source directory and applies an ordered set of rules that can
include, exclude, or substitute items along the way.
"""

from rebackup.walker import (
    ItemType,
    RuleResult,
    WalkerConfig,
    WalkerError,
    WalkerRule,
    walk,
)

__version__ = "0.1.0"

__all__ = [
    "ItemType",
    "RuleResult",
    "WalkerConfig",
    "WalkerError",
    "WalkerRule",
    "__version__",
    "walk",
]
