"""Walker error taxonomy.

Every hard failure of a walk is raised as a WalkerError subclass carrying
enough context (offending paths, rule name and description, inner cause)
to diagnose the problem without re-running the walk.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

NO_RULE_DESCRIPTION = "<no rule description>"


@dataclass(frozen=True, slots=True)
class RuleFailure(ABC):
    """Base class for the reason a rule's action failed."""

    @abstractmethod
    def __str__(self) -> str:
        """Describe the failure."""


@dataclass(frozen=True, slots=True)
class RuleIOFailure(RuleFailure):
    """The rule's action raised an I/O error.

    Attributes:
        error: The OSError raised by the action.
    """

    error: OSError

    def __str__(self) -> str:
        return str(self.error)


@dataclass(frozen=True, slots=True)
class RuleDomainFailure(RuleFailure):
    """The rule's action reported a custom error message.

    Attributes:
        message: Message returned through a STR_ERROR result.
    """

    message: str

    def __str__(self) -> str:
        return self.message


class WalkerError(Exception):
    """Base exception for all walk failures."""


class FailedToCanonicalizeError(WalkerError):
    """Raised when a path cannot be resolved to its canonical form."""

    def __init__(self, path: Path, cause: OSError | RuntimeError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to canonicalize path: {path} ({cause})")


class DirNotFoundError(WalkerError):
    """Raised when the walk's source is not a directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Input directory not found: {path}")


class FailedToWalkDirError(WalkerError):
    """Raised when a directory's listing cannot be opened."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to walk directory: {path} ({cause})")


class FailedToReadDirEntryError(WalkerError):
    """Raised when reading the next entry of a directory listing fails."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read directory entry in: {path} ({cause})")


class FailedToGetItemMetadataError(WalkerError):
    """Raised when an item's (link-aware) metadata cannot be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to get metadata from an item at path: {path} ({cause})")


class FailedToReadSymlinkTargetError(WalkerError):
    """Raised when a symbolic link's target cannot be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(
            f"Failed to read the target of the symbolic link at path: {path} ({cause})"
        )


class RuleError(WalkerError):
    """Base exception for failures attributed to a specific rule.

    Attributes:
        rule_name: Name of the offending rule.
        rule_description: Description of the rule, or a placeholder.
        item_path: Item the rule was applied on.
    """

    def __init__(
        self, message: str, rule_name: str, rule_description: str, item_path: Path
    ) -> None:
        self.rule_name = rule_name
        self.rule_description = rule_description
        self.item_path = item_path
        super().__init__(message)


class RuleFailedToRunError(RuleError):
    """Raised when a rule's action raised an I/O error or returned STR_ERROR."""

    def __init__(
        self,
        rule_name: str,
        rule_description: str,
        item_path: Path,
        cause: RuleFailure,
    ) -> None:
        self.cause = cause
        super().__init__(
            f"Rule '{rule_name}' ({rule_description}) failed to execute: {cause} "
            f"(on item: {item_path})",
            rule_name,
            rule_description,
            item_path,
        )


class RuleMappedFileAsDirError(RuleError):
    """Raised when a rule maps a file item as a list of paths."""

    def __init__(self, rule_name: str, rule_description: str, item_path: Path) -> None:
        super().__init__(
            f"Rule '{rule_name}' ({rule_description}) mapped a non-directory item "
            f"as a directory (path is: {item_path})",
            rule_name,
            rule_description,
            item_path,
        )


class RuleMappingContainsExternalItemError(RuleError):
    """Raised when a mapped path does not live under the mapped item."""

    def __init__(
        self,
        rule_name: str,
        rule_description: str,
        item_path: Path,
        mapped_item_path: Path,
    ) -> None:
        self.mapped_item_path = mapped_item_path
        super().__init__(
            f"Rule '{rule_name}' ({rule_description}) mapped directory '{item_path}' "
            f"as a list containing external item: {mapped_item_path}",
            rule_name,
            rule_description,
            item_path,
        )


class RuleMappingContainsNonExistingItemError(RuleError):
    """Raised when a mapped path does not exist on the filesystem."""

    def __init__(
        self,
        rule_name: str,
        rule_description: str,
        item_path: Path,
        mapped_item_path: Path,
    ) -> None:
        self.mapped_item_path = mapped_item_path
        super().__init__(
            f"Rule '{rule_name}' ({rule_description}) mapped directory '{item_path}' "
            f"as a list containing inexisting item: {mapped_item_path}",
            rule_name,
            rule_description,
            item_path,
        )
