"""Traversal engine.

Walks a source directory recursively to build the list of items to back
up, routing each discovered item through the rule evaluator.

Traversal is performed top-down, in the order entries are returned by
the operating system's directory listing. The output is not sorted:
callers needing a stable order must sort it themselves.
"""

import logging
import os
import stat
from pathlib import Path

from rebackup.walker.config import WalkerConfig
from rebackup.walker.errors import (
    DirNotFoundError,
    FailedToCanonicalizeError,
    FailedToGetItemMetadataError,
    FailedToReadDirEntryError,
    FailedToReadSymlinkTargetError,
    FailedToWalkDirError,
)
from rebackup.walker.evaluator import evaluate_rules
from rebackup.walker.history import VisitHistory
from rebackup.walker.models import DirectiveType, ItemType, SkipReason

logger = logging.getLogger(__name__)


def walk(source: str | Path, config: WalkerConfig) -> list[Path]:
    """Walk through a directory recursively to build a list of files to back up.

    The source directory is canonicalized first, so all symbolic links in
    its own path are resolved. Rules from the configuration are applied on
    each item in order.

    Args:
        source: Directory to walk.
        config: Walker configuration.

    Returns:
        Absolute paths of the items to back up. Empty directories are
        listed as items of their own unless ``config.drop_empty_dirs``.

    Raises:
        FailedToCanonicalizeError: If the source cannot be canonicalized.
        DirNotFoundError: If the canonical source is not a directory.
        WalkerError: Any other hard error met during the walk. No partial
            list is returned.
    """
    source = Path(source)
    canonical_source = _canonicalize(source)

    if not canonical_source.is_dir():
        logger.error("Input directory not found: %s", canonical_source)
        raise DirNotFoundError(canonical_source)

    history = VisitHistory()
    history.try_visit(canonical_source)

    return _walk_nested(canonical_source, config, canonical_source, history)


def classify(path: Path) -> ItemType:
    """Determine an item's type without following symbolic links.

    Raises:
        FailedToGetItemMetadataError: If the item's metadata cannot be read.
    """
    try:
        mode = path.lstat().st_mode
    except OSError as e:
        raise FailedToGetItemMetadataError(path, e) from e

    if stat.S_ISLNK(mode):
        return ItemType.SYMLINK
    if stat.S_ISDIR(mode):
        return ItemType.DIRECTORY
    return ItemType.FILE


def _canonicalize(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise FailedToCanonicalizeError(path, e) from e


def _list_dir(directory: Path) -> list[Path]:
    """List a directory's entries in the order the OS returns them.

    Entries are collected before any of them is processed so the
    directory handle is closed before the walk recurses.
    """
    try:
        scanner = os.scandir(directory)
    except OSError as e:
        raise FailedToWalkDirError(directory, e) from e

    entries: list[Path] = []
    with scanner:
        while True:
            try:
                entry = next(scanner)
            except StopIteration:
                break
            except OSError as e:
                raise FailedToReadDirEntryError(directory, e) from e
            entries.append(directory / entry.name)

    return entries


def _walk_nested(
    directory: Path,
    config: WalkerConfig,
    source: Path,
    history: VisitHistory,
) -> list[Path]:
    """Walk a directory known to exist and return the items found inside."""
    logger.debug("Walking into directory: %s", directory)

    items: list[Path] = []
    for entry in _list_dir(directory):
        _walk_item(entry, config, source, history, items)

    if not items and not config.drop_empty_dirs:
        items.append(directory)

    return items


def _skip(reason: SkipReason, message: str, *args: object) -> None:
    if reason == SkipReason.SYMLINK_DISABLED:
        logger.debug(message, *args)
    else:
        logger.warning(message, *args)


def _walk_item(
    item_path: Path,
    config: WalkerConfig,
    source: Path,
    history: VisitHistory,
    items: list[Path],
) -> None:
    """Run the walker on a single item, appending its output to ``items``."""
    item_type = classify(item_path)

    logger.debug("> Treating item: %s", item_path)

    if not history.try_visit(item_path):
        _skip(
            SkipReason.ALREADY_VISITED,
            "Item was already walked on, skipping it: %s",
            item_path,
        )
        return

    if item_type == ItemType.SYMLINK:
        if not config.follow_symlinks:
            _skip(
                SkipReason.SYMLINK_DISABLED,
                ">> Detected symlink, skipping based on configuration.",
            )
            return

        try:
            target = item_path.readlink()
        except OSError as e:
            raise FailedToReadSymlinkTargetError(item_path, e) from e

        if not target.is_absolute():
            target = Path(os.path.normpath(item_path.parent / target))

        if target in history:
            _skip(
                SkipReason.SYMLINK_CYCLE,
                "Symlink target was already walked on, skipping it: %s",
                item_path,
            )
            return

        logger.debug(">> Detected symlink, following it based on configuration.")

    canonical = _canonicalize(item_path)

    if canonical != item_path and not history.try_visit(canonical):
        _skip(
            SkipReason.SYMLINK_ALIAS,
            "Symbolic link was already walked on, skipping it: %s => %s",
            item_path,
            canonical,
        )
        return

    directive = evaluate_rules(item_path, item_type, config, source)

    if directive.directive_type == DirectiveType.SKIP_ITEM:
        return

    if directive.is_mapping:
        if directive.absolute:
            items.extend(directive.paths)
        else:
            for mapped_path in directive.paths:
                _walk_item(mapped_path, config, source, history, items)
        return

    if item_path.is_dir():
        items.extend(_walk_nested(item_path, config, source, history))
    else:
        items.append(item_path)
