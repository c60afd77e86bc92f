"""Files list rendering.

Turns the absolute paths produced by a walk into the lines of the files
list: relative or absolute, prefixed, sorted, and checked for filenames
that are not valid UTF-8.
"""

import logging
import os
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class NonUtf8Policy(str, Enum):
    """What to do with filenames that are not valid UTF-8.

    Attributes:
        FAIL: Abort with NonUtf8PathError.
        LOSSY: Replace undecodable bytes with U+FFFD.
        IGNORE: Drop the item from the list with a warning.
    """

    FAIL = "fail"
    LOSSY = "lossy"
    IGNORE = "ignore"


class OutputError(Exception):
    """Base exception for files list rendering errors."""


class NonUtf8PathError(OutputError):
    """Raised when a filename is not valid UTF-8 and the policy is FAIL."""

    def __init__(self, lossy_path: str) -> None:
        self.lossy_path = lossy_path
        super().__init__(f"Found invalid UTF-8 name: {lossy_path}")


class PathOutsideSourceError(OutputError):
    """Raised when an item cannot be made relative to the source directory."""

    def __init__(self, item: Path, source: Path) -> None:
        self.item = item
        self.source = source
        super().__init__(f"Cannot strip prefix from item '{item}' with source '{source}'")


def to_lossy(path_str: str) -> str:
    """Replace undecodable filename bytes with U+FFFD.

    Python decodes undecodable bytes of filenames to lone surrogates
    ("surrogateescape"); they are turned back into bytes and decoded
    with replacement.
    """
    return os.fsencode(path_str).decode("utf-8", errors="replace")


def is_valid_utf8(path_str: str) -> bool:
    """Check if a decoded filename round-trips to valid UTF-8."""
    try:
        path_str.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def format_file_list(
    items: Iterable[Path],
    source: Path,
    *,
    absolute: bool = False,
    prefix: str | None = None,
    sort: bool = True,
    non_utf8: NonUtf8Policy = NonUtf8Policy.FAIL,
) -> list[str]:
    """Render walked items as files list lines.

    Args:
        items: Absolute item paths returned by walk().
        source: Canonicalized source directory of the walk.
        absolute: Keep absolute paths instead of making them relative to
            ``source``. The source itself renders as ".".
        prefix: String prepended to every line.
        sort: Sort lines lexicographically.
        non_utf8: Policy for filenames that are not valid UTF-8.

    Returns:
        Lines of the files list.

    Raises:
        NonUtf8PathError: If a filename is not valid UTF-8 with FAIL policy.
        PathOutsideSourceError: If an item is not under ``source``.
    """
    lines: list[str] = []

    for item in items:
        if not absolute:
            try:
                item = item.relative_to(source)
            except ValueError as e:
                raise PathOutsideSourceError(item, source) from e

        path_str = str(item)

        if not is_valid_utf8(path_str):
            lossy = to_lossy(path_str)
            if non_utf8 == NonUtf8Policy.LOSSY:
                logger.debug("> Converting invalid UTF-8 item to lossy item name: %s", lossy)
                path_str = lossy
            elif non_utf8 == NonUtf8Policy.IGNORE:
                logger.warning("> Found invalid UTF-8 name: %s", lossy)
                continue
            else:
                raise NonUtf8PathError(lossy)

        if prefix:
            path_str = f"{prefix}{path_str}"

        lines.append(path_str)

    if sort:
        lines.sort()

    return lines


def write_file_list(lines: list[str], dest: Path) -> Path:
    """Write files list lines to a file, one per line.

    Args:
        lines: Lines produced by format_file_list().
        dest: Output file path.

    Returns:
        Resolved path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    dest = dest.resolve()
    dest.write_text("\n".join(lines), encoding="utf-8")
    return dest
