"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Empty, canonicalized source directory."""
    source = tmp_path / "src"
    source.mkdir()
    return source.resolve()


@pytest.fixture
def sample_tree(source_dir: Path) -> Path:
    """Source directory with a small tree.

    Layout:
        src/
            a.txt
            b/
            docs/
                readme.md
                notes.log
                deep/
                    c.txt
    """
    (source_dir / "a.txt").write_text("a")
    (source_dir / "b").mkdir()
    docs = source_dir / "docs"
    docs.mkdir()
    (docs / "readme.md").write_text("readme")
    (docs / "notes.log").write_text("log")
    (docs / "deep").mkdir()
    (docs / "deep" / "c.txt").write_text("c")
    return source_dir


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo the logging setup done by CLI invocations."""
    yield
    logger = logging.getLogger("rebackup")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
