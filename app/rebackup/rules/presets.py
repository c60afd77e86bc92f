"""Built-in rules for common backup exclusions.

Each preset is a factory returning a fresh WalkerRule, looked up by name
through get_preset().
"""

import logging
from collections.abc import Callable
from pathlib import Path

from rebackup.utils.shell import run_command
from rebackup.walker.config import WalkerConfig, WalkerRule
from rebackup.walker.models import ItemType, RuleResult, exclude_item, include_item

logger = logging.getLogger(__name__)


class UnknownPresetError(LookupError):
    """Raised when a preset name is not registered."""


def _exclude(_item_path: Path, _config: WalkerConfig, _source: Path) -> RuleResult:
    return exclude_item()


def _named_dir_rule(name: str, dir_name: str, description: str) -> WalkerRule:
    def matches(item_path: Path, _config: WalkerConfig, _source: Path) -> bool:
        return item_path.name == dir_name

    return WalkerRule(
        name=name,
        description=description,
        only_for=ItemType.DIRECTORY,
        matches=matches,
        action=_exclude,
    )


def dotgit() -> WalkerRule:
    """Exclude '.git' directories."""
    return _named_dir_rule("dotgit", ".git", "Exclude .git directories")


def node_modules() -> WalkerRule:
    """Exclude 'node_modules' directories."""
    return _named_dir_rule("node_modules", "node_modules", "Exclude node_modules directories")


def nomedia() -> WalkerRule:
    """Exclude directories containing a '.nomedia' file."""

    def matches(item_path: Path, _config: WalkerConfig, _source: Path) -> bool:
        return (item_path / ".nomedia").is_file()

    return WalkerRule(
        name="nomedia",
        description="Exclude directories containing a .nomedia file",
        only_for=ItemType.DIRECTORY,
        matches=matches,
        action=_exclude,
    )


def rust_cargo_build() -> WalkerRule:
    """Exclude the 'target' directory of Cargo projects."""

    def matches(item_path: Path, _config: WalkerConfig, _source: Path) -> bool:
        return item_path.name == "target" and (item_path.parent / "Cargo.toml").is_file()

    return WalkerRule(
        name="rust_cargo_build",
        description="Exclude Cargo build directories",
        only_for=ItemType.DIRECTORY,
        matches=matches,
        action=_exclude,
    )


def gitignore() -> WalkerRule:
    """Exclude items ignored by Git in Git work trees.

    Runs ``git check-ignore`` from the item's directory (or its parent for
    non-directories). A missing ``git`` binary makes the rule fail.
    """

    def matches(item_path: Path, _config: WalkerConfig, _source: Path) -> bool:
        return any((ancestor / ".git").is_dir() for ancestor in (item_path, *item_path.parents))

    def action(item_path: Path, _config: WalkerConfig, _source: Path) -> RuleResult:
        cwd = item_path if item_path.is_dir() else item_path.parent
        result = run_command(
            ["git", "check-ignore", str(item_path)], cwd=str(cwd), discard=True
        )
        if result.success:
            logger.debug(">>> Ignored by git: %s", item_path)
            return exclude_item()
        return include_item()

    return WalkerRule(
        name="gitignore",
        description="Exclude items ignored by Git",
        matches=matches,
        action=action,
    )


PRESETS: dict[str, Callable[[], WalkerRule]] = {
    "dotgit": dotgit,
    "gitignore": gitignore,
    "node_modules": node_modules,
    "nomedia": nomedia,
    "rust_cargo_build": rust_cargo_build,
}


def get_preset(name: str) -> WalkerRule:
    """Build the preset rule registered under ``name``.

    Args:
        name: Preset name (see PRESETS).

    Returns:
        New WalkerRule instance.

    Raises:
        UnknownPresetError: If no preset has this name.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        msg = f"Unknown preset: {name} (available: {', '.join(PRESETS)})"
        raise UnknownPresetError(msg) from None
    return factory()
