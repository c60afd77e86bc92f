"""Shell command filter rules.

Each filter runs a shell command for every item, with the item's path in
the REBACKUP_ITEM environment variable. Items are kept when the command
succeeds and excluded when it fails.

Example:
    rebackup list ~/photos --filter-with 'test "$(stat -c %s "$REBACKUP_ITEM")" -lt 1000000'
"""

import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from rebackup.utils.shell import command_exists, run_command
from rebackup.walker.config import WalkerConfig, WalkerRule
from rebackup.walker.models import RuleResult, exclude_item, include_item

logger = logging.getLogger(__name__)

SHELL_FILTER_RULE = "shell-filter"
ITEM_ENV_VAR = "REBACKUP_ITEM"


def default_shell() -> tuple[str, list[str], list[str]]:
    """Get the platform's default shell invocation.

    Returns:
        Tuple of (shell binary, head arguments, tail arguments).
    """
    if sys.platform == "win32":
        return "cmd.exe", ["/C"], []
    return "sh", ["-c"], []


def build_shell_args(
    command: str,
    shell: str,
    head_args: Sequence[str],
    tail_args: Sequence[str],
) -> list[str]:
    """Assemble the argument vector running ``command`` through ``shell``."""
    return [shell, *head_args, command, *tail_args]


def make_shell_cmd_filter(
    command: str,
    *,
    shell: str,
    head_args: Sequence[str] = (),
    tail_args: Sequence[str] = (),
    display_output: bool = False,
) -> WalkerRule:
    """Create a rule filtering items with a shell command.

    The command is run without timeout; the walk waits for it to finish.

    Args:
        command: Command to run for each item.
        shell: Shell binary running the command.
        head_args: Shell arguments placed before the command.
        tail_args: Shell arguments placed after the command.
        display_output: Let the command print to the terminal.

    Returns:
        WalkerRule applying to every item.
    """
    args = build_shell_args(command, shell, head_args, tail_args)

    def matches(_item_path: Path, _config: WalkerConfig, _source: Path) -> bool:
        return True

    def action(item_path: Path, _config: WalkerConfig, _source: Path) -> RuleResult:
        result = run_command(
            args,
            env={ITEM_ENV_VAR: str(item_path)},
            capture=False,
            discard=not display_output,
        )
        return include_item() if result.success else exclude_item()

    return WalkerRule(
        name=SHELL_FILTER_RULE,
        description=f"Command: {command}",
        matches=matches,
        action=action,
    )


def make_shell_cmd_filters(
    commands: Iterable[str],
    *,
    shell: str | None = None,
    head_args: Sequence[str] = (),
    tail_args: Sequence[str] = (),
    display_output: bool = False,
) -> list[WalkerRule]:
    """Build one shell filter rule per command.

    Args:
        commands: Commands to run for each item.
        shell: Shell binary. If None, the platform default shell and its
            arguments are used and ``head_args``/``tail_args`` are ignored.
        head_args: Shell arguments placed before each command.
        tail_args: Shell arguments placed after each command.
        display_output: Let commands print to the terminal.

    Returns:
        List of rules, one per command.
    """
    if shell is None:
        shell, head_args, tail_args = default_shell()

    commands = list(commands)
    if commands and not command_exists(shell):
        logger.warning("Shell not found in PATH, filters will fail: %s", shell)

    return [
        make_shell_cmd_filter(
            command,
            shell=shell,
            head_args=head_args,
            tail_args=tail_args,
            display_output=display_output,
        )
        for command in commands
    ]
