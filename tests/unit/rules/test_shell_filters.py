"""Unit tests for shell command filter rules."""

import logging
import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rebackup.rules.shell_filters import (
    ITEM_ENV_VAR,
    SHELL_FILTER_RULE,
    build_shell_args,
    default_shell,
    make_shell_cmd_filter,
    make_shell_cmd_filters,
)
from rebackup.utils.shell import CommandResult
from rebackup.walker.config import WalkerConfig
from rebackup.walker.engine import walk
from rebackup.walker.models import RuleResultType


def _result(returncode: int) -> CommandResult:
    return CommandResult(stdout="", stderr="", returncode=returncode)


class TestDefaultShell:
    """Tests for default_shell."""

    def test_posix(self) -> None:
        """POSIX platforms use sh -c."""
        with patch("rebackup.rules.shell_filters.sys.platform", "linux"):
            assert default_shell() == ("sh", ["-c"], [])

    def test_windows(self) -> None:
        """Windows uses cmd.exe /C."""
        with patch("rebackup.rules.shell_filters.sys.platform", "win32"):
            assert default_shell() == ("cmd.exe", ["/C"], [])


class TestBuildShellArgs:
    """Tests for build_shell_args."""

    def test_head_and_tail(self) -> None:
        """The command sits between head and tail arguments."""
        args = build_shell_args("echo hi", "bash", ["-e", "-c"], ["--", "x"])

        assert args == ["bash", "-e", "-c", "echo hi", "--", "x"]


class TestMakeShellCmdFilter:
    """Tests for make_shell_cmd_filter."""

    def test_rule_metadata(self) -> None:
        """The rule is named and described after its command."""
        rule = make_shell_cmd_filter("true", shell="sh", head_args=["-c"])

        assert rule.name == SHELL_FILTER_RULE
        assert rule.description == "Command: true"
        assert rule.matches(Path("/src/a"), WalkerConfig(), Path("/src")) is True

    @patch("rebackup.rules.shell_filters.run_command")
    def test_success_includes(self, mock_run: MagicMock) -> None:
        """A successful command includes the item."""
        mock_run.return_value = _result(0)
        rule = make_shell_cmd_filter("true", shell="sh", head_args=["-c"])

        result = rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))

        assert result.result_type == RuleResultType.INCLUDE_ITEM

    @patch("rebackup.rules.shell_filters.run_command")
    def test_failure_excludes(self, mock_run: MagicMock) -> None:
        """A failing command excludes the item."""
        mock_run.return_value = _result(1)
        rule = make_shell_cmd_filter("false", shell="sh", head_args=["-c"])

        result = rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))

        assert result.result_type == RuleResultType.EXCLUDE_ITEM

    @patch("rebackup.rules.shell_filters.run_command")
    def test_passes_item_in_env(self, mock_run: MagicMock) -> None:
        """The item path is provided through the environment."""
        mock_run.return_value = _result(0)
        rule = make_shell_cmd_filter("test -f x", shell="sh", head_args=["-c"])

        rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))

        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["sh", "-c", "test -f x"]
        assert mock_run.call_args.kwargs["env"] == {ITEM_ENV_VAR: str(Path("/src/a"))}
        assert mock_run.call_args.kwargs["discard"] is True

    @patch("rebackup.rules.shell_filters.run_command")
    def test_display_output_disables_capture(self, mock_run: MagicMock) -> None:
        """Displaying output lets the command write to the terminal."""
        mock_run.return_value = _result(0)
        rule = make_shell_cmd_filter("ls", shell="sh", head_args=["-c"], display_output=True)

        rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))

        assert mock_run.call_args.kwargs["capture"] is False
        assert mock_run.call_args.kwargs["discard"] is False

    @patch("rebackup.rules.shell_filters.run_command")
    def test_missing_shell_propagates(self, mock_run: MagicMock) -> None:
        """A missing shell binary surfaces as OSError for the walker to report."""
        mock_run.side_effect = FileNotFoundError("no such shell")
        rule = make_shell_cmd_filter("true", shell="nosh")

        with pytest.raises(FileNotFoundError):
            rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))


class TestMakeShellCmdFilters:
    """Tests for make_shell_cmd_filters."""

    @patch("rebackup.rules.shell_filters.command_exists", return_value=True)
    def test_one_rule_per_command(self, _mock_exists: MagicMock) -> None:
        """Each command gets its own rule, in order."""
        rules = make_shell_cmd_filters(["true", "false"], shell="bash", head_args=["-c"])

        assert [rule.description for rule in rules] == ["Command: true", "Command: false"]

    @patch("rebackup.rules.shell_filters.run_command")
    @patch("rebackup.rules.shell_filters.command_exists", return_value=True)
    def test_default_shell_ignores_custom_args(
        self, _mock_exists: MagicMock, mock_run: MagicMock
    ) -> None:
        """Without a shell, the platform default and its arguments are used."""
        mock_run.return_value = _result(0)
        with patch("rebackup.rules.shell_filters.sys.platform", "linux"):
            rules = make_shell_cmd_filters(["true"], head_args=["--ignored"])

        rules[0].action(Path("/src/a"), WalkerConfig(), Path("/src"))

        assert mock_run.call_args.args[0] == ["sh", "-c", "true"]

    @patch("rebackup.rules.shell_filters.command_exists", return_value=False)
    def test_warns_on_missing_shell(
        self, _mock_exists: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A shell missing from PATH is reported up front."""
        with caplog.at_level(logging.WARNING, logger="rebackup"):
            make_shell_cmd_filters(["true"], shell="nosh")

        assert "Shell not found in PATH" in caplog.text

    @patch("rebackup.rules.shell_filters.command_exists", return_value=False)
    def test_no_commands_no_warning(
        self, _mock_exists: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        """No warning is emitted when there is nothing to run."""
        with caplog.at_level(logging.WARNING, logger="rebackup"):
            rules = make_shell_cmd_filters([], shell="nosh")

        assert rules == []
        assert caplog.text == ""


@pytest.mark.skipif(shutil.which("sh") is None, reason="Requires a POSIX shell")
class TestShellFilterWalk:
    """Tests running real shell filters during a walk."""

    def test_filter_by_item_name(self, sample_tree: Path) -> None:
        """Items for which the command fails are excluded."""
        rules = make_shell_cmd_filters(
            ['test "$(basename "$REBACKUP_ITEM")" != notes.log'],
            shell="sh",
            head_args=["-c"],
        )

        items = walk(sample_tree, WalkerConfig.from_rules(rules))

        assert sample_tree / "docs" / "notes.log" not in items
        assert sample_tree / "docs" / "readme.md" in items

    def test_binary_output_is_ignored(self, sample_tree: Path) -> None:
        """Output that is not valid UTF-8 does not break the walk."""
        rules = make_shell_cmd_filters(["printf '\\377\\376'"], shell="sh", head_args=["-c"])

        items = walk(sample_tree, WalkerConfig.from_rules(rules))

        assert sample_tree / "a.txt" in items
        assert sample_tree / "docs" / "deep" / "c.txt" in items

    def test_binary_output_on_stderr_is_ignored(self, sample_tree: Path) -> None:
        """Non UTF-8 error output of a failing command only excludes the item."""
        rules = make_shell_cmd_filters(
            ["printf '\\377' >&2; test \"$(basename \"$REBACKUP_ITEM\")\" != a.txt"],
            shell="sh",
            head_args=["-c"],
        )

        items = walk(sample_tree, WalkerConfig.from_rules(rules))

        assert sample_tree / "a.txt" not in items
        assert sample_tree / "docs" / "readme.md" in items
