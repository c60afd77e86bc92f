"""Unit tests for shell execution utilities."""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest
from rebackup.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Exit code 0 is a success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True

    def test_failure(self) -> None:
        """Non-zero exit codes are failures."""
        assert CommandResult(stdout="", stderr="err", returncode=2).success is False


class TestRunCommand:
    """Tests for run_command function."""

    @patch("rebackup.utils.shell.subprocess.run")
    def test_returns_result(self, mock_run: MagicMock) -> None:
        """run_command wraps the subprocess outcome."""
        mock_run.return_value = MagicMock(stdout="out", stderr="", returncode=0)

        result = run_command(["echo", "out"])

        assert result == CommandResult(stdout="out", stderr="", returncode=0)

    @patch("rebackup.utils.shell.subprocess.run")
    def test_captures_by_default(self, mock_run: MagicMock) -> None:
        """Output is captured unless told otherwise."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["true"])

        assert mock_run.call_args.kwargs["capture_output"] is True

    @patch("rebackup.utils.shell.subprocess.run")
    def test_uncaptured_output(self, mock_run: MagicMock) -> None:
        """Uncaptured commands report empty output."""
        mock_run.return_value = MagicMock(stdout=None, stderr=None, returncode=1)

        result = run_command(["false"], capture=False)

        assert mock_run.call_args.kwargs["capture_output"] is False
        assert result.stdout == ""
        assert result.stderr == ""
        assert result.returncode == 1

    @patch("rebackup.utils.shell.subprocess.run")
    def test_discarded_output(self, mock_run: MagicMock) -> None:
        """Discarded output goes to the null device without decoding."""
        mock_run.return_value = MagicMock(returncode=0)

        result = run_command(["printf", "\\377"], discard=True)

        assert mock_run.call_args.kwargs["stdout"] is subprocess.DEVNULL
        assert mock_run.call_args.kwargs["stderr"] is subprocess.DEVNULL
        assert "text" not in mock_run.call_args.kwargs
        assert result == CommandResult(stdout="", stderr="", returncode=0)

    @patch("rebackup.utils.shell.subprocess.run")
    def test_merges_env(self, mock_run: MagicMock) -> None:
        """Custom env is merged with the current environment."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        with patch.dict(os.environ, {"KEEP_ME": "1"}):
            run_command(["env"], env={"REBACKUP_ITEM": "/data/a"})

        env = mock_run.call_args.kwargs["env"]
        assert env["REBACKUP_ITEM"] == "/data/a"
        assert env["KEEP_ME"] == "1"

    @patch("rebackup.utils.shell.subprocess.run")
    def test_no_env_inherits(self, mock_run: MagicMock) -> None:
        """Without custom env the process environment is inherited."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["env"])

        assert mock_run.call_args.kwargs["env"] is None

    @patch("rebackup.utils.shell.subprocess.run")
    def test_passes_cwd(self, mock_run: MagicMock) -> None:
        """run_command passes the working directory."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["ls"], cwd="/tmp")

        assert mock_run.call_args.kwargs["cwd"] == "/tmp"

    @patch("rebackup.utils.shell.subprocess.run")
    def test_missing_executable(self, mock_run: MagicMock) -> None:
        """A missing executable raises FileNotFoundError."""
        mock_run.side_effect = FileNotFoundError("nope")

        with pytest.raises(FileNotFoundError):
            run_command(["nope"])

    @patch("rebackup.utils.shell.subprocess.run")
    def test_check_raises(self, mock_run: MagicMock) -> None:
        """check=True propagates CalledProcessError."""
        mock_run.side_effect = subprocess.CalledProcessError(1, ["false"])

        with pytest.raises(subprocess.CalledProcessError):
            run_command(["false"], check=True)

        assert mock_run.call_args.kwargs["check"] is True


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("rebackup.utils.shell.shutil.which", return_value="/usr/bin/git")
    def test_found(self, _mock_which: MagicMock) -> None:
        """Commands on PATH exist."""
        assert command_exists("git") is True

    @patch("rebackup.utils.shell.shutil.which", return_value=None)
    def test_not_found(self, _mock_which: MagicMock) -> None:
        """Commands missing from PATH do not exist."""
        assert command_exists("nope") is False
