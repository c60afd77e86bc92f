"""Shell execution utilities.

Provides subprocess execution for rules that delegate their decision to
external commands.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command (empty if not captured).
        stderr: Standard error from the command (empty if not captured).
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = None,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    capture: bool = True,
    discard: bool = False,
) -> CommandResult:
    """Execute a command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command. None waits forever.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).
        capture: If True, capture stdout/stderr. If False, the command
            inherits the terminal and nothing is captured.
        discard: If True, send stdout/stderr to the null device. Only the
            exit code is kept and output bytes are never decoded.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    full_env = {**os.environ, **env} if env else None

    if discard:
        result = subprocess.run(
            args,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=check,
            timeout=timeout,
            cwd=cwd,
            env=full_env,
        )
        return CommandResult(stdout="", stderr="", returncode=result.returncode)

    result = subprocess.run(
        args,
        capture_output=capture,
        text=True,
        errors="replace",
        check=check,
        timeout=timeout,
        cwd=cwd,
        env=full_env,
    )
    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
