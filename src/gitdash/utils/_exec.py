"""Execution utilities for external commands.

This module provides the synchronous command runner behind the backend's
command port, with timeout handling, output capture, and error reporting
folded into a result object instead of raised exceptions.
"""

import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

# Default timeout in milliseconds
DEFAULT_TIMEOUT_MS: int = 30000  # 30 seconds

# Maximum output size in bytes
MAX_OUTPUT_BYTES: int = 1048576  # 1MB


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """Configuration for command execution.

    Attributes:
        argv: Program and arguments to execute.
        cwd: Working directory for execution.
        env: Additional environment variables to set.
        timeout_ms: Execution timeout in milliseconds.
    """

    argv: Sequence[str]
    cwd: str | Path | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result from command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        exit_code: Process exit code, or None if the process did not complete.
        error: Error message if execution failed (timeout, not found, etc.).
        timed_out: Whether the command timed out.
        command_not_found: Whether the program was not found.
    """

    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None
    error: str | None = None
    timed_out: bool = False
    command_not_found: bool = False

    @property
    def ok(self) -> bool:
        """Whether the command ran to completion with exit code 0."""
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Best human-readable description of what the command reported."""
        for text in (self.stderr, self.stdout, self.error or ""):
            if text.strip():
                return text.strip()
        if self.exit_code is not None:
            return f"exited with status {self.exit_code}"
        return ""


def truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Truncate output to max bytes, preserving valid UTF-8.

    Args:
        output: The string to truncate.
        max_bytes: Maximum size in bytes.

    Returns:
        Truncated string with indicator if truncated.
    """
    if not output:
        return output

    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output

    # 'ignore' drops a multi-byte sequence cut at the boundary
    truncated = encoded[:max_bytes].decode("utf-8", errors="ignore")
    return truncated + "\n... [output truncated]"


def run_command(config: CommandConfig) -> CommandResult:
    """Execute a command without a shell.

    Handles timeouts and missing programs, and captures stdout/stderr.
    Never raises for process-level failures; inspect the result instead.

    Args:
        config: Command configuration specifying argv, env, cwd, timeout, etc.

    Returns:
        CommandResult with execution outcome.
    """
    if not config.argv:
        return CommandResult(error="No command specified")

    env = {**os.environ, **config.env}
    cwd = str(config.cwd) if config.cwd else None
    timeout_seconds = config.timeout_ms / 1000.0

    try:
        result = subprocess.run(  # noqa: S603
            list(config.argv),
            env=env,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            error=f"Command timed out after {timeout_seconds}s",
            timed_out=True,
        )
    except FileNotFoundError as e:
        return CommandResult(error=str(e), command_not_found=True)
    except OSError as e:
        return CommandResult(error=str(e))

    return CommandResult(
        stdout=truncate_output(result.stdout.decode("utf-8", errors="replace")),
        stderr=truncate_output(result.stderr.decode("utf-8", errors="replace")),
        exit_code=result.returncode,
    )
