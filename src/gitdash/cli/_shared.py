"""Shared CLI utilities for commands."""

from enum import IntEnum
from typing import Never

from rich.console import Console
from rich.markup import escape

from gitdash.utils import dump_json

__all__ = [
    "ExitCode",
    "exit_with_error",
    "format_json",
    "get_console",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for gitdash CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    COMMAND_FAILED = 4
    INTERNAL_ERROR = 5


def format_json(data: object) -> str:
    """Format data as indented JSON with sorted keys."""
    return dump_json(data, pretty=True).decode("utf-8")


def get_console() -> Console:
    return Console()


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)
