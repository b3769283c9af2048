"""gitdash exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class GitdashError(Exception):
    """Base exception for gitdash errors."""


class ValidationError(GitdashError, ValueError):
    """Raised when a mutation request is rejected before reaching the backend.

    Attributes:
        field: The request field that failed validation.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with error message and field context.

        Args:
            message: Human-readable error message.
            field: The request field that failed validation.
        """
        super().__init__(message)
        self.field: str | None = field


# =============================================================================
# Backend Exceptions
# =============================================================================


class BackendError(GitdashError):
    """Base exception for version-control backend errors."""


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot answer a read query.

    Covers missing repositories, unresolvable refs and history walks on
    repositories without commits.

    Attributes:
        path: The repository path involved, if known.
        ref: The ref that could not be resolved, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        ref: str | None = None,
    ) -> None:
        """Initialize with error message and repository context."""
        super().__init__(message)
        self.path: Path | None = path
        self.ref: str | None = ref


class CommandFailedError(BackendError):
    """Raised when a git command exits abnormally.

    Attributes:
        command_args: The git arguments that were executed.
        exit_code: Process exit code, or None if the process never ran.
        output: Combined stderr/stdout text reported by the command.
    """

    def __init__(
        self,
        message: str,
        *,
        args: Sequence[str] = (),
        exit_code: int | None = None,
        output: str = "",
    ) -> None:
        """Initialize with error message and command context."""
        super().__init__(message)
        self.command_args: tuple[str, ...] = tuple(args)
        self.exit_code: int | None = exit_code
        self.output: str = output


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitdashError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
