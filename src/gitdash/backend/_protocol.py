# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""Backend protocol for type-safe dependency injection.

The aggregation and mutation engine only talks to a repository through
this Protocol, so it can run against the dulwich backend or an in-memory
fake without touching the core logic.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from gitdash.backend._models import CommandResult, CommitEntry, StatusRow


@runtime_checkable
class BackendProtocol(Protocol):
    """Structured read API plus a synchronous command port.

    Example:
        >>> def head_id(backend: BackendProtocol) -> str | None:
        ...     return backend.resolve_ref("HEAD")
    """

    @property
    def root(self) -> Path:
        """Absolute path of the repository working tree."""
        ...

    @property
    def control_dir(self) -> Path | None:
        """Repository metadata directory (``.git``), or None if absent."""
        ...

    def close(self) -> None:
        """Release any resources held by the backend."""
        ...

    def get_status_matrix(self) -> list[StatusRow]:
        """Return one row per path present in HEAD, index or working copy.

        Rows are sorted by path.
        """
        ...

    def resolve_ref(self, ref: str) -> str | None:
        """Resolve a full ref name (or ``HEAD``) to a commit id.

        Returns:
            The hex commit id, or None if the ref does not resolve.
        """
        ...

    def walk_commits(self, ref: str, depth: int) -> list[CommitEntry]:
        """Walk history from ``ref``, newest first, at most ``depth`` commits.

        Raises:
            BackendUnavailableError: If the ref cannot be resolved or the
                history cannot be read.
        """
        ...

    def is_ignored(self, path: str) -> bool:
        """Whether ignore rules exclude ``path`` (repository-relative)."""
        ...

    def execute(self, args: Sequence[str], *, fallback: bool = False) -> CommandResult:
        """Run a git command in the working tree.

        Args:
            args: Arguments after the executable name.
            fallback: Use the fallback executable instead of the configured one.

        Returns:
            The command result. Process failures are reported, not raised.
        """
        ...

    def current_branch(self) -> str | None:
        """Short name of the checked-out branch, or None when detached.

        Raises:
            BackendUnavailableError: If HEAD cannot be read.
        """
        ...

    def get_config(self, section: str, subsection: str | None, name: str) -> str | None:
        """Read a repository config value, or None if unset."""
        ...

    def list_branches(self) -> list[str]:
        """Sorted short names of local branches."""
        ...
