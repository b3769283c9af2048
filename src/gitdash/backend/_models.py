"""Rows produced by the version-control backend."""

from dataclasses import dataclass

from gitdash.utils import CommandResult

# Working-copy identity reported for paths absent from both HEAD and the
# index; their content is never compared so it is not hashed.
UNHASHED_WORKDIR = "*"


@dataclass(frozen=True, slots=True)
class StatusRow:
    """Presence and content identity of one path in HEAD, index and workdir.

    Each state is a blob id (hex) or None when the path is absent there.
    Two states are equal exactly when the content is identical.

    Attributes:
        path: Repository-relative path with ``/`` separators.
        head: Blob id in the HEAD tree.
        index: Blob id staged in the index.
        workdir: Blob id of the file on disk.
    """

    path: str
    head: str | None
    index: str | None
    workdir: str | None


@dataclass(frozen=True, slots=True)
class CommitEntry:
    """A commit as read from history.

    Attributes:
        id: Full hex commit id.
        message: Raw commit message.
        timestamp_seconds: Committer timestamp (Unix seconds).
        parents: Parent commit ids, first parent first.
    """

    id: str
    message: str
    timestamp_seconds: int
    parents: tuple[str, ...] = ()


__all__ = ["UNHASHED_WORKDIR", "CommandResult", "CommitEntry", "StatusRow"]
