# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Snapshot data model.

Every entity here is rebuilt on each snapshot request. Only the
tracked-pending record (see ``_tracked``) outlives a request.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Final

DETACHED_BRANCH: Final = "(detached)"
UNKNOWN_BRANCH: Final = "(unknown)"
SHORT_ID_LENGTH: Final = 7


class AheadMode(StrEnum):
    """How the ahead/behind lists were computed."""

    LOCAL = "local"
    UPSTREAM = "upstream"


@dataclass(frozen=True, slots=True)
class FileDelta:
    """One file's change in the staged or unstaged bucket, or in a commit.

    Zero counts mean either "not computed" or "genuinely unchanged lines",
    for example a mode change or a binary file.
    """

    path: str
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True, slots=True)
class UntrackedEntry:
    """An untracked, non-ignored path."""

    path: str


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """A commit with its diff statistics.

    Attributes:
        id: Full commit id.
        message: Trimmed commit message, or the short id when blank.
        timestamp_seconds: Committer timestamp.
        additions: Total added lines against the first parent.
        deletions: Total deleted lines against the first parent.
        files: Per-file breakdown.
        parents: Parent ids, first parent first.
    """

    id: str
    message: str
    timestamp_seconds: int
    additions: int = 0
    deletions: int = 0
    files: tuple[FileDelta, ...] = ()
    parents: tuple[str, ...] = ()

    @property
    def short_id(self) -> str:
        return self.id[:SHORT_ID_LENGTH]


@dataclass(frozen=True, slots=True)
class ClassifiedChanges:
    """Output of the status matrix classifier, sorted by path."""

    staged: tuple[FileDelta, ...] = ()
    modified: tuple[FileDelta, ...] = ()
    untracked: tuple[UntrackedEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class Divergence:
    """Commit divergence of the current branch.

    ``ahead_count`` and ``behind_count`` are the computed depths; the lists
    are capped at the display limit and may be shorter.
    """

    mode: AheadMode = AheadMode.LOCAL
    upstream_ref: str | None = None
    ahead_count: int = 0
    behind_count: int = 0
    ahead: tuple[CommitRecord, ...] = ()
    behind: tuple[CommitRecord, ...] = ()
    recent: tuple[CommitRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class SnapshotCounts:
    staged: int = 0
    modified: int = 0
    untracked: int = 0
    ahead: int = 0
    behind: int = 0
    recent: int = 0


@dataclass(frozen=True, slots=True)
class SnapshotDetails:
    staged: tuple[FileDelta, ...] = ()
    modified: tuple[FileDelta, ...] = ()
    untracked: tuple[UntrackedEntry, ...] = ()
    ahead: tuple[CommitRecord, ...] = ()
    behind: tuple[CommitRecord, ...] = ()
    recent: tuple[CommitRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class RepoSnapshot:
    """Complete state of a repository as shown on the dashboard.

    Attributes:
        repository_name: Name of the working tree directory.
        repository_path: Absolute path of the working tree.
        branch_name: Current branch, ``(detached)`` or ``(unknown)``.
        counts: Number of rows per bucket.
        ahead_mode: Whether ahead/behind is relative to an upstream.
        upstream_ref: The upstream ref compared against, if any.
        tracked_pending: Paths the user chose to track, all untracked.
        details: Rows per bucket.
    """

    repository_name: str
    repository_path: Path
    branch_name: str
    counts: SnapshotCounts
    ahead_mode: AheadMode
    details: SnapshotDetails
    upstream_ref: str | None = None
    tracked_pending: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class MutationResult:
    """A refreshed snapshot plus operation-specific extras."""

    snapshot: RepoSnapshot
    extras: Mapping[str, int | bool] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class BranchList:
    branches: tuple[str, ...]
    current: str


@dataclass(frozen=True, slots=True)
class SnapshotLimits:
    """Bounds applied while building a snapshot.

    Attributes:
        commit_rows: Display cap for ahead/behind/recent lists.
        history_depth: Depth of each walk when looking for a merge base.
        max_concurrency: Diff-stat commands allowed to run at once.
    """

    commit_rows: int = 100
    history_depth: int = 300
    max_concurrency: int = 16
