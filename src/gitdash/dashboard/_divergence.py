"""Ahead/behind resolution against an upstream ref.

The merge base is found with a bounded linear scan: both histories are
walked to a fixed depth and the first local commit that also appears in
the upstream walk is taken as the base. This is exact for short, mostly
linear divergence and undercounts unrelated or very deep histories, where
no shared commit is seen and both counts fall back to zero.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitdash.dashboard._models import (
    DETACHED_BRANCH,
    UNKNOWN_BRANCH,
    AheadMode,
    CommitRecord,
    Divergence,
    SnapshotLimits,
)
from gitdash.exceptions import BackendUnavailableError
from gitdash.utils import create_stderr_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from structlog.typing import FilteringBoundLogger

    from gitdash.backend import BackendProtocol, CommitEntry

_HEADS_PREFIX = "refs/heads/"


def to_commit_record(entry: CommitEntry) -> CommitRecord:
    """Convert a history row into a CommitRecord with zero stats."""
    message = entry.message.strip() or entry.id[:7]
    return CommitRecord(
        id=entry.id,
        message=message,
        timestamp_seconds=entry.timestamp_seconds,
        parents=entry.parents,
    )


def index_commits(commits: Iterable[CommitEntry]) -> dict[str, int]:
    """Map each commit id to its position in walk order."""
    positions: dict[str, int] = {}
    for entry in commits:
        positions.setdefault(entry.id, len(positions))
    return positions


def find_merge_base(
    local: Mapping[str, int], upstream: Mapping[str, int]
) -> str | None:
    """Return the first local commit (in walk order) also seen upstream."""
    for commit_id in local:
        if commit_id in upstream:
            return commit_id
    return None


def count_divergence(
    local: Mapping[str, int], upstream: Mapping[str, int]
) -> tuple[int, int]:
    """Compute (ahead, behind) from two positional commit maps.

    Both are 0 when the walks share no commit.
    """
    base = find_merge_base(local, upstream)
    if base is None:
        return 0, 0
    return local[base], upstream[base]


class DivergenceResolver:
    """Resolves the upstream of the current branch and the commits between.

    Upstream candidates, in priority order:

    1. ``branch.<name>.remote`` + ``branch.<name>.merge`` from config
    2. ``refs/remotes/origin/<name>``
    3. ``refs/remotes/origin/HEAD``
    """

    def __init__(
        self,
        backend: BackendProtocol,
        *,
        limits: SnapshotLimits | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._backend = backend
        self._limits = limits or SnapshotLimits()
        if logger is None:
            logger = create_stderr_logger()
        self._logger: FilteringBoundLogger = logger

    def upstream_candidates(self, branch: str) -> list[str]:
        """List upstream ref names to try for ``branch``, best first."""
        candidates: list[str] = []

        remote = self._backend.get_config("branch", branch, "remote")
        merge = self._backend.get_config("branch", branch, "merge")
        if remote and merge and merge.startswith(_HEADS_PREFIX):
            candidates.append(f"refs/remotes/{remote}/{merge[len(_HEADS_PREFIX) :]}")

        candidates.extend(
            (f"refs/remotes/origin/{branch}", "refs/remotes/origin/HEAD")
        )
        return list(dict.fromkeys(candidates))

    def find_upstream(self, branch: str) -> str | None:
        """Return the first upstream candidate that resolves, if any."""
        if branch in (DETACHED_BRANCH, UNKNOWN_BRANCH):
            return None
        if self._backend.resolve_ref(f"{_HEADS_PREFIX}{branch}") is None:
            return None

        for candidate in self.upstream_candidates(branch):
            if self._backend.resolve_ref(candidate) is not None:
                return candidate
        return None

    def resolve(self, branch: str) -> Divergence:
        """Compute divergence for ``branch``.

        Never raises for history problems; unreadable history yields empty
        lists and zero counts.
        """
        recent = self._walk("HEAD", self._limits.commit_rows)
        recent_records = tuple(to_commit_record(entry) for entry in recent)

        upstream = self.find_upstream(branch)
        if upstream is None:
            return Divergence(
                mode=AheadMode.LOCAL,
                ahead_count=len(recent_records),
                ahead=recent_records,
                recent=recent_records,
            )

        local_ref = f"{_HEADS_PREFIX}{branch}"
        local_walk = self._walk(local_ref, self._limits.history_depth)
        upstream_walk = self._walk(upstream, self._limits.history_depth)
        ahead_count, behind_count = count_divergence(
            index_commits(local_walk), index_commits(upstream_walk)
        )

        self._logger.debug(
            "divergence_resolved",
            branch=branch,
            upstream=upstream,
            ahead=ahead_count,
            behind=behind_count,
        )

        return Divergence(
            mode=AheadMode.UPSTREAM,
            upstream_ref=upstream,
            ahead_count=ahead_count,
            behind_count=behind_count,
            ahead=self._cap(local_walk, ahead_count),
            behind=self._cap(upstream_walk, behind_count),
            recent=recent_records,
        )

    def _cap(self, walk: Sequence[CommitEntry], count: int) -> tuple[CommitRecord, ...]:
        limit = min(count, self._limits.commit_rows)
        return tuple(to_commit_record(entry) for entry in walk[:limit])

    def _walk(self, ref: str, depth: int) -> list[CommitEntry]:
        try:
            return self._backend.walk_commits(ref, depth)
        except BackendUnavailableError as e:
            self._logger.debug("history_unavailable", ref=ref, error=str(e))
            return []
