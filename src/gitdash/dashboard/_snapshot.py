"""Snapshot aggregation.

One snapshot is built in two phases: the structured reads (classification,
tracked-pending prune and divergence) run together in a worker thread
against the backend, then the diff-stat enricher fans out over every row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import anyio.to_thread

from gitdash.dashboard._classifier import classify_status
from gitdash.dashboard._divergence import DivergenceResolver
from gitdash.dashboard._enricher import DiffStatEnricher
from gitdash.dashboard._models import (
    DETACHED_BRANCH,
    UNKNOWN_BRANCH,
    BranchList,
    ClassifiedChanges,
    Divergence,
    RepoSnapshot,
    SnapshotCounts,
    SnapshotDetails,
    SnapshotLimits,
)
from gitdash.dashboard._tracked import TrackedPendingStore
from gitdash.exceptions import BackendUnavailableError
from gitdash.utils import create_stderr_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from gitdash.backend import BackendProtocol


@dataclass(frozen=True, slots=True)
class _RawState:
    branch_name: str
    changes: ClassifiedChanges
    divergence: Divergence
    tracked_pending: frozenset[str]


class SnapshotService:
    """Builds RepoSnapshot instances for one backend.

    Example:
        >>> service = SnapshotService(backend)
        >>> snapshot = await service.build()
        >>> snapshot.counts.staged
        1
    """

    def __init__(
        self,
        backend: BackendProtocol,
        *,
        limits: SnapshotLimits | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        if logger is None:
            logger = create_stderr_logger()
        self._backend = backend
        self._limits = limits or SnapshotLimits()
        self._logger: FilteringBoundLogger = logger
        self._resolver = DivergenceResolver(backend, limits=self._limits, logger=logger)
        self._enricher = DiffStatEnricher(
            backend, max_concurrency=self._limits.max_concurrency, logger=logger
        )

    @property
    def backend(self) -> BackendProtocol:
        return self._backend

    @property
    def tracked_store(self) -> TrackedPendingStore:
        """The tracked-pending store of this repository."""
        return TrackedPendingStore.for_repository(
            self._backend.root, self._backend.control_dir, logger=self._logger
        )

    async def build(self) -> RepoSnapshot:
        """Compute a fresh snapshot."""
        raw = await anyio.to_thread.run_sync(self.read_raw_state)
        changes, divergence = await self._enricher.enrich(raw.changes, raw.divergence)

        counts = SnapshotCounts(
            staged=len(changes.staged),
            modified=len(changes.modified),
            untracked=len(changes.untracked),
            ahead=divergence.ahead_count,
            behind=divergence.behind_count,
            recent=len(divergence.recent),
        )
        details = SnapshotDetails(
            staged=changes.staged,
            modified=changes.modified,
            untracked=changes.untracked,
            ahead=divergence.ahead,
            behind=divergence.behind,
            recent=divergence.recent,
        )
        return RepoSnapshot(
            repository_name=self._backend.root.name,
            repository_path=self._backend.root,
            branch_name=raw.branch_name,
            counts=counts,
            ahead_mode=divergence.mode,
            details=details,
            upstream_ref=divergence.upstream_ref,
            tracked_pending=tuple(sorted(raw.tracked_pending)),
        )

    def read_raw_state(self) -> _RawState:
        """Run the structured reads of a snapshot synchronously."""
        branch = self.read_branch_name()
        changes = self.classify()
        tracked = self.tracked_store.prune(entry.path for entry in changes.untracked)
        divergence = self._resolver.resolve(branch)
        return _RawState(
            branch_name=branch,
            changes=changes,
            divergence=divergence,
            tracked_pending=tracked,
        )

    def classify(self) -> ClassifiedChanges:
        """Classify the current status matrix."""
        return classify_status(
            self._backend.get_status_matrix(), self._backend.is_ignored
        )

    def read_branch_name(self) -> str:
        """Current branch name, ``(detached)`` or ``(unknown)``."""
        try:
            branch = self._backend.current_branch()
        except BackendUnavailableError as e:
            self._logger.warning("branch_unavailable", error=str(e))
            return UNKNOWN_BRANCH
        return branch if branch is not None else DETACHED_BRANCH

    def list_branches(self) -> BranchList:
        """Local branches and the current branch name."""
        return BranchList(
            branches=tuple(self._backend.list_branches()),
            current=self.read_branch_name(),
        )
