"""Diff statistic enrichment.

Fills in addition/deletion counts for file rows and commits by running
``git diff --numstat``. Each row is enriched independently in a worker
thread; a failing row degrades to zero stats and never fails the batch.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, TypeVar

import anyio
import anyio.to_thread

from gitdash.dashboard._models import (
    ClassifiedChanges,
    CommitRecord,
    Divergence,
    FileDelta,
)
from gitdash.dashboard._numstat import ZERO_STAT, LineStat, lookup_stat, parse_numstat
from gitdash.exceptions import GitdashError
from gitdash.utils import create_stderr_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from structlog.typing import FilteringBoundLogger

    from gitdash.backend import BackendProtocol

T = TypeVar("T")

# Paths are printed verbatim instead of octal-escaped
_NUMSTAT_PREFIX = ("-c", "core.quotepath=off")

DEFAULT_MAX_CONCURRENCY = 16


class DiffStatEnricher:
    """Attach numeric diff statistics to snapshot rows.

    Command failures are retried once with the backend's fallback binary;
    if that fails too the row keeps zero stats.
    """

    def __init__(
        self,
        backend: BackendProtocol,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._backend = backend
        self._max_concurrency = max_concurrency
        if logger is None:
            logger = create_stderr_logger()
        self._logger: FilteringBoundLogger = logger

    # =========================================================================
    # Batch Enrichment
    # =========================================================================

    async def enrich(
        self, changes: ClassifiedChanges, divergence: Divergence
    ) -> tuple[ClassifiedChanges, Divergence]:
        """Enrich every file row and commit of one snapshot concurrently.

        Commits that appear in more than one list are diffed once.
        """
        limiter = anyio.CapacityLimiter(self._max_concurrency)

        unique_commits = {
            commit.id: commit
            for commit in (*divergence.ahead, *divergence.behind, *divergence.recent)
        }

        staged: list[FileDelta] = []
        modified: list[FileDelta] = []
        commits: list[CommitRecord] = []

        async with anyio.create_task_group() as tg:
            tg.start_soon(
                self._gather_into, staged, changes.staged, self._staged_stat, limiter
            )
            tg.start_soon(
                self._gather_into,
                modified,
                changes.modified,
                self._unstaged_stat,
                limiter,
            )
            tg.start_soon(
                self._gather_into,
                commits,
                list(unique_commits.values()),
                self.commit_stat,
                limiter,
            )

        by_id = {commit.id: commit for commit in commits}

        def refresh(records: Sequence[CommitRecord]) -> tuple[CommitRecord, ...]:
            return tuple(by_id.get(record.id, record) for record in records)

        enriched_changes = dataclasses.replace(
            changes, staged=tuple(staged), modified=tuple(modified)
        )
        enriched_divergence = dataclasses.replace(
            divergence,
            ahead=refresh(divergence.ahead),
            behind=refresh(divergence.behind),
            recent=refresh(divergence.recent),
        )
        return enriched_changes, enriched_divergence

    async def enrich_files(
        self, rows: Sequence[FileDelta], *, cached: bool
    ) -> tuple[FileDelta, ...]:
        """Enrich staged (``cached=True``) or unstaged file rows."""
        stat_fn = self._staged_stat if cached else self._unstaged_stat
        results: list[FileDelta] = []
        await self._gather_into(
            results, rows, stat_fn, anyio.CapacityLimiter(self._max_concurrency)
        )
        return tuple(results)

    async def enrich_commits(
        self, commits: Sequence[CommitRecord]
    ) -> tuple[CommitRecord, ...]:
        """Enrich commits with totals and per-file breakdowns."""
        results: list[CommitRecord] = []
        await self._gather_into(
            results,
            commits,
            self.commit_stat,
            anyio.CapacityLimiter(self._max_concurrency),
        )
        return tuple(results)

    async def _gather_into(
        self,
        out: list[T],
        items: Sequence[T],
        stat_fn: Callable[[T], T],
        limiter: anyio.CapacityLimiter,
    ) -> None:
        """Run ``stat_fn`` over ``items`` in worker threads, keeping order."""
        results: list[T] = list(items)

        async def run_one(position: int, item: T) -> None:
            results[position] = await anyio.to_thread.run_sync(
                self._isolated, stat_fn, item, limiter=limiter
            )

        async with anyio.create_task_group() as tg:
            for position, item in enumerate(items):
                tg.start_soon(run_one, position, item)

        out.extend(results)

    def _isolated(self, stat_fn: Callable[[T], T], item: T) -> T:
        try:
            return stat_fn(item)
        except (GitdashError, OSError, ValueError) as e:
            self._logger.warning("enrichment_failed", item=repr(item), error=str(e))
            return item

    # =========================================================================
    # Per-row Statistics
    # =========================================================================

    def numstat(self, args: Sequence[str]) -> dict[str, LineStat]:
        """Run a numstat command, retrying with the fallback binary.

        Returns:
            Parsed stats, or an empty map if both attempts failed.
        """
        full_args = (*_NUMSTAT_PREFIX, *args)
        result = self._backend.execute(full_args)
        if result.ok:
            return parse_numstat(result.stdout)

        self._logger.warning(
            "numstat_failed",
            args=list(args),
            exit_code=result.exit_code,
            error=result.output,
        )
        result = self._backend.execute(full_args, fallback=True)
        if result.ok:
            return parse_numstat(result.stdout)

        self._logger.warning(
            "numstat_fallback_failed",
            args=list(args),
            exit_code=result.exit_code,
            error=result.output,
        )
        return {}

    def file_stat(self, path: str, *, cached: bool) -> FileDelta:
        """Line counts for one file, index vs HEAD or workdir vs index."""
        args = ["diff", "--numstat", "--", path]
        if cached:
            args.insert(1, "--cached")
        stat = lookup_stat(self.numstat(args), path) or ZERO_STAT
        return FileDelta(path, stat.additions, stat.deletions)

    def commit_stat(self, commit: CommitRecord) -> CommitRecord:
        """Totals and per-file breakdown of a commit against its first parent."""
        if commit.parents:
            args = ["diff", "--numstat", commit.parents[0], commit.id]
        else:
            args = ["show", "--numstat", "--format=", commit.id]

        stats = self.numstat(args)
        files = tuple(
            FileDelta(path, stat.additions, stat.deletions)
            for path, stat in stats.items()
        )
        return dataclasses.replace(
            commit,
            additions=sum(f.additions for f in files),
            deletions=sum(f.deletions for f in files),
            files=files,
        )

    def _staged_stat(self, row: FileDelta) -> FileDelta:
        return self.file_stat(row.path, cached=True)

    def _unstaged_stat(self, row: FileDelta) -> FileDelta:
        return self.file_stat(row.path, cached=False)
