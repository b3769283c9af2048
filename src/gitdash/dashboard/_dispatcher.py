"""Mutation commands.

Every mutation runs its git command(s) and then rebuilds the whole
snapshot, so callers never patch stale state. Mutations are not locked
against each other; concurrent calls race at git and the last snapshot
wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import anyio.to_thread

from gitdash.dashboard._models import (
    DETACHED_BRANCH,
    UNKNOWN_BRANCH,
    BranchList,
    MutationResult,
)
from gitdash.dashboard._snapshot import SnapshotService
from gitdash.exceptions import CommandFailedError, ValidationError
from gitdash.utils import create_stderr_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger

    from gitdash.backend import BackendProtocol, CommandResult
    from gitdash.dashboard._models import SnapshotLimits

_UPSTREAM_REMOTE: Final = "origin"

# Phrases git uses when a branch has nothing to push to
_NO_UPSTREAM_MARKERS: Final = (
    "has no upstream branch",
    "no upstream configured",
    "no upstream branch",
)


def indicates_missing_upstream(output: str) -> bool:
    """Whether a failed push reported a missing upstream branch."""
    lowered = output.lower()
    return any(marker in lowered for marker in _NO_UPSTREAM_MARKERS)


def _require(value: str | None, field: str, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message, field=field)
    return value


class MutationDispatcher:
    """Stage, unstage, commit, push, checkout and track operations."""

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
        self._logger: FilteringBoundLogger = logger
        self._snapshots = SnapshotService(backend, limits=limits, logger=logger)

    @property
    def snapshots(self) -> SnapshotService:
        return self._snapshots

    # =========================================================================
    # Staging
    # =========================================================================

    async def stage_all(self) -> MutationResult:
        """Stage every change, untracked files included.

        Extras:
            added_untracked: Untracked files that were staged.
        """
        before = await anyio.to_thread.run_sync(self._snapshots.classify)
        await self._run("add", "-A")
        return await self._refresh(added_untracked=len(before.untracked))

    async def unstage_all(self) -> MutationResult:
        """Unstage everything, keeping working-copy changes.

        Extras:
            changed: Paths that were staged before the call.
        """
        before = await anyio.to_thread.run_sync(self._snapshots.classify)
        if before.staged:
            if await self._has_commits():
                await self._run("reset", "-q", "HEAD", "--")
            else:
                await self._run("rm", "-r", "-q", "--cached", ".")
        return await self._refresh(changed=len(before.staged))

    async def stage_modified_only(self) -> MutationResult:
        """Stage tracked changes plus the tracked-pending paths."""
        await self._run("add", "-u")

        changes = await anyio.to_thread.run_sync(self._snapshots.classify)
        untracked = {entry.path for entry in changes.untracked}
        pending = sorted(self._snapshots.tracked_store.read() & untracked)
        if pending:
            await self._run("add", "--", *pending)
            self._snapshots.tracked_store.remove(pending)
        return await self._refresh()

    async def stage_path(self, path: str, *, stage: bool) -> MutationResult:
        """Stage or unstage a single path."""
        path = _require(path, "file", "File path is required")
        if stage:
            await self._run("add", "--", path)
        elif await self._has_commits():
            await self._run("reset", "-q", "HEAD", "--", path)
        else:
            await self._run("rm", "-q", "--cached", "--", path)
        return await self._refresh()

    # =========================================================================
    # Tracking
    # =========================================================================

    async def track_path(self, path: str, *, track: bool) -> MutationResult:
        """Add or remove a path from the tracked-pending record.

        No git command is run; the next refresh prunes paths that are not
        untracked.
        """
        path = _require(path, "file", "File path is required")
        store = self._snapshots.tracked_store
        if track:
            store.add([path])
        else:
            store.remove([path])
        return await self._refresh()

    async def track_all_untracked(self) -> MutationResult:
        """Record every current untracked path as tracked-pending."""
        changes = await anyio.to_thread.run_sync(self._snapshots.classify)
        paths = [entry.path for entry in changes.untracked]
        if paths:
            self._snapshots.tracked_store.add(paths)
        return await self._refresh()

    # =========================================================================
    # History and Branches
    # =========================================================================

    async def commit(self, message: str) -> MutationResult:
        """Commit the staged changes.

        Raises:
            ValidationError: If ``message`` is blank; nothing is run.
            CommandFailedError: If git refuses the commit.
        """
        message = _require(message, "message", "Commit message is required")
        await self._run("commit", "-m", message)
        return await self._refresh()

    async def push(self) -> MutationResult:
        """Push the current branch.

        A push rejected for lack of an upstream is retried once with
        ``--set-upstream origin <branch>``.

        Extras:
            upstream_fallback: Whether the retry was used.
        """
        result = await self._execute(("push",))
        if result.ok:
            return await self._refresh(upstream_fallback=False)

        if not indicates_missing_upstream(result.output):
            raise self._command_error(("push",), result)

        branch = await anyio.to_thread.run_sync(self._snapshots.read_branch_name)
        if branch in (DETACHED_BRANCH, UNKNOWN_BRANCH):
            raise self._command_error(("push",), result)

        self._logger.info("push_upstream_fallback", branch=branch)
        await self._run("push", "--set-upstream", _UPSTREAM_REMOTE, branch)
        return await self._refresh(upstream_fallback=True)

    async def checkout(self, branch: str, *, create: bool = False) -> MutationResult:
        """Switch to ``branch``, creating it first when ``create`` is set.

        Raises:
            ValidationError: If ``branch`` is blank or would be read as an
                option; nothing is run.
            CommandFailedError: If git refuses the checkout.
        """
        branch = _require(branch, "branch", "Branch name is required").strip()
        if branch.startswith("-"):
            msg = f"Invalid branch name: {branch}"
            raise ValidationError(msg, field="branch")
        if create:
            await self._run("checkout", "-b", branch)
        else:
            await self._run("checkout", branch)
        return await self._refresh()

    async def list_branches(self) -> BranchList:
        """Local branches and the current branch name."""
        return await anyio.to_thread.run_sync(self._snapshots.list_branches)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _has_commits(self) -> bool:
        head = await anyio.to_thread.run_sync(self._backend.resolve_ref, "HEAD")
        return head is not None

    async def _execute(self, args: Iterable[str]) -> CommandResult:
        args = tuple(args)
        return await anyio.to_thread.run_sync(self._backend.execute, args)

    async def _run(self, *args: str) -> CommandResult:
        result = await self._execute(args)
        if not result.ok:
            raise self._command_error(args, result)
        self._logger.debug("command_succeeded", args=list(args))
        return result

    def _command_error(
        self, args: tuple[str, ...], result: CommandResult
    ) -> CommandFailedError:
        self._logger.warning(
            "command_failed",
            args=list(args),
            exit_code=result.exit_code,
            error=result.output,
        )
        msg = result.output or f"git {' '.join(args)} failed"
        return CommandFailedError(
            msg, args=args, exit_code=result.exit_code, output=result.output
        )

    async def _refresh(self, **extras: int | bool) -> MutationResult:
        snapshot = await self._snapshots.build()
        return MutationResult(snapshot=snapshot, extras=extras)
