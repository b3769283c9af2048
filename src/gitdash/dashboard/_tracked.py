"""Persisted record of paths the user chose to track.

Tracking is a dashboard convenience distinct from staging: the path stays
untracked in git and is only remembered here until it is staged, committed,
deleted or untracked again. The record lives in a small JSON sidecar and is
read and written as a unit on every call, never cached in memory.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

import pendulum

from gitdash.utils import create_stderr_logger, dump_json, load_json_file

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger

STATE_FILENAME: Final = "gitdash.json"
ROOT_STATE_FILENAME: Final = ".gitdash.json"
_TRACKED_KEY: Final = "trackedPending"
_UPDATED_KEY: Final = "updatedAt"


class TrackedPendingStore:
    """Keyed JSON store for tracked-pending paths of one repository."""

    def __init__(
        self, path: Path, *, logger: FilteringBoundLogger | None = None
    ) -> None:
        """Create a store backed by ``path``.

        Args:
            path: Location of the JSON sidecar file.
            logger: Logger for read and write problems.
        """
        self._path = path
        if logger is None:
            logger = create_stderr_logger()
        self._logger: FilteringBoundLogger = logger

    @classmethod
    def for_repository(
        cls,
        root: Path,
        control_dir: Path | None,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> Self:
        """Create the store for a repository.

        The sidecar goes inside the metadata directory when there is one,
        otherwise a dotfile in the working tree root.
        """
        if control_dir is not None:
            return cls(control_dir / STATE_FILENAME, logger=logger)
        return cls(root / ROOT_STATE_FILENAME, logger=logger)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> frozenset[str]:
        """Read the tracked paths.

        Returns:
            The recorded paths; empty if the file is missing or corrupt.
        """
        if not self._path.exists():
            return frozenset()

        try:
            data = load_json_file(self._path)
        except OSError as e:
            self._logger.warning(
                "tracked_state_unreadable", path=str(self._path), error=str(e)
            )
            return frozenset()

        if not isinstance(data, dict):
            self._logger.warning("tracked_state_corrupt", path=str(self._path))
            return frozenset()

        paths = data.get(_TRACKED_KEY)
        if not isinstance(paths, list):
            return frozenset()
        return frozenset(p for p in paths if isinstance(p, str) and p)

    def add(self, paths: Iterable[str]) -> frozenset[str]:
        """Add paths to the record.

        Returns:
            The updated set.
        """
        current = self.read()
        updated = current | frozenset(paths)
        self._save_if_changed(current, updated)
        return updated

    def remove(self, paths: Iterable[str]) -> frozenset[str]:
        """Remove paths from the record.

        Returns:
            The updated set.
        """
        current = self.read()
        updated = current - frozenset(paths)
        self._save_if_changed(current, updated)
        return updated

    def prune(self, current_untracked: Iterable[str]) -> frozenset[str]:
        """Drop recorded paths that are no longer untracked.

        Heals drift from operations done outside the dashboard, such as
        committing or deleting a tracked-pending file from a terminal.

        A sidecar that cannot be rewritten is left stale; the pruned set is
        still returned and the next prune retries the write.

        Returns:
            The surviving set, always a subset of ``current_untracked``.
        """
        current = self.read()
        updated = current & frozenset(current_untracked)
        if updated != current:
            self._logger.debug(
                "tracked_state_pruned",
                removed=sorted(current - updated),
            )
        try:
            self._save_if_changed(current, updated)
        except OSError as e:
            self._logger.warning(
                "tracked_state_unwritable", path=str(self._path), error=str(e)
            )
        return updated

    def _save_if_changed(self, current: frozenset[str], updated: frozenset[str]) -> None:
        if updated != current:
            self._write(updated)

    def _write(self, paths: frozenset[str]) -> None:
        payload = {
            _TRACKED_KEY: sorted(paths),
            _UPDATED_KEY: pendulum.now("UTC").to_iso8601_string(),
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=".gitdash-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                _ = f.write(dump_json(payload, pretty=True))
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(OSError):
                Path(tmp_name).unlink()
            raise
