"""Backend implementation on top of dulwich and the git executable.

Structured reads (status matrix, refs, history, ignore rules, config) go
through dulwich. Mutations and numeric diff statistics go through the git
executable, since dulwich has no numstat equivalent.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self

from dulwich.ignore import IgnoreFilterManager
from dulwich.index import IndexEntry, blob_from_path_and_stat
from dulwich.object_store import iter_tree_contents
from dulwich.objects import Commit, S_ISGITLINK

from gitdash.backend._models import UNHASHED_WORKDIR, CommitEntry, StatusRow
from gitdash.exceptions import BackendUnavailableError
from gitdash.utils import (
    DEFAULT_TIMEOUT_MS,
    CommandConfig,
    CommandResult,
    decode_bytes,
    get_control_dir,
    get_worktree_dir,
    resolve_repo,
    run_command,
    strip_refs_heads,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from dulwich.repo import Repo

_CONTROL_DIR_NAME: Final = ".git"

# Keeps git's output stable for parsing, stops it prompting for
# credentials on push, and makes every pathspec name exactly one path
# (no globs or ":(magic)").
_COMMAND_ENV: Final = {
    "GIT_TERMINAL_PROMPT": "0",
    "LC_ALL": "C",
    "GIT_LITERAL_PATHSPECS": "1",
}


def _mtime_ns(value: int | float | tuple[int, int]) -> int:
    if isinstance(value, tuple):
        seconds, nanoseconds = value
        return int(seconds) * 1_000_000_000 + int(nanoseconds)
    return int(value * 1_000_000_000)


class DulwichBackend:
    """Version-control backend for a single repository.

    Implements BackendProtocol. A backend instance is meant to live for
    one request: dulwich caches are never trusted across mutations.

    Example:
        >>> with DulwichBackend(Path("/path/to/repo")) as backend:
        ...     rows = backend.get_status_matrix()
    """

    __slots__: Final = (
        "_fallback_binary",
        "_git_binary",
        "_ignore_manager",
        "_repo",
        "_root",
        "_timeout_ms",
    )

    def __init__(
        self,
        working_dir: Path | None = None,
        *,
        git_binary: str = "git",
        fallback_binary: str = "git",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """Open the repository containing ``working_dir``.

        Args:
            working_dir: Directory inside the repository. Defaults to the
                current working directory.
            git_binary: Executable used by ``execute``.
            fallback_binary: Executable used by ``execute(fallback=True)``.
            timeout_ms: Timeout applied to each command.

        Raises:
            BackendUnavailableError: If no repository is found.
        """
        self._repo: Repo = resolve_repo(working_dir)
        self._root: Path = get_worktree_dir(self._repo).resolve()
        self._git_binary = git_binary
        self._fallback_binary = fallback_binary
        self._timeout_ms = timeout_ms
        self._ignore_manager: IgnoreFilterManager | None = None

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying dulwich repository."""
        self._repo.close()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """Absolute path of the repository working tree."""
        return self._root

    @property
    def control_dir(self) -> Path | None:
        """Repository metadata directory, or None if it is not a directory."""
        return get_control_dir(self._repo)

    # =========================================================================
    # Status Matrix
    # =========================================================================

    def get_status_matrix(self) -> list[StatusRow]:
        """Compare HEAD, index and working copy for every known path.

        Working-copy content is identified by blob id. Files whose size and
        mtime still match their index entry reuse the index blob id, the
        same shortcut git uses. Submodules and nested repositories are
        skipped.

        Returns:
            Rows sorted by path.
        """
        head = self._head_entries()
        index = self._index_entries()
        index_ids = {path: entry.sha.decode("ascii") for path, entry in index.items()}
        workdir = self._workdir_entries(head, index)

        paths = sorted(head.keys() | index_ids.keys() | workdir.keys())
        return [
            StatusRow(
                path=path,
                head=head.get(path),
                index=index_ids.get(path),
                workdir=workdir.get(path),
            )
            for path in paths
        ]

    def _head_entries(self) -> dict[str, str]:
        head_id = self.resolve_ref("HEAD")
        if head_id is None:
            return {}

        commit = self._repo[head_id.encode("ascii")]
        if not isinstance(commit, Commit):
            return {}

        return {
            decode_bytes(entry.path): entry.sha.decode("ascii")
            for entry in iter_tree_contents(self._repo.object_store, commit.tree)
            if not S_ISGITLINK(entry.mode)
        }

    def _index_entries(self) -> dict[str, IndexEntry]:
        entries: dict[str, IndexEntry] = {}
        for path_bytes, entry in self._repo.open_index().items():
            # Conflicted entries carry several stages; they have no single id
            if not isinstance(entry, IndexEntry) or S_ISGITLINK(entry.mode):
                continue
            entries[decode_bytes(path_bytes)] = entry
        return entries

    def _workdir_entries(
        self, head: dict[str, str], index: dict[str, IndexEntry]
    ) -> dict[str, str]:
        tracked = head.keys() | index.keys()
        tracked_dirs = {
            parent.as_posix()
            for path in tracked
            for parent in Path(path).parents
            if parent != Path()
        }
        index_mtime_ns = self._index_mtime_ns()

        entries: dict[str, str] = {}
        for dirpath, dirnames, filenames in os.walk(self._root):
            current = Path(dirpath)
            rel_dir = current.relative_to(self._root).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            kept_dirs: list[str] = []
            for name in dirnames:
                rel = f"{prefix}{name}"
                full = current / name
                if full.is_symlink():
                    filenames.append(name)
                elif name == _CONTROL_DIR_NAME or (full / _CONTROL_DIR_NAME).exists():
                    continue
                elif rel in tracked_dirs or not self.is_ignored(f"{rel}/"):
                    kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for name in filenames:
                rel = f"{prefix}{name}"
                if rel not in tracked:
                    entries[rel] = UNHASHED_WORKDIR
                    continue
                blob_id = self._workdir_blob_id(
                    current / name, index.get(rel), index_mtime_ns
                )
                if blob_id is not None:
                    entries[rel] = blob_id

        return entries

    def _index_mtime_ns(self) -> int:
        try:
            return os.stat(self._repo.index_path()).st_mtime_ns
        except OSError:
            return 0

    @staticmethod
    def _workdir_blob_id(
        full_path: Path, entry: IndexEntry | None, index_mtime_ns: int
    ) -> str | None:
        try:
            st = os.lstat(full_path)
        except OSError:
            return None
        if not (stat.S_ISREG(st.st_mode) or stat.S_ISLNK(st.st_mode)):
            return None

        if (
            entry is not None
            and entry.size == st.st_size
            and _mtime_ns(entry.mtime) == st.st_mtime_ns
            and st.st_mtime_ns < index_mtime_ns
        ):
            return entry.sha.decode("ascii")

        try:
            blob = blob_from_path_and_stat(os.fsencode(full_path), st)
        except OSError:
            return None
        return blob.id.decode("ascii")

    # =========================================================================
    # Refs and History
    # =========================================================================

    def resolve_ref(self, ref: str) -> str | None:
        """Resolve a full ref name (or ``HEAD``) to a hex commit id."""
        try:
            sha: bytes = self._repo.refs[ref.encode("utf-8")]
        except KeyError:
            return None
        return sha.decode("ascii")

    def walk_commits(self, ref: str, depth: int) -> list[CommitEntry]:
        """Walk history from ``ref``, newest first, at most ``depth`` commits.

        Raises:
            BackendUnavailableError: If the ref does not resolve or an object
                in the history is missing.
        """
        sha = self.resolve_ref(ref)
        if sha is None:
            msg = f"Cannot resolve {ref}"
            raise BackendUnavailableError(msg, path=self._root, ref=ref)

        try:
            walker = self._repo.get_walker(
                include=[sha.encode("ascii")], max_entries=depth
            )
            return [self._to_commit_entry(entry.commit) for entry in walker]
        except KeyError as e:
            msg = f"History of {ref} is incomplete: missing object {e}"
            raise BackendUnavailableError(msg, path=self._root, ref=ref) from e

    @staticmethod
    def _to_commit_entry(commit: Commit) -> CommitEntry:
        return CommitEntry(
            id=commit.id.decode("ascii"),
            message=decode_bytes(commit.message),
            timestamp_seconds=int(commit.commit_time),
            parents=tuple(parent.decode("ascii") for parent in commit.parents),
        )

    def current_branch(self) -> str | None:
        """Short name of the checked-out branch, or None when detached.

        Raises:
            BackendUnavailableError: If HEAD cannot be read.
        """
        try:
            symrefs = self._repo.refs.get_symrefs()
        except (KeyError, OSError) as e:
            msg = f"Cannot read HEAD: {e}"
            raise BackendUnavailableError(msg, path=self._root, ref="HEAD") from e

        target = symrefs.get(b"HEAD")
        if target is None or not target.startswith(b"refs/heads/"):
            return None
        return strip_refs_heads(target)

    def list_branches(self) -> list[str]:
        """Sorted short names of local branches."""
        names = self._repo.refs.keys(base=b"refs/heads/")
        return sorted(decode_bytes(name) for name in names)

    # =========================================================================
    # Ignore Rules and Config
    # =========================================================================

    def is_ignored(self, path: str) -> bool:
        """Whether ignore rules exclude ``path``.

        Directory paths must end with ``/``.
        """
        if self._ignore_manager is None:
            self._ignore_manager = IgnoreFilterManager.from_repo(self._repo)
        return bool(self._ignore_manager.is_ignored(path))

    def get_config(self, section: str, subsection: str | None, name: str) -> str | None:
        """Read a value from the repository's own config file."""
        key: tuple[bytes, ...] = (section.encode("utf-8"),)
        if subsection is not None:
            key = (section.encode("utf-8"), subsection.encode("utf-8"))
        try:
            value = self._repo.get_config().get(key, name.encode("utf-8"))
        except KeyError:
            return None
        return decode_bytes(value)

    # =========================================================================
    # Command Port
    # =========================================================================

    def execute(self, args: Sequence[str], *, fallback: bool = False) -> CommandResult:
        """Run ``git <args>`` in the working tree without a shell."""
        binary = self._fallback_binary if fallback else self._git_binary
        return run_command(
            CommandConfig(
                argv=[binary, *args],
                cwd=self._root,
                env=dict(_COMMAND_ENV),
                timeout_ms=self._timeout_ms,
            )
        )
