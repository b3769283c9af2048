# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake backend for testing.

This module provides a FakeBackend class that implements BackendProtocol
entirely in memory, so the aggregation and mutation engine can be tested
without a real repository or git executable.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self, TypeAlias

from gitdash.backend._models import CommandResult, CommitEntry, StatusRow
from gitdash.exceptions import BackendUnavailableError

CommandKey: TypeAlias = tuple[str, ...]
CommandHook: TypeAlias = Callable[[CommandKey, bool], CommandResult | None]

_OK = CommandResult(exit_code=0)


@dataclass(slots=True)
class FakeBackend:
    """Fake version-control backend for testing.

    State is plain data that tests manipulate directly:
    - ``rows`` maps a path to its (head, index, workdir) identities
    - ``refs`` maps full ref names (and ``HEAD``) to commit ids
    - ``commits`` holds the commit graph by id
    - ``responses`` scripts command results by argument tuple
    - ``executed`` records every command as (args, fallback)

    Unscripted commands succeed with empty output.

    Example:
        >>> backend = FakeBackend(branch="main")
        >>> backend.set_row("a.txt", head=None, index="b1", workdir="b1")
        >>> backend.add_commit("c1", timestamp=1)
        >>> backend.refs["refs/heads/main"] = "c1"
        >>> [row.path for row in backend.get_status_matrix()]
        ['a.txt']
    """

    root: Path = field(default_factory=lambda: Path("/fake/repo"))
    control_dir: Path | None = None
    branch: str | None = "main"
    rows: dict[str, tuple[str | None, str | None, str | None]] = field(
        default_factory=dict
    )
    refs: dict[str, str] = field(default_factory=dict)
    commits: dict[str, CommitEntry] = field(default_factory=dict)
    ignored: set[str] = field(default_factory=set)
    config: dict[tuple[str, str | None, str], str] = field(default_factory=dict)
    branches: list[str] = field(default_factory=list)
    responses: dict[CommandKey, CommandResult] = field(default_factory=dict)
    fallback_responses: dict[CommandKey, CommandResult] = field(default_factory=dict)
    on_execute: CommandHook | None = None
    executed: list[tuple[CommandKey, bool]] = field(default_factory=list)
    ignore_checks: list[str] = field(default_factory=list)
    closed: bool = False
    unavailable: bool = False

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
        """Mark the backend as closed."""
        self.closed = True

    # =========================================================================
    # Test Helpers
    # =========================================================================

    def set_row(
        self,
        path: str,
        *,
        head: str | None = None,
        index: str | None = None,
        workdir: str | None = None,
    ) -> None:
        """Set the three states of a path."""
        self.rows[path] = (head, index, workdir)

    def add_commit(
        self,
        commit_id: str,
        *,
        timestamp: int = 0,
        message: str = "",
        parents: Sequence[str] = (),
    ) -> CommitEntry:
        """Add a commit to the graph."""
        entry = CommitEntry(
            id=commit_id,
            message=message or f"commit {commit_id}",
            timestamp_seconds=timestamp,
            parents=tuple(parents),
        )
        self.commits[commit_id] = entry
        return entry

    def add_chain(
        self, ids: Sequence[str], *, parent: str | None = None, start: int = 0
    ) -> str | None:
        """Add a linear chain of commits, oldest first.

        Returns:
            The id of the newest commit in the chain, or ``parent`` if
            ``ids`` is empty.
        """
        tip = parent
        for offset, commit_id in enumerate(ids):
            self.add_commit(
                commit_id,
                timestamp=start + offset,
                parents=(tip,) if tip else (),
            )
            tip = commit_id
        return tip

    def respond(
        self,
        *args: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = 0,
        fallback: bool = False,
    ) -> None:
        """Script the result of a command."""
        table = self.fallback_responses if fallback else self.responses
        table[args] = CommandResult(stdout=stdout, stderr=stderr, exit_code=exit_code)

    def commands(self) -> list[CommandKey]:
        """Arguments of every executed command, in order."""
        return [args for args, _ in self.executed]

    # =========================================================================
    # BackendProtocol
    # =========================================================================

    def get_status_matrix(self) -> list[StatusRow]:
        """Return the configured rows sorted by path."""
        self._check_available()
        return [
            StatusRow(path=path, head=head, index=index, workdir=workdir)
            for path, (head, index, workdir) in sorted(self.rows.items())
        ]

    def resolve_ref(self, ref: str) -> str | None:
        """Look up a ref, following ``HEAD`` to the current branch."""
        if ref in self.refs:
            return self.refs[ref]
        if ref == "HEAD" and self.branch is not None:
            return self.refs.get(f"refs/heads/{self.branch}")
        return None

    def walk_commits(self, ref: str, depth: int) -> list[CommitEntry]:
        """Return reachable commits, newest first, at most ``depth``.

        Raises:
            BackendUnavailableError: If the ref does not resolve.
        """
        tip = self.resolve_ref(ref)
        if tip is None or tip not in self.commits:
            msg = f"Cannot resolve {ref}"
            raise BackendUnavailableError(msg, path=self.root, ref=ref)

        seen: dict[str, CommitEntry] = {}
        stack = [tip]
        while stack:
            commit_id = stack.pop()
            if commit_id in seen or commit_id not in self.commits:
                continue
            entry = self.commits[commit_id]
            seen[commit_id] = entry
            stack.extend(entry.parents)

        ordered = sorted(
            seen.values(), key=lambda c: (c.timestamp_seconds, c.id), reverse=True
        )
        return ordered[:depth]

    def is_ignored(self, path: str) -> bool:
        """Whether ``path`` is in the ignored set."""
        self.ignore_checks.append(path)
        return path in self.ignored

    def execute(self, args: Sequence[str], *, fallback: bool = False) -> CommandResult:
        """Record the command and return its scripted result."""
        key = tuple(args)
        self.executed.append((key, fallback))

        if self.on_execute is not None:
            result = self.on_execute(key, fallback)
            if result is not None:
                return result

        table = self.fallback_responses if fallback else self.responses
        return table.get(key, _OK)

    def current_branch(self) -> str | None:
        """Return the configured branch name (None when detached)."""
        self._check_available()
        return self.branch

    def get_config(self, section: str, subsection: str | None, name: str) -> str | None:
        """Look up a value in the config mapping."""
        return self.config.get((section, subsection, name))

    def list_branches(self) -> list[str]:
        """Return configured branches, or those implied by ``refs``."""
        if self.branches:
            return sorted(self.branches)
        prefix = "refs/heads/"
        return sorted(ref[len(prefix) :] for ref in self.refs if ref.startswith(prefix))

    def _check_available(self) -> None:
        if self.unavailable:
            msg = "Repository is unavailable"
            raise BackendUnavailableError(msg, path=self.root)
