"""Helpers shared by the repository commands."""

from collections.abc import Awaitable, Callable
from typing import TypeAlias, TypeVar

import anyio
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from structlog.typing import FilteringBoundLogger

from gitdash.backend import DulwichBackend
from gitdash.cli._context import CLIContext
from gitdash.cli._shared import ExitCode, exit_with_error, format_json, get_console
from gitdash.config import Config
from gitdash.dashboard import (
    CommitRecord,
    FileDelta,
    MutationDispatcher,
    MutationResult,
    RepoSnapshot,
    SnapshotLimits,
)
from gitdash.exceptions import (
    BackendUnavailableError,
    CommandFailedError,
    GitdashError,
    ValidationError,
)
from gitdash.server._schemas import RepoState
from gitdash.utils import create_stderr_logger

T = TypeVar("T")

DispatcherCall: TypeAlias = Callable[[MutationDispatcher], Awaitable[T]]


def limits_from(config: Config) -> SnapshotLimits:
    return SnapshotLimits(
        commit_rows=config.limits.commit_rows,
        history_depth=config.limits.history_depth,
        max_concurrency=config.limits.max_concurrency,
    )


def _logger(ctx: CLIContext) -> FilteringBoundLogger:
    return ctx.logger if ctx.logger is not None else create_stderr_logger()


def open_backend(ctx: CLIContext) -> DulwichBackend:
    """Open the repository selected by ``--repo`` or the config."""
    try:
        return DulwichBackend(
            ctx.repository,
            git_binary=ctx.config.git.binary,
            fallback_binary=ctx.config.git.fallback_binary,
            timeout_ms=ctx.config.git.timeout_ms,
        )
    except BackendUnavailableError as e:
        exit_with_error(str(e), ExitCode.NOT_FOUND)


def run_with_dispatcher(call: DispatcherCall[T]) -> T:
    """Run an async dispatcher operation, mapping errors to exit codes."""
    ctx = CLIContext.get_current()
    with open_backend(ctx) as backend:
        dispatcher = MutationDispatcher(
            backend, limits=limits_from(ctx.config), logger=_logger(ctx)
        )
        try:
            return anyio.run(call, dispatcher)
        except ValidationError as e:
            exit_with_error(str(e), ExitCode.VALIDATION_ERROR)
        except CommandFailedError as e:
            exit_with_error(str(e), ExitCode.COMMAND_FAILED)
        except GitdashError as e:
            exit_with_error(str(e), ExitCode.INTERNAL_ERROR)


def print_json(snapshot: RepoSnapshot, **extras: object) -> None:
    payload: dict[str, object] = {
        "state": RepoState.from_snapshot(snapshot).model_dump(mode="json", by_alias=True),
        **extras,
    }
    print(format_json(payload))  # noqa: T201


def _file_table(title: str, rows: tuple[FileDelta, ...], style: str) -> Table:
    table = Table(title=title, title_style=style, title_justify="left", box=None)
    table.add_column("File")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for row in rows:
        table.add_row(row.path, str(row.additions), str(row.deletions))
    return table


def _commit_table(title: str, commits: tuple[CommitRecord, ...]) -> Table:
    table = Table(title=title, title_justify="left", box=None)
    table.add_column("Commit", style="yellow")
    table.add_column("Message")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for commit in commits:
        table.add_row(
            commit.short_id,
            commit.message.splitlines()[0],
            str(commit.additions),
            str(commit.deletions),
        )
    return table


def render_snapshot(snapshot: RepoSnapshot, console: Console | None = None) -> None:
    """Print a human-readable snapshot."""
    if console is None:
        console = get_console()

    counts = snapshot.counts
    details = snapshot.details
    upstream = snapshot.upstream_ref or "no upstream"
    console.print(
        f"[bold]{snapshot.repository_name}[/bold] on [cyan]{snapshot.branch_name}[/cyan]"
        f" [dim]({snapshot.ahead_mode.value}, {upstream})[/dim]"
    )
    console.print(
        f"staged {counts.staged}  modified {counts.modified}  "
        f"untracked {counts.untracked}  ahead {counts.ahead}  behind {counts.behind}"
    )

    if details.staged:
        console.print(_file_table("Staged", details.staged, "bold green"))
    if details.modified:
        console.print(_file_table("Modified", details.modified, "bold yellow"))
    if details.untracked:
        pending = set(snapshot.tracked_pending)
        console.print("[bold cyan]Untracked[/bold cyan]")
        for entry in details.untracked:
            marker = " [dim](tracked)[/dim]" if entry.path in pending else ""
            console.print(f"  [cyan]? {escape(entry.path)}[/cyan]{marker}")
    if details.ahead:
        console.print(_commit_table(f"Ahead ({counts.ahead})", details.ahead))
    if details.behind:
        console.print(_commit_table(f"Behind ({counts.behind})", details.behind))


def report(result: MutationResult, *, as_json: bool, message: str) -> None:
    """Print the outcome of a mutation."""
    if as_json:
        print_json(result.snapshot, **dict(result.extras))
        return
    console = get_console()
    console.print(f"[green]{message}[/green]")
    render_snapshot(result.snapshot, console)
