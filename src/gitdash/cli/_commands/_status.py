# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Read-only repository commands."""

from typing import Annotated

from cyclopts import App, Parameter

from gitdash.cli._shared import format_json, get_console
from gitdash.dashboard import BranchList, MutationDispatcher, RepoSnapshot

from ._common import print_json, render_snapshot, run_with_dispatcher


def register(app: App) -> None:
    @app.command(name="status")
    def _status(
        *,
        as_json: Annotated[
            bool, Parameter(name="--json", help="Print the snapshot as JSON")
        ] = False,
    ) -> None:
        """Show staged, modified and untracked files and branch divergence."""

        async def build(dispatcher: MutationDispatcher) -> RepoSnapshot:
            return await dispatcher.snapshots.build()

        snapshot = run_with_dispatcher(build)
        if as_json:
            print_json(snapshot)
        else:
            render_snapshot(snapshot)

    @app.command(name="branches")
    def _branches(
        *,
        as_json: Annotated[
            bool, Parameter(name="--json", help="Print the branch list as JSON")
        ] = False,
    ) -> None:
        """List local branches."""

        async def list_branches(dispatcher: MutationDispatcher) -> BranchList:
            return await dispatcher.list_branches()

        branch_list = run_with_dispatcher(list_branches)
        if as_json:
            data = {"branches": list(branch_list.branches), "current": branch_list.current}
            print(format_json(data))  # noqa: T201
            return

        console = get_console()
        for name in branch_list.branches:
            if name == branch_list.current:
                console.print(f"* [green]{name}[/green]")
            else:
                console.print(f"  {name}")
