# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Commands that change the repository."""

from typing import Annotated

from cyclopts import App, Parameter

from gitdash.dashboard import MutationDispatcher, MutationResult

from ._common import report, run_with_dispatcher

JsonFlag = Annotated[bool, Parameter(name="--json", help="Print the result as JSON")]


def register(app: App) -> None:  # noqa: C901
    @app.command(name="add-all")
    def _add_all(*, as_json: JsonFlag = False) -> None:
        """Stage every change, including untracked files."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.stage_all()

        result = run_with_dispatcher(call)
        added = result.extras.get("added_untracked", 0)
        report(result, as_json=as_json, message=f"Staged all changes ({added} new)")

    @app.command(name="stage-modified")
    def _stage_modified(*, as_json: JsonFlag = False) -> None:
        """Stage tracked changes and tracked-pending files only."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.stage_modified_only()

        report(run_with_dispatcher(call), as_json=as_json, message="Staged changes")

    @app.command(name="unstage-all")
    def _unstage_all(*, as_json: JsonFlag = False) -> None:
        """Unstage everything, keeping working-copy edits."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.unstage_all()

        result = run_with_dispatcher(call)
        changed = result.extras.get("changed", 0)
        report(result, as_json=as_json, message=f"Unstaged {changed} file(s)")

    @app.command(name="stage")
    def _stage(
        file: str,
        /,
        *,
        unstage: Annotated[
            bool, Parameter(help="Remove the file from the index instead")
        ] = False,
        as_json: JsonFlag = False,
    ) -> None:
        """Stage or unstage a single file."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.stage_path(file, stage=not unstage)

        verb = "Unstaged" if unstage else "Staged"
        report(run_with_dispatcher(call), as_json=as_json, message=f"{verb} {file}")

    @app.command(name="track")
    def _track(
        file: str,
        /,
        *,
        untrack: Annotated[
            bool, Parameter(help="Forget the file instead of tracking it")
        ] = False,
        as_json: JsonFlag = False,
    ) -> None:
        """Mark an untracked file to be staged with the modified files."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.track_path(file, track=not untrack)

        verb = "Untracked" if untrack else "Tracking"
        report(run_with_dispatcher(call), as_json=as_json, message=f"{verb} {file}")

    @app.command(name="track-all")
    def _track_all(*, as_json: JsonFlag = False) -> None:
        """Mark every untracked file as tracked-pending."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.track_all_untracked()

        report(run_with_dispatcher(call), as_json=as_json, message="Tracking all")

    @app.command(name="commit")
    def _commit(message: str, /, *, as_json: JsonFlag = False) -> None:
        """Commit the staged changes."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.commit(message)

        report(run_with_dispatcher(call), as_json=as_json, message="Committed")

    @app.command(name="push")
    def _push(*, as_json: JsonFlag = False) -> None:
        """Push the current branch, setting its upstream when missing."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.push()

        result = run_with_dispatcher(call)
        message = "Pushed"
        if result.extras.get("upstream_fallback"):
            message = "Pushed and set upstream to origin"
        report(result, as_json=as_json, message=message)

    @app.command(name="checkout")
    def _checkout(
        branch: str,
        /,
        *,
        create: Annotated[
            bool, Parameter(name=["--create", "-b"], help="Create the branch first")
        ] = False,
        as_json: JsonFlag = False,
    ) -> None:
        """Switch branches."""

        async def call(dispatcher: MutationDispatcher) -> MutationResult:
            return await dispatcher.checkout(branch, create=create)

        report(
            run_with_dispatcher(call), as_json=as_json, message=f"Switched to {branch}"
        )
