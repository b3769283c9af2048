"""Mutation endpoints.

Each returns ``{"ok": true, "state": ...}`` plus any operation extras.
Failures are turned into ``{"error": ...}`` by the app's exception handlers.
"""

from fastapi import APIRouter

from gitdash.dashboard import MutationResult
from gitdash.server._dependencies import DispatcherDep
from gitdash.server._schemas import (
    AddAllResponse,
    CheckoutRequest,
    CommitRequest,
    FileStageRequest,
    FileTrackRequest,
    MutationResponse,
    PushResponse,
    RepoState,
    UnstageAllResponse,
)

router = APIRouter(prefix="", tags=["mutations"])


def _state(result: MutationResult) -> RepoState:
    return RepoState.from_snapshot(result.snapshot)


@router.post("/checkout")
async def checkout(body: CheckoutRequest, dispatcher: DispatcherDep) -> MutationResponse:
    result = await dispatcher.checkout(body.branch, create=body.create)
    return MutationResponse(state=_state(result))


@router.post("/add-all")
async def add_all(dispatcher: DispatcherDep) -> AddAllResponse:
    result = await dispatcher.stage_all()
    return AddAllResponse(
        state=_state(result),
        added_untracked=int(result.extras.get("added_untracked", 0)),
    )


@router.post("/stage-modified")
async def stage_modified(dispatcher: DispatcherDep) -> MutationResponse:
    result = await dispatcher.stage_modified_only()
    return MutationResponse(state=_state(result))


@router.post("/track-all")
async def track_all(dispatcher: DispatcherDep) -> MutationResponse:
    result = await dispatcher.track_all_untracked()
    return MutationResponse(state=_state(result))


@router.post("/unstage-all")
async def unstage_all(dispatcher: DispatcherDep) -> UnstageAllResponse:
    result = await dispatcher.unstage_all()
    return UnstageAllResponse(
        state=_state(result), changed=int(result.extras.get("changed", 0))
    )


@router.post("/commit")
async def commit(body: CommitRequest, dispatcher: DispatcherDep) -> MutationResponse:
    result = await dispatcher.commit(body.message)
    return MutationResponse(state=_state(result))


@router.post("/push")
async def push(dispatcher: DispatcherDep) -> PushResponse:
    result = await dispatcher.push()
    return PushResponse(
        state=_state(result),
        upstream_fallback=bool(result.extras.get("upstream_fallback", False)),
    )


@router.post("/file-stage")
async def file_stage(
    body: FileStageRequest, dispatcher: DispatcherDep
) -> MutationResponse:
    result = await dispatcher.stage_path(body.file, stage=body.stage)
    return MutationResponse(state=_state(result))


@router.post("/file-track")
async def file_track(
    body: FileTrackRequest, dispatcher: DispatcherDep
) -> MutationResponse:
    result = await dispatcher.track_path(body.file, track=body.track)
    return MutationResponse(state=_state(result))
