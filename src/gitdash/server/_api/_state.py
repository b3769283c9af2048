import anyio.to_thread
from fastapi import APIRouter

from gitdash.server._dependencies import SnapshotServiceDep
from gitdash.server._schemas import BranchesResponse, RepoState

router = APIRouter(prefix="", tags=["state"])


@router.get("/state")
async def get_state(service: SnapshotServiceDep) -> RepoState:
    """Current snapshot of the repository."""
    snapshot = await service.build()
    return RepoState.from_snapshot(snapshot)


@router.get("/branches")
async def get_branches(service: SnapshotServiceDep) -> BranchesResponse:
    """Local branches and the checked-out branch."""
    branch_list = await anyio.to_thread.run_sync(service.list_branches)
    return BranchesResponse.from_branch_list(branch_list)
