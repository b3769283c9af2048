from fastapi import APIRouter

from gitdash.server._schemas import ErrorResponse

from ._health import router as health_router
from ._mutations import router as mutations_router
from ._state import router as state_router
from ._version import router as version_router

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Rejected request"},
    500: {"model": ErrorResponse, "description": "Repository or git failure"},
}

router = APIRouter(prefix="/api", responses=_ERROR_RESPONSES)

router.include_router(health_router)
router.include_router(state_router)
router.include_router(version_router)
router.include_router(mutations_router)

api_router = router
