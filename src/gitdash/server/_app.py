# pyright: reportAny=false
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from structlog.typing import FilteringBoundLogger

from gitdash import __version__
from gitdash.config import Config, safe_load_config
from gitdash.exceptions import GitdashError, ValidationError
from gitdash.utils import create_server_logger

from ._api import api_router
from ._dependencies import BackendFactory


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log server start and stop with the configured logger."""
    state = app.state
    if getattr(state, "config", None) is None:
        state.config, _ = safe_load_config()
    config: Config = state.config
    if getattr(state, "logger", None) is None:
        state.logger = create_server_logger(
            level=config.logging.level.value,
            log_format=config.logging.format.value,
            log_file=config.logging.file,
        )
    logger: FilteringBoundLogger = state.logger
    logger.info(
        "server_started",
        version=__version__,
        repository=config.repository.path or ".",
    )
    yield
    logger.info("server_stopped")


def _error_logger(request: Request) -> FilteringBoundLogger | None:
    return getattr(request.app.state, "logger", None)


async def _handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _handle_request_validation_error(
    request: Request, exc: Exception
) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = "; ".join(str(error.get("msg", "")) for error in errors) or str(exc)
    return JSONResponse(status_code=400, content={"error": message})


async def _handle_gitdash_error(request: Request, exc: Exception) -> JSONResponse:
    logger = _error_logger(request)
    if logger is not None:
        logger.warning(
            "request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(
    config: Config | None = None,
    *,
    backend_factory: BackendFactory | None = None,
    logger: FilteringBoundLogger | None = None,
) -> FastAPI:
    """Create the dashboard API application.

    Args:
        config: Application config. Loaded from the usual sources when None.
        backend_factory: Opens a backend per request. Defaults to dulwich.
        logger: Server logger. Built from the logging config when None.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(
        title="gitdash",
        version=__version__,
        docs_url=None,
        redoc_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.logger = logger
    app.state.backend_factory = backend_factory

    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation_error)
    app.add_exception_handler(GitdashError, _handle_gitdash_error)
    app.include_router(router=api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
