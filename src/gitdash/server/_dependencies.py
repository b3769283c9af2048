"""FastAPI dependencies shared by the API routes.

A backend is opened per request and closed when the response is sent, so
no repository state is held between polls.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Annotated, TypeAlias

from fastapi import Depends, Query, Request
from structlog.typing import FilteringBoundLogger

from gitdash.backend import BackendProtocol, DulwichBackend
from gitdash.config import Config, safe_load_config
from gitdash.dashboard import MutationDispatcher, SnapshotLimits, SnapshotService
from gitdash.utils import create_server_logger

BackendFactory: TypeAlias = Callable[[Config, Path | None], BackendProtocol]


def open_dulwich_backend(config: Config, path: Path | None) -> BackendProtocol:
    """Default backend factory."""
    return DulwichBackend(
        path,
        git_binary=config.git.binary,
        fallback_binary=config.git.fallback_binary,
        timeout_ms=config.git.timeout_ms,
    )


def get_config(request: Request) -> Config:
    """Application config, loaded on first use if none was supplied."""
    state = request.app.state
    if getattr(state, "config", None) is None:
        state.config, _ = safe_load_config()
    return state.config


def get_logger(
    request: Request, config: Annotated[Config, Depends(get_config)]
) -> FilteringBoundLogger:
    """Server logger, created from the logging config on first use."""
    state = request.app.state
    if getattr(state, "logger", None) is None:
        state.logger = create_server_logger(
            level=config.logging.level.value,
            log_format=config.logging.format.value,
            log_file=config.logging.file,
        )
    return state.logger


def get_backend(
    request: Request,
    config: Annotated[Config, Depends(get_config)],
    repo: Annotated[str | None, Query(description="Repository path override")] = None,
) -> Iterator[BackendProtocol]:
    """Open a backend for the requested (or configured) repository."""
    factory: BackendFactory = (
        getattr(request.app.state, "backend_factory", None) or open_dulwich_backend
    )
    path = Path(repo).expanduser() if repo else config.repository_path()
    backend = factory(config, path)
    try:
        yield backend
    finally:
        backend.close()


def _limits(config: Config) -> SnapshotLimits:
    return SnapshotLimits(
        commit_rows=config.limits.commit_rows,
        history_depth=config.limits.history_depth,
        max_concurrency=config.limits.max_concurrency,
    )


def get_snapshot_service(
    backend: Annotated[BackendProtocol, Depends(get_backend)],
    config: Annotated[Config, Depends(get_config)],
    logger: Annotated[FilteringBoundLogger, Depends(get_logger)],
) -> SnapshotService:
    return SnapshotService(backend, limits=_limits(config), logger=logger)


def get_dispatcher(
    backend: Annotated[BackendProtocol, Depends(get_backend)],
    config: Annotated[Config, Depends(get_config)],
    logger: Annotated[FilteringBoundLogger, Depends(get_logger)],
) -> MutationDispatcher:
    return MutationDispatcher(backend, limits=_limits(config), logger=logger)


ConfigDep = Annotated[Config, Depends(get_config)]
SnapshotServiceDep = Annotated[SnapshotService, Depends(get_snapshot_service)]
DispatcherDep = Annotated[MutationDispatcher, Depends(get_dispatcher)]
