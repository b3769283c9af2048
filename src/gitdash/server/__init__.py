"""HTTP API for the dashboard."""

from ._app import app, create_app
from ._dependencies import (
    get_backend,
    get_config,
    get_dispatcher,
    get_logger,
    get_snapshot_service,
    open_dulwich_backend,
)
from ._schemas import RepoState

__all__ = [
    "RepoState",
    "app",
    "create_app",
    "get_backend",
    "get_config",
    "get_dispatcher",
    "get_logger",
    "get_snapshot_service",
    "open_dulwich_backend",
]
