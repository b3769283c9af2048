# pyright: reportUnusedCallResult=false
"""Dashboard API server command."""

import os
import socket
from typing import Annotated, Literal, cast

import uvicorn
from cyclopts import App, Parameter

from gitdash.cli._context import CLIContext
from gitdash.config import ENV_PREFIX
from gitdash.utils import get_package_dir

app = App(name="serve", help="Run the dashboard API server", help_on_error=True)

LogLevel = Literal["critical", "error", "warning", "info", "debug", "trace"]

# Read by the server process when it loads its own config
REPOSITORY_ENV_VAR = f"{ENV_PREFIX}REPOSITORY__PATH"


@app.default
def serve(
    *,
    host: Annotated[
        str | None,
        Parameter(help="Bind socket to this host. Defaults to server.host."),
    ] = None,
    port: Annotated[
        int | None,
        Parameter(
            help="Bind socket to this port. If 0, an available port is selected."
        ),
    ] = None,
    dev: Annotated[
        bool,
        Parameter(help="Development mode: reload on changes to the package."),
    ] = False,
    reload: Annotated[
        bool,
        Parameter(help="Enable auto-reload."),
    ] = False,
    log_level: Annotated[
        LogLevel,
        Parameter(help="Uvicorn log level."),
    ] = "info",
    access_log: Annotated[
        bool,
        Parameter(help="Enable access log."),
    ] = True,
) -> None:
    """Run the dashboard API server using uvicorn."""
    ctx = CLIContext.get_current()
    effective_host = host if host is not None else ctx.config.server.host
    effective_port = port if port is not None else ctx.config.server.port

    if effective_port == 0:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((effective_host, 0))
            addr = cast("tuple[str, int]", s.getsockname())
            effective_port = addr[1]

    if ctx.repository is not None:
        os.environ[REPOSITORY_ENV_VAR] = str(ctx.repository.resolve())

    config: dict[str, object] = {
        "app": "gitdash.server:app",
        "host": effective_host,
        "port": effective_port,
        "reload": reload or dev,
        "log_level": log_level,
        "access_log": access_log,
    }
    if dev:
        config["reload_dirs"] = [str(get_package_dir())]

    print(f"Starting gitdash API server on {effective_host}:{effective_port}")  # noqa: T201
    uvicorn.run(**config)  # pyright: ignore[reportArgumentType]
