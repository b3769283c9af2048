"""gitdash CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from . import _mutations, _status
from ._serve import app as serve_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = ["register_commands", "serve_app"]


def register_commands(app: App) -> None:
    app.command(serve_app)
    _status.register(app)
    _mutations.register(app)
