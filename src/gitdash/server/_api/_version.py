from pathlib import Path

import anyio.to_thread
from fastapi import APIRouter

from gitdash import __version__
from gitdash.server._dependencies import ConfigDep
from gitdash.server._schemas import VersionResponse

router = APIRouter(prefix="", tags=["version"])


def compute_asset_version(assets_dir: str) -> str:
    """Freshness token for the client assets.

    The newest modification time (ms) of any file under ``assets_dir``, so
    a rebuilt client is detected by pollers. Falls back to the package
    version when no asset directory is configured.
    """
    if not assets_dir:
        return __version__

    root = Path(assets_dir).expanduser()
    if not root.is_dir():
        return __version__

    newest = 0
    for path in root.rglob("*"):
        try:
            if path.is_file():
                newest = max(newest, path.stat().st_mtime_ns // 1_000_000)
        except OSError:
            continue
    return str(newest) if newest else __version__


@router.get("/version")
async def get_version(config: ConfigDep) -> VersionResponse:
    version = await anyio.to_thread.run_sync(
        compute_asset_version, config.server.assets_dir
    )
    return VersionResponse(version=version)
