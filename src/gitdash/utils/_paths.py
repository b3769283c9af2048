from importlib.resources import files
from pathlib import Path

import platformdirs


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/gitdash/config.toml``
    - macOS: ``~/Library/Application Support/gitdash/config.toml``
    - Windows: ``%APPDATA%\gitdash\config.toml``

    The path is returned regardless of whether the file exists.
    """
    return platformdirs.user_config_path("gitdash") / "config.toml"


def get_log_dir() -> Path:
    """Get the per-user gitdash log directory."""
    return platformdirs.user_log_path("gitdash")


def get_server_log_file() -> Path:
    """Get the path to the default server log file."""
    return get_log_dir() / "server.log"


def get_package_dir() -> Path:
    """Get the path to the installed gitdash package directory."""
    return Path(str(files("gitdash")))
