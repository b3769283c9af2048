"""Shared utilities for gitdash."""

from ._exec import (
    DEFAULT_TIMEOUT_MS,
    CommandConfig,
    CommandResult,
    run_command,
    truncate_output,
)
from ._git import (
    decode_bytes,
    discover_repo,
    get_control_dir,
    get_worktree_dir,
    resolve_repo,
    strip_refs_heads,
)
from ._json import dump_json, load_json, load_json_file
from ._logging import create_server_logger, create_stderr_logger
from ._paths import (
    get_log_dir,
    get_package_dir,
    get_server_log_file,
    get_user_config_path,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "CommandConfig",
    "CommandResult",
    "create_server_logger",
    "create_stderr_logger",
    "decode_bytes",
    "discover_repo",
    "dump_json",
    "get_control_dir",
    "get_log_dir",
    "get_package_dir",
    "get_server_log_file",
    "get_user_config_path",
    "get_worktree_dir",
    "load_json",
    "load_json_file",
    "resolve_repo",
    "run_command",
    "strip_refs_heads",
    "truncate_output",
]
