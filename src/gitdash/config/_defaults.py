"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be fed straight into deep_merge;
the merge helpers copy values, so the module-level dict is never mutated.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "repository": {
        "path": "",
    },
    "git": {
        "binary": "git",
        "fallback_binary": "git",
        "timeout_ms": 30000,
    },
    "limits": {
        "commit_rows": 100,
        "history_depth": 300,
        "max_concurrency": 16,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 4173,
        "assets_dir": "",
    },
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
}
