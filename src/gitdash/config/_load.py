from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from gitdash.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path

STRICT_ENV_VAR = "GITDASH_STRICT_CONFIG"


def _fail_or_warn(message: str, *, strict: bool) -> None:
    if strict:
        print(f"Error: {message}", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    print(f"Warning: {message}", file=sys.stderr)  # noqa: T201


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_root: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Behaviour on failure depends on ``GITDASH_STRICT_CONFIG``:
    - unset or "0": warn on stderr and fall back to the defaults
    - "1": print the error and exit with status 1

    An explicit ``config_path`` must exist regardless of strict mode.

    Args:
        config_path: Explicit path to a config file (``--config``).
        project_root: Directory inside the repository to load project
            config for.
        cli_overrides: Command line overrides merged last.

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    strict_mode = os.environ.get(STRICT_ENV_VAR, "0") == "1"

    try:
        if config_path is not None:
            if not config_path.exists():
                print(  # noqa: T201
                    f"Error: Config file not found: {config_path}", file=sys.stderr
                )
                sys.exit(1)
            return Config.from_file(config_path), None

        config = Config.load(project_root=project_root, cli_overrides=cli_overrides)
    except ConfigError as e:
        error_msg = str(e)
        _fail_or_warn(f"Failed to load config: {error_msg}", strict=strict_mode)
        return Config.from_dict({}), error_msg
    except OSError as e:
        error_msg = f"Failed to load config: {e}"
        _fail_or_warn(error_msg, strict=strict_mode)
        return Config.from_dict({}), error_msg
    else:
        return config, None
