"""Project root and config path discovery.

The project root is the working tree of the git repository that contains
the starting directory; its ``.gitdash.toml`` is the project config file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from gitdash.utils import discover_repo, get_user_config_path, get_worktree_dir

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName

if TYPE_CHECKING:
    from dulwich.repo import Repo

PROJECT_CONFIG_FILENAME = ".gitdash.toml"


def find_project_root(start: Path | None = None) -> Path | None:
    """Find the working tree root of the repository containing ``start``.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        The repository working tree root, or None outside a repository.
    """
    repo: Repo | None = discover_repo((start or Path.cwd()).resolve())
    if repo is None:
        return None
    try:
        return get_worktree_dir(repo)
    finally:
        repo.close()


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources, highest precedence first.

    File-based sources are included with ``exists=False`` when the file is
    missing. The project source is omitted outside a repository.

    Args:
        project_root: Directory inside the repository. If None, discovered
            from the current directory.
        include_env: Include environment variables as a source.
        cli_overrides: Command line overrides; included when not None.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
    """
    sources: list[ConfigSource] = []

    if cli_overrides is not None:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides,
            )
        )

    if include_env:
        # Values are parsed at load time
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )

    resolved_root = find_project_root(project_root)
    if resolved_root is not None:
        project_path = resolved_root / PROJECT_CONFIG_FILENAME
        sources.append(
            ConfigSource(
                name=ConfigSourceName.PROJECT,
                path=project_path,
                exists=_file_exists(project_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
