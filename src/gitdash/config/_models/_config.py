# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing gitdash configuration values.
"""

from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from gitdash.config._defaults import DEFAULT_CONFIG
from gitdash.config._loader import deep_merge, parse_env_vars, read_toml_file
from gitdash.exceptions import ConfigValidationError

from ._common import ConfigSource, ConfigSourceName
from ._sections import (
    GitConfig,
    LimitsConfig,
    LoggingConfig,
    RepositoryConfig,
    ServerConfig,
)


def _validation_error(
    error: PydanticValidationError, source: str | None
) -> ConfigValidationError:
    """Convert the first pydantic error into a ConfigValidationError."""
    first = error.errors()[0]
    key = ".".join(str(part) for part in first["loc"])
    expected = first["msg"]
    msg = f"Invalid value for {key}: {expected}"
    if source:
        msg = f"{msg} (from {source})"
    return ConfigValidationError(
        msg,
        key=key,
        value=first.get("input"),
        expected=expected,
        source=source,
    )


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods rather than the constructor so defaults are
    merged and errors are reported as ConfigValidationError.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def _build(
        cls,
        data: dict[str, Any],
        *,
        sources: tuple[ConfigSource, ...] = (),
        source_label: str | None = None,
    ) -> Self:
        merged = deep_merge(DEFAULT_CONFIG, data)
        try:
            config = cls.model_validate(merged)
        except PydanticValidationError as e:
            raise _validation_error(e, source_label) from e
        config._sources = sources
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If a value is out of range or mistyped.
        """
        return cls._build(data)

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=path,
            exists=True,
            values=data,
        )
        return cls._build(data, sources=(source,), source_label=str(path))

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources merge in precedence order defaults, user file, project file,
        environment, then CLI overrides.

        Args:
            project_root: Directory inside the repository whose
                ``.gitdash.toml`` should apply. Discovered from the current
                directory when None.
            include_env: Include ``GITDASH_*`` environment variables.
            cli_overrides: Values passed on the command line.

        Raises:
            ConfigLoadError: If a config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        from gitdash.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            project_root=project_root,
            include_env=include_env,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded: list[ConfigSource] = []

        # Discovered highest-first; merge lowest-first
        for source in reversed(sources):
            values: dict[str, Any] = source.values
            if source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path is not None and source.exists:
                values = read_toml_file(source.path)

            loaded.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        return cls._build(merged, sources=tuple(reversed(loaded)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    def repository_path(self) -> Path | None:
        """Return the configured repository path, or None for the cwd."""
        if not self.repository.path:
            return None
        return Path(self.repository.path).expanduser()
