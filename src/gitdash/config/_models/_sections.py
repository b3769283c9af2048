"""Pydantic models for the individual configuration tables."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ._common import LogFormat, LogLevel


class RepositoryConfig(BaseModel):
    """Repository section.

    Attributes:
        path: Path inside the repository to display. Empty means the
            current working directory.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    path: str = ""


class GitConfig(BaseModel):
    """Git command section.

    Attributes:
        binary: Executable used for mutations and diff statistics.
        fallback_binary: Executable retried when ``binary`` fails.
        timeout_ms: Per-command timeout in milliseconds.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    binary: str = Field(default="git", min_length=1)
    fallback_binary: str = Field(default="git", min_length=1)
    timeout_ms: int = Field(default=30000, gt=0)


class LimitsConfig(BaseModel):
    """Bounds applied while building a snapshot.

    Attributes:
        commit_rows: Maximum commits listed per ahead/behind/recent list.
        history_depth: Depth of the history walk used to find a merge base.
        max_concurrency: Maximum diff-stat commands running at once.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    commit_rows: int = Field(default=100, gt=0)
    history_depth: int = Field(default=300, gt=0)
    max_concurrency: int = Field(default=16, gt=0)


class ServerConfig(BaseModel):
    """HTTP server section."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    host: str = "127.0.0.1"
    port: int = Field(default=4173, ge=1, le=65535)
    assets_dir: str = ""


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses the per-user log directory).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
