"""Configuration models."""

from ._common import ConfigSource, ConfigSourceName, LogFormat, LogLevel
from ._config import Config
from ._sections import (
    GitConfig,
    LimitsConfig,
    LoggingConfig,
    RepositoryConfig,
    ServerConfig,
)

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "GitConfig",
    "LimitsConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RepositoryConfig",
    "ServerConfig",
]
