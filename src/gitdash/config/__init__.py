"""gitdash configuration.

Example:
    >>> from gitdash.config import Config
    >>> config = Config.load()
    >>> config.limits.commit_rows
    100
"""

from gitdash.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import PROJECT_CONFIG_FILENAME, discover_sources, find_project_root
from ._load import STRICT_ENV_VAR, safe_load_config
from ._loader import (
    ENV_PREFIX,
    copy_value,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    GitConfig,
    LimitsConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RepositoryConfig,
    ServerConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "PROJECT_CONFIG_FILENAME",
    "STRICT_ENV_VAR",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "GitConfig",
    "LimitsConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RepositoryConfig",
    "ServerConfig",
    "copy_value",
    "deep_merge",
    "discover_sources",
    "find_project_root",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
