"""Configuration package for mkvbatch."""

from mkvbatch.config.loader import (
    ConfigError,
    get_active_config,
    get_config,
    get_default_config_path,
    load_config_file,
    set_active_config,
)
from mkvbatch.config.models import (
    LoggingConfig,
    MkvBatchConfig,
    PathsConfig,
    ToolPathsConfig,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "MkvBatchConfig",
    "PathsConfig",
    "ToolPathsConfig",
    "get_active_config",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "set_active_config",
]
