"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (MKVBATCH_*)
3. Config file (~/.mkvbatch/config.toml)
4. Default values

Environment variables:
- MKVBATCH_CONFIG_PATH: Path to config file (overrides default location)
- MKVBATCH_MKVEXTRACT_PATH: Path to mkvextract executable
- MKVBATCH_MKVMERGE_PATH: Path to mkvmerge executable
- MKVBATCH_FFMPEG_PATH: Path to ffmpeg executable
- MKVBATCH_MEDIAINFO_PATH: Path to mediainfo executable
- MKVBATCH_TEMP_DIR: Root directory for per-file temp directories
- MKVBATCH_LOG_LEVEL: Log level (debug, info, warning, error)
- MKVBATCH_LOG_FILE: Log file path
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mkvbatch.config.models import (
    LoggingConfig,
    MkvBatchConfig,
    PathsConfig,
    ToolPathsConfig,
    default_temp_directory,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".mkvbatch"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

TOOL_NAMES = ("mkvextract", "mkvmerge", "ffmpeg", "mediainfo")

_config: MkvBatchConfig | None = None
_config_lock = threading.Lock()


class ConfigError(Exception):
    """Raised when the configuration file or values are invalid."""

    pass


def get_default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by MKVBATCH_CONFIG_PATH environment variable.
    """
    env = os.environ if environ is None else environ
    env_path = env.get("MKVBATCH_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"Config section [{name}] must be a table")
    return section


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    temp_directory: Path | None = None,
    # Optional injection for testing (uses os.environ if None)
    environ: Mapping[str, str] | None = None,
) -> MkvBatchConfig:
    """Build the configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MKVBATCH_CONFIG_PATH).
        log_level: CLI override for the log level.
        log_file: CLI override for the log file.
        log_format: CLI override for the log format.
        temp_directory: CLI override for the temp directory root.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        Merged configuration.

    Raises:
        ConfigError: If the file or a value is invalid.
    """
    env = os.environ if environ is None else environ
    data = load_config_file(config_path or get_default_config_path(env))

    tools_data = _section(data, "tools")
    tools = ToolPathsConfig(
        **{
            name: _optional_path(
                env.get(f"MKVBATCH_{name.upper()}_PATH") or tools_data.get(name)
            )
            for name in TOOL_NAMES
        }
    )

    paths_data = _section(data, "paths")
    temp = (
        temp_directory
        or _optional_path(env.get("MKVBATCH_TEMP_DIR"))
        or _optional_path(paths_data.get("temp_directory"))
        or default_temp_directory()
    )

    logging_data = _section(data, "logging")
    try:
        logging_config = LoggingConfig(
            level=log_level
            or env.get("MKVBATCH_LOG_LEVEL")
            or logging_data.get("level", "info"),
            file=log_file
            or _optional_path(env.get("MKVBATCH_LOG_FILE"))
            or _optional_path(logging_data.get("file")),
            format=log_format or logging_data.get("format", "text"),
            include_stderr=bool(logging_data.get("include_stderr", True)),
            max_bytes=int(logging_data.get("max_bytes", 10_485_760)),
            backup_count=int(logging_data.get("backup_count", 5)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid [logging] configuration: {e}") from e

    return MkvBatchConfig(
        tools=tools,
        paths=PathsConfig(temp_directory=temp),
        logging=logging_config,
    )


def set_active_config(config: MkvBatchConfig | None) -> None:
    """Install the configuration used by tool resolution.

    Passing None resets to lazily loading the default configuration.
    """
    global _config
    with _config_lock:
        _config = config


def get_active_config() -> MkvBatchConfig:
    """Get the active configuration, loading defaults on first use."""
    global _config
    if _config is not None:
        return _config
    with _config_lock:
        if _config is None:
            _config = get_config()
        return _config
