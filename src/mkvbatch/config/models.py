"""Configuration data models for mkvbatch.

This module defines dataclasses for all configuration sections: external
tool paths, working paths and logging.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


def default_temp_directory() -> Path:
    """System temp directory plus an mkvbatch sub-directory."""
    return Path(tempfile.gettempdir()) / "mkvbatch"


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths (None = look up on PATH)."""

    mkvextract: Path | None = None
    mkvmerge: Path | None = None
    ffmpeg: Path | None = None
    mediainfo: Path | None = None

    def get(self, tool_name: str) -> Path | None:
        """Get the configured path for a tool by name."""
        return getattr(self, tool_name, None)


@dataclass
class PathsConfig:
    """Working directories."""

    # Root for per-file temp directories (<temp>/<file id>/...)
    temp_directory: Path = field(default_factory=default_temp_directory)


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = True

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.casefold() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.casefold() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, "
                f"got {self.format}"
            )
        if self.max_bytes < 0:
            raise ValueError(f"max_bytes must be >= 0, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(f"backup_count must be >= 0, got {self.backup_count}")


@dataclass
class MkvBatchConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
