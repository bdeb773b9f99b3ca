"""Executor result types and tool resolution utilities.

This module defines the outcome classification shared by every external
tool adapter and resolves tool paths from configuration or the system PATH.
"""

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mkvbatch.config.loader import get_active_config

TOOL_INSTALL_HINTS: dict[str, str] = {
    "mkvextract": "Install MKVToolNix (https://mkvtoolnix.download/)",
    "mkvmerge": "Install MKVToolNix (https://mkvtoolnix.download/)",
    "ffmpeg": "Install FFmpeg (https://ffmpeg.org/)",
    "mediainfo": "Install the MediaInfo CLI (https://mediaarea.net/)",
}


class ToolOutcome(Enum):
    """Classification of an external tool run."""

    SUCCESS = "success"
    SOFT_FAILURE = "soft_failure"  # Warnings only, output is usable
    HARD_FAILURE = "hard_failure"

    @property
    def ok(self) -> bool:
        return self != ToolOutcome.HARD_FAILURE


@dataclass(frozen=True)
class ExecutorResult:
    """Result of an executor operation."""

    success: bool
    """True if the operation succeeded (soft failures included)."""

    message: str = ""
    """Human-readable message describing the result."""

    outcome: ToolOutcome = ToolOutcome.SUCCESS
    """Detailed outcome classification."""

    returncode: int | None = None
    """Exit status of the tool, None if it could not be launched."""


class ToolNotFoundError(Exception):
    """Raised when a required external tool is not available."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        hint = TOOL_INSTALL_HINTS.get(tool_name, "")
        message = f"Required tool '{tool_name}' is not available."
        if hint:
            message += f" {hint}"
        message += (
            f" You can also configure a custom path via "
            f"MKVBATCH_{tool_name.upper()}_PATH or ~/.mkvbatch/config.toml"
        )
        super().__init__(message)


def classify_mkvtoolnix_exit(returncode: int) -> ToolOutcome:
    """Map an mkvextract/mkvmerge exit status to an outcome.

    MKVToolNix exits with 0 on success, 1 when warnings were emitted and 2
    on error.
    """
    if returncode == 0:
        return ToolOutcome.SUCCESS
    if returncode == 1:
        return ToolOutcome.SOFT_FAILURE
    return ToolOutcome.HARD_FAILURE


def classify_ffmpeg_exit(returncode: int) -> ToolOutcome:
    """Map an ffmpeg exit status to an outcome (any non-zero is an error)."""
    return ToolOutcome.SUCCESS if returncode == 0 else ToolOutcome.HARD_FAILURE


def get_tool_path(tool_name: str) -> Path | None:
    """Resolve a tool path from configuration, falling back to PATH.

    Args:
        tool_name: Name of the tool (e.g., "mkvmerge").

    Returns:
        Path to the executable, or None if it cannot be found.
    """
    configured = get_active_config().tools.get(tool_name)
    if configured is not None:
        if configured.exists():
            return configured
        found = shutil.which(str(configured))
        return Path(found) if found else None

    found = shutil.which(tool_name)
    return Path(found) if found else None


def require_tool(tool_name: str) -> Path:
    """Get path to a required tool, raising an error if not available.

    Args:
        tool_name: Name of the tool to find.

    Returns:
        Path to the tool executable.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = get_tool_path(tool_name)
    if path is None:
        raise ToolNotFoundError(tool_name)
    return path


def check_tool_availability() -> dict[str, bool]:
    """Check which external tools are available on the system."""
    return {name: get_tool_path(name) is not None for name in TOOL_INSTALL_HINTS}
