"""System shutdown after a completed batch."""

import logging
import subprocess  # nosec B404 - subprocess is required for shutdown
import sys

from mkvbatch.core.subprocess_utils import run_command
from mkvbatch.executor.interface import ExecutorResult, ToolOutcome

logger = logging.getLogger(__name__)


def shutdown_command(platform: str = sys.platform) -> list[str]:
    """Get the shutdown command for a platform."""
    if platform.startswith("win"):
        return ["shutdown", "/s", "/t", "0"]
    return ["shutdown", "-h", "now"]


def request_shutdown(platform: str = sys.platform) -> ExecutorResult:
    """Ask the operating system to power off.

    Failures are logged and reported, never raised.
    """
    cmd = shutdown_command(platform)
    logger.info("Requesting system shutdown: %s", " ".join(cmd))
    try:
        _, stderr, returncode = run_command(cmd)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error("Shutdown could not be requested: %s", e)
        return ExecutorResult(
            success=False,
            message=f"Shutdown could not be requested: {e}",
            outcome=ToolOutcome.HARD_FAILURE,
        )

    if returncode != 0:
        logger.error("Shutdown command failed (exit %d): %s", returncode, stderr.strip())
        return ExecutorResult(
            success=False,
            message=f"Shutdown command failed (exit {returncode})",
            outcome=ToolOutcome.HARD_FAILURE,
            returncode=returncode,
        )
    return ExecutorResult(success=True, returncode=returncode)
