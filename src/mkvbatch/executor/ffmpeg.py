"""FFmpeg executor for audio stream conversion."""

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg execution
import time
from collections.abc import Sequence
from pathlib import Path

from mkvbatch.core.subprocess_utils import run_command
from mkvbatch.executor.interface import (
    ExecutorResult,
    ToolOutcome,
    classify_ffmpeg_exit,
    require_tool,
)

logger = logging.getLogger(__name__)

# Global flags placed before the conversion arguments
FFMPEG_GLOBAL_ARGS = ("-y", "-hide_banner")


class FfmpegEncoder:
    """Run ffmpeg with arguments built by AudioConversionParams."""

    def __init__(self, tool_path: Path | None = None) -> None:
        self._tool_path = tool_path

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability."""
        if self._tool_path is None:
            self._tool_path = require_tool("ffmpeg")
        return self._tool_path

    def build_command(self, args: Sequence[str]) -> list[str]:
        """Build the complete ffmpeg command line."""
        return [str(self.tool_path), *FFMPEG_GLOBAL_ARGS, *args]

    def encode(self, args: Sequence[str], cwd: Path | None = None) -> ExecutorResult:
        """Run an encode.

        Args:
            args: Conversion arguments (input, codec options, output).
            cwd: Optional working directory.

        Returns:
            ExecutorResult; any non-zero exit is a hard failure.
        """
        cmd = self.build_command(args)
        start_time = time.monotonic()
        try:
            _, stderr, returncode = run_command(cmd, cwd=cwd)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("ffmpeg could not be run: %s", e)
            return ExecutorResult(
                success=False,
                message=f"ffmpeg could not be run: {e}",
                outcome=ToolOutcome.HARD_FAILURE,
            )

        elapsed = round(time.monotonic() - start_time, 3)
        outcome = classify_ffmpeg_exit(returncode)
        if outcome == ToolOutcome.SUCCESS:
            logger.info(
                "ffmpeg conversion complete",
                extra={"elapsed_seconds": elapsed},
            )
            return ExecutorResult(success=True, outcome=outcome, returncode=returncode)

        lines = stderr.strip().splitlines()
        detail = lines[-1] if lines else ""
        logger.error(
            "ffmpeg failed (exit %d): %s",
            returncode,
            detail,
            extra={"elapsed_seconds": elapsed},
        )
        return ExecutorResult(
            success=False,
            message=f"ffmpeg failed (exit {returncode}): {detail}",
            outcome=outcome,
            returncode=returncode,
        )
