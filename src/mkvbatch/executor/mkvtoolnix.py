"""MKVToolNix executors: mkvextract and mkvmerge.

mkvextract pulls tracks, attachments and chapters out of the original
container into the per-file temp directory; mkvmerge builds the output
container from those items.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for mkvtoolnix execution
import time
from collections.abc import Sequence
from pathlib import Path

from mkvbatch.core.subprocess_utils import run_command
from mkvbatch.executor.interface import (
    ExecutorResult,
    ToolOutcome,
    classify_mkvtoolnix_exit,
    require_tool,
)

logger = logging.getLogger(__name__)

CHAPTERS_FILE_NAME = "chapters.xml"


def _run_mkvtoolnix(
    tool_name: str, args: list[str | Path], cwd: Path
) -> ExecutorResult:
    """Run an MKVToolNix tool and classify its exit status.

    Launch failures are reported as hard failures rather than raised.
    """
    start_time = time.monotonic()
    try:
        stdout, stderr, returncode = run_command(args, cwd=cwd)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error("%s could not be run: %s", tool_name, e)
        return ExecutorResult(
            success=False,
            message=f"{tool_name} could not be run: {e}",
            outcome=ToolOutcome.HARD_FAILURE,
        )

    outcome = classify_mkvtoolnix_exit(returncode)
    elapsed = round(time.monotonic() - start_time, 3)
    # mkvtoolnix reports warnings and errors on stdout
    output = (stdout.strip() or stderr.strip()).splitlines()
    detail = output[-1] if output else ""

    if outcome == ToolOutcome.SUCCESS:
        logger.debug(
            "%s completed",
            tool_name,
            extra={"tool": tool_name, "elapsed_seconds": elapsed},
        )
        return ExecutorResult(success=True, outcome=outcome, returncode=returncode)

    if outcome == ToolOutcome.SOFT_FAILURE:
        logger.warning(
            "%s completed with warnings: %s",
            tool_name,
            detail,
            extra={"tool": tool_name, "elapsed_seconds": elapsed},
        )
        return ExecutorResult(
            success=True,
            message=f"{tool_name} completed with warnings: {detail}",
            outcome=outcome,
            returncode=returncode,
        )

    logger.error(
        "%s failed (exit %d): %s",
        tool_name,
        returncode,
        detail,
        extra={"tool": tool_name, "elapsed_seconds": elapsed},
    )
    return ExecutorResult(
        success=False,
        message=f"{tool_name} failed (exit {returncode}): {detail}",
        outcome=outcome,
        returncode=returncode,
    )


class MkvextractExecutor:
    """Extract items from a Matroska file with mkvextract.

    Every extraction runs with the working directory set to the item
    directory (``<temp>/tracks``, ``<temp>/attachments``,
    ``<temp>/chapters``), so output names are relative.
    """

    def __init__(self, tool_path: Path | None = None) -> None:
        self._tool_path = tool_path

    @property
    def tool_path(self) -> Path:
        """Get path to mkvextract, verifying availability."""
        if self._tool_path is None:
            self._tool_path = require_tool("mkvextract")
        return self._tool_path

    def _extract(
        self, input_path: Path, mode: str, out_dir: Path, specs: Sequence[str]
    ) -> ExecutorResult:
        out_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Extracting %s from %s", mode, input_path.name)
        return _run_mkvtoolnix(
            "mkvextract", [self.tool_path, input_path, mode, *specs], cwd=out_dir
        )

    def extract_tracks(
        self, input_path: Path, out_dir: Path, tracks: Sequence[tuple[int, str]]
    ) -> ExecutorResult:
        """Extract tracks as ``<stream id>:<file name>`` pairs."""
        if not tracks:
            return ExecutorResult(success=True, message="No tracks to extract")
        specs = [f"{stream_id}:{name}" for stream_id, name in tracks]
        return self._extract(input_path, "tracks", out_dir, specs)

    def extract_attachments(
        self,
        input_path: Path,
        out_dir: Path,
        attachments: Sequence[tuple[int, str]],
    ) -> ExecutorResult:
        """Extract attachments as ``<1-based id>:<file name>`` pairs."""
        if not attachments:
            return ExecutorResult(success=True, message="No attachments to extract")
        specs = [f"{attachment_id}:{name}" for attachment_id, name in attachments]
        return self._extract(input_path, "attachments", out_dir, specs)

    def extract_chapters(self, input_path: Path, out_dir: Path) -> ExecutorResult:
        """Extract chapters into ``chapters.xml``.

        Files without chapters produce no output file, which is not an error.
        """
        return self._extract(input_path, "chapters", out_dir, [CHAPTERS_FILE_NAME])


class MkvmergeExecutor:
    """Build a Matroska file with mkvmerge."""

    def __init__(self, tool_path: Path | None = None) -> None:
        self._tool_path = tool_path

    @property
    def tool_path(self) -> Path:
        """Get path to mkvmerge, verifying availability."""
        if self._tool_path is None:
            self._tool_path = require_tool("mkvmerge")
        return self._tool_path

    def merge(self, args: Sequence[str], cwd: Path) -> ExecutorResult:
        """Run mkvmerge with a prepared argument list.

        Args:
            args: mkvmerge arguments (without the executable).
            cwd: Working directory, the per-file temp directory.

        Returns:
            ExecutorResult; warnings (exit 1) count as success.
        """
        logger.debug("mkvmerge arguments: %s", " ".join(args))
        return _run_mkvtoolnix("mkvmerge", [self.tool_path, *args], cwd=cwd)
