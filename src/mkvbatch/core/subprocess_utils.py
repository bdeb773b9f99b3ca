"""Subprocess wrapper shared by the external tool adapters.

mediainfo, mkvextract, mkvmerge, ffmpeg and hook commands all run through
run_command(). Calls block until the child exits; there is no timeout and
no cancellation.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for tool invocation
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    cwd: Path | None = None,
) -> tuple[str, str, int]:
    """Run an external command and capture its output.

    Output is decoded as UTF-8 with undecodable bytes replaced, since
    track titles and file names in tool output are not always valid UTF-8.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        cwd: Working directory for the child process.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        OSError: If the executable cannot be launched.

    Example:
        >>> stdout, stderr, rc = run_command(["mkvmerge", "--version"])
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "cwd": str(cwd) if cwd else None},
    )

    start = time.monotonic()
    result = subprocess.run(  # nosec B603 - args come from the profile owner
        str_args,
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
    )

    logger.debug(
        "%s exited with %d",
        command_name,
        result.returncode,
        extra={
            "command": command_name,
            "elapsed_seconds": round(time.monotonic() - start, 3),
            "returncode": result.returncode,
        },
    )

    return result.stdout or "", result.stderr or "", result.returncode
