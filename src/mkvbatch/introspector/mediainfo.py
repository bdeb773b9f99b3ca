"""MediaInfo-based implementation of MediaIntrospector protocol."""

import json
import subprocess  # nosec B404 - subprocess is required for mediainfo invocation
from pathlib import Path

from mkvbatch.core.subprocess_utils import run_command
from mkvbatch.introspector.interface import (
    IntrospectionResult,
    MediaIntrospectionError,
)
from mkvbatch.introspector.parsers import parse_mediainfo_output


class MediaInfoIntrospector:
    """mediainfo-based implementation of MediaIntrospector protocol.

    Extracts track-level metadata from Matroska files using
    ``mediainfo --Output=JSON``.
    """

    def __init__(self, mediainfo_path: Path | None = None) -> None:
        """Initialize the introspector.

        Args:
            mediainfo_path: Optional explicit path to mediainfo. If not
                provided, uses the configured path or system PATH.

        Raises:
            ToolNotFoundError: If mediainfo is not available.
        """
        if mediainfo_path is None:
            from mkvbatch.executor.interface import require_tool

            mediainfo_path = require_tool("mediainfo")
        self._mediainfo_path = mediainfo_path

    def get_file_info(self, path: Path, file_id: int = 0) -> IntrospectionResult:
        """Extract metadata from a media file.

        Args:
            path: Path to the media file.
            file_id: Owning media file id, stamped onto every track.

        Returns:
            IntrospectionResult containing tracks and attachment names.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            stdout, stderr, returncode = run_command(
                [self._mediainfo_path, "--Output=JSON", path]
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise MediaIntrospectionError(
                f"mediainfo could not be run for {path}: {e}"
            ) from e

        if returncode != 0:
            raise MediaIntrospectionError(
                f"mediainfo failed for {path} (exit {returncode}): {stderr.strip()}"
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid mediainfo output for {path}: {e}"
            ) from e

        return parse_mediainfo_output(path, data, file_id)
