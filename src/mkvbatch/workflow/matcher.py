"""Input/output file matching.

Pairs the natural-sorted ``.mkv`` files of the input directory with the
titles read from the output names file. Each names-file line is sanitized
by the profile's substitutions and turned into an indexed output name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from mkvbatch.core.string_utils import natural_sort_key
from mkvbatch.policy.types import PadType, Profile

logger = logging.getLogger(__name__)

STOP_SENTINEL = "#end"
COMMENT_PREFIX = "#"
INPUT_EXTENSION = ".mkv"
OUTPUT_EXTENSION = ".mkv"


class MatchError(Exception):
    """Raised when inputs and output names cannot be paired."""

    pass


@dataclass(frozen=True)
class MatchedFile:
    """One unit of work: an input file with its output path and title."""

    input_path: Path
    output_path: Path
    title: str


@dataclass(frozen=True)
class OutputNames:
    """Parsed names file."""

    entries: list[tuple[Path, str]]
    stopped: bool  # True when the stop sentinel was reached


def format_output_name(index: int, title: str, pad_type: PadType) -> str:
    """Format an indexed output file name, e.g. ``"01 - Title.mkv"``."""
    width = pad_type.width
    number = f"{index:0{width}d}" if width else str(index)
    return f"{number} - {title}{OUTPUT_EXTENSION}"


class FileMatcher:
    """Pair input files with output names for a profile."""

    def __init__(self, profile: Profile) -> None:
        self._profile = profile

    def validate_paths(self) -> None:
        """Check that the input dir, output dir and names file exist.

        Raises:
            MatchError: If any of them is missing.
        """
        profile = self._profile
        if not profile.input_dir.is_dir():
            raise MatchError(f"Input directory does not exist: {profile.input_dir}")
        if not profile.output_dir.is_dir():
            raise MatchError(f"Output directory does not exist: {profile.output_dir}")
        if not profile.output_names_file_path.is_file():
            raise MatchError(
                f"Output names file does not exist: {profile.output_names_file_path}"
            )

    def read_output_names(self) -> OutputNames:
        """Read and sanitize the output names file.

        Returns:
            (output path, title) entries in file order and whether the stop
            sentinel was reached.
        """
        profile = self._profile
        entries: list[tuple[Path, str]] = []
        index = profile.start_from
        stopped = False

        text = profile.output_names_file_path.read_text(encoding="utf-8-sig")
        for raw_line in text.splitlines():
            stripped = raw_line.strip()
            if stripped == STOP_SENTINEL:
                stopped = True
                break
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue

            title = profile.substitutions.apply(raw_line)
            if not title:
                logger.debug("Names line is empty after sanitizing: %r", raw_line)
                continue

            name = format_output_name(index, title, profile.index_pad_type)
            entries.append((profile.output_dir / name, title))
            index += 1

        return OutputNames(entries=entries, stopped=stopped)

    def list_inputs(self) -> list[Path]:
        """List input ``.mkv`` files in natural order."""
        files = [
            path
            for path in self._profile.input_dir.iterdir()
            if path.is_file() and path.suffix.casefold() == INPUT_EXTENSION
        ]
        return sorted(files, key=lambda p: natural_sort_key(p.name))

    def match(self) -> list[MatchedFile]:
        """Pair inputs with output names.

        When the stop sentinel was reached, the input list is truncated to
        the number of names; otherwise the counts must match exactly.

        Raises:
            MatchError: If paths are missing or the counts do not match.
        """
        self.validate_paths()
        names = self.read_output_names()
        inputs = self.list_inputs()

        if names.stopped:
            inputs = inputs[: len(names.entries)]

        if len(inputs) != len(names.entries):
            raise MatchError(
                f"Found {len(inputs)} input files but {len(names.entries)} "
                f"output names"
            )

        matched = [
            MatchedFile(input_path=path, output_path=output, title=title)
            for path, (output, title) in zip(inputs, names.entries)
        ]
        logger.info("Matched %d input files", len(matched))
        return matched
