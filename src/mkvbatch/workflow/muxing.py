"""mkvmerge argument assembly.

Builds the complete mkvmerge argument list for one output file: output
and title, per-track options (sync, dimensions, colour depth, flags,
language) followed by the track file, attachments, chapters, global tags
and the track order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from mkvbatch.domain.enums import DelaySource, TrackType
from mkvbatch.domain.models import Track
from mkvbatch.executor.mkvtoolnix import CHAPTERS_FILE_NAME
from mkvbatch.policy.types import ProcessingParams, TrackParams

logger = logging.getLogger(__name__)

ALL_CATEGORIES = frozenset(
    {
        TrackType.VIDEO,
        TrackType.AUDIO,
        TrackType.SUBTITLE,
        TrackType.BUTTON,
        TrackType.OTHER,
    }
)

CHAPTER_NAME_TEMPLATE = "Chapter <NUM:2>"


@dataclass(frozen=True)
class FlagSpec:
    """A track flag: its mkvmerge option name and applicable categories."""

    option: str
    categories: frozenset[TrackType]


FLAG_TABLE: dict[str, FlagSpec] = {
    "default": FlagSpec("default-track", ALL_CATEGORIES),
    "enabled": FlagSpec("track-enabled", ALL_CATEGORIES),
    "forced": FlagSpec("forced-display", frozenset({TrackType.SUBTITLE})),
    "hearing_impaired": FlagSpec(
        "hearing-impaired", frozenset({TrackType.AUDIO, TrackType.SUBTITLE})
    ),
    "visual_impaired": FlagSpec("visual-impaired", frozenset({TrackType.AUDIO})),
    "text_descriptions": FlagSpec(
        "text-descriptions", frozenset({TrackType.SUBTITLE})
    ),
    "original": FlagSpec("original", ALL_CATEGORIES),
    "commentary": FlagSpec(
        "commentary", frozenset({TrackType.AUDIO, TrackType.SUBTITLE})
    ),
}


def effective_delay(
    track: Track, overrides: TrackParams | None
) -> tuple[int, DelaySource]:
    """Compute the delay and delay source used when muxing a track.

    An override replaces the detected delay and promotes a missing source
    to a container delay.
    """
    if overrides is None or overrides.delay_override is None:
        return track.delay_ms, track.delay_source
    source = track.delay_source
    if source == DelaySource.NONE:
        source = DelaySource.CONTAINER
    return overrides.delay_override, source


def flag_arguments(track: Track, overrides: TrackParams | None) -> list[str]:
    """Build ``--<flag> 0:yes|no`` arguments for a track.

    Flags that do not apply to the track's category are dropped with a
    warning.
    """
    if overrides is None:
        return []

    args: list[str] = []
    for name, spec in FLAG_TABLE.items():
        value = getattr(overrides, name)
        if value is None:
            continue
        if track.track_type not in spec.categories:
            logger.warning(
                "Flag '%s' does not apply to %s track %d, ignoring",
                name,
                track.track_type.value,
                track.index,
            )
            continue
        args.extend([f"--{spec.option}-flag", f"0:{'yes' if value else 'no'}"])
    return args


def track_arguments(
    track: Track, overrides: TrackParams | None, track_dir: Path
) -> list[str]:
    """Build the per-track option block followed by the track file path."""
    args: list[str] = []

    delay, source = effective_delay(track, overrides)
    # Stream delays travel inside the extracted stream
    if delay != 0 and source == DelaySource.CONTAINER:
        args.extend(["--sync", f"0:{delay}"])

    if track.width and track.height:
        args.extend(["--display-dimensions", f"0:{track.width}x{track.height}"])

    if track.bit_depth:
        args.extend(["--color-bits-per-channel", f"0:{track.bit_depth}"])

    args.extend(flag_arguments(track, overrides))

    language = "und" if track.track_type == TrackType.VIDEO else track.language
    args.extend(["--language", f"0:{language}"])

    args.append(str(track_dir / track.file_name))
    return args


def attachment_arguments(attachments: Sequence[tuple[str, Path]]) -> list[str]:
    """Build attachment arguments, skipping files that do not exist."""
    args: list[str] = []
    for name, path in attachments:
        if not path.exists():
            logger.warning("Attachment file is missing, skipping: %s", path)
            continue
        args.extend(["--attachment-name", name, "--attach-file", str(path)])
    return args


def chapter_arguments(params: ProcessingParams, chapters_dir: Path) -> list[str]:
    """Build chapter arguments: imported chapters or generated ones."""
    chapters = params.chapters
    if not (chapters.import_from_original or chapters.create_if_not_present):
        return []

    args = ["--chapter-language", chapters.language]
    chapters_file = chapters_dir / CHAPTERS_FILE_NAME
    if chapters_file.exists():
        args.extend(["--chapters", str(chapters_file)])
    elif chapters.create_if_not_present:
        args.extend(
            [
                "--generate-chapters-name-template",
                CHAPTER_NAME_TEMPLATE,
                "--generate-chapters",
                f"interval:{chapters.create_interval}",
            ]
        )
    return args


def tag_arguments(params: ProcessingParams) -> list[str]:
    """Build global tag arguments when a tags file is configured."""
    tags_path = params.misc.tags_path
    if tags_path is None:
        return []
    if not tags_path.exists():
        logger.warning("Tags file does not exist, skipping: %s", tags_path)
        return []
    return ["--global-tags", str(tags_path)]


def track_order(count: int) -> str:
    """Track order for one input file per track: ``0:0,1:0,...``."""
    return ",".join(f"{i}:0" for i in range(count))


def build_mux_arguments(
    output_path: Path,
    title: str,
    tracks: Sequence[Track],
    params: ProcessingParams,
    track_dir: Path,
    chapters_dir: Path,
    attachments: Sequence[tuple[str, Path]] = (),
) -> list[str]:
    """Assemble the complete mkvmerge argument list.

    Args:
        output_path: Output container path.
        title: Container title.
        tracks: Kept tracks in output order.
        params: Processing parameters.
        track_dir: Directory holding the extracted (or converted) tracks.
        chapters_dir: Directory holding extracted chapters.
        attachments: (attachment name, file path) pairs.

    Returns:
        mkvmerge arguments without the executable.
    """
    args: list[str] = ["-o", str(output_path)]
    if params.misc.set_file_title:
        args.extend(["--title", title])

    for position, track in enumerate(tracks):
        args.extend(
            track_arguments(track, params.track_params_for(position), track_dir)
        )

    args.extend(attachment_arguments(attachments))
    args.extend(chapter_arguments(params, chapters_dir))
    args.extend(tag_arguments(params))
    if tracks:
        args.extend(["--track-order", track_order(len(tracks))])
    return args
