"""Pure parsing functions for MediaInfo JSON output.

These functions transform ``mediainfo --Output=JSON`` data into mkvbatch
domain objects. All functions are pure (no I/O, no side effects) for easy
testing.
"""

import logging
from pathlib import Path
from typing import Any

from mkvbatch.domain.enums import DelaySource, TrackType
from mkvbatch.domain.models import DEFAULT_LANGUAGE, Attachment, Track
from mkvbatch.introspector.interface import (
    IntrospectionResult,
    MediaIntrospectionError,
)
from mkvbatch.introspector.mappings import (
    map_codec_id,
    map_delay_source,
    map_track_type,
)

logger = logging.getLogger(__name__)

ATTACHMENT_SEPARATOR = " / "


def parse_int(value: Any, default: int = 0) -> int:
    """Parse a MediaInfo numeric string into an int.

    Args:
        value: Raw value (MediaInfo reports numbers as strings).
        default: Value returned when parsing fails.

    Returns:
        Parsed integer or the default.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_delay_ms(value: Any) -> int:
    """Parse a MediaInfo delay in seconds into whole milliseconds.

    Args:
        value: Delay in seconds, e.g. "0.042" or "-1.5".

    Returns:
        Delay in milliseconds, 0 when missing or malformed.
    """
    if value is None or value == "":
        return 0
    try:
        return round(float(value) * 1000)
    except (TypeError, ValueError):
        logger.warning("Invalid delay value: %r", value)
        return 0


def parse_attachment_names(value: str | None) -> list[str]:
    """Split the general track's attachment list into names."""
    if not value:
        return []
    return [name for name in value.split(ATTACHMENT_SEPARATOR) if name]


def build_attachments(names: list[str]) -> list[Attachment]:
    """Number attachment names by their 1-based position in the container."""
    return [Attachment(attachment_id=i, name=name) for i, name in enumerate(names, 1)]


def parse_track(data: dict, index: int, file_id: int = 0) -> Track:
    """Parse a single MediaInfo track dict into a Track.

    Args:
        data: Track dictionary from ``media.track``.
        index: Position of the track in metadata order.
        file_id: Owning media file id.

    Returns:
        Track domain object.
    """
    track_type = map_track_type(data.get("@type"))
    language = (data.get("Language") or "").strip() or DEFAULT_LANGUAGE
    title = data.get("Title") or None

    delay_ms = parse_delay_ms(data.get("Delay"))
    delay_source = map_delay_source(data.get("Delay_Source"))
    if delay_ms == 0:
        delay_source = DelaySource.NONE

    return Track(
        index=index,
        track_type=track_type,
        codec=map_codec_id(data.get("CodecID")),
        stream_id=parse_int(data.get("StreamOrder"), default=index - 1),
        language=language,
        title=title,
        delay_ms=delay_ms,
        delay_source=delay_source,
        width=parse_int(data.get("Width")),
        height=parse_int(data.get("Height")),
        bit_depth=parse_int(data.get("BitDepth")),
        channels=parse_int(data.get("Channels")),
        file_id=file_id,
    )


def parse_mediainfo_output(
    path: Path, data: dict, file_id: int = 0
) -> IntrospectionResult:
    """Parse complete MediaInfo JSON output into an IntrospectionResult.

    Args:
        path: Path to the introspected file.
        data: Parsed JSON output of ``mediainfo --Output=JSON``.
        file_id: Owning media file id.

    Returns:
        IntrospectionResult with tracks in metadata order.

    Raises:
        MediaIntrospectionError: If the output has no ``media.track`` list.
    """
    media = data.get("media") if isinstance(data, dict) else None
    raw_tracks = media.get("track") if isinstance(media, dict) else None
    if not isinstance(raw_tracks, list):
        raise MediaIntrospectionError(
            f"Missing 'media.track' in mediainfo output for {path}. "
            "File may be corrupted or not a valid media file."
        )

    tracks: list[Track] = []
    attachment_names: list[str] = []
    warnings: list[str] = []

    for index, raw in enumerate(raw_tracks):
        if not isinstance(raw, dict):
            warnings.append(f"Skipping malformed track entry at position {index}")
            continue
        track = parse_track(raw, len(tracks), file_id)
        if track.track_type == TrackType.GENERAL:
            extra = raw.get("extra") or {}
            attachment_names = parse_attachment_names(extra.get("Attachments"))
        tracks.append(track)

    for warning in warnings:
        logger.warning("%s in %s", warning, path)

    return IntrospectionResult(
        file_path=path,
        tracks=tracks,
        attachment_names=attachment_names,
        warnings=warnings,
    )
