"""Track retention, quota enforcement and attachment selection.

Tracks are examined in original order. General and menu tracks are always
dropped; button and other tracks follow ``other_tracks.import_from_original``;
audio, subtitle and video tracks are kept while their category quota is not
yet met and their predicate matches. Afterwards every category with a quota
must have kept exactly that many tracks.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from pathlib import Path

from mkvbatch.core.file_utils import extension_allowed
from mkvbatch.domain.enums import Codec, TrackType
from mkvbatch.domain.exceptions import MediaFileError
from mkvbatch.domain.models import DEFAULT_LANGUAGE, Attachment, Track
from mkvbatch.policy.predicates import is_match
from mkvbatch.policy.types import ProcessingParams

logger = logging.getLogger(__name__)

QUOTA_CATEGORIES = (TrackType.AUDIO, TrackType.SUBTITLE, TrackType.VIDEO)


class QuotaMismatchError(MediaFileError):
    """Raised when a category did not retain exactly its quota of tracks."""

    stage = "filter"

    def __init__(self, mismatches: Sequence[tuple[TrackType, int, int]]) -> None:
        """Initialize the error.

        Args:
            mismatches: (category, expected, realized) for each failing category.
        """
        self.mismatches = list(mismatches)
        details = ", ".join(
            f"{track_type.value}: expected {expected}, kept {kept}"
            for track_type, expected, kept in self.mismatches
        )
        super().__init__(f"Track quota not met ({details})")


class UnknownCodecError(MediaFileError):
    """Raised when a kept track has a codec the pipeline cannot name."""

    stage = "filter"


def apply_language_defaults(tracks: Iterable[Track], params: ProcessingParams) -> int:
    """Backfill default languages for tracks with an undefined language.

    Args:
        tracks: Tracks to update in place.
        params: Processing parameters holding per-category defaults.

    Returns:
        Number of tracks updated.
    """
    updated = 0
    for track in tracks:
        policy = params.policy_for(track.track_type)
        if policy is None or policy.default_language is None:
            continue
        if track.language == DEFAULT_LANGUAGE:
            track.language = policy.default_language
            updated += 1
    return updated


def should_keep_track(
    track: Track, params: ProcessingParams, kept_counts: Counter[TrackType]
) -> bool:
    """Decide whether a single track is retained.

    Args:
        track: Track under consideration.
        params: Processing parameters.
        kept_counts: Tracks kept so far per category.

    Returns:
        True if the track should be kept.
    """
    if track.track_type in (TrackType.GENERAL, TrackType.MENU):
        return False
    if track.track_type in (TrackType.BUTTON, TrackType.OTHER):
        return params.other_tracks.import_from_original

    policy = params.policy_for(track.track_type)
    if policy is None:
        return False

    if (
        policy.total_to_retain is not None
        and kept_counts[track.track_type] >= policy.total_to_retain
    ):
        return False

    return is_match(policy.predicate, track)


def filter_tracks(tracks: Sequence[Track], params: ProcessingParams) -> list[Track]:
    """Select the tracks to keep and enforce category quotas.

    Default languages are backfilled before the retention pass, so
    backfilled languages take part in language predicates.

    Args:
        tracks: All tracks in metadata order (general track included).
        params: Processing parameters.

    Returns:
        Kept tracks in original order.

    Raises:
        QuotaMismatchError: If a category quota is not met exactly.
        UnknownCodecError: If an unknown codec is kept and rejection is on.
    """
    apply_language_defaults(tracks, params)

    kept: list[Track] = []
    kept_counts: Counter[TrackType] = Counter()
    for track in tracks:
        if should_keep_track(track, params, kept_counts):
            kept.append(track)
            kept_counts[track.track_type] += 1

    mismatches = []
    for track_type in QUOTA_CATEGORIES:
        policy = params.policy_for(track_type)
        if policy is None or policy.total_to_retain is None:
            continue
        if kept_counts[track_type] != policy.total_to_retain:
            mismatches.append(
                (track_type, policy.total_to_retain, kept_counts[track_type])
            )
    if mismatches:
        raise QuotaMismatchError(mismatches)

    for track in kept:
        if track.codec != Codec.UNKNOWN:
            continue
        if params.misc.reject_unknown_codecs:
            raise UnknownCodecError(
                f"Track {track.index} ({track.track_type.value}) has an unknown codec"
            )
        logger.warning(
            "Keeping track %d (%s) with unknown codec",
            track.index,
            track.track_type.value,
        )

    logger.info(
        "Kept %d of %d tracks",
        len(kept),
        len(tracks),
        extra={
            "audio": kept_counts[TrackType.AUDIO],
            "subtitle": kept_counts[TrackType.SUBTITLE],
            "video": kept_counts[TrackType.VIDEO],
        },
    )
    return kept


def filter_attachments(
    attachments: Iterable[Attachment], extensions: Iterable[str]
) -> list[Attachment]:
    """Select original attachments by extension (empty list keeps all).

    Attachments keep their original 1-based ids for extraction.
    """
    allowed = list(extensions)
    return [a for a in attachments if extension_allowed(a.name, allowed)]


def collect_folder_attachments(folder: Path, extensions: Iterable[str]) -> list[Path]:
    """Collect external attachment files from a folder, recursively.

    Args:
        folder: Folder to walk.
        extensions: Accepted extensions (empty accepts all).

    Returns:
        Sorted list of matching files. Empty if the folder does not exist.
    """
    if not folder.is_dir():
        logger.warning("Attachment folder does not exist: %s", folder)
        return []
    allowed = list(extensions)
    return sorted(
        path
        for path in folder.rglob("*")
        if path.is_file() and extension_allowed(path.name, allowed)
    )
