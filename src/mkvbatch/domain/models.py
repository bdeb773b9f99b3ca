"""Domain models for mkvbatch.

These models describe the contents of a single Matroska file as seen by the
pipeline, independent of the tool that produced the metadata.
"""

from dataclasses import dataclass

from mkvbatch.domain.enums import Codec, DelaySource, TrackType

DEFAULT_LANGUAGE = "und"


@dataclass
class Track:
    """A track within a media file (domain model).

    Tracks are mutable: the pipeline backfills languages and reassigns the
    codec after a successful audio conversion.
    """

    index: int  # Ordinal in metadata order; 0 is the general pseudo-track
    track_type: TrackType
    codec: Codec = Codec.UNKNOWN
    stream_id: int = -1  # mkvextract track id
    language: str = DEFAULT_LANGUAGE
    title: str | None = None
    delay_ms: int = 0
    delay_source: DelaySource = DelaySource.NONE
    width: int = 0
    height: int = 0
    bit_depth: int = 0
    channels: int = 0
    file_id: int = 0  # Owning MediaFile id

    @property
    def real_index(self) -> int:
        """0-based position among the non-general tracks."""
        return self.index - 1

    @property
    def file_name(self) -> str:
        """Name of the extracted stream file for this track.

        Derived from the current codec, so it changes when the codec is
        reassigned after conversion.
        """
        return (
            f"{self.track_type.value}_{self.stream_id}_{self.language}"
            f".{self.codec.extension}"
        )


@dataclass(frozen=True)
class Attachment:
    """A file attached to the original container."""

    attachment_id: int  # 1-based position in the original container
    name: str
