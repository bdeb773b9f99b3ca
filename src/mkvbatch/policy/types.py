"""Runtime profile types.

Frozen dataclasses produced by the profile loader from the validated
pydantic models. The rest of the code base only ever sees these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mkvbatch.domain.enums import DeletionMode, HookStage, TrackType
from mkvbatch.policy.conversion import AudioConversionParams
from mkvbatch.policy.predicates import NonePredicate, TrackPredicate
from mkvbatch.policy.substitutions import Substitutions

DEFAULT_CHAPTER_LANGUAGE = "en"
DEFAULT_CHAPTER_INTERVAL = "00:05:00.000000000"


class PadType(Enum):
    """Zero-padding applied to the output file index."""

    NONE = "none"
    TEN = "ten"
    HUNDRED = "hundred"
    THOUSAND = "thousand"

    @property
    def width(self) -> int:
        """Number of digits the index is padded to (0 for no padding)."""
        return {"none": 0, "ten": 2, "hundred": 3, "thousand": 4}[self.value]


class OnErrorMode(Enum):
    """Batch behavior after a file fails."""

    FAIL = "fail"  # Halt the batch
    CONTINUE = "continue"  # Record the failure and move on


@dataclass(frozen=True)
class TrackPolicy:
    """Retention policy for one track category."""

    predicate: TrackPredicate = field(default_factory=NonePredicate)
    total_to_retain: int | None = None
    default_language: str | None = None
    conversion: AudioConversionParams | None = None


@dataclass(frozen=True)
class OtherTracksParams:
    import_from_original: bool = False


@dataclass(frozen=True)
class AttachmentParams:
    """Which attachments end up in the output file."""

    import_from_original: bool = False
    import_original_extensions: tuple[str, ...] = ()
    import_from_folder: Path | None = None
    import_folder_extensions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChapterParams:
    """Chapter import and generation."""

    import_from_original: bool = False
    create_if_not_present: bool = False
    create_interval: str = DEFAULT_CHAPTER_INTERVAL
    language: str = DEFAULT_CHAPTER_LANGUAGE


@dataclass(frozen=True)
class TrackParams:
    """Per-output-track overrides, addressed by kept output position."""

    id: int
    default: bool | None = None
    enabled: bool | None = None
    forced: bool | None = None
    hearing_impaired: bool | None = None
    visual_impaired: bool | None = None
    text_descriptions: bool | None = None
    original: bool | None = None
    commentary: bool | None = None
    delay_override: int | None = None


@dataclass(frozen=True)
class HookCommand:
    """External command run at a pipeline stage."""

    stage: HookStage
    command: tuple[str, ...]

    @property
    def path(self) -> Path:
        return Path(self.command[0])

    @property
    def arguments(self) -> tuple[str, ...]:
        return self.command[1:]


@dataclass(frozen=True)
class MiscParams:
    remove_original_file: DeletionMode = DeletionMode.NONE
    remove_temp_files: DeletionMode = DeletionMode.DELETE
    set_file_title: bool = True
    shutdown_upon_completion: bool = False
    tags_path: Path | None = None
    run: tuple[HookCommand, ...] = ()
    on_error: OnErrorMode = OnErrorMode.FAIL
    reject_unknown_codecs: bool = False


@dataclass(frozen=True)
class ProcessingParams:
    """Everything the media file pipeline needs to process one file."""

    audio_tracks: TrackPolicy = field(default_factory=TrackPolicy)
    subtitle_tracks: TrackPolicy = field(default_factory=TrackPolicy)
    video_tracks: TrackPolicy = field(default_factory=TrackPolicy)
    other_tracks: OtherTracksParams = field(default_factory=OtherTracksParams)
    attachments: AttachmentParams = field(default_factory=AttachmentParams)
    chapters: ChapterParams = field(default_factory=ChapterParams)
    track_params: tuple[TrackParams, ...] = ()
    misc: MiscParams = field(default_factory=MiscParams)

    def policy_for(self, track_type: TrackType) -> TrackPolicy | None:
        """Get the retention policy for a category, if it has one."""
        if track_type == TrackType.AUDIO:
            return self.audio_tracks
        if track_type == TrackType.SUBTITLE:
            return self.subtitle_tracks
        if track_type == TrackType.VIDEO:
            return self.video_tracks
        return None

    def track_params_for(self, output_position: int) -> TrackParams | None:
        """Get the overrides for a kept track by its output position."""
        for params in self.track_params:
            if params.id == output_position:
                return params
        return None


@dataclass(frozen=True)
class Profile:
    """A complete batch run description."""

    input_dir: Path
    output_dir: Path
    output_names_file_path: Path
    start_from: int = 1
    index_pad_type: PadType = PadType.NONE
    substitutions: Substitutions = field(default_factory=Substitutions)
    processing_params: ProcessingParams = field(default_factory=ProcessingParams)
