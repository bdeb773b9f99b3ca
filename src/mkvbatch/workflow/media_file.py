"""Media file pipeline.

Processes a single Matroska file through the fixed stage order:

    introspect -> filter -> extract -> pre_convert hooks -> convert
    -> post_convert hooks -> pre_mux hooks -> remux -> post_mux hooks
    -> cleanup

A hard failure in any stage raises a MediaFileError subclass which
aborts the remaining stages; ``process`` turns it into a failed
FileResult. Cleanup of the temp directory always runs.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from mkvbatch.core.file_utils import delete_path
from mkvbatch.domain.enums import HookStage, TrackType
from mkvbatch.domain.exceptions import MediaFileError
from mkvbatch.domain.models import Attachment, Track
from mkvbatch.executor.ffmpeg import FfmpegEncoder
from mkvbatch.executor.hooks import HookRunner
from mkvbatch.executor.mkvtoolnix import MkvextractExecutor, MkvmergeExecutor
from mkvbatch.introspector.interface import MediaIntrospector
from mkvbatch.introspector.parsers import build_attachments
from mkvbatch.logging.context import file_context, format_file_id
from mkvbatch.policy.conversion import AudioConversionParams
from mkvbatch.policy.exceptions import ConversionParamsError
from mkvbatch.policy.types import ProcessingParams
from mkvbatch.workflow.filtering import (
    collect_folder_attachments,
    filter_attachments,
    filter_tracks,
)
from mkvbatch.workflow.muxing import build_mux_arguments

logger = logging.getLogger(__name__)

TRACKS_DIR = "tracks"
ATTACHMENTS_DIR = "attachments"
CHAPTERS_DIR = "chapters"


class ExtractionError(MediaFileError):
    """Raised when mkvextract fails hard."""

    stage = "extract"


class ConversionError(MediaFileError):
    """Raised when a track conversion fails or is not supported."""

    stage = "convert"
    halts_batch = False


class MuxError(MediaFileError):
    """Raised when mkvmerge fails hard."""

    stage = "remux"


@dataclass(frozen=True)
class FileResult:
    """Outcome of processing one media file."""

    input_path: Path
    output_path: Path
    success: bool
    stage: str | None = None  # Stage that failed, None on success
    message: str = ""
    duration_seconds: float = 0.0
    halts_batch: bool = True  # Whether a failure stops an on_error: fail batch


def unique_moved_path(directory: Path, stream_id: int, extension: str) -> Path:
    """Find a free ``moved<id>.<ext>`` name in a directory."""
    candidate = directory / f"moved{stream_id}.{extension}"
    counter = 1
    while candidate.exists():
        candidate = directory / f"moved{stream_id}_{counter}.{extension}"
        counter += 1
    return candidate


class MediaFile:
    """One input file and everything needed to turn it into its output.

    Attributes:
        file_id: Sequential id assigned by the batch.
        input_path: Original Matroska file.
        temp_dir: ``<temp root>/<file id>`` working directory.
        tracks: All tracks in metadata order, once loaded.
        kept_tracks: Tracks retained by filtering, in original order.
        attachments: Attachments found in the original container.
    """

    def __init__(
        self,
        file_id: int,
        input_path: Path,
        temp_root: Path,
        introspector: MediaIntrospector,
        mkvextract: MkvextractExecutor | None = None,
        mkvmerge: MkvmergeExecutor | None = None,
        encoder: FfmpegEncoder | None = None,
    ) -> None:
        self.file_id = file_id
        self.input_path = input_path
        # Absolute: external tools run with their cwd inside this tree
        self.temp_dir = temp_root.resolve() / str(file_id)
        self._introspector = introspector
        self._mkvextract = mkvextract or MkvextractExecutor()
        self._mkvmerge = mkvmerge or MkvmergeExecutor()
        self._encoder = encoder or FfmpegEncoder()

        self.tracks: list[Track] | None = None
        self.kept_tracks: list[Track] = []
        self.attachments: list[Attachment] = []
        self.mux_arguments: list[str] = []
        self._attachment_files: list[tuple[str, Path]] = []

    @property
    def tag(self) -> str:
        return format_file_id(self.file_id)

    @property
    def tracks_dir(self) -> Path:
        return self.temp_dir / TRACKS_DIR

    @property
    def attachments_dir(self) -> Path:
        return self.temp_dir / ATTACHMENTS_DIR

    @property
    def chapters_dir(self) -> Path:
        return self.temp_dir / CHAPTERS_DIR

    def load(self) -> None:
        """Read track and attachment metadata from the input file."""
        result = self._introspector.get_file_info(
            self.input_path, file_id=self.file_id
        )
        self.tracks = result.tracks
        self.attachments = build_attachments(result.attachment_names)
        logger.info(
            "Read %d tracks and %d attachments from %s",
            len(self.tracks),
            len(self.attachments),
            self.input_path.name,
        )

    def filter(self, params: ProcessingParams) -> list[Track]:
        """Apply language defaults, retention and quota checks."""
        if self.tracks is None:
            self.load()
        self.kept_tracks = filter_tracks(self.tracks or [], params)
        return self.kept_tracks

    def extract(self, params: ProcessingParams) -> None:
        """Extract kept tracks and requested attachments and chapters.

        Raises:
            ExtractionError: If mkvextract fails hard.
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)

        result = self._mkvextract.extract_tracks(
            self.input_path,
            self.tracks_dir,
            [(t.stream_id, t.file_name) for t in self.kept_tracks],
        )
        if not result.success:
            raise ExtractionError(f"Track extraction failed: {result.message}")

        self._attachment_files = []
        attachment_params = params.attachments
        if attachment_params.import_from_original:
            selected = filter_attachments(
                self.attachments, attachment_params.import_original_extensions
            )
            result = self._mkvextract.extract_attachments(
                self.input_path,
                self.attachments_dir,
                [(a.attachment_id, a.name) for a in selected],
            )
            if not result.success:
                raise ExtractionError(
                    f"Attachment extraction failed: {result.message}"
                )
            self._attachment_files.extend(
                (a.name, self.attachments_dir / a.name) for a in selected
            )

        if attachment_params.import_from_folder is not None:
            self._attachment_files.extend(
                (path.name, path)
                for path in collect_folder_attachments(
                    attachment_params.import_from_folder,
                    attachment_params.import_folder_extensions,
                )
            )

        if params.chapters.import_from_original:
            result = self._mkvextract.extract_chapters(
                self.input_path, self.chapters_dir
            )
            if not result.success:
                raise ExtractionError(f"Chapter extraction failed: {result.message}")

    def convert_all_audio(self, conversion: AudioConversionParams | None) -> int:
        """Convert every kept audio track.

        Args:
            conversion: Target parameters; None or no codec skips conversion.

        Returns:
            Number of tracks converted.

        Raises:
            ConversionError: If a conversion fails.
        """
        if conversion is None or conversion.codec is None:
            return 0

        converted = 0
        for track in self.kept_tracks:
            if track.track_type != TrackType.AUDIO:
                continue
            self.convert_track(track, conversion)
            converted += 1
        return converted

    def convert_track(self, track: Track, conversion: AudioConversionParams) -> None:
        """Convert a single extracted audio track in place.

        When source and target share an extension, the source is first
        renamed to ``moved<stream id>.<ext>``.

        Raises:
            ConversionError: If the conversion fails.
        """
        if conversion.codec is None:
            raise ConversionError("No target codec given for conversion")
        file_in = self.tracks_dir / track.file_name
        file_out = conversion.output_path(file_in)
        if file_out == file_in:
            moved = unique_moved_path(
                self.tracks_dir, track.stream_id, track.codec.extension
            )
            try:
                file_in.rename(moved)
            except OSError as e:
                raise ConversionError(f"Could not move {file_in.name}: {e}") from e
            file_in = moved

        try:
            args = conversion.as_ffmpeg_arguments(file_in, file_out)
        except ConversionParamsError as e:
            raise ConversionError(str(e)) from e

        logger.info(
            "Converting %s track %d to %s",
            track.track_type.value,
            track.index,
            conversion.codec.value,
        )
        result = self._encoder.encode(args, cwd=self.tracks_dir)
        if not result.success:
            raise ConversionError(
                f"Conversion of track {track.index} failed: {result.message}"
            )
        track.codec = conversion.codec.codec

    def convert_unsupported(self, params: ProcessingParams) -> None:
        """Reject subtitle and video conversion requests.

        Raises:
            ConversionError: If a subtitle or video conversion codec is set.
        """
        for name, policy in (
            ("subtitle", params.subtitle_tracks),
            ("video", params.video_tracks),
        ):
            if policy.conversion is not None and policy.conversion.codec is not None:
                raise ConversionError(f"Conversion of {name} tracks is not supported")

    def remux(self, output_path: Path, title: str, params: ProcessingParams) -> None:
        """Build the output container.

        Raises:
            MuxError: If mkvmerge fails hard.
        """
        self.mux_arguments = build_mux_arguments(
            output_path=output_path,
            title=title,
            tracks=self.kept_tracks,
            params=params,
            track_dir=self.tracks_dir,
            chapters_dir=self.chapters_dir,
            attachments=self._attachment_files,
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result = self._mkvmerge.merge(self.mux_arguments, cwd=self.temp_dir)
        if not result.success:
            raise MuxError(f"Remux failed: {result.message}")
        logger.info("Wrote %s", output_path)

    def cleanup(self, params: ProcessingParams) -> None:
        """Remove the temp directory according to the profile."""
        delete_path(self.temp_dir, params.misc.remove_temp_files)

    def process(
        self,
        output_path: Path,
        title: str,
        params: ProcessingParams,
        hooks: HookRunner | None = None,
    ) -> FileResult:
        """Run the full pipeline for this file.

        Args:
            output_path: Destination container path.
            title: Container title.
            params: Processing parameters.
            hooks: Hook runner; defaults to the profile's hook commands.

        Returns:
            FileResult describing success or the failing stage.
        """
        hooks = hooks or HookRunner(params.misc.run)
        start_time = time.monotonic()

        def run_hooks(stage: HookStage) -> None:
            hooks.run_stage(stage, self.input_path, output_path, self.temp_dir)

        with file_context(self.tag, self.input_path):
            logger.info("Processing %s -> %s", self.input_path.name, output_path.name)
            try:
                self.filter(params)
                self.extract(params)
                run_hooks(HookStage.PRE_CONVERT)
                audio = params.audio_tracks.conversion
                self.convert_all_audio(audio)
                self.convert_unsupported(params)
                run_hooks(HookStage.POST_CONVERT)
                run_hooks(HookStage.PRE_MUX)
                self.remux(output_path, title, params)
                run_hooks(HookStage.POST_MUX)
            except MediaFileError as e:
                logger.error("Processing failed at %s: %s", e.stage, e)
                return FileResult(
                    input_path=self.input_path,
                    output_path=output_path,
                    success=False,
                    stage=e.stage,
                    message=str(e),
                    duration_seconds=round(time.monotonic() - start_time, 3),
                    halts_batch=e.halts_batch,
                )
            finally:
                self.cleanup(params)

            # Only a successfully muxed file may replace its source
            delete_path(self.input_path, params.misc.remove_original_file)

            duration = round(time.monotonic() - start_time, 3)
            logger.info(
                "Finished %s in %.1fs",
                self.input_path.name,
                duration,
                extra={"duration_seconds": duration},
            )
            return FileResult(
                input_path=self.input_path,
                output_path=output_path,
                success=True,
                duration_seconds=duration,
            )
