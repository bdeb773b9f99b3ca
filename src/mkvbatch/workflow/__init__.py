"""Processing workflow: filtering, muxing, the media file pipeline and
batch orchestration."""

from mkvbatch.workflow.filtering import (
    QuotaMismatchError,
    UnknownCodecError,
    apply_language_defaults,
    filter_tracks,
)
from mkvbatch.workflow.matcher import FileMatcher, MatchedFile, MatchError
from mkvbatch.workflow.media_file import (
    ConversionError,
    ExtractionError,
    FileResult,
    MediaFile,
    MuxError,
)
from mkvbatch.workflow.muxing import build_mux_arguments
from mkvbatch.workflow.processor import BatchContext, BatchProcessor, BatchSummary

__all__ = [
    "BatchContext",
    "BatchProcessor",
    "BatchSummary",
    "ConversionError",
    "ExtractionError",
    "FileMatcher",
    "FileResult",
    "MatchError",
    "MatchedFile",
    "MediaFile",
    "MuxError",
    "QuotaMismatchError",
    "UnknownCodecError",
    "apply_language_defaults",
    "build_mux_arguments",
    "filter_tracks",
]
