"""Domain models and enums for mkvbatch.

Usage:
    from mkvbatch.domain import Track, TrackType, Codec
"""

from .enums import (
    CODEC_EXTENSIONS,
    Codec,
    DelaySource,
    DeletionMode,
    HookStage,
    TrackType,
)
from .models import DEFAULT_LANGUAGE, Attachment, Track

__all__ = [
    # Models
    "Track",
    "Attachment",
    "DEFAULT_LANGUAGE",
    # Enums
    "TrackType",
    "Codec",
    "CODEC_EXTENSIONS",
    "DelaySource",
    "DeletionMode",
    "HookStage",
]
