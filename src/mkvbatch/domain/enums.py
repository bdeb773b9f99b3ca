"""Domain enums for mkvbatch.

This module contains the closed vocabularies shared by the introspector,
the profile layer and the media file pipeline: track categories, the
internal codec set (with its extracted-file extensions), delay sources,
deletion modes and hook stages.
"""

from enum import Enum


class TrackType(Enum):
    """Category of a track as reported by the metadata extractor."""

    GENERAL = "general"  # Container-level pseudo-track, always index 0
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    BUTTON = "button"
    MENU = "menu"
    OTHER = "other"


class Codec(Enum):
    """Closed set of codecs understood by the pipeline.

    Every member maps to exactly one extension for the extracted stream
    file, see :attr:`extension`.
    """

    # Video
    H264 = "h264"
    HEVC = "hevc"
    VP8 = "vp8"
    VP9 = "vp9"
    FFV1 = "ffv1"
    MPEG1 = "mpeg1"
    MPEG2 = "mpeg2"
    THEORA = "theora"
    PRORES = "prores"
    # Audio
    AAC = "aac"
    AC3 = "ac3"
    EAC3 = "eac3"
    DTS = "dts"
    FLAC = "flac"
    MP2 = "mp2"
    MP3 = "mp3"
    OPUS = "opus"
    VORBIS = "vorbis"
    WAVPACK = "wavpack"
    PCM = "pcm"
    ALAC = "alac"
    TRUEHD = "truehd"
    # Subtitle
    SUBTITLE_TEXT_UTF8 = "subtitle_text_utf8"
    SUBSTATION_ALPHA = "substation_alpha"
    ADVANCED_SSA = "advanced_ssa"
    WEBVTT = "webvtt"
    SUBTITLE_BITMAP = "subtitle_bitmap"
    DVB_SUBTITLE = "dvb_subtitle"
    HDMV = "hdmv"
    VOBSUB = "vobsub"

    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        """Extension (without dot) used for the extracted stream file."""
        return CODEC_EXTENSIONS[self]


CODEC_EXTENSIONS: dict[Codec, str] = {
    Codec.H264: "h264",
    Codec.HEVC: "hevc",
    Codec.VP8: "vp8",
    Codec.VP9: "vp9",
    Codec.FFV1: "ffv1",
    Codec.MPEG1: "m1v",
    Codec.MPEG2: "m2v",
    Codec.THEORA: "ogv",
    Codec.PRORES: "prores",
    Codec.AAC: "aac",
    Codec.AC3: "ac3",
    Codec.EAC3: "eac3",
    Codec.DTS: "dts",
    Codec.FLAC: "flac",
    Codec.MP2: "mp2",
    Codec.MP3: "mp3",
    Codec.OPUS: "opus",
    Codec.VORBIS: "ogg",
    Codec.WAVPACK: "wv",
    Codec.PCM: "wav",
    Codec.ALAC: "m4a",
    Codec.TRUEHD: "thd",
    # Bitmap subtitle streams share the text subtitle extension
    Codec.SUBTITLE_TEXT_UTF8: "srt",
    Codec.DVB_SUBTITLE: "srt",
    Codec.HDMV: "srt",
    Codec.SUBSTATION_ALPHA: "ssa",
    Codec.ADVANCED_SSA: "ass",
    Codec.WEBVTT: "vtt",
    Codec.SUBTITLE_BITMAP: "bmp",
    Codec.VOBSUB: "sub",
    Codec.UNKNOWN: "unknown",
}


class DelaySource(Enum):
    """Where a track's start delay is stored."""

    NONE = "none"
    CONTAINER = "container"  # Needs an explicit --sync when remuxing
    STREAM = "stream"  # Carried inside the extracted stream itself


class DeletionMode(Enum):
    """How temporary and original files are removed."""

    NONE = "none"
    DELETE = "delete"
    TRASH = "trash"


class HookStage(Enum):
    """Pipeline stage at which a hook command runs."""

    PRE_CONVERT = "pre_convert"
    POST_CONVERT = "post_convert"
    PRE_MUX = "pre_mux"
    POST_MUX = "post_mux"
