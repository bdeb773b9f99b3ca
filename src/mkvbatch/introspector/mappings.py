"""Mappings from MediaInfo identifiers to mkvbatch domain values."""

import logging

from mkvbatch.domain.enums import Codec, DelaySource, TrackType

logger = logging.getLogger(__name__)

# Matroska CodecID -> internal codec
CODEC_ID_MAP: dict[str, Codec] = {
    # Video
    "V_MPEG4/ISO/SP": Codec.H264,
    "V_MPEG4/ISO/ASP": Codec.H264,
    "V_MPEG4/ISO/AP": Codec.H264,
    "V_MPEG4/MS/V3": Codec.H264,
    "V_MPEG4/ISO/AVC": Codec.H264,
    "V_MPEGH/ISO/HEVC": Codec.HEVC,
    "V_MPEG1": Codec.MPEG1,
    "V_MPEG2": Codec.MPEG2,
    "V_THEORA": Codec.THEORA,
    "V_PRORES": Codec.PRORES,
    "V_VP8": Codec.VP8,
    "V_VP9": Codec.VP9,
    "V_FFV1": Codec.FFV1,
    # Audio
    "A_MPEG/L1": Codec.MP2,
    "A_MPEG/L2": Codec.MP2,
    "A_MPEG/L3": Codec.MP3,
    "A_AC3": Codec.AC3,
    "A_AC3/BSID9": Codec.AC3,
    "A_AC3/BSID10": Codec.AC3,
    "A_EAC3": Codec.EAC3,
    "A_DTS": Codec.DTS,
    "A_DTS/EXPRESS": Codec.DTS,
    "A_DTS/LOSSLESS": Codec.DTS,
    "A_TRUEHD": Codec.TRUEHD,
    "A_VORBIS": Codec.VORBIS,
    "A_OPUS": Codec.OPUS,
    "A_FLAC": Codec.FLAC,
    "A_ALAC": Codec.ALAC,
    "A_WAVPACK4": Codec.WAVPACK,
    "A_PCM/INT/BIG": Codec.PCM,
    "A_PCM/INT/LIT": Codec.PCM,
    "A_PCM/FLOAT/IEEE": Codec.PCM,
    "A_AAC": Codec.AAC,
    "A_AAC-1": Codec.AAC,
    "A_AAC-2": Codec.AAC,
    "A_AAC/MPEG2/MAIN": Codec.AAC,
    "A_AAC/MPEG2/LC": Codec.AAC,
    "A_AAC/MPEG2/LC/SBR": Codec.AAC,
    "A_AAC/MPEG2/SSR": Codec.AAC,
    "A_AAC/MPEG4/MAIN": Codec.AAC,
    "A_AAC/MPEG4/LC": Codec.AAC,
    "A_AAC/MPEG4/LC/SBR": Codec.AAC,
    "A_AAC/MPEG4/SSR": Codec.AAC,
    "A_AAC/MPEG4/LTP": Codec.AAC,
    # Subtitle
    "S_TEXT/UTF8": Codec.SUBTITLE_TEXT_UTF8,
    "S_TEXT/SSA": Codec.SUBSTATION_ALPHA,
    "S_TEXT/ASS": Codec.ADVANCED_SSA,
    "S_TEXT/WEBVTT": Codec.WEBVTT,
    "S_IMAGE/BMP": Codec.SUBTITLE_BITMAP,
    "S_DVBSUB": Codec.DVB_SUBTITLE,
    "S_VOBSUB": Codec.VOBSUB,
    "S_HDMV/PGS": Codec.HDMV,
    "S_HDMV/TEXTST": Codec.HDMV,
}

TRACK_TYPE_MAP: dict[str, TrackType] = {
    "General": TrackType.GENERAL,
    "Video": TrackType.VIDEO,
    "Audio": TrackType.AUDIO,
    "Text": TrackType.SUBTITLE,
    "Button": TrackType.BUTTON,
    "Menu": TrackType.MENU,
}

DELAY_SOURCE_MAP: dict[str, DelaySource] = {
    "Container": DelaySource.CONTAINER,
    "Stream": DelaySource.STREAM,
}


def map_codec_id(codec_id: str | None) -> Codec:
    """Map a Matroska CodecID to the internal codec.

    Unrecognized identifiers map to Codec.UNKNOWN and are logged.

    Args:
        codec_id: CodecID string from MediaInfo (e.g., "A_AAC-2").

    Returns:
        Internal codec.
    """
    if not codec_id:
        return Codec.UNKNOWN
    codec = CODEC_ID_MAP.get(codec_id)
    if codec is None:
        logger.warning("Unexpected codec ID: %s", codec_id)
        return Codec.UNKNOWN
    return codec


def map_track_type(type_name: str | None) -> TrackType:
    """Map a MediaInfo @type value to a track type."""
    return TRACK_TYPE_MAP.get(type_name or "", TrackType.OTHER)


def map_delay_source(value: str | None) -> DelaySource:
    """Map a MediaInfo Delay_Source value to a delay source."""
    return DELAY_SOURCE_MAP.get(value or "", DelaySource.NONE)
