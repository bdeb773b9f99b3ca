"""Unit tests for MediaInfo parsing functions."""

from pathlib import Path

import pytest

from mkvbatch.domain import Codec, DelaySource, TrackType
from mkvbatch.introspector.interface import MediaIntrospectionError
from mkvbatch.introspector.mappings import (
    map_codec_id,
    map_delay_source,
    map_track_type,
)
from mkvbatch.introspector.parsers import (
    build_attachments,
    parse_attachment_names,
    parse_delay_ms,
    parse_int,
    parse_mediainfo_output,
    parse_track,
)


def _mediainfo_document() -> dict:
    return {
        "media": {
            "@ref": "/in/Show - 01.mkv",
            "track": [
                {
                    "@type": "General",
                    "Title": "Show - 01",
                    "extra": {"Attachments": "font.ttf / cover.jpg"},
                },
                {
                    "@type": "Video",
                    "StreamOrder": "0",
                    "CodecID": "V_MPEGH/ISO/HEVC",
                    "Width": "1920",
                    "Height": "1080",
                    "BitDepth": "10",
                },
                {
                    "@type": "Audio",
                    "StreamOrder": "1",
                    "CodecID": "A_FLAC",
                    "Language": "ja",
                    "Channels": "2",
                    "Delay": "0.042",
                    "Delay_Source": "Container",
                },
                {
                    "@type": "Text",
                    "StreamOrder": "2",
                    "CodecID": "S_TEXT/ASS",
                    "Language": "en",
                    "Title": "Full",
                },
                {"@type": "Menu"},
            ],
        }
    }


class TestParseInt:
    """Tests for parse_int function."""

    def test_numeric_string(self):
        assert parse_int("1080") == 1080

    def test_none_and_garbage_use_default(self):
        assert parse_int(None) == 0
        assert parse_int("n/a", default=7) == 7

    def test_int_passthrough(self):
        assert parse_int(5) == 5


class TestParseDelayMs:
    """Tests for parse_delay_ms function."""

    def test_seconds_to_milliseconds(self):
        assert parse_delay_ms("0.042") == 42

    def test_negative_delay(self):
        assert parse_delay_ms("-1.5") == -1500

    def test_rounds_to_nearest(self):
        assert parse_delay_ms("0.0416") == 42

    def test_missing_or_malformed(self):
        assert parse_delay_ms(None) == 0
        assert parse_delay_ms("") == 0
        assert parse_delay_ms("soon") == 0


class TestAttachments:
    """Tests for attachment name parsing."""

    def test_split_names(self):
        assert parse_attachment_names("a.ttf / b.otf") == ["a.ttf", "b.otf"]

    def test_empty(self):
        assert parse_attachment_names(None) == []
        assert parse_attachment_names("") == []

    def test_ids_are_one_based(self):
        attachments = build_attachments(["a.ttf", "b.otf"])
        assert [(a.attachment_id, a.name) for a in attachments] == [
            (1, "a.ttf"),
            (2, "b.otf"),
        ]


class TestMappings:
    """Tests for identifier mappings."""

    def test_known_codec_ids(self):
        assert map_codec_id("A_AAC-2") == Codec.AAC
        assert map_codec_id("V_MPEG4/ISO/AVC") == Codec.H264
        assert map_codec_id("S_HDMV/PGS") == Codec.HDMV
        assert map_codec_id("A_PCM/INT/LIT") == Codec.PCM

    def test_unknown_codec_id(self, caplog):
        assert map_codec_id("X_NEW") == Codec.UNKNOWN
        assert "X_NEW" in caplog.text

    def test_missing_codec_id(self):
        assert map_codec_id(None) == Codec.UNKNOWN

    def test_track_types(self):
        assert map_track_type("Text") == TrackType.SUBTITLE
        assert map_track_type("General") == TrackType.GENERAL
        assert map_track_type("Image") == TrackType.OTHER
        assert map_track_type(None) == TrackType.OTHER

    def test_delay_sources(self):
        assert map_delay_source("Container") == DelaySource.CONTAINER
        assert map_delay_source("Stream") == DelaySource.STREAM
        assert map_delay_source(None) == DelaySource.NONE


class TestParseTrack:
    """Tests for parse_track function."""

    def test_empty_language_becomes_undefined(self):
        track = parse_track({"@type": "Audio", "Language": "  "}, index=1)
        assert track.language == "und"

    def test_stream_order_fallback(self):
        track = parse_track({"@type": "Audio"}, index=3)
        assert track.stream_id == 2

    def test_zero_delay_clears_source(self):
        track = parse_track(
            {"@type": "Audio", "Delay": "0.000", "Delay_Source": "Container"},
            index=1,
        )
        assert track.delay_ms == 0
        assert track.delay_source == DelaySource.NONE

    def test_file_id_is_stamped(self):
        track = parse_track({"@type": "Video"}, index=1, file_id=4)
        assert track.file_id == 4


class TestParseMediainfoOutput:
    """Tests for parse_mediainfo_output function."""

    def test_full_document(self):
        result = parse_mediainfo_output(Path("/in/a.mkv"), _mediainfo_document())

        types = [t.track_type for t in result.tracks]
        assert types == [
            TrackType.GENERAL,
            TrackType.VIDEO,
            TrackType.AUDIO,
            TrackType.SUBTITLE,
            TrackType.MENU,
        ]
        assert [t.index for t in result.tracks] == [0, 1, 2, 3, 4]
        assert result.attachment_names == ["font.ttf", "cover.jpg"]

        video = result.tracks[1]
        assert video.codec == Codec.HEVC
        assert (video.width, video.height, video.bit_depth) == (1920, 1080, 10)

        audio = result.tracks[2]
        assert audio.stream_id == 1
        assert audio.language == "ja"
        assert audio.delay_ms == 42
        assert audio.delay_source == DelaySource.CONTAINER

        subtitle = result.tracks[3]
        assert subtitle.codec == Codec.ADVANCED_SSA
        assert subtitle.title == "Full"

    def test_missing_track_list_raises(self):
        with pytest.raises(MediaIntrospectionError, match="media.track"):
            parse_mediainfo_output(Path("/in/a.mkv"), {"media": None})

    def test_malformed_entry_is_skipped_with_warning(self):
        data = {"media": {"track": [{"@type": "General"}, "garbage"]}}
        result = parse_mediainfo_output(Path("/in/a.mkv"), data)

        assert len(result.tracks) == 1
        assert len(result.warnings) == 1

    def test_ordinals_stay_contiguous_after_skipped_entry(self):
        data = {
            "media": {
                "track": [
                    {"@type": "General"},
                    "garbage",
                    {"@type": "Audio"},
                    {"@type": "Text"},
                ]
            }
        }
        result = parse_mediainfo_output(Path("/in/a.mkv"), data)

        assert [t.index for t in result.tracks] == [0, 1, 2]
        assert [t.real_index for t in result.tracks[1:]] == [0, 1]
        assert [t.stream_id for t in result.tracks[1:]] == [0, 1]
