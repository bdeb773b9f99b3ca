"""Shared test fixtures for mkvbatch."""

import shutil
import tempfile
from pathlib import Path

import pytest

from mkvbatch.config import MkvBatchConfig, ToolPathsConfig, set_active_config
from mkvbatch.domain import Codec, DelaySource, Track, TrackType
from mkvbatch.logging.context import clear_file_context


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_active_config():
    """Keep tool resolution from reading the user's config file."""
    set_active_config(MkvBatchConfig(tools=ToolPathsConfig()))
    yield
    set_active_config(None)
    clear_file_context()


@pytest.fixture
def make_track():
    """Factory for tracks with sensible per-category defaults."""

    def _make(
        index: int,
        track_type: TrackType,
        codec: Codec | None = None,
        language: str = "und",
        title: str | None = None,
        delay_ms: int = 0,
        delay_source: DelaySource = DelaySource.NONE,
        **kwargs,
    ) -> Track:
        default_codecs = {
            TrackType.VIDEO: Codec.H264,
            TrackType.AUDIO: Codec.AAC,
            TrackType.SUBTITLE: Codec.SUBTITLE_TEXT_UTF8,
        }
        return Track(
            index=index,
            track_type=track_type,
            codec=codec or default_codecs.get(track_type, Codec.UNKNOWN),
            stream_id=kwargs.pop("stream_id", index - 1),
            language=language,
            title=title,
            delay_ms=delay_ms,
            delay_source=delay_source,
            **kwargs,
        )

    return _make


@pytest.fixture
def anime_tracks(make_track):
    """General + video + 2 audio (jpn, eng) + 2 subtitles (eng, und)."""
    return [
        make_track(0, TrackType.GENERAL),
        make_track(1, TrackType.VIDEO, width=1920, height=1080, bit_depth=10),
        make_track(2, TrackType.AUDIO, codec=Codec.FLAC, language="jpn"),
        make_track(3, TrackType.AUDIO, language="eng", title="English Dub"),
        make_track(4, TrackType.SUBTITLE, language="eng", title="Full Subtitles"),
        make_track(5, TrackType.SUBTITLE, title="Signs & Songs"),
    ]
