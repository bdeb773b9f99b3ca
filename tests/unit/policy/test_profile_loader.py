"""Unit tests for profile loading and validation."""

from pathlib import Path

import pytest

from mkvbatch.domain import DeletionMode, HookStage
from mkvbatch.policy.conversion import AudioCodec
from mkvbatch.policy.exceptions import ProfileValidationError
from mkvbatch.policy.loader import load_profile, load_profile_from_dict
from mkvbatch.policy.predicates import (
    IndexPredicate,
    LanguagePredicate,
    NonePredicate,
    TitleCombinator,
    TitlePredicate,
    TitleRuleKind,
)
from mkvbatch.policy.types import OnErrorMode, PadType

FULL_PROFILE = """\
input_dir: input
output_dir: /srv/output
output_names_file_path: names.txt
start_from: 5
index_pad_type: ten
substitutions:
  convert_to_proper_title_case: false
  regular_expressions:
    - ["^Ep(\\\\d+)", "Episode \\\\1"]
  strings:
    - ["_", " "]
processing_params:
  audio_tracks:
    predicate:
      language: [jpn, ja]
    total_to_retain: 1
    default_language: jpn
    conversion:
      codec: opus
      bitrate: 128
      vbr: on
  subtitle_tracks:
    predicate:
      title:
        combinator: OR
        rules:
          - contains: Full
          - regex: "^Dialog"
  video_tracks:
    predicate:
      index: [0]
  attachments:
    import_from_original: true
    import_original_extensions: [ttf, otf]
    import_from_folder: fonts
  chapters:
    create_if_not_present: true
  track_params:
    - id: 0
      default: true
    - id: 1
      delay_override: -250
  misc:
    remove_original_file: trash
    tags_path: tags.xml
    on_error: continue
    run:
      - stage: post_mux
        command: [/usr/bin/notify-send, "%o%"]
"""


def _minimal(**extra) -> dict:
    data = {
        "input_dir": "/in",
        "output_dir": "/out",
        "output_names_file_path": "/names.txt",
    }
    data.update(extra)
    return data


class TestLoadProfile:
    """Tests for load_profile with YAML files."""

    def test_full_profile(self, temp_dir: Path):
        path = temp_dir / "profile.yaml"
        path.write_text(FULL_PROFILE)

        profile = load_profile(path)

        base = temp_dir.resolve()
        assert profile.input_dir == base / "input"
        assert profile.output_dir == Path("/srv/output")
        assert profile.output_names_file_path == base / "names.txt"
        assert profile.start_from == 5
        assert profile.index_pad_type == PadType.TEN
        assert profile.substitutions.regular_expressions == (
            (r"^Ep(\d+)", r"Episode \1"),
        )

        params = profile.processing_params
        assert params.audio_tracks.predicate == LanguagePredicate(("jpn", "ja"))
        assert params.audio_tracks.total_to_retain == 1
        assert params.audio_tracks.default_language == "jpn"
        conversion = params.audio_tracks.conversion
        assert conversion.codec == AudioCodec.OPUS
        assert conversion.bitrate == 128
        assert conversion.vbr == "on"

        title = params.subtitle_tracks.predicate
        assert isinstance(title, TitlePredicate)
        assert title.combinator == TitleCombinator.OR
        assert [r.kind for r in title.rules] == [
            TitleRuleKind.CONTAINS,
            TitleRuleKind.REGEX,
        ]

        assert params.video_tracks.predicate == IndexPredicate(frozenset({0}))
        assert params.attachments.import_original_extensions == ("ttf", "otf")
        assert params.attachments.import_from_folder == base / "fonts"
        assert params.chapters.create_if_not_present
        assert params.chapters.create_interval == "00:05:00.000000000"
        assert params.chapters.language == "en"
        assert params.track_params_for(0).default is True
        assert params.track_params_for(1).delay_override == -250
        assert params.track_params_for(2) is None

        misc = params.misc
        assert misc.remove_original_file == DeletionMode.TRASH
        assert misc.remove_temp_files == DeletionMode.DELETE
        assert misc.tags_path == base / "tags.xml"
        assert misc.on_error == OnErrorMode.CONTINUE
        assert misc.run[0].stage == HookStage.POST_MUX
        assert misc.run[0].arguments == ("%o%",)

    def test_json_profile(self, temp_dir: Path):
        path = temp_dir / "profile.json"
        path.write_text(
            '{"input_dir": "/in", "output_dir": "/out",'
            ' "output_names_file_path": "/n.txt"}'
        )
        profile = load_profile(path)
        assert profile.input_dir == Path("/in")
        assert profile.processing_params.audio_tracks.predicate == NonePredicate()

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            load_profile(temp_dir / "nope.yaml")

    def test_empty_file(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("")
        with pytest.raises(ProfileValidationError, match="empty"):
            load_profile(path)

    def test_not_a_mapping(self, temp_dir: Path):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ProfileValidationError, match="mapping"):
            load_profile(path)

    def test_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("input_dir: [unclosed\n")
        with pytest.raises(ProfileValidationError, match="Invalid YAML"):
            load_profile(path)


class TestLoadProfileFromDict:
    """Tests for validation errors raised by load_profile_from_dict."""

    def test_defaults(self):
        profile = load_profile_from_dict(_minimal())
        assert profile.start_from == 1
        assert profile.index_pad_type == PadType.NONE
        misc = profile.processing_params.misc
        assert misc.remove_original_file == DeletionMode.NONE
        assert misc.on_error == OnErrorMode.FAIL
        assert misc.set_file_title

    def test_missing_required_field(self):
        with pytest.raises(ProfileValidationError, match="output_dir"):
            load_profile_from_dict({"input_dir": "/in"})

    def test_unknown_field(self):
        with pytest.raises(ProfileValidationError, match="Profile validation failed"):
            load_profile_from_dict(_minimal(surprise=True))

    def test_negative_quota(self):
        data = _minimal(processing_params={"audio_tracks": {"total_to_retain": -1}})
        with pytest.raises(ProfileValidationError):
            load_profile_from_dict(data)

    def test_two_predicate_kinds(self):
        data = _minimal(
            processing_params={
                "audio_tracks": {"predicate": {"index": [0], "language": ["jpn"]}}
            }
        )
        with pytest.raises(ProfileValidationError, match="only one"):
            load_profile_from_dict(data)

    def test_title_rule_needs_exactly_one_kind(self):
        data = _minimal(
            processing_params={
                "subtitle_tracks": {
                    "predicate": {
                        "title": {"rules": [{"contains": "a", "equals": "b"}]}
                    }
                }
            }
        )
        with pytest.raises(ProfileValidationError, match="exactly one"):
            load_profile_from_dict(data)

    def test_malformed_title_regex(self):
        data = _minimal(
            processing_params={
                "subtitle_tracks": {
                    "predicate": {"title": {"rules": [{"regex": "(bad"}]}}
                }
            }
        )
        with pytest.raises(ProfileValidationError) as exc_info:
            load_profile_from_dict(data)
        assert exc_info.value.field == "processing_params.subtitle_tracks.predicate"

    def test_malformed_substitution_regex(self):
        data = _minimal(substitutions={"regular_expressions": [["[", "x"]]})
        with pytest.raises(ProfileValidationError) as exc_info:
            load_profile_from_dict(data)
        assert exc_info.value.field == "substitutions.regular_expressions"

    def test_invalid_conversion_params(self):
        data = _minimal(
            processing_params={
                "audio_tracks": {"conversion": {"codec": "flac", "bitrate": 320}}
            }
        )
        with pytest.raises(ProfileValidationError, match="lossless"):
            load_profile_from_dict(data)

    def test_unknown_codec_name(self):
        data = _minimal(
            processing_params={"audio_tracks": {"conversion": {"codec": "dts"}}}
        )
        with pytest.raises(ProfileValidationError):
            load_profile_from_dict(data)

    def test_subtitle_conversion_rejected(self):
        data = _minimal(
            processing_params={"subtitle_tracks": {"conversion": {"codec": "aac"}}}
        )
        with pytest.raises(ProfileValidationError, match="not supported"):
            load_profile_from_dict(data)

    def test_duplicate_track_params(self):
        data = _minimal(
            processing_params={"track_params": [{"id": 1}, {"id": 1, "forced": True}]}
        )
        with pytest.raises(ProfileValidationError, match="Duplicate"):
            load_profile_from_dict(data)

    def test_integer_vbr_is_normalized(self):
        data = _minimal(
            processing_params={
                "audio_tracks": {"conversion": {"codec": "aac_libfdk", "vbr": 4}}
            }
        )
        profile = load_profile_from_dict(data)
        assert profile.processing_params.audio_tracks.conversion.vbr == "4"

    def test_relative_paths_use_base_dir(self, temp_dir: Path):
        data = {
            "input_dir": "in",
            "output_dir": "out",
            "output_names_file_path": "names.txt",
        }
        profile = load_profile_from_dict(data, base_dir=temp_dir)
        assert profile.input_dir == temp_dir / "in"
        assert profile.output_dir == temp_dir / "out"

    def test_relative_hook_path_uses_base_dir(self, temp_dir: Path):
        data = {
            "input_dir": "/in",
            "output_dir": "/out",
            "output_names_file_path": "/names.txt",
            "processing_params": {
                "misc": {
                    "run": [
                        {"stage": "pre_mux", "command": ["hooks/fix.sh", "%t%"]},
                        {"stage": "post_mux", "command": ["/usr/bin/true"]},
                    ]
                }
            },
        }
        run = load_profile_from_dict(data, base_dir=temp_dir).processing_params.misc.run

        assert run[0].path == temp_dir / "hooks" / "fix.sh"
        assert run[0].arguments == ("%t%",)
        assert run[1].path == Path("/usr/bin/true")
