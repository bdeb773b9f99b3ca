"""Tests for the process, validate and match commands."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from mkvbatch.cli import main
from mkvbatch.config import MkvBatchConfig, PathsConfig
from mkvbatch.executor.interface import ToolNotFoundError
from mkvbatch.policy.types import OnErrorMode
from mkvbatch.workflow.matcher import MatchError
from mkvbatch.workflow.media_file import FileResult
from mkvbatch.workflow.processor import BatchSummary


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from replacing the test logging handlers."""
    with patch("mkvbatch.cli.configure_logging"):
        yield


@pytest.fixture
def config(temp_dir: Path) -> MkvBatchConfig:
    return MkvBatchConfig(paths=PathsConfig(temp_directory=temp_dir / "work"))


@pytest.fixture
def profile_path(temp_dir: Path) -> Path:
    (temp_dir / "in").mkdir()
    (temp_dir / "out").mkdir()
    for name in ("b 2.mkv", "b 10.mkv"):
        (temp_dir / "in" / name).write_bytes(b"")
    (temp_dir / "names.txt").write_text("first\nsecond\n")
    path = temp_dir / "profile.yaml"
    path.write_text(
        "input_dir: in\n"
        "output_dir: out\n"
        "output_names_file_path: names.txt\n"
        "index_pad_type: ten\n"
        "processing_params:\n"
        "  audio_tracks:\n"
        "    total_to_retain: 1\n"
    )
    return path


def _invoke(config: MkvBatchConfig, *args: str):
    return CliRunner().invoke(main, list(args), obj={"config": config})


def _summary(*outcomes: bool, total: int | None = None, halted=False):
    results = [
        FileResult(
            input_path=Path(f"/in/{i}.mkv"),
            output_path=Path(f"/out/{i}.mkv"),
            success=ok,
            stage=None if ok else "filter",
            message="" if ok else "Track quota not met",
        )
        for i, ok in enumerate(outcomes)
    ]
    return BatchSummary(
        results=results,
        total=len(outcomes) if total is None else total,
        halted=halted,
    )


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_profile(self, config, profile_path: Path):
        result = _invoke(config, "validate", str(profile_path))

        assert result.exit_code == 0
        assert "Profile is valid" in result.output
        assert "Audio tracks to retain: 1" in result.output
        assert "Video tracks to retain: all" in result.output

    def test_reports_tool_availability(self, config, profile_path: Path):
        with patch(
            "mkvbatch.cli.profile.check_tool_availability",
            return_value={"mkvmerge": True, "ffmpeg": False},
        ):
            result = _invoke(config, "validate", str(profile_path))

        assert result.exit_code == 0
        assert "  mkvmerge: found" in result.output
        assert "  ffmpeg: not found" in result.output

    def test_invalid_profile(self, config, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("input_dir: /in\n")

        result = _invoke(config, "validate", str(path))

        assert result.exit_code == 2
        assert "Error: Profile validation failed" in result.output

    def test_missing_profile(self, config, temp_dir: Path):
        result = _invoke(config, "validate", str(temp_dir / "none.yaml"))
        assert result.exit_code == 2
        assert "not found" in result.output


class TestMatchCommand:
    """Tests for the match command."""

    def test_lists_pairs(self, config, profile_path: Path):
        result = _invoke(config, "match", str(profile_path))

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "b 2.mkv -> 01 - First.mkv"
        assert lines[2] == "b 10.mkv -> 02 - Second.mkv"
        assert "2 file(s) matched" in result.output

    def test_mismatch(self, config, profile_path: Path, temp_dir: Path):
        (temp_dir / "names.txt").write_text("only one\n")

        result = _invoke(config, "match", str(profile_path))

        assert result.exit_code == 2
        assert "2 input files but 1 output names" in result.output


class TestProcessCommand:
    """Tests for the process command."""

    def _run(self, config, profile_path, summary, *extra, **processor_attrs):
        processor = MagicMock()
        processor.match.return_value = ["m1", "m2"]
        processor.run.return_value = summary
        for name, value in processor_attrs.items():
            setattr(processor, name, value)
        with patch(
            "mkvbatch.cli.process.BatchProcessor", return_value=processor
        ) as mock_cls:
            result = _invoke(config, "process", str(profile_path), *extra)
        return result, mock_cls, processor

    def test_success(self, config, profile_path: Path):
        result, mock_cls, processor = self._run(
            config, profile_path, _summary(True, True)
        )

        assert result.exit_code == 0
        assert "2 succeeded, 0 failed, 0 skipped" in result.output
        processor.check_tools.assert_called_once_with()
        processor.run.assert_called_once_with(["m1", "m2"])
        args, kwargs = mock_cls.call_args
        assert args[1] == config.paths.temp_directory
        assert kwargs["on_error"] is None

    def test_file_failures(self, config, profile_path: Path):
        result, _, _ = self._run(
            config, profile_path, _summary(True, False, total=3, halted=True)
        )

        assert result.exit_code == 1
        assert "1 succeeded, 1 failed, 1 skipped" in result.output
        assert "--continue-on-error" in result.output

    def test_continue_on_error_flag(self, config, profile_path: Path):
        _, mock_cls, _ = self._run(
            config, profile_path, _summary(True), "--continue-on-error"
        )
        assert mock_cls.call_args.kwargs["on_error"] == OnErrorMode.CONTINUE

    def test_missing_tool(self, config, profile_path: Path):
        result, _, processor = self._run(
            config,
            profile_path,
            _summary(),
            check_tools=MagicMock(side_effect=ToolNotFoundError("mkvmerge")),
        )

        assert result.exit_code == 2
        assert "mkvmerge" in result.output
        processor.run.assert_not_called()

    def test_match_error(self, config, profile_path: Path):
        result, _, processor = self._run(
            config,
            profile_path,
            _summary(),
            match=MagicMock(side_effect=MatchError("counts differ")),
        )

        assert result.exit_code == 2
        assert "counts differ" in result.output
        processor.run.assert_not_called()

    def test_progress_line(self, capsys):
        from mkvbatch.cli.process import _echo_progress

        _echo_progress(
            2,
            5,
            FileResult(
                Path("/in/a.mkv"),
                Path("/out/a.mkv"),
                False,
                stage="remux",
                message="Remux failed",
            ),
        )
        output = capsys.readouterr().out
        assert "[2/5]" in output
        assert "FAILED" in output
        assert "remux: Remux failed" in output


class TestMainGroup:
    """Tests for global options."""

    def test_invalid_config_file(self, temp_dir: Path, profile_path: Path):
        bad = temp_dir / "config.toml"
        bad.write_text("[logging\n")

        result = CliRunner().invoke(
            main, ["--config", str(bad), "validate", str(profile_path)]
        )

        assert result.exit_code == 2
        assert "Invalid TOML" in result.output

    def test_log_options_reach_config(self, temp_dir: Path, profile_path: Path):
        obj: dict = {}
        result = CliRunner().invoke(
            main,
            [
                "--config",
                str(temp_dir / "none.toml"),
                "--log-level",
                "DEBUG",
                "--log-json",
                "validate",
                str(profile_path),
            ],
            obj=obj,
        )

        assert result.exit_code == 0
        assert obj["config"].logging.level == "debug"
        assert obj["config"].logging.format == "json"
