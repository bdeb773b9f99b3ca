"""Unit tests for hook command execution."""

from pathlib import Path
from unittest.mock import patch

import pytest

from mkvbatch.domain import HookStage
from mkvbatch.executor.hooks import HookRunner, substitute_tokens
from mkvbatch.executor.interface import ToolOutcome
from mkvbatch.policy.types import HookCommand

IN = Path("/in/a.mkv")
OUT = Path("/out/01 - A.mkv")
TEMP = Path("/tmp/mkvbatch/1")


@pytest.fixture
def hook_script(temp_dir: Path) -> Path:
    script = temp_dir / "hook.sh"
    script.write_text("#!/bin/sh\n")
    return script


class TestSubstituteTokens:
    """Tests for substitute_tokens function."""

    def test_path_tokens(self):
        args = substitute_tokens(
            ["--in=%i%", "%o%", "%t%/x"], IN, OUT, TEMP, logging_active=False
        )
        assert args == ["--in=/in/a.mkv", "/out/01 - A.mkv", "/tmp/mkvbatch/1/x"]

    def test_log_token_removed_when_logging(self):
        args = substitute_tokens(["-v%log%", "%i%"], IN, OUT, TEMP, True)
        assert args == ["-v", "/in/a.mkv"]

    def test_log_argument_dropped_without_logging(self):
        args = substitute_tokens(["-v%log%", "%i%"], IN, OUT, TEMP, False)
        assert args == ["/in/a.mkv"]


class TestHookRunner:
    """Tests for HookRunner."""

    def test_commands_for_stage(self, hook_script: Path):
        pre = HookCommand(HookStage.PRE_CONVERT, (str(hook_script), "pre"))
        post = HookCommand(HookStage.POST_CONVERT, (str(hook_script), "post"))
        runner = HookRunner([pre, post])

        assert runner.commands_for(HookStage.POST_CONVERT) == [post]
        assert runner.commands_for(HookStage.PRE_MUX) == []

    def test_runs_with_substituted_arguments(self, hook_script: Path):
        command = HookCommand(HookStage.POST_MUX, (str(hook_script), "%o%", "%log%"))
        runner = HookRunner([command], logging_active=lambda: False)

        with patch(
            "mkvbatch.executor.hooks.run_command", return_value=("done\n", "", 0)
        ) as mock_run:
            results = runner.run_stage(HookStage.POST_MUX, IN, OUT, TEMP)

        mock_run.assert_called_once_with([hook_script, str(OUT)])
        assert len(results) == 1
        assert results[0].success

    def test_non_zero_exit_is_soft_failure(self, hook_script: Path, caplog):
        command = HookCommand(HookStage.PRE_MUX, (str(hook_script),))
        runner = HookRunner([command])

        with patch(
            "mkvbatch.executor.hooks.run_command", return_value=("", "oops", 3)
        ):
            results = runner.run_stage(HookStage.PRE_MUX, IN, OUT, TEMP)

        assert results[0].outcome == ToolOutcome.SOFT_FAILURE
        assert results[0].returncode == 3
        assert "exited with status 3" in caplog.text

    def test_missing_executable_stops_stage(self, hook_script: Path, temp_dir):
        missing = HookCommand(HookStage.PRE_MUX, (str(temp_dir / "missing.sh"),))
        later = HookCommand(HookStage.PRE_MUX, (str(hook_script),))
        runner = HookRunner([missing, later])

        with patch("mkvbatch.executor.hooks.run_command") as mock_run:
            results = runner.run_stage(HookStage.PRE_MUX, IN, OUT, TEMP)

        mock_run.assert_not_called()
        assert len(results) == 1
        assert not results[0].success

    def test_launch_error(self, hook_script: Path):
        command = HookCommand(HookStage.PRE_MUX, (str(hook_script),))
        runner = HookRunner([command])

        with patch(
            "mkvbatch.executor.hooks.run_command",
            side_effect=PermissionError("not executable"),
        ):
            results = runner.run_stage(HookStage.PRE_MUX, IN, OUT, TEMP)

        assert results[0].outcome == ToolOutcome.HARD_FAILURE
