"""Unit tests for the subprocess wrapper."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mkvbatch.core.subprocess_utils import run_command


class TestRunCommand:
    """Tests for run_command function."""

    def test_returns_output_tuple(self):
        completed = MagicMock(stdout="out", stderr="err", returncode=0)
        with patch(
            "mkvbatch.core.subprocess_utils.subprocess.run", return_value=completed
        ) as mock_run:
            result = run_command([Path("/usr/bin/mkvmerge"), "--version"])

        assert result == ("out", "err", 0)
        args, kwargs = mock_run.call_args
        assert args[0] == ["/usr/bin/mkvmerge", "--version"]
        assert kwargs["capture_output"] is True
        assert kwargs["errors"] == "replace"
        assert kwargs["cwd"] is None
        assert "timeout" not in kwargs

    def test_none_output_becomes_empty_string(self):
        completed = MagicMock(stdout=None, stderr=None, returncode=2)
        with patch(
            "mkvbatch.core.subprocess_utils.subprocess.run", return_value=completed
        ):
            assert run_command(["tool"]) == ("", "", 2)

    def test_cwd_forwarded(self, temp_dir: Path):
        completed = MagicMock(stdout="", stderr="", returncode=0)
        with patch(
            "mkvbatch.core.subprocess_utils.subprocess.run", return_value=completed
        ) as mock_run:
            run_command(["tool"], cwd=temp_dir)

        assert mock_run.call_args.kwargs["cwd"] == temp_dir

    def test_launch_error_propagates(self):
        with patch(
            "mkvbatch.core.subprocess_utils.subprocess.run",
            side_effect=FileNotFoundError("no such file"),
        ):
            with pytest.raises(OSError):
                run_command(["missing-tool"])
