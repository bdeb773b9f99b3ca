"""External tool adapters.

Each adapter wraps one external program and reports an ExecutorResult with
the outcome classification used by the media file pipeline.
"""

from mkvbatch.executor.ffmpeg import FfmpegEncoder
from mkvbatch.executor.hooks import HookRunner, substitute_tokens
from mkvbatch.executor.interface import (
    ExecutorResult,
    ToolNotFoundError,
    ToolOutcome,
    check_tool_availability,
    classify_ffmpeg_exit,
    classify_mkvtoolnix_exit,
    get_tool_path,
    require_tool,
)
from mkvbatch.executor.mkvtoolnix import MkvextractExecutor, MkvmergeExecutor
from mkvbatch.executor.shutdown import request_shutdown

__all__ = [
    "ExecutorResult",
    "FfmpegEncoder",
    "HookRunner",
    "MkvextractExecutor",
    "MkvmergeExecutor",
    "ToolNotFoundError",
    "ToolOutcome",
    "check_tool_availability",
    "classify_ffmpeg_exit",
    "classify_mkvtoolnix_exit",
    "get_tool_path",
    "request_shutdown",
    "require_tool",
    "substitute_tokens",
]
