"""Core utilities package.

Small helpers shared across the codebase: subprocess invocation, natural
sorting, extension matching and file removal.
"""

from mkvbatch.core.file_utils import delete_path, extension_allowed, get_extension
from mkvbatch.core.string_utils import compare_strings_ci, natural_sort_key
from mkvbatch.core.subprocess_utils import run_command

__all__ = [
    "compare_strings_ci",
    "delete_path",
    "extension_allowed",
    "get_extension",
    "natural_sort_key",
    "run_command",
]
