"""Centralized exit codes for all CLI commands.

Exit codes:
    0: Every matched file was processed
    1: At least one file failed, or the batch halted early
    2: Configuration, profile or matching error; nothing was processed
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mkvbatch CLI commands."""

    SUCCESS = 0
    FILE_FAILURES = 1
    CONFIG_ERROR = 2
