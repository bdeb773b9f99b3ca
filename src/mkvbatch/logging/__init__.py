"""Structured logging module for mkvbatch.

Provides configurable logging with JSON format support and file rotation.
Includes media file context support so that every record emitted while a
file is processed carries its id.
"""

from mkvbatch.logging.config import (
    configure_logging,
    get_log_file,
    is_file_logging_active,
)
from mkvbatch.logging.context import (
    FileContextFilter,
    clear_file_context,
    file_context,
    format_file_id,
    get_file_context,
    set_file_context,
)
from mkvbatch.logging.handlers import JSONFormatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "clear_file_context",
    "configure_logging",
    "file_context",
    "format_file_id",
    "get_file_context",
    "get_log_file",
    "is_file_logging_active",
    "set_file_context",
]
