"""Media file context for structured logging.

Provides context propagation using contextvars, enabling automatic
injection of the media file id and path into log records.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_file_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


def format_file_id(file_id: int) -> str:
    """Format a numeric media file id as a compact tag (e.g. F003)."""
    return f"F{file_id:03d}"


def set_file_context(file_id: str, file_path: Path | str | None = None) -> None:
    """Set the current media file context.

    Args:
        file_id: File identifier (e.g., "F001").
        file_path: Full path to the file being processed, or None.
    """
    _file_id.set(file_id)
    _file_path.set(str(file_path) if file_path is not None else None)


def clear_file_context() -> None:
    """Clear the current media file context."""
    _file_id.set(None)
    _file_path.set(None)


@contextmanager
def file_context(
    file_id: str, file_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Context manager for media file processing context.

    Sets the context on entry and restores the previous one on exit.

    Example:
        with file_context("F001", "/path/to/file.mkv"):
            logger.info("Processing file")  # Automatically includes context
    """
    old_file_id = _file_id.get()
    old_file_path = _file_path.get()
    try:
        set_file_context(file_id, file_path)
        yield
    finally:
        _file_id.set(old_file_id)
        _file_path.set(old_file_path)


def get_file_context() -> tuple[str | None, str | None]:
    """Get the current media file context as (file_id, file_path)."""
    return _file_id.get(), _file_path.get()


class FileContextFilter(logging.Filter):
    """Logging filter that injects media file context into log records.

    Adds file_id and file_path attributes to the LogRecord. For text
    format, also adds a compact file_tag like ``[F003] ``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject file context into the log record.

        Returns:
            Always True (does not filter, only enriches).
        """
        file_id, file_path = get_file_context()

        record.file_id = file_id
        record.file_path = file_path
        record.file_tag = f"[{file_id}] " if file_id else ""

        return True
