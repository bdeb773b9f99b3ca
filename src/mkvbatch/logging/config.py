"""Logging setup for a batch run.

configure_logging() installs the root handlers from a LoggingConfig. The
module also remembers which log file is active, since hook commands use
the ``%log%`` token only when a log file is being written.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mkvbatch.logging.context import FileContextFilter
from mkvbatch.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from mkvbatch.config.models import LoggingConfig

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s - %(file_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_active_log_file: Path | None = None


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(path: Path, config: LoggingConfig) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger handlers according to ``config``.

    A file handler is installed when ``config.file`` is set. A stderr
    handler is installed when ``config.include_stderr`` is true, and always
    when the log file could not be opened, in which case a warning is
    logged through it.

    Args:
        config: Logging configuration.
    """
    global _active_log_file

    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = _build_formatter(config.format)
    context_filter = FileContextFilter()
    handlers: list[logging.Handler] = []

    _active_log_file = None
    open_error: OSError | None = None
    if config.file:
        file_path = Path(config.file).expanduser()
        try:
            handlers.append(_open_log_file(file_path, config))
            _active_log_file = file_path
        except OSError as e:
            open_error = e

    if config.include_stderr or _active_log_file is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    if open_error is not None:
        logger.warning(
            "Could not open log file %s, logging to stderr: %s",
            config.file,
            open_error,
        )


def get_log_file() -> Path | None:
    """Get the active log file, or None when no file logging is configured."""
    return _active_log_file


def is_file_logging_active() -> bool:
    return _active_log_file is not None
