"""Log formatters for mkvbatch.

Provides JSONFormatter, which writes one JSON object per record so that a
batch log can be filtered per media file with line-oriented tools.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus "message" which format() adds
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.makeLogRecord({}).__dict__.keys() | {"message", "taskName"}
)

# Attributes set by FileContextFilter, reported under "file" instead
_FILE_ATTRS: frozenset[str] = frozenset({"file_id", "file_path", "file_tag"})


class JSONFormatter(logging.Formatter):
    """Format log records as JSON objects.

    Each entry carries ``timestamp`` (ISO-8601 UTC), ``level``, ``message``
    and ``logger``. Optional keys:

    - ``file``: ``{"id": ..., "path": ...}`` while a media file is processed
    - ``context``: values passed through ``extra={...}``
    - ``exception``: formatted traceback
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.name and record.name != "root":
            entry["logger"] = record.name

        file_info = _file_info(record)
        if file_info:
            entry["file"] = file_info

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _FILE_ATTRS
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _file_info(record: logging.LogRecord) -> dict[str, str]:
    info = {}
    file_id = getattr(record, "file_id", None)
    if file_id:
        info["id"] = file_id
        file_path = getattr(record, "file_path", None)
        if file_path:
            info["path"] = file_path
    return info
