"""File and path utilities.

This module provides extension matching for attachment filtering and the
best-effort deletion helper used for temp directories and original files.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from mkvbatch.domain.enums import DeletionMode

logger = logging.getLogger(__name__)


def get_extension(name: str | Path) -> str | None:
    """Get the lower-cased extension of a file name without the leading dot.

    Args:
        name: File name or path.

    Returns:
        Extension (e.g. "ttf"), or None if the name has no extension.
    """
    suffix = Path(name).suffix
    if not suffix or suffix == ".":
        return None
    return suffix[1:].casefold()


def extension_allowed(name: str | Path, allowed: Iterable[str] | None) -> bool:
    """Check a file name against an extension allow-list.

    An empty or missing allow-list accepts every name, including names
    without an extension. A non-empty list rejects extension-less names.

    Args:
        name: File name or path to check.
        allowed: Accepted extensions (with or without leading dot).

    Returns:
        True if the name is accepted.
    """
    accepted = {ext.casefold().lstrip(".") for ext in (allowed or ())}
    if not accepted:
        return True
    ext = get_extension(name)
    return ext is not None and ext in accepted


def delete_path(path: Path, mode: DeletionMode | None) -> bool:
    """Delete or trash a file or directory according to the deletion mode.

    Failures are logged and reported through the return value; they are
    never raised.

    Args:
        path: File or directory to remove.
        mode: DELETE removes permanently, TRASH moves to the recycle bin,
            NONE (or None) leaves the path in place.

    Returns:
        True if the path was removed, did not exist, or the mode is NONE.
    """
    if mode is None or mode == DeletionMode.NONE:
        return True

    if not path.exists():
        return True

    try:
        if mode == DeletionMode.TRASH:
            send2trash(path)
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
    except (OSError, TrashPermissionError) as e:
        logger.error(
            "Failed to %s path %s: %s",
            mode.value,
            path,
            e,
            extra={"path": str(path), "mode": mode.value},
        )
        return False

    logger.info("Removed path %s (%s)", path, mode.value)
    return True
