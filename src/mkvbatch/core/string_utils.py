"""String manipulation utilities.

This module provides Unicode-safe string operations used across the codebase.
All case-insensitive operations use casefold() for proper Unicode handling.
"""

from __future__ import annotations

import re

_DIGIT_RUN = re.compile(r"(\d+)")


def compare_strings_ci(a: str, b: str) -> bool:
    """Compare strings case-insensitively.

    Uses casefold() for proper Unicode-safe comparison.

    Args:
        a: First string.
        b: Second string.

    Returns:
        True if strings are equal (case-insensitive).

    Example:
        >>> compare_strings_ci("JPN", "jpn")
        True
    """
    return a.casefold() == b.casefold()


def natural_sort_key(value: str) -> list[tuple[int, int | str]]:
    """Build a sort key that orders embedded numbers by value.

    The string is split into digit and non-digit runs. Digit runs compare
    numerically, text runs compare case-insensitively, and the tuple tag
    keeps numbers and text from ever being compared with each other.

    Args:
        value: String to build a key for.

    Returns:
        Sort key suitable for sorted(..., key=natural_sort_key).

    Example:
        >>> sorted(["f2.mkv", "f10.mkv", "f1.mkv"], key=natural_sort_key)
        ['f1.mkv', 'f2.mkv', 'f10.mkv']
    """
    key: list[tuple[int, int | str]] = []
    for part in _DIGIT_RUN.split(value):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part.casefold()))
    return key
