"""Substitution engine for name-list lines.

Turns a raw line from the output names file into a sanitized title:
title-casing, ordered regex and literal replacements, removal of characters
that are invalid in NTFS file names, and case repair after spaced dashes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from re import Pattern

from titlecase import titlecase

BAD_NTFS_CHARS = frozenset('/?<>\\:*|"')

EN_DASH = "–"

# A spaced hyphen or en dash followed by a lowercase letter
_LOWER_AFTER_DASH = re.compile(r"(\s[–-]\s)([^\W\d_])")


@dataclass(frozen=True)
class Substitutions:
    """Sanitization rules applied to every name-list line."""

    convert_to_proper_title_case: bool = True
    regular_expressions: tuple[tuple[str, str], ...] = ()
    strings: tuple[tuple[str, str], ...] = ()
    strip_invalid_ntfs_chars: bool = True
    fix_case_after_dashes: bool = True
    _compiled: list[tuple[Pattern[str], str]] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def initialize_regex(self) -> None:
        """Compile the regex replacement patterns.

        Raises:
            re.error: If a pattern is malformed.
        """
        if self._compiled or not self.regular_expressions:
            return
        self._compiled.extend(
            (re.compile(pattern), replacement)
            for pattern, replacement in self.regular_expressions
        )

    def apply(self, line: str) -> str:
        """Apply all substitutions to a line.

        Args:
            line: Raw line from the names file.

        Returns:
            Sanitized line, or an empty string if nothing remains.
        """
        self.initialize_regex()

        line = line.strip()
        if not line:
            return ""

        if self.convert_to_proper_title_case:
            line = titlecase(line)

        for pattern, replacement in self._compiled:
            line = pattern.sub(replacement, line, count=1)

        for old, new in self.strings:
            line = line.replace(old, new)

        if self.strip_invalid_ntfs_chars:
            line = "".join(c for c in line if c not in BAD_NTFS_CHARS)

        if self.fix_case_after_dashes and EN_DASH in line:
            line = _LOWER_AFTER_DASH.sub(
                lambda m: m.group(1) + m.group(2).upper(), line
            )

        return line
