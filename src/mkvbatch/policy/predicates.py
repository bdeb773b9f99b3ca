"""Track predicate engine.

A predicate decides whether a track of a category is a candidate for
retention. Four kinds exist:

- IndexPredicate: matches the track's position among non-general tracks
- LanguagePredicate: matches the track language (case-insensitive)
- TitlePredicate: combines contains/equals/regex rules over the title
- NonePredicate: matches everything

Title rules are evaluated in two passes, literal rules first and regex
rules second. Regex rules are compiled once by ``initialize_regex``; the
profile loader calls it for every predicate so a malformed pattern is a
startup error rather than a per-track failure.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from re import Pattern
from typing import Union

from mkvbatch.core.string_utils import compare_strings_ci
from mkvbatch.domain.models import Track


class TitleCombinator(Enum):
    """How title sub-rule results are combined."""

    AND = "and"
    OR = "or"
    NOT = "not"


class TitleRuleKind(Enum):
    """Kind of title sub-rule."""

    CONTAINS = "contains"
    EQUALS = "equals"
    REGEX = "regex"


@dataclass(frozen=True)
class TitleRule:
    """A single title test."""

    kind: TitleRuleKind
    value: str

    @property
    def is_literal(self) -> bool:
        return self.kind != TitleRuleKind.REGEX


@dataclass(frozen=True)
class IndexPredicate:
    """Match tracks by their 0-based position among non-general tracks.

    An empty index set matches every track.
    """

    indices: frozenset[int] = frozenset()

    def is_match(self, candidate: int) -> bool:
        if not self.indices:
            return True
        return candidate in self.indices

    def matches_track(self, track: Track) -> bool:
        return self.is_match(track.real_index)


@dataclass(frozen=True)
class LanguagePredicate:
    """Match tracks by language code.

    An empty language list matches every track.
    """

    languages: tuple[str, ...] = ()

    def is_match(self, candidate: str) -> bool:
        if not self.languages:
            return True
        return any(compare_strings_ci(lang, candidate) for lang in self.languages)

    def matches_track(self, track: Track) -> bool:
        return self.is_match(track.language)


@dataclass(frozen=True)
class TitlePredicate:
    """Match tracks by title using a combinator over sub-rules.

    Combinator semantics:
        AND: every rule must match (an empty rule list matches).
        NOT: no rule may match (an empty rule list matches).
        OR: at least one rule must match (an empty rule list never matches).

    Title comparisons are case-sensitive; a missing title is treated as an
    empty string.
    """

    combinator: TitleCombinator
    rules: tuple[TitleRule, ...] = ()
    _compiled: dict[str, Pattern[str]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def initialize_regex(self) -> None:
        """Compile all regex sub-rules.

        Raises:
            re.error: If a pattern is malformed.
        """
        for rule in self.rules:
            if rule.kind == TitleRuleKind.REGEX and rule.value not in self._compiled:
                self._compiled[rule.value] = re.compile(rule.value)

    def _evaluate(self, rule: TitleRule, title: str) -> bool:
        if rule.kind == TitleRuleKind.CONTAINS:
            return rule.value in title
        if rule.kind == TitleRuleKind.EQUALS:
            return title == rule.value
        return self._compiled[rule.value].search(title) is not None

    def _results(self, title: str) -> Iterator[bool]:
        # Literal pass first, then regex pass
        for rule in self.rules:
            if rule.is_literal:
                yield self._evaluate(rule, title)
        for rule in self.rules:
            if not rule.is_literal:
                yield self._evaluate(rule, title)

    def is_match(self, candidate: str | None) -> bool:
        self.initialize_regex()

        title = candidate or ""
        if self.combinator == TitleCombinator.AND:
            return all(self._results(title))
        if self.combinator == TitleCombinator.NOT:
            return not any(self._results(title))
        return any(self._results(title))

    def matches_track(self, track: Track) -> bool:
        return self.is_match(track.title)


@dataclass(frozen=True)
class NonePredicate:
    """Match every track."""

    def is_match(self, candidate: object = None) -> bool:
        return True

    def matches_track(self, track: Track) -> bool:
        return True


TrackPredicate = Union[IndexPredicate, LanguagePredicate, TitlePredicate, NonePredicate]


def is_match(predicate: TrackPredicate | None, track: Track) -> bool:
    """Check whether a track satisfies a predicate.

    The candidate value depends on the predicate kind: the track's
    non-general position for IndexPredicate, its language for
    LanguagePredicate and its title for TitlePredicate.

    Args:
        predicate: Predicate to evaluate. None behaves like NonePredicate.
        track: Track to test.

    Returns:
        True if the track matches.
    """
    if predicate is None:
        return True
    return predicate.matches_track(track)


def initialize_regex(predicate: TrackPredicate | None) -> None:
    """Compile any regex rules held by a predicate.

    Raises:
        re.error: If a pattern is malformed.
    """
    if isinstance(predicate, TitlePredicate):
        predicate.initialize_regex()
