"""Unit tests for the track predicate engine."""

import re

import pytest

from mkvbatch.domain import TrackType
from mkvbatch.policy.predicates import (
    IndexPredicate,
    LanguagePredicate,
    NonePredicate,
    TitleCombinator,
    TitlePredicate,
    TitleRule,
    TitleRuleKind,
    initialize_regex,
    is_match,
)


def contains(value: str) -> TitleRule:
    return TitleRule(TitleRuleKind.CONTAINS, value)


def equals(value: str) -> TitleRule:
    return TitleRule(TitleRuleKind.EQUALS, value)


def regex(value: str) -> TitleRule:
    return TitleRule(TitleRuleKind.REGEX, value)


class TestIndexPredicate:
    """Tests for IndexPredicate."""

    def test_matches_real_index(self, make_track):
        predicate = IndexPredicate(frozenset({1, 2}))
        # index 2 is the second non-general track
        assert is_match(predicate, make_track(2, TrackType.AUDIO))
        assert not is_match(predicate, make_track(1, TrackType.VIDEO))

    def test_empty_set_matches_everything(self, make_track):
        assert is_match(IndexPredicate(), make_track(7, TrackType.AUDIO))


class TestLanguagePredicate:
    """Tests for LanguagePredicate."""

    def test_case_insensitive(self, make_track):
        predicate = LanguagePredicate(("JPN",))
        assert is_match(predicate, make_track(2, TrackType.AUDIO, language="jpn"))

    def test_no_match(self, make_track):
        predicate = LanguagePredicate(("jpn", "ja"))
        assert not is_match(predicate, make_track(2, TrackType.AUDIO, language="eng"))

    def test_empty_list_matches_everything(self, make_track):
        assert is_match(LanguagePredicate(), make_track(2, TrackType.AUDIO))


class TestTitlePredicate:
    """Tests for TitlePredicate combinators and rule kinds."""

    def test_contains_is_case_sensitive(self):
        predicate = TitlePredicate(TitleCombinator.AND, (contains("Signs"),))
        assert predicate.is_match("Signs & Songs")
        assert not predicate.is_match("signs & songs")

    def test_equals(self):
        predicate = TitlePredicate(TitleCombinator.AND, (equals("Full"),))
        assert predicate.is_match("Full")
        assert not predicate.is_match("Full Subtitles")

    def test_regex_search(self):
        predicate = TitlePredicate(TitleCombinator.AND, (regex(r"^Full\b"),))
        assert predicate.is_match("Full Subtitles")
        assert not predicate.is_match("Not Full")

    def test_and_requires_every_rule(self):
        predicate = TitlePredicate(
            TitleCombinator.AND, (contains("Full"), regex("Sub.*s$"))
        )
        assert predicate.is_match("Full Subtitles")
        assert not predicate.is_match("Full Dialogue")

    def test_or_requires_one_rule(self):
        predicate = TitlePredicate(
            TitleCombinator.OR, (equals("Signs"), regex("^Songs"))
        )
        assert predicate.is_match("Songs only")
        assert predicate.is_match("Signs")
        assert not predicate.is_match("Dialogue")

    def test_not_rejects_any_match(self):
        predicate = TitlePredicate(
            TitleCombinator.NOT, (contains("Commentary"), regex("(?i)signs"))
        )
        assert predicate.is_match("English Dub")
        assert not predicate.is_match("Director Commentary")
        assert not predicate.is_match("SIGNS")

    def test_empty_rule_lists(self):
        """Test the identities of the combinators over no rules."""
        assert TitlePredicate(TitleCombinator.AND).is_match("anything")
        assert TitlePredicate(TitleCombinator.NOT).is_match("anything")
        assert not TitlePredicate(TitleCombinator.OR).is_match("anything")

    def test_missing_title_is_empty_string(self, make_track):
        predicate = TitlePredicate(TitleCombinator.AND, (equals(""),))
        assert is_match(predicate, make_track(3, TrackType.AUDIO, title=None))

    def test_initialize_regex_rejects_bad_pattern(self):
        predicate = TitlePredicate(TitleCombinator.AND, (regex("(unclosed"),))
        with pytest.raises(re.error):
            initialize_regex(predicate)

    def test_regex_compiled_once(self):
        predicate = TitlePredicate(TitleCombinator.AND, (regex("a+"),))
        predicate.initialize_regex()
        compiled = predicate._compiled["a+"]
        predicate.is_match("aaa")
        assert predicate._compiled["a+"] is compiled


class TestNonePredicate:
    """Tests for NonePredicate and missing predicates."""

    def test_matches_everything(self, make_track):
        track = make_track(5, TrackType.SUBTITLE)
        assert is_match(NonePredicate(), track)
        assert is_match(None, track)
