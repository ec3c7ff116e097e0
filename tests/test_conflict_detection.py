"""
Tests for heuristic conflict detection.
Path: tests/test_conflict_detection.py
"""

from datetime import timedelta

import pytest

from intention.models import ConflictType, Severity
from intention.skills.conflict_detection import (
    detect_conflicts,
    extract_keywords,
    has_opposite_action,
)
from intention.skills.patterns import OPPOSITE_ACTION_PATTERNS

def test_empty_history_has_no_conflict(now):
    result = detect_conflicts("Add caching layer", [], now=now)

    assert result.has_conflicts is False
    assert result.conflict_type == ConflictType.NONE
    assert result.severity == Severity.NONE
    assert result.conflicting_intents == []

def test_old_intents_are_outside_window(now, intent_factory):
    old = intent_factory("Add authentication to the API endpoint", age=timedelta(days=10))

    result = detect_conflicts("Remove authentication from the API", [old], window_days=7, now=now)

    assert result.has_conflicts is False
    assert result.conflict_type == ConflictType.NONE
    assert old not in result.conflicting_intents

def test_opposite_action_within_a_day_is_high(now, intent_factory):
    added = intent_factory("Add authentication to the API endpoint", age=timedelta(hours=5))

    result = detect_conflicts("Remove authentication from the API", [added], now=now)

    assert result.has_conflicts is True
    assert result.conflict_type == ConflictType.SEMANTIC
    assert result.severity == Severity.HIGH
    assert result.conflicting_intents == [added]

def test_keyword_overlap_without_opposite_action(now, intent_factory):
    existing = intent_factory("Implement user authentication with JWT tokens",
                              age=timedelta(days=3))

    result = detect_conflicts("Refactor user authentication to use OAuth", [existing], now=now)

    assert result.has_conflicts is True
    assert result.conflict_type == ConflictType.SEMANTIC
    assert result.conflicting_intents == [existing]

def test_unrelated_recent_intent_is_recent_low(now, intent_factory):
    existing = intent_factory("Update color palette", age=timedelta(days=2))

    result = detect_conflicts("Improve logging output", [existing], now=now)

    assert result.has_conflicts is True
    assert result.conflict_type == ConflictType.RECENT
    assert result.severity == Severity.LOW
    assert result.conflicting_intents == [existing]

def test_more_than_two_conflicts_is_high(now, intent_factory):
    intents = [
        intent_factory(f"Enable feature flag {n}", age=timedelta(days=3)) for n in range(3)
    ]

    result = detect_conflicts("Disable the flag", intents, now=now)

    assert result.severity == Severity.HIGH
    assert len(result.conflicting_intents) == 3

def test_multiple_users_is_medium(now, intent_factory):
    intents = [
        intent_factory("Increase cache size", age=timedelta(days=2), user="alice"),
        intent_factory("Expand the cache", age=timedelta(days=3), user="bob"),
    ]

    result = detect_conflicts("Reduce memory usage", intents, now=now)

    assert result.conflict_type == ConflictType.SEMANTIC
    assert result.severity == Severity.MEDIUM

def test_single_user_older_conflict_is_low(now, intent_factory):
    existing = intent_factory("Make the config loader synchronous", age=timedelta(days=2))

    result = detect_conflicts("Switch to async loading", [existing], now=now)

    assert result.conflict_type == ConflictType.SEMANTIC
    assert result.severity == Severity.LOW

def test_intent_counted_once_when_both_checks_match(now, intent_factory):
    existing = intent_factory("Add session timeout handling", age=timedelta(days=2))

    result = detect_conflicts("Remove session timeout handling", [existing], now=now)

    assert result.conflicting_intents == [existing]

def test_detection_is_deterministic(now, intent_factory):
    intents = [intent_factory("Add retries to the HTTP client", age=timedelta(days=1, hours=2))]

    first = detect_conflicts("Remove retries from HTTP client", intents, now=now)
    second = detect_conflicts("Remove retries from HTTP client", intents, now=now)

    assert first == second

def test_recommendation_follows_severity(now, intent_factory):
    added = intent_factory("Add authentication", age=timedelta(hours=1))
    result = detect_conflicts("Remove authentication", [added], now=now)
    assert "Strongly recommend reviewing with team" in result.recommendation

    assert "Safe to proceed" in detect_conflicts("Anything", [], now=now).recommendation

def test_extract_keywords_drops_short_and_stop_words():
    assert extract_keywords("Add the user-profile page, with caching!") == {
        "userprofile", "page", "caching"}

def test_extract_keywords_keeps_ascii_letters_and_digits_only():
    assert extract_keywords("Café caching ²²²² naïve http2") == {"caching", "nave", "http2"}

def test_whole_word_matching():
    assert not has_opposite_action("Update the address field", "Remove the field")
    assert not has_opposite_action("Use immutable state", "Keep immutable config")
    assert has_opposite_action("Make fields immutable", "Make fields mutable")

def test_six_opposite_pairs():
    names = [pair.name for pair in OPPOSITE_ACTION_PATTERNS]
    assert names == [
        "add/remove",
        "enable/disable",
        "increase/decrease",
        "public/private",
        "synchronous/asynchronous",
        "mutable/immutable",
    ]

if __name__ == "__main__":
    pytest.main(["-v", __file__])
