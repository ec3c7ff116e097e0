# tests/test_formatting.py

from datetime import timedelta

import pytest

from intention.models import SearchResult
from intention.skills.formatting import (
    format_conflict_display,
    format_intent_for_display,
    format_search_result_for_display,
    relative_time,
)

@pytest.mark.parametrize("age, expected", [
    (timedelta(seconds=30), "just now"),
    (timedelta(minutes=1), "1 minute ago"),
    (timedelta(minutes=45), "45 minutes ago"),
    (timedelta(hours=1), "1 hour ago"),
    (timedelta(days=1), "1 day ago"),
    (timedelta(days=10), "1 week ago"),
    (timedelta(days=27), "3 weeks ago"),
    (timedelta(days=65), "2 months ago"),
])
def test_relative_time(now, age, expected):
    timestamp = (now - age).isoformat()
    assert relative_time(timestamp, now) == expected

def test_format_intent_for_display(now, intent_factory):
    intent = intent_factory("Add caching", age=timedelta(hours=3), model="claude")

    formatted = format_intent_for_display(intent, now)

    assert formatted["relative_time"] == "3 hours ago"
    assert formatted["prompt"] == "Add caching"
    assert formatted["model"] == "claude"

def test_format_search_result_keeps_file_path(now, intent_factory):
    intent = intent_factory("Add caching")
    result = SearchResult(**intent.model_dump(), file_path="src/cache.py")

    assert format_search_result_for_display(result, now)["file_path"] == "src/cache.py"

def test_format_conflict_display(now, intent_factory):
    intents = [intent_factory("Add caching", age=timedelta(days=2), user="bob")]

    text = format_conflict_display(intents, now)

    assert "1. 2 days ago by bob" in text
    assert "   Add caching" in text
