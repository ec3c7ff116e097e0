"""
Display helpers for intents and search results.
Path: intention/skills/formatting.py
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from intention.models import Intent, SearchResult, parse_timestamp, utc_now

def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"

def relative_time(timestamp: str, now: Optional[datetime] = None) -> str:
    """Human readable age of a timestamp, e.g. '2 hours ago'"""
    seconds = int(((now or utc_now()) - parse_timestamp(timestamp)).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7
    months = days // 30

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if weeks < 4:
        return _plural(weeks, "week")
    return _plural(months, "month")

def format_intent_for_display(intent: Intent, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "id": intent.id,
        "timestamp": intent.timestamp,
        "relative_time": relative_time(intent.timestamp, now),
        "user": intent.user,
        "prompt": intent.prompt,
        "model": intent.model,
        "overrides": list(intent.overrides),
    }

def format_search_result_for_display(result: SearchResult,
                                     now: Optional[datetime] = None) -> Dict[str, Any]:
    formatted = format_intent_for_display(result, now)
    formatted["file_path"] = result.file_path
    return formatted

def format_conflict_display(intents: List[Intent], now: Optional[datetime] = None) -> str:
    """Numbered plain-text listing of intents"""
    lines = ["Recent intents for this file:", ""]
    for index, intent in enumerate(intents, start=1):
        lines.append(f"{index}. {relative_time(intent.timestamp, now)} by {intent.user}")
        lines.append(f"   {intent.prompt}")
        lines.append("")
    return "\n".join(lines)
