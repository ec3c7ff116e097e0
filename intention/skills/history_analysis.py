"""
Aggregate analysis of a file's intent history.
Path: intention/skills/history_analysis.py
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import structlog

from intention.models import (
    ContributorInfo,
    Intent,
    IntentAnalysis,
    TimelineEntry,
    utc_now,
)
from .patterns import THEME_PATTERNS

logger = structlog.get_logger()

MAX_THEMES = 5
TIMELINE_LENGTH = 10
PROMPT_PREVIEW_LENGTH = 100
HIGH_ACTIVITY_COUNT = 10
HIGH_ACTIVITY_DAYS = 30
MANY_CONTRIBUTORS = 3
UNDOCUMENTED_CHANGES = 5

def _date(intent: Intent) -> str:
    return intent.created_at.date().isoformat()

def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"

def extract_themes(intents: List[Intent]) -> List[str]:
    """Top themes by number of matching prompts"""
    counts: Dict[str, int] = {}
    for intent in intents:
        for entry in THEME_PATTERNS:
            if entry.pattern.search(intent.prompt):
                counts[entry.theme] = counts.get(entry.theme, 0) + 1

    # counts preserves declaration order; sorted() is stable on ties
    order = [entry.theme for entry in THEME_PATTERNS if entry.theme in counts]
    ranked = sorted(order, key=lambda theme: counts[theme], reverse=True)
    return ranked[:MAX_THEMES]

def create_timeline(intents: List[Intent]) -> List[TimelineEntry]:
    newest_first = sorted(intents, key=lambda intent: intent.created_at, reverse=True)
    timeline = []
    for intent in newest_first[:TIMELINE_LENGTH]:
        prompt = intent.prompt
        if len(prompt) > PROMPT_PREVIEW_LENGTH:
            prompt = prompt[:PROMPT_PREVIEW_LENGTH] + "..."
        timeline.append(TimelineEntry(date=_date(intent), user=intent.user, prompt=prompt))
    return timeline

def analyze_contributors(intents: List[Intent]) -> List[ContributorInfo]:
    counts: Dict[str, int] = {}
    latest: Dict[str, Intent] = {}
    for intent in intents:
        counts[intent.user] = counts.get(intent.user, 0) + 1
        current = latest.get(intent.user)
        if current is None or intent.created_at > current.created_at:
            latest[intent.user] = intent

    contributors = [
        ContributorInfo(user=user, contribution_count=count, last_contribution=_date(latest[user]))
        for user, count in counts.items()
    ]
    contributors.sort(key=lambda info: info.contribution_count, reverse=True)
    return contributors

def generate_summary(intents: List[Intent],
                     themes: List[str],
                     contributors: List[ContributorInfo]) -> str:
    dates = [intent.created_at for intent in intents]
    summary = (f"This file has undergone {_plural(len(intents), 'tracked change')}"
               f" from {min(dates).date().isoformat()} to {max(dates).date().isoformat()}")

    if themes:
        summary += f". The primary focus areas have been: {', '.join(themes[:3])}"

    if contributors:
        top = contributors[0]
        summary += (f". The main contributor is {top.user}"
                    f" with {_plural(top.contribution_count, 'change')}")

    return summary + "."

def generate_recommendations(intents: List[Intent],
                             themes: List[str],
                             now: datetime,
                             high_activity_count: int = HIGH_ACTIVITY_COUNT,
                             high_activity_days: int = HIGH_ACTIVITY_DAYS) -> List[str]:
    recommendations = []

    window = timedelta(days=high_activity_days).total_seconds()
    recent = [intent for intent in intents if intent.age(now) < window]
    if len(recent) > high_activity_count:
        recommendations.append(
            "This file has high recent activity. Consider reviewing for stability before major changes.")

    if "Testing" not in themes:
        recommendations.append(
            "No testing-related intents found. Consider adding tests for this file.")

    if "Documentation" not in themes and len(intents) > UNDOCUMENTED_CHANGES:
        recommendations.append(
            "Multiple changes without documentation updates. Consider updating relevant docs.")

    if len({intent.user for intent in intents}) > MANY_CONTRIBUTORS:
        recommendations.append(
            "Multiple contributors have worked on this file. Ensure consistent coding style.")

    return recommendations

def analyze_intent_history(intents: List[Intent],
                           now: Optional[datetime] = None,
                           high_activity_count: int = HIGH_ACTIVITY_COUNT,
                           high_activity_days: int = HIGH_ACTIVITY_DAYS) -> IntentAnalysis:
    """Summarize themes, timeline, contributors and recommendations for a history"""
    if not intents:
        return IntentAnalysis(summary="No intents found for analysis.")

    themes = extract_themes(intents)
    contributors = analyze_contributors(intents)

    analysis = IntentAnalysis(
        summary=generate_summary(intents, themes, contributors),
        themes=themes,
        timeline=create_timeline(intents),
        contributors=contributors,
        recommendations=generate_recommendations(
            intents, themes, now or utc_now(), high_activity_count, high_activity_days),
    )
    logger.debug("history_analysis.complete",
                 intents=len(intents),
                 themes=themes,
                 contributors=len(contributors))
    return analysis
