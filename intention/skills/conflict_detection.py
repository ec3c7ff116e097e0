"""
Deterministic heuristic conflict detection between a new prompt and the
recent intents recorded on the same file.
Path: intention/skills/conflict_detection.py
"""

import re
from datetime import datetime, timedelta
from typing import List, Optional, Set

import structlog

from intention.models import ConflictInfo, ConflictType, Intent, Severity, utc_now
from .patterns import MIN_KEYWORD_LENGTH, OPPOSITE_ACTION_PATTERNS, STOP_WORDS

logger = structlog.get_logger()

DEFAULT_WINDOW_DAYS = 7
VERY_RECENT_HOURS = 24

# Keywords keep ASCII letters and digits only
NON_KEYWORD_CHARS = re.compile(r"[^a-z0-9]")

RECOMMENDATIONS = {
    Severity.HIGH: ("HIGH CONFLICT: Found {count} conflicting intent(s). "
                    "Strongly recommend reviewing with team before proceeding."),
    Severity.MEDIUM: ("MEDIUM CONFLICT: Multiple contributors have conflicting intents. "
                      "Please review and consider coordinating changes."),
    Severity.LOW: ("LOW CONFLICT: Potential overlap with previous changes. "
                   "Review intent history before proceeding."),
    Severity.NONE: "No conflicts detected. Safe to proceed.",
}

def get_recommendation(severity: Severity, count: int = 0) -> str:
    return RECOMMENDATIONS[severity].format(count=count)

def within_window(intents: List[Intent], window_days: float, now: datetime) -> List[Intent]:
    """Intents younger than window_days"""
    window = timedelta(days=window_days).total_seconds()
    return [intent for intent in intents if intent.age(now) < window]

def extract_keywords(prompt: str) -> Set[str]:
    """Significant lowercase alphanumeric words of a prompt"""
    words = (NON_KEYWORD_CHARS.sub("", raw.lower()) for raw in prompt.split())
    return {w for w in words if len(w) > MIN_KEYWORD_LENGTH and w not in STOP_WORDS}

def has_opposite_action(new_prompt: str, intent_prompt: str) -> bool:
    return any(pair.opposes(new_prompt, intent_prompt) for pair in OPPOSITE_ACTION_PATTERNS)

def has_keyword_overlap(new_prompt: str, intent_prompt: str, minimum: int = 2) -> bool:
    return len(extract_keywords(new_prompt) & extract_keywords(intent_prompt)) >= minimum

def find_semantic_conflicts(new_prompt: str, intents: List[Intent]) -> List[Intent]:
    """Intents contradicted by, or overlapping with, the new prompt (each at most once)"""
    return [
        intent for intent in intents
        if has_opposite_action(new_prompt, intent.prompt)
        or has_keyword_overlap(new_prompt, intent.prompt)
    ]

def determine_severity(conflicts: List[Intent],
                       now: datetime,
                       very_recent_hours: float = VERY_RECENT_HOURS) -> Severity:
    if len(conflicts) > 2:
        return Severity.HIGH

    threshold = timedelta(hours=very_recent_hours).total_seconds()
    if any(intent.age(now) < threshold for intent in conflicts):
        return Severity.HIGH

    if len({intent.user for intent in conflicts}) > 1:
        return Severity.MEDIUM

    return Severity.LOW

def detect_conflicts(new_prompt: str,
                     existing_intents: List[Intent],
                     window_days: float = DEFAULT_WINDOW_DAYS,
                     now: Optional[datetime] = None,
                     very_recent_hours: float = VERY_RECENT_HOURS) -> ConflictInfo:
    """Classify how the new prompt relates to recent intents on a file.

    Pure: no I/O, and with an explicit ``now`` identical inputs always give
    identical output.

    Args:
        new_prompt: Description of the requested change
        existing_intents: The file's recorded intents
        window_days: Lookback period; older intents are ignored
        now: Reference instant, defaults to the current time
        very_recent_hours: Age under which a conflict is always high severity
    """
    if not existing_intents:
        return ConflictInfo(
            has_conflicts=False,
            recommendation="No previous intents found. Safe to proceed.",
        )

    now = now or utc_now()
    recent = within_window(existing_intents, window_days, now)
    if not recent:
        return ConflictInfo(
            has_conflicts=False,
            recommendation="No recent intents. Safe to proceed.",
        )

    conflicts = find_semantic_conflicts(new_prompt, recent)
    if conflicts:
        severity = determine_severity(conflicts, now, very_recent_hours)
        logger.debug("conflicts.semantic",
                     conflicts=len(conflicts),
                     recent=len(recent),
                     severity=severity.value)
        return ConflictInfo(
            has_conflicts=True,
            conflicting_intents=conflicts,
            conflict_type=ConflictType.SEMANTIC,
            severity=severity,
            recommendation=get_recommendation(severity, len(conflicts)),
        )

    logger.debug("conflicts.recent_only", recent=len(recent))
    return ConflictInfo(
        has_conflicts=True,
        conflicting_intents=recent,
        conflict_type=ConflictType.RECENT,
        severity=Severity.LOW,
        recommendation=get_recommendation(Severity.LOW, len(recent)),
    )
