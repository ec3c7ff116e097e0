"""
Preparation of conflict-analysis briefs for an external reasoning agent.
Path: intention/skills/conflict_analysis.py

This does not judge conflicts. It only decides whether any intents fall
inside the window and, if so, renders the request text.
"""

from datetime import datetime, timedelta
from typing import List, Optional

import structlog

from intention.models import ConflictAnalysisRequest, Intent, IntentSummary, utc_now
from .conflict_detection import DEFAULT_WINDOW_DAYS, VERY_RECENT_HOURS, within_window
from .formatting import relative_time

logger = structlog.get_logger()

CONFLICT_ANALYSIS_SYSTEM_PROMPT = """You are analyzing potential conflicts in code changes. When presented with a new intent and recent intents on the same file:

1. Identify if the changes are contradictory (e.g., one adds authentication, another removes it)
2. Check if changes affect the same functionality in incompatible ways
3. Consider if multiple developers are working on overlapping features
4. Assess the risk level:
   - HIGH: Direct contradiction or will break recent work
   - MEDIUM: Overlapping changes that need coordination
   - LOW: Related but compatible changes
   - NONE: No conflict detected

Provide a clear, concise assessment and recommendation."""

ANALYSIS_CHECKLIST = (
    "1. Do these intents conflict with each other?",
    "2. Would the new change undo or contradict recent work?",
    "3. Are multiple people working on related features that might conflict?",
    "4. Severity: HIGH (stop and coordinate), MEDIUM (review carefully), "
    "LOW (proceed with caution), NONE (safe)",
)

def create_conflict_analysis_system_prompt() -> str:
    return CONFLICT_ANALYSIS_SYSTEM_PROMPT

def summarize_intent(intent: Intent,
                     now: datetime,
                     very_recent_hours: float = VERY_RECENT_HOURS) -> IntentSummary:
    return IntentSummary(
        id=intent.id,
        timestamp=intent.timestamp,
        user=intent.user,
        prompt=intent.prompt,
        time_ago=relative_time(intent.timestamp, now),
        is_recent=intent.age(now) < timedelta(hours=very_recent_hours).total_seconds(),
    )

def create_analysis_prompt(new_prompt: str, recent_intents: List[IntentSummary]) -> str:
    lines = [
        "CONFLICT ANALYSIS REQUEST",
        "========================",
        "",
        "Please analyze if the following new change conflicts with recent intents:",
        "",
        "NEW CHANGE INTENT:",
        f'"{new_prompt}"',
        "",
        "RECENT INTENTS ON THIS FILE:",
        "",
    ]

    for index, summary in enumerate(recent_intents, start=1):
        lines.append(f"{index}. {summary.time_ago} by {summary.user}:")
        lines.append(f'   "{summary.prompt}"')
        if summary.is_recent:
            lines.append("   WARNING: Very recent change (less than 24 hours ago)")
        lines.append("")

    lines.append("ANALYSIS REQUIRED:")
    lines.extend(ANALYSIS_CHECKLIST)
    lines.append("")
    lines.append("Please determine if there is a conflict and explain your reasoning.")
    return "\n".join(lines)

def prepare_conflict_analysis(new_prompt: str,
                              existing_intents: List[Intent],
                              window_days: float = DEFAULT_WINDOW_DAYS,
                              now: Optional[datetime] = None,
                              very_recent_hours: float = VERY_RECENT_HOURS) -> ConflictAnalysisRequest:
    """Build the escalation request for the intents inside the window"""
    if not existing_intents:
        return ConflictAnalysisRequest(
            current_prompt=new_prompt,
            recent_intents=[],
            analysis_prompt="No previous intents found. This is the first tracked change to this file.",
            requires_llm_analysis=False,
        )

    now = now or utc_now()
    recent = sorted(within_window(existing_intents, window_days, now),
                    key=lambda intent: intent.created_at,
                    reverse=True)

    if not recent:
        return ConflictAnalysisRequest(
            current_prompt=new_prompt,
            recent_intents=[],
            analysis_prompt=f"No recent changes in the last {window_days:g} days. Safe to proceed.",
            requires_llm_analysis=False,
        )

    summaries = [summarize_intent(intent, now, very_recent_hours) for intent in recent]
    logger.debug("conflict_analysis.prepared", recent=len(summaries))

    return ConflictAnalysisRequest(
        current_prompt=new_prompt,
        recent_intents=summaries,
        analysis_prompt=create_analysis_prompt(new_prompt, summaries),
        requires_llm_analysis=True,
    )
