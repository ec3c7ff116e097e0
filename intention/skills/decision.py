"""
Single decision policy for whether a change may go ahead.
Path: intention/skills/decision.py

The heuristic detector always runs first. Only semantic conflicts below the
block threshold are escalated to an external reasoning agent.
"""

from datetime import datetime
from typing import List, Optional

import structlog

from intention.models import (
    Block,
    ChangeDecision,
    ConflictType,
    Escalate,
    Intent,
    Proceed,
    Severity,
    utc_now,
)
from .conflict_analysis import prepare_conflict_analysis
from .conflict_detection import DEFAULT_WINDOW_DAYS, VERY_RECENT_HOURS, detect_conflicts

logger = structlog.get_logger()

def decide_change(new_prompt: str,
                  existing_intents: List[Intent],
                  window_days: float = DEFAULT_WINDOW_DAYS,
                  block_severity: Severity = Severity.HIGH,
                  escalate_severity: Severity = Severity.LOW,
                  now: Optional[datetime] = None,
                  very_recent_hours: float = VERY_RECENT_HOURS) -> ChangeDecision:
    """Return Proceed, Escalate(request) or Block(reason) for a new prompt"""
    now = now or utc_now()
    conflict = detect_conflicts(new_prompt, existing_intents, window_days, now, very_recent_hours)

    if conflict.has_conflicts and conflict.severity.rank >= block_severity.rank:
        logger.info("decision.block",
                    severity=conflict.severity.value,
                    conflicts=len(conflict.conflicting_intents))
        return Block(conflict=conflict, reason=conflict.recommendation)

    if (conflict.conflict_type == ConflictType.SEMANTIC
            and conflict.severity.rank >= escalate_severity.rank):
        request = prepare_conflict_analysis(
            new_prompt, existing_intents, window_days, now, very_recent_hours)
        logger.info("decision.escalate",
                    severity=conflict.severity.value,
                    recent=len(request.recent_intents))
        return Escalate(conflict=conflict, request=request)

    return Proceed(conflict=conflict)
