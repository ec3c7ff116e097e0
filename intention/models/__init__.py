from .intent import (
    Intent,
    IntentFile,
    SearchResult,
    UNKNOWN_MODEL,
    parse_timestamp,
    utc_now,
    utc_now_iso,
)
from .conflict import (
    Block,
    ChangeDecision,
    ConflictAnalysisRequest,
    ConflictInfo,
    ConflictType,
    Escalate,
    IntentSummary,
    Proceed,
    Severity,
    decision_to_dict,
)
from .analysis import ContributorInfo, IntentAnalysis, TimelineEntry

__all__ = [
    "Intent",
    "IntentFile",
    "SearchResult",
    "UNKNOWN_MODEL",
    "parse_timestamp",
    "utc_now",
    "utc_now_iso",
    "Block",
    "ChangeDecision",
    "ConflictAnalysisRequest",
    "ConflictInfo",
    "ConflictType",
    "Escalate",
    "IntentSummary",
    "Proceed",
    "Severity",
    "decision_to_dict",
    "ContributorInfo",
    "IntentAnalysis",
    "TimelineEntry",
]
