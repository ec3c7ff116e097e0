"""
Conflict verdicts, escalation requests and change decisions.
Path: intention/models/conflict.py
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .intent import Intent

class ConflictType(str, Enum):
    """Kind of conflict found against recent intents"""
    NONE = "none"
    RECENT = "recent"
    SEMANTIC = "semantic"

class Severity(str, Enum):
    """Ordinal conflict severity"""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

_SEVERITY_RANKS = {
    Severity.NONE: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}

@dataclass
class ConflictInfo:
    """Verdict of the local heuristic detector. Never persisted."""
    has_conflicts: bool
    conflicting_intents: List[Intent] = field(default_factory=list)
    conflict_type: ConflictType = ConflictType.NONE
    severity: Severity = Severity.NONE
    recommendation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_conflicts": self.has_conflicts,
            "conflicting_intents": [i.model_dump() for i in self.conflicting_intents],
            "conflict_type": self.conflict_type.value,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }

@dataclass
class IntentSummary:
    """Windowed intent as shown to an external reviewer"""
    id: str
    timestamp: str
    user: str
    prompt: str
    time_ago: str
    is_recent: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "user": self.user,
            "prompt": self.prompt,
            "time_ago": self.time_ago,
            "is_recent": self.is_recent,
        }

@dataclass
class ConflictAnalysisRequest:
    """Brief handed to an external reasoning agent"""
    current_prompt: str
    recent_intents: List[IntentSummary]
    analysis_prompt: str
    requires_llm_analysis: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_prompt": self.current_prompt,
            "recent_intents": [s.to_dict() for s in self.recent_intents],
            "analysis_prompt": self.analysis_prompt,
            "requires_llm_analysis": self.requires_llm_analysis,
        }

# Change decisions

@dataclass
class Proceed:
    """Change may be applied"""
    conflict: ConflictInfo
    kind: str = "proceed"

@dataclass
class Escalate:
    """Judgment deferred to an external reasoning agent"""
    conflict: ConflictInfo
    request: ConflictAnalysisRequest
    kind: str = "escalate"

@dataclass
class Block:
    """Change must not be applied without an explicit override"""
    conflict: ConflictInfo
    reason: str
    kind: str = "block"

ChangeDecision = Union[Proceed, Escalate, Block]

def decision_to_dict(decision: ChangeDecision) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "decision": decision.kind,
        "conflict": decision.conflict.to_dict(),
    }
    if isinstance(decision, Escalate):
        data["request"] = decision.request.to_dict()
    elif isinstance(decision, Block):
        data["reason"] = decision.reason
    return data
