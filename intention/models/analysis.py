# intention/models/analysis.py

from dataclasses import dataclass, field
from typing import Any, Dict, List

@dataclass
class TimelineEntry:
    date: str
    user: str
    prompt: str

@dataclass
class ContributorInfo:
    user: str
    contribution_count: int
    last_contribution: str

@dataclass
class IntentAnalysis:
    """Aggregate view over a file's full intent history"""
    summary: str
    themes: List[str] = field(default_factory=list)
    timeline: List[TimelineEntry] = field(default_factory=list)
    contributors: List[ContributorInfo] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "themes": list(self.themes),
            "timeline": [entry.__dict__ for entry in self.timeline],
            "contributors": [info.__dict__ for info in self.contributors],
            "recommendations": list(self.recommendations),
        }
