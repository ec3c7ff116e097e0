"""
Intent tracking skills: storage, conflict heuristics, escalation briefs and
history analysis.
"""

from .intent_store import IntentStore, DEFAULT_STORAGE_DIR
from .conflict_detection import detect_conflicts, DEFAULT_WINDOW_DAYS
from .conflict_analysis import (
    prepare_conflict_analysis,
    create_conflict_analysis_system_prompt,
)
from .history_analysis import analyze_intent_history
from .decision import decide_change
from .asset_manager import AssetManager, AssetResult

__all__ = [
    "IntentStore",
    "DEFAULT_STORAGE_DIR",
    "detect_conflicts",
    "DEFAULT_WINDOW_DAYS",
    "prepare_conflict_analysis",
    "create_conflict_analysis_system_prompt",
    "analyze_intent_history",
    "decide_change",
    "AssetManager",
    "AssetResult",
]
