"""
Tool-facing intention operations.
Path: intention/operations.py

Every operation returns an OperationResult and never raises: failures carry a
human readable reason in ``error``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from intention.config import IntentionConfig
from intention.identity import UserIdentity
from intention.models import (
    Block,
    ChangeDecision,
    Escalate,
    Intent,
    decision_to_dict,
    utc_now,
)
from intention.skills.asset_manager import AssetManager
from intention.skills.conflict_analysis import (
    create_conflict_analysis_system_prompt,
    prepare_conflict_analysis,
)
from intention.skills.conflict_detection import detect_conflicts, within_window
from intention.skills.decision import decide_change
from intention.skills.formatting import (
    format_intent_for_display,
    format_search_result_for_display,
)
from intention.skills.history_analysis import analyze_intent_history
from intention.skills.intent_store import IntentStore

logger = structlog.get_logger()

PathLike = Union[str, Path]

ESCALATION_INSTRUCTION = (
    "Review the conflict analysis above. If you determine there is NO significant "
    "conflict, retry with skip_conflict_check. If there IS a conflict, either abort "
    "or use force to override."
)

@dataclass
class OperationResult:
    """Standard operation response"""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success, **self.data}
        if self.error is not None:
            result["error"] = self.error
        return result

def operation(name: str):
    """Catch every error at the operation boundary and log it"""
    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs) -> OperationResult:
            try:
                return func(self, *args, **kwargs)
            except Exception as e:
                logger.error(f"operation.{name}_failed",
                             error=str(e),
                             error_type=type(e).__name__)
                return OperationResult(success=False, error=str(e) or type(e).__name__)
        return wrapper
    return decorator

class IntentionService:
    """Records intents and gates file changes on recent intent history"""

    def __init__(self,
                 config: Optional[IntentionConfig] = None,
                 identity: Optional[UserIdentity] = None,
                 store: Optional[IntentStore] = None,
                 assets: Optional[AssetManager] = None):
        self.config = config or IntentionConfig()
        self.identity = identity or UserIdentity()
        self.store = store or IntentStore(self.config.workspace_root, self.config.storage_dir)
        self.assets = assets or AssetManager(self.store.workspace_root)

    def _window(self, window_days: Optional[float]) -> float:
        return self.config.conflict.window_days if window_days is None else window_days

    def _decide(self, prompt: str, intents: List[Intent],
                now: Optional[datetime] = None) -> ChangeDecision:
        settings = self.config.conflict
        return decide_change(
            prompt,
            intents,
            window_days=settings.window_days,
            block_severity=settings.block_severity,
            escalate_severity=settings.escalate_severity,
            now=now,
            very_recent_hours=settings.very_recent_hours,
        )

    def _record(self, file_path: PathLike, prompt: str,
                overrides: Optional[List[str]] = None) -> Intent:
        return self.store.save(
            file_path,
            prompt=prompt,
            user=self.identity.resolve_user(),
            overrides=overrides or [],
            model=self.identity.resolve_model(),
        )

    # Core operations

    @operation("save_intent")
    def save_intent(self,
                    file_path: PathLike,
                    prompt: str,
                    overrides: Optional[List[str]] = None,
                    user: Optional[str] = None,
                    model: Optional[str] = None) -> OperationResult:
        intent = self.store.save(
            file_path,
            prompt=prompt,
            user=user or self.identity.resolve_user(),
            overrides=overrides or [],
            model=model or self.identity.resolve_model(),
        )
        return OperationResult(success=True, data={"intent": intent.model_dump()})

    @operation("get_history")
    def get_history(self, file_path: PathLike) -> OperationResult:
        intents = self.store.history(file_path)
        now = utc_now()
        return OperationResult(success=True, data={
            "file_path": str(file_path),
            "total": len(intents),
            "intents": [format_intent_for_display(i, now) for i in intents],
        })

    @operation("search_intents")
    def search_intents(self, query: str, limit: Optional[int] = None) -> OperationResult:
        limit = self.config.search.default_limit if limit is None else limit
        results = self.store.search(query, limit)
        now = utc_now()
        message = (f'Found {len(results)} intent(s) matching "{query}"' if results
                   else "No intents found matching your query")
        return OperationResult(success=True, data={
            "query": query,
            "message": message,
            "results": [format_search_result_for_display(r, now) for r in results],
        })

    @operation("detect_conflicts")
    def detect_conflicts(self, prompt: str, intents: List[Intent],
                         window_days: Optional[float] = None) -> OperationResult:
        conflict = detect_conflicts(
            prompt, intents, self._window(window_days),
            very_recent_hours=self.config.conflict.very_recent_hours)
        return OperationResult(success=True, data=conflict.to_dict())

    @operation("prepare_conflict_analysis")
    def prepare_conflict_analysis(self, prompt: str, intents: List[Intent],
                                  window_days: Optional[float] = None) -> OperationResult:
        request = prepare_conflict_analysis(
            prompt, intents, self._window(window_days),
            very_recent_hours=self.config.conflict.very_recent_hours)
        data = request.to_dict()
        if request.requires_llm_analysis:
            data["system_prompt"] = create_conflict_analysis_system_prompt()
        return OperationResult(success=True, data=data)

    @operation("analyze_history")
    def analyze_history(self, intents: List[Intent]) -> OperationResult:
        settings = self.config.analysis
        analysis = analyze_intent_history(
            intents,
            high_activity_count=settings.high_activity_count,
            high_activity_days=settings.high_activity_days,
        )
        return OperationResult(success=True, data=analysis.to_dict())

    # File-level operations

    @operation("check")
    def check(self, file_path: PathLike, prompt: Optional[str] = None) -> OperationResult:
        """Decide on a planned change, or list the recent intents when no prompt is given"""
        intents = self.store.history(file_path)
        if not intents:
            return OperationResult(success=True, data={
                "message": "No previous intents found for this file",
                "safe": True,
                "total_intents": 0,
            })

        if prompt:
            decision = self._decide(prompt, intents)
            data = decision_to_dict(decision)
            data["safe"] = not isinstance(decision, (Escalate, Block))
            data["total_intents"] = len(intents)
            return OperationResult(success=True, data=data)

        now = utc_now()
        recent = within_window(intents, self.config.conflict.window_days, now)
        if not recent:
            return OperationResult(success=True, data={
                "message": "No recent intents found within the conflict window",
                "safe": True,
                "total_intents": len(intents),
            })

        return OperationResult(success=True, data={
            "message": f"Found {len(recent)} recent intent(s) for this file",
            "recent_intents": [format_intent_for_display(i, now) for i in recent],
            "total_intents": len(intents),
            "recommendation": ("Review these intents before making changes. "
                               "Provide a prompt to analyze for specific conflicts."),
        })

    @operation("analyze")
    def analyze(self, file_path: PathLike, prompt: str,
                window_days: Optional[float] = None) -> OperationResult:
        """Escalation brief for a planned change to file_path"""
        intents = self.store.history(file_path)
        return self.prepare_conflict_analysis(prompt, intents, window_days)

    @operation("explain")
    def explain(self, file_path: PathLike) -> OperationResult:
        intents = self.store.history(file_path)
        if not intents:
            return OperationResult(success=True, data={
                "message": "No intent history found for this file",
                "explanation": ("This file has no recorded intents. "
                                "Consider using intention tools to track future changes."),
            })

        settings = self.config.analysis
        analysis = analyze_intent_history(
            intents,
            high_activity_count=settings.high_activity_count,
            high_activity_days=settings.high_activity_days,
        )
        return OperationResult(success=True, data={
            "file_path": str(file_path),
            "explanation": analysis.summary,
            **analysis.to_dict(),
        })

    @operation("log")
    def log_intent(self, file_path: PathLike, prompt: str) -> OperationResult:
        """Record an intent for a change made by other means"""
        intent = self._record(file_path, prompt)
        return OperationResult(success=True, data={
            "message": f"Intent logged successfully for: {file_path}",
            "intent": intent.model_dump(),
        })

    def _gate(self, file_path: PathLike, prompt: str,
              force: bool, skip_conflict_check: bool) -> Optional[OperationResult]:
        """Failure result when the change may not go ahead, else None"""
        if force or skip_conflict_check:
            return None

        decision = self._decide(prompt, self.store.history(file_path))
        if isinstance(decision, Block):
            return OperationResult(success=False, error=decision.reason,
                                   data=decision_to_dict(decision))
        if isinstance(decision, Escalate):
            data = decision_to_dict(decision)
            data["requires_conflict_analysis"] = True
            data["system_prompt"] = create_conflict_analysis_system_prompt()
            data["instruction"] = ESCALATION_INSTRUCTION
            return OperationResult(
                success=False,
                error="Recent intents detected. Please analyze for conflicts before proceeding.",
                data=data,
            )
        return None

    def _forced_overrides(self, file_path: PathLike, force: bool) -> List[str]:
        """Ids of the windowed intents a forced change supersedes"""
        if not force:
            return []
        recent = within_window(self.store.history(file_path),
                               self.config.conflict.window_days, utc_now())
        return [intent.id for intent in recent]

    @operation("write")
    def write_file(self,
                   file_path: PathLike,
                   content: str,
                   prompt: str,
                   force: bool = False,
                   skip_conflict_check: bool = False) -> OperationResult:
        # Rejects paths the store cannot track before the file is touched
        self.store.intent_file_path(file_path)

        if self.assets.exists(file_path):
            blocked = self._gate(file_path, prompt, force, skip_conflict_check)
            if blocked:
                return blocked

        overrides = self._forced_overrides(file_path, force)
        result = self.assets.write(file_path, content)
        if not result.success:
            return OperationResult(success=False, error=result.error)

        intent = self._record(file_path, prompt, overrides)
        return OperationResult(success=True, data={
            "message": f"File written successfully: {file_path}",
            "intent_tracked": True,
            "intent": intent.model_dump(),
        })

    @operation("edit")
    def edit_file(self,
                  file_path: PathLike,
                  old_content: str,
                  new_content: str,
                  prompt: str,
                  replace_all: bool = False,
                  force: bool = False,
                  skip_conflict_check: bool = False) -> OperationResult:
        self.store.intent_file_path(file_path)

        if not self.assets.exists(file_path):
            return OperationResult(success=False, error=f"File not found: {file_path}")

        blocked = self._gate(file_path, prompt, force, skip_conflict_check)
        if blocked:
            return blocked

        overrides = self._forced_overrides(file_path, force)
        result = self.assets.replace(file_path, old_content, new_content, replace_all)
        if not result.success:
            return OperationResult(success=False, error=result.error)

        intent = self._record(file_path, prompt, overrides)
        return OperationResult(success=True, data={
            "message": f"File edited successfully: {file_path}",
            "replacements": result.replacements,
            "intent_tracked": True,
            "intent": intent.model_dump(),
        })
