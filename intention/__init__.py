"""
Intention
=========

Per-file intent logs: why each change was made, and whether a new change
conflicts with what was recently recorded on the same file.

Usage:
    from intention import IntentionService

    service = IntentionService()
    service.log_intent("src/auth.py", "Add rate limiting to login")
    result = service.check("src/auth.py", "Remove rate limiting from login")
"""

from .config import IntentionConfig
from .errors import DanglingOverrideError, IntentionError, IntentStoreError
from .identity import UserIdentity
from .operations import IntentionService, OperationResult

__version__ = "0.1.0"

__all__ = [
    "IntentionConfig",
    "IntentionError",
    "IntentStoreError",
    "DanglingOverrideError",
    "UserIdentity",
    "IntentionService",
    "OperationResult",
]
