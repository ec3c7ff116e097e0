"""
Test configuration and fixtures.
Path: tests/conftest.py
"""

from datetime import datetime, timedelta, timezone

import pytest
import structlog

from intention.config import IntentionConfig
from intention.identity import UserIdentity
from intention.models import Intent
from intention.operations import IntentionService
from intention.skills.intent_store import IntentStore

# Configure structlog for testing
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M.%S"),
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True
)

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

def make_intent(prompt: str, age: timedelta = timedelta(hours=1),
                user: str = "alice", now: datetime = NOW, **kwargs) -> Intent:
    """Intent recorded `age` before `now`"""
    timestamp = (now - age).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return Intent(prompt=prompt, user=user, timestamp=timestamp, **kwargs)

@pytest.fixture
def now() -> datetime:
    return NOW

@pytest.fixture
def workspace(tmp_path):
    """Empty workspace directory"""
    root = tmp_path.resolve() / "project"
    root.mkdir()
    return root

@pytest.fixture
def store(workspace) -> IntentStore:
    return IntentStore(workspace)

@pytest.fixture
def identity() -> UserIdentity:
    return UserIdentity(env={"INTENTION_USER": "tester", "AI_MODEL": "test-model"},
                        git_lookup=lambda key: None)

@pytest.fixture
def service(workspace, identity) -> IntentionService:
    config = IntentionConfig(workspace_root=workspace)
    return IntentionService(config=config, identity=identity)

@pytest.fixture
def intent_factory():
    return make_intent
