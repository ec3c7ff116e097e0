# intention/identity.py

import getpass
import os
import subprocess
from typing import Callable, Mapping, Optional

import structlog

from intention.models import UNKNOWN_MODEL

logger = structlog.get_logger()

USER_ENV_VARS = ("INTENTION_USER", "GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME", "USER", "USERNAME")
MODEL_ENV_VARS = ("ANTHROPIC_MODEL", "OPENAI_MODEL", "AI_MODEL")
GIT_IDENTITY_KEYS = ("user.name", "user.email")

def git_config_value(key: str) -> Optional[str]:
    """Read a value from git config, None if git is unavailable or unset"""
    try:
        result = subprocess.run(
            ["git", "config", key],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("identity.git_unavailable", key=key, error=str(e))
        return None
    value = result.stdout.strip()
    return value if result.returncode == 0 and value else None

class UserIdentity:
    """Resolves who (and which model) is behind a change.

    Construct one per invocation context and pass it to the operations that
    need it. The resolved user is cached on this instance only.
    """

    def __init__(self,
                 env: Optional[Mapping[str, str]] = None,
                 git_lookup: Callable[[str], Optional[str]] = git_config_value,
                 user: Optional[str] = None):
        self.env = os.environ if env is None else env
        self.git_lookup = git_lookup
        self._user = user

    def resolve_user(self) -> str:
        if self._user:
            return self._user

        for var in USER_ENV_VARS:
            if self.env.get(var):
                self._user = self.env[var]
                logger.debug("identity.resolved", source=var)
                return self._user

        for key in GIT_IDENTITY_KEYS:
            value = self.git_lookup(key)
            if value:
                self._user = value
                logger.debug("identity.resolved", source=f"git {key}")
                return self._user

        try:
            self._user = getpass.getuser()
        except (OSError, KeyError):
            self._user = "unknown"
        return self._user

    def resolve_model(self) -> str:
        for var in MODEL_ENV_VARS:
            if self.env.get(var):
                return self.env[var]
        return UNKNOWN_MODEL

    def clear(self) -> None:
        self._user = None
