"""
Configuration handling: YAML files, .env loading and environment overrides.
Path: intention/config.py
"""
import collections.abc
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from intention.models import Severity

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "system_config.yml"

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    "INTENTION_WORKSPACE": "workspace_root",
    "INTENTION_STORAGE_DIR": "storage_dir",
    "INTENTION_WINDOW_DAYS": "conflict.window_days",
    "INTENTION_LOG_LEVEL": "logging.level",
}

def locate_config(config: Dict[str, Any], target_name: str) -> Dict[str, Any]:
    """
    Locate configuration for a specific target in a nested dictionary.

    Search order:
    1. Direct key match at root
    2. Under [name]_config

    Returns:
        Located config dictionary or empty dict if not found
    """
    search_paths = [
        [target_name],
        [f'{target_name}_config'],
    ]

    for path in search_paths:
        current: Any = config
        try:
            for key in path:
                current = current[key]
        except (KeyError, TypeError):
            continue
        if isinstance(current, dict):
            logger.debug("config.located", target=target_name, path=path)
            return current

    logger.debug("config.not_found", target=target_name, searched_paths=search_paths)
    return {}

def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Deep merge dictionaries.

    Rules:
    1. Override values take precedence over base values
    2. Dictionaries are merged recursively
    3. Lists from override replace lists from base
    4. None values in override delete keys from base
    5. Path objects are converted to strings
    """
    result = deepcopy(base)

    for key, value in override.items():
        if value is None:
            result.pop(key, None)
            continue

        if isinstance(value, collections.abc.Mapping) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        elif isinstance(value, Path):
            result[key] = str(value)
        else:
            result[key] = deepcopy(value)

    return result

def load_config(path: Path) -> Dict[str, Any]:
    """Load configuration from a YAML file. Missing or invalid files give {}"""
    if not path.exists():
        logger.debug("config.load.file_not_found", path=str(path))
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error("config.load.yaml_error",
                     path=str(path),
                     error=str(e),
                     line=getattr(getattr(e, 'problem_mark', None), 'line', None))
        return {}
    except OSError as e:
        logger.error("config.load.failed", path=str(path), error=str(e))
        return {}

    if not isinstance(config, dict):
        logger.error("config.load.not_a_mapping", path=str(path))
        return {}

    logger.debug("config.load.success", path=str(path), keys=list(config.keys()))
    return config

def env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    """Nested override mapping built from INTENTION_* environment variables"""
    overrides: Dict[str, Any] = {}
    for var, dotted in ENV_OVERRIDES.items():
        if not env.get(var):
            continue
        *parents, leaf = dotted.split(".")
        target = overrides
        for key in parents:
            target = target.setdefault(key, {})
        target[leaf] = env[var]
    return overrides

class ConflictSettings(BaseModel):
    window_days: float = 7
    very_recent_hours: float = 24
    block_severity: Severity = Severity.HIGH
    escalate_severity: Severity = Severity.LOW

class AnalysisSettings(BaseModel):
    high_activity_count: int = 10
    high_activity_days: int = 30

class SearchSettings(BaseModel):
    default_limit: int = 20

class LoggingSettings(BaseModel):
    level: str = "info"

class IntentionConfig(BaseModel):
    """Validated settings for the intention tools"""
    workspace_root: Path = Path(".")
    storage_dir: str = ".intents"
    conflict: ConflictSettings = Field(default_factory=ConflictSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'IntentionConfig':
        return cls(**locate_config(config, "intention"))

    @classmethod
    def load(cls,
             path: Optional[Path] = None,
             env: Optional[Mapping[str, str]] = None,
             env_file: Optional[Path] = None) -> 'IntentionConfig':
        """Load YAML config, then apply .env and INTENTION_* overrides.

        Args:
            path: YAML file, defaults to config/system_config.yml
            env: Environment mapping, defaults to os.environ after .env loading
            env_file: Explicit .env file; otherwise .env is searched from cwd
        """
        if env is None:
            if env_file is not None:
                load_dotenv(env_file)
            else:
                load_dotenv()
            env = os.environ

        raw = load_config(path or DEFAULT_CONFIG_PATH)
        settings = deep_merge(locate_config(raw, "intention"), env_overrides(env))

        config = cls(**settings)
        logger.debug("config.loaded",
                     workspace_root=str(config.workspace_root),
                     storage_dir=config.storage_dir,
                     window_days=config.conflict.window_days)
        return config
