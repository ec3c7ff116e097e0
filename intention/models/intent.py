# intention/models/intent.py

from uuid import uuid4
from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

UNKNOWN_MODEL = "unknown"

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def utc_now_iso() -> str:
    """Current instant as an ISO-8601 string (UTC, millisecond precision)"""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp into an aware datetime.

    Accepts the trailing 'Z' form; naive values are taken as UTC.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

class Intent(BaseModel):
    """One recorded change rationale for a source file"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: str = Field(default_factory=utc_now_iso)
    user: str
    prompt: str
    model: str = UNKNOWN_MODEL
    overrides: List[str] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def _parseable_timestamp(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @field_validator("model", mode="before")
    @classmethod
    def _default_model(cls, value: Optional[str]) -> str:
        return value or UNKNOWN_MODEL

    @field_validator("overrides", mode="before")
    @classmethod
    def _unique_overrides(cls, value: Optional[List[str]]) -> List[str]:
        # Order-preserving dedupe; stored as a JSON array
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            return value or []
        return list(dict.fromkeys(value))

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def age(self, now: Optional[datetime] = None) -> float:
        """Age in seconds relative to now"""
        return ((now or utc_now()) - self.created_at).total_seconds()

class IntentFile(BaseModel):
    """Append-only intent log for a single tracked source path"""
    intents: List[Intent] = Field(default_factory=list)

    def ids(self) -> List[str]:
        return [intent.id for intent in self.intents]

class SearchResult(Intent):
    """Intent tagged with the source path it was recorded against"""
    file_path: str
