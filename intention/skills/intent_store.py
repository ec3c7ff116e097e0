"""
Intent persistence with one JSON log per tracked source file.
Path: intention/skills/intent_store.py

Each source path ``p`` (relative to the workspace root) is stored at
``<workspace>/<storage_dir>/<p>.json`` as ``{"intents": [...]}``.

Saves are a full read-modify-write of the file. They are serialized per
storage path inside one process and the file is replaced atomically, but two
processes writing the same path still race: the last writer wins.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

import structlog
from pydantic import ValidationError

from intention.errors import DanglingOverrideError, IntentStoreError
from intention.models import Intent, IntentFile, SearchResult, parse_timestamp

logger = structlog.get_logger()

DEFAULT_STORAGE_DIR = ".intents"
INTENT_SUFFIX = ".json"

class IntentStore:
    """Reads and appends intent logs under a dedicated storage root"""

    def __init__(self,
                 workspace_root: Union[str, Path] = ".",
                 storage_dir: str = DEFAULT_STORAGE_DIR):
        self.workspace_root = Path(workspace_root).resolve()
        self.storage_root = self.workspace_root / storage_dir
        self._locks: Dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

        logger.debug("intent_store.initialized",
                     workspace_root=str(self.workspace_root),
                     storage_root=str(self.storage_root))

    def _get_relative_path(self, file_path: Union[str, Path]) -> Path:
        """Source path relative to the workspace root"""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.workspace_root / path
        path = Path(os.path.normpath(path))
        try:
            return path.relative_to(self.workspace_root)
        except ValueError:
            raise IntentStoreError(
                f"Path is outside the workspace root {self.workspace_root}: {file_path}"
            ) from None

    def intent_file_path(self, file_path: Union[str, Path]) -> Path:
        """Location of the intent log for a source path"""
        relative = self._get_relative_path(file_path)
        if not relative.parts:
            raise IntentStoreError(f"Not a file path: {file_path}")
        return self.storage_root / (str(relative) + INTENT_SUFFIX)

    def exists(self) -> bool:
        return self.storage_root.is_dir()

    def ensure_storage_root(self) -> None:
        """Create the storage root if missing. Idempotent."""
        if self.exists():
            return
        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IntentStoreError(f"Cannot create {self.storage_root}: {e}") from e
        logger.info("intent_store.root_created", path=str(self.storage_root))

    def _lock_for(self, intent_path: Path) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(intent_path, threading.Lock())

    def _read_intent_file(self, intent_path: Path) -> IntentFile:
        """Load an intent log.

        Missing or unparseable files read as empty. Entries that fail
        validation are dropped one by one so the valid intents survive.
        """
        if not intent_path.is_file():
            return IntentFile()

        try:
            content = intent_path.read_bytes()
        except OSError as e:
            raise IntentStoreError(f"Cannot read {intent_path}: {e}") from e

        try:
            data = json.loads(content.decode("utf-8"))
        except ValueError as e:
            logger.warning("intent_store.corrupt_file",
                           path=str(intent_path),
                           error=str(e))
            return IntentFile()

        entries = data.get("intents") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("intent_store.corrupt_file",
                           path=str(intent_path),
                           error="expected an object with an intents list")
            return IntentFile()

        intents: List[Intent] = []
        for index, entry in enumerate(entries):
            try:
                intents.append(Intent.model_validate(entry))
            except ValidationError as e:
                logger.warning("intent_store.invalid_entry",
                               path=str(intent_path),
                               index=index,
                               error=str(e))
        return IntentFile(intents=intents)

    def _write_intent_file(self, intent_path: Path, intent_file: IntentFile) -> None:
        """Write the full log through a temporary file and an atomic replace"""
        try:
            intent_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(intent_path.parent),
                                            prefix=intent_path.name,
                                            suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(intent_file.model_dump(), f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, intent_path)
            except Exception:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise IntentStoreError(f"Cannot write {intent_path}: {e}") from e

    def save(self,
             file_path: Union[str, Path],
             prompt: str,
             user: str,
             overrides: Optional[List[str]] = None,
             model: Optional[str] = None) -> Intent:
        """Append a new intent to the log of file_path and return it.

        Args:
            file_path: Tracked source path
            prompt: Why the change is being made
            user: Who is making it
            overrides: Ids from this file's history superseded by the new intent
            model: AI agent involved, if any

        Raises:
            DanglingOverrideError: an override id is not in the history
            IntentStoreError: storage could not be read or written
        """
        intent_path = self.intent_file_path(file_path)

        with self._lock_for(intent_path):
            intent_file = self._read_intent_file(intent_path)

            known = set(intent_file.ids())
            missing = [oid for oid in (overrides or []) if oid not in known]
            if missing:
                raise DanglingOverrideError(str(file_path), missing)

            intent = Intent(
                user=user,
                prompt=prompt,
                model=model,
                overrides=overrides or [],
            )
            intent_file.intents.append(intent)
            self._write_intent_file(intent_path, intent_file)

        logger.info("intent_store.saved",
                    file_path=str(file_path),
                    intent_id=intent.id,
                    total=len(intent_file.intents))
        return intent

    def history(self, file_path: Union[str, Path]) -> List[Intent]:
        """Stored intents for file_path in append order"""
        return self._read_intent_file(self.intent_file_path(file_path)).intents

    def _source_path(self, intent_path: Path) -> str:
        relative = intent_path.relative_to(self.storage_root).as_posix()
        return relative[: -len(INTENT_SUFFIX)]

    def search(self, query: str, limit: int) -> List[SearchResult]:
        """Find intents whose prompt contains query (case-insensitive).

        Walks the storage tree with an explicit stack in sorted order and stops
        as soon as limit matches are collected. Matches are returned newest
        first.
        """
        results: List[SearchResult] = []
        if limit <= 0 or not self.exists():
            return results

        needle = query.lower()
        pending = [self.storage_root]

        try:
            while pending and len(results) < limit:
                directory = pending.pop()
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
                subdirs = []

                for entry in entries:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(Path(entry.path))
                        continue
                    if not (entry.is_file() and entry.name.endswith(INTENT_SUFFIX)):
                        continue

                    intent_path = Path(entry.path)
                    try:
                        intent_file = self._read_intent_file(intent_path)
                    except IntentStoreError as e:
                        logger.warning("intent_store.search_skipped",
                                       path=str(intent_path),
                                       error=str(e))
                        continue

                    source = self._source_path(intent_path)
                    for intent in intent_file.intents:
                        if needle in intent.prompt.lower():
                            results.append(SearchResult(**intent.model_dump(), file_path=source))
                            if len(results) >= limit:
                                break
                    if len(results) >= limit:
                        break

                # Reversed so the stack pops subdirectories in sorted order
                pending.extend(reversed(subdirs))
        except OSError as e:
            raise IntentStoreError(f"Cannot search {self.storage_root}: {e}") from e

        results.sort(key=lambda r: parse_timestamp(r.timestamp), reverse=True)

        logger.debug("intent_store.search_complete",
                     query=query,
                     limit=limit,
                     matches=len(results))
        return results[:limit]
