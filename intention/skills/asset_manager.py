"""
File write and text substitution for tracked source files.
Path: intention/skills/asset_manager.py

Content is always written through a temporary file and an atomic replace, and
a substitution that finds nothing never touches the file.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import structlog

logger = structlog.get_logger()

@dataclass
class AssetResult:
    """Result of an asset operation"""
    success: bool
    path: Path
    replacements: int = 0
    error: Optional[str] = None

class AssetManager:
    """Writes and edits files under a project root"""

    def __init__(self, project_root: Union[str, Path] = "."):
        self.project_root = Path(project_root).resolve()

    def _get_absolute_path(self, path: Union[str, Path]) -> Path:
        """Resolve path against the project root.

        Raises:
            ValueError: the resolved path is outside the project root
        """
        resolved = (self.project_root / Path(path)).resolve()
        if resolved != self.project_root and self.project_root not in resolved.parents:
            raise ValueError(f"Path is outside the project root {self.project_root}: {path}")
        return resolved

    def exists(self, path: Union[str, Path]) -> bool:
        try:
            return self._get_absolute_path(path).is_file()
        except ValueError:
            return False

    def _atomic_write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def write(self, file_path: Union[str, Path], content: str) -> AssetResult:
        """Create or overwrite a file with content"""
        try:
            path = self._get_absolute_path(file_path)
        except ValueError as e:
            logger.error("asset.path_rejected", path=str(file_path), error=str(e))
            return AssetResult(success=False, path=Path(file_path), error=str(e))

        try:
            self._atomic_write(path, content)
        except OSError as e:
            logger.error("asset.write_failed", path=str(path), error=str(e))
            return AssetResult(success=False, path=path, error=str(e))

        logger.info("asset.write_success", path=str(path), size=len(content))
        return AssetResult(success=True, path=path)

    def replace(self,
                file_path: Union[str, Path],
                old_content: str,
                new_content: str,
                replace_all: bool = False) -> AssetResult:
        """Replace the first (or every) occurrence of old_content"""
        try:
            path = self._get_absolute_path(file_path)
        except ValueError as e:
            logger.error("asset.path_rejected", path=str(file_path), error=str(e))
            return AssetResult(success=False, path=Path(file_path), error=str(e))

        if not path.is_file():
            return AssetResult(success=False, path=path, error=f"File not found: {file_path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("asset.read_failed", path=str(path), error=str(e))
            return AssetResult(success=False, path=path, error=str(e))

        count = content.count(old_content) if old_content else 0
        if count == 0:
            error = ("No matches found for the specified text" if replace_all
                     else "The specified text was not found in the file")
            logger.info("asset.no_match", path=str(path))
            return AssetResult(success=False, path=path, error=error)

        if replace_all:
            updated = content.replace(old_content, new_content)
        else:
            updated = content.replace(old_content, new_content, 1)
            count = 1

        try:
            self._atomic_write(path, updated)
        except OSError as e:
            logger.error("asset.write_failed", path=str(path), error=str(e))
            return AssetResult(success=False, path=path, error=str(e))

        logger.info("asset.replace_success", path=str(path), replacements=count)
        return AssetResult(success=True, path=path, replacements=count)
