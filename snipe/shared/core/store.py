"""JSON object file shared by the snipe stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Tests point this at a temp directory through the environment
CONFIG_DIR = Path(os.environ.get("SNIPE_CONFIG_DIR", Path.home() / ".snipe"))


class JSONFileStore:
    """A JSON object on disk, split into named top-level sections."""

    def __init__(self, file_path: Path):
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def read(self) -> dict[str, Any]:
        """The stored object; missing, unreadable or non-object files read as empty."""
        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable file %s: %s", self._file_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self._file_path)
            return {}
        return data

    def write(self, data: dict[str, Any]) -> None:
        """Replace the file contents atomically, readable by the owner only."""
        directory = self._file_path.parent
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=directory,
            prefix=".tmp_",
            suffix=".json",
            delete=False,
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                json.dump(data, tmp, indent=2)
            tmp_path.chmod(0o600)
            tmp_path.replace(self._file_path)
        except Exception:
            # Nothing half-written stays next to the target
            tmp_path.unlink(missing_ok=True)
            raise

    def section(self, key: str) -> dict[str, Any] | None:
        """A top-level object stored under `key`, or None when absent or not an object."""
        value = self.read().get(key)
        if value is not None and not isinstance(value, dict):
            logger.warning("Ignoring %r in %s: expected a JSON object", key, self._file_path)
            return None
        return value

    def set_section(self, key: str, value: Any) -> None:
        """Store `value` under `key`, keeping the other sections."""
        data = self.read()
        data[key] = value
        self.write(data)
