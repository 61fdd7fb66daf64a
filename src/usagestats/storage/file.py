"""JSON file backed key-value storage.

The whole store is one JSON object. A missing or unreadable file reads as
empty so a damaged file never blocks reporting; the next write replaces it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from usagestats.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key-value storage persisted to a single JSON file."""

    def __init__(self, path: Path):
        """Initialize file storage.

        Args:
            path: JSON file to read and write. Created on first write.
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Unreadable storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.debug(f"Storage file {self.path} does not hold an object, ignoring")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
