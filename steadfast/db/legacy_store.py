"""
Flat key-value store used before the relational schema existed.

Values are strings (JSON-encoded blobs for collections) kept together in a
single JSON file on disk, keyed by names such as ``@habits``.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from steadfast.config import get_legacy_store_path

logger = logging.getLogger(__name__)

# Keys written by the legacy storage layer
HABITS_KEY = "@habits"
HABIT_LOGS_KEY = "@habit_logs"
GRATITUDE_KEY = "@gratitude_entries"
PRAYERS_KEY = "@christian_habit_tracker:prayers"
MIGRATION_COMPLETE_KEY = "@migration_complete"


class LegacyKeyValueStore:
    """JSON-file backed string store with get/set/remove semantics."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_legacy_store_path()
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Legacy store at {self.path} is not a JSON object")
        return data

    def _dump(self, data: dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        """Get the raw string stored under ``key``."""
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str):
        """Store a string under ``key``."""
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)
        logger.debug(f"Legacy store set {key}")

    def remove_item(self, key: str) -> bool:
        with self._lock:
            data = self._load()
            if key not in data:
                return False
            del data[key]
            self._dump(data)
            return True

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._load())
