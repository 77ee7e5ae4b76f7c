"""
Client-side cache of past analyses.

Stands in for the browser's localStorage: one JSON document on disk holds
string values by key, and the result list lives under a single key. Every
mutation rewrites the whole list; there is no server-side copy.
"""
import json
import logging
import os
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.constants import STORAGE_KEY, AnalysisStatus
from app.models.analysis import AnalysisItem, MediaAnalysisResult

logger = logging.getLogger(__name__)


class LocalStorage:
    """Synchronous string key/value store persisted as a JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[Cache] Unreadable storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class ResultCache:
    """
    Persistent list of AnalysisItem records.

    Items are kept newest first. Only one writer (the submitting event loop
    thread) is expected; concurrent processes sharing a file are not
    coordinated.
    """

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def _read(self) -> List[AnalysisItem]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("stored results are not a list")
            return [AnalysisItem.model_validate(entry) for entry in entries]
        except (ValueError, ValidationError) as e:
            logger.error(f"[Cache] Error loading saved results: {e}")
            return []

    def _write(self, items: List[AnalysisItem]) -> None:
        self.storage.set_item(
            self.key, json.dumps([item.to_storage() for item in items])
        )

    def append(self, item: AnalysisItem) -> AnalysisItem:
        """
        Insert ``item`` at the head of the list.

        Raises:
            ValueError: If an item with the same id is already stored
        """
        items = self._read()
        if any(existing.id == item.id for existing in items):
            raise ValueError(f"Duplicate analysis id: {item.id}")
        self._write([item] + items)
        logger.info(f"[Cache] Saved {item.file_name} ({item.status.value})")
        return item

    def list_all(self) -> List[AnalysisItem]:
        """All items, newest timestamp first; equal timestamps keep insertion recency."""
        return sorted(self._read(), key=lambda item: item.timestamp, reverse=True)

    def get(self, item_id: str) -> Optional[AnalysisItem]:
        for item in self._read():
            if item.id == item_id:
                return item
        return None

    def update(
        self,
        item_id: str,
        status: AnalysisStatus,
        result: Optional[MediaAnalysisResult] = None,
        error: Optional[str] = None,
    ) -> AnalysisItem:
        """
        Move a stored item forward to ``status``.

        Raises:
            KeyError: If no item has ``item_id``
            ValueError: If the transition is not allowed or the payload is invalid
        """
        items = self._read()
        for index, item in enumerate(items):
            if item.id == item_id:
                updated = item.transition(status, result=result, error=error)
                items[index] = updated
                self._write(items)
                return updated
        raise KeyError(item_id)

    def delete(self, item_id: str) -> bool:
        items = self._read()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._write(remaining)
        logger.info(f"[Cache] Deleted {item_id}")
        return True

    def clear(self) -> None:
        self.storage.remove_item(self.key)
