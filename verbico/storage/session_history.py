# verbico/storage/session_history.py
"""
Capped, persisted list of recent translations (newest first).

The whole list is stored as one JSON blob {"translations": [...]} under a
fixed key and rewritten on every change.
"""

import json
import logging
import threading
from typing import Optional

from verbico.models.types import TranslationRecord
from verbico.storage.history_db import HistoryDB

logger = logging.getLogger(__name__)

HISTORY_STORAGE_KEY = "translationHistory"
MAX_HISTORY_ENTRIES = 10


class SessionHistory:
    """
    Recent translations backed by a HistoryDB blob.

    Example:
        history = SessionHistory(HistoryDB(path))
        history.load()
        history.add(record)
        for record in history.entries: ...
    """

    def __init__(
        self,
        db: HistoryDB,
        max_entries: int = MAX_HISTORY_ENTRIES,
        storage_key: str = HISTORY_STORAGE_KEY,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.db = db
        self.max_entries = max_entries
        self.storage_key = storage_key
        self._records: list[TranslationRecord] = []
        self._lock = threading.Lock()

    @property
    def entries(self) -> list[TranslationRecord]:
        """Snapshot of the records, newest first."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def load(self) -> list[TranslationRecord]:
        """Replace in-memory records with the persisted blob."""
        raw = self.db.load_blob(self.storage_key)
        records = self._decode(raw) if raw else []
        with self._lock:
            self._records = records[:self.max_entries]
            return list(self._records)

    def add(self, record: TranslationRecord) -> None:
        """Prepend record, evicting the oldest beyond capacity, and persist."""
        with self._lock:
            self._records = [record] + self._records[:self.max_entries - 1]
            self._persist()

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._persist()

    def find(self, record_id: str) -> Optional[TranslationRecord]:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def _persist(self) -> None:
        # Caller holds self._lock
        blob = json.dumps(
            {"translations": [r.to_dict() for r in self._records]},
            ensure_ascii=False,
        )
        if not self.db.save_blob(self.storage_key, blob):
            logger.warning("History could not be persisted; keeping in-memory copy")

    def _decode(self, raw: str) -> list[TranslationRecord]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored history is not valid JSON, ignoring: %s", e)
            return []

        items = data.get("translations") if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.warning("Stored history has no translations list, ignoring")
            return []

        records = []
        for item in items:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object history item")
                continue
            try:
                records.append(TranslationRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed history item: %s", e)
        return records
