"""
Achievement progress storage.

Records are keyed by (user_id, achievement_id). Writes go through
`apply()`, a read-modify-write performed atomically per record: under a lock
in memory, inside one transaction with a row lock in SQL.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from fitcore.core.errors import ConflictError
from fitcore.models.achievement import AchievementProgressRecord

logger = logging.getLogger("fitcore")

RecordUpdate = Callable[[Optional[AchievementProgressRecord]], AchievementProgressRecord]


class InMemoryAchievementStore:
    """Dictionary-backed progress records."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[Tuple[str, int], AchievementProgressRecord] = {}

    def insert_record(self, record: AchievementProgressRecord) -> None:
        key = (record.user_id, record.achievement_id)
        with self._lock:
            if key in self._records:
                raise ConflictError(f"achievement {record.achievement_id} already seeded for {record.user_id}")
            self._records[key] = replace(record)

    def apply(
        self, user_id: str, achievement_id: int, update: RecordUpdate
    ) -> Tuple[Optional[AchievementProgressRecord], AchievementProgressRecord]:
        key = (user_id, achievement_id)
        with self._lock:
            current = self._records.get(key)
            previous = replace(current) if current else None
            merged = update(previous)
            self._records[key] = replace(merged)
            return previous, replace(merged)

    def get_record(self, user_id: str, achievement_id: int) -> Optional[AchievementProgressRecord]:
        with self._lock:
            record = self._records.get((user_id, achievement_id))
            return replace(record) if record else None

    def get_records(self, user_id: str) -> List[AchievementProgressRecord]:
        with self._lock:
            rows = [replace(r) for (uid, _), r in self._records.items() if uid == user_id]
        return sorted(rows, key=lambda r: r.achievement_id)

    def count_completed(self, user_id: str) -> int:
        return sum(1 for r in self.get_records(user_id) if r.progress == 100)

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self._lock:
            self._records.clear()


def get_achievement_store():
    """
    Get the appropriate achievement store implementation.

    - SQL store if DATABASE_URL is configured and reachable
    - In-memory otherwise
    """
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        try:
            from fitcore.core.database import check_connection
            from fitcore.features.achievements.store_sql import SqlAchievementStore

            if check_connection():
                return SqlAchievementStore()
            logger.warning("[achievement_store] database unavailable, falling back to in-memory")
        except Exception as e:
            logger.warning("[achievement_store] failed to initialize SQL store: %s", e)

    return InMemoryAchievementStore()


# Global store instance (lazy initialization)
_store_instance = None


def get_store():
    global _store_instance
    if _store_instance is None:
        _store_instance = get_achievement_store()
    return _store_instance


def reset_store():
    """
    Reset the store instance.

    FOR TESTING ONLY - forces re-initialization on next get_store() call.
    """
    global _store_instance
    _store_instance = None
