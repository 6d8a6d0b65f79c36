"""
SQL-backed achievement store.

Maintains identical interface to InMemoryAchievementStore. The
(user_id, achievement_id) unique constraint rejects duplicate seeding; apply()
locks the row for the duration of the merge.
"""

from typing import List, Optional, Tuple

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from fitcore.core.clock import ensure_utc
from fitcore.core.database import get_db_session, user_achievements
from fitcore.core.errors import ConflictError
from fitcore.features.achievements.store import RecordUpdate
from fitcore.models.achievement import AchievementProgressRecord


def _to_record(row) -> AchievementProgressRecord:
    return AchievementProgressRecord(
        user_id=row.user_id,
        achievement_id=row.achievement_id,
        progress=int(row.progress),
        unlocked_at=ensure_utc(row.unlocked_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _key(user_id: str, achievement_id: int):
    return and_(user_achievements.c.user_id == user_id, user_achievements.c.achievement_id == achievement_id)


class SqlAchievementStore:

    @staticmethod
    def insert_record(record: AchievementProgressRecord) -> None:
        try:
            with get_db_session() as session:
                session.execute(
                    insert(user_achievements).values(
                        user_id=record.user_id,
                        achievement_id=record.achievement_id,
                        progress=record.progress,
                        unlocked_at=record.unlocked_at,
                    )
                )
        except IntegrityError as exc:
            raise ConflictError(
                f"achievement {record.achievement_id} already seeded for {record.user_id}"
            ) from exc

    @staticmethod
    def apply(
        user_id: str, achievement_id: int, update_fn: RecordUpdate
    ) -> Tuple[Optional[AchievementProgressRecord], AchievementProgressRecord]:
        with get_db_session() as session:
            row = session.execute(
                select(user_achievements).where(_key(user_id, achievement_id)).with_for_update()
            ).first()
            previous = _to_record(row) if row else None
            merged = update_fn(previous)
            values = {
                "progress": merged.progress,
                "unlocked_at": merged.unlocked_at,
                "updated_at": merged.updated_at or func.now(),
            }
            if previous is None:
                session.execute(insert(user_achievements).values(user_id=user_id, achievement_id=achievement_id, **values))
            else:
                session.execute(update(user_achievements).where(_key(user_id, achievement_id)).values(**values))
            return previous, merged

    @staticmethod
    def get_record(user_id: str, achievement_id: int) -> Optional[AchievementProgressRecord]:
        with get_db_session() as session:
            row = session.execute(select(user_achievements).where(_key(user_id, achievement_id))).first()
            return _to_record(row) if row else None

    @staticmethod
    def get_records(user_id: str) -> List[AchievementProgressRecord]:
        with get_db_session() as session:
            rows = session.execute(
                select(user_achievements)
                .where(user_achievements.c.user_id == user_id)
                .order_by(user_achievements.c.achievement_id)
            )
            return [_to_record(row) for row in rows]

    @staticmethod
    def count_completed(user_id: str) -> int:
        with get_db_session() as session:
            query = (
                select(func.count())
                .select_from(user_achievements)
                .where(and_(user_achievements.c.user_id == user_id, user_achievements.c.progress == 100))
            )
            return int(session.execute(query).scalar() or 0)

    @staticmethod
    def clear() -> None:
        """FOR TESTING ONLY."""
        with get_db_session() as session:
            session.execute(user_achievements.delete())
