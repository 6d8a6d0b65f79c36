"""
Generated plan persistence.

One stored workout per plan day, one row per planned set. Writes are issued
day by day; if any write fails, every workout already created in the same run
is deleted again before PlanPersistenceError is raised.
"""

from __future__ import annotations

import logging
import os
import threading
import uuid
from typing import Dict, List

from sqlalchemy import delete, insert, select

from fitcore.core.database import check_connection, get_db_session, workout_sets, workouts
from fitcore.core.errors import PlanPersistenceError
from fitcore.core.logging import log_event
from fitcore.models.plan import GeneratedWorkoutPlan, WorkoutDay

logger = logging.getLogger("fitcore")

DEFAULT_TITLE = "Generated Workout Plan"
SET_ORDER_STRIDE = 100


def day_title(title: str, day: WorkoutDay, day_number: int) -> str:
    focus = day.focus[:1].upper() + day.focus[1:]
    return f"{title} - {focus} (Day {day_number})"


def day_description(day: WorkoutDay, recommendation: str) -> str:
    return f"Auto-generated {day.focus} workout. {recommendation}"


def set_rows(workout_id: str, day: WorkoutDay) -> List[dict]:
    """Explode a day into per-set rows; set_order = exercise_index * 100 + set_index."""
    rows = []
    for exercise_index, exercise in enumerate(day.exercises):
        for set_index in range(exercise.sets):
            rows.append({
                "workout_id": workout_id,
                "exercise_id": exercise.catalog_id,
                "exercise_name": exercise.name,
                "exercise_bodypart": exercise.body_part,
                "exercise_target": exercise.target,
                "exercise_equipment": exercise.equipment,
                "planned_reps": exercise.rep_range.label(),
                "rep_unit": exercise.rep_range.unit,
                "rest_time": exercise.rest_seconds,
                "set_order": exercise_index * SET_ORDER_STRIDE + set_index,
            })
    return rows


class InMemoryWorkoutStore:

    def __init__(self):
        self._lock = threading.Lock()
        self._workouts: Dict[str, dict] = {}
        self._sets: Dict[str, List[dict]] = {}

    def create_workout(self, user_id: str, title: str, description: str) -> str:
        workout_id = str(uuid.uuid4())
        with self._lock:
            self._workouts[workout_id] = {
                "workout_id": workout_id,
                "user_id": user_id,
                "title": title,
                "description": description,
            }
            self._sets[workout_id] = []
        return workout_id

    def insert_sets(self, workout_id: str, rows: List[dict]) -> None:
        with self._lock:
            if workout_id not in self._workouts:
                raise KeyError(workout_id)
            self._sets[workout_id].extend(dict(row) for row in rows)

    def delete_workouts(self, workout_ids: List[str]) -> None:
        with self._lock:
            for workout_id in workout_ids:
                self._workouts.pop(workout_id, None)
                self._sets.pop(workout_id, None)

    def get_workouts(self, user_id: str) -> List[dict]:
        with self._lock:
            return [dict(w) for w in self._workouts.values() if w["user_id"] == user_id]

    def get_sets(self, workout_id: str) -> List[dict]:
        with self._lock:
            return sorted((dict(r) for r in self._sets.get(workout_id, [])), key=lambda r: r["set_order"])

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self._lock:
            self._workouts.clear()
            self._sets.clear()


class SqlWorkoutStore:

    @staticmethod
    def create_workout(user_id: str, title: str, description: str) -> str:
        workout_id = str(uuid.uuid4())
        with get_db_session() as session:
            session.execute(
                insert(workouts).values(
                    workout_id=workout_id,
                    user_id=user_id,
                    title=title,
                    description=description,
                )
            )
        return workout_id

    @staticmethod
    def insert_sets(workout_id: str, rows: List[dict]) -> None:
        if not rows:
            return
        with get_db_session() as session:
            session.execute(insert(workout_sets), rows)

    @staticmethod
    def delete_workouts(workout_ids: List[str]) -> None:
        if not workout_ids:
            return
        with get_db_session() as session:
            session.execute(delete(workout_sets).where(workout_sets.c.workout_id.in_(workout_ids)))
            session.execute(delete(workouts).where(workouts.c.workout_id.in_(workout_ids)))

    @staticmethod
    def get_workouts(user_id: str) -> List[dict]:
        with get_db_session() as session:
            rows = session.execute(
                select(workouts).where(workouts.c.user_id == user_id).order_by(workouts.c.created_at)
            ).mappings().all()
            return [dict(row) for row in rows]

    @staticmethod
    def get_sets(workout_id: str) -> List[dict]:
        with get_db_session() as session:
            rows = session.execute(
                select(workout_sets)
                .where(workout_sets.c.workout_id == workout_id)
                .order_by(workout_sets.c.set_order)
            ).mappings().all()
            return [dict(row) for row in rows]

    @staticmethod
    def clear() -> None:
        """FOR TESTING ONLY."""
        with get_db_session() as session:
            session.execute(delete(workout_sets))
            session.execute(delete(workouts))


def get_workout_store():
    """SQL store when DATABASE_URL is configured and reachable, in-memory otherwise."""
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        try:
            if check_connection():
                return SqlWorkoutStore()
            logger.warning("[workout_store] database unavailable, falling back to in-memory")
        except Exception as e:
            logger.warning("[workout_store] failed to initialize SQL store: %s", e)

    return InMemoryWorkoutStore()


_store_instance = None


def get_store():
    global _store_instance
    if _store_instance is None:
        _store_instance = get_workout_store()
    return _store_instance


def reset_store():
    """FOR TESTING ONLY - forces re-initialization on next get_store() call."""
    global _store_instance
    _store_instance = None


def persist_workout_plan(
    user_id: str,
    plan: GeneratedWorkoutPlan,
    *,
    store=None,
    title: str = DEFAULT_TITLE,
) -> List[str]:
    """Store every plan day; returns the created workout ids in day order."""
    store = store if store is not None else get_store()
    created: List[str] = []
    recommendation = plan.notes.recommendation

    for day_number, day in enumerate(plan.days, start=1):
        try:
            workout_id = store.create_workout(
                user_id, day_title(title, day, day_number), day_description(day, recommendation)
            )
            created.append(workout_id)
            store.insert_sets(workout_id, set_rows(workout_id, day))
        except Exception as e:
            message = f"Failed to store plan day {day_number}"
            if not _rollback(store, user_id, created, day_number, e):
                message += "; rollback incomplete"
            raise PlanPersistenceError(message, rolled_back_ids=created) from e

    log_event(
        "info",
        "plan.persisted",
        request_id=None,
        user_id=user_id,
        event_type="plan_persist",
        extra={"workout_ids": created, "days": len(created)},
    )
    return created


def _rollback(store, user_id: str, created: List[str], day_number: int, error: Exception) -> bool:
    log_event(
        "error",
        "plan.persist_rollback",
        request_id=None,
        user_id=user_id,
        event_type="plan_persist",
        error_code="plan_persist_failed",
        extra={"failed_day": day_number, "rolled_back_ids": list(created), "error": str(error)},
    )
    if not created:
        return True
    try:
        store.delete_workouts(list(created))
    except Exception:
        logger.exception("plan rollback failed for workouts %s", created)
        return False
    return True
