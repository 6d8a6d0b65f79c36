from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Mapping, Optional

from fitcore.core.clock import ensure_utc, utcnow
from fitcore.core.locks import StripedLock
from fitcore.core.logging import log_event
from fitcore.features.achievements.catalog import ACHIEVEMENTS, PROGRESS_FUNCTIONS, clamp_progress
from fitcore.features.achievements.store import get_store
from fitcore.features.metrics.aggregator import MetricsAggregator
from fitcore.models.achievement import (
    AchievementDefinition,
    AchievementProgressRecord,
    AchievementStats,
    EvaluationResult,
)
from fitcore.models.metrics import UserMetrics


def merge_progress(
    existing: Optional[AchievementProgressRecord],
    *,
    user_id: str,
    achievement_id: int,
    progress: int,
    now: datetime,
) -> AchievementProgressRecord:
    """
    Combine a recomputed progress value with the stored record.

    Progress always takes the fresh value, so it can drop after history is
    deleted. The unlock timestamp is sticky: an existing one is kept as is,
    otherwise it is set to `now` once progress reaches 100.
    """
    old_unlocked_at = existing.unlocked_at if existing else None
    if old_unlocked_at is not None:
        unlocked_at = old_unlocked_at
    elif progress >= 100:
        unlocked_at = now
    else:
        unlocked_at = None
    return AchievementProgressRecord(
        user_id=user_id,
        achievement_id=achievement_id,
        progress=progress,
        unlocked_at=unlocked_at,
        updated_at=now,
    )


class AchievementEngine:
    """
    Evaluates every catalog entry against one metrics snapshot and persists
    the merged records. Evaluations for the same user are serialized in
    process; each record write is an atomic read-modify-write in the store.
    """

    def __init__(
        self,
        store=None,
        aggregator: Optional[MetricsAggregator] = None,
        definitions: Optional[Mapping[int, AchievementDefinition]] = None,
    ):
        self._store = store
        self._aggregator = aggregator
        self._definitions = definitions if definitions is not None else ACHIEVEMENTS
        if definitions is None:
            self._progress_functions = PROGRESS_FUNCTIONS
        else:
            self._progress_functions = {aid: d.progress_fn for aid, d in definitions.items()}
        self._locks = StripedLock()

    @property
    def store(self):
        return self._store if self._store is not None else get_store()

    @property
    def aggregator(self) -> MetricsAggregator:
        if self._aggregator is None:
            self._aggregator = MetricsAggregator(completed_achievements=lambda uid: self.store.count_completed(uid))
        return self._aggregator

    @property
    def definitions(self) -> Mapping[int, AchievementDefinition]:
        return self._definitions

    def _user_lock(self, user_id: str):
        return self._locks.for_key(user_id)

    def compute_progress(self, metrics: UserMetrics) -> Dict[int, int]:
        """Pure: progress per achievement id for one snapshot."""
        return {
            achievement_id: clamp_progress(progress_fn(metrics))
            for achievement_id, progress_fn in self._progress_functions.items()
        }

    def evaluate_all(self, user_id: str, *, now: Optional[datetime] = None) -> EvaluationResult:
        now = ensure_utc(now) if now else utcnow()
        with self._user_lock(user_id):
            metrics = self.aggregator.compute(user_id, now=now)
            result = EvaluationResult(user_id=user_id, degraded_metrics=sorted(metrics.degraded))
            store = self.store

            for achievement_id, progress in self.compute_progress(metrics).items():
                result.evaluated += 1
                try:
                    previous, merged = store.apply(
                        user_id,
                        achievement_id,
                        lambda existing, aid=achievement_id, p=progress: merge_progress(
                            existing, user_id=user_id, achievement_id=aid, progress=p, now=now
                        ),
                    )
                except Exception as exc:
                    result.failed[achievement_id] = str(exc) or type(exc).__name__
                    continue
                if merged.is_unlocked and (previous is None or not previous.is_unlocked):
                    result.newly_unlocked.append(achievement_id)

        if result.failed:
            log_event(
                "error",
                "achievements.write_failed",
                request_id=None,
                user_id=user_id,
                error_code="achievement_write_failed",
                extra={"failed_ids": sorted(result.failed), "count": len(result.failed)},
            )
        if result.newly_unlocked:
            log_event(
                "info",
                "achievements.unlocked",
                request_id=None,
                user_id=user_id,
                event_type="achievement_unlocked",
                extra={"achievement_ids": result.newly_unlocked},
            )
        return result

    def initialize(self, user_id: str) -> int:
        """
        Seed every definition at progress 0. Callers run this once per user;
        a second run raises ConflictError on the first duplicate row.
        """
        store = self.store
        for achievement_id in sorted(self._definitions):
            store.insert_record(AchievementProgressRecord(user_id=user_id, achievement_id=achievement_id))
        return len(self._definitions)

    def get_progress(self, user_id: str) -> List[AchievementProgressRecord]:
        return self.store.get_records(user_id)

    def get_stats(self, user_id: str) -> AchievementStats:
        records = self.store.get_records(user_id)
        total = len(records)
        completed = sum(1 for r in records if r.progress >= 100)
        in_progress = sum(1 for r in records if 0 < r.progress < 100)
        percentage = int(completed / total * 100 + 0.5) if total else 0
        return AchievementStats(
            total=total,
            completed=completed,
            in_progress=in_progress,
            completion_percentage=percentage,
        )


achievement_engine = AchievementEngine()
