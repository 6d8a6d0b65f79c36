from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Literal, Optional

from fitcore.models.metrics import UserMetrics

AchievementCategory = Literal["workout_mastery", "progress", "consistency", "goals", "social", "special"]
ProgressFn = Callable[[UserMetrics], int]


@dataclass(frozen=True)
class AchievementDefinition:
    """Static catalog entry. `progress_fn` is pure and returns 0..100."""

    id: int
    title: str
    description: str
    category: AchievementCategory
    coin_reward: int
    progress_fn: ProgressFn


@dataclass
class AchievementProgressRecord:
    """Stored progress for one user and achievement. `unlocked_at` is sticky."""

    user_id: str
    achievement_id: int
    progress: int = 0
    unlocked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_unlocked(self) -> bool:
        return self.unlocked_at is not None

    def to_dict(self) -> dict:
        return {
            "achievement_id": self.achievement_id,
            "progress": self.progress,
            "unlocked_at": self.unlocked_at.isoformat() if self.unlocked_at else None,
        }


@dataclass
class EvaluationResult:
    """Outcome of one evaluation run."""

    user_id: str
    newly_unlocked: List[int] = field(default_factory=list)
    failed: Dict[int, str] = field(default_factory=dict)
    degraded_metrics: List[str] = field(default_factory=list)
    evaluated: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class AchievementStats:
    total: int
    completed: int
    in_progress: int
    completion_percentage: int
