from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Literal

MetricCategory = Literal[
    "sessions",
    "sets",
    "templates",
    "records",
    "profile",
    "social",
    "achievements",
    "muscle_groups",
]


@dataclass(frozen=True)
class UserMetrics:
    """
    Point-in-time snapshot of a user's activity. Recomputed on every call,
    never persisted. Categories whose query failed are listed in `degraded`
    and contribute zeros.
    """

    # Sessions
    total_workouts: int = 0
    total_minutes: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    early_workouts: int = 0  # started before 07:00
    late_workouts: int = 0  # started at or after 21:00
    weekend_workouts: int = 0
    average_workout_minutes: int = 0
    current_month_weekend_completion: int = 0  # 0..100
    consecutive_weeks_with_workout: int = 0

    # Sets
    total_volume: int = 0  # sum of reps x weight
    total_sets: int = 0
    unique_exercises: int = 0

    # Templates and records
    workout_templates: int = 0
    personal_bests: int = 0
    unique_exercises_with_prs: int = 0
    max_pr_increase: float = 0.0  # percent

    # Profile
    is_advanced_level: bool = False

    # Social
    social_posts: int = 0
    social_comments: int = 0
    social_stories: int = 0
    social_messages: int = 0
    followers_count: int = 0
    following_count: int = 0
    max_likes_on_post: int = 0
    total_reactions: int = 0
    emoji_comments: int = 0

    # Gamification and coverage
    completed_achievements: int = 0
    muscle_groups_this_week: int = 0

    degraded: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self.__dataclass_fields__ if name != "degraded"}
        data["degraded"] = sorted(self.degraded)
        return data
