"""
Achievement catalog.

Every achievement is a keyed entry `id -> pure progress function` over a
UserMetrics snapshot. Functions return 0..100. Placeholders whose driving data
is not tracked (goals, schedules, locations, body weight) are explicit
functions returning 0 rather than missing entries.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from fitcore.features.metrics.aggregator import MUSCLE_GROUPS
from fitcore.models.achievement import AchievementCategory, AchievementDefinition, ProgressFn
from fitcore.models.metrics import UserMetrics


def ratio_progress(value: float, target: float) -> int:
    """min(value / target * 100, 100), rounded half up and clamped to 0..100."""
    if target <= 0:
        return 0
    pct = min(value / target * 100, 100)
    return clamp_progress(math.floor(pct + 0.5))


def clamp_progress(value: float) -> int:
    return int(max(0, min(100, value)))


def count_towards(field: str, target: float) -> ProgressFn:
    def progress(metrics: UserMetrics) -> int:
        return ratio_progress(getattr(metrics, field), target)

    progress.__name__ = f"{field}_towards_{target:g}"
    return progress


def reached(field: str, threshold: float = 1) -> ProgressFn:
    def progress(metrics: UserMetrics) -> int:
        return 100 if getattr(metrics, field) >= threshold else 0

    progress.__name__ = f"{field}_reached_{threshold:g}"
    return progress


def flag(field: str) -> ProgressFn:
    def progress(metrics: UserMetrics) -> int:
        return 100 if getattr(metrics, field) else 0

    progress.__name__ = f"{field}_flag"
    return progress


def passthrough(field: str) -> ProgressFn:
    def progress(metrics: UserMetrics) -> int:
        return clamp_progress(getattr(metrics, field))

    progress.__name__ = f"{field}_value"
    return progress


def not_tracked(metrics: UserMetrics) -> int:
    return 0


def _entry(
    achievement_id: int,
    title: str,
    description: str,
    category: AchievementCategory,
    coin_reward: int,
    progress_fn: ProgressFn,
) -> AchievementDefinition:
    return AchievementDefinition(
        id=achievement_id,
        title=title,
        description=description,
        category=category,
        coin_reward=coin_reward,
        progress_fn=progress_fn,
    )


_DEFINITIONS = (
    # Workout mastery
    _entry(1, "First Rep", "Complete your first workout session", "workout_mastery", 10, reached("total_workouts")),
    _entry(2, "Consistency Rookie", "Reach a 7 day workout streak", "workout_mastery", 25, count_towards("current_streak", 7)),
    _entry(3, "Fitness Enthusiast", "Complete 50 workout sessions", "workout_mastery", 50, count_towards("total_workouts", 50)),
    _entry(4, "Workout Warrior", "Complete 100 workout sessions", "workout_mastery", 100, count_towards("total_workouts", 100)),
    _entry(5, "Routine Expert", "Create 10 workout templates", "workout_mastery", 50, count_towards("workout_templates", 10)),
    _entry(7, "Exercise Explorer", "Perform 50 different exercises", "workout_mastery", 75, count_towards("unique_exercises", 50)),
    _entry(10, "Custom Crafter", "Create 5 workout templates", "workout_mastery", 25, count_towards("workout_templates", 5)),
    # Progress
    _entry(11, "Tracker Beginner", "Log your first workout session", "progress", 10, reached("total_workouts")),
    _entry(12, "Volume Victor", "Lift 10,000 kg in total", "progress", 50, count_towards("total_volume", 10_000)),
    _entry(13, "Strength Seeker", "Set 5 personal bests", "progress", 25, count_towards("personal_bests", 5)),
    _entry(14, "Endurance Ace", "Train for 100 hours", "progress", 75, count_towards("total_minutes", 6_000)),
    _entry(16, "Visual Vanguard", "Share 10 progress posts", "progress", 25, count_towards("social_posts", 10)),
    _entry(17, "Record Breaker", "Achieve 20 personal goals", "progress", 100, not_tracked),
    _entry(18, "Workout Historian", "Review your workout history", "progress", 10, not_tracked),
    # Consistency
    _entry(19, "Streak Starter", "Train 3 days in a row", "consistency", 10, count_towards("longest_streak", 3)),
    _entry(20, "Week Warrior", "Reach a 7 day workout streak", "consistency", 25, count_towards("current_streak", 7)),
    _entry(21, "Month of Motivation", "Reach a 30 day workout streak", "consistency", 100, count_towards("current_streak", 30)),
    _entry(22, "Unstoppable", "Reach a 60 day workout streak", "consistency", 150, count_towards("current_streak", 60)),
    _entry(23, "Habit Hero", "Reach a 100 day workout streak", "consistency", 250, count_towards("current_streak", 100)),
    _entry(24, "Early Bird", "Complete 10 workouts before 7 AM", "consistency", 50, count_towards("early_workouts", 10)),
    _entry(25, "Night Owl", "Complete 30 workouts after 9 PM", "consistency", 75, count_towards("late_workouts", 30)),
    _entry(26, "Weekend Warrior", "Work out every weekend this month", "consistency", 50, passthrough("current_month_weekend_completion")),
    _entry(27, "Routine Ritualist", "Keep a fixed training schedule", "consistency", 50, not_tracked),
    _entry(28, "Consistency Champion", "Complete 200 workout sessions", "consistency", 200, count_towards("total_workouts", 200)),
    # Goals and milestones
    _entry(29, "Goal Setter", "Set your first fitness goal", "goals", 10, not_tracked),
    _entry(30, "Goal Getter", "Achieve your first fitness goal", "goals", 25, not_tracked),
    _entry(31, "Lift Legend", "Improve a personal record by 50%", "goals", 100, reached("max_pr_increase", 50)),
    _entry(32, "Endurance Elite", "Train for 100 hours", "goals", 75, count_towards("total_minutes", 6_000)),
    _entry(33, "Weight Wizard", "Reach your target body weight", "goals", 100, not_tracked),
    _entry(34, "Fitness Veteran", "Reach the Advanced experience level", "goals", 100, flag("is_advanced_level")),
    _entry(35, "Elite Athlete", "Max out progress in every muscle area", "goals", 200, not_tracked),
    # Social
    _entry(36, "First Post", "Share your first post", "social", 10, reached("social_posts")),
    _entry(37, "Community Contributor", "Share 20 posts", "social", 50, count_towards("social_posts", 20)),
    _entry(38, "Inspiration Icon", "Get 100 likes on a single post", "social", 100, count_towards("max_likes_on_post", 100)),
    _entry(39, "Engagement Expert", "Write 50 comments", "social", 50, count_towards("social_comments", 50)),
    _entry(40, "Storyteller", "Create 10 stories", "social", 25, count_towards("social_stories", 10)),
    _entry(41, "Follower Fanatic", "Follow 50 people", "social", 25, count_towards("following_count", 50)),
    _entry(42, "Chat Champion", "Send 100 messages", "social", 50, count_towards("social_messages", 100)),
    _entry(43, "Location Scout", "Tag a location in your posts", "social", 25, not_tracked),
    _entry(44, "Social Star", "Reach 500 followers", "social", 150, count_towards("followers_count", 500)),
    _entry(48, "Reaction Ranger", "React to 50 posts", "social", 25, count_towards("total_reactions", 50)),
    _entry(50, "Emoji Enthusiast", "Write 25 comments with emoji", "social", 25, count_towards("emoji_comments", 25)),
    # Special trophies
    _entry(45, "Iron Titan", "Lift 100,000 kg in total", "special", 150, count_towards("total_volume", 100_000)),
    _entry(46, "Endurance Emperor", "Train for 500 hours", "special", 200, count_towards("total_minutes", 30_000)),
    _entry(47, "Consistency Conqueror", "Work out every week for a full year", "special", 250, count_towards("consecutive_weeks_with_workout", 52)),
    _entry(49, "PR Machine", "Set personal records in 5 different exercises", "special", 50, count_towards("unique_exercises_with_prs", 5)),
    _entry(51, "Time Keeper", "Train for 1,000 hours", "special", 250, count_towards("total_minutes", 60_000)),
    _entry(54, "Fitness Icon", "Complete 40 achievements", "special", 250, count_towards("completed_achievements", 40)),
    _entry(55, "Muscle Master", "Train every major muscle group within a week", "special", 100, count_towards("muscle_groups_this_week", len(MUSCLE_GROUPS))),
    _entry(56, "Weight Lifting Legend", "Lift 1,000,000 kg in total", "special", 250, count_towards("total_volume", 1_000_000)),
)

ACHIEVEMENTS: Mapping[int, AchievementDefinition] = MappingProxyType({d.id: d for d in _DEFINITIONS})

# Progress function per achievement id; the engine evaluates these by default
PROGRESS_FUNCTIONS: Mapping[int, Callable[[UserMetrics], int]] = MappingProxyType(
    {achievement_id: definition.progress_fn for achievement_id, definition in ACHIEVEMENTS.items()}
)

PLACEHOLDER_IDS = frozenset(d.id for d in _DEFINITIONS if d.progress_fn is not_tracked)


def get_definition(achievement_id: int) -> AchievementDefinition:
    return ACHIEVEMENTS[achievement_id]


def coin_rewards() -> Dict[int, int]:
    return {d.id: d.coin_reward for d in _DEFINITIONS}
