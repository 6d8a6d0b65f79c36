"""
Metrics aggregation.

Builds a fresh UserMetrics snapshot from an activity source on every call.
Each sub-query is guarded on its own: a failure zeroes only that value,
marks its category as degraded and is logged; the snapshot always completes.
"""

from __future__ import annotations

import calendar
import math
import re
from collections import defaultdict
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Dict, Iterable, List, Optional, Set, TypeVar

from fitcore.core.clock import calendar_zone, ensure_utc, utcnow
from fitcore.core.logging import log_event
from fitcore.features.metrics.sources import PersonalRecordRow, SessionRecord, SetRecord, get_source
from fitcore.models.metrics import UserMetrics

T = TypeVar("T")

EARLY_HOUR = 7  # sessions starting before 07:00
LATE_HOUR = 21  # sessions starting at or after 21:00

EMOJI_PATTERN = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF\u2600-\u26FF\u2700-\u27BF]"
)

# Exercise target -> one of the 13 tracked muscle groups
MUSCLE_GROUP_MAPPING: Dict[str, str] = {
    "abs": "Abs",
    "abdominals": "Abs",
    "core": "Abs",
    "abdominis": "Abs",
    "quads": "Quads",
    "quadriceps": "Quads",
    "glutes": "Glutes",
    "gluteus": "Glutes",
    "hamstrings": "Hamstrings",
    "calves": "Calves",
    "adductors": "Adductors",
    "hip adductors": "Adductors",
    "pectorals": "Pectorals",
    "pecs": "Pectorals",
    "chest": "Pectorals",
    "lats": "Lats",
    "latissimus dorsi": "Lats",
    "upper back": "Upper Back",
    "traps": "Traps",
    "trapezius": "Traps",
    "delts": "Upper Back",
    "deltoids": "Upper Back",
    "shoulders": "Upper Back",
    "anterior deltoid": "Upper Back",
    "posterior deltoid": "Upper Back",
    "middle deltoid": "Upper Back",
    "biceps": "Biceps",
    "biceps brachii": "Biceps",
    "triceps": "Triceps",
    "triceps brachii": "Triceps",
    "forearms": "Forearms",
    "brachialis": "Biceps",
    "brachioradialis": "Forearms",
}

MUSCLE_GROUPS = (
    "Abs", "Adductors", "Biceps", "Calves", "Forearms", "Glutes", "Hamstrings",
    "Lats", "Pectorals", "Quads", "Traps", "Triceps", "Upper Back",
)


# Pure helpers -----------------------------------------------------------------

def workout_days(sessions: Iterable[SessionRecord], zone: tzinfo) -> List[date]:
    """Distinct calendar days with a completed session, most recent first."""
    days = {ensure_utc(s.start_time).astimezone(zone).date() for s in sessions}
    return sorted(days, reverse=True)


def current_streak(days: List[date], now: datetime, zone: tzinfo) -> int:
    """
    Walk distinct workout days backwards from `now`. A day counts while it
    starts no more than one whole day before the cursor; the cursor then moves
    to the start of that day. Anchoring at now means a last workout two or
    more calendar days ago yields 0.
    """
    cursor = now.astimezone(zone)
    streak = 0
    for day in sorted(days, reverse=True):
        day_start = datetime.combine(day, time.min, tzinfo=zone)
        if day_start > cursor:
            continue
        gap_days = math.floor((cursor - day_start) / timedelta(days=1))
        if gap_days > 1:
            break
        streak += 1
        cursor = day_start
    return streak


def longest_streak(days: Iterable[date]) -> int:
    ordered = sorted(set(days))
    if not ordered:
        return 0
    best = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if (current - previous).days == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def consecutive_weeks(days: Iterable[date], today: date) -> int:
    """
    Consecutive Monday-based weeks with at least one workout, counted back
    from the most recent such week. That week must be this week or last week.
    """
    weeks = sorted({week_start(d) for d in days}, reverse=True)
    if not weeks:
        return 0
    this_week = week_start(today)
    if weeks[0] not in (this_week, this_week - timedelta(days=7)):
        return 0
    count = 1
    for newer, older in zip(weeks, weeks[1:]):
        if (newer - older).days == 7:
            count += 1
        else:
            break
    return count


def month_weekend_completion(days: Iterable[date], today: date) -> int:
    """
    Percentage of Saturday/Sunday periods in the current month that contain
    a workout. A month without weekends counts as complete.
    """
    _, last_day = calendar.monthrange(today.year, today.month)
    periods: List[List[date]] = []
    current: List[date] = []
    for offset in range(last_day):
        day = date(today.year, today.month, 1) + timedelta(days=offset)
        if day.weekday() == 5:
            if current:
                periods.append(current)
            current = [day]
        elif day.weekday() == 6:
            current.append(day)
    if current:
        periods.append(current)
    if not periods:
        return 100

    worked = {d for d in days if d.year == today.year and d.month == today.month}
    completed = sum(1 for period in periods if any(d in worked for d in period))
    return _round_half_up(completed / len(periods) * 100)


def total_minutes(sessions: Iterable[SessionRecord]) -> int:
    return sum(max(s.duration_seconds, 0) // 60 for s in sessions)


def total_volume(sets: Iterable[SetRecord]) -> int:
    return _round_half_up(sum((s.reps or 0) * (s.weight or 0) for s in sets))


def count_emoji_comments(comments: Iterable[str]) -> int:
    return sum(1 for text in comments if text and EMOJI_PATTERN.search(text))


def max_pr_increase(records: Iterable[PersonalRecordRow]) -> float:
    """Largest percentage gain from an exercise's first record to its best one."""
    by_exercise: Dict[str, List[PersonalRecordRow]] = defaultdict(list)
    for record in records:
        if record.category == "goal" or record.value is None:
            continue
        by_exercise[record.exercise_name].append(record)

    best = 0.0
    for rows in by_exercise.values():
        if len(rows) < 2:
            continue
        rows.sort(key=lambda r: r.achieved_at)
        first = rows[0].value
        peak = max(r.value for r in rows)
        if first and first > 0:
            best = max(best, (peak - first) / first * 100)
    return best


def muscle_groups_trained(targets: Iterable[Optional[str]]) -> Set[str]:
    trained: Set[str] = set()
    for target in targets:
        if not target:
            continue
        key = target.lower()
        if key in MUSCLE_GROUP_MAPPING:
            trained.add(MUSCLE_GROUP_MAPPING[key])
            continue
        for name, group in MUSCLE_GROUP_MAPPING.items():
            if name in key or key in name:
                trained.add(group)
    return trained


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# Aggregator -------------------------------------------------------------------

class MetricsAggregator:
    """Computes UserMetrics from an activity source. Holds no per-user state."""

    def __init__(
        self,
        source=None,
        *,
        completed_achievements: Optional[Callable[[str], int]] = None,
        zone: Optional[tzinfo] = None,
    ):
        self._source = source
        self._completed_achievements = completed_achievements
        self._zone = zone

    @property
    def source(self):
        return self._source if self._source is not None else get_source()

    def compute(self, user_id: str, *, now: Optional[datetime] = None) -> UserMetrics:
        now = ensure_utc(now) if now else utcnow()
        zone = self._zone or calendar_zone()
        today = now.astimezone(zone).date()
        source = self.source
        degraded: Set[str] = set()

        def guard(category: str, query: Callable[[], T], default: T) -> T:
            try:
                return query()
            except Exception as exc:
                degraded.add(category)
                log_event(
                    "warning",
                    "metrics.category_failed",
                    request_id=None,
                    user_id=user_id,
                    event_type=category,
                    error_code=type(exc).__name__,
                    extra={"error": exc},
                )
                return default

        sessions: List[SessionRecord] = guard("sessions", lambda: source.completed_sessions(user_id), [])
        days = workout_days(sessions, zone)
        local_starts = [ensure_utc(s.start_time).astimezone(zone) for s in sessions]
        minutes = total_minutes(sessions)

        sets: List[SetRecord] = guard("sets", lambda: source.session_sets(user_id), [])
        recent_sets: List[SetRecord] = guard(
            "muscle_groups", lambda: source.session_sets(user_id, since=now - timedelta(days=7)), []
        )
        records: List[PersonalRecordRow] = guard("records", lambda: source.personal_records(user_id), [])
        actual_records = [r for r in records if r.category != "goal"]
        likes: Dict[str, int] = guard("social", lambda: source.likes_per_post(user_id), {})
        comments: List[str] = guard("social", lambda: source.comment_texts(user_id), [])

        completed = 0
        if self._completed_achievements is not None:
            completed = guard("achievements", lambda: self._completed_achievements(user_id), 0)

        return UserMetrics(
            total_workouts=len(sessions),
            total_minutes=minutes,
            current_streak=current_streak(days, now, zone),
            longest_streak=longest_streak(days),
            early_workouts=sum(1 for start in local_starts if start.hour < EARLY_HOUR),
            late_workouts=sum(1 for start in local_starts if start.hour >= LATE_HOUR),
            weekend_workouts=sum(1 for start in local_starts if start.weekday() >= 5),
            average_workout_minutes=_round_half_up(minutes / len(sessions)) if sessions else 0,
            current_month_weekend_completion=month_weekend_completion(days, today) if sessions else 0,
            consecutive_weeks_with_workout=consecutive_weeks(days, today),
            total_volume=total_volume(sets),
            total_sets=len(sets),
            unique_exercises=len({s.exercise_name for s in sets}),
            workout_templates=guard("templates", lambda: source.workout_template_count(user_id), 0),
            personal_bests=len(actual_records),
            unique_exercises_with_prs=len({r.exercise_name for r in actual_records}),
            max_pr_increase=max_pr_increase(actual_records),
            is_advanced_level=guard("profile", lambda: source.experience_level(user_id), None) == "Advanced",
            social_posts=guard("social", lambda: source.post_count(user_id), 0),
            social_comments=len(comments),
            social_stories=guard("social", lambda: source.story_count(user_id), 0),
            social_messages=guard("social", lambda: source.message_count(user_id), 0),
            followers_count=guard("social", lambda: source.follower_count(user_id), 0),
            following_count=guard("social", lambda: source.following_count(user_id), 0),
            max_likes_on_post=max(likes.values(), default=0),
            total_reactions=guard("social", lambda: source.reaction_count(user_id), 0),
            emoji_comments=count_emoji_comments(comments),
            completed_achievements=completed,
            muscle_groups_this_week=len(muscle_groups_trained(s.target for s in recent_sets)),
            degraded=frozenset(degraded),
        )
