"""
Activity sources read by the metrics aggregator.

An activity source is the query surface over a user's raw history:
completed sessions, per-set actuals, personal records, profile and social
counters. Two implementations share one interface:

- InMemoryActivitySource (this module), used in tests and local development
- SqlActivitySource (sources_sql.py), backed by the activity tables

`get_source()` picks the SQL source when DATABASE_URL is configured and
reachable, otherwise the in-memory one.
"""

from __future__ import annotations

import logging
import os
import threading
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

logger = logging.getLogger("fitcore")


@dataclass(frozen=True)
class SessionRecord:
    """A completed workout session."""

    start_time: datetime
    duration_seconds: int = 0


@dataclass(frozen=True)
class SetRecord:
    """Actuals for one performed set."""

    exercise_name: str
    reps: Optional[int] = None
    weight: Optional[float] = None
    target: Optional[str] = None
    performed_at: Optional[datetime] = None


@dataclass(frozen=True)
class PersonalRecordRow:
    exercise_name: str
    value: Optional[float]
    achieved_at: datetime
    category: str = "record"  # "goal" rows are excluded from record metrics


@dataclass
class _UserActivity:
    sessions: List[SessionRecord] = field(default_factory=list)
    sets: List[SetRecord] = field(default_factory=list)
    workout_templates: int = 0
    personal_records: List[PersonalRecordRow] = field(default_factory=list)
    experience_level: Optional[str] = None
    posts: List[str] = field(default_factory=list)
    post_likes: Counter = field(default_factory=Counter)
    comments: List[str] = field(default_factory=list)
    stories: int = 0
    followers: int = 0
    following: int = 0
    reactions: int = 0
    messages: int = 0


class InMemoryActivitySource:
    """Dictionary-backed activity history keyed by user id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, _UserActivity] = defaultdict(_UserActivity)

    # Writers -----------------------------------------------------------
    def add_session(self, user_id: str, start_time: datetime, duration_seconds: int = 0) -> None:
        with self._lock:
            self._users[user_id].sessions.append(SessionRecord(start_time, duration_seconds))

    def add_set(self, user_id: str, record: SetRecord) -> None:
        with self._lock:
            self._users[user_id].sets.append(record)

    def add_workout_template(self, user_id: str, count: int = 1) -> None:
        with self._lock:
            self._users[user_id].workout_templates += count

    def add_personal_record(self, user_id: str, record: PersonalRecordRow) -> None:
        with self._lock:
            self._users[user_id].personal_records.append(record)

    def set_experience_level(self, user_id: str, level: Optional[str]) -> None:
        with self._lock:
            self._users[user_id].experience_level = level

    def add_post(self, user_id: str, post_id: str, likes: int = 0) -> None:
        with self._lock:
            activity = self._users[user_id]
            activity.posts.append(post_id)
            activity.post_likes[post_id] += likes

    def add_comment(self, user_id: str, content: str) -> None:
        with self._lock:
            self._users[user_id].comments.append(content)

    def set_social_counts(
        self,
        user_id: str,
        *,
        stories: int = 0,
        followers: int = 0,
        following: int = 0,
        reactions: int = 0,
        messages: int = 0,
    ) -> None:
        with self._lock:
            activity = self._users[user_id]
            activity.stories = stories
            activity.followers = followers
            activity.following = following
            activity.reactions = reactions
            activity.messages = messages

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self._lock:
            self._users.clear()

    # Queries -----------------------------------------------------------
    def _get(self, user_id: str) -> _UserActivity:
        with self._lock:
            return self._users.get(user_id) or _UserActivity()

    def completed_sessions(self, user_id: str) -> List[SessionRecord]:
        return list(self._get(user_id).sessions)

    def session_sets(self, user_id: str, since: Optional[datetime] = None) -> List[SetRecord]:
        sets = self._get(user_id).sets
        if since is None:
            return list(sets)
        return [s for s in sets if s.performed_at is not None and s.performed_at >= since]

    def workout_template_count(self, user_id: str) -> int:
        return self._get(user_id).workout_templates

    def personal_records(self, user_id: str) -> List[PersonalRecordRow]:
        return list(self._get(user_id).personal_records)

    def experience_level(self, user_id: str) -> Optional[str]:
        return self._get(user_id).experience_level

    def post_count(self, user_id: str) -> int:
        return len(self._get(user_id).posts)

    def likes_per_post(self, user_id: str) -> Dict[str, int]:
        activity = self._get(user_id)
        return {post_id: activity.post_likes.get(post_id, 0) for post_id in activity.posts}

    def comment_texts(self, user_id: str) -> List[str]:
        return list(self._get(user_id).comments)

    def story_count(self, user_id: str) -> int:
        return self._get(user_id).stories

    def follower_count(self, user_id: str) -> int:
        return self._get(user_id).followers

    def following_count(self, user_id: str) -> int:
        return self._get(user_id).following

    def reaction_count(self, user_id: str) -> int:
        return self._get(user_id).reactions

    def message_count(self, user_id: str) -> int:
        return self._get(user_id).messages


def get_activity_source():
    """
    Get the appropriate activity source implementation.

    - SQL source if DATABASE_URL is configured and reachable
    - In-memory otherwise
    """
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        try:
            from fitcore.core.database import check_connection
            from fitcore.features.metrics.sources_sql import SqlActivitySource

            if check_connection():
                return SqlActivitySource()
            logger.warning("[activity_source] database unavailable, falling back to in-memory")
        except Exception as e:
            logger.warning("[activity_source] failed to initialize SQL source: %s", e)

    return InMemoryActivitySource()


# Global source instance (lazy initialization)
_source_instance = None


def get_source():
    """Singleton activity source used by the aggregator."""
    global _source_instance
    if _source_instance is None:
        _source_instance = get_activity_source()
    return _source_instance


def reset_source():
    """
    Reset the source instance.

    FOR TESTING ONLY - forces re-initialization on next get_source() call.
    """
    global _source_instance
    _source_instance = None
