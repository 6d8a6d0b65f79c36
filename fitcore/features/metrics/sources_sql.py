"""
SQL-backed activity source.

Maintains identical interface to InMemoryActivitySource, reading the
activity tables defined in fitcore.core.database.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, func, select

from fitcore.core.clock import ensure_utc
from fitcore.core.database import (
    get_db_session,
    messages,
    personal_records,
    post_comments,
    post_reactions,
    session_sets,
    sessions,
    social_posts,
    user_followers,
    user_stories,
    users_data,
    workouts,
)
from fitcore.features.metrics.sources import PersonalRecordRow, SessionRecord, SetRecord


def _count(table, *criteria) -> int:
    with get_db_session() as session:
        query = select(func.count()).select_from(table).where(and_(*criteria))
        return int(session.execute(query).scalar() or 0)


class SqlActivitySource:
    """Activity queries against the relational store."""

    @staticmethod
    def completed_sessions(user_id: str) -> List[SessionRecord]:
        with get_db_session() as session:
            query = (
                select(sessions.c.start_time, sessions.c.duration)
                .where(and_(sessions.c.user_id == user_id, sessions.c.status == "completed"))
                .order_by(sessions.c.start_time)
            )
            return [
                SessionRecord(start_time=ensure_utc(row.start_time), duration_seconds=int(row.duration or 0))
                for row in session.execute(query)
            ]

    @staticmethod
    def session_sets(user_id: str, since: Optional[datetime] = None) -> List[SetRecord]:
        with get_db_session() as session:
            criteria = [sessions.c.user_id == user_id]
            if since is not None:
                criteria.append(sessions.c.start_time >= since)
            query = (
                select(
                    session_sets.c.exercise_name,
                    session_sets.c.actual_reps,
                    session_sets.c.actual_weight,
                    session_sets.c.exercise_target,
                    sessions.c.start_time,
                )
                .select_from(session_sets.join(sessions, session_sets.c.session_id == sessions.c.session_id))
                .where(and_(*criteria))
            )
            return [
                SetRecord(
                    exercise_name=row.exercise_name,
                    reps=row.actual_reps,
                    weight=row.actual_weight,
                    target=row.exercise_target,
                    performed_at=ensure_utc(row.start_time),
                )
                for row in session.execute(query)
            ]

    @staticmethod
    def workout_template_count(user_id: str) -> int:
        return _count(workouts, workouts.c.user_id == user_id)

    @staticmethod
    def personal_records(user_id: str) -> List[PersonalRecordRow]:
        with get_db_session() as session:
            query = (
                select(
                    personal_records.c.exercise_name,
                    personal_records.c.value,
                    personal_records.c.achieved_at,
                    personal_records.c.record_category,
                )
                .where(personal_records.c.user_id == user_id)
                .order_by(personal_records.c.achieved_at, personal_records.c.id)
            )
            return [
                PersonalRecordRow(
                    exercise_name=row.exercise_name,
                    value=row.value,
                    achieved_at=ensure_utc(row.achieved_at),
                    category=row.record_category,
                )
                for row in session.execute(query)
            ]

    @staticmethod
    def experience_level(user_id: str) -> Optional[str]:
        with get_db_session() as session:
            query = select(users_data.c.experience_level).where(users_data.c.user_id == user_id)
            return session.execute(query).scalar()

    @staticmethod
    def post_count(user_id: str) -> int:
        return _count(social_posts, social_posts.c.user_id == user_id)

    @staticmethod
    def likes_per_post(user_id: str) -> Dict[str, int]:
        with get_db_session() as session:
            query = (
                select(social_posts.c.post_id, func.count(post_reactions.c.id))
                .select_from(
                    social_posts.outerjoin(
                        post_reactions,
                        and_(
                            post_reactions.c.post_id == social_posts.c.post_id,
                            post_reactions.c.reaction_type == "like",
                        ),
                    )
                )
                .where(social_posts.c.user_id == user_id)
                .group_by(social_posts.c.post_id)
            )
            return {post_id: int(likes) for post_id, likes in session.execute(query)}

    @staticmethod
    def comment_texts(user_id: str) -> List[str]:
        with get_db_session() as session:
            query = select(post_comments.c.content).where(post_comments.c.user_id == user_id)
            return [row.content or "" for row in session.execute(query)]

    @staticmethod
    def story_count(user_id: str) -> int:
        return _count(user_stories, user_stories.c.user_id == user_id)

    @staticmethod
    def follower_count(user_id: str) -> int:
        return _count(user_followers, user_followers.c.followed_id == user_id)

    @staticmethod
    def following_count(user_id: str) -> int:
        return _count(user_followers, user_followers.c.follower_id == user_id)

    @staticmethod
    def reaction_count(user_id: str) -> int:
        return _count(post_reactions, post_reactions.c.user_id == user_id)

    @staticmethod
    def message_count(user_id: str) -> int:
        return _count(messages, messages.c.sender_id == user_id)
