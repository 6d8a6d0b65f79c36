from datetime import timedelta, timezone

from sqlalchemy import insert

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
    users_data,
    workouts,
)
from fitcore.features.metrics.aggregator import MetricsAggregator
from fitcore.features.metrics.sources_sql import SqlActivitySource


def _seed(now):
    with get_db_session() as session:
        session.execute(insert(sessions), [
            {"session_id": "s1", "user_id": "u1", "status": "completed", "start_time": now - timedelta(days=1), "duration": 1800},
            {"session_id": "s2", "user_id": "u1", "status": "completed", "start_time": now - timedelta(hours=2), "duration": 3600},
            {"session_id": "s3", "user_id": "u1", "status": "in_progress", "start_time": now - timedelta(hours=1), "duration": 0},
        ])
        session.execute(insert(session_sets), [
            {"session_id": "s1", "exercise_name": "barbell squat", "exercise_target": "glutes", "actual_reps": 5, "actual_weight": 100.0},
            {"session_id": "s2", "exercise_name": "barbell curl", "exercise_target": "biceps", "actual_reps": 10, "actual_weight": 20.0},
        ])
        session.execute(insert(personal_records), [
            {"user_id": "u1", "exercise_name": "barbell squat", "value": 100.0, "record_category": "record", "achieved_at": now - timedelta(days=20)},
            {"user_id": "u1", "exercise_name": "barbell squat", "value": 120.0, "record_category": "record", "achieved_at": now - timedelta(days=1)},
            {"user_id": "u1", "exercise_name": "deadlift", "value": 200.0, "record_category": "goal", "achieved_at": now},
        ])
        session.execute(insert(users_data).values(user_id="u1", experience_level="Advanced"))
        session.execute(insert(social_posts), [{"post_id": "p1", "user_id": "u1"}, {"post_id": "p2", "user_id": "u1"}])
        session.execute(insert(post_reactions), [
            {"post_id": "p1", "user_id": "u2", "reaction_type": "like"},
            {"post_id": "p1", "user_id": "u3", "reaction_type": "like"},
            {"post_id": "p2", "user_id": "u1", "reaction_type": "like"},
        ])
        session.execute(insert(post_comments), [
            {"post_id": "p2", "user_id": "u1", "content": "strong \U0001F525"},
            {"post_id": "p2", "user_id": "u1", "content": "ok"},
        ])
        session.execute(insert(user_followers), [
            {"follower_id": "u2", "followed_id": "u1"},
            {"follower_id": "u1", "followed_id": "u3"},
        ])
        session.execute(insert(messages), [{"sender_id": "u1"}])
        session.execute(insert(workouts).values(workout_id="w1", user_id="u1", title="Push"))


def test_sql_source_feeds_the_aggregator(sqlite_engine, now):
    _seed(now)

    metrics = MetricsAggregator(SqlActivitySource(), zone=timezone.utc).compute("u1", now=now)

    assert metrics.degraded == frozenset()
    assert metrics.total_workouts == 2
    assert metrics.total_minutes == 90
    assert metrics.current_streak == 2
    assert metrics.total_volume == 700
    assert metrics.total_sets == 2
    assert metrics.muscle_groups_this_week == 2
    assert metrics.workout_templates == 1
    assert metrics.personal_bests == 2
    assert metrics.max_pr_increase == 20.0
    assert metrics.is_advanced_level is True
    assert metrics.social_posts == 2
    assert metrics.max_likes_on_post == 2
    assert metrics.social_comments == 2
    assert metrics.emoji_comments == 1
    assert metrics.followers_count == 1
    assert metrics.following_count == 1
    assert metrics.total_reactions == 1
    assert metrics.social_messages == 1


def test_sql_source_for_unknown_user(sqlite_engine, now):
    metrics = MetricsAggregator(SqlActivitySource(), zone=timezone.utc).compute("nobody", now=now)
    assert metrics.total_workouts == 0
    assert metrics.is_advanced_level is False
    assert metrics.degraded == frozenset()
