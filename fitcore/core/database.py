"""
Database configuration and connection management.

This module provides:
- SQLAlchemy engine and session management
- Connection pooling with sane defaults
- Test database support
- Table definitions for activity, gamification and generated plans
"""
from typing import Optional
from contextlib import contextmanager
import logging
import os

from sqlalchemy import create_engine, MetaData, Table, Column, Integer, String, DateTime, Boolean, Float, JSON, Text, Index, ForeignKey, UniqueConstraint, text
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql import func

from fitcore.core.config import settings


logger = logging.getLogger("fitcore")

# SQLAlchemy metadata for table definitions
metadata = MetaData()

# Connection pooling configuration
POOL_SIZE = 10
MAX_OVERFLOW = 20
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600  # Recycle connections after 1 hour

# Global engine and session factory
_engine = None
_SessionLocal = None


def get_database_url() -> Optional[str]:
    """
    Get the database URL from settings or environment.

    For testing, use TEST_DATABASE_URL if available.
    """
    test_url = os.getenv("TEST_DATABASE_URL")
    if test_url:
        return test_url

    return os.getenv("DATABASE_URL") or settings.DATABASE_URL


def init_engine(database_url: Optional[str] = None):
    """
    Initialize the SQLAlchemy engine.

    Args:
        database_url: Optional override for DATABASE_URL
    """
    global _engine, _SessionLocal

    url = database_url or get_database_url()

    if not url:
        raise ValueError(
            "DATABASE_URL is not configured. "
            "Set DATABASE_URL in environment or .env file."
        )

    if url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        _engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    else:
        _engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            pool_recycle=POOL_RECYCLE,
            echo=False,  # Set to True for SQL query logging
        )

    _SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=_engine
    )

    return _engine


def get_engine():
    """Get the current SQLAlchemy engine."""
    global _engine
    if _engine is None:
        init_engine()
    return _engine


def get_session_factory():
    """Get the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal


def dispose_engine() -> None:
    """Drop the cached engine so the next call re-reads configuration."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.execute(...)
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables():
    """
    Create all tables defined in metadata.

    This is idempotent - tables that already exist will not be recreated.
    """
    engine = get_engine()
    metadata.create_all(bind=engine)


def drop_all_tables():
    """
    Drop all tables defined in metadata.

    WARNING: This is destructive! Only use in tests or development.
    """
    engine = get_engine()
    metadata.drop_all(bind=engine)


def check_connection() -> bool:
    """
    Check if database connection is available.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database connection check failed: %s", e)
        return False


# ============================================================================
# Activity history (read by the metrics aggregator)
# ============================================================================

# Workout sessions, one row per started session
sessions = Table(
    'sessions',
    metadata,
    Column('session_id', String(36), primary_key=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('status', String(20), nullable=False, server_default='completed'),
    Column('start_time', DateTime(timezone=True), nullable=False),
    Column('duration', Integer, nullable=False, server_default='0'),  # seconds
    Index('idx_sessions_user_status', 'user_id', 'status'),
)

# Per-set actuals recorded during a session
session_sets = Table(
    'session_sets',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('session_id', String(36), ForeignKey('sessions.session_id', ondelete='CASCADE'), nullable=False, index=True),
    Column('exercise_name', String(200), nullable=False),
    Column('exercise_target', String(100), nullable=True),
    Column('actual_reps', Integer, nullable=True),
    Column('actual_weight', Float, nullable=True),
)

# Personal records and goals share one table, split by record_category
personal_records = Table(
    'personal_records',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('exercise_name', String(200), nullable=False),
    Column('value', Float, nullable=True),
    Column('record_category', String(30), nullable=False, server_default='record'),
    Column('achieved_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
)

# Profile fields used for plan generation and the advanced-level flag
users_data = Table(
    'users_data',
    metadata,
    Column('user_id', String(100), primary_key=True),
    Column('age', Integer, nullable=True),
    Column('gender', String(30), nullable=True),
    Column('goals', JSON, nullable=True),
    Column('experience_level', String(30), nullable=True),
    Column('workouts_per_week', Integer, nullable=True),
)

social_posts = Table(
    'social_posts',
    metadata,
    Column('post_id', String(36), primary_key=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
)

post_comments = Table(
    'post_comments',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('post_id', String(36), nullable=False, index=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('content', Text, nullable=False),
)

post_reactions = Table(
    'post_reactions',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('post_id', String(36), nullable=False, index=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('reaction_type', String(20), nullable=False, server_default='like'),
)

user_stories = Table(
    'user_stories',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
)

user_followers = Table(
    'user_followers',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('follower_id', String(100), nullable=False, index=True),
    Column('followed_id', String(100), nullable=False, index=True),
    UniqueConstraint('follower_id', 'followed_id', name='uq_user_followers_pair'),
)

messages = Table(
    'messages',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('sender_id', String(100), nullable=False, index=True),
)

# ============================================================================
# Gamification
# ============================================================================

# Per-user achievement progress; unlocked_at is never cleared once set
user_achievements = Table(
    'user_achievements',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('achievement_id', Integer, nullable=False),
    Column('progress', Integer, nullable=False, server_default='0'),
    Column('unlocked_at', DateTime(timezone=True), nullable=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
    Column('updated_at', DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False),
    UniqueConstraint('user_id', 'achievement_id', name='uq_user_achievements_user_achievement'),
)

coin_balances = Table(
    'coin_balances',
    metadata,
    Column('user_id', String(100), primary_key=True),
    Column('balance', Integer, nullable=False, server_default='0'),
    Column('achievement_coins_paid', Integer, nullable=False, server_default='0'),
    Column('updated_at', DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False),
)

coin_boosts = Table(
    'coin_boosts',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('boost_type', String(30), nullable=False),
    Column('start_time', DateTime(timezone=True), nullable=False),
    Column('end_time', DateTime(timezone=True), nullable=False),
    Column('multiplier', Float, nullable=False),
    Index('idx_coin_boosts_user_type', 'user_id', 'boost_type'),
)

streak_savers = Table(
    'streak_savers',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('activated_at', DateTime(timezone=True), nullable=True),
    Column('extra_days', Integer, nullable=False, server_default='3'),
    Column('used', Boolean, nullable=False, server_default='false'),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
)

# ============================================================================
# Generated plans (one workout per day, one row per planned set)
# ============================================================================

workouts = Table(
    'workouts',
    metadata,
    Column('workout_id', String(36), primary_key=True),
    Column('user_id', String(100), nullable=False, index=True),
    Column('title', String(300), nullable=False),
    Column('description', Text, nullable=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False),
)

workout_sets = Table(
    'workout_sets',
    metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('workout_id', String(36), ForeignKey('workouts.workout_id', ondelete='CASCADE'), nullable=False, index=True),
    Column('exercise_id', String(50), nullable=True),
    Column('exercise_name', String(200), nullable=False),
    Column('exercise_bodypart', String(100), nullable=True),
    Column('exercise_target', String(100), nullable=True),
    Column('exercise_equipment', String(100), nullable=True),
    Column('planned_reps', String(20), nullable=False),
    Column('rep_unit', String(10), nullable=False, server_default='reps'),
    Column('rest_time', Integer, nullable=False),
    Column('set_order', Integer, nullable=False),
    UniqueConstraint('workout_id', 'set_order', name='uq_workout_sets_order'),
)
