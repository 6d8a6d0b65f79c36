from fitcore.core.database import dispose_engine
from fitcore.features.achievements import store as achievement_store
from fitcore.features.coins import store as coin_store
from fitcore.features.metrics import sources
from fitcore.features.plans import persistence


def test_in_memory_stores_without_database_url():
    assert isinstance(achievement_store.get_store(), achievement_store.InMemoryAchievementStore)
    assert isinstance(coin_store.get_store(), coin_store.InMemoryCoinStore)
    assert isinstance(sources.get_source(), sources.InMemoryActivitySource)
    assert isinstance(persistence.get_store(), persistence.InMemoryWorkoutStore)


def test_store_is_a_lazy_singleton():
    assert coin_store.get_store() is coin_store.get_store()
    first = coin_store.get_store()
    coin_store.reset_store()
    assert coin_store.get_store() is not first


def test_sql_stores_when_database_reachable(sqlite_engine, monkeypatch):
    from fitcore.features.achievements.store_sql import SqlAchievementStore
    from fitcore.features.coins.store_sql import SqlCoinStore
    from fitcore.features.metrics.sources_sql import SqlActivitySource

    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    assert isinstance(achievement_store.get_achievement_store(), SqlAchievementStore)
    assert isinstance(coin_store.get_coin_store(), SqlCoinStore)
    assert isinstance(sources.get_activity_source(), SqlActivitySource)
    assert isinstance(persistence.get_workout_store(), persistence.SqlWorkoutStore)


def test_unreachable_database_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:////nonexistent-dir/fitcore.db")
    try:
        assert isinstance(achievement_store.get_achievement_store(), achievement_store.InMemoryAchievementStore)
        assert isinstance(persistence.get_workout_store(), persistence.InMemoryWorkoutStore)
    finally:
        dispose_engine()
