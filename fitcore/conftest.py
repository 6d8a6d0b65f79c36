# fitcore/conftest.py
import json
from datetime import datetime, timezone

import httpx
import pytest

from fitcore.models.exercise import ExerciseCatalogEntry


def _entry(entry_id, name, body_part, target, equipment):
    return ExerciseCatalogEntry(id=entry_id, name=name, body_part=body_part, target=target, equipment=equipment)


SAMPLE_CATALOG = [
    _entry("0025", "barbell bench press", "chest", "pectorals", "barbell"),
    _entry("0289", "dumbbell fly", "chest", "pectorals", "dumbbell"),
    _entry("0251", "chest dip", "chest", "pectorals", "body weight"),
    _entry("0027", "barbell bent over row", "back", "upper back", "barbell"),
    _entry("2330", "cable lat pulldown", "back", "lats", "cable"),
    _entry("0405", "dumbbell shoulder press", "shoulders", "delts", "dumbbell"),
    _entry("0334", "dumbbell lateral raise", "shoulders", "delts", "dumbbell"),
    _entry("0031", "barbell curl", "upper arms", "biceps", "barbell"),
    _entry("0241", "cable triceps pushdown", "upper arms", "triceps", "cable"),
    _entry("0043", "barbell squat", "upper legs", "glutes", "barbell"),
    _entry("0739", "sled leg press", "upper legs", "glutes", "sled machine"),
    _entry("0085", "barbell romanian deadlift", "upper legs", "glutes", "barbell"),
    _entry("0586", "lying leg curl", "upper legs", "hamstrings", "lever"),
    _entry("1373", "standing calf raise", "lower legs", "calves", "body weight"),
    _entry("0336", "dumbbell lunge", "upper legs", "glutes", "dumbbell"),
    _entry("0175", "cable crunch", "waist", "abs", "cable"),
    _entry("0464", "plank", "waist", "abs", "body weight"),
]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Every test starts on in-memory stores with no external services.

    Store singletons are re-created lazily, so DATABASE_URL and REDIS_URL must
    be cleared before the first get_store() call of the test.
    """
    for key in ("DATABASE_URL", "TEST_DATABASE_URL", "REDIS_URL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("fitcore.core.config.settings.REDIS_URL", None)

    from fitcore.features.achievements import store as achievement_store
    from fitcore.features.coins import store as coin_store
    from fitcore.features.exercises import catalog as exercise_catalog
    from fitcore.features.metrics import sources
    from fitcore.features.plans import persistence

    resets = (
        achievement_store.reset_store,
        coin_store.reset_store,
        sources.reset_source,
        persistence.reset_store,
        exercise_catalog.reset_catalog_service,
    )
    for reset in resets:
        reset()
    yield
    for reset in resets:
        reset()


@pytest.fixture
def now():
    """Wednesday 2024-06-12 18:00 UTC."""
    return datetime(2024, 6, 12, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def activity_source():
    from fitcore.features.metrics.sources import get_source

    return get_source()


@pytest.fixture
def achievement_store():
    from fitcore.features.achievements.store import get_store

    return get_store()


@pytest.fixture
def coin_store():
    from fitcore.features.coins.store import get_store

    return get_store()


@pytest.fixture
def workout_store():
    from fitcore.features.plans.persistence import get_store

    return get_store()


@pytest.fixture
def sample_catalog():
    return list(SAMPLE_CATALOG)


@pytest.fixture
def catalog_transport(sample_catalog):
    """httpx transport that serves the sample catalog like ExerciseDB does."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        payload = [entry.to_payload() for entry in sample_catalog]
        return httpx.Response(200, content=json.dumps(payload), headers={"content-type": "application/json"})

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


@pytest.fixture
def sqlite_engine():
    """Shared in-memory SQLite database with every table created."""
    from fitcore.core.database import create_all_tables, dispose_engine, drop_all_tables, init_engine

    engine = init_engine("sqlite://")
    create_all_tables()
    yield engine
    drop_all_tables()
    dispose_engine()


@pytest.fixture
def client(catalog_transport):
    from fastapi.testclient import TestClient

    from fitcore.features.exercises import catalog as exercise_catalog
    from fitcore.main import app

    exercise_catalog._service_instance = exercise_catalog.ExerciseCatalogService(
        client=exercise_catalog.ExerciseCatalogClient(api_key="test-key", transport=catalog_transport),
        cache=exercise_catalog.CatalogCache(),
    )
    return TestClient(app)
