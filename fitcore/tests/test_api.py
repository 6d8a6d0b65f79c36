from datetime import timedelta


def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_readyz_reports_memory_storage(client):
    res = client.get("/readyz")
    assert res.status_code == 200
    assert res.json()["storage"] == "memory"


def test_request_id_is_echoed(client):
    res = client.get("/healthz", headers={"x-request-id": "req-123"})
    assert res.headers["x-request-id"] == "req-123"


def test_coin_flow(client):
    res = client.post("/v1/coins/u1/add", json={"amount": 50})
    assert res.status_code == 200
    assert res.json() == {"credited": 50, "balance": 50}

    res = client.post("/v1/coins/u1/spend", json={"amount": 80})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "insufficient_coins"

    res = client.post("/v1/coins/u1/spend", json={"amount": 20})
    assert res.json() == {"spent": 20, "balance": 30}

    status = client.get("/v1/coins/u1").json()
    assert status["balance"] == 30
    assert status["multiplier"] == 1.0


def test_negative_amount_is_rejected(client):
    res = client.post("/v1/coins/u1/add", json={"amount": -5})
    assert res.status_code == 422


def test_boost_doubles_credit(client):
    res = client.post("/v1/coins/u1/boost")
    assert res.status_code == 200

    res = client.post("/v1/coins/u1/add", json={"amount": 10})
    assert res.json()["credited"] == 20


def test_streak_saver_endpoints(client):
    res = client.post("/v1/coins/u1/streak-savers/activate")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "no_streak_saver"

    assert client.post("/v1/coins/u1/streak-savers").json() == {"unused_streak_savers": 1}

    res = client.post("/v1/coins/u1/streak-savers/activate")
    assert res.status_code == 200
    body = res.json()
    assert body["activated"] is True
    assert body["protection_seconds_remaining"] > timedelta(days=2).total_seconds()


def test_generate_plan(client):
    res = client.post("/v1/plans/generate", json={"goal": "Gain strength", "days_per_week": 4})

    assert res.status_code == 200
    plan = res.json()["plan"]
    assert [d["template"] for d in plan["days"]] == ["Upper A", "Lower A", "Upper B", "Lower B"]
    assert plan["days"][0]["exercises"][0]["name"] == "barbell bench press"
    assert plan["days"][0]["exercises"][0]["rep_range"] == {"min": 6, "max": 8, "unit": "reps"}


def test_generate_plan_rejects_bad_day_count(client):
    res = client.post("/v1/plans/generate", json={"days_per_week": 9})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"


def test_generate_and_store_plan(client, workout_store):
    res = client.post("/v1/plans/u1", json={"goal": "Gain muscle", "days_per_week": 3})

    assert res.status_code == 200
    workout_ids = res.json()["workout_ids"]
    assert len(workout_ids) == 3
    titles = [w["title"] for w in workout_store.get_workouts("u1")]
    assert titles[0] == "Generated Gain muscle Plan - Push (Day 1)"


def test_catalog_outage_is_503(client, monkeypatch):
    from fitcore.core.errors import CatalogUnavailableError
    from fitcore.features.exercises import catalog as exercise_catalog

    def unavailable(**kwargs):
        raise CatalogUnavailableError("Exercise catalog returned 500")

    monkeypatch.setattr(exercise_catalog._service_instance, "get_catalog", unavailable)

    res = client.post("/v1/plans/generate", json={})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "catalog_unavailable"


def test_achievement_lifecycle(client, activity_source):
    res = client.post("/v1/achievements/u1/initialize")
    assert res.json() == {"user_id": "u1", "seeded": 50}

    assert client.post("/v1/achievements/u1/initialize").status_code == 409

    from fitcore.core.clock import utcnow

    activity_source.add_session("u1", utcnow() - timedelta(minutes=30), 1800)
    body = client.post("/v1/achievements/u1/evaluate").json()
    assert body["newly_unlocked"] == [1, 11]
    assert body["coins_awarded"] == 20
    assert body["failed"] == {}

    stats = client.get("/v1/achievements/u1/stats").json()
    assert stats["total"] == 50
    assert stats["completed"] == 2

    progress = client.get("/v1/achievements/u1").json()["achievements"]
    assert progress[0]["achievement_id"] == 1
    assert progress[0]["unlocked_at"] is not None

    metrics = client.get("/v1/achievements/u1/metrics").json()
    assert metrics["total_workouts"] == 1

    assert client.get("/v1/coins/u1").json()["balance"] == 20
