import pytest

from fitcore.core.errors import PlanPersistenceError
from fitcore.features.plans.generator import WorkoutPlanGenerator
from fitcore.features.plans.persistence import (
    InMemoryWorkoutStore,
    day_title,
    persist_workout_plan,
    set_rows,
)
from fitcore.models.plan import UserProfile


class FailingStore(InMemoryWorkoutStore):
    """Raises on the n-th call of the named method."""

    def __init__(self, method, fail_on_call, fail_delete=False):
        super().__init__()
        self.method = method
        self.fail_on_call = fail_on_call
        self.fail_delete = fail_delete
        self.calls = 0

    def _maybe_fail(self, method):
        if method != self.method:
            return
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise RuntimeError(f"{method} failed")

    def create_workout(self, user_id, title, description):
        self._maybe_fail("create_workout")
        return super().create_workout(user_id, title, description)

    def insert_sets(self, workout_id, rows):
        self._maybe_fail("insert_sets")
        super().insert_sets(workout_id, rows)

    def delete_workouts(self, workout_ids):
        if self.fail_delete:
            raise RuntimeError("delete failed")
        super().delete_workouts(workout_ids)


@pytest.fixture
def plan(sample_catalog):
    profile = UserProfile(age=28, gender="Male", goal="Gain muscle", days_per_week=3)
    return WorkoutPlanGenerator().generate(profile, sample_catalog)


def test_set_rows_explode_sets_with_strided_order(plan):
    day = plan.days[0]

    rows = set_rows("w1", day)

    assert len(rows) == sum(ex.sets for ex in day.exercises)
    assert [r["set_order"] for r in rows[:6]] == [0, 1, 2, 100, 101, 102]
    assert rows[0]["exercise_name"] == "barbell bench press"
    assert rows[0]["planned_reps"] == "8-12"
    assert rows[0]["rep_unit"] == "reps"
    assert rows[0]["rest_time"] == 150


def test_day_title():
    from fitcore.models.plan import WorkoutDay

    day = WorkoutDay(label="Day 2", focus="full body", template="Full Body A")
    assert day_title("Generated Workout Plan", day, 2) == "Generated Workout Plan - Full body (Day 2)"


def test_persist_creates_one_workout_per_day(plan, workout_store):
    workout_ids = persist_workout_plan("u1", plan)

    assert len(workout_ids) == 3
    stored = workout_store.get_workouts("u1")
    assert {w["workout_id"] for w in stored} == set(workout_ids)
    assert stored[0]["title"].endswith("(Day 1)")

    sets = workout_store.get_sets(workout_ids[0])
    assert len(sets) == sum(ex.sets for ex in plan.days[0].exercises)
    assert sets == sorted(sets, key=lambda r: r["set_order"])


def test_failed_set_insert_rolls_back_created_days(plan):
    store = FailingStore("insert_sets", fail_on_call=2)

    with pytest.raises(PlanPersistenceError) as excinfo:
        persist_workout_plan("u1", plan, store=store)

    assert len(excinfo.value.rolled_back_ids) == 2
    assert "day 2" in excinfo.value.message
    assert store.get_workouts("u1") == []


def test_failed_third_create_rolls_back_first_two(plan):
    store = FailingStore("create_workout", fail_on_call=3)

    with pytest.raises(PlanPersistenceError) as excinfo:
        persist_workout_plan("u1", plan, store=store)

    assert len(excinfo.value.rolled_back_ids) == 2
    assert store.get_workouts("u1") == []


def test_failed_rollback_is_reported(plan):
    store = FailingStore("insert_sets", fail_on_call=1, fail_delete=True)

    with pytest.raises(PlanPersistenceError) as excinfo:
        persist_workout_plan("u1", plan, store=store)

    assert "rollback incomplete" in excinfo.value.message
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_sql_store_persists_and_rolls_back(sqlite_engine, plan):
    from fitcore.features.plans.persistence import SqlWorkoutStore

    store = SqlWorkoutStore()

    workout_ids = persist_workout_plan("u1", plan, store=store, title="Generated Gain muscle Plan")

    assert len(store.get_workouts("u1")) == 3
    sets = store.get_sets(workout_ids[1])
    assert [r["set_order"] for r in sets[:3]] == [0, 1, 2]

    store.delete_workouts(workout_ids)
    assert store.get_workouts("u1") == []
    assert store.get_sets(workout_ids[1]) == []
