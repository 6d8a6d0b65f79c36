import pytest

from fitcore.core.errors import ValidationError
from fitcore.features.plans.generator import (
    WorkoutPlanGenerator,
    build_recommendation,
    gender_bucket,
    infer_placeholder,
    profile_from_row,
    sets_for,
)
from fitcore.features.plans.templates import TEMPLATES, select_split
from fitcore.models.plan import RepRange, UserProfile


@pytest.fixture
def generator():
    return WorkoutPlanGenerator()


def _exercise(day, template_name):
    return next(ex for ex in day.exercises if ex.template_name == template_name)


def test_sets_depend_on_day_category():
    upper = TEMPLATES["Upper A"]
    push = TEMPLATES["Push A"]

    assert sets_for(upper, upper.male[0], "Gain muscle", senior=False) == 2
    assert sets_for(push, push.male[0], "Gain muscle", senior=False) == 3
    assert sets_for(push, push.male[0], "Lose weight", senior=False) == 2


def test_senior_sets_drop_by_one_but_not_below_two():
    push = TEMPLATES["Push A"]
    assert sets_for(push, push.senior[0], "Gain strength", senior=True) == 2
    assert sets_for(push, push.senior[0], "Maintain muscle", senior=True) == 2


def test_strength_plan_four_days(generator, sample_catalog):
    profile = UserProfile(age=25, gender="Male", goal="Gain strength", experience_level="Novice", days_per_week=4)

    plan = generator.generate(profile, sample_catalog)

    assert [d.template for d in plan.days] == ["Upper A", "Lower A", "Upper B", "Lower B"]
    assert [d.label for d in plan.days] == ["Day 1", "Day 2", "Day 3", "Day 4"]
    assert [d.focus for d in plan.days] == ["upper", "lower", "upper", "lower"]

    exercises = [ex for day in plan.days for ex in day.exercises]
    assert all(ex.sets == 2 for ex in exercises)
    assert all(ex.rest_seconds == 180 for ex in exercises)

    bench = plan.days[0].exercises[0]
    assert bench.name == "barbell bench press"
    assert bench.catalog_id == "0025"
    assert bench.rep_range == RepRange(6, 8)
    assert not bench.placeholder

    lower_b = plan.days[3]
    assert _exercise(lower_b, "Calf raise").rep_range == RepRange(12, 15)
    assert _exercise(lower_b, "Machine crunch").rep_range == RepRange(12, 15)
    assert _exercise(lower_b, "Plank").rep_range == RepRange(30, 40, unit="seconds")
    assert _exercise(lower_b, "Plank").name == "plank"


def test_strength_plan_notes(generator, sample_catalog):
    profile = UserProfile(age=25, gender="Male", goal="Gain strength", experience_level="Novice", days_per_week=4)

    notes = generator.generate(profile, sample_catalog).notes

    assert notes.cardio is False
    assert notes.cardio_frequency == "Optional"
    assert notes.recommendation == (
        "Focus on compound movements with heavy weights. Rest 2-3 minutes between sets."
        " Focus on learning proper form before increasing weights."
    )


def test_senior_profile_uses_senior_slots(generator, sample_catalog):
    profile = UserProfile(age=62, gender="Male", goal="Gain muscle", experience_level="Experienced", days_per_week=3)

    plan = generator.generate(profile, sample_catalog)

    assert [d.template for d in plan.days] == ["Push A", "Pull A", "Legs A"]
    assert plan.days[0].exercises[0].template_name == "Machine chest press"
    assert all(ex.sets == 2 for day in plan.days for ex in day.exercises)
    assert "warm-up" in plan.notes.recommendation


def test_female_profile_uses_female_slots(generator, sample_catalog):
    profile = UserProfile(age=30, gender="Female", goal="Lose weight", days_per_week=3)

    plan = generator.generate(profile, sample_catalog)

    assert plan.days[0].template == "Upper A"
    assert plan.days[0].exercises[0].template_name == "Dumbbell bench press"
    assert plan.notes.cardio is True
    assert plan.notes.recommendation.endswith("alongside lower body focus.")


def test_unsupported_day_count_cycles_three_day_split(generator, sample_catalog):
    profile = UserProfile(goal="Gain strength", days_per_week=7)

    plan = generator.generate(profile, sample_catalog)

    assert len(plan.days) == 7
    assert [d.template for d in plan.days] == [
        "Upper A", "Lower A", "Full Body A", "Upper A", "Lower A", "Full Body A", "Upper A",
    ]
    assert plan.days[2].focus == "full body"


def test_select_split_unknown_goal_uses_first_three_day_split():
    names = [t.name for t in select_split("Run a marathon", 5)]
    assert names == ["Upper A", "Lower A", "Full Body A"]


@pytest.mark.parametrize("days", [0, 8, -1])
def test_day_count_outside_week_is_rejected(generator, sample_catalog, days):
    with pytest.raises(ValidationError):
        generator.generate(UserProfile(days_per_week=days), sample_catalog)


def test_empty_catalog_gives_placeholders(generator):
    profile = UserProfile(goal="Maintain muscle", days_per_week=3)

    plan = generator.generate(profile, [])

    exercises = [ex for day in plan.days for ex in day.exercises]
    assert exercises
    assert plan.placeholder_count == len(exercises)
    first = exercises[0]
    assert first.placeholder
    assert first.name == first.template_name
    assert first.catalog_id is None


def test_infer_placeholder_from_keywords():
    assert infer_placeholder("Leg curl") == ("upper legs", "hamstrings", "body weight")
    assert infer_placeholder("Rope triceps pushdown") == ("upper arms", "triceps", "cable")
    assert infer_placeholder("Machine chest press") == ("chest", "pectorals", "leverage machine")
    assert infer_placeholder("Farmer walk") == ("full body", "general", "body weight")


def test_recommendation_for_unknown_goal():
    assert build_recommendation("Something else", "Experienced", 30, "Male") == "Stay consistent with your training."


def test_profile_from_row_defaults():
    assert profile_from_row(None) == UserProfile()

    profile = profile_from_row({"goals": ["Gain muscle"], "workouts_per_week": 5, "age": 40})
    assert profile.goal == "Gain muscle"
    assert profile.days_per_week == 5
    assert profile.age == 40
    assert profile.experience_level == "Novice"


def test_gender_bucket():
    assert gender_bucket(UserProfile(age=50, gender="Female")) == "senior"
    assert gender_bucket(UserProfile(age=30, gender="Female")) == "female"
    assert gender_bucket(UserProfile(age=30, gender="Male")) == "male"
    assert gender_bucket(UserProfile()) == "male"
