"""
Workout plan generation.

Builds a multi-day plan from a user profile, the split templates and the rule
tables, resolving each template slot against the exercise catalog. Pure: no
I/O beyond logging. An unresolved slot becomes a placeholder exercise instead
of failing the plan.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from fitcore.core.errors import ValidationError
from fitcore.core.logging import log_event
from fitcore.features.exercises.mappings import variation_names
from fitcore.features.exercises.matcher import ExerciseMatcher, direct_name_match, exercise_matcher
from fitcore.features.plans import rules
from fitcore.features.plans.templates import SplitTemplate, TemplateSlot, select_split
from fitcore.models.exercise import ExerciseCatalogEntry
from fitcore.models.plan import (
    GenderBucket,
    GeneratedExercise,
    GeneratedWorkoutPlan,
    PlanNotes,
    RepRange,
    UserProfile,
    WorkoutDay,
)

MIN_DAYS_PER_WEEK = 1
MAX_DAYS_PER_WEEK = 7

# keyword -> (body part, target), first hit wins
_PLACEHOLDER_RULES: Tuple[Tuple[str, str, str], ...] = (
    ("calf", "lower legs", "calves"),
    ("leg curl", "upper legs", "hamstrings"),
    ("triceps", "upper arms", "triceps"),
    ("french press", "upper arms", "triceps"),
    ("dip", "upper arms", "triceps"),
    ("curl", "upper arms", "biceps"),
    ("shoulder press", "shoulders", "delts"),
    ("military press", "shoulders", "delts"),
    ("raise", "shoulders", "delts"),
    ("face pull", "shoulders", "delts"),
    ("shrug", "back", "traps"),
    ("pulldown", "back", "lats"),
    ("pull-up", "back", "lats"),
    ("row", "back", "upper back"),
    ("bench press", "chest", "pectorals"),
    ("chest press", "chest", "pectorals"),
    ("incline press", "chest", "pectorals"),
    ("fly", "chest", "pectorals"),
    ("pec", "chest", "pectorals"),
    ("deadlift", "upper legs", "hamstrings"),
    ("glute", "upper legs", "glutes"),
    ("abductor", "upper legs", "abductors"),
    ("squat", "upper legs", "quads"),
    ("leg press", "upper legs", "quads"),
    ("lunge", "upper legs", "quads"),
    ("extension", "upper legs", "quads"),
    ("plank", "waist", "abs"),
    ("crunch", "waist", "abs"),
)
_PLACEHOLDER_EQUIPMENT: Tuple[Tuple[str, str], ...] = (
    ("smith", "smith machine"),
    ("barbell", "barbell"),
    ("dumbbell", "dumbbell"),
    ("cable", "cable"),
    ("rope", "cable"),
    ("assisted", "assisted"),
    ("machine", "leverage machine"),
)


def gender_bucket(profile: UserProfile) -> GenderBucket:
    if profile.age >= rules.SENIOR_AGE:
        return "senior"
    if profile.gender == "Female":
        return "female"
    return "male"


def build_recommendation(goal: str, experience_level: str, age: int, gender: str) -> str:
    recommendation = rules.BASE_RECOMMENDATIONS.get(goal, rules.DEFAULT_RECOMMENDATION)
    recommendation += rules.EXPERIENCE_NOTES.get(experience_level, "")
    if age >= rules.SENIOR_AGE:
        recommendation += rules.SENIOR_NOTE
    recommendation += rules.GENDER_NOTES.get(gender, "")
    return recommendation


def infer_placeholder(template_name: str) -> Tuple[str, str, str]:
    """Best-guess (body part, target, equipment) for a slot with no catalog entry."""
    name = template_name.lower()
    body_part, target = "full body", "general"
    for keyword, part, muscle in _PLACEHOLDER_RULES:
        if keyword in name:
            body_part, target = part, muscle
            break
    equipment = next((value for keyword, value in _PLACEHOLDER_EQUIPMENT if keyword in name), "body weight")
    return body_part, target, equipment


def sets_for(template: SplitTemplate, slot: TemplateSlot, goal: str, *, senior: bool) -> int:
    if template.is_push_pull_legs:
        sets = rules.SETS_PER_EXERCISE_PPL.get(goal, slot.sets)
    else:
        sets = rules.MAX_SETS_UPPER_LOWER_FULL_BODY
    sets = min(sets, rules.MAX_SETS_PER_EXERCISE)
    if senior and sets > rules.SENIOR_MIN_SETS:
        sets = max(sets - 1, rules.SENIOR_MIN_SETS)
    return sets


def rep_range_for_slot(slot: TemplateSlot, goal: str, experience_level: str) -> RepRange:
    name = slot.name.lower()
    if any(keyword in name for keyword in rules.TIMED_KEYWORDS):
        return RepRange(slot.reps.min, slot.reps.max, unit="seconds")
    if any(keyword in name for keyword in rules.ACCESSORY_KEYWORDS):
        return rules.ACCESSORY_REP_RANGE
    return rules.rep_range_for(goal, experience_level)


def profile_from_row(row: Optional[Mapping[str, Any]]) -> UserProfile:
    """Build a profile from a users_data-shaped mapping, filling defaults for missing values."""
    row = row or {}
    defaults = UserProfile()

    goal = row.get("goal")
    goals = row.get("goals")
    if not goal and isinstance(goals, (list, tuple)) and goals:
        goal = goals[0]

    return UserProfile(
        age=row.get("age") or defaults.age,
        gender=row.get("gender") or defaults.gender,
        goal=goal or defaults.goal,
        experience_level=row.get("experience_level") or defaults.experience_level,
        days_per_week=row.get("days_per_week") or row.get("workouts_per_week") or defaults.days_per_week,
    )


class WorkoutPlanGenerator:

    def __init__(self, matcher: Optional[ExerciseMatcher] = None):
        self.matcher = matcher or exercise_matcher

    def _resolve(self, template_name: str, catalog: Sequence[ExerciseCatalogEntry]) -> Optional[ExerciseCatalogEntry]:
        entry = self.matcher.match(template_name, catalog)
        if entry is not None:
            return entry
        for alternative in variation_names(template_name):
            entry = direct_name_match(alternative, catalog)
            if entry is not None:
                return entry
        return None

    def _build_exercise(
        self,
        template: SplitTemplate,
        slot: TemplateSlot,
        profile: UserProfile,
        catalog: Sequence[ExerciseCatalogEntry],
        rest_seconds: int,
    ) -> GeneratedExercise:
        sets = sets_for(template, slot, profile.goal, senior=profile.is_senior)
        rep_range = rep_range_for_slot(slot, profile.goal, profile.experience_level)

        entry = self._resolve(slot.name, catalog)
        if entry is None:
            body_part, target, equipment = infer_placeholder(slot.name)
            log_event(
                "warning",
                "plan.placeholder_exercise",
                request_id=None,
                event_type="plan_generation",
                extra={"template_name": slot.name, "day_template": template.name},
            )
            return GeneratedExercise(
                name=slot.name,
                body_part=body_part,
                target=target,
                equipment=equipment,
                sets=sets,
                rep_range=rep_range,
                rest_seconds=rest_seconds,
                template_name=slot.name,
                placeholder=True,
            )

        return GeneratedExercise(
            name=entry.name,
            body_part=entry.body_part,
            target=entry.target,
            equipment=entry.equipment,
            sets=sets,
            rep_range=rep_range,
            rest_seconds=rest_seconds,
            template_name=slot.name,
            catalog_id=entry.id,
        )

    def generate(self, profile: UserProfile, catalog: Sequence[ExerciseCatalogEntry]) -> GeneratedWorkoutPlan:
        if not MIN_DAYS_PER_WEEK <= profile.days_per_week <= MAX_DAYS_PER_WEEK:
            raise ValidationError(
                f"days_per_week must be between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK}"
            )

        split = select_split(profile.goal, profile.days_per_week)
        bucket = gender_bucket(profile)
        rest_seconds = rules.rest_seconds_for(profile.goal)

        days: List[WorkoutDay] = []
        for index in range(profile.days_per_week):
            template = split[index % len(split)]
            exercises = [
                self._build_exercise(template, slot, profile, catalog, rest_seconds)
                for slot in template.slots_for(bucket)
            ]
            days.append(
                WorkoutDay(
                    label=f"Day {index + 1}",
                    focus=template.focus_label,
                    template=template.name,
                    exercises=exercises,
                )
            )

        cardio = rules.cardio_for(profile.goal)
        notes = PlanNotes(
            cardio=bool(cardio["recommended"]),
            cardio_frequency=str(cardio["frequency"]),
            focus_note=str(cardio["note"]),
            recommendation=build_recommendation(
                profile.goal, profile.experience_level, profile.age, profile.gender
            ),
        )
        return GeneratedWorkoutPlan(profile=profile, days=days, notes=notes)


workout_plan_generator = WorkoutPlanGenerator()


def generate_workout_plan(profile: UserProfile, catalog: Sequence[ExerciseCatalogEntry]) -> GeneratedWorkoutPlan:
    return workout_plan_generator.generate(profile, catalog)
