from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Literal, Optional

Goal = Literal["Lose weight", "Gain muscle", "Gain strength", "Maintain muscle"]
ExperienceLevel = Literal["Novice", "Experienced", "Advanced"]
RepUnit = Literal["reps", "seconds"]
GenderBucket = Literal["male", "female", "senior"]


@dataclass(frozen=True)
class UserProfile:
    age: int = 25
    gender: str = "Prefer not to say"
    goal: str = "Maintain muscle"
    experience_level: str = "Novice"
    days_per_week: int = 3

    @property
    def is_senior(self) -> bool:
        return self.age >= 50


@dataclass(frozen=True)
class RepRange:
    min: int
    max: int
    unit: RepUnit = "reps"

    def label(self) -> str:
        suffix = "s" if self.unit == "seconds" else ""
        return f"{self.min}-{self.max}{suffix}"


@dataclass
class GeneratedExercise:
    name: str
    body_part: str
    target: str
    equipment: str
    sets: int
    rep_range: RepRange
    rest_seconds: int
    template_name: str
    catalog_id: Optional[str] = None
    placeholder: bool = False


@dataclass
class WorkoutDay:
    label: str
    focus: str
    template: str
    exercises: List[GeneratedExercise] = field(default_factory=list)


@dataclass
class PlanNotes:
    cardio: bool
    cardio_frequency: str
    focus_note: str
    recommendation: str


@dataclass
class GeneratedWorkoutPlan:
    profile: UserProfile
    days: List[WorkoutDay]
    notes: PlanNotes

    @property
    def placeholder_count(self) -> int:
        return sum(1 for day in self.days for ex in day.exercises if ex.placeholder)

    def to_dict(self) -> dict:
        return asdict(self)
