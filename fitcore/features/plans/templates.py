"""
Split templates: named training days with per-bucket exercise slot lists,
and the weekly splits built from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, Tuple

from fitcore.models.plan import RepRange

TemplateCategory = Literal["upper", "lower", "full_body", "push", "pull", "legs"]

BASE_SETS = 2


@dataclass(frozen=True)
class TemplateSlot:
    name: str
    reps: RepRange
    sets: int = BASE_SETS


@dataclass(frozen=True)
class SplitTemplate:
    name: str
    category: TemplateCategory
    focus: Tuple[str, ...]
    male: Tuple[TemplateSlot, ...]
    female: Tuple[TemplateSlot, ...]
    senior: Tuple[TemplateSlot, ...]

    @property
    def is_push_pull_legs(self) -> bool:
        return self.category in ("push", "pull", "legs")

    @property
    def focus_label(self) -> str:
        return self.category.replace("_", " ")

    def slots_for(self, bucket: str) -> Tuple[TemplateSlot, ...]:
        return getattr(self, bucket, self.male)


def _slots(*rows: Tuple[str, int, int]) -> Tuple[TemplateSlot, ...]:
    return tuple(TemplateSlot(name, RepRange(lo, hi)) for name, lo, hi in rows)


_UPPER_A = dict(
    male=_slots(
        ("Barbell bench press", 8, 10), ("Barbell bent-over row", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Front pulldown", 8, 10),
        ("Dumbbell fly", 10, 12), ("Barbell curl", 10, 12), ("Cable triceps pushdown", 10, 12),
    ),
    female=_slots(
        ("Dumbbell bench press", 8, 10), ("Dumbbell bent-over row", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Front pulldown", 8, 10),
        ("Dumbbell fly", 10, 12), ("Barbell curl", 10, 12), ("Cable triceps pushdown", 10, 12),
    ),
    senior=_slots(
        ("Machine chest press", 8, 12), ("Machine row", 8, 12), ("Dumbbell front raise", 10, 12),
        ("Front pulldown", 8, 12), ("Dumbbell curl", 10, 12), ("Rope triceps pushdown", 10, 12),
    ),
)

_UPPER_B = dict(
    male=_slots(
        ("Assisted pull-up", 8, 10), ("Incline dumbbell bench press", 8, 10), ("One-arm row", 8, 10),
        ("Lateral raise", 10, 12), ("Alternating curl", 10, 12), ("French press", 10, 12), ("Pec deck", 10, 12),
    ),
    female=_slots(
        ("Wide-grip pulldown", 8, 10), ("Incline dumbbell bench press", 8, 10), ("Seated row", 8, 10),
        ("Lateral raise", 10, 12), ("Alternating curl", 10, 12), ("Rope triceps pushdown", 10, 12),
        ("Pec deck", 10, 12),
    ),
    senior=_slots(
        ("Machine front pulldown", 8, 12), ("Machine chest press", 8, 12), ("Machine row", 8, 12),
        ("Seated lateral raise", 10, 12), ("Alternating curl", 10, 12), ("Rope triceps pushdown", 10, 12),
    ),
)

_LOWER_A = dict(
    male=_slots(
        ("Free squat", 8, 10), ("Leg press", 8, 10), ("Romanian deadlift", 8, 10), ("Leg extension", 10, 12),
        ("Leg curl", 10, 12), ("Calf raise", 12, 15), ("Lunge", 10, 12),
    ),
    female=_slots(
        ("Free squat", 8, 10), ("Leg press", 8, 10), ("Romanian deadlift", 8, 10), ("Machine glute", 10, 12),
        ("Abductor", 10, 12), ("Calf raise", 12, 15), ("Lunge", 10, 12),
    ),
    senior=_slots(
        ("Box squat", 8, 12), ("Light leg press", 8, 12), ("Dumbbell deadlift", 10, 12),
        ("Leg extension", 10, 12), ("Leg curl", 10, 12), ("Seated calf raise", 12, 15),
    ),
)

_LOWER_B = dict(
    male=_slots(
        ("Romanian deadlift", 8, 10), ("Front squat", 8, 10), ("Leg curl", 10, 12), ("Machine glute", 10, 12),
        ("Calf raise", 12, 15), ("Plank", 30, 40), ("Machine crunch", 12, 15),
    ),
    female=_slots(
        ("Romanian deadlift", 8, 10), ("Sumo squat", 8, 10), ("Abductor", 10, 12), ("Machine glute", 10, 12),
        ("Calf raise", 12, 15), ("Plank", 30, 40), ("Machine crunch", 12, 15),
    ),
    senior=_slots(
        ("Dumbbell deadlift", 10, 12), ("Box squat", 8, 12), ("Abductor", 10, 12), ("Machine glute", 10, 12),
        ("Seated calf raise", 12, 15), ("Modified plank", 20, 30),
    ),
)

_PUSH_A = dict(
    male=_slots(
        ("Barbell bench press", 8, 10), ("Incline dumbbell bench press", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Lateral raise", 10, 12), ("Cable triceps pushdown", 10, 12),
        ("French press", 10, 12), ("Dumbbell fly", 10, 12),
    ),
    female=_slots(
        ("Dumbbell bench press", 8, 10), ("Incline dumbbell bench press", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Lateral raise", 10, 12), ("Rope triceps pushdown", 10, 12),
        ("Bench triceps dip", 10, 12), ("Dumbbell fly", 10, 12),
    ),
    senior=_slots(
        ("Machine chest press", 8, 12), ("Machine incline press", 8, 12), ("Machine shoulder press", 8, 12),
        ("Seated lateral raise", 10, 12), ("Rope triceps pushdown", 10, 12),
    ),
)

_PUSH_B = dict(
    male=_slots(
        ("Decline bench press", 8, 10), ("Military press", 8, 10), ("Incline dumbbell fly", 10, 12),
        ("Front raise", 10, 12), ("Cable triceps pushdown", 10, 12), ("Bench triceps dip", 10, 12),
        ("Pec deck", 10, 12),
    ),
    female=_slots(
        ("Decline bench press", 8, 10), ("Military press", 8, 10), ("Incline dumbbell fly", 10, 12),
        ("Front raise", 10, 12), ("Rope triceps pushdown", 10, 12), ("Bench triceps dip", 10, 12),
        ("Pec deck", 10, 12),
    ),
    senior=_slots(
        ("Machine chest press", 8, 12), ("Machine shoulder press", 8, 12), ("Machine fly", 10, 12),
        ("Seated front raise", 10, 12), ("Rope triceps pushdown", 10, 12),
    ),
)

_PULL_A = dict(
    male=_slots(
        ("Assisted pull-up", 8, 10), ("Bent-over row", 8, 10), ("Front pulldown", 8, 10), ("Seated row", 8, 10),
        ("Barbell curl", 10, 12), ("Alternating curl", 10, 12), ("Face pull", 10, 12),
    ),
    female=_slots(
        ("Front pulldown", 8, 10), ("Bent-over row", 8, 10), ("Seated row", 8, 10), ("Barbell curl", 10, 12),
        ("Alternating curl", 10, 12), ("Face pull", 10, 12), ("Hammer curl", 10, 12),
    ),
    senior=_slots(
        ("Machine front pulldown", 8, 12), ("Machine row", 8, 12), ("Dumbbell curl", 10, 12),
        ("Alternating curl", 10, 12), ("Face pull", 10, 12),
    ),
)

_PULL_B_SLOTS = _slots(
    ("One-arm row", 8, 10), ("Wide-grip pulldown", 8, 10), ("Seated row", 8, 10), ("Barbell curl", 10, 12),
    ("Hammer curl", 10, 12), ("Face pull", 10, 12), ("Shrug", 10, 12),
)
_PULL_B = dict(
    male=_PULL_B_SLOTS,
    female=_PULL_B_SLOTS,
    senior=_slots(
        ("Machine row", 8, 12), ("Machine front pulldown", 8, 12), ("Dumbbell curl", 10, 12),
        ("Hammer curl", 10, 12), ("Face pull", 10, 12),
    ),
)

_FULL_BODY_A = dict(
    male=_slots(
        ("Barbell bench press", 8, 10), ("Free squat", 8, 10), ("Bent-over row", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Romanian deadlift", 8, 10), ("Barbell curl", 10, 12),
        ("Cable triceps pushdown", 10, 12),
    ),
    female=_slots(
        ("Dumbbell bench press", 8, 10), ("Free squat", 8, 10), ("Bent-over row", 8, 10),
        ("Dumbbell shoulder press", 8, 10), ("Romanian deadlift", 8, 10), ("Barbell curl", 10, 12),
        ("Rope triceps pushdown", 10, 12),
    ),
    senior=_slots(
        ("Machine chest press", 8, 12), ("Box squat", 8, 12), ("Machine row", 8, 12),
        ("Machine shoulder press", 8, 12), ("Dumbbell deadlift", 10, 12), ("Dumbbell curl", 10, 12),
        ("Rope triceps pushdown", 10, 12),
    ),
)

_FULL_BODY_B = dict(
    male=_slots(
        ("Assisted pull-up", 8, 10), ("Leg press", 8, 10), ("Incline dumbbell bench press", 8, 10),
        ("Seated row", 8, 10), ("Romanian deadlift", 8, 10), ("Alternating curl", 10, 12), ("French press", 10, 12),
    ),
    female=_slots(
        ("Front pulldown", 8, 10), ("Leg press", 8, 10), ("Incline dumbbell bench press", 8, 10),
        ("Seated row", 8, 10), ("Romanian deadlift", 8, 10), ("Alternating curl", 10, 12),
        ("Rope triceps pushdown", 10, 12),
    ),
    senior=_slots(
        ("Machine front pulldown", 8, 12), ("Light leg press", 8, 12), ("Machine chest press", 8, 12),
        ("Machine row", 8, 12), ("Dumbbell deadlift", 10, 12), ("Alternating curl", 10, 12),
        ("Rope triceps pushdown", 10, 12),
    ),
)

_UPPER_FOCUS = ("Chest", "Shoulders", "Triceps", "Back", "Biceps")
_LOWER_A_FOCUS = ("Quads", "Glutes", "Hamstrings", "Calves")
_LOWER_B_FOCUS = ("Glutes", "Hamstrings", "Core", "Quads")
_PUSH_FOCUS = ("Chest", "Shoulders", "Triceps")
_PULL_FOCUS = ("Back", "Biceps", "Hamstrings")

TEMPLATES: Mapping[str, SplitTemplate] = MappingProxyType({
    t.name: t for t in (
        SplitTemplate("Upper A", "upper", _UPPER_FOCUS, **_UPPER_A),
        SplitTemplate("Upper B", "upper", ("Back", "Shoulders", "Biceps", "Chest", "Triceps"), **_UPPER_B),
        SplitTemplate("Lower A", "lower", _LOWER_A_FOCUS, **_LOWER_A),
        SplitTemplate("Lower B", "lower", _LOWER_B_FOCUS, **_LOWER_B),
        SplitTemplate("Push A", "push", _PUSH_FOCUS, **_PUSH_A),
        SplitTemplate("Push B", "push", _PUSH_FOCUS, **_PUSH_B),
        SplitTemplate("Pull A", "pull", _PULL_FOCUS, **_PULL_A),
        SplitTemplate("Pull B", "pull", _PULL_FOCUS, **_PULL_B),
        # Legs days reuse the lower-body slot lists
        SplitTemplate("Legs A", "legs", _LOWER_A_FOCUS, **_LOWER_A),
        SplitTemplate("Legs B", "legs", _LOWER_B_FOCUS, **_LOWER_B),
        SplitTemplate("Full Body A", "full_body", ("Chest", "Legs", "Back", "Shoulders", "Arms"), **_FULL_BODY_A),
        SplitTemplate("Full Body B", "full_body", ("Back", "Legs", "Chest", "Shoulders", "Arms"), **_FULL_BODY_B),
    )
})

# Days per week -> candidate weekly splits (template names, one per day)
SPLITS: Mapping[int, Tuple[Tuple[str, ...], ...]] = MappingProxyType({
    3: (
        ("Upper A", "Lower A", "Full Body A"),
        ("Push A", "Pull A", "Legs A"),
        ("Full Body A", "Full Body B", "Full Body A"),
        ("Upper A", "Lower A", "Upper B"),
    ),
    4: (
        ("Upper A", "Lower A", "Upper B", "Full Body A"),
        ("Push A", "Pull A", "Legs A", "Full Body A"),
        ("Full Body A", "Full Body B", "Full Body A", "Full Body B"),
        ("Upper A", "Lower A", "Upper B", "Lower B"),
        ("Push A", "Legs A", "Pull A", "Legs B"),
    ),
    5: (
        ("Upper A", "Lower A", "Upper B", "Lower B", "Full Body A"),
        ("Upper A", "Lower A", "Upper B", "Lower B", "Upper A"),
        ("Full Body A", "Full Body B", "Full Body A", "Full Body B", "Full Body A"),
        ("Push A", "Pull A", "Legs A", "Upper A", "Lower A"),
    ),
    6: (
        ("Upper A", "Lower A", "Upper B", "Lower B", "Upper A", "Lower A"),
        ("Push A", "Pull A", "Legs A", "Push B", "Pull B", "Legs B"),
        ("Full Body A", "Full Body B", "Full Body A", "Full Body B", "Full Body A", "Full Body B"),
        ("Upper A", "Lower A", "Full Body A", "Upper B", "Lower B", "Full Body B"),
        ("Push A", "Pull A", "Legs A", "Upper A", "Lower A", "Full Body A"),
    ),
})

DEFAULT_SPLIT_DAYS = 3

# Goal -> days per week -> index into SPLITS[days]
RECOMMENDED_SPLITS: Mapping[str, Mapping[int, int]] = MappingProxyType({
    "Lose weight": MappingProxyType({3: 0, 4: 0, 5: 0, 6: 3}),
    "Gain muscle": MappingProxyType({3: 1, 4: 3, 5: 3, 6: 1}),
    "Gain strength": MappingProxyType({3: 0, 4: 3, 5: 1, 6: 0}),
    "Maintain muscle": MappingProxyType({3: 2, 4: 2, 5: 0, 6: 3}),
})


def select_split(goal: str, days_per_week: int) -> Tuple[SplitTemplate, ...]:
    """Weekly split for a goal; unknown goal/day combinations use the 3-day set."""
    by_days = RECOMMENDED_SPLITS.get(goal, {})
    if days_per_week in SPLITS and days_per_week in by_days:
        names = SPLITS[days_per_week][by_days[days_per_week]]
    else:
        names = SPLITS[DEFAULT_SPLIT_DAYS][by_days.get(DEFAULT_SPLIT_DAYS, 0)]
    return tuple(TEMPLATES[name] for name in names)
