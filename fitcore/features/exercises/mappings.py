"""
Curated exercise-name tables and name utilities.

Template exercise names are short, human-friendly labels ("Free squat");
catalog names follow the catalog's own conventions ("barbell squat"). These
read-only tables bridge the two.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import List, Mapping, Tuple

# Template name -> canonical catalog name
EXACT_MATCHES: Mapping[str, str] = MappingProxyType({
    # Chest
    "Barbell bench press": "barbell bench press",
    "Dumbbell bench press": "dumbbell bench press",
    "Incline dumbbell bench press": "incline dumbbell bench press",
    "Decline bench press": "decline barbell bench press",
    "Dumbbell fly": "dumbbell fly",
    "Incline dumbbell fly": "incline dumbbell fly",
    "Pec deck": "pec deck fly",
    "Machine chest press": "chest press machine",
    "Machine fly": "butterfly machine",
    "Machine incline press": "incline chest press machine",
    # Back
    "Bent-over row": "barbell bent over row",
    "Barbell bent-over row": "barbell bent over row",
    "Dumbbell bent-over row": "dumbbell bent over row",
    "One-arm row": "dumbbell one arm row",
    "Seated row": "seated cable row",
    "Front pulldown": "cable lat pulldown",
    "Wide-grip pulldown": "cable wide grip lat pulldown",
    "Assisted pull-up": "assisted pull-up",
    "Face pull": "cable face pull",
    "Machine row": "seated row machine",
    "Machine front pulldown": "lat pulldown machine",
    "Shrug": "barbell shrug",
    # Shoulders
    "Dumbbell shoulder press": "dumbbell shoulder press",
    "Military press": "barbell military press",
    "Lateral raise": "dumbbell lateral raise",
    "Front raise": "dumbbell front raise",
    "Dumbbell front raise": "dumbbell front raise",
    "Seated lateral raise": "seated dumbbell lateral raise",
    "Machine shoulder press": "shoulder press machine",
    "Seated front raise": "seated dumbbell front raise",
    # Arms
    "Barbell curl": "barbell curl",
    "Cable triceps pushdown": "cable triceps pushdown",
    "Rope triceps pushdown": "cable rope triceps pushdown",
    "Alternating curl": "dumbbell alternate bicep curl",
    "French press": "ez barbell lying triceps extension",
    "Hammer curl": "dumbbell hammer curl",
    "Bench triceps dip": "bench dip",
    "Dumbbell curl": "dumbbell bicep curl",
    # Legs
    "Free squat": "barbell squat",
    "Front squat": "barbell front squat",
    "Leg press": "sled leg press",
    "Romanian deadlift": "barbell romanian deadlift",
    "Leg extension": "leg extensions",
    "Leg curl": "lying leg curl",
    "Calf raise": "standing calf raise",
    "Seated calf raise": "seated calf raise",
    "Lunge": "dumbbell lunge",
    "Box squat": "barbell box squat",
    "Light leg press": "sled leg press",
    "Sumo squat": "barbell sumo squat",
    "Dumbbell deadlift": "dumbbell deadlift",
    "Machine glute": "cable glute kickback",
    "Abductor": "cable hip abduction",
    # Core
    "Plank": "plank",
    "Modified plank": "knee plank",
    "Machine crunch": "cable crunch",
})

# Template name -> ordered fallback catalog names
FALLBACK_OPTIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Barbell bench press": ("bench press", "smith machine bench press", "barbell incline bench press"),
    "Dumbbell bench press": ("bench press (with dumbbells)", "dumbbell floor press"),
    "Incline dumbbell bench press": ("incline bench press", "dumbbell incline bench press", "incline press"),
    "Decline bench press": ("decline bench press", "smith machine decline bench press", "decline press"),
    "Dumbbell fly": ("dumbbell flyes", "cable crossover", "chest fly"),
    "Pec deck": ("butterfly machine", "chest fly machine", "cable crossover"),
    "Machine chest press": ("seated chest press", "smith machine bench press", "chest press"),
    "Bent-over row": ("bent over row", "barbell row", "smith machine row"),
    "Barbell bent-over row": ("bent over row", "barbell row", "bent over barbell row"),
    "Dumbbell bent-over row": ("bent over dumbbell row", "dumbbell row", "bent over row"),
    "Seated row": ("cable seated row", "machine row", "low row"),
    "Front pulldown": ("lat pulldown", "wide-grip lat pulldown", "cable pulldown"),
    "Assisted pull-up": ("machine assisted pull-up", "lat pulldown", "cable pulldown"),
    "Dumbbell shoulder press": ("seated dumbbell shoulder press", "shoulder press", "dumbbell press"),
    "Military press": ("barbell shoulder press", "smith machine overhead press", "shoulder press"),
    "Lateral raise": ("dumbbell side lateral raise", "cable lateral raise", "side raise"),
    "Barbell curl": ("standing barbell curl", "biceps curl (barbell)", "ez-bar curl"),
    "Cable triceps pushdown": ("triceps pushdown", "cable pushdown", "pushdown"),
    "Rope triceps pushdown": ("triceps pushdown", "cable pushdown", "rope pushdown"),
    "Alternating curl": ("alternate hammer curl", "alternating dumbbell curl", "dumbbell curl"),
    "French press": ("lying triceps extension", "skull crusher", "triceps extension"),
    "Free squat": ("barbell squat", "squat", "smith machine squat"),
    "Front squat": ("front squat", "smith machine front squat", "goblet squat"),
    "Leg press": ("leg press", "45 degree leg press", "horizontal leg press"),
    "Romanian deadlift": ("romanian deadlift", "stiff leg deadlift", "straight leg deadlift"),
    "Leg curl": ("seated leg curl", "machine leg curl", "hamstring curl"),
    "Machine glute": ("hip thrust", "glute bridge", "cable kickback", "glute kickback"),
    "Abductor": ("hip abduction", "cable hip abduction", "abductor machine"),
    "Lunge": ("dumbbell lunge", "barbell lunge", "walking lunge"),
    "Sumo squat": ("sumo squat", "plie squat", "wide stance squat"),
})

# Alternative spellings retried by the plan generator after a miss
ALTERNATIVE_SPELLINGS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Barbell bench press": ("barbell bench press", "bench press"),
    "Dumbbell bench press": ("dumbbell bench press",),
    "Incline dumbbell bench press": ("incline dumbbell bench press", "incline bench press dumbbell"),
    "Decline bench press": ("decline barbell bench press", "decline bench press"),
    "Dumbbell fly": ("dumbbell fly", "dumbbell flyes"),
    "Incline dumbbell fly": ("incline dumbbell fly", "incline dumbbell flyes"),
    "Pec deck": ("pec deck fly", "butterfly machine", "chest fly machine"),
    "Machine chest press": ("chest press machine", "machine chest press", "seated chest press machine"),
    "Machine fly": ("machine fly", "pec deck fly"),
    "Machine incline press": ("incline chest press machine", "incline machine chest press"),
    "Bent-over row": ("barbell bent over row", "bent over barbell row"),
    "One-arm row": ("dumbbell one arm row", "single arm dumbbell row", "one arm dumbbell row"),
    "Seated row": ("seated cable row", "cable seated row"),
    "Front pulldown": ("lat pulldown", "cable lat pulldown"),
    "Wide-grip pulldown": ("wide grip lat pulldown", "cable wide grip lat pulldown"),
    "Assisted pull-up": ("assisted pull-up", "machine assisted pull-up"),
    "Face pull": ("cable face pull", "face pull"),
    "Machine row": ("seated row machine", "machine row"),
    "Machine front pulldown": ("lat pulldown machine", "machine lat pulldown"),
    "Shrug": ("barbell shrug", "dumbbell shrug"),
    "Dumbbell shoulder press": ("dumbbell shoulder press", "seated dumbbell shoulder press"),
    "Military press": ("barbell military press", "standing military press"),
    "Lateral raise": ("dumbbell lateral raise", "standing dumbbell lateral raise"),
    "Front raise": ("dumbbell front raise", "barbell front raise"),
    "Dumbbell front raise": ("dumbbell front raise",),
    "Seated lateral raise": ("seated dumbbell lateral raise",),
    "Machine shoulder press": ("shoulder press machine", "machine shoulder press"),
    "Seated front raise": ("seated dumbbell front raise",),
    "Barbell curl": ("barbell curl", "standing barbell curl"),
    "Cable triceps pushdown": ("cable triceps pushdown", "triceps pushdown"),
    "Rope triceps pushdown": ("rope triceps pushdown", "cable rope triceps pushdown"),
    "Alternating curl": ("dumbbell alternate bicep curl", "alternate dumbbell curl"),
    "French press": ("lying triceps extension", "skull crusher", "ez bar lying triceps extension"),
    "Hammer curl": ("dumbbell hammer curl", "standing hammer curl"),
    "Bench triceps dip": ("bench dip", "triceps bench dip"),
    "Dumbbell curl": ("dumbbell bicep curl", "dumbbell curl"),
    "Free squat": ("barbell squat", "barbell back squat"),
    "Front squat": ("barbell front squat", "front squat"),
    "Leg press": ("leg press", "sled leg press"),
    "Romanian deadlift": ("barbell romanian deadlift", "romanian deadlift"),
    "Leg extension": ("leg extensions", "machine leg extension"),
    "Leg curl": ("lying leg curl", "seated leg curl", "machine leg curl"),
    "Calf raise": ("standing calf raise", "machine standing calf raise"),
    "Seated calf raise": ("seated calf raise", "machine seated calf raise"),
    "Lunge": ("dumbbell lunge", "barbell lunge", "walking lunge"),
    "Box squat": ("barbell box squat", "box squat"),
    "Light leg press": ("leg press", "sled leg press"),
    "Sumo squat": ("barbell sumo squat", "dumbbell sumo squat", "sumo squat"),
    "Dumbbell deadlift": ("dumbbell deadlift",),
    "Machine glute": ("cable glute kickback", "glute kickback machine", "hip thrust"),
    "Abductor": ("cable hip abduction", "hip abduction machine"),
    "Plank": ("plank", "body plank"),
    "Modified plank": ("knee plank", "modified plank"),
    "Machine crunch": ("cable crunch", "machine crunch", "crunch machine"),
})


def variation_names(exercise_name: str) -> List[str]:
    """Alternative catalog spellings for a template name, or the lowercased name itself."""
    names = ALTERNATIVE_SPELLINGS.get(exercise_name)
    if names:
        return list(names)
    return [exercise_name.lower()]


_PARENTHESES = re.compile(r"\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


def normalize_exercise_name(name: str) -> str:
    text = _WHITESPACE.sub(" ", name.lower())
    text = text.replace("-", " ")
    text = _PARENTHESES.sub("", text)
    return text.strip()


def string_similarity(a: str, b: str) -> float:
    """1 - normalized Levenshtein distance between normalized names (0..1)."""
    left = normalize_exercise_name(a)
    right = normalize_exercise_name(b)
    if left == right:
        return 1.0
    if not left or not right:
        return 0.0

    previous = list(range(len(right) + 1))
    for i, lc in enumerate(left, start=1):
        current = [i]
        for j, rc in enumerate(right, start=1):
            cost = 0 if lc == rc else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current

    return 1 - previous[-1] / max(len(left), len(right))
