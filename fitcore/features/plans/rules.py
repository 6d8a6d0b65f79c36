"""
Static training rules used by the plan generator.

All tables are read-only; look-ups fall back to documented defaults when a
goal or experience level is unknown.
"""

from types import MappingProxyType
from typing import Mapping

from fitcore.models.plan import RepRange

MAX_SETS_PER_EXERCISE = 3
# Upper, Lower and Full Body days use this many sets regardless of goal
MAX_SETS_UPPER_LOWER_FULL_BODY = 2
SENIOR_MIN_SETS = 2
SENIOR_AGE = 50

DEFAULT_REP_RANGE = RepRange(8, 12)
ACCESSORY_REP_RANGE = RepRange(12, 15)
ACCESSORY_KEYWORDS = ("calf", "crunch")
TIMED_KEYWORDS = ("plank",)

DEFAULT_REST_SECONDS = 90

REP_RANGES: Mapping[str, Mapping[str, RepRange]] = MappingProxyType({
    "Lose weight": MappingProxyType({
        "Novice": RepRange(8, 12),
        "Experienced": RepRange(6, 10),
        "Advanced": RepRange(6, 10),
    }),
    "Gain muscle": MappingProxyType({
        "Novice": RepRange(8, 12),
        "Experienced": RepRange(6, 10),
        "Advanced": RepRange(6, 10),
    }),
    "Gain strength": MappingProxyType({
        "Novice": RepRange(6, 8),
        "Experienced": RepRange(4, 6),
        "Advanced": RepRange(4, 6),
    }),
    "Maintain muscle": MappingProxyType({
        "Novice": RepRange(8, 12),
        "Experienced": RepRange(8, 10),
        "Advanced": RepRange(8, 10),
    }),
})

# Push/Pull/Legs days: 3 sets for muscle gain and strength
SETS_PER_EXERCISE_PPL: Mapping[str, int] = MappingProxyType({
    "Lose weight": 2,
    "Gain muscle": 3,
    "Gain strength": 3,
    "Maintain muscle": 2,
})

REST_TIME_BY_GOAL: Mapping[str, int] = MappingProxyType({
    "Lose weight": 150,
    "Gain muscle": 150,
    "Gain strength": 180,
    "Maintain muscle": 90,
})

CARDIO_RECOMMENDATIONS: Mapping[str, Mapping[str, object]] = MappingProxyType({
    "Lose weight": MappingProxyType({
        "recommended": True,
        "frequency": "3-5 times per week",
        "note": "Focus: Maintain muscle mass + cardiovascular training. Cardio outside of strength training.",
    }),
    "Gain muscle": MappingProxyType({
        "recommended": False,
        "frequency": "Optional",
        "note": "Focus: Hypertrophy with progression. Train muscles 2x per week.",
    }),
    "Gain strength": MappingProxyType({
        "recommended": False,
        "frequency": "Optional",
        "note": "Focus: Compound movements, heavy loads, good technique. Prioritize barbell and heavy exercises.",
    }),
    "Maintain muscle": MappingProxyType({
        "recommended": False,
        "frequency": "Optional",
        "note": "Focus: Minimum effective stimulus. Short, efficient sessions.",
    }),
})

BASE_RECOMMENDATIONS: Mapping[str, str] = MappingProxyType({
    "Lose weight": "Prioritize diet and cardio sessions 3-5x/week. Focus on progressive overload with moderate weights.",
    "Gain muscle": "Progressively increase weights over time. Aim for 8-12 reps with challenging weights.",
    "Gain strength": "Focus on compound movements with heavy weights. Rest 2-3 minutes between sets.",
    "Maintain muscle": "Keep consistent with your routine. Focus on movement quality and mind-muscle connection.",
})
DEFAULT_RECOMMENDATION = "Stay consistent with your training."

EXPERIENCE_NOTES: Mapping[str, str] = MappingProxyType({
    "Novice": " Focus on learning proper form before increasing weights.",
    "Advanced": " Consider periodization and advanced techniques like supersets.",
})
SENIOR_NOTE = " Prioritize warm-up and mobility work. Listen to your body and allow adequate recovery."
GENDER_NOTES: Mapping[str, str] = MappingProxyType({
    "Female": " Don't neglect upper body training alongside lower body focus.",
})


def rep_range_for(goal: str, experience_level: str) -> RepRange:
    return REP_RANGES.get(goal, {}).get(experience_level, DEFAULT_REP_RANGE)


def rest_seconds_for(goal: str) -> int:
    return REST_TIME_BY_GOAL.get(goal, DEFAULT_REST_SECONDS)


def cardio_for(goal: str) -> Mapping[str, object]:
    return CARDIO_RECOMMENDATIONS.get(goal, CARDIO_RECOMMENDATIONS["Maintain muscle"])
