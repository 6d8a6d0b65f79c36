"""
Template-name to catalog-entry matching.

Matching runs an ordered list of independent strategies and returns the first
hit. Curated tables come first, then increasingly coarse heuristics. No match
is a normal outcome (None); callers decide the fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from fitcore.core.logging import log_event
from fitcore.features.exercises.mappings import EXACT_MATCHES, FALLBACK_OPTIONS
from fitcore.models.exercise import ExerciseCatalogEntry

logger = logging.getLogger("fitcore")

Catalog = Sequence[ExerciseCatalogEntry]
MatchStrategy = Callable[[str, Catalog], Optional[ExerciseCatalogEntry]]

LEADING_EQUIPMENT = ("barbell", "dumbbell", "machine", "cable", "assisted", "smith")
EQUIPMENT_VARIANTS = ("barbell", "dumbbell", "machine", "cable", "body weight", "smith machine")
BODY_PART_KEYWORDS = (
    "chest", "pec", "back", "lat", "shoulder", "delt",
    "bicep", "tricep", "arm", "leg", "quad", "hamstring",
    "glute", "calf", "abs", "core", "oblique",
)
# Checked in order; the first keyword found in the name decides
PRIMARY_BODY_PARTS: Tuple[Tuple[str, str], ...] = (
    ("bench press", "chest"),
    ("fly", "chest"),
    ("press", "chest"),
    ("row", "back"),
    ("pulldown", "back"),
    ("pull-up", "back"),
    ("shoulder", "shoulders"),
    ("lateral", "shoulders"),
    ("front raise", "shoulders"),
    ("bicep", "upper arms"),
    ("triceps", "upper arms"),
    ("squat", "upper legs"),
    ("leg press", "upper legs"),
    ("deadlift", "upper legs"),
    ("lunge", "upper legs"),
    ("extension", "upper legs"),
    ("hamstring", "upper legs"),
    ("calf", "lower legs"),
    ("abductor", "upper legs"),
    ("glute", "upper legs"),
    ("crunch", "waist"),
    ("plank", "waist"),
)

_EXACT_BY_LOWER = {name.lower(): canonical for name, canonical in EXACT_MATCHES.items()}
_FALLBACK_BY_LOWER = {name.lower(): options for name, options in FALLBACK_OPTIONS.items()}


def _norm(text: Optional[str]) -> str:
    return (text or "").lower().strip()


def _find_named(catalog: Catalog, wanted: str) -> Optional[ExerciseCatalogEntry]:
    wanted = _norm(wanted)
    return next((entry for entry in catalog if _norm(entry.name) == wanted), None)


def extract_body_part_keywords(template_name: str) -> List[str]:
    name = template_name.lower()
    return [keyword for keyword in BODY_PART_KEYWORDS if keyword in name]


def primary_body_part(template_name: str) -> Optional[str]:
    name = template_name.lower()
    for keyword, body_part in PRIMARY_BODY_PARTS:
        if keyword in name:
            return body_part
    return None


# Strategies -------------------------------------------------------------------

def exact_dictionary_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    canonical = _EXACT_BY_LOWER.get(_norm(template_name))
    return _find_named(catalog, canonical) if canonical else None


def direct_name_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    return _find_named(catalog, template_name)


def fallback_list_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    for option in _FALLBACK_BY_LOWER.get(_norm(template_name), ()):
        entry = _find_named(catalog, option)
        if entry is not None:
            return entry
    return None


def containment_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    """Either name contains the other; the shortest catalog name wins."""
    wanted = _norm(template_name)
    if not wanted:
        return None
    hits = [
        entry for entry in catalog
        if _norm(entry.name) and (wanted in _norm(entry.name) or _norm(entry.name) in wanted)
    ]
    return min(hits, key=lambda e: len(_norm(e.name))) if hits else None


def equipment_variant_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    """Strip a leading equipment word, then probe equipment keywords in a fixed order."""
    words = _norm(template_name).split()
    if not words:
        return None
    core = " ".join(words[1:]) if words[0] in LEADING_EQUIPMENT and len(words) > 1 else " ".join(words)
    for equipment in EQUIPMENT_VARIANTS:
        for entry in catalog:
            if core in _norm(entry.name) and equipment in _norm(entry.equipment):
                return entry
    return None


def reverse_containment_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    """Catalog names found inside the template's last two words; the longest wins."""
    words = _norm(template_name).split()
    if len(words) < 2:
        return None
    short_name = " ".join(words[-2:])
    hits = [entry for entry in catalog if _norm(entry.name) and _norm(entry.name) in short_name]
    return max(hits, key=lambda e: len(_norm(e.name))) if hits else None


def body_part_keyword_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    keywords = extract_body_part_keywords(template_name)
    if not keywords:
        return None

    def mentions(entry: ExerciseCatalogEntry, keyword: str) -> bool:
        return keyword in _norm(entry.body_part) or keyword in _norm(entry.target)

    hits = [entry for entry in catalog if any(mentions(entry, k) for k in keywords)]
    if not hits:
        return None
    best_keyword = max(keywords, key=len)
    preferred = [entry for entry in hits if mentions(entry, best_keyword)]
    return (preferred or hits)[0]


def primary_body_part_match(template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
    body_part = primary_body_part(template_name)
    if not body_part:
        return None
    hits = [
        entry for entry in catalog
        if body_part in _norm(entry.body_part) or body_part in _norm(entry.target)
    ]
    return min(hits, key=lambda e: len(e.name)) if hits else None


MATCH_STRATEGIES: Tuple[Tuple[str, MatchStrategy], ...] = (
    ("exact_dictionary", exact_dictionary_match),
    ("direct_name", direct_name_match),
    ("fallback_list", fallback_list_match),
    ("containment", containment_match),
    ("equipment_variant", equipment_variant_match),
    ("reverse_containment", reverse_containment_match),
    ("body_part_keyword", body_part_keyword_match),
    ("primary_body_part", primary_body_part_match),
)


@dataclass(frozen=True)
class MatchResult:
    entry: ExerciseCatalogEntry
    strategy: str
    tier: int


class ExerciseMatcher:
    """Runs the strategy list in order and stops at the first hit."""

    def __init__(self, strategies: Sequence[Tuple[str, MatchStrategy]] = MATCH_STRATEGIES):
        self._strategies = tuple(strategies)

    def resolve(self, template_name: str, catalog: Catalog) -> Optional[MatchResult]:
        for tier, (strategy_name, strategy) in enumerate(self._strategies, start=1):
            entry = strategy(template_name, catalog)
            if entry is not None:
                logger.debug("exercise.match %s -> %s [%s]", template_name, entry.name, strategy_name)
                return MatchResult(entry=entry, strategy=strategy_name, tier=tier)

        log_event(
            "info",
            "exercise.match_miss",
            request_id=None,
            event_type="exercise_match",
            extra={"template_name": template_name, "catalog_size": len(catalog)},
        )
        return None

    def match(self, template_name: str, catalog: Catalog) -> Optional[ExerciseCatalogEntry]:
        result = self.resolve(template_name, catalog)
        return result.entry if result else None


exercise_matcher = ExerciseMatcher()
