import pytest

from fitcore.features.exercises.mappings import normalize_exercise_name, string_similarity, variation_names
from fitcore.features.exercises.matcher import (
    ExerciseMatcher,
    exercise_matcher,
    extract_body_part_keywords,
    primary_body_part,
    reverse_containment_match,
)
from fitcore.models.exercise import ExerciseCatalogEntry


def entry(name, body_part="", target="", equipment=""):
    return ExerciseCatalogEntry(id=name, name=name, body_part=body_part, target=target, equipment=equipment)


@pytest.fixture
def matcher():
    return ExerciseMatcher()


def test_curated_match_beats_plain_name(matcher):
    catalog = [entry("squat"), entry("barbell squat")]

    result = matcher.resolve("Free squat", catalog)

    assert result.entry.name == "barbell squat"
    assert (result.strategy, result.tier) == ("exact_dictionary", 1)


def test_curated_match_prefers_equipment_specific_name(matcher):
    catalog = [entry("bench press"), entry("barbell bench press")]
    assert matcher.match("Barbell bench press", catalog).name == "barbell bench press"


def test_direct_name_is_case_insensitive(matcher):
    result = matcher.resolve("Zottman curl", [entry("barbell curl"), entry("zottman curl")])
    assert result.entry.name == "zottman curl"
    assert result.strategy == "direct_name"


def test_fallback_options_used_when_canonical_missing(matcher):
    result = matcher.resolve("Leg curl", [entry("hamstring curl"), entry("seated leg curl")])
    assert result.entry.name == "seated leg curl"
    assert result.strategy == "fallback_list"


def test_containment_picks_shortest_name(matcher):
    catalog = [entry("dumbbell hip thrust variation"), entry("barbell hip thrust")]

    result = matcher.resolve("Hip thrust", catalog)

    assert result.entry.name == "barbell hip thrust"
    assert result.tier == 4


def test_equipment_variants_follow_fixed_order(matcher):
    catalog = [
        entry("cable pullover", equipment="cable"),
        entry("barbell pullover", equipment="barbell"),
    ]

    result = matcher.resolve("Dumbbell pullover", catalog)

    assert result.entry.name == "barbell pullover"
    assert result.strategy == "equipment_variant"


def test_reverse_containment_uses_last_two_words():
    catalog = [entry("leg"), entry("leg raise"), entry("raise")]
    assert reverse_containment_match("Weighted hanging leg raise", catalog).name == "leg raise"
    assert reverse_containment_match("Raise", catalog) is None


def test_body_part_keyword_match(matcher):
    catalog = [
        entry("barbell curl", body_part="upper arms", target="biceps"),
        entry("push-up", body_part="chest", target="pectorals"),
    ]

    result = matcher.resolve("Chest squeeze", catalog)

    assert result.entry.name == "push-up"
    assert result.strategy == "body_part_keyword"


def test_primary_body_part_picks_shortest_entry(matcher):
    catalog = [
        entry("cable crossover", body_part="chest", target="pectorals"),
        entry("push-up", body_part="chest", target="pectorals"),
        entry("barbell curl", body_part="upper arms", target="biceps"),
    ]

    result = matcher.resolve("Incline fly variation", catalog)

    assert result.entry.name == "push-up"
    assert (result.strategy, result.tier) == ("primary_body_part", 8)


def test_no_match_returns_none(matcher, sample_catalog):
    assert matcher.resolve("Zzz unknown", sample_catalog) is None
    assert exercise_matcher.match("Free squat", []) is None


def test_sample_catalog_resolves_template_names(sample_catalog):
    assert exercise_matcher.match("Free squat", sample_catalog).name == "barbell squat"
    assert exercise_matcher.match("Leg curl", sample_catalog).name == "lying leg curl"
    assert exercise_matcher.match("Plank", sample_catalog).name == "plank"


def test_keyword_helpers():
    assert extract_body_part_keywords("Seated calf raise") == ["calf"]
    assert primary_body_part("Incline bench press") == "chest"
    assert primary_body_part("Farmer walk") is None


def test_name_normalization_and_similarity():
    assert normalize_exercise_name("  Bench-Press (Wide) ") == "bench press"
    assert string_similarity("Squat", "squat") == 1.0
    assert string_similarity("squat", "squad") == pytest.approx(0.8)
    assert string_similarity("squat", "") == 0.0


def test_variation_names():
    assert variation_names("Free squat") == ["barbell squat", "barbell back squat"]
    assert variation_names("Farmer walk") == ["farmer walk"]
