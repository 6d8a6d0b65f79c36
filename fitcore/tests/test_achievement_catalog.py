from dataclasses import replace

import pytest

from fitcore.features.achievements.catalog import (
    ACHIEVEMENTS,
    PLACEHOLDER_IDS,
    PROGRESS_FUNCTIONS,
    coin_rewards,
    get_definition,
    ratio_progress,
)
from fitcore.models.metrics import UserMetrics


def test_catalog_has_fifty_definitions():
    assert len(ACHIEVEMENTS) == 50
    assert set(PROGRESS_FUNCTIONS) == set(ACHIEVEMENTS)
    assert all(d.coin_reward > 0 for d in ACHIEVEMENTS.values())


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        ACHIEVEMENTS[999] = get_definition(1)


def test_all_zero_metrics_give_zero_progress():
    zero = UserMetrics()
    for achievement_id, progress_fn in PROGRESS_FUNCTIONS.items():
        assert progress_fn(zero) == 0, achievement_id


def test_placeholders_stay_at_zero_for_any_metrics():
    busy = UserMetrics(
        total_workouts=10_000,
        total_volume=10_000_000,
        personal_bests=500,
        social_posts=500,
        is_advanced_level=True,
    )
    assert PLACEHOLDER_IDS == {17, 18, 27, 29, 30, 33, 35, 43}
    for achievement_id in PLACEHOLDER_IDS:
        assert PROGRESS_FUNCTIONS[achievement_id](busy) == 0


def test_volume_progress_is_proportional_and_clamped():
    iron_titan = PROGRESS_FUNCTIONS[45]  # 100,000 kg
    assert iron_titan(UserMetrics(total_volume=50_000)) == 50
    assert iron_titan(UserMetrics(total_volume=100_000)) == 100
    assert iron_titan(UserMetrics(total_volume=150_000)) == 100


@pytest.mark.parametrize("achievement_id,field", [
    (3, "total_workouts"),
    (12, "total_volume"),
    (21, "current_streak"),
    (38, "max_likes_on_post"),
    (47, "consecutive_weeks_with_workout"),
])
def test_progress_is_non_decreasing_in_driving_metric(achievement_id, field):
    progress_fn = PROGRESS_FUNCTIONS[achievement_id]
    previous = 0
    for value in range(0, 200_000, 997):
        progress = progress_fn(replace(UserMetrics(), **{field: value}))
        assert 0 <= progress <= 100
        assert progress >= previous
        previous = progress


def test_milestones_are_all_or_nothing():
    first_rep = PROGRESS_FUNCTIONS[1]
    assert first_rep(UserMetrics(total_workouts=1)) == 100

    lift_legend = PROGRESS_FUNCTIONS[31]
    assert lift_legend(UserMetrics(max_pr_increase=49.9)) == 0
    assert lift_legend(UserMetrics(max_pr_increase=50.0)) == 100

    veteran = PROGRESS_FUNCTIONS[34]
    assert veteran(UserMetrics(is_advanced_level=True)) == 100


def test_weekend_warrior_passes_completion_through():
    assert PROGRESS_FUNCTIONS[26](UserMetrics(current_month_weekend_completion=40)) == 40


def test_ratio_rounds_half_up():
    assert ratio_progress(1, 8) == 13  # 12.5
    assert ratio_progress(1, 3) == 33
    assert ratio_progress(5, 0) == 0


def test_coin_rewards_table():
    rewards = coin_rewards()
    assert rewards[1] == 10
    assert rewards[12] == 50
    assert rewards[45] == 150
    assert rewards[56] == 250
