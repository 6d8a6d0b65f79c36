from datetime import timedelta

import pytest

from fitcore.core.errors import ValidationError
from fitcore.features.coins.ledger import CoinLedger, total_coins_from_achievements
from fitcore.features.coins.store import InMemoryCoinStore
from fitcore.models.achievement import AchievementProgressRecord


@pytest.fixture
def ledger():
    return CoinLedger(store=InMemoryCoinStore())


def test_add_and_subtract(ledger):
    assert ledger.add_coins("u1", 30) == 30
    assert ledger.subtract_coins("u1", 100) is False
    assert ledger.get_balance("u1") == 30
    assert ledger.subtract_coins("u1", 30) is True
    assert ledger.get_balance("u1") == 0


@pytest.mark.parametrize("amount", [-1, 2.5, True])
def test_invalid_amounts_are_rejected(ledger, amount):
    with pytest.raises(ValidationError):
        ledger.add_coins("u1", amount)
    with pytest.raises(ValidationError):
        ledger.subtract_coins("u1", amount)


def test_double_coin_boost_applies_until_expiry(ledger, now):
    ledger.activate_double_coin_boost("u1", now=now)

    assert ledger.add_coins("u1", 10, now=now + timedelta(hours=1)) == 20
    assert ledger.add_coins("u1", 10, now=now + timedelta(hours=25)) == 10
    assert ledger.get_balance("u1") == 30


def test_boost_window_is_half_open(ledger, now):
    ledger.activate_double_coin_boost("u1", now=now)

    assert ledger.is_double_coins_active("u1", now=now + timedelta(hours=24) - timedelta(seconds=1))
    assert not ledger.is_double_coins_active("u1", now=now + timedelta(hours=24))


def test_reactivating_boost_replaces_it(ledger, now):
    ledger.activate_double_coin_boost("u1", now=now)
    ledger.activate_double_coin_boost("u1", now=now + timedelta(hours=12))

    assert len(ledger.active_boosts("u1", now=now + timedelta(hours=13))) == 1
    assert ledger.current_multiplier("u1", now=now + timedelta(hours=13)) == 2.0
    assert ledger.double_coin_time_remaining("u1", now=now + timedelta(hours=13)) == timedelta(hours=23)


def test_time_remaining_is_zero_without_boost(ledger, now):
    assert ledger.double_coin_time_remaining("u1", now=now) == timedelta(0)
    assert ledger.current_multiplier("u1", now=now) == 1.0


def test_award_achievement_coins(ledger, now):
    assert ledger.award_achievement_coins("u1", [1, 12], now=now) == 60
    assert ledger.award_achievement_coins("u1", [], now=now) == 0

    ledger.activate_double_coin_boost("u1", now=now)
    assert ledger.award_achievement_coins("u1", [1, 12], now=now) == 120
    assert ledger.get_balance("u1") == 180


def test_total_coins_from_completed_records(now):
    records = [
        AchievementProgressRecord("u1", 1, progress=100, unlocked_at=now),
        AchievementProgressRecord("u1", 45, progress=100, unlocked_at=now),
        AchievementProgressRecord("u1", 12, progress=60),
    ]
    assert total_coins_from_achievements(records) == 160


def test_sticky_unlock_still_counts_after_progress_drops(now):
    records = [AchievementProgressRecord("u1", 12, progress=40, unlocked_at=now)]
    assert total_coins_from_achievements(records) == 50


def test_reconcile_pays_only_what_is_owed(ledger, now):
    records = [
        AchievementProgressRecord("u1", 1, progress=100, unlocked_at=now),
        AchievementProgressRecord("u1", 12, progress=40, unlocked_at=now),
    ]
    assert ledger.award_achievement_coins("u1", [1], now=now) == 10

    assert ledger.reconcile_achievement_coins("u1", records, now=now) == 50
    assert ledger.reconcile_achievement_coins("u1", records, now=now) == 0
    assert ledger.get_balance("u1") == 60


def test_activate_without_saver_returns_false(ledger, now):
    assert ledger.activate_streak_saver("u1", now=now) is False
    assert not ledger.is_streak_protection_active("u1", now=now)


def test_streak_saver_protection_window(ledger, now):
    ledger.add_streak_saver("u1")
    ledger.add_streak_saver("u1")

    assert ledger.activate_streak_saver("u1", now=now) is True
    assert ledger.unused_streak_saver_count("u1") == 1
    assert ledger.is_streak_protection_active("u1", now=now + timedelta(days=2))
    assert ledger.protection_time_remaining("u1", now=now + timedelta(days=2)) == timedelta(days=1)
    assert not ledger.is_streak_protection_active("u1", now=now + timedelta(days=3))


def test_cleanup_drops_only_expired_used_savers(ledger, now):
    ledger.add_streak_saver("u1")
    ledger.add_streak_saver("u1")
    ledger.activate_streak_saver("u1", now=now)

    assert ledger.cleanup_expired_streak_savers("u1", now=now + timedelta(days=1)) == 0
    assert ledger.cleanup_expired_streak_savers("u1", now=now + timedelta(days=3)) == 1
    assert ledger.unused_streak_saver_count("u1") == 1


def test_status_summary(ledger, now):
    ledger.add_coins("u1", 40, now=now)
    ledger.activate_double_coin_boost("u1", now=now)
    ledger.add_streak_saver("u1")

    status = ledger.status("u1", now=now + timedelta(hours=1))

    assert status["balance"] == 40
    assert status["multiplier"] == 2.0
    assert status["double_coins_active"] is True
    assert status["double_coins_seconds_remaining"] == 23 * 3600
    assert status["unused_streak_savers"] == 1
    assert status["streak_protected"] is False


def test_sql_store_keeps_boosts_and_savers(sqlite_engine, now):
    from fitcore.features.coins.store_sql import SqlCoinStore

    ledger = CoinLedger(store=SqlCoinStore())
    ledger.activate_double_coin_boost("u1", now=now)
    ledger.activate_double_coin_boost("u1", now=now + timedelta(hours=2))
    ledger.add_streak_saver("u1")

    assert ledger.add_coins("u1", 15, now=now + timedelta(hours=3)) == 30
    assert ledger.subtract_coins("u1", 50) is False
    assert len(ledger.active_boosts("u1", now=now + timedelta(hours=3))) == 1

    assert ledger.activate_streak_saver("u1", now=now) is True
    assert ledger.is_streak_protection_active("u1", now=now + timedelta(days=1))
    assert ledger.cleanup_expired_streak_savers("u1", now=now + timedelta(days=4)) == 1
    assert ledger.unused_streak_saver_count("u1") == 0
    assert ledger.get_balance("u1") == 30


def test_sql_store_tracks_paid_achievement_coins(sqlite_engine, now):
    from fitcore.features.coins.store_sql import SqlCoinStore

    ledger = CoinLedger(store=SqlCoinStore())
    records = [
        AchievementProgressRecord("u1", 1, progress=100, unlocked_at=now),
        AchievementProgressRecord("u1", 11, progress=100, unlocked_at=now),
    ]

    assert ledger.award_achievement_coins("u1", [1], now=now) == 10
    assert SqlCoinStore.load("u1").achievement_coins_paid == 10
    assert ledger.reconcile_achievement_coins("u1", records, now=now) == 10
    assert ledger.reconcile_achievement_coins("u1", records, now=now) == 0
    assert ledger.get_balance("u1") == 20
