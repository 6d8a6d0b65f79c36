"""
Coin ledger.

Credits coins through the product of active boosts, debits without ever going
negative, and manages double-coin boosts and streak saver tokens. Expired
boosts are pruned lazily whenever an operation touches the account.
Insufficient balance and missing unused savers are reported as False.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from fitcore.core.clock import ensure_utc, utcnow
from fitcore.core.config import settings
from fitcore.core.errors import ValidationError
from fitcore.core.logging import log_event
from fitcore.features.achievements.catalog import ACHIEVEMENTS
from fitcore.features.coins.store import CoinAccount, get_store
from fitcore.models.achievement import AchievementProgressRecord
from fitcore.models.coins import CoinBoost, StreakSaverToken

DOUBLE_COINS = "double_coins"


def _validate_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be an integer")
    if amount < 0:
        raise ValidationError("amount must be non-negative")
    return amount


def _prune_boosts(account: CoinAccount, now: datetime) -> None:
    account.boosts = [b for b in account.boosts if b.end_time > now]


def _multiplier(account: CoinAccount, now: datetime) -> float:
    product = 1.0
    for boost in account.boosts:
        if boost.is_active(now):
            product *= boost.multiplier
    return product


def achievement_reward(achievement_ids: Iterable[int]) -> int:
    return sum(ACHIEVEMENTS[a].coin_reward for a in achievement_ids if a in ACHIEVEMENTS)


def total_coins_from_achievements(records: Iterable[AchievementProgressRecord]) -> int:
    """Historical total: rewards of every stored record that reached 100%."""
    return achievement_reward(
        r.achievement_id for r in records if r.progress == 100 or r.is_unlocked
    )


class CoinLedger:

    def __init__(
        self,
        store=None,
        *,
        boost_hours: Optional[int] = None,
        boost_multiplier: Optional[float] = None,
        protection_days: Optional[int] = None,
    ):
        self._store = store
        self._boost_window = timedelta(hours=boost_hours or settings.DOUBLE_COIN_BOOST_HOURS)
        self._boost_multiplier = float(boost_multiplier or settings.DOUBLE_COIN_MULTIPLIER)
        self._protection_days = protection_days or settings.STREAK_SAVER_PROTECTION_DAYS

    @property
    def store(self):
        return self._store if self._store is not None else get_store()

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        return ensure_utc(now) if now else utcnow()

    # Balance ----------------------------------------------------------
    def get_balance(self, user_id: str) -> int:
        return self.store.load(user_id).balance

    def _credit(self, account: CoinAccount, amount: int, now: datetime, event_type: str) -> int:
        _prune_boosts(account, now)
        multiplier = _multiplier(account, now)
        credited = int(math.floor(amount * multiplier))
        account.balance += credited
        log_event(
            "info",
            "coins.credited",
            request_id=None,
            user_id=account.user_id,
            event_type=event_type,
            extra={"amount": amount, "credited": credited, "multiplier": multiplier},
        )
        return credited

    def add_coins(self, user_id: str, amount: int, *, now: Optional[datetime] = None) -> int:
        """Credit floor(amount x product of active boosts); returns the credited amount."""
        _validate_amount(amount)
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            return self._credit(account, amount, now, "coins_added")

    def subtract_coins(self, user_id: str, amount: int) -> bool:
        _validate_amount(amount)
        with self.store.transaction(user_id) as account:
            if account.balance < amount:
                return False
            account.balance -= amount
        return True

    def award_achievement_coins(
        self, user_id: str, achievement_ids: Iterable[int], *, now: Optional[datetime] = None
    ) -> int:
        """Sum the rewards of newly unlocked achievements and credit them once."""
        base = achievement_reward(achievement_ids)
        if base == 0:
            return 0
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            account.achievement_coins_paid += base
            return self._credit(account, base, now, "achievement_coins")

    def reconcile_achievement_coins(
        self, user_id: str, records: Iterable[AchievementProgressRecord], *, now: Optional[datetime] = None
    ) -> int:
        """Credit achievement rewards the stored unlocks earned but the account never received."""
        total = total_coins_from_achievements(records)
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            owed = total - account.achievement_coins_paid
            if owed <= 0:
                return 0
            account.achievement_coins_paid = total
            return self._credit(account, owed, now, "achievement_coins_reconciled")

    # Boosts -----------------------------------------------------------
    def activate_double_coin_boost(self, user_id: str, *, now: Optional[datetime] = None) -> CoinBoost:
        """Start a fresh double-coin window, replacing any existing one."""
        now = self._now(now)
        boost = CoinBoost(
            boost_type=DOUBLE_COINS,
            start_time=now,
            end_time=now + self._boost_window,
            multiplier=self._boost_multiplier,
        )
        with self.store.transaction(user_id) as account:
            _prune_boosts(account, now)
            account.boosts = [b for b in account.boosts if b.boost_type != DOUBLE_COINS]
            account.boosts.append(boost)
        return boost

    def current_multiplier(self, user_id: str, *, now: Optional[datetime] = None) -> float:
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            _prune_boosts(account, now)
            return _multiplier(account, now)

    def active_boosts(self, user_id: str, *, now: Optional[datetime] = None) -> List[CoinBoost]:
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            _prune_boosts(account, now)
            return [b for b in account.boosts if b.is_active(now)]

    def is_double_coins_active(self, user_id: str, *, now: Optional[datetime] = None) -> bool:
        return any(b.boost_type == DOUBLE_COINS for b in self.active_boosts(user_id, now=now))

    def double_coin_time_remaining(self, user_id: str, *, now: Optional[datetime] = None) -> timedelta:
        now = self._now(now)
        remaining = [b.remaining(now) for b in self.active_boosts(user_id, now=now) if b.boost_type == DOUBLE_COINS]
        return max(remaining, default=timedelta(0))

    # Streak savers ----------------------------------------------------
    def add_streak_saver(self, user_id: str) -> StreakSaverToken:
        token = StreakSaverToken(protection_days=self._protection_days)
        with self.store.transaction(user_id) as account:
            account.streak_savers.append(token)
        return token

    def activate_streak_saver(self, user_id: str, *, now: Optional[datetime] = None) -> bool:
        """Consume the first unused token and start its protection window."""
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            token = next((t for t in account.streak_savers if not t.used), None)
            if token is None:
                return False
            token.used = True
            token.activated_at = now
        log_event("info", "coins.streak_saver_activated", request_id=None, user_id=user_id, event_type="streak_saver")
        return True

    def unused_streak_saver_count(self, user_id: str) -> int:
        return sum(1 for t in self.store.load(user_id).streak_savers if not t.used)

    def is_streak_protection_active(self, user_id: str, *, now: Optional[datetime] = None) -> bool:
        now = self._now(now)
        return any(t.is_protecting(now) for t in self.store.load(user_id).streak_savers)

    def protection_time_remaining(self, user_id: str, *, now: Optional[datetime] = None) -> timedelta:
        now = self._now(now)
        return max((t.remaining(now) for t in self.store.load(user_id).streak_savers), default=timedelta(0))

    def cleanup_expired_streak_savers(self, user_id: str, *, now: Optional[datetime] = None) -> int:
        """Drop used tokens whose protection window has ended. Returns how many were removed."""
        now = self._now(now)
        with self.store.transaction(user_id) as account:
            before = len(account.streak_savers)
            account.streak_savers = [
                t for t in account.streak_savers if not t.used or t.is_protecting(now)
            ]
            return before - len(account.streak_savers)

    def status(self, user_id: str, *, now: Optional[datetime] = None) -> dict:
        now = self._now(now)
        remaining = self.double_coin_time_remaining(user_id, now=now)
        protection = self.protection_time_remaining(user_id, now=now)
        return {
            "user_id": user_id,
            "balance": self.get_balance(user_id),
            "multiplier": self.current_multiplier(user_id, now=now),
            "double_coins_active": remaining > timedelta(0),
            "double_coins_seconds_remaining": int(remaining.total_seconds()),
            "unused_streak_savers": self.unused_streak_saver_count(user_id),
            "streak_protected": protection > timedelta(0),
            "streak_protection_seconds_remaining": int(protection.total_seconds()),
        }


coin_ledger = CoinLedger()
