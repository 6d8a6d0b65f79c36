from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal, Optional

BoostType = Literal["double_coins"]


@dataclass
class CoinBoost:
    """Time-boxed multiplier, active on the half-open window [start_time, end_time)."""

    boost_type: BoostType
    start_time: datetime
    end_time: datetime
    multiplier: float

    def is_active(self, now: datetime) -> bool:
        return self.start_time <= now < self.end_time

    def remaining(self, now: datetime) -> timedelta:
        return max(self.end_time - now, timedelta(0))


@dataclass
class StreakSaverToken:
    """Purchased unused; activating it starts a fixed protection window."""

    token_id: Optional[int] = None
    activated_at: Optional[datetime] = None
    protection_days: int = 3
    used: bool = False

    @property
    def protection_ends_at(self) -> Optional[datetime]:
        if not self.used or self.activated_at is None:
            return None
        return self.activated_at + timedelta(days=self.protection_days)

    def is_protecting(self, now: datetime) -> bool:
        ends_at = self.protection_ends_at
        return ends_at is not None and now < ends_at

    def remaining(self, now: datetime) -> timedelta:
        ends_at = self.protection_ends_at
        if ends_at is None:
            return timedelta(0)
        return max(ends_at - now, timedelta(0))
