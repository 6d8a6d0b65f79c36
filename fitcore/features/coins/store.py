"""
Coin account storage.

A CoinAccount bundles a user's balance, boosts and streak savers. Stores hand
out an account inside `transaction()`; changes are saved only when the block
exits cleanly, so a failed operation leaves the stored account untouched.
"""

from __future__ import annotations

import copy
import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from fitcore.core.locks import StripedLock
from fitcore.models.coins import CoinBoost, StreakSaverToken

logger = logging.getLogger("fitcore")


@dataclass
class CoinAccount:
    user_id: str
    balance: int = 0
    boosts: List[CoinBoost] = field(default_factory=list)
    streak_savers: List[StreakSaverToken] = field(default_factory=list)
    achievement_coins_paid: int = 0


class InMemoryCoinStore:

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = StripedLock()
        self._accounts: Dict[str, CoinAccount] = {}

    def _lock_for(self, user_id: str):
        return self._locks.for_key(user_id)

    @contextmanager
    def transaction(self, user_id: str) -> Iterator[CoinAccount]:
        with self._lock_for(user_id):
            account = copy.deepcopy(self._accounts.get(user_id) or CoinAccount(user_id=user_id))
            yield account
            self._accounts[user_id] = account

    def load(self, user_id: str) -> CoinAccount:
        with self._lock_for(user_id):
            return copy.deepcopy(self._accounts.get(user_id) or CoinAccount(user_id=user_id))

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self._guard:
            self._accounts.clear()


def get_coin_store():
    """SQL store when DATABASE_URL is configured and reachable, in-memory otherwise."""
    database_url = os.getenv("DATABASE_URL")

    if database_url:
        try:
            from fitcore.core.database import check_connection
            from fitcore.features.coins.store_sql import SqlCoinStore

            if check_connection():
                return SqlCoinStore()
            logger.warning("[coin_store] database unavailable, falling back to in-memory")
        except Exception as e:
            logger.warning("[coin_store] failed to initialize SQL store: %s", e)

    return InMemoryCoinStore()


_store_instance = None


def get_store():
    global _store_instance
    if _store_instance is None:
        _store_instance = get_coin_store()
    return _store_instance


def reset_store():
    """FOR TESTING ONLY - forces re-initialization on next get_store() call."""
    global _store_instance
    _store_instance = None
