"""
SQL-backed coin store. Same interface as InMemoryCoinStore; one transaction
per account operation with the balance row locked.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import delete, insert, select, update

from fitcore.core.clock import ensure_utc
from fitcore.core.database import coin_balances, coin_boosts, get_db_session, streak_savers
from fitcore.features.coins.store import CoinAccount
from fitcore.models.coins import CoinBoost, StreakSaverToken


def _load(session, user_id: str, *, for_update: bool = False) -> CoinAccount:
    balance_query = select(coin_balances.c.balance, coin_balances.c.achievement_coins_paid).where(
        coin_balances.c.user_id == user_id
    )
    if for_update:
        balance_query = balance_query.with_for_update()
    balance_row = session.execute(balance_query).first()

    boosts = [
        CoinBoost(
            boost_type=row.boost_type,
            start_time=ensure_utc(row.start_time),
            end_time=ensure_utc(row.end_time),
            multiplier=float(row.multiplier),
        )
        for row in session.execute(
            select(coin_boosts).where(coin_boosts.c.user_id == user_id).order_by(coin_boosts.c.id)
        )
    ]
    savers = [
        StreakSaverToken(
            token_id=row.id,
            activated_at=ensure_utc(row.activated_at),
            protection_days=int(row.extra_days),
            used=bool(row.used),
        )
        for row in session.execute(
            select(streak_savers).where(streak_savers.c.user_id == user_id).order_by(streak_savers.c.id)
        )
    ]
    return CoinAccount(
        user_id=user_id,
        balance=int(balance_row.balance) if balance_row else 0,
        boosts=boosts,
        streak_savers=savers,
        achievement_coins_paid=int(balance_row.achievement_coins_paid) if balance_row else 0,
    )


class SqlCoinStore:

    @staticmethod
    @contextmanager
    def transaction(user_id: str) -> Iterator[CoinAccount]:
        with get_db_session() as session:
            exists = session.execute(
                select(coin_balances.c.user_id).where(coin_balances.c.user_id == user_id)
            ).scalar()
            if exists is None:
                session.execute(insert(coin_balances).values(user_id=user_id, balance=0))

            account = _load(session, user_id, for_update=True)
            yield account

            session.execute(
                update(coin_balances)
                .where(coin_balances.c.user_id == user_id)
                .values(balance=account.balance, achievement_coins_paid=account.achievement_coins_paid)
            )
            session.execute(delete(coin_boosts).where(coin_boosts.c.user_id == user_id))
            for boost in account.boosts:
                session.execute(
                    insert(coin_boosts).values(
                        user_id=user_id,
                        boost_type=boost.boost_type,
                        start_time=boost.start_time,
                        end_time=boost.end_time,
                        multiplier=boost.multiplier,
                    )
                )

            kept_ids = [t.token_id for t in account.streak_savers if t.token_id is not None]
            stale = delete(streak_savers).where(streak_savers.c.user_id == user_id)
            if kept_ids:
                stale = stale.where(streak_savers.c.id.notin_(kept_ids))
            session.execute(stale)
            for token in account.streak_savers:
                values = {
                    "activated_at": token.activated_at,
                    "extra_days": token.protection_days,
                    "used": token.used,
                }
                if token.token_id is None:
                    session.execute(insert(streak_savers).values(user_id=user_id, **values))
                else:
                    session.execute(update(streak_savers).where(streak_savers.c.id == token.token_id).values(**values))

    @staticmethod
    def load(user_id: str) -> CoinAccount:
        with get_db_session() as session:
            return _load(session, user_id)

    @staticmethod
    def clear() -> None:
        """FOR TESTING ONLY."""
        with get_db_session() as session:
            session.execute(delete(coin_boosts))
            session.execute(delete(streak_savers))
            session.execute(delete(coin_balances))
