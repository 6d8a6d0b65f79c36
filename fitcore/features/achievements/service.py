"""
Achievement evaluation with coin awarding.

Newly unlocked achievements are credited right after evaluation. Every run
also reconciles the ledger against the stored unlocks, so rewards whose
crediting failed earlier are paid on a later run.
"""

from datetime import datetime
from typing import Optional

from fitcore.core.clock import utcnow
from fitcore.core.logging import log_event
from fitcore.features.achievements.engine import AchievementEngine, achievement_engine
from fitcore.features.coins.ledger import CoinLedger, achievement_reward, coin_ledger


class AchievementService:

    def __init__(self, engine: Optional[AchievementEngine] = None, ledger: Optional[CoinLedger] = None):
        self.engine = engine or achievement_engine
        self.ledger = ledger or coin_ledger

    def evaluate_and_award(self, user_id: str, *, now: Optional[datetime] = None) -> dict:
        now = now or utcnow()
        result = self.engine.evaluate_all(user_id, now=now)
        coins_awarded = 0
        coins_pending = 0
        try:
            if result.newly_unlocked:
                coins_awarded += self.ledger.award_achievement_coins(user_id, result.newly_unlocked, now=now)
            coins_awarded += self.ledger.reconcile_achievement_coins(
                user_id, self.engine.get_progress(user_id), now=now
            )
        except Exception as exc:
            coins_pending = achievement_reward(result.newly_unlocked)
            log_event(
                "error",
                "achievements.coin_award_failed",
                request_id=None,
                user_id=user_id,
                error_code="coin_award_failed",
                extra={"newly_unlocked": list(result.newly_unlocked), "coins_pending": coins_pending, "error": str(exc)},
            )
        return {
            "user_id": user_id,
            "newly_unlocked": list(result.newly_unlocked),
            "coins_awarded": coins_awarded,
            "coins_pending": coins_pending,
            "evaluated": result.evaluated,
            "failed": {str(k): v for k, v in result.failed.items()},
            "degraded_metrics": list(result.degraded_metrics),
        }


achievement_service = AchievementService()


def evaluate_achievements(user_id: str) -> list:
    """Run evaluation (with coin awarding) and return the newly unlocked ids."""
    return achievement_service.evaluate_and_award(user_id)["newly_unlocked"]
