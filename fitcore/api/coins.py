from __future__ import annotations

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from fitcore.core.errors import ConflictError, InsufficientCoinsError
from fitcore.features.coins.ledger import coin_ledger

router = APIRouter()

UserId = Path(..., min_length=1)


class AmountRequest(BaseModel):
    amount: int = Field(..., ge=0)


@router.get("/v1/coins/{user_id}")
def get_coin_status(user_id: str = UserId):
    """Balance, current multiplier, boost and streak protection status."""
    return coin_ledger.status(user_id)


@router.post("/v1/coins/{user_id}/add")
def add_coins(request: AmountRequest, user_id: str = UserId):
    credited = coin_ledger.add_coins(user_id, request.amount)
    return {"credited": credited, "balance": coin_ledger.get_balance(user_id)}


@router.post("/v1/coins/{user_id}/spend")
def spend_coins(request: AmountRequest, user_id: str = UserId):
    if not coin_ledger.subtract_coins(user_id, request.amount):
        raise InsufficientCoinsError(f"Balance is lower than {request.amount}")
    return {"spent": request.amount, "balance": coin_ledger.get_balance(user_id)}


@router.post("/v1/coins/{user_id}/boost")
def activate_boost(user_id: str = UserId):
    boost = coin_ledger.activate_double_coin_boost(user_id)
    return {
        "boost_type": boost.boost_type,
        "start_time": boost.start_time.isoformat(),
        "end_time": boost.end_time.isoformat(),
        "multiplier": boost.multiplier,
    }


@router.post("/v1/coins/{user_id}/streak-savers")
def add_streak_saver(user_id: str = UserId):
    coin_ledger.add_streak_saver(user_id)
    return {"unused_streak_savers": coin_ledger.unused_streak_saver_count(user_id)}


@router.post("/v1/coins/{user_id}/streak-savers/activate")
def activate_streak_saver(user_id: str = UserId):
    if not coin_ledger.activate_streak_saver(user_id):
        raise ConflictError("No unused streak saver available", code="no_streak_saver")
    remaining = coin_ledger.protection_time_remaining(user_id)
    return {"activated": True, "protection_seconds_remaining": int(remaining.total_seconds())}


@router.get("/v1/coins/{user_id}/streak-protection")
def get_streak_protection(user_id: str = UserId):
    remaining = coin_ledger.protection_time_remaining(user_id)
    return {
        "user_id": user_id,
        "protected": coin_ledger.is_streak_protection_active(user_id),
        "seconds_remaining": int(remaining.total_seconds()),
    }
