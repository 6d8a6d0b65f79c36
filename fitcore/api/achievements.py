from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Path

from fitcore.features.achievements.engine import achievement_engine
from fitcore.features.achievements.service import achievement_service

router = APIRouter()

UserId = Path(..., min_length=1)

@router.post("/v1/achievements/{user_id}/initialize")
def initialize_achievements(user_id: str = UserId):
    """Seed every achievement at 0% for a new user. 409 if already seeded."""
    seeded = achievement_engine.initialize(user_id)
    return {"user_id": user_id, "seeded": seeded}

@router.post("/v1/achievements/{user_id}/evaluate")
def evaluate_achievements(user_id: str = UserId):
    return achievement_service.evaluate_and_award(user_id)

@router.get("/v1/achievements/{user_id}")
def get_achievement_progress(user_id: str = UserId):
    return {
        "user_id": user_id,
        "achievements": [record.to_dict() for record in achievement_engine.get_progress(user_id)],
    }

@router.get("/v1/achievements/{user_id}/stats")
def get_achievement_stats(user_id: str = UserId):
    stats = achievement_engine.get_stats(user_id)
    return {"user_id": user_id, **asdict(stats)}

@router.get("/v1/achievements/{user_id}/metrics")
def get_user_metrics(user_id: str = UserId):
    return achievement_engine.aggregator.compute(user_id).to_dict()
