from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from fitcore.features.exercises.catalog import get_catalog_service
from fitcore.features.plans.generator import generate_workout_plan, profile_from_row
from fitcore.features.plans.persistence import persist_workout_plan

router = APIRouter()


class ProfileRequest(BaseModel):
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[str] = None
    goal: Optional[str] = None
    experience_level: Optional[str] = None
    days_per_week: Optional[int] = None


class PersistPlanRequest(ProfileRequest):
    title: Optional[str] = Field(None, min_length=1, max_length=200)


@router.post("/v1/plans/generate")
def generate_plan(request: ProfileRequest):
    """Generate a plan without storing it. Missing profile fields use defaults."""
    profile = profile_from_row(request.model_dump(exclude_none=True))
    plan = generate_workout_plan(profile, get_catalog_service().get_catalog())
    return {"plan": plan.to_dict(), "placeholders": plan.placeholder_count}


@router.post("/v1/plans/{user_id}")
def generate_and_store_plan(request: PersistPlanRequest, user_id: str = Path(..., min_length=1)):
    profile = profile_from_row(request.model_dump(exclude_none=True, exclude={"title"}))
    plan = generate_workout_plan(profile, get_catalog_service().get_catalog())
    workout_ids = persist_workout_plan(user_id, plan, title=request.title or f"Generated {profile.goal} Plan")
    return {"user_id": user_id, "workout_ids": workout_ids, "plan": plan.to_dict()}
