"""Planner settings endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from weekplanner.api.deps import get_user_state
from weekplanner.api.schemas.settings import PlannerSettingsPayload
from weekplanner.services.user_state import UserState

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=PlannerSettingsPayload)
def get_planner_settings(state: UserState = Depends(get_user_state)) -> PlannerSettingsPayload:
    return PlannerSettingsPayload(weekly_goal_hours=state.weekly_goal())


@router.put("/settings", response_model=PlannerSettingsPayload)
def update_planner_settings(
    payload: PlannerSettingsPayload,
    state: UserState = Depends(get_user_state),
) -> PlannerSettingsPayload:
    return PlannerSettingsPayload(weekly_goal_hours=state.set_weekly_goal(payload.weekly_goal_hours))
