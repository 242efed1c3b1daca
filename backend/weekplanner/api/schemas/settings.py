"""Schemas for planner settings."""
from __future__ import annotations

from pydantic import BaseModel, Field


class PlannerSettingsPayload(BaseModel):
    weekly_goal_hours: float = Field(..., ge=0, le=168)
