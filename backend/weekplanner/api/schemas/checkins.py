"""Schemas for daily mood/energy check-ins."""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from weekplanner.services.planner.types import Mood


class CheckinPayload(BaseModel):
    date: date
    mood: Mood
    energy: int = Field(..., ge=0, le=100)
    recorded: bool = False


class CheckinUpdateRequest(BaseModel):
    mood: Mood
    energy: int = Field(..., ge=0, le=100)


class CheckinSummaryResponse(BaseModel):
    week_start: date
    week_end: date
    days_logged: int
    avg_mood: Optional[float]
    avg_energy: Optional[float]
