"""Schemas for study session logs."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from weekplanner.services.planner.types import EnergyLevel


class StudyLogCreateRequest(BaseModel):
    task: str = Field(..., min_length=1, max_length=200)
    duration_min: int = Field(..., gt=0)
    energy_level: EnergyLevel
    outcome: str = Field(default="", max_length=2000)


class StudyLogResponse(BaseModel):
    id: str
    task: str
    duration_min: int
    energy_level: EnergyLevel
    outcome: str


class FeedbackResponse(BaseModel):
    feedback: Optional[str] = None
    error: Optional[str] = None
    can_generate: bool = True
    request_id: str
