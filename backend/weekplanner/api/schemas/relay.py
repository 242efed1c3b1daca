"""Schemas for the generation relay endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    model: Optional[str] = None


class GenerateResponse(BaseModel):
    output: str


class WeeklyOverviewRequest(BaseModel):
    avg_mood: float = Field(..., ge=1, le=5)
    avg_energy: float = Field(..., ge=0, le=100)
    completed_tasks: List[str] = Field(default_factory=list)
    upcoming_tasks: List[str] = Field(default_factory=list)


class WeeklyOverviewResponse(BaseModel):
    overview: str
