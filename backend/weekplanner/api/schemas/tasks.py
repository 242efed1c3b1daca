"""Schemas for planner tasks."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from weekplanner.services.planner.types import Importance, TaskKind


class TaskCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    duration_min: int = Field(..., gt=0, le=24 * 60)
    importance: Importance = "Medium"
    kind: TaskKind = "task"
    due_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _deadline_requires_due(self) -> "TaskCreateRequest":
        if self.kind == "deadline" and self.due_at is None:
            raise ValueError("deadline tasks require due_at")
        return self


class TaskUpdateRequest(BaseModel):
    completed: Optional[bool] = Field(default=None, description="Omit to toggle.")


class TaskResponse(BaseModel):
    id: str
    name: str
    duration_min: int
    importance: Importance
    completed: bool
    kind: TaskKind
    due_at: Optional[datetime]
