"""Domain types shared by the planner pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

Mood = Literal["Excited", "Happy", "Neutral", "Sad", "Stressed"]
Importance = Literal["Low", "Medium", "High"]
EnergyLevel = Literal["Low", "Medium", "High"]
TaskKind = Literal["task", "deadline"]

MOOD_SCALE: Dict[str, int] = {
    "Stressed": 1,
    "Sad": 2,
    "Neutral": 3,
    "Happy": 4,
    "Excited": 5,
}
IMPORTANCE_RANK: Dict[str, int] = {"High": 3, "Medium": 2, "Low": 1}

DEFAULT_MOOD: Mood = "Neutral"
DEFAULT_ENERGY = 50

DAY_KEYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

CATEGORIES = (
    "study",
    "deadline_work",
    "break",
    "meal",
    "personal",
    "personal_time",
    "class",
    "event",
    "other",
)


def _new_id() -> str:
    return str(uuid4())


class PlannerTask(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1, max_length=200)
    duration_min: int = Field(..., gt=0, le=24 * 60)
    importance: Importance = "Medium"
    completed: bool = False
    kind: TaskKind = "task"
    due_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _deadline_requires_due(self) -> "PlannerTask":
        if self.kind == "deadline" and self.due_at is None:
            raise ValueError("deadline tasks require due_at")
        return self


class CalendarEvent(BaseModel):
    title: str
    start: datetime
    end: datetime


class DailyLog(BaseModel):
    date: date
    mood: Mood
    energy: int = Field(..., ge=0, le=100)


class StudyLogEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    task: str = Field(..., min_length=1, max_length=200)
    duration_min: int = Field(..., gt=0)
    energy_level: EnergyLevel
    outcome: str = ""


@dataclass(frozen=True)
class TrendEntry:
    day: date
    mood: Optional[str] = None
    energy: Optional[int] = None


@dataclass(frozen=True)
class ScheduleItem:
    """Canonical schedule item: minutes since local midnight, end always after start."""

    start_minute: int
    end_minute: int
    label: str
    category: str = "other"

    def to_payload(self) -> Dict[str, str]:
        return {
            "time": f"{format_minutes(self.start_minute)}-{format_minutes(self.end_minute)}",
            "task": self.label,
            "type": self.category,
        }


@dataclass
class WeeklySchedule:
    days: Dict[str, List[ScheduleItem]] = field(default_factory=lambda: {key: [] for key in DAY_KEYS})

    def items(self, day_key: str) -> List[ScheduleItem]:
        return self.days.get(day_key, [])

    def item_count(self) -> int:
        return sum(len(items) for items in self.days.values())

    def to_payload(self) -> Dict[str, List[Dict[str, str]]]:
        """Canonical flat-array form; feeding it back to the normalizer yields the same schedule."""
        return {key: [item.to_payload() for item in self.days.get(key, [])] for key in DAY_KEYS}


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"
