"""Schemas for the generated schedule board."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel

from weekplanner.services.planner.pipeline import BoardSnapshot


class ScheduleItemPayload(BaseModel):
    time: str
    task: str
    type: str


class GridBlockPayload(BaseModel):
    day: str
    day_column: int
    row_start: int
    row_span: int
    time: str
    task: str
    type: str
    color: str


class GridWindowPayload(BaseModel):
    start_hour: int
    end_hour: int
    slot_minutes: int
    rows: int


class ScheduleBoardResponse(BaseModel):
    seq: int
    week_start: date
    week_end: date
    days: List[str]
    can_generate: bool
    pending: bool
    schedule: Optional[Dict[str, List[ScheduleItemPayload]]] = None
    grid: Optional[GridWindowPayload] = None
    blocks: List[GridBlockPayload] = []
    dropped: int = 0
    error: Optional[str] = None

    @classmethod
    def from_snapshot(cls, snapshot: BoardSnapshot) -> "ScheduleBoardResponse":
        grid = snapshot.grid
        return cls(
            seq=snapshot.seq,
            week_start=snapshot.week.start,
            week_end=snapshot.week.end,
            days=list(snapshot.week.day_keys()),
            can_generate=snapshot.can_generate,
            pending=snapshot.pending,
            schedule=snapshot.schedule.to_payload() if snapshot.schedule else None,
            grid=GridWindowPayload(
                start_hour=grid.config.start_hour,
                end_hour=grid.config.end_hour,
                slot_minutes=grid.config.slot_minutes,
                rows=grid.config.total_rows,
            )
            if grid
            else None,
            blocks=[
                GridBlockPayload(
                    day=block.day_key,
                    day_column=block.day_column,
                    row_start=block.row_start,
                    row_span=block.row_span,
                    time=block.time_label,
                    task=block.label,
                    type=block.category,
                    color=block.color,
                )
                for block in (grid.blocks if grid else [])
            ],
            dropped=grid.dropped if grid else 0,
            error=snapshot.error,
        )
