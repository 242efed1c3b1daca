"""Schemas for calendar status, events and sync."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from weekplanner.api.schemas.schedule import ScheduleBoardResponse


class AuthStatusResponse(BaseModel):
    authenticated: bool


class CalendarEventPayload(BaseModel):
    title: str
    start: datetime
    end: datetime


class CalendarSyncResponse(BaseModel):
    authenticated: bool
    authorization_url: Optional[str] = None
    events_synced: int = 0
    board: Optional[ScheduleBoardResponse] = None


class CalendarEventsReplaceRequest(BaseModel):
    events: List[CalendarEventPayload]
