"""FastAPI dependencies wiring the planner services."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from weekplanner.core.config import settings
from weekplanner.db.deps import get_db
from weekplanner.services.calendar.google import GoogleCalendarClient, OAuthClientConfig
from weekplanner.services.planner.generation_client import GenerationClient, TextGenerator
from weekplanner.services.planner.pipeline import PlannerConfig, PlannerSession
from weekplanner.services.store import KeyValueStore
from weekplanner.services.user_state import UserState


def get_user_state(db: Session = Depends(get_db)) -> UserState:
    return UserState(KeyValueStore(db))


@lru_cache
def get_generation_client() -> TextGenerator:
    return GenerationClient(settings.generation_relay_url, timeout=settings.generation_timeout_seconds)


@lru_cache
def get_planner_session() -> PlannerSession:
    """Process-wide planner state for the single local user."""
    return PlannerSession(get_generation_client(), PlannerConfig.from_settings(settings))


def get_calendar_client() -> GoogleCalendarClient:
    if not settings.google_client_id or not settings.google_client_secret:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Google Calendar is not configured")
    return GoogleCalendarClient(
        OAuthClientConfig(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
        ),
        max_results=settings.calendar_max_results,
        window_days=settings.calendar_sync_days,
    )
