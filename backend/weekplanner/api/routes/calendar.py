"""Google Calendar auth, raw event proxy, sync and manual events."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from weekplanner.api.deps import get_calendar_client, get_planner_session, get_user_state
from weekplanner.api.schemas.calendar import (
    AuthStatusResponse,
    CalendarEventPayload,
    CalendarEventsReplaceRequest,
    CalendarSyncResponse,
)
from weekplanner.api.schemas.schedule import ScheduleBoardResponse
from weekplanner.core.config import settings
from weekplanner.core.errors import CALENDAR_SYNC_MESSAGE, CalendarAuthError, CalendarSyncError
from weekplanner.observability.metrics import elapsed_ms, log_metric
from weekplanner.observability.tracing import trace
from weekplanner.services.calendar import (
    CalendarSession,
    GoogleCalendarClient,
    normalize_calendar_event,
    normalize_calendar_events,
)
from weekplanner.services.planner.pipeline import PlannerSession
from weekplanner.services.user_state import UserState

router = APIRouter(tags=["calendar"])
logger = logging.getLogger(__name__)


@router.get("/auth/status", response_model=AuthStatusResponse)
def auth_status(state: UserState = Depends(get_user_state)) -> AuthStatusResponse:
    return AuthStatusResponse(authenticated=state.calendar_session() is not None)


@router.get("/auth/google")
def auth_google(client: GoogleCalendarClient = Depends(get_calendar_client)) -> RedirectResponse:
    return RedirectResponse(client.authorization_url(), status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/oauth2callback")
def oauth_callback(
    code: str = Query(..., min_length=1),
    state: UserState = Depends(get_user_state),
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    try:
        session = client.exchange_code(code)
    except CalendarAuthError as exc:
        logger.error("OAuth callback failed: %s", exc)
        return PlainTextResponse("Authentication failed", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    state.save_calendar_session(session)
    return RedirectResponse(settings.frontend_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/events")
def raw_events(
    state: UserState = Depends(get_user_state),
    client: GoogleCalendarClient = Depends(get_calendar_client),
):
    session = state.calendar_session()
    if session is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Not authenticated"})
    try:
        return _list_events(client, session, state)
    except (CalendarAuthError, CalendarSyncError) as exc:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


@router.post("/calendar/sync", response_model=CalendarSyncResponse)
def sync_calendar(
    http_request: Request,
    state: UserState = Depends(get_user_state),
    client: GoogleCalendarClient = Depends(get_calendar_client),
    planner: PlannerSession = Depends(get_planner_session),
) -> CalendarSyncResponse:
    request_id = getattr(http_request.state, "request_id", None)
    session = state.calendar_session()
    if session is None:
        return CalendarSyncResponse(authenticated=False, authorization_url=client.authorization_url())

    start = perf_counter()
    with trace("calendar.sync", request_id=request_id):
        try:
            raw_items = _list_events(client, session, state)
        except (CalendarAuthError, CalendarSyncError) as exc:
            logger.warning("Calendar sync failed: %s", exc)
            log_metric("calendar.sync.success", 0)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=CALENDAR_SYNC_MESSAGE) from exc
        events = normalize_calendar_events(raw_items, planner.config.tzinfo)
        state.replace_calendar_events(events)

    log_metric("calendar.sync.success", 1, {"events": len(events)})
    log_metric("calendar.sync.latency_ms", elapsed_ms(start))
    logger.info("Calendar synced: %d event(s)", len(events))

    snapshot = planner.regenerate(state.schedule_inputs(planner.checkin_date), request_id=request_id)
    return CalendarSyncResponse(
        authenticated=True,
        events_synced=len(events),
        board=ScheduleBoardResponse.from_snapshot(snapshot),
    )


@router.get("/calendar/events", response_model=List[CalendarEventPayload])
def list_calendar_events(state: UserState = Depends(get_user_state)) -> List[CalendarEventPayload]:
    return [CalendarEventPayload(**event.model_dump()) for event in state.calendar_events()]


@router.put("/calendar/events", response_model=List[CalendarEventPayload])
def replace_calendar_events(
    payload: CalendarEventsReplaceRequest,
    http_request: Request,
    state: UserState = Depends(get_user_state),
    planner: PlannerSession = Depends(get_planner_session),
) -> List[CalendarEventPayload]:
    """Store manually entered events; naive times are read in the planner timezone.

    The displayed week is regenerated against the new commitments.
    """
    tz = planner.config.tzinfo
    events = [normalize_calendar_event(event.model_dump(), tz) for event in payload.events]
    stored = [event for event in events if event is not None]
    state.replace_calendar_events(stored)
    planner.regenerate(
        state.schedule_inputs(planner.checkin_date),
        request_id=getattr(http_request.state, "request_id", None),
    )
    return [CalendarEventPayload(**event.model_dump()) for event in stored]


def _list_events(client: GoogleCalendarClient, session: CalendarSession, state: UserState) -> list:
    fresh = client.ensure_fresh(session)
    if fresh is not session:
        state.save_calendar_session(fresh)
    return client.list_upcoming_events(fresh)
