"""Daily mood/energy check-ins and the check-in date cursor."""
from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Request

from weekplanner.api.deps import get_planner_session, get_user_state
from weekplanner.api.schemas.checkins import CheckinPayload, CheckinSummaryResponse, CheckinUpdateRequest
from weekplanner.observability.tracing import trace
from weekplanner.services.planner.pipeline import PlannerSession
from weekplanner.services.planner.prompt_composer import weekly_averages
from weekplanner.services.planner.types import DEFAULT_ENERGY, DEFAULT_MOOD
from weekplanner.services.user_state import UserState

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.get("", response_model=List[CheckinPayload])
def list_checkins(state: UserState = Depends(get_user_state)) -> List[CheckinPayload]:
    return [CheckinPayload(date=log.date, mood=log.mood, energy=log.energy, recorded=True) for log in state.daily_logs()]


@router.get("/current", response_model=CheckinPayload)
def current_checkin(
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> CheckinPayload:
    return _checkin_for(session.checkin_date, state)


@router.put("/current", response_model=CheckinPayload)
def record_current_checkin(
    payload: CheckinUpdateRequest,
    http_request: Request,
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> CheckinPayload:
    request_id = getattr(http_request.state, "request_id", None)
    day = session.checkin_date
    with trace("checkins.record", metadata={"date": day.isoformat(), "mood": payload.mood}, request_id=request_id):
        log = state.record_checkin(day, payload.mood, payload.energy)
    return CheckinPayload(date=log.date, mood=log.mood, energy=log.energy, recorded=True)


@router.post("/cursor/prev", response_model=CheckinPayload)
def previous_day(
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> CheckinPayload:
    return _checkin_for(session.previous_checkin_day(), state)


@router.post("/cursor/next", response_model=CheckinPayload)
def next_day(
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> CheckinPayload:
    return _checkin_for(session.next_checkin_day(), state)


@router.get("/summary", response_model=CheckinSummaryResponse)
def weekly_summary(
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> CheckinSummaryResponse:
    week = session.week
    logs = [log for log in state.daily_logs() if week.start <= log.date <= week.end]
    avg_mood, avg_energy = weekly_averages(logs)
    return CheckinSummaryResponse(
        week_start=week.start,
        week_end=week.end,
        days_logged=len(logs),
        avg_mood=avg_mood,
        avg_energy=avg_energy,
    )


def _checkin_for(day: date, state: UserState) -> CheckinPayload:
    log = state.log_for(day)
    if log is None:
        return CheckinPayload(date=day, mood=DEFAULT_MOOD, energy=DEFAULT_ENERGY)
    return CheckinPayload(date=day, mood=log.mood, energy=log.energy, recorded=True)
