"""Weekly schedule board and week navigation."""
from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, Request

from weekplanner.api.deps import get_planner_session, get_user_state
from weekplanner.api.schemas.schedule import ScheduleBoardResponse
from weekplanner.services.planner.pipeline import BoardSnapshot, PlannerSession, ScheduleInputs
from weekplanner.services.user_state import UserState

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=ScheduleBoardResponse)
def get_schedule(session: PlannerSession = Depends(get_planner_session)) -> ScheduleBoardResponse:
    return ScheduleBoardResponse.from_snapshot(session.board.snapshot())


@router.post("/generate", response_model=ScheduleBoardResponse)
def generate_schedule(
    http_request: Request,
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> ScheduleBoardResponse:
    return _run(session.regenerate, http_request, session, state)


@router.post("/week/next", response_model=ScheduleBoardResponse)
def next_week(
    http_request: Request,
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> ScheduleBoardResponse:
    return _run(session.next_week, http_request, session, state)


@router.post("/week/previous", response_model=ScheduleBoardResponse)
def previous_week(
    http_request: Request,
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> ScheduleBoardResponse:
    return _run(session.previous_week, http_request, session, state)


@router.post("/week/current", response_model=ScheduleBoardResponse)
def current_week(
    http_request: Request,
    session: PlannerSession = Depends(get_planner_session),
    state: UserState = Depends(get_user_state),
) -> ScheduleBoardResponse:
    return _run(session.current_week, http_request, session, state)


def _run(
    action: Callable[..., BoardSnapshot],
    http_request: Request,
    session: PlannerSession,
    state: UserState,
) -> ScheduleBoardResponse:
    request_id = getattr(http_request.state, "request_id", None)
    inputs: ScheduleInputs = state.schedule_inputs(session.checkin_date)
    snapshot = action(inputs, request_id=request_id)
    return ScheduleBoardResponse.from_snapshot(snapshot)
