"""Study session logs and coaching feedback."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from weekplanner.api.deps import get_generation_client, get_planner_session, get_user_state
from weekplanner.api.schemas.study_logs import FeedbackResponse, StudyLogCreateRequest, StudyLogResponse
from weekplanner.services.planner.generation_client import TextGenerator
from weekplanner.services.planner.pipeline import PlannerSession, generate_feedback
from weekplanner.services.planner.types import StudyLogEntry
from weekplanner.services.user_state import UserState

router = APIRouter(prefix="/study-logs", tags=["study-logs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[StudyLogResponse])
def list_study_logs(state: UserState = Depends(get_user_state)) -> List[StudyLogResponse]:
    return [StudyLogResponse(**log.model_dump()) for log in state.study_logs()]


@router.post("", response_model=StudyLogResponse, status_code=status.HTTP_201_CREATED)
def create_study_log(payload: StudyLogCreateRequest, state: UserState = Depends(get_user_state)) -> StudyLogResponse:
    entry = state.add_study_log(StudyLogEntry(**payload.model_dump()))
    return StudyLogResponse(**entry.model_dump())


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_study_log(log_id: str, state: UserState = Depends(get_user_state)) -> None:
    if not state.delete_study_log(log_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study log not found")


@router.post("/feedback", response_model=FeedbackResponse)
def study_feedback(
    http_request: Request,
    state: UserState = Depends(get_user_state),
    generator: TextGenerator = Depends(get_generation_client),
    session: PlannerSession = Depends(get_planner_session),
) -> FeedbackResponse:
    request_id = getattr(http_request.state, "request_id", None)
    result = generate_feedback(generator, state.study_logs(), session.config, request_id=request_id)
    return FeedbackResponse(
        feedback=result.feedback,
        error=result.error,
        can_generate=result.can_generate,
        request_id=request_id or "",
    )
