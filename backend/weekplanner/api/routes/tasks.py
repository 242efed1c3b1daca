"""Planner task endpoints."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from weekplanner.api.deps import get_user_state
from weekplanner.api.schemas.tasks import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from weekplanner.observability.metrics import log_metric
from weekplanner.observability.tracing import trace
from weekplanner.services.planner.types import PlannerTask
from weekplanner.services.user_state import UserState

router = APIRouter(tags=["tasks"])
logger = logging.getLogger(__name__)


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(state: UserState = Depends(get_user_state)) -> List[TaskResponse]:
    return [_serialize_task(task) for task in state.tasks()]


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreateRequest,
    http_request: Request,
    state: UserState = Depends(get_user_state),
) -> TaskResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("tasks.create", metadata={"kind": payload.kind, "importance": payload.importance}, request_id=request_id):
        task = state.add_task(PlannerTask(**payload.model_dump()))
    log_metric("tasks.create.success", 1, {"kind": task.kind})
    logger.info("Task added: %s (%s, %d min)", task.name, task.kind, task.duration_min)
    return _serialize_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    payload: TaskUpdateRequest,
    state: UserState = Depends(get_user_state),
) -> TaskResponse:
    task = state.toggle_task(task_id, payload.completed)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return _serialize_task(task)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, state: UserState = Depends(get_user_state)) -> None:
    if not state.delete_task(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


def _serialize_task(task: PlannerTask) -> TaskResponse:
    return TaskResponse(**task.model_dump())
