"""Text-generation relay: the only place provider credentials are used."""
from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from weekplanner.api.schemas.relay import (
    GenerateRequest,
    GenerateResponse,
    WeeklyOverviewRequest,
    WeeklyOverviewResponse,
)
from weekplanner.core.config import settings
from weekplanner.core.errors import RelayError
from weekplanner.observability.metrics import elapsed_ms, log_metric
from weekplanner.observability.tracing import trace
from weekplanner.services import relay
from weekplanner.services.planner.prompt_composer import compose_weekly_overview_prompt
from weekplanner.services.planner.response_extractor import extract_feedback_text

router = APIRouter(prefix="/api", tags=["relay"])
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GenerateResponse)
def generate(payload: GenerateRequest, http_request: Request):
    request_id = getattr(http_request.state, "request_id", None)
    model_id = payload.model or settings.schedule_model
    start = perf_counter()
    with trace("relay.generate", metadata={"model": model_id, "prompt_chars": len(payload.prompt)}, request_id=request_id):
        try:
            output = relay.generate_text(payload.prompt, model_id)
        except RelayError as exc:
            log_metric("relay.generate.success", 0, {"model": model_id, "status": exc.status_code})
            return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    log_metric("relay.generate.success", 1, {"model": model_id})
    log_metric("relay.generate.latency_ms", elapsed_ms(start), {"model": model_id})
    return GenerateResponse(output=output)


@router.post("/weekly-overview", response_model=WeeklyOverviewResponse)
def weekly_overview(payload: WeeklyOverviewRequest, http_request: Request):
    request_id = getattr(http_request.state, "request_id", None)
    prompt = compose_weekly_overview_prompt(
        avg_mood=payload.avg_mood,
        avg_energy=payload.avg_energy,
        completed_tasks=payload.completed_tasks,
        upcoming_tasks=payload.upcoming_tasks,
        max_chars=settings.feedback_max_chars,
    )
    metadata = {"completed": len(payload.completed_tasks), "upcoming": len(payload.upcoming_tasks)}
    with trace("relay.weekly_overview", metadata=metadata, request_id=request_id):
        try:
            raw_text = relay.generate_text(prompt, settings.feedback_model)
        except RelayError as exc:
            logger.warning("Weekly overview failed: %s", exc)
            return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    return WeeklyOverviewResponse(
        overview=extract_feedback_text(raw_text, max_chars=settings.feedback_max_chars),
    )
