"""Main FastAPI application for the weekly planner backend."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from weekplanner.api.routes.calendar import router as calendar_router
from weekplanner.api.routes.checkins import router as checkins_router
from weekplanner.api.routes.preferences import router as preferences_router
from weekplanner.api.routes.relay import router as relay_router
from weekplanner.api.routes.schedule import router as schedule_router
from weekplanner.api.routes.study_logs import router as study_logs_router
from weekplanner.api.routes.tasks import router as tasks_router
from weekplanner.core.config import settings
from weekplanner.core.logging import configure_logging
from weekplanner.core.middleware import RequestIDMiddleware
from weekplanner.db.session import init_db
from weekplanner.observability.client import init_opik
from weekplanner.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(relay_router)
app.include_router(calendar_router)
app.include_router(tasks_router)
app.include_router(preferences_router)
app.include_router(checkins_router)
app.include_router(study_logs_router)
app.include_router(schedule_router)


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability and the local store after the event loop starts."""
    init_opik()
    init_db()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
