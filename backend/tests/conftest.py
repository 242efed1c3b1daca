from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPIK_ENABLED", "false")

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, List, Union

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weekplanner.api.deps import get_calendar_client, get_generation_client, get_planner_session
from weekplanner.db.deps import get_db
from weekplanner.db.models.kv_entry import KeyValueEntry
from weekplanner.services.planner.pipeline import PlannerConfig, PlannerSession
from weekplanner.services.store import KeyValueStore
from weekplanner.services.user_state import UserState

# Wednesday; with Sunday-start weeks the current window is 2023-12-31 .. 2024-01-06.
FIXED_NOW = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)

ESSAY_SCHEDULE = json.dumps(
    {
        "monday": {"schedule": [{"start_time": "09:00", "end_time": "10:00", "task": "Essay", "type": "study"}]},
        "tuesday": {"schedule": []},
        "wednesday": {"schedule": []},
        "thursday": {"schedule": []},
        "friday": {"schedule": []},
        "saturday": {"schedule": []},
        "sunday": {"schedule": []},
    }
)


class FakeGenerator:
    """Scripted stand-in for the relay client: pops one response (or exception) per call."""

    def __init__(self, *responses: Union[str, Exception]) -> None:
        self.responses: List[Union[str, Exception]] = list(responses)
        self.calls: List[tuple[str, str]] = []

    @property
    def prompts(self) -> List[str]:
        return [prompt for prompt, _ in self.calls]

    def queue(self, *responses: Union[str, Exception]) -> None:
        self.responses.extend(responses)

    def generate(self, prompt: str, model_id: str) -> str:
        self.calls.append((prompt, model_id))
        if not self.responses:
            raise AssertionError("FakeGenerator called more times than scripted")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    KeyValueEntry.__table__.create(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user_state(db_session) -> UserState:
    return UserState(KeyValueStore(db_session))


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def planner(generator) -> PlannerSession:
    return PlannerSession(generator, PlannerConfig(), clock=fixed_clock)


@dataclass
class ApiHarness:
    client: TestClient
    generator: FakeGenerator
    planner: PlannerSession


@pytest.fixture()
def api(session_factory, generator, planner) -> Iterator[ApiHarness]:
    from weekplanner.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_client] = lambda: generator
    app.dependency_overrides[get_planner_session] = lambda: planner
    with TestClient(app) as test_client:
        yield ApiHarness(client=test_client, generator=generator, planner=planner)
    app.dependency_overrides.clear()


@pytest.fixture()
def override_calendar_client():
    """Install a calendar client for the duration of a test."""
    from weekplanner.main import app

    def install(calendar_client) -> None:
        app.dependency_overrides[get_calendar_client] = lambda: calendar_client

    yield install
    app.dependency_overrides.pop(get_calendar_client, None)
