"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

from datetime import date

from conftest import ESSAY_SCHEDULE
from weekplanner.core.context import get_generation_seq
from weekplanner.observability import client as client_module
from weekplanner.observability import tracing
from weekplanner.services.planner.pipeline import ScheduleInputs
from weekplanner.services.planner.types import PlannerTask


class _RecordingTrace:
    def __init__(self, name, metadata=None):
        self.name = name
        self.metadata = dict(metadata or {})

    def update(self, metadata=None, **kwargs):
        if metadata:
            self.metadata.update(metadata)

    def end(self):
        pass


class _RecordingOpik:
    def __init__(self):
        self.traces = []

    def trace(self, name, metadata=None):
        trace = _RecordingTrace(name, metadata)
        self.traces.append(trace)
        return trace


def test_opik_disabled_yields_no_client(monkeypatch) -> None:
    monkeypatch.setattr(client_module.settings, "opik_enabled", False)
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
        assert client_module.get_opik_client() is None
    finally:
        client_module.reset_opik_client()


def test_enabled_without_key_stays_local(monkeypatch) -> None:
    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", None)
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()


def test_schedule_run_is_traced(monkeypatch, planner, generator) -> None:
    opik = _RecordingOpik()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: opik)
    generator.queue(ESSAY_SCHEDULE)

    planner.regenerate(
        ScheduleInputs(
            tasks=[PlannerTask(name="Essay", duration_min=60)],
            weekly_goal_hours=10,
            calendar_events=[],
            daily_logs=[],
        ),
        request_id="req-7",
    )

    names = [trace.name for trace in opik.traces]
    assert names[0] == "schedule.generate"
    run = opik.traces[0]
    assert run.metadata["request_id"] == "req-7"
    assert run.metadata["week_start"] == date(2023, 12, 31).isoformat()
    assert run.metadata["blocks"] == 1
    assert "metric:schedule.generate.success" in names
    assert "metric:schedule.generate.latency_ms" in names
    assert get_generation_seq() is None
