"""Tests for prompt composition."""
from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from weekplanner.services.planner.prompt_composer import (
    build_mood_energy_trend,
    compose_feedback_prompt,
    compose_schedule_prompt,
    compose_weekly_overview_prompt,
    filter_events_for_week,
    prioritize_tasks,
    weekly_averages,
)
from weekplanner.services.planner.types import CalendarEvent, DailyLog, PlannerTask, StudyLogEntry
from weekplanner.services.planner.week_navigation import WeekWindow

UTC = ZoneInfo("UTC")
WEEK = WeekWindow(date(2024, 1, 3))


def _prompt(**overrides) -> str:
    params = dict(
        tasks=[PlannerTask(name="Essay", duration_min=60, importance="High")],
        weekly_goal_hours=20,
        mood="Neutral",
        energy=50,
        calendar_events=[],
        week_start=WEEK.start,
        trend=build_mood_energy_trend([], WEEK.days()),
        day_keys=WEEK.day_keys(),
        tz=UTC,
    )
    params.update(overrides)
    return compose_schedule_prompt(**params)


def test_schedule_prompt_carries_state_and_contract() -> None:
    prompt = _prompt()
    assert "week starting 2023-12-31 (Sunday) and ending 2024-01-06 (Saturday)" in prompt
    assert "- Mood today: Neutral" in prompt
    assert "- Energy today: 50/100" in prompt
    assert "- Weekly study goal: 20 hours" in prompt
    assert "- Essay (est. 60 min, importance High)" in prompt
    assert '"start_time"' in prompt
    assert "15-minute boundary" in prompt


def test_schedule_prompt_is_deterministic() -> None:
    task = PlannerTask(id="t1", name="Essay", duration_min=60, importance="High")
    assert _prompt(tasks=[task]) == _prompt(tasks=[task])


def test_empty_inputs_render_none_placeholders() -> None:
    prompt = _prompt(tasks=[])
    assert "Pending: None" in prompt
    assert "Completed this week: None" in prompt
    assert "## Fixed calendar commitments (never overlap these)\nNone" in prompt
    assert "mood no check-in, energy n/a" in prompt


def test_deadline_tasks_are_marked_and_ranked_first() -> None:
    tasks = [
        PlannerTask(name="Reading", duration_min=30, importance="High"),
        PlannerTask(
            name="Lab report",
            duration_min=90,
            importance="High",
            kind="deadline",
            due_at=datetime(2024, 1, 5, 17, 0, tzinfo=timezone.utc),
        ),
        PlannerTask(name="Laundry", duration_min=30, importance="Low", completed=True),
    ]
    prompt = _prompt(tasks=tasks)
    assert "[DEADLINE Fri 2024-01-05 17:00]" in prompt
    assert prompt.index("Lab report") < prompt.index("Reading")
    assert "Laundry" not in prompt
    assert "Completed this week: 1" in prompt
    assert [task.name for task in prioritize_tasks(tasks)] == ["Lab report", "Reading"]


def test_task_list_is_capped() -> None:
    tasks = [PlannerTask(name=f"Task {index:02d}", duration_min=30) for index in range(12)]
    prompt = _prompt(tasks=tasks, task_limit=10)
    assert "Task 09" in prompt
    assert "Task 10" not in prompt
    assert "...and 2 lower-priority pending task(s)" in prompt


def test_events_are_filtered_to_the_week() -> None:
    inside = CalendarEvent(
        title="Seminar",
        start=datetime(2024, 1, 2, 15, 0, tzinfo=timezone.utc),
        end=datetime(2024, 1, 2, 16, 0, tzinfo=timezone.utc),
    )
    outside = CalendarEvent(
        title="Dentist",
        start=datetime(2024, 1, 9, 14, 0, tzinfo=timezone.utc),
        end=datetime(2024, 1, 9, 14, 30, tzinfo=timezone.utc),
    )
    lower, upper = WEEK.bounds(UTC)
    events = filter_events_for_week([outside, inside], lower, upper)
    assert events == [inside]
    prompt = _prompt(calendar_events=events)
    assert "1 commitment(s):" in prompt
    assert "- Seminar: Tue 2024-01-02 15:00-16:00" in prompt


def test_trend_has_one_line_per_day() -> None:
    logs = [DailyLog(date=date(2024, 1, 1), mood="Happy", energy=80)]
    trend = build_mood_energy_trend(logs, WEEK.days())
    assert len(trend) == 7
    assert trend[1].mood == "Happy"
    assert trend[0].mood is None
    assert "2024-01-01 (Monday): mood Happy, energy 80/100" in _prompt(trend=trend)


def test_feedback_prompt_lists_sessions() -> None:
    logs = [StudyLogEntry(task="Calculus", duration_min=45, energy_level="Low", outcome="Got stuck on limits")]
    prompt = compose_feedback_prompt(logs, max_chars=1000)
    assert "- Task: Calculus" in prompt
    assert "Energy during session: Low" in prompt
    assert "under 1000 characters" in prompt
    assert "None (no study sessions logged yet)" in compose_feedback_prompt([])


def test_weekly_averages_use_the_mood_scale() -> None:
    logs = [
        DailyLog(date=date(2024, 1, 1), mood="Stressed", energy=20),
        DailyLog(date=date(2024, 1, 2), mood="Excited", energy=90),
    ]
    assert weekly_averages(logs) == (3.0, 55.0)
    assert weekly_averages([]) == (None, None)


def test_weekly_overview_prompt() -> None:
    prompt = compose_weekly_overview_prompt(avg_mood=3.5, avg_energy=62, completed_tasks=["Essay"], upcoming_tasks=[])
    assert "Weekly mood average: 3.5" in prompt
    assert "1. Essay" in prompt
    assert "No upcoming deadlines added yet." in prompt
