"""Prompt builders for schedule generation, study feedback and weekly overviews.

Everything here is pure: same inputs, same prompt text. Empty inputs turn
into explicit "None" lines so the model never sees a dangling header.
"""
from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from weekplanner.services.planner.types import (
    DAY_KEYS,
    IMPORTANCE_RANK,
    MOOD_SCALE,
    CalendarEvent,
    DailyLog,
    PlannerTask,
    StudyLogEntry,
    TrendEntry,
)

NONE_PLACEHOLDER = "None"

BLOCK_LENGTH_GUIDE = (
    ("study", "45-90 minutes"),
    ("deadline_work", "45-120 minutes"),
    ("class", "match the fixed commitment"),
    ("event", "match the fixed commitment"),
    ("meal", "30-60 minutes"),
    ("break", "10-20 minutes"),
    ("personal", "30-90 minutes"),
    ("personal_time", "30-90 minutes"),
)

OUTPUT_EXAMPLE = {
    "monday": {
        "schedule": [
            {"start_time": "09:00", "end_time": "10:00", "task": "Essay", "type": "study"},
            {"start_time": "10:00", "end_time": "10:15", "task": "Break", "type": "break"},
        ]
    }
}


# ---------------------------------------------------------------------------
# Input preparation
# ---------------------------------------------------------------------------

def build_mood_energy_trend(daily_logs: Iterable[DailyLog], days: Sequence[date]) -> List[TrendEntry]:
    """One entry per day of the window; days without a check-in keep mood/energy as None."""
    by_day = {log.date: log for log in daily_logs}
    trend: List[TrendEntry] = []
    for day in days:
        entry = by_day.get(day)
        trend.append(
            TrendEntry(
                day=day,
                mood=entry.mood if entry else None,
                energy=entry.energy if entry else None,
            )
        )
    return trend


def filter_events_for_week(events: Iterable[CalendarEvent], lower: datetime, upper: datetime) -> List[CalendarEvent]:
    """Events whose start falls in [lower, upper), in start order."""
    selected = [event for event in events if lower <= event.start < upper]
    return sorted(selected, key=lambda event: event.start)


def prioritize_tasks(tasks: Iterable[PlannerTask]) -> List[PlannerTask]:
    """Pending tasks, most important first; deadlines break ties by due date."""
    pending = [task for task in tasks if not task.completed]
    return sorted(
        pending,
        key=lambda task: (
            -IMPORTANCE_RANK.get(task.importance, 0),
            task.kind != "deadline",
            task.due_at.timestamp() if task.due_at else float("inf"),
            task.name.lower(),
        ),
    )


# ---------------------------------------------------------------------------
# Schedule prompt
# ---------------------------------------------------------------------------

def compose_schedule_prompt(
    *,
    tasks: Sequence[PlannerTask],
    weekly_goal_hours: float,
    mood: str,
    energy: int,
    calendar_events: Sequence[CalendarEvent],
    week_start: date,
    trend: Sequence[TrendEntry],
    day_keys: Sequence[str] = DAY_KEYS,
    task_limit: int = 10,
    window_start_hour: int = 7,
    window_end_hour: int = 24,
    tz: Optional[ZoneInfo] = None,
) -> str:
    week_end = week_start + timedelta(days=6)
    window = f"{window_start_hour:02d}:00-{window_end_hour:02d}:00"
    sections = [
        "You are an expert academic coach and weekly planner for a college student. "
        "Build a realistic, empathetic 7-day time-block schedule.",
        "",
        "## Week",
        f"The schedule MUST align with the week starting {week_start.isoformat()} "
        f"({day_keys[0].capitalize()}) and ending {week_end.isoformat()} ({day_keys[-1].capitalize()}).",
        "",
        "## Current state",
        f"- Mood today: {mood}",
        f"- Energy today: {energy}/100",
        f"- Weekly study goal: {_format_hours(weekly_goal_hours)} hours",
        "",
        "## Mood and energy this week",
        _format_trend(trend),
        "",
        "## Priority tasks",
        _format_tasks(tasks, task_limit, tz),
        "",
        "## Fixed calendar commitments (never overlap these)",
        _format_events(calendar_events, tz),
        "",
        "## Hard constraints",
        f"- Only schedule between {window} each day.",
        "- Every start_time and end_time is HH:MM (24-hour) on a 15-minute boundary (:00, :15, :30, :45).",
        "- Typical block lengths: " + "; ".join(f"{name} {length}" for name, length in BLOCK_LENGTH_GUIDE) + ".",
        "- Use type \"deadline_work\" for work on DEADLINE tasks and place it earlier in the week, "
        "never only on the day the deadline falls or the final day of the week.",
        "- If energy is low or the mood is Sad or Stressed, start gently and add more breaks.",
        "- Spread the weekly study goal across the week; do not overload a single day.",
        "",
        "## Output contract",
        "Return ONE JSON object and nothing else: no prose, no markdown, no code fences.",
        "Keys are exactly the seven lowercase day names: " + ", ".join(f'"{key}"' for key in day_keys) + ".",
        'Each value is an object {"schedule": [...]} whose items have "start_time", "end_time", "task" and "type".',
        "Allowed type values: study, deadline_work, break, meal, personal, personal_time, class, event, other.",
        'Use {"schedule": []} for a rest day. Example fragment:',
        json.dumps(OUTPUT_EXAMPLE, separators=(",", ":")),
    ]
    return "\n".join(sections)


def _format_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else f"{hours:.1f}"


def _format_trend(trend: Sequence[TrendEntry]) -> str:
    if not trend:
        return NONE_PLACEHOLDER
    lines = []
    for entry in trend:
        mood = entry.mood or "no check-in"
        energy = f"{entry.energy}/100" if entry.energy is not None else "n/a"
        lines.append(f"- {entry.day.isoformat()} ({entry.day.strftime('%A')}): mood {mood}, energy {energy}")
    return "\n".join(lines)


def _format_timestamp(value: datetime, tz: Optional[ZoneInfo]) -> str:
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.strftime("%a %Y-%m-%d %H:%M")


def _format_tasks(tasks: Sequence[PlannerTask], limit: int, tz: Optional[ZoneInfo]) -> str:
    ranked = prioritize_tasks(tasks)
    completed = [task for task in tasks if task.completed]
    if not ranked:
        lines = [f"Pending: {NONE_PLACEHOLDER}"]
    else:
        lines = []
        for task in ranked[:limit]:
            line = f"- {task.name} (est. {task.duration_min} min, importance {task.importance})"
            if task.kind == "deadline" and task.due_at is not None:
                line += f" [DEADLINE {_format_timestamp(task.due_at, tz)}]"
            lines.append(line)
        if len(ranked) > limit:
            lines.append(f"- ...and {len(ranked) - limit} lower-priority pending task(s)")
    lines.append(f"Completed this week: {len(completed) if completed else NONE_PLACEHOLDER}")
    return "\n".join(lines)


def _format_events(events: Sequence[CalendarEvent], tz: Optional[ZoneInfo]) -> str:
    if not events:
        return NONE_PLACEHOLDER
    lines = [f"{len(events)} commitment(s):"]
    for event in events:
        start = _format_timestamp(event.start, tz)
        end = event.end.astimezone(tz) if tz is not None and event.end.tzinfo else event.end
        lines.append(f"- {event.title}: {start}-{end.strftime('%H:%M')}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Feedback + overview prompts
# ---------------------------------------------------------------------------

def compose_feedback_prompt(logs: Sequence[StudyLogEntry], *, max_chars: int = 1000) -> str:
    if logs:
        history = "\n\n".join(
            f"- Task: {log.task}\n"
            f"  - Duration: {log.duration_min} minutes\n"
            f"  - Energy during session: {log.energy_level}\n"
            f"  - Outcome: {log.outcome or NONE_PLACEHOLDER}"
            for log in logs
        )
    else:
        history = f"{NONE_PLACEHOLDER} (no study sessions logged yet)"

    return "\n".join(
        [
            "You are an expert academic coach giving feedback on a college student's self-reported study logs.",
            "",
            "## Study log history",
            history,
            "",
            "## Instructions",
            "1. Start with one positive, encouraging observation.",
            "2. Follow with 2-3 concise, actionable tips drawn from patterns "
            "(energy vs. task type, session length, outcomes).",
            f"3. Keep the whole reply under {max_chars} characters.",
            "4. Plain text only: no markdown, no JSON, no emojis.",
        ]
    )


def weekly_averages(daily_logs: Iterable[DailyLog]) -> tuple[Optional[float], Optional[float]]:
    """Mean mood on the 1 (Stressed) to 5 (Excited) scale and mean energy, or None without logs."""
    logs = list(daily_logs)
    if not logs:
        return None, None
    avg_mood = sum(MOOD_SCALE[log.mood] for log in logs) / len(logs)
    avg_energy = sum(log.energy for log in logs) / len(logs)
    return round(avg_mood, 2), round(avg_energy, 2)


def compose_weekly_overview_prompt(
    *,
    avg_mood: float,
    avg_energy: float,
    completed_tasks: Sequence[str],
    upcoming_tasks: Sequence[str],
    max_chars: int = 1000,
) -> str:
    completed = "\n".join(f"{idx}. {name}" for idx, name in enumerate(completed_tasks, start=1)) or "None logged this week."
    upcoming = "\n".join(f"{idx}. {name}" for idx, name in enumerate(upcoming_tasks, start=1)) or "No upcoming deadlines added yet."
    return "\n".join(
        [
            "You are a supportive mentor for a college student.",
            "",
            f"Weekly mood average: {avg_mood:.1f} (1 = stressed, 5 = excited)",
            f"Weekly energy average: {avg_energy:.1f}%",
            "",
            "Completed tasks this week:",
            completed,
            "",
            "Upcoming deadlines or tasks for next week:",
            upcoming,
            "",
            "Write a short, encouraging weekly reflection (max 6 sentences) that acknowledges their energy "
            "and effort, recognizes what they completed, and offers a motivational note for next week.",
            "Tone: gentle, conversational, hopeful.",
            "Return only plain text (no markdown, no emojis, no JSON).",
            f"Keep it under {max_chars} characters.",
        ]
    )
