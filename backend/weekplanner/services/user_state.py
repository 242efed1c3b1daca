"""Typed access to the user's persisted entities."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from weekplanner.services.calendar.google import CalendarSession
from weekplanner.services.planner.pipeline import ScheduleInputs
from weekplanner.services.planner.types import (
    DEFAULT_ENERGY,
    DEFAULT_MOOD,
    CalendarEvent,
    DailyLog,
    PlannerTask,
    StudyLogEntry,
)
from weekplanner.services.store import KeyValueStore

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
WEEKLY_GOAL_KEY = "weekly_goal"
DAILY_LOGS_KEY = "daily_logs"
STUDY_LOGS_KEY = "study_logs"
CALENDAR_EVENTS_KEY = "calendar_events"
CALENDAR_SESSION_KEY = "calendar_session"

DEFAULT_WEEKLY_GOAL_HOURS = 20.0


class UserState:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # Tasks ---------------------------------------------------------------

    def tasks(self) -> List[PlannerTask]:
        return [PlannerTask.model_validate(item) for item in self.store.get(TASKS_KEY, [])]

    def add_task(self, task: PlannerTask) -> PlannerTask:
        tasks = self.tasks()
        tasks.append(task)
        self._save_tasks(tasks)
        return task

    def toggle_task(self, task_id: str, completed: Optional[bool] = None) -> Optional[PlannerTask]:
        tasks = self.tasks()
        updated: Optional[PlannerTask] = None
        for index, task in enumerate(tasks):
            if task.id == task_id:
                new_value = (not task.completed) if completed is None else completed
                updated = task.model_copy(update={"completed": new_value})
                tasks[index] = updated
                break
        if updated is not None:
            self._save_tasks(tasks)
        return updated

    def delete_task(self, task_id: str) -> bool:
        tasks = self.tasks()
        remaining = [task for task in tasks if task.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._save_tasks(remaining)
        return True

    def _save_tasks(self, tasks: List[PlannerTask]) -> None:
        self.store.set(TASKS_KEY, [task.model_dump(mode="json") for task in tasks])

    # Settings ------------------------------------------------------------

    def weekly_goal(self) -> float:
        return float(self.store.get(WEEKLY_GOAL_KEY, DEFAULT_WEEKLY_GOAL_HOURS))

    def set_weekly_goal(self, hours: float) -> float:
        self.store.set(WEEKLY_GOAL_KEY, hours)
        return hours

    # Daily check-ins -----------------------------------------------------

    def daily_logs(self) -> List[DailyLog]:
        logs = [DailyLog.model_validate(item) for item in self.store.get(DAILY_LOGS_KEY, [])]
        return sorted(logs, key=lambda log: log.date)

    def log_for(self, day: date) -> Optional[DailyLog]:
        return next((log for log in self.daily_logs() if log.date == day), None)

    def record_checkin(self, day: date, mood: str, energy: int) -> DailyLog:
        """Last write wins for a given day."""
        entry = DailyLog(date=day, mood=mood, energy=energy)
        logs = [log for log in self.daily_logs() if log.date != day]
        logs.append(entry)
        self.store.set(DAILY_LOGS_KEY, [log.model_dump(mode="json") for log in sorted(logs, key=lambda log: log.date)])
        return entry

    # Study logs ----------------------------------------------------------

    def study_logs(self) -> List[StudyLogEntry]:
        return [StudyLogEntry.model_validate(item) for item in self.store.get(STUDY_LOGS_KEY, [])]

    def add_study_log(self, entry: StudyLogEntry) -> StudyLogEntry:
        logs = self.study_logs()
        logs.append(entry)
        self.store.set(STUDY_LOGS_KEY, [log.model_dump(mode="json") for log in logs])
        return entry

    def delete_study_log(self, log_id: str) -> bool:
        logs = self.study_logs()
        remaining = [log for log in logs if log.id != log_id]
        if len(remaining) == len(logs):
            return False
        self.store.set(STUDY_LOGS_KEY, [log.model_dump(mode="json") for log in remaining])
        return True

    # Calendar ------------------------------------------------------------

    def calendar_events(self) -> List[CalendarEvent]:
        return [CalendarEvent.model_validate(item) for item in self.store.get(CALENDAR_EVENTS_KEY, [])]

    def replace_calendar_events(self, events: List[CalendarEvent]) -> None:
        """Each sync replaces the stored events wholesale."""
        self.store.set(CALENDAR_EVENTS_KEY, [event.model_dump(mode="json") for event in events])

    def calendar_session(self) -> Optional[CalendarSession]:
        payload = self.store.get(CALENDAR_SESSION_KEY)
        if not payload:
            return None
        return CalendarSession.from_payload(payload)

    def save_calendar_session(self, session: CalendarSession) -> None:
        self.store.set(CALENDAR_SESSION_KEY, session.to_payload())

    # Pipeline inputs -----------------------------------------------------

    def schedule_inputs(self, checkin_day: date) -> ScheduleInputs:
        """Snapshot of everything the schedule prompt needs; mood/energy come from the cursor day."""
        today_log = self.log_for(checkin_day)
        return ScheduleInputs(
            tasks=self.tasks(),
            weekly_goal_hours=self.weekly_goal(),
            calendar_events=self.calendar_events(),
            daily_logs=self.daily_logs(),
            mood=today_log.mood if today_log else DEFAULT_MOOD,
            energy=today_log.energy if today_log else DEFAULT_ENERGY,
        )
