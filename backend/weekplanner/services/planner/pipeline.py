"""Schedule generation pipeline and the planner session state around it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from threading import Lock
from time import perf_counter
from typing import Callable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from weekplanner.core.config import Settings
from weekplanner.core.context import generation_seq_ctx_var
from weekplanner.core.errors import (
    FEEDBACK_TRANSPORT_MESSAGE,
    MalformedResponseError,
    PlannerError,
)
from weekplanner.observability.metrics import elapsed_ms, log_metric
from weekplanner.observability.tracing import annotate, trace
from weekplanner.services.planner import prompt_composer
from weekplanner.services.planner.generation_client import TextGenerator
from weekplanner.services.planner.grid_mapper import GridConfig, ScheduleGrid, map_schedule
from weekplanner.services.planner.response_extractor import extract_feedback_text, parse_json_payload, raw_excerpt
from weekplanner.services.planner.schedule_normalizer import normalize
from weekplanner.services.planner.types import (
    DEFAULT_ENERGY,
    DEFAULT_MOOD,
    CalendarEvent,
    DailyLog,
    PlannerTask,
    StudyLogEntry,
    WeeklySchedule,
)
from weekplanner.services.planner.week_navigation import CheckinCursor, WeekWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    timezone: str = "UTC"
    week_start_day: int = 6
    strict_day_keys: bool = False
    schedule_model: str = "gpt-4o"
    feedback_model: str = "gpt-4o-mini"
    task_limit: int = 10
    feedback_max_chars: int = 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlannerConfig":
        return cls(
            grid=GridConfig(start_hour=settings.grid_start_hour, end_hour=settings.grid_end_hour),
            timezone=settings.planner_timezone,
            week_start_day=settings.week_start_day,
            strict_day_keys=settings.strict_day_keys,
            schedule_model=settings.schedule_model,
            feedback_model=settings.feedback_model,
            task_limit=settings.prompt_task_limit,
            feedback_max_chars=settings.feedback_max_chars,
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@dataclass
class ScheduleInputs:
    tasks: List[PlannerTask]
    weekly_goal_hours: float
    calendar_events: List[CalendarEvent]
    daily_logs: List[DailyLog]
    mood: str = DEFAULT_MOOD
    energy: int = DEFAULT_ENERGY

    @property
    def can_generate(self) -> bool:
        return any(not task.completed for task in self.tasks)


@dataclass(frozen=True)
class BoardSnapshot:
    seq: int
    week: WeekWindow
    can_generate: bool = True
    pending: bool = False
    schedule: Optional[WeeklySchedule] = None
    grid: Optional[ScheduleGrid] = None
    error: Optional[str] = None
    failure_kind: Optional[str] = None


class ScheduleBoard:
    """The displayed schedule. Only the most recently started request may write to it."""

    def __init__(self, week: WeekWindow) -> None:
        self._lock = Lock()
        self._seq = 0
        self._snapshot = BoardSnapshot(seq=0, week=week)

    def snapshot(self) -> BoardSnapshot:
        with self._lock:
            return self._snapshot

    def begin(self, week: WeekWindow, *, can_generate: bool = True) -> int:
        """Start a request: clears the previous schedule and returns the new sequence number."""
        with self._lock:
            self._seq += 1
            self._snapshot = BoardSnapshot(seq=self._seq, week=week, can_generate=can_generate, pending=can_generate)
            return self._seq

    def complete(self, seq: int, schedule: WeeklySchedule, grid: ScheduleGrid) -> bool:
        return self._settle(seq, schedule=schedule, grid=grid)

    def fail(self, seq: int, message: str, kind: str) -> bool:
        return self._settle(seq, error=message, failure_kind=kind)

    def _settle(self, seq: int, **changes) -> bool:
        with self._lock:
            if seq != self._seq:
                logger.info("Discarding stale schedule response seq=%s (latest=%s)", seq, self._seq)
                return False
            self._snapshot = replace(self._snapshot, pending=False, **changes)
            return True


class SchedulePipeline:
    """Prompt -> relay -> extract -> normalize -> grid, with a board write at the end."""

    def __init__(self, generator: TextGenerator, config: PlannerConfig, board: ScheduleBoard) -> None:
        self.generator = generator
        self.config = config
        self.board = board

    def run(self, week: WeekWindow, inputs: ScheduleInputs, *, request_id: Optional[str] = None) -> BoardSnapshot:
        seq = self.board.begin(week, can_generate=inputs.can_generate)
        if not inputs.can_generate:
            logger.info("Schedule generation skipped: no pending tasks")
            return self.board.snapshot()

        token = generation_seq_ctx_var.set(seq)
        started = perf_counter()
        metadata = {"week_start": week.start.isoformat(), "seq": seq, "model": self.config.schedule_model}
        try:
            with trace("schedule.generate", metadata=metadata, request_id=request_id) as span:
                try:
                    schedule, grid = self._generate(week, inputs)
                except PlannerError as exc:
                    self._record_failure(exc)
                    self.board.fail(seq, exc.user_message, exc.kind)
                    annotate(span, failure_kind=exc.kind)
                else:
                    self.board.complete(seq, schedule, grid)
                    annotate(span, items=schedule.item_count(), blocks=len(grid.blocks), dropped=grid.dropped)
                    log_metric("schedule.generate.blocks", len(grid.blocks), {"dropped": grid.dropped})
        finally:
            generation_seq_ctx_var.reset(token)

        snapshot = self.board.snapshot()
        log_metric("schedule.generate.success", 1 if snapshot.error is None else 0, {"seq": seq})
        log_metric("schedule.generate.latency_ms", elapsed_ms(started), {"seq": seq})
        return snapshot

    def compose_prompt(self, week: WeekWindow, inputs: ScheduleInputs) -> str:
        tz = self.config.tzinfo
        lower, upper = week.bounds(tz)
        return prompt_composer.compose_schedule_prompt(
            tasks=inputs.tasks,
            weekly_goal_hours=inputs.weekly_goal_hours,
            mood=inputs.mood,
            energy=inputs.energy,
            calendar_events=prompt_composer.filter_events_for_week(inputs.calendar_events, lower, upper),
            week_start=week.start,
            trend=prompt_composer.build_mood_energy_trend(inputs.daily_logs, week.days()),
            day_keys=week.day_keys(),
            task_limit=self.config.task_limit,
            window_start_hour=self.config.grid.start_hour,
            window_end_hour=self.config.grid.end_hour,
            tz=tz,
        )

    def _generate(self, week: WeekWindow, inputs: ScheduleInputs) -> tuple[WeeklySchedule, ScheduleGrid]:
        prompt = self.compose_prompt(week, inputs)
        raw_text = self.generator.generate(prompt, self.config.schedule_model)
        try:
            parsed = parse_json_payload(raw_text)
            schedule = normalize(parsed, strict_day_keys=self.config.strict_day_keys)
        except MalformedResponseError as exc:
            exc.raw_text = exc.raw_text or raw_text
            raise
        grid = map_schedule(schedule, self.config.grid, column_order=week.day_keys())
        return schedule, grid

    def _record_failure(self, exc: PlannerError) -> None:
        if isinstance(exc, MalformedResponseError):
            logger.warning("Rejected schedule response (%s): %s | raw=%r", exc.kind, exc, raw_excerpt(exc.raw_text))
        else:
            logger.warning("Schedule generation failed (%s): %s", exc.kind, exc)
        log_metric("schedule.generate.failure", 1, {"kind": exc.kind})


@dataclass(frozen=True)
class FeedbackResult:
    feedback: Optional[str] = None
    error: Optional[str] = None
    can_generate: bool = True


def generate_feedback(
    generator: TextGenerator,
    logs: Sequence[StudyLogEntry],
    config: PlannerConfig,
    *,
    request_id: Optional[str] = None,
) -> FeedbackResult:
    if not logs:
        logger.info("Study feedback skipped: no study sessions logged")
        return FeedbackResult(can_generate=False)

    prompt = prompt_composer.compose_feedback_prompt(logs, max_chars=config.feedback_max_chars)
    with trace("feedback.generate", metadata={"logs": len(logs), "model": config.feedback_model}, request_id=request_id):
        try:
            raw_text = generator.generate(prompt, config.feedback_model)
        except PlannerError as exc:
            logger.warning("Study feedback failed (%s): %s", exc.kind, exc)
            log_metric("feedback.generate.success", 0, {"kind": exc.kind})
            return FeedbackResult(error=FEEDBACK_TRANSPORT_MESSAGE)

    log_metric("feedback.generate.success", 1)
    return FeedbackResult(feedback=extract_feedback_text(raw_text, max_chars=config.feedback_max_chars))


class PlannerSession:
    """Week window, check-in cursor and schedule board for the single local user.

    Every week move runs the pipeline again; the old schedule is never kept.
    """

    def __init__(
        self,
        generator: TextGenerator,
        config: PlannerConfig,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config
        self._clock = clock or (lambda: datetime.now(config.tzinfo))
        self._state_lock = Lock()
        self._week = WeekWindow.containing(self.today(), config.week_start_day)
        self._cursor = CheckinCursor(self.today())
        self.board = ScheduleBoard(self._week)
        self.pipeline = SchedulePipeline(generator, config, self.board)

    def today(self) -> date:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self.config.tzinfo)
        return now.date()

    @property
    def week(self) -> WeekWindow:
        return self._week

    @property
    def checkin_date(self) -> date:
        return self._cursor.day

    def regenerate(self, inputs: ScheduleInputs, *, request_id: Optional[str] = None) -> BoardSnapshot:
        return self.pipeline.run(self._week, inputs, request_id=request_id)

    def next_week(self, inputs: ScheduleInputs, *, request_id: Optional[str] = None) -> BoardSnapshot:
        return self._move_to(lambda week: week.advance(), inputs, request_id)

    def previous_week(self, inputs: ScheduleInputs, *, request_id: Optional[str] = None) -> BoardSnapshot:
        return self._move_to(lambda week: week.retreat(), inputs, request_id)

    def current_week(self, inputs: ScheduleInputs, *, request_id: Optional[str] = None) -> BoardSnapshot:
        return self._move_to(
            lambda _: WeekWindow.containing(self.today(), self.config.week_start_day), inputs, request_id
        )

    def _move_to(
        self,
        target: Callable[[WeekWindow], WeekWindow],
        inputs: ScheduleInputs,
        request_id: Optional[str],
    ) -> BoardSnapshot:
        with self._state_lock:
            week = target(self._week)
            self._week = week
        logger.info("Week window moved to %s", week.start.isoformat())
        return self.pipeline.run(week, inputs, request_id=request_id)

    def previous_checkin_day(self) -> date:
        with self._state_lock:
            self._cursor = self._cursor.previous()
            return self._cursor.day

    def next_checkin_day(self) -> date:
        with self._state_lock:
            self._cursor = self._cursor.next(self.today())
            return self._cursor.day
