"""Week window and check-in cursor state."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Tuple
from zoneinfo import ZoneInfo

from weekplanner.services.planner.types import DAY_KEYS

SUNDAY = 6


def start_of_week(day: date, week_start_day: int = SUNDAY) -> date:
    """Snap `day` back to the most recent `week_start_day` (Python weekday numbering)."""
    offset = (day.weekday() - week_start_day) % 7
    return day - timedelta(days=offset)


def week_day_keys(week_start_day: int = SUNDAY) -> Tuple[str, ...]:
    """Day keys in column order, starting at the week-start day."""
    return tuple(DAY_KEYS[(week_start_day + offset) % 7] for offset in range(7))


@dataclass(frozen=True)
class WeekWindow:
    start: date
    week_start_day: int = SUNDAY

    def __post_init__(self) -> None:
        snapped = start_of_week(self.start, self.week_start_day)
        if snapped != self.start:
            object.__setattr__(self, "start", snapped)

    @classmethod
    def containing(cls, day: date, week_start_day: int = SUNDAY) -> "WeekWindow":
        return cls(start=day, week_start_day=week_start_day)

    @property
    def end(self) -> date:
        """Last calendar day inside the window."""
        return self.start + timedelta(days=6)

    def advance(self) -> "WeekWindow":
        return WeekWindow(self.start + timedelta(days=7), self.week_start_day)

    def retreat(self) -> "WeekWindow":
        return WeekWindow(self.start - timedelta(days=7), self.week_start_day)

    def days(self) -> Tuple[date, ...]:
        return tuple(self.start + timedelta(days=offset) for offset in range(7))

    def day_keys(self) -> Tuple[str, ...]:
        return week_day_keys(self.week_start_day)

    def bounds(self, tz: ZoneInfo) -> Tuple[datetime, datetime]:
        """Half-open [local midnight of start, +7 days) as aware datetimes."""
        lower = datetime.combine(self.start, time.min, tzinfo=tz)
        upper = datetime.combine(self.start + timedelta(days=7), time.min, tzinfo=tz)
        return lower, upper


@dataclass(frozen=True)
class CheckinCursor:
    """Selected check-in day; it may move back freely but never past `today`."""

    day: date

    def previous(self) -> "CheckinCursor":
        return CheckinCursor(self.day - timedelta(days=1))

    def next(self, today: date) -> "CheckinCursor":
        candidate = self.day + timedelta(days=1)
        if candidate > today:
            return self
        return CheckinCursor(candidate)

    def clamp(self, today: date) -> "CheckinCursor":
        return self if self.day <= today else CheckinCursor(today)
