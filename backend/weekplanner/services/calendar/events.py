"""Normalize raw calendar records into CalendarEvent."""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Iterable, List, Optional
from zoneinfo import ZoneInfo

from weekplanner.services.planner.types import CalendarEvent

logger = logging.getLogger(__name__)

UNTITLED_EVENT = "Untitled Event"


def parse_instant(value: Any, tz: ZoneInfo) -> Optional[datetime]:
    """Parse a full timestamp or a date-only string; naive values and dates are local to `tz`."""
    if isinstance(value, dict):
        value = value.get("dateTime") or value.get("date")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def normalize_calendar_event(raw: Any, tz: ZoneInfo) -> Optional[CalendarEvent]:
    """Accept Google items (`summary`, `start.dateTime|date`) or `{title, start|startTime, end|endTime}`."""
    if not isinstance(raw, dict):
        return None
    title = raw.get("title") or raw.get("summary") or UNTITLED_EVENT
    start = parse_instant(raw.get("start", raw.get("startTime")), tz)
    end = parse_instant(raw.get("end", raw.get("endTime")), tz)
    if start is None:
        return None
    if end is None or end < start:
        end = start
    return CalendarEvent(title=str(title), start=start, end=end)


def normalize_calendar_events(raw_events: Iterable[Any], tz: ZoneInfo) -> List[CalendarEvent]:
    events: List[CalendarEvent] = []
    skipped = 0
    for raw in raw_events:
        event = normalize_calendar_event(raw, tz)
        if event is None:
            skipped += 1
            continue
        events.append(event)
    if skipped:
        logger.info("Skipped %d calendar record(s) without a usable start", skipped)
    return events
