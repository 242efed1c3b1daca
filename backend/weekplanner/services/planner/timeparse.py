"""Time-of-day parsing for generated schedule items."""
from __future__ import annotations

import re
from typing import Optional, Tuple

MINUTES_PER_DAY = 24 * 60
DEFAULT_DURATION_MIN = 30

_TIME_RE = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>[ap])?\.?\s*(?:m\.?)?$",
    re.IGNORECASE,
)
_RANGE_SPLIT_RE = re.compile(r"\s*[-–]\s*")


def parse_time(value: object) -> Optional[int]:
    """Parse "13:30", "9" or "1:05 PM" into minutes since midnight.

    Returns None for anything else. "24:00" is accepted as the end of the day.
    """
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value.strip())
    if not match:
        return None

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    meridiem = (match.group("meridiem") or "").lower()
    if minute > 59:
        return None

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour %= 12
        if meridiem == "p":
            hour += 12
    elif hour == 24 and minute == 0:
        return MINUTES_PER_DAY
    elif hour > 23:
        return None

    return hour * 60 + minute


def split_time_range(value: object) -> Tuple[Optional[str], Optional[str]]:
    """Split "9:00 - 10:30" into its two halves; missing halves come back as None."""
    if not isinstance(value, str) or not value.strip():
        return None, None
    parts = _RANGE_SPLIT_RE.split(value.strip(), maxsplit=1)
    start = parts[0] or None
    end = parts[1] if len(parts) > 1 and parts[1] else None
    return start, end


def coerce_span(start: Optional[int], end: Optional[int]) -> Optional[Tuple[int, int]]:
    """Resolve a (start, end) pair into a positive span.

    No start means the item cannot be placed. An end of midnight after a later
    start ("11 PM - 12 AM") means the end of the day. A missing end, or one at
    or before the start, becomes a 30 minute block.
    """
    if start is None:
        return None
    if end == 0 and start > 0:
        end = MINUTES_PER_DAY
    if end is None or end <= start:
        end = start + DEFAULT_DURATION_MIN
    return start, end
