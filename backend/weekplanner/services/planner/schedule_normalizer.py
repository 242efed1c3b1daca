"""Normalize the response shapes the model has historically produced into a WeeklySchedule."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from weekplanner.core.errors import ShapeMismatchError
from weekplanner.services.planner.timeparse import coerce_span, parse_time, split_time_range
from weekplanner.services.planner.types import CATEGORIES, DAY_KEYS, ScheduleItem, WeeklySchedule

logger = logging.getLogger(__name__)

REQUIRED_DAY_KEY = "monday"
UNTITLED_LABEL = "Untitled"
CATEGORY_ALIASES = {
    "deadline": "deadline_work",
    "deadline work": "deadline_work",
    "lunch": "meal",
    "dinner": "meal",
    "breakfast": "meal",
    "rest": "break",
    "personal time": "personal_time",
    "lecture": "class",
}

DayAdapter = Callable[[Any], Optional[List[Any]]]


def _flat_day_items(value: Any) -> Optional[List[Any]]:
    """`"monday": [{...}, ...]`"""
    if isinstance(value, list):
        return value
    return None


def _nested_day_items(value: Any) -> Optional[List[Any]]:
    """`"monday": {"date": "...", "schedule": [{...}, ...]}`"""
    if isinstance(value, dict) and isinstance(value.get("schedule"), list):
        return value["schedule"]
    return None


def _empty_day_items(value: Any) -> Optional[List[Any]]:
    """`"monday": null` or `"monday": {"schedule": null}`"""
    if value is None:
        return []
    if isinstance(value, dict) and value.get("schedule") is None and "schedule" in value:
        return []
    return None


DAY_ADAPTERS: Tuple[DayAdapter, ...] = (_flat_day_items, _nested_day_items, _empty_day_items)


def normalize(parsed: Any, *, strict_day_keys: bool = False) -> WeeklySchedule:
    """Turn a parsed response into a WeeklySchedule.

    Raises ShapeMismatchError when the object is not a mapping, lacks the
    required day key(s), or a day value matches none of the known shapes.
    Individual items that cannot be placed (no parseable start) are skipped.
    """
    if isinstance(parsed, WeeklySchedule):
        parsed = parsed.to_payload()
    if not isinstance(parsed, dict):
        raise ShapeMismatchError(f"expected a JSON object, got {type(parsed).__name__}")

    day_values = {str(key).strip().lower(): value for key, value in parsed.items()}
    required = DAY_KEYS if strict_day_keys else (REQUIRED_DAY_KEY,)
    missing = [key for key in required if key not in day_values]
    if missing:
        raise ShapeMismatchError(f"response is missing day keys: {', '.join(missing)}")

    schedule = WeeklySchedule()
    skipped = 0
    for day_key in DAY_KEYS:
        raw_items = _day_items(day_key, day_values.get(day_key))
        items: List[ScheduleItem] = []
        for raw_item in raw_items:
            item = normalize_item(raw_item)
            if item is None:
                skipped += 1
                continue
            items.append(item)
        items.sort(key=lambda entry: (entry.start_minute, entry.end_minute))
        schedule.days[day_key] = items

    if skipped:
        logger.info("Skipped %d schedule item(s) without a usable start time", skipped)
    return schedule


def _day_items(day_key: str, value: Any) -> List[Any]:
    for adapter in DAY_ADAPTERS:
        items = adapter(value)
        if items is not None:
            return items
    raise ShapeMismatchError(f"unsupported shape for {day_key}: {type(value).__name__}")


def normalize_item(raw: Any) -> Optional[ScheduleItem]:
    if not isinstance(raw, dict):
        return None

    start_text, end_text = _item_time_fields(raw)
    span = coerce_span(parse_time(start_text), parse_time(end_text))
    if span is None:
        return None

    label = raw.get("task") or raw.get("title") or raw.get("activity")
    label = str(label).strip() if label is not None else ""
    return ScheduleItem(
        start_minute=span[0],
        end_minute=span[1],
        label=label or UNTITLED_LABEL,
        category=normalize_category(raw.get("type") or raw.get("category")),
    )


def _item_time_fields(raw: Dict[str, Any]) -> Tuple[Any, Any]:
    if raw.get("start_time") is not None or raw.get("end_time") is not None:
        return raw.get("start_time"), raw.get("end_time")
    return split_time_range(raw.get("time"))


def normalize_category(value: Any) -> str:
    if not isinstance(value, str):
        return "other"
    key = value.strip().lower()
    key = CATEGORY_ALIASES.get(key, key).replace(" ", "_").replace("-", "_")
    return key if key in CATEGORIES else "other"
