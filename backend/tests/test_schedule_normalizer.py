"""Tests for schedule shape adapters and canonical normalization."""
from __future__ import annotations

import pytest

from weekplanner.core.errors import ShapeMismatchError
from weekplanner.services.planner.schedule_normalizer import normalize, normalize_category, normalize_item
from weekplanner.services.planner.types import DAY_KEYS, ScheduleItem


def test_flat_shape_with_time_range_string() -> None:
    schedule = normalize({"monday": [{"time": "9:00 - 10:30", "task": "Essay", "type": "Study"}]})
    assert schedule.items("monday") == [ScheduleItem(540, 630, "Essay", "study")]


def test_nested_shape_with_split_fields() -> None:
    schedule = normalize(
        {
            "monday": {
                "date": "2024-01-01",
                "schedule": [{"start_time": "13:00", "end_time": "14:00", "title": "Lab report", "type": "deadline"}],
            }
        }
    )
    assert schedule.items("monday") == [ScheduleItem(780, 840, "Lab report", "deadline_work")]


def test_mixed_shapes_across_days_and_missing_days_are_empty() -> None:
    schedule = normalize(
        {
            "Monday": [{"time": "08:00-08:30", "task": "Breakfast", "type": "meal"}],
            "tuesday": {"schedule": [{"start_time": "10:00", "end_time": "11:00", "task": "Reading"}]},
            "wednesday": None,
            "thursday": {"schedule": None},
        }
    )
    assert [item.label for item in schedule.items("monday")] == ["Breakfast"]
    assert schedule.items("tuesday")[0].category == "other"
    assert schedule.items("wednesday") == []
    assert schedule.items("thursday") == []
    assert set(schedule.days) == set(DAY_KEYS)


def test_missing_monday_is_a_shape_mismatch() -> None:
    with pytest.raises(ShapeMismatchError):
        normalize({"tuesday": {"schedule": []}})


def test_strict_mode_requires_every_day() -> None:
    payload = {"monday": []}
    assert normalize(payload).item_count() == 0
    with pytest.raises(ShapeMismatchError, match="tuesday"):
        normalize(payload, strict_day_keys=True)


@pytest.mark.parametrize("payload", [[], "schedule", 42, None])
def test_non_mapping_payload_is_rejected(payload) -> None:
    with pytest.raises(ShapeMismatchError):
        normalize(payload)


def test_unknown_day_shape_rejects_whole_response() -> None:
    with pytest.raises(ShapeMismatchError):
        normalize({"monday": [], "tuesday": "busy all day"})


def test_unplaceable_items_are_skipped() -> None:
    schedule = normalize(
        {
            "monday": [
                {"time": "whenever", "task": "Nap"},
                "just a string",
                {"start_time": "10:00", "end_time": "11:00", "task": "Kept"},
            ]
        }
    )
    assert [item.label for item in schedule.items("monday")] == ["Kept"]


def test_bad_end_becomes_thirty_minutes() -> None:
    item = normalize_item({"start_time": "15:00", "end_time": "14:00", "task": "Review"})
    assert (item.start_minute, item.end_minute) == (900, 930)
    item = normalize_item({"start_time": "15:00", "task": "Review"})
    assert (item.start_minute, item.end_minute) == (900, 930)


def test_items_are_sorted_and_labels_default() -> None:
    schedule = normalize(
        {
            "monday": [
                {"time": "14:00-15:00", "activity": "Gym", "type": "personal"},
                {"time": "09:00-10:00", "type": "class"},
            ]
        }
    )
    assert [(item.start_minute, item.label) for item in schedule.items("monday")] == [(540, "Untitled"), (840, "Gym")]


def test_category_aliases() -> None:
    assert normalize_category("Lunch") == "meal"
    assert normalize_category("Personal Time") == "personal_time"
    assert normalize_category("deadline-work") == "deadline_work"
    assert normalize_category("party") == "other"
    assert normalize_category(None) == "other"


def test_normalize_is_idempotent_on_canonical_payload() -> None:
    first = normalize(
        {
            "monday": {"schedule": [{"start_time": "23:45", "task": "Wind down", "type": "personal"}]},
            "friday": [{"time": "7:00 PM - 8:15 PM", "task": "Dinner", "type": "dinner"}],
        }
    )
    assert normalize(first.to_payload()) == first
    assert normalize(first) == first


def test_late_block_ending_at_midnight_keeps_its_hour() -> None:
    item = normalize_item({"time": "11:00 PM - 12:00 AM", "task": "Wind down", "type": "personal"})
    assert (item.start_minute, item.end_minute) == (1380, 1440)
    schedule = normalize({"monday": [{"time": "11:00 PM - 12:00 AM", "task": "Wind down"}]})
    assert normalize(schedule.to_payload()) == schedule
