"""Tests for time-of-day parsing and span coercion."""
from __future__ import annotations

import pytest

from weekplanner.services.planner.timeparse import coerce_span, parse_time, split_time_range


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("13:30", 810),
        ("09:00", 540),
        ("9", 540),
        ("1:05 PM", 785),
        ("12 AM", 0),
        ("12:15 pm", 735),
        ("24:00", 1440),
    ],
)
def test_parse_time_accepts_common_forms(value, expected) -> None:
    assert parse_time(value) == expected


@pytest.mark.parametrize("value", ["25:00", "9:75", "noon", "", "13 PM", None, 930])
def test_parse_time_rejects_garbage(value) -> None:
    assert parse_time(value) is None


def test_split_time_range_handles_hyphen_and_en_dash() -> None:
    assert split_time_range("9:00 - 10:30") == ("9:00", "10:30")
    assert split_time_range("9:00–10:30") == ("9:00", "10:30")


def test_split_time_range_missing_halves() -> None:
    assert split_time_range("9:00") == ("9:00", None)
    assert split_time_range("") == (None, None)
    assert split_time_range(None) == (None, None)


def test_coerce_span_defaults_to_thirty_minutes() -> None:
    assert coerce_span(600, None) == (600, 630)
    assert coerce_span(600, 600) == (600, 630)
    assert coerce_span(600, 540) == (600, 630)


def test_coerce_span_keeps_valid_ranges_and_rejects_missing_start() -> None:
    assert coerce_span(600, 660) == (600, 660)
    assert coerce_span(None, 660) is None


def test_midnight_end_after_a_later_start_closes_the_day() -> None:
    assert coerce_span(1380, 0) == (1380, 1440)
    assert coerce_span(0, 0) == (0, 30)
