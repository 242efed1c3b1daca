"""Place canonical schedule items on the weekly 15-minute grid."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from weekplanner.services.planner.timeparse import coerce_span
from weekplanner.services.planner.types import DAY_KEYS, ScheduleItem, WeeklySchedule, format_minutes

SLOT_MINUTES = 15

LANE_PALETTE = (
    "indigo",
    "sky",
    "violet",
    "amber",
    "rose",
    "teal",
    "lime",
    "fuchsia",
)
LANE_CATEGORIES = frozenset({"study", "deadline_work"})
CATEGORY_COLORS: Dict[str, str] = {
    "break": "emerald",
    "meal": "orange",
    "personal": "pink",
    "personal_time": "pink",
    "class": "blue",
    "event": "cyan",
    "other": "slate",
}

# Longest first so "study for" wins over a shorter overlapping prefix.
LABEL_VERB_PREFIXES = ("study for", "work on", "prepare", "finish", "submit", "review", "read")
_LABEL_TAIL_RE = re.compile(r"[:(].*$")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class GridConfig:
    start_hour: int = 7
    end_hour: int = 24
    slot_minutes: int = SLOT_MINUTES

    def __post_init__(self) -> None:
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError("grid window must satisfy 0 <= start_hour < end_hour <= 24")

    @property
    def window_start(self) -> int:
        return self.start_hour * 60

    @property
    def window_end(self) -> int:
        return self.end_hour * 60

    @property
    def total_rows(self) -> int:
        return (self.window_end - self.window_start) // self.slot_minutes


@dataclass(frozen=True)
class PlacedBlock:
    day_key: str
    day_column: int
    row_start: int
    row_span: int
    start_minute: int
    end_minute: int
    label: str
    category: str
    color: str

    @property
    def time_label(self) -> str:
        return f"{format_minutes(self.start_minute)}-{format_minutes(self.end_minute)}"


def normalize_label_key(label: str) -> str:
    """Group related task labels: "Finish Essay: intro" and "essay (draft)" share the key "essay"."""
    key = _WHITESPACE_RE.sub(" ", (label or "").strip().lower())
    for prefix in LABEL_VERB_PREFIXES:
        if key.startswith(prefix + " "):
            key = key[len(prefix) + 1 :]
            break
    key = _LABEL_TAIL_RE.sub("", key).strip()
    return key or (label or "").strip().lower()


class ColorLanes:
    """Round-robin palette assignment keyed by normalized task label.

    One instance belongs to one generated schedule; build a new instance for
    every schedule instead of clearing an old one.
    """

    def __init__(self, palette: Sequence[str] = LANE_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)
        self._lanes: Dict[str, int] = {}

    def lane_for(self, label: str) -> int:
        key = normalize_label_key(label)
        if key not in self._lanes:
            self._lanes[key] = len(self._lanes) % len(self._palette)
        return self._lanes[key]

    def color_for(self, label: str) -> str:
        return self._palette[self.lane_for(label)]

    def assignments(self) -> Dict[str, str]:
        return {key: self._palette[lane] for key, lane in self._lanes.items()}


def block_color(category: str, label: str, lanes: ColorLanes) -> str:
    if category in LANE_CATEGORIES:
        return lanes.color_for(label)
    return CATEGORY_COLORS.get(category, CATEGORY_COLORS["other"])


def place(
    item: ScheduleItem,
    day_column: int,
    config: GridConfig,
    lanes: ColorLanes,
    *,
    day_key: Optional[str] = None,
) -> Optional[PlacedBlock]:
    """Position one item; None means the item is dropped."""
    span = coerce_span(item.start_minute, item.end_minute)
    if span is None:
        return None
    start = max(span[0], config.window_start)
    end = min(span[1], config.window_end)
    if end <= start:
        return None

    row_start = (start - config.window_start) // config.slot_minutes
    row_end = (end - config.window_start) // config.slot_minutes
    return PlacedBlock(
        day_key=day_key or DAY_KEYS[day_column % len(DAY_KEYS)],
        day_column=day_column,
        row_start=row_start,
        row_span=max(row_end - row_start, 1),
        start_minute=start,
        end_minute=end,
        label=item.label,
        category=item.category,
        color=block_color(item.category, item.label, lanes),
    )


@dataclass
class ScheduleGrid:
    config: GridConfig
    blocks: List[PlacedBlock] = field(default_factory=list)
    dropped: int = 0
    lanes: Dict[str, str] = field(default_factory=dict)


def map_schedule(schedule: WeeklySchedule, config: GridConfig, column_order: Sequence[str] = DAY_KEYS) -> ScheduleGrid:
    """Place a whole schedule with a fresh lane table.

    `column_order` lists day keys left to right, normally starting at the
    configured week-start day.
    """
    lanes = ColorLanes()
    grid = ScheduleGrid(config=config)
    for column, day_key in enumerate(column_order):
        for item in schedule.items(day_key):
            block = place(item, column, config, lanes, day_key=day_key)
            if block is None:
                grid.dropped += 1
                continue
            grid.blocks.append(block)
    grid.lanes = lanes.assignments()
    return grid
