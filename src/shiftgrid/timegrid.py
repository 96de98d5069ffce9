# src/shiftgrid/timegrid.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, TypeAlias

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def parse_hhmm(value: Any) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    Anything malformed (None, non-strings, out-of-range fields) yields 0 so that
    coverage math stays total. "24:00" is accepted as the end of the day.
    """
    if isinstance(value, TimeOfDay):
        return value.minutes
    if not isinstance(value, str):
        return 0
    match = _HHMM.match(value)
    if match is None:
        return 0
    hh, mm = int(match.group(1)), int(match.group(2))
    if mm >= 60 or hh > 24 or (hh == 24 and mm != 0):
        return 0
    return hh * 60 + mm


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Minutes since midnight, 0..1440."""

    minutes: int

    @classmethod
    def parse(cls, value: Any) -> TimeOfDay:
        return cls(parse_hhmm(value))

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def ceil_hour(self) -> int:
        """Hour index at or after this time (08:30 -> 9)."""
        return -(-self.minutes // 60)

    def __str__(self) -> str:
        return f"{self.minutes // 60:02d}:{self.minutes % 60:02d}"


def span_hours(start: TimeOfDay, end: TimeOfDay) -> float:
    """Length of [start, end) in hours, wrapping to the next day when end < start."""
    diff = end.minutes - start.minutes
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff / 60.0


@dataclass(frozen=True)
class FixedWindow:
    start: TimeOfDay
    end: TimeOfDay

    @property
    def start_hour(self) -> int:
        return self.start.hour

    def duration_hours(self, nominal: float) -> float:
        return float(nominal)


@dataclass(frozen=True)
class FlexWindow:
    """Outer frame of a flex pattern plus the window actually worked inside it."""

    frame_start: TimeOfDay
    frame_end: TimeOfDay
    actual_start: Optional[TimeOfDay] = None
    actual_end: Optional[TimeOfDay] = None

    @property
    def start_hour(self) -> int:
        start = self.actual_start if self.actual_start is not None else self.frame_start
        return start.hour

    def duration_hours(self, nominal: float) -> float:
        if self.actual_start is None or self.actual_end is None:
            return float(nominal)
        return span_hours(self.actual_start, self.actual_end)


Window: TypeAlias = FixedWindow | FlexWindow


@dataclass(frozen=True)
class HourSegment:
    """Hours [start, end) on the day `day_shift` days after the assignment date."""

    day_shift: int
    start: int
    end: int

    def hours(self) -> range:
        return range(self.start, self.end)


def hour_segments(
    start_hour: int, duration_hours: float, crosses_midnight: bool, *, hours: int = 24
) -> list[HourSegment]:
    """
    Split a worked span into same-day and next-day hour ranges.

    The end hour is start + ceil(duration). Anything past midnight spills into
    the following date, which also applies to patterns flagged as crossing
    midnight.
    """
    start = max(0, min(int(start_hour), hours))
    end = start + int(math.ceil(max(0.0, float(duration_hours))))

    out: list[HourSegment] = []
    same_day_end = min(end, hours)
    if start < same_day_end:
        out.append(HourSegment(0, start, same_day_end))
    if end > hours or crosses_midnight:
        spill = min(end - hours, hours)
        if spill > 0:
            out.append(HourSegment(1, 0, spill))
    return out
