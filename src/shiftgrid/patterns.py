from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shiftgrid.timegrid import FixedWindow, FlexWindow, TimeOfDay, Window


class WorkType(str, Enum):
    WORK = "Work"
    STATUTORY_HOLIDAY = "StatutoryHoliday"
    PAID_LEAVE = "PaidLeave"
    MEETING = "Meeting"
    OTHER = "Other"


class CrossUnitKind(str, Enum):
    NONE = "none"
    SHAREABLE = "shareable"
    SUPPORT_ONLY = "support"


@dataclass(slots=True)
class ShiftPattern:
    """
    A working (or non-working) pattern staff can be assigned to.

    `start`/`end` accept "HH:MM" strings and are stored as TimeOfDay. A pattern
    whose start is later than its end crosses midnight; the flag is derived once
    here and never re-inferred from strings.
    """

    id: str
    name: str
    work_type: WorkType
    start: Any = "00:00"
    end: Any = "00:00"
    duration_hours: float = 0.0
    category: str = ""
    cross_unit: CrossUnitKind = CrossUnitKind.NONE
    break_minutes: int = 0
    is_night_shift: bool = False
    is_flex: bool = False
    crosses_midnight: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self.work_type = WorkType(self.work_type)
        self.cross_unit = CrossUnitKind(self.cross_unit)
        self.start = TimeOfDay.parse(self.start)
        self.end = TimeOfDay.parse(self.end)
        self.duration_hours = float(self.duration_hours or 0.0)
        self.crosses_midnight = self.start.minutes > self.end.minutes

    def __repr__(self) -> str:
        flags = "".join(
            flag
            for flag, on in (
                ("N", self.is_night_shift),
                ("F", self.is_flex),
                ("X", self.crosses_midnight),
            )
            if on
        )
        return (
            f"ShiftPattern(id='{self.id}', {self.work_type.value}, "
            f"{self.start}-{self.end}, {self.duration_hours:g}h, "
            f"cross={self.cross_unit.value}{', ' + flags if flags else ''})"
        )

    @property
    def is_work(self) -> bool:
        return self.work_type is WorkType.WORK

    @property
    def is_rest_day(self) -> bool:
        return self.work_type is WorkType.STATUTORY_HOLIDAY

    @property
    def is_shareable(self) -> bool:
        return self.cross_unit in (CrossUnitKind.SHAREABLE, CrossUnitKind.SUPPORT_ONLY)

    @property
    def end_hour(self) -> int:
        """Exclusive end hour of the nominal window, on the day it ends."""
        return self.end.ceil_hour

    def nominal_window(self) -> FixedWindow:
        return FixedWindow(self.start, self.end)

    def window(self, override_start: Any = None, override_end: Any = None) -> Window:
        """Fixed window, or the flex frame with the worked sub-window when given."""
        if not self.is_flex:
            return self.nominal_window()
        return FlexWindow(
            frame_start=self.start,
            frame_end=self.end,
            actual_start=(
                TimeOfDay.parse(override_start) if override_start is not None else None
            ),
            actual_end=(
                TimeOfDay.parse(override_end) if override_end is not None else None
            ),
        )
