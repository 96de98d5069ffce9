from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from shiftgrid.timegrid import TimeOfDay


class EmploymentType(str, Enum):
    FULL_TIME = "FullTime"
    PART_TIME = "PartTime"
    RENTAL = "Rental"


class StaffStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "OnLeave"


@dataclass(frozen=True)
class TimeRange:
    start: TimeOfDay
    end: TimeOfDay

    @classmethod
    def parse(cls, start: Any, end: Any) -> TimeRange:
        return cls(TimeOfDay.parse(start), TimeOfDay.parse(end))

    @property
    def wraps(self) -> bool:
        return self.end < self.start

    def contains(self, start: TimeOfDay, end: TimeOfDay) -> bool:
        """True when a worked window [start, end] lies inside this range.

        A window with end < start runs past midnight and only fits a range
        that wraps too.
        """
        if not self.wraps:
            return self.start <= start <= end <= self.end
        if end < start:
            return self.start <= start and end <= self.end
        # same-day window inside a wrapping range: evening or morning side
        return self.start <= start or end <= self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def _normalize_ranges(values: Iterable[Any]) -> list[TimeRange]:
    out: list[TimeRange] = []
    for val in values:
        if isinstance(val, TimeRange):
            out.append(val)
        elif isinstance(val, dict):
            out.append(TimeRange.parse(val.get("start"), val.get("end")))
        elif isinstance(val, Sequence) and not isinstance(val, str) and len(val) == 2:
            out.append(TimeRange.parse(val[0], val[1]))
        else:
            raise TypeError(
                "workable_ranges entries must be TimeRange, {'start','end'} or (start, end)."
            )
    return out


@dataclass(slots=True)
class Staff:
    """
    Core data model representing a staff member regardless of how they were created.
    """

    id: str
    name: str
    employment: EmploymentType = EmploymentType.FULL_TIME
    pattern_ids: list[str] = field(default_factory=list)
    unit_id: Optional[str] = None
    status: StaffStatus = StaffStatus.ACTIVE
    workable_ranges: list[TimeRange] = field(default_factory=list)
    max_consec_days: Optional[int] = None
    min_rest_hours: Optional[float] = None

    def __repr__(self) -> str:
        cap = (
            f"cap={self.max_consec_days}"
            if self.max_consec_days is not None
            else "cap=∞"
        )
        return (
            f"Staff(id='{self.id}', name='{self.name}', {self.employment.value}, "
            f"unit={self.unit_id}, status={self.status.value}, "
            f"patterns={self.pattern_ids}, {cap}, "
            f"ranges={[str(r) for r in self.workable_ranges]})"
        )

    def __post_init__(self) -> None:
        self.employment = EmploymentType(self.employment)
        self.status = StaffStatus(self.status)
        self.workable_ranges = _normalize_ranges(self.workable_ranges)
        seen = set()
        dedup: list[str] = []
        for pid in self.pattern_ids:
            if pid not in seen:
                seen.add(pid)
                dedup.append(pid)
        self.pattern_ids = dedup

    @property
    def is_active(self) -> bool:
        return self.status is StaffStatus.ACTIVE

    @property
    def is_full_time(self) -> bool:
        return self.employment is EmploymentType.FULL_TIME

    @property
    def is_rental(self) -> bool:
        return self.employment is EmploymentType.RENTAL

    def can_work(self, pattern_id: str) -> bool:
        return pattern_id in self.pattern_ids


def is_within_contract(
    staff: Staff,
    start: Any,
    end: Any,
    default_window: tuple[str, str] = ("08:00", "20:00"),
) -> bool:
    """
    True when a worked window fits a part-timer's contract.

    Start and end must both fall inside one declared range. Staff that are not
    part-time are never restricted.
    """
    if staff.employment is not EmploymentType.PART_TIME:
        return True
    ranges = staff.workable_ranges or [TimeRange.parse(*default_window)]
    s, e = TimeOfDay.parse(start), TimeOfDay.parse(end)
    return any(r.contains(s, e) for r in ranges)
