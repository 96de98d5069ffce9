# src/shiftgrid/allocation/holidays.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Mapping, Optional, Sequence

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.config import cfg as default_cfg
from shiftgrid.config import is_weekend
from shiftgrid.patterns import ShiftPattern
from shiftgrid.result_types import AllocationResult, AllocationWarning
from shiftgrid.staff import Staff
from shiftgrid.units import Unit

Capacity = dict[date, float]
SearchOrder = Callable[[Sequence[date], int], list[date]]


@dataclass
class StaffGroups:
    """Staff split by rest-day band; each list keeps the caller's order."""

    night: list[Staff] = field(default_factory=list)
    day: list[Staff] = field(default_factory=list)
    part_time: list[Staff] = field(default_factory=list)


def partition_staff(
    staff: Sequence[Staff], pattern_by_id: Mapping[str, ShiftPattern]
) -> StaffGroups:
    """
    Full-time staff eligible for any night work pattern are night-capable, other
    full-time staff are day-only, everyone else (part-time, rental) goes last.
    """
    night_ids = {
        pid for pid, p in pattern_by_id.items() if p.is_night_shift and p.is_work
    }
    groups = StaffGroups()
    for s in staff:
        if not s.is_full_time:
            groups.part_time.append(s)
        elif any(pid in night_ids for pid in s.pattern_ids):
            groups.night.append(s)
        else:
            groups.day.append(s)
    return groups


def band_peaks(units: Sequence[Unit], C: Config) -> tuple[float, float]:
    """(peak night-band demand, peak day-band demand) of the summed unit demand."""
    in_night = C.night_hours()
    peak_night = 0.0
    peak_day = 0.0
    for hour in range(C.HOURS):
        total = sum(float(u.demand[hour]) for u in units)
        if in_night(hour):
            peak_night = max(peak_night, total)
        else:
            peak_day = max(peak_day, total)
    return peak_night, peak_day


def band_capacity(
    group: Sequence[Staff],
    peak: float,
    assignments: Sequence[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    dates: Sequence[date],
) -> Capacity:
    """
    Rest-day slots per date: group size - peak band demand - members already off.
    A member is already off on a date when they hold any non-work assignment there.
    """
    members = {s.id for s in group}
    off: dict[date, set[str]] = {d: set() for d in dates}
    for a in assignments:
        if a.staff_id not in members or a.date not in off:
            continue
        p = pattern_by_id.get(a.pattern_id)
        if p is not None and not p.is_work:
            off[a.date].add(a.staff_id)
    return {d: max(0.0, len(group) - peak - len(off[d])) for d in dates}


def weekend_pairs(dates: Sequence[date]) -> list[tuple[date, date]]:
    """Consecutive Saturday->Sunday and Sunday->Monday pairs, in date order."""
    out: list[tuple[date, date]] = []
    for prev, cur in zip(dates, dates[1:]):
        if (prev.weekday(), cur.weekday()) in ((5, 6), (6, 0)):
            out.append((prev, cur))
    return out


def full_time_search_order(dates: Sequence[date], index: int) -> list[date]:
    """Upcoming weekends, upcoming weekdays, earlier weekends, earlier weekdays."""
    ahead, behind = dates[index:], dates[:index]
    return (
        [d for d in ahead if is_weekend(d)]
        + [d for d in ahead if not is_weekend(d)]
        + [d for d in behind if is_weekend(d)]
        + [d for d in behind if not is_weekend(d)]
    )


def part_time_search_order(dates: Sequence[date], index: int) -> list[date]:
    """Upcoming weekdays, earlier weekdays, upcoming weekends, earlier weekends."""
    ahead, behind = dates[index:], dates[:index]
    return (
        [d for d in ahead if not is_weekend(d)]
        + [d for d in behind if not is_weekend(d)]
        + [d for d in ahead if is_weekend(d)]
        + [d for d in behind if is_weekend(d)]
    )


class _Placer:
    """Mutable bookkeeping shared by every staff member of one allocation run."""

    def __init__(
        self,
        assignments: list[Assignment],
        pattern_by_id: Mapping[str, ShiftPattern],
        rest_pattern_id: str,
        dates: Sequence[date],
    ) -> None:
        self.assignments = assignments
        self.pattern_by_id = pattern_by_id
        self.rest_pattern_id = rest_pattern_id
        self.dates = list(dates)
        self.index_of = {d: i for i, d in enumerate(self.dates)}
        self.added: list[Assignment] = []
        self.warnings: list[AllocationWarning] = []

    def busy_dates(self, staff: Staff) -> set[date]:
        return {a.date for a in self.assignments if a.staff_id == staff.id}

    def rest_count(self, staff: Staff) -> int:
        count = 0
        for a in self.assignments:
            if a.staff_id != staff.id or a.date not in self.index_of:
                continue
            p = self.pattern_by_id.get(a.pattern_id)
            if p is not None and p.is_rest_day:
                count += 1
        return count

    def place(self, staff: Staff, day: date, busy: set[date]) -> None:
        a = Assignment(date=day, staff_id=staff.id, pattern_id=self.rest_pattern_id)
        self.assignments.append(a)
        self.added.append(a)
        busy.add(day)

    def shortfall(
        self, staff: Staff, required: int, placed: int, band: str, capped: bool
    ) -> None:
        if not self.dates:
            reason = "the period has no dates."
        elif capped:
            reason = f"{band} rest-day capacity exhausted."
        else:
            reason = "no unassigned day left."
        self.warnings.append(
            AllocationWarning(
                kind="rest_shortfall",
                message=f"{staff.name}: placed {placed} of {required} rest days; {reason}",
                staff_id=staff.id,
                shortfall=float(required - placed),
            )
        )

    def pair_pass(
        self,
        staff: Staff,
        required: int,
        placed: int,
        busy: set[date],
        capacity: Capacity,
    ) -> int:
        for d1, d2 in weekend_pairs(self.dates):
            if placed >= required - 1:
                break
            if (
                capacity[d1] > 0
                and capacity[d2] > 0
                and d1 not in busy
                and d2 not in busy
            ):
                self.place(staff, d1, busy)
                self.place(staff, d2, busy)
                capacity[d1] -= 1
                capacity[d2] -= 1
                placed += 2
        return placed

    def spread_pass(
        self,
        staff: Staff,
        required: int,
        placed: int,
        busy: set[date],
        order: SearchOrder,
        capacity: Optional[Capacity],
        band: str,
    ) -> int:
        """
        Walk forward by floor(days / (remaining + 1)) and take the first free day
        in `order`; the walk resumes from wherever that day landed.
        """
        if placed >= required:
            return placed
        if not self.dates:
            self.shortfall(staff, required, placed, band, capacity is not None)
            return placed
        remaining = required - placed
        n = len(self.dates)
        interval = n // (remaining + 1)
        day_index = 0
        for _ in range(remaining):
            day_index = min(day_index + max(interval, 1), n - 1)
            chosen: Optional[date] = None
            for d in order(self.dates, day_index):
                if d in busy:
                    continue
                if capacity is not None and capacity[d] <= 0:
                    continue
                chosen = d
                break
            if chosen is None:
                self.shortfall(staff, required, placed, band, capacity is not None)
                break
            self.place(staff, chosen, busy)
            if capacity is not None:
                capacity[chosen] -= 1
            placed += 1
            day_index = self.index_of[chosen]
        return placed


def allocate_rest_days(
    assignments: Sequence[Assignment],
    staff: Sequence[Staff],
    units: Sequence[Unit],
    pattern_by_id: Mapping[str, ShiftPattern],
    required_rest_days: Mapping[str, int],
    dates: Sequence[date],
    *,
    rest_pattern_id: Optional[str] = None,
    cfg: Config | None = None,
) -> AllocationResult:
    """
    Regenerate statutory rest days for the period in `dates`.

    Unlocked rest days inside the period are stripped first; every other
    assignment is kept. Staff are then processed night-capable first, day-only
    second, part-time/rental last, each group in the order given by `staff`;
    later staff see the capacity earlier placements left behind.

    Full-time staff try weekend pairs (Sat->Sun, Sun->Mon) while at least two
    rest days remain, then spread the rest evenly, always within their band's
    capacity. Part-time and rental staff only spread, preferring weekdays and
    ignoring capacity. A staff member whose requirement cannot be met gets a
    `rest_shortfall` warning; the others are still processed.

    Staff missing from `required_rest_days` use `cfg.default_rest_days()`.
    """
    C = cfg or default_cfg
    if rest_pattern_id is None:
        rest_pattern_id = next(
            (pid for pid, p in pattern_by_id.items() if p.is_rest_day), None
        )
    if rest_pattern_id is None or rest_pattern_id not in pattern_by_id:
        raise ValueError("No statutory rest-day pattern available for allocation.")

    period = set(dates)
    kept: list[Assignment] = []
    for a in assignments:
        p = pattern_by_id.get(a.pattern_id)
        if p is not None and p.is_rest_day and a.date in period and not a.locked:
            continue
        kept.append(a)

    groups = partition_staff(staff, pattern_by_id)
    peak_night, peak_day = band_peaks(units, C)
    night_cap = band_capacity(groups.night, peak_night, kept, pattern_by_id, dates)
    day_cap = band_capacity(groups.day, peak_day, kept, pattern_by_id, dates)

    placer = _Placer(kept, pattern_by_id, rest_pattern_id, dates)
    default_req = C.default_rest_days()

    for group, capacity, band in (
        (groups.night, night_cap, "night"),
        (groups.day, day_cap, "day"),
    ):
        for s in group:
            required = int(required_rest_days.get(s.id, default_req))
            busy = placer.busy_dates(s)
            placed = placer.rest_count(s)
            placed = placer.pair_pass(s, required, placed, busy, capacity)
            placer.spread_pass(
                s, required, placed, busy, full_time_search_order, capacity, band
            )

    for s in groups.part_time:
        required = int(required_rest_days.get(s.id, default_req))
        busy = placer.busy_dates(s)
        placed = placer.rest_count(s)
        placer.spread_pass(
            s, required, placed, busy, part_time_search_order, None, "part-time"
        )

    return AllocationResult(
        assignments=placer.assignments,
        added=placer.added,
        warnings=placer.warnings,
    )
