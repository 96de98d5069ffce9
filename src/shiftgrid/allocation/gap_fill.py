# src/shiftgrid/allocation/gap_fill.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

import numpy as np

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.config import cfg as default_cfg
from shiftgrid.patterns import ShiftPattern
from shiftgrid.result_types import AllocationResult, AllocationWarning
from shiftgrid.staff import Staff
from shiftgrid.timegrid import hour_segments
from shiftgrid.units import Unit


@dataclass(frozen=True)
class Gap:
    """Consecutive hours [start, end) short on one unit/date, at worst by `magnitude`."""

    date: date
    unit_id: str
    start: int
    end: int
    magnitude: float

    @property
    def hours(self) -> int:
        return self.end - self.start


def same_day_shortage(
    unit: Unit,
    day: date,
    assignments: Sequence[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Optional[Mapping[str, Staff]] = None,
) -> np.ndarray:
    """
    max(0, demand - coverage) per hour, counting only work assignments that are
    recorded on `day` for this unit. Spill from the previous night is ignored.
    """
    actual = np.zeros(24, dtype=float)
    for a in assignments:
        if a.date != day or a.unit_id != unit.id:
            continue
        p = pattern_by_id.get(a.pattern_id)
        if p is None or not p.is_work:
            continue
        if staff_by_id is not None:
            s = staff_by_id.get(a.staff_id)
            if s is None or not s.is_active:
                continue
        window = a.window(p)
        for seg in hour_segments(
            window.start_hour,
            window.duration_hours(p.duration_hours),
            p.crosses_midnight,
        ):
            if seg.day_shift == 0:
                actual[seg.start : seg.end] += 1
    return np.maximum(np.asarray(unit.demand, dtype=float) - actual, 0.0)


def find_gaps(shortage: np.ndarray, day: date, unit_id: str) -> list[Gap]:
    """Merge consecutive positive-shortage hours into gaps carrying their max shortage."""
    gaps: list[Gap] = []
    start: Optional[int] = None
    peak = 0.0
    for h, val in enumerate(list(shortage) + [0.0]):
        if val > 0:
            if start is None:
                start, peak = h, float(val)
            else:
                peak = max(peak, float(val))
        elif start is not None:
            gaps.append(Gap(day, unit_id, start, h, peak))
            start = None
    return gaps


def covering_pattern(
    staff: Staff, gap: Gap, pattern_by_id: Mapping[str, ShiftPattern]
) -> Optional[ShiftPattern]:
    """Shortest eligible same-day work pattern whose nominal window covers the gap."""
    best: Optional[ShiftPattern] = None
    for pid in staff.pattern_ids:
        p = pattern_by_id.get(pid)
        if p is None or not p.is_work or p.crosses_midnight:
            continue
        if p.start.hour > gap.start or p.end_hour < gap.end:
            continue
        if best is None or p.duration_hours < best.duration_hours:
            best = p
    return best


def fill_gaps(
    assignments: Sequence[Assignment],
    auxiliary_staff: Sequence[Staff],
    units: Sequence[Unit],
    pattern_by_id: Mapping[str, ShiftPattern],
    dates: Sequence[date],
    *,
    staff_by_id: Optional[Mapping[str, Staff]] = None,
    cfg: Config | None = None,
) -> AllocationResult:
    """
    Fill residual per-unit shortages with auxiliary staff, one person per gap.

    For every (date, unit) the same-day shortage is merged into gaps; gaps
    shorter than MIN_GAP_HOURS are left alone. Each remaining gap gets the
    (staff, pattern) pair with the smallest nominal duration among active
    auxiliary staff with no assignment that date. Whatever magnitude remains
    after that single placement is reported as `gap_residual`; a gap nobody can
    cover is reported as `gap_unfilled`.

    `staff_by_id` (when given) excludes on-leave staff from the shortage count.
    """
    C = cfg or default_cfg
    current: list[Assignment] = list(assignments)
    added: list[Assignment] = []
    warnings: list[AllocationWarning] = []
    candidates = [s for s in auxiliary_staff if s.is_active]

    busy: dict[date, set[str]] = {}
    for a in current:
        busy.setdefault(a.date, set()).add(a.staff_id)

    for day in dates:
        for unit in units:
            shortage = same_day_shortage(unit, day, current, pattern_by_id, staff_by_id)
            for gap in find_gaps(shortage, day, unit.id):
                if gap.hours < C.MIN_GAP_HOURS:
                    continue

                best: Optional[tuple[Staff, ShiftPattern]] = None
                taken = busy.get(day, set())
                for s in candidates:
                    if s.id in taken:
                        continue
                    p = covering_pattern(s, gap, pattern_by_id)
                    if p is None:
                        continue
                    if best is None or p.duration_hours < best[1].duration_hours:
                        best = (s, p)

                if best is None:
                    warnings.append(
                        AllocationWarning(
                            kind="gap_unfilled",
                            message=(
                                f"{unit.name} {day.isoformat()} "
                                f"{gap.start:02d}-{gap.end:02d}h: no auxiliary staff "
                                "with a covering pattern."
                            ),
                            unit_id=unit.id,
                            date=day,
                            shortfall=gap.magnitude,
                        )
                    )
                    continue

                s, p = best
                a = Assignment(date=day, staff_id=s.id, pattern_id=p.id, unit_id=unit.id)
                current.append(a)
                added.append(a)
                busy.setdefault(day, set()).add(s.id)

                residual = math.ceil(gap.magnitude) - 1
                if residual > 0:
                    warnings.append(
                        AllocationWarning(
                            kind="gap_residual",
                            message=(
                                f"{unit.name} {day.isoformat()} "
                                f"{gap.start:02d}-{gap.end:02d}h: placed {s.name} "
                                f"({p.id}); {gap.magnitude - 1:g} still short."
                            ),
                            unit_id=unit.id,
                            date=day,
                            shortfall=gap.magnitude - 1,
                        )
                    )

    return AllocationResult(assignments=current, added=added, warnings=warnings)
