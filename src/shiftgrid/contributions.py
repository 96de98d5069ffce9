from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

import numpy as np

from shiftgrid.assignments import Assignment
from shiftgrid.grid import CoverageGrid
from shiftgrid.patterns import ShiftPattern
from shiftgrid.staff import Staff
from shiftgrid.timegrid import HourSegment, hour_segments


@dataclass(frozen=True)
class Contribution:
    """Direct hourly coverage one working assignment adds to its unit."""

    assignment: Assignment
    unit_index: int
    segments: tuple[HourSegment, ...]
    shareable: bool

    def cells(self, grid: CoverageGrid) -> Iterable[tuple[int, int, slice]]:
        """Yield (day index, unit index, hour slice) for segments inside the grid."""
        base = grid.day_offset(self.assignment.date)
        if base is None:
            return
        for seg in self.segments:
            d = base + seg.day_shift
            if 0 <= d < len(grid.dates):
                yield d, self.unit_index, slice(seg.start, seg.end)


def direct_contribution(
    assignment: Assignment,
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Mapping[str, Staff],
    grid: CoverageGrid,
) -> Optional[Contribution]:
    """
    Hour spans a regular-work assignment covers, or None when it contributes nothing.

    Unknown pattern/staff ids, non-work patterns, staff on leave and assignments
    without a unit on this grid are all silent no-ops.
    """
    pattern = pattern_by_id.get(assignment.pattern_id)
    if pattern is None or not pattern.is_work:
        return None
    staff = staff_by_id.get(assignment.staff_id)
    if staff is None or not staff.is_active:
        return None
    u = grid.unit_index(assignment.unit_id)
    if u is None:
        return None

    window = assignment.window(pattern)
    segments = hour_segments(
        window.start_hour,
        window.duration_hours(pattern.duration_hours),
        pattern.crosses_midnight,
    )
    return Contribution(
        assignment=assignment,
        unit_index=u,
        segments=tuple(segments),
        shareable=pattern.is_shareable,
    )


def collect_contributions(
    assignments: Iterable[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Mapping[str, Staff],
    grid: CoverageGrid,
) -> list[Contribution]:
    out: list[Contribution] = []
    for a in assignments:
        c = direct_contribution(a, pattern_by_id, staff_by_id, grid)
        if c is not None:
            out.append(c)
    return out


def apply_contribution(
    actual: np.ndarray, grid: CoverageGrid, contribution: Contribution, sign: int = 1
) -> list[tuple[int, int, slice]]:
    """Add (sign=1) or remove (sign=-1) one contribution in place, never below 0."""
    touched: list[tuple[int, int, slice]] = []
    for d, u, hours in contribution.cells(grid):
        actual[d, u, hours] += sign
        if sign < 0:
            np.maximum(actual[d, u, hours], 0.0, out=actual[d, u, hours])
        touched.append((d, u, hours))
    return touched


def supporter_counts(
    contributions: Iterable[Contribution], grid: CoverageGrid
) -> np.ndarray:
    """(day, unit, hour) count of active shareable/support-only staff."""
    counts = np.zeros(grid.shape, dtype=int)
    for c in contributions:
        if not c.shareable:
            continue
        for d, u, hours in c.cells(grid):
            counts[d, u, hours] += 1
    return counts
