from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class CoverageMetrics:
    """Key coverage metrics summarising required vs actual headcount-hours."""

    required_hours: float
    actual_hours: float
    deficit_hours: float
    surplus_hours: float
    deficit_cells: int
    surplus_cells: int
    satisfied_cells: int
    redistributed_cells: int


@dataclass(frozen=True)
class SlotGap:
    """Gap record for a single (date, unit, hour)."""

    date: date
    unit_id: str
    hour: int
    required: float
    actual: float
    deficit: float  # max(required - actual, 0)
    redistributed: bool


@dataclass(frozen=True)
class StaffBurden:
    """Per-staff workload over the period."""

    staff_id: str
    name: str
    employment: str
    assignment_count: int
    night_shift_count: int
    total_hours: float
    weekend_count: int
    rest_day_count: int
    required_rest_days: int
    max_hours: float


@dataclass(frozen=True)
class UnitGroupRow:
    """One bar of a unit's daily Gantt chart."""

    staff_id: str
    staff_name: str
    pattern_id: str
    is_support: bool
    start_hour: int
    duration: float
    unit_id: str | None


@dataclass
class UnitGroup:
    unit_id: str
    unit_name: str
    rows: list[UnitGroupRow] = field(default_factory=list)
