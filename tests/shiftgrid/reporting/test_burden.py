from __future__ import annotations

from datetime import date, datetime

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.patterns import ShiftPattern
from shiftgrid.reporting.burden import burden_to_dataframe, compute_staff_burden
from shiftgrid.staff import EmploymentType, Staff, StaffStatus

CFG = Config(DAYS=7, START_DATE=datetime(2025, 11, 3))

PATTERNS = {
    p.id: p
    for p in [
        ShiftPattern("E", "Early", "Work", "07:00", "15:00", 8),
        ShiftPattern("N", "Night", "Work", "21:00", "07:00", 10, is_night_shift=True),
        ShiftPattern("OFF", "Rest", "StatutoryHoliday"),
        ShiftPattern("PL", "Leave", "PaidLeave"),
    ]
}

STAFF = [
    Staff("s1", "Ana", pattern_ids=["E", "N"], max_consec_days=1),
    Staff("s2", "Ben", employment=EmploymentType.PART_TIME, pattern_ids=["E"]),
    Staff("s3", "Cai", pattern_ids=["E"], status=StaffStatus.ON_LEAVE),
]


def make_assignments() -> list[Assignment]:
    return [
        Assignment(date(2025, 11, 3), "s1", "E", unit_id="A"),
        Assignment(date(2025, 11, 4), "s1", "N", unit_id="A"),
        # Saturday
        Assignment(date(2025, 11, 8), "s1", "E", unit_id="A"),
        Assignment(date(2025, 11, 9), "s1", "OFF"),
        Assignment(date(2025, 11, 5), "s1", "PL"),
        Assignment(date(2025, 11, 3), "s2", "E", unit_id="A"),
        Assignment(date(2025, 11, 3), "s3", "E", unit_id="A"),
        Assignment(date(2025, 11, 3), "ghost", "E", unit_id="A"),
        Assignment(date(2025, 11, 4), "s2", "missing", unit_id="A"),
    ]


def test_compute_staff_burden_counts():
    rows = compute_staff_burden(STAFF, make_assignments(), PATTERNS, {"s1": 3}, CFG)
    by_id = {r.staff_id: r for r in rows}
    # on-leave staff are left out
    assert set(by_id) == {"s1", "s2"}

    s1 = by_id["s1"]
    assert s1.assignment_count == 3
    assert s1.night_shift_count == 1
    assert s1.total_hours == 26.0
    assert s1.weekend_count == 1
    assert s1.rest_day_count == 1
    assert s1.required_rest_days == 3
    assert s1.max_hours == 1 * CFG.BURDEN_HOURS_PER_DAY * CFG.BURDEN_WEEKS

    s2 = by_id["s2"]
    assert s2.employment == "PartTime"
    assert s2.assignment_count == 1
    # default: weekend days in the period
    assert s2.required_rest_days == 2
    assert s2.max_hours == CFG.DEFAULT_MAX_CONSEC_DAYS * 8 * 4


def test_burden_to_dataframe_flags():
    rows = compute_staff_burden(STAFF, make_assignments(), PATTERNS, {"s1": 3}, CFG)
    df = burden_to_dataframe(rows)
    assert list(df["staff_id"]) == ["s1", "s2"]
    assert "over_max_hours" in df.columns
    s1 = df.set_index("staff_id").loc["s1"]
    assert bool(s1["over_max_hours"]) is False
    assert bool(s1["rest_short"]) is True


def test_burden_to_dataframe_empty_keeps_columns():
    df = burden_to_dataframe([])
    assert df.empty
    assert {"staff_id", "total_hours", "over_max_hours", "rest_short"} <= set(df.columns)
