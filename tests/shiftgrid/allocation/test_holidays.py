from __future__ import annotations

from collections import Counter
from datetime import date, datetime

import pytest

from shiftgrid.allocation.holidays import (
    allocate_rest_days,
    band_peaks,
    partition_staff,
    weekend_pairs,
)
from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.patterns import ShiftPattern
from shiftgrid.staff import EmploymentType, Staff
from shiftgrid.units import Unit

# 2025-11-01 is a Saturday
CFG = Config(DAYS=14, START_DATE=datetime(2025, 11, 1))
DATES = CFG.dates()

PATTERNS = {
    p.id: p
    for p in [
        ShiftPattern("E", "Early", "Work", "07:00", "15:00", 8),
        ShiftPattern("N", "Night", "Work", "21:00", "07:00", 10, is_night_shift=True),
        ShiftPattern("OFF", "Rest", "StatutoryHoliday"),
        ShiftPattern("PL", "Leave", "PaidLeave"),
    ]
}


def make_units(level: float = 0.0) -> list[Unit]:
    return [Unit("A", "A", [level] * 24)]


def make_staff(sid: str, *pattern_ids: str, employment=EmploymentType.FULL_TIME) -> Staff:
    return Staff(id=sid, name=sid, employment=employment, pattern_ids=list(pattern_ids))


def rest_dates(assignments, staff_id: str) -> list[date]:
    return sorted(
        a.date
        for a in assignments
        if a.staff_id == staff_id and PATTERNS[a.pattern_id].is_rest_day
    )


def allocate(assignments, staff, units=None, required=None, **kwargs):
    return allocate_rest_days(
        assignments,
        staff,
        units or make_units(),
        PATTERNS,
        required or {},
        DATES,
        cfg=CFG,
        **kwargs,
    )


def test_partition_staff_by_band():
    staff = [
        make_staff("n1", "E", "N"),
        make_staff("d1", "E"),
        make_staff("p1", "E", employment=EmploymentType.PART_TIME),
        make_staff("r1", "E", employment=EmploymentType.RENTAL),
        make_staff("n2", "N"),
    ]
    groups = partition_staff(staff, PATTERNS)
    assert [s.id for s in groups.night] == ["n1", "n2"]
    assert [s.id for s in groups.day] == ["d1"]
    assert [s.id for s in groups.part_time] == ["p1", "r1"]


def test_band_peaks_split_by_night_band():
    demand = [1.0] * 7 + [3.0] * 9 + [2.0] * 8
    peak_night, peak_day = band_peaks([Unit("A", "A", demand), Unit("B", "B")], CFG)
    assert peak_night == 2.0
    assert peak_day == 3.0


def test_weekend_pairs_include_sunday_monday():
    pairs = weekend_pairs(DATES)
    assert pairs[:2] == [
        (date(2025, 11, 1), date(2025, 11, 2)),
        (date(2025, 11, 2), date(2025, 11, 3)),
    ]
    assert len(pairs) == 4


def test_full_time_default_requirement_uses_weekend_pairs():
    res = allocate([], [make_staff("d1", "E")])
    assert rest_dates(res.assignments, "d1") == [
        date(2025, 11, 1),
        date(2025, 11, 2),
        date(2025, 11, 8),
        date(2025, 11, 9),
    ]
    assert len(res.added) == 4
    assert res.warnings == []


def test_exact_count_without_duplicate_dates():
    staff = [make_staff(f"d{i}", "E") for i in range(3)]
    res = allocate([], staff, required={"d0": 3, "d1": 5, "d2": 1})
    for s, want in (("d0", 3), ("d1", 5), ("d2", 1)):
        got = rest_dates(res.assignments, s)
        assert len(got) == want
        assert len(set(got)) == want


def test_band_capacity_is_never_exceeded():
    staff = [make_staff("d1", "E"), make_staff("d2", "E")]
    # two day-only staff, peak day demand 1 -> one rest slot per date
    res = allocate([], staff, units=make_units(1.0), required={"d1": 2, "d2": 2})
    per_day = Counter(a.date for a in res.added)
    assert max(per_day.values()) == 1
    assert rest_dates(res.assignments, "d1") == [date(2025, 11, 1), date(2025, 11, 2)]
    assert rest_dates(res.assignments, "d2") == [date(2025, 11, 8), date(2025, 11, 9)]


def test_shortfall_warning_when_band_has_no_capacity():
    staff = [make_staff("d1", "E"), make_staff("d2", "E")]
    res = allocate([], staff, units=make_units(2.0), required={"d1": 2, "d2": 1})
    assert res.added == []
    kinds = [(w.kind, w.staff_id, w.shortfall) for w in res.warnings]
    assert kinds == [("rest_shortfall", "d1", 2.0), ("rest_shortfall", "d2", 1.0)]


def test_unlocked_rest_days_are_replaced_locked_ones_kept():
    existing = [
        Assignment(date(2025, 11, 5), "d1", "OFF"),
        Assignment(date(2025, 11, 6), "d1", "OFF", locked=True),
        Assignment(date(2025, 11, 3), "d1", "E", unit_id="A"),
    ]
    res = allocate(existing, [make_staff("d1", "E")], required={"d1": 2})
    assert rest_dates(res.assignments, "d1") == [date(2025, 11, 6), date(2025, 11, 8)]
    assert existing[1] in res.assignments
    assert existing[2] in res.assignments
    assert existing[0] not in res.assignments


def test_busy_dates_are_skipped():
    existing = [Assignment(date(2025, 11, 1), "d1", "PL")]
    res = allocate(existing, [make_staff("d1", "E")], required={"d1": 2})
    got = rest_dates(res.assignments, "d1")
    assert date(2025, 11, 1) not in got
    assert got == [date(2025, 11, 2), date(2025, 11, 3)]


def test_part_time_prefers_weekdays_and_ignores_capacity():
    pt = make_staff("p1", "E", employment=EmploymentType.PART_TIME)
    res = allocate([], [pt], units=make_units(5.0), required={"p1": 1})
    assert rest_dates(res.assignments, "p1") == [date(2025, 11, 10)]
    assert res.warnings == []


def test_night_band_is_served_before_day_band():
    staff = [make_staff("d1", "E"), make_staff("n1", "N")]
    res = allocate([], staff, required={"d1": 1, "n1": 1})
    assert [a.staff_id for a in res.added] == ["n1", "d1"]


def test_missing_rest_pattern_raises():
    with pytest.raises(ValueError, match="rest-day pattern"):
        allocate_rest_days(
            [],
            [make_staff("d1", "E")],
            make_units(),
            {"E": PATTERNS["E"]},
            {},
            DATES,
            cfg=CFG,
        )


def test_empty_period_reports_every_shortfall():
    staff = [
        make_staff("d1", "E"),
        make_staff("p1", "E", employment=EmploymentType.PART_TIME),
    ]
    res = allocate_rest_days(
        [], staff, make_units(), PATTERNS, {"d1": 2, "p1": 1}, [], cfg=CFG
    )
    assert res.added == []
    kinds = [(w.kind, w.staff_id, w.shortfall) for w in res.warnings]
    assert kinds == [("rest_shortfall", "d1", 2.0), ("rest_shortfall", "p1", 1.0)]
    assert "no dates" in res.warnings[0].message


def test_empty_period_without_requirement_is_silent():
    res = allocate_rest_days(
        [], [make_staff("d1", "E")], make_units(), PATTERNS, {"d1": 0}, [], cfg=CFG
    )
    assert res.warnings == []
