from __future__ import annotations

from datetime import date, datetime

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.input_data import InputData
from shiftgrid.patterns import ShiftPattern
from shiftgrid.precheck import precheck_rest_capacity
from shiftgrid.staff import EmploymentType, Staff
from shiftgrid.units import Unit


def make_cfg() -> Config:
    # Monday..Sunday: two weekend days -> two rest days each by default
    return Config(DAYS=7, START_DATE=datetime(2025, 11, 3))


def make_data(level: float = 1.0, assignments=()) -> InputData:
    patterns = [
        ShiftPattern("E", "Early", "Work", "07:00", "15:00", 8),
        ShiftPattern("N", "Night", "Work", "21:00", "07:00", 10, is_night_shift=True),
        ShiftPattern("OFF", "Rest", "StatutoryHoliday"),
    ]
    staff = [
        Staff("n1", "N1", pattern_ids=["E", "N"]),
        Staff("n2", "N2", pattern_ids=["N"]),
        Staff("d1", "D1", pattern_ids=["E"]),
        Staff("d2", "D2", pattern_ids=["E"]),
        Staff("d3", "D3", pattern_ids=["E"]),
        Staff("p1", "P1", employment=EmploymentType.PART_TIME, pattern_ids=["E"]),
    ]
    return InputData(
        units=[Unit("A", "A", [level] * 24)],
        patterns=patterns,
        staff=staff,
        cfg=make_cfg(),
        assignments=list(assignments),
    )


def test_precheck_ok_prints_tick(capfd):
    cap, req, ok, zero_days, stats = precheck_rest_capacity(make_cfg(), make_data())
    out = capfd.readouterr().out
    assert ok is True
    # night: (2 - 1) * 7, day: (3 - 1) * 7
    assert cap == 21.0
    assert req == 10
    assert stats["night"]["slack"] == 3.0
    assert stats["part-time"]["required"] == 2
    assert zero_days["night"] == []
    assert "✅ Rest-day capacity" in out
    assert "✅ night" in out


def test_precheck_flags_band_without_slots(capfd):
    cfg = make_cfg()
    _, _, ok, zero_days, stats = precheck_rest_capacity(cfg, make_data(level=2.0))
    out = capfd.readouterr().out
    assert ok is False
    assert zero_days["night"] == cfg.dates()
    assert stats["night"]["capacity"] == 0.0
    assert stats["day"]["capacity"] == 7.0
    assert "❌ Rest-day capacity" in out
    assert "❌ night" in out
    assert "+4 more" in out


def test_locked_rest_days_use_capacity_unlocked_do_not():
    d = date(2025, 11, 4)
    data = make_data(
        assignments=[
            Assignment(d, "d1", "OFF", locked=True),
            Assignment(d, "d2", "OFF"),
        ]
    )
    *_, stats = precheck_rest_capacity(make_cfg(), data, verbose=False)
    assert stats["day"]["capacity"] == 13.0


def test_precheck_is_silent_when_not_verbose(capfd):
    precheck_rest_capacity(make_cfg(), make_data(), verbose=False)
    assert capfd.readouterr().out == ""
