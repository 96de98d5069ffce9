from __future__ import annotations

import json
from datetime import date, timedelta

import pytest

from shiftgrid.generate.scenario import (
    FLEX_OVERRIDE,
    ScenarioGenConfig,
    create_base_roster,
    create_scenario,
    default_patterns,
    scenario_from_json,
    staff_summary,
    staff_to_dataframe,
)
from shiftgrid.staff import EmploymentType, StaffStatus, is_within_contract

# Monday 2025-11-03 .. Sunday 2025-11-16
DATES = [date(2025, 11, 3) + timedelta(days=i) for i in range(14)]


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"n_units": 0}, "n_units"),
        ({"n_rental": -1}, "n_rental"),
        ({"n_full_time": 500}, "FIRST_NAMES"),
        ({"night_capable_pct": 1.5}, "night_capable_pct"),
        ({"day_levels": ()}, "must not be empty"),
        ({"night_levels": (0.3,)}, "multiples of 0.5"),
        ({"part_time_work_rate": -0.1}, "work rates"),
    ],
)
def test_scenario_config_validation(kwargs, match):
    with pytest.raises(ValueError, match=match):
        ScenarioGenConfig(**kwargs).validate()


def test_create_scenario_shapes_and_roles():
    cfg = ScenarioGenConfig(n_units=2, n_full_time=6, n_part_time=2, n_rental=3, seed=1)
    units, patterns, staff = create_scenario(cfg)

    assert [u.id for u in units] == ["U1", "U2"]
    assert all(len(u.demand) == 24 for u in units)
    assert len(staff) == 11
    assert len({s.id for s in staff}) == 11

    kinds = [s.employment for s in staff]
    assert kinds.count(EmploymentType.FULL_TIME) == 6
    assert kinds.count(EmploymentType.RENTAL) == 3
    rentals = [s for s in staff if s.is_rental]
    assert all(s.unit_id is None for s in rentals)
    known = {p.id for p in patterns}
    assert all(set(s.pattern_ids) <= known for s in staff)


def test_create_scenario_is_deterministic_for_a_seed():
    a = create_scenario(ScenarioGenConfig(seed=3))
    b = create_scenario(ScenarioGenConfig(seed=3))
    assert [u.demand for u in a[0]] == [u.demand for u in b[0]]
    assert [s.pattern_ids for s in a[2]] == [s.pattern_ids for s in b[2]]


def test_default_patterns_have_one_rest_day_pattern():
    patterns = default_patterns()
    assert len({p.id for p in patterns}) == len(patterns)
    assert [p.id for p in patterns if p.is_rest_day] == ["OFF"]
    night = next(p for p in patterns if p.id == "N")
    assert night.crosses_midnight and night.is_night_shift


def test_base_roster_rules():
    cfg = ScenarioGenConfig(seed=5, full_time_work_rate=1.0, part_time_work_rate=1.0)
    units, patterns, staff = create_scenario(cfg)
    roster = create_base_roster(staff, patterns, DATES, cfg)
    by_id = {p.id: p for p in patterns}
    staff_by_id = {s.id: s for s in staff}

    assert roster
    assert all(a.date.weekday() < 5 for a in roster)
    assert all(not staff_by_id[a.staff_id].is_rental for a in roster)
    assert all(a.unit_id == staff_by_id[a.staff_id].unit_id for a in roster)

    # one assignment per staff and date, and no work the day after a night
    seen = {(a.staff_id, a.date) for a in roster}
    assert len(seen) == len(roster)
    for a in roster:
        if by_id[a.pattern_id].crosses_midnight:
            assert (a.staff_id, a.date + timedelta(days=1)) not in seen

    for a in roster:
        p = by_id[a.pattern_id]
        if p.is_flex:
            assert (a.override_start, a.override_end) == FLEX_OVERRIDE
            s = staff_by_id[a.staff_id]
            assert is_within_contract(s, a.override_start, a.override_end)


def test_staff_summary_and_dataframe():
    _, _, staff = create_scenario(ScenarioGenConfig(n_full_time=4, n_part_time=1, n_rental=1))
    summary = staff_summary(staff)
    assert summary["N"] == 6
    assert summary["employment"]["Rental"] == 1
    assert summary["on_leave_pct"] == 0.0
    df = staff_to_dataframe(staff)
    assert len(df) == 6
    pt = df[df["employment"] == "PartTime"].iloc[0]
    assert pt["workable_ranges"] == ["08:00-16:00"]
    assert staff_summary([])["night_pct"] == 0.0


def test_scenario_from_json_reads_example(example_scenario):
    units, patterns, staff, assignments, rest = scenario_from_json(
        example_scenario
    )
    assert [u.id for u in units] == ["W1", "W2"]
    assert {p.id for p in patterns} >= {"E", "N", "OFF", "PL"}
    greta = next(s for s in staff if s.id == "B03")
    assert greta.status is StaffStatus.ON_LEAVE
    hana = next(s for s in staff if s.id == "P01")
    assert [str(r) for r in hana.workable_ranges] == ["09:00-15:00"]
    locked = [a for a in assignments if a.locked]
    assert [(a.staff_id, a.pattern_id) for a in locked] == [("A03", "OFF")]
    assert rest == {"A01": 4, "B01": 3}


def _write(tmp_path, payload, name="s.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return path


MINIMAL = {
    "units": [{"id": "A", "demand": [1] * 24}],
    "patterns": [{"id": "E", "start": "07:00", "end": "15:00", "duration_hours": 8}],
    "staff": [{"id": "s1", "name": "Ana", "pattern_ids": "E"}],
}


def test_scenario_from_json_minimal(tmp_path):
    units, patterns, staff, assignments, rest = scenario_from_json(_write(tmp_path, MINIMAL))
    assert units[0].name == "A"
    assert patterns[0].is_work
    assert staff[0].pattern_ids == ["E"]
    assert assignments == [] and rest == {}


@pytest.mark.parametrize(
    "payload, exc, match",
    [
        ("not json", ValueError, "Invalid JSON"),
        ([1, 2], TypeError, "must be an object"),
        ({"units": [], "patterns": []}, ValueError, "'staff' array"),
        ({**MINIMAL, "staff": "s1"}, TypeError, "list of objects"),
        ({**MINIMAL, "staff": [1]}, TypeError, "object/dict"),
        ({**MINIMAL, "staff": [{"name": "x"}]}, ValueError, "Invalid staff entry"),
        ({**MINIMAL, "staff": [{"id": "s", "employment": "Intern"}]}, ValueError, "Invalid staff"),
        ({**MINIMAL, "patterns": [{"id": "E", "work_type": "Nap"}]}, ValueError, "Invalid pattern"),
        ({**MINIMAL, "assignments": [{"staff_id": "s1"}]}, ValueError, "Invalid assignment"),
        ({**MINIMAL, "rest_requirements": [1]}, TypeError, "rest_requirements"),
        ({**MINIMAL, "rest_requirements": {"s1": "x"}}, ValueError, "Invalid integer"),
    ],
)
def test_scenario_from_json_errors(tmp_path, payload, exc, match):
    with pytest.raises(exc, match=match):
        scenario_from_json(_write(tmp_path, payload))


def test_scenario_from_json_path_checks(tmp_path):
    with pytest.raises(ValueError, match=".json"):
        scenario_from_json(tmp_path / "scenario.txt")
    with pytest.raises(FileNotFoundError):
        scenario_from_json(tmp_path / "missing.json")
