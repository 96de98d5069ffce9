# src/shiftgrid/generate/scenario.py
from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from shiftgrid.assignments import Assignment
from shiftgrid.generate.staff_names import FIRST_NAMES
from shiftgrid.patterns import CrossUnitKind, ShiftPattern, WorkType
from shiftgrid.staff import EmploymentType, Staff, StaffStatus
from shiftgrid.units import Unit

DEFAULT_SCENARIO_JSON = Path(__file__).resolve().parents[2] / "example_scenario.json"

Scenario = Tuple[list[Unit], list[ShiftPattern], list[Staff]]

FLEX_OVERRIDE: Tuple[Optional[str], Optional[str]] = ("10:00", "16:00")


# ----------------------------
# Configuration container
# ----------------------------
@dataclass(slots=True)
class ScenarioGenConfig:
    """
    Configuration for generation of a synthetic ward/unit scenario.
    """

    n_units: int = 3

    # Headcount per employment type
    n_full_time: int = 24
    n_part_time: int = 4
    n_rental: int = 6

    # Proportion of full-time staff eligible for the night pattern
    night_capable_pct: float = 0.40

    # Demand levels drawn per unit (multiples of 0.5)
    day_levels: Tuple[float, ...] = (2.0, 2.5, 3.0)
    night_levels: Tuple[float, ...] = (1.0, 1.5)

    # Base roster: per-weekday probability a full-time/part-time member works
    full_time_work_rate: float = 0.85
    part_time_work_rate: float = 0.50

    # RNG seed
    seed: Optional[int] = 7

    def validate(self) -> None:
        if self.n_units <= 0:
            raise ValueError("n_units must be > 0.")
        for attr in ("n_full_time", "n_part_time", "n_rental"):
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be >= 0.")
        if self.n_full_time + self.n_part_time + self.n_rental > len(FIRST_NAMES):
            raise ValueError(
                f"Not enough FIRST_NAMES ({len(FIRST_NAMES)}) for the requested staff."
            )
        if not (0.0 <= self.night_capable_pct <= 1.0):
            raise ValueError("night_capable_pct must be in [0,1].")
        for levels in (self.day_levels, self.night_levels):
            if not levels:
                raise ValueError("day_levels and night_levels must not be empty.")
            if any(v < 0 or v * 2 != int(v * 2) for v in levels):
                raise ValueError("Demand levels must be non-negative multiples of 0.5.")
        for x in (self.full_time_work_rate, self.part_time_work_rate):
            if not (0.0 <= x <= 1.0):
                raise ValueError("work rates must be in [0,1].")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError("seed must be an int or None.")


# ----------------------------
# Generation helpers
# ----------------------------
def _rng(seed: Optional[int]) -> np.random.Generator:
    return np.random.default_rng(seed) if seed is not None else np.random.default_rng()


def _unit_demand(day_level: float, night_level: float) -> list[float]:
    """Night level overnight, a half-step ramp at 07-08, day level 09-16, evening bump."""
    demand: list[float] = []
    for h in range(24):
        if 9 <= h < 17:
            demand.append(day_level)
        elif 7 <= h < 9:
            demand.append(max(day_level - 0.5, 0.0))
        elif 17 <= h < 22:
            demand.append(night_level + 0.5)
        else:
            demand.append(night_level)
    return demand


def default_patterns() -> list[ShiftPattern]:
    W, CU = WorkType, CrossUnitKind
    return [
        ShiftPattern("E", "Early", W.WORK, "07:00", "16:00", 9, "Day", CU.SHAREABLE),
        ShiftPattern("D", "Day", W.WORK, "09:00", "18:00", 9, "Day"),
        ShiftPattern("L", "Late", W.WORK, "13:00", "22:00", 9, "Day", CU.SHAREABLE),
        ShiftPattern(
            "N", "Night", W.WORK, "16:00", "09:00", 17, "Night", is_night_shift=True
        ),
        ShiftPattern("PT", "Part", W.WORK, "09:00", "15:00", 6, "Part"),
        ShiftPattern("FX", "Flex", W.WORK, "07:00", "22:00", 6, "Part", is_flex=True),
        ShiftPattern("R4", "Rental 4h", W.WORK, "09:00", "13:00", 4, "Rental", CU.SUPPORT_ONLY),
        ShiftPattern("R6", "Rental 6h", W.WORK, "12:00", "18:00", 6, "Rental", CU.SUPPORT_ONLY),
        ShiftPattern("R8", "Rental 8h", W.WORK, "08:00", "16:00", 8, "Rental"),
        ShiftPattern("RE", "Rental eve", W.WORK, "16:00", "22:00", 6, "Rental", CU.SUPPORT_ONLY),
        ShiftPattern("OFF", "Rest day", W.STATUTORY_HOLIDAY, category="Leave"),
        ShiftPattern("PL", "Paid leave", W.PAID_LEAVE, category="Leave"),
        ShiftPattern("MTG", "Meeting", W.MEETING, "13:00", "15:00", 2, "Other"),
    ]


# ----------------------------
# Core API
# ----------------------------
def create_scenario(cfg: ScenarioGenConfig) -> Scenario:
    cfg.validate()
    g = _rng(cfg.seed)
    patterns = default_patterns()

    units: list[Unit] = []
    for i in range(cfg.n_units):
        day_level = float(g.choice(cfg.day_levels))
        night_level = float(g.choice(cfg.night_levels))
        units.append(
            Unit(
                id=f"U{i + 1}",
                name=f"Unit {chr(ord('A') + i)}",
                demand=_unit_demand(day_level, night_level),
            )
        )

    night_flags = g.random(cfg.n_full_time) < cfg.night_capable_pct

    staff: list[Staff] = []
    idx = 0
    for i in range(cfg.n_full_time):
        pattern_ids = ["E", "D", "L"] + (["N"] if night_flags[i] else [])
        staff.append(
            Staff(
                id=f"S{idx:03d}",
                name=str(FIRST_NAMES[idx]),
                employment=EmploymentType.FULL_TIME,
                pattern_ids=pattern_ids,
                unit_id=units[i % len(units)].id,
                max_consec_days=5,
                min_rest_hours=11,
            )
        )
        idx += 1
    for i in range(cfg.n_part_time):
        staff.append(
            Staff(
                id=f"S{idx:03d}",
                name=str(FIRST_NAMES[idx]),
                employment=EmploymentType.PART_TIME,
                pattern_ids=["PT", "FX"],
                unit_id=units[i % len(units)].id,
                workable_ranges=[("08:00", "16:00")],
            )
        )
        idx += 1
    for _ in range(cfg.n_rental):
        staff.append(
            Staff(
                id=f"S{idx:03d}",
                name=str(FIRST_NAMES[idx]),
                employment=EmploymentType.RENTAL,
                pattern_ids=["R4", "R6", "R8", "RE"],
            )
        )
        idx += 1
    return units, patterns, staff


def create_base_roster(
    staff: Sequence[Staff],
    patterns: Sequence[ShiftPattern],
    dates: Sequence[date],
    cfg: ScenarioGenConfig,
) -> list[Assignment]:
    """
    Random weekday work assignments for regular staff on their home unit.
    Weekends and rental staff are left open for the allocators.
    """
    g = _rng(cfg.seed)
    by_id = {p.id: p for p in patterns}
    out: list[Assignment] = []
    for s in staff:
        if s.is_rental or s.unit_id is None:
            continue
        work_ids = [pid for pid in s.pattern_ids if pid in by_id and by_id[pid].is_work]
        if not work_ids:
            continue
        rate = cfg.full_time_work_rate if s.is_full_time else cfg.part_time_work_rate
        previous_night = False
        for d in dates:
            if d.weekday() >= 5 or previous_night or g.random() >= rate:
                previous_night = False
                continue
            pid = str(g.choice(work_ids))
            p = by_id[pid]
            # Flex frames are only worked in part
            override = FLEX_OVERRIDE if p.is_flex else (None, None)
            out.append(
                Assignment(
                    date=d,
                    staff_id=s.id,
                    pattern_id=pid,
                    unit_id=s.unit_id,
                    override_start=override[0],
                    override_end=override[1],
                )
            )
            previous_night = p.crosses_midnight
    return out


# ----------------------------
# Convenience utilities
# ----------------------------
def staff_summary(staff: list[Staff]) -> dict:
    n = len(staff)
    kinds = Counter(s.employment.value for s in staff)
    on_leave = sum(s.status is StaffStatus.ON_LEAVE for s in staff)
    night = sum("N" in s.pattern_ids for s in staff)
    return {
        "N": n,
        "employment": kinds,
        "night_pct": night / n if n else 0.0,
        "on_leave_pct": on_leave / n if n else 0.0,
    }


def staff_to_dataframe(staff: list[Staff]) -> pd.DataFrame:
    rows = []
    for s in staff:
        rows.append(
            {
                "id": s.id,
                "name": s.name,
                "employment": s.employment.value,
                "status": s.status.value,
                "unit_id": s.unit_id,
                "pattern_ids": s.pattern_ids[:],
                "workable_ranges": [f"{r.start}-{r.end}" for r in s.workable_ranges],
                "max_consec_days": (
                    s.max_consec_days if s.max_consec_days is not None else np.nan
                ),
                "min_rest_hours": (
                    s.min_rest_hours if s.min_rest_hours is not None else np.nan
                ),
            }
        )
    return pd.DataFrame(rows)


def scenario_from_json(
    path: str | Path | None = None,
) -> tuple[list[Unit], list[ShiftPattern], list[Staff], list[Assignment], dict[str, int]]:
    """
    Load units, patterns, staff, assignments and rest-day requirements from JSON.

    If `path` is omitted, the loader reads from `src/example_scenario.json`. The
    file must be an object with `units`, `patterns` and `staff` arrays; the
    `assignments` array and `rest_requirements` object are optional.
    """

    file_path = Path(path) if path is not None else DEFAULT_SCENARIO_JSON
    file_path = file_path.expanduser()

    if file_path.suffix.lower() != ".json":
        raise ValueError("scenario_from_json expects a path to a .json file.")
    if not file_path.exists():
        raise FileNotFoundError(f"Scenario JSON file not found: {file_path}")

    try:
        data = json.loads(file_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {file_path}") from exc

    if not isinstance(data, Mapping):
        raise TypeError("Scenario JSON must be an object with units/patterns/staff.")

    units = [_unit_from(raw) for raw in _entries(data, "units", required=True)]
    patterns = [_pattern_from(raw) for raw in _entries(data, "patterns", required=True)]
    staff = [_staff_from(raw) for raw in _entries(data, "staff", required=True)]
    assignments = [_assignment_from(raw) for raw in _entries(data, "assignments")]

    raw_req = data.get("rest_requirements") or {}
    if not isinstance(raw_req, Mapping):
        raise TypeError("'rest_requirements' must map staff ids to integers.")
    rest_requirements = {
        str(k): _to_int(v, f"rest_requirements[{k}]") for k, v in raw_req.items()
    }
    return units, patterns, staff, assignments, rest_requirements


def _entries(data: Mapping[str, Any], key: str, required: bool = False) -> list:
    entries = data.get(key)
    if entries is None:
        if required:
            raise ValueError(f"Scenario JSON must contain a '{key}' array.")
        return []
    if isinstance(entries, (str, bytes, bytearray)) or not isinstance(
        entries, Sequence
    ):
        raise TypeError(f"'{key}' must be a list of objects.")
    for raw in entries:
        if not isinstance(raw, Mapping):
            raise TypeError(f"Each '{key}' entry must be an object/dict.")
    return list(entries)


def _unit_from(raw: Mapping[str, Any]) -> Unit:
    return Unit(
        id=_require_str(raw, "id"),
        name=str(raw.get("name", raw["id"])),
        demand=list(raw.get("demand") or [0.0] * 24),
    )


def _pattern_from(raw: Mapping[str, Any]) -> ShiftPattern:
    try:
        return ShiftPattern(
            id=_require_str(raw, "id"),
            name=str(raw.get("name", raw["id"])),
            work_type=WorkType(raw.get("work_type", "Work")),
            start=raw.get("start", "00:00"),
            end=raw.get("end", "00:00"),
            duration_hours=float(raw.get("duration_hours", 0.0)),
            category=str(raw.get("category", "")),
            cross_unit=CrossUnitKind(raw.get("cross_unit", "none")),
            break_minutes=_to_int(raw.get("break_minutes", 0), "break_minutes"),
            is_night_shift=bool(raw.get("is_night_shift", False)),
            is_flex=bool(raw.get("is_flex", False)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid pattern entry {raw.get('id')!r}: {exc}") from exc


def _staff_from(raw: Mapping[str, Any]) -> Staff:
    max_consec_raw = raw.get("max_consec_days")
    min_rest_raw = raw.get("min_rest_hours")
    try:
        return Staff(
            id=_require_str(raw, "id"),
            name=str(raw.get("name", "")),
            employment=EmploymentType(raw.get("employment", "FullTime")),
            pattern_ids=_listify(raw.get("pattern_ids")),
            unit_id=raw.get("unit_id"),
            status=StaffStatus(raw.get("status", "Active")),
            workable_ranges=list(raw.get("workable_ranges") or []),
            max_consec_days=(
                None
                if max_consec_raw in (None, "", "null")
                else _to_int(max_consec_raw, "max_consec_days")
            ),
            min_rest_hours=(
                None if min_rest_raw in (None, "", "null") else float(min_rest_raw)
            ),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid staff entry {raw.get('id')!r}: {exc}") from exc


def _assignment_from(raw: Mapping[str, Any]) -> Assignment:
    try:
        return Assignment(
            date=_require_str(raw, "date"),
            staff_id=_require_str(raw, "staff_id"),
            pattern_id=_require_str(raw, "pattern_id"),
            unit_id=raw.get("unit_id"),
            locked=bool(raw.get("locked", False)),
            override_start=raw.get("override_start"),
            override_end=raw.get("override_end"),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid assignment entry {dict(raw)!r}: {exc}") from exc


def _listify(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in list(value)]


def _require_str(raw: Mapping[str, Any], field: str) -> str:
    value = raw.get(field)
    if value is None or value == "":
        raise ValueError(f"Entry missing '{field}'.")
    return str(value)


def _to_int(value: Any, field: str) -> int:
    if value is None:
        raise ValueError(f"Entry missing '{field}'.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid integer for '{field}': {value!r}") from exc
