from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config, is_weekend
from shiftgrid.patterns import ShiftPattern, WorkType
from shiftgrid.staff import Staff

from .data_models import StaffBurden


def compute_staff_burden(
    staff: Sequence[Staff],
    assignments: Sequence[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    required_rest_days: Mapping[str, int],
    cfg: Config,
) -> list[StaffBurden]:
    """
    Work days, night shifts, nominal hours, weekend work and rest days per active
    staff member. Assignments with unknown staff or pattern ids are skipped.
    """
    default_req = cfg.default_rest_days()
    counts: dict[str, dict[str, float]] = {
        s.id: {"work": 0, "night": 0, "hours": 0.0, "weekend": 0, "rest": 0}
        for s in staff
        if s.is_active
    }
    for a in assignments:
        c = counts.get(a.staff_id)
        p = pattern_by_id.get(a.pattern_id)
        if c is None or p is None:
            continue
        if p.is_work:
            c["work"] += 1
            c["hours"] += p.duration_hours
            if p.is_night_shift:
                c["night"] += 1
            if is_weekend(a.date):
                c["weekend"] += 1
        elif p.work_type is WorkType.STATUTORY_HOLIDAY:
            c["rest"] += 1

    out: list[StaffBurden] = []
    for s in staff:
        if s.id not in counts:
            continue
        c = counts[s.id]
        consec = s.max_consec_days or cfg.DEFAULT_MAX_CONSEC_DAYS
        out.append(
            StaffBurden(
                staff_id=s.id,
                name=s.name,
                employment=s.employment.value,
                assignment_count=int(c["work"]),
                night_shift_count=int(c["night"]),
                total_hours=float(c["hours"]),
                weekend_count=int(c["weekend"]),
                rest_day_count=int(c["rest"]),
                required_rest_days=int(required_rest_days.get(s.id, default_req)),
                max_hours=float(consec * cfg.BURDEN_HOURS_PER_DAY * cfg.BURDEN_WEEKS),
            )
        )
    return out


def burden_to_dataframe(rows: Sequence[StaffBurden]) -> pd.DataFrame:
    columns = list(StaffBurden.__dataclass_fields__)
    df = pd.DataFrame([r.__dict__ for r in rows], columns=columns)
    df["over_max_hours"] = df["total_hours"] > df["max_hours"]
    df["rest_short"] = df["rest_day_count"] < df["required_rest_days"]
    return df
