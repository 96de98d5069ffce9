from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping, Sequence

from shiftgrid.assignments import Assignment
from shiftgrid.patterns import ShiftPattern
from shiftgrid.result_types import AllocationWarning
from shiftgrid.staff import Staff, is_within_contract
from shiftgrid.timegrid import TimeOfDay


def worked_window(a: Assignment, p: ShiftPattern) -> tuple[TimeOfDay, TimeOfDay]:
    """Start/end actually worked: flex overrides when present, else the nominal window."""
    if p.is_flex and a.override_start is not None and a.override_end is not None:
        return TimeOfDay.parse(a.override_start), TimeOfDay.parse(a.override_end)
    return p.start, p.end


def contract_violations(
    assignments: Sequence[Assignment],
    staff_by_id: Mapping[str, Staff],
    pattern_by_id: Mapping[str, ShiftPattern],
    default_window: tuple[str, str] = ("08:00", "20:00"),
) -> list[AllocationWarning]:
    out: list[AllocationWarning] = []
    for a in assignments:
        s = staff_by_id.get(a.staff_id)
        p = pattern_by_id.get(a.pattern_id)
        if s is None or p is None or not p.is_work:
            continue
        start, end = worked_window(a, p)
        if is_within_contract(s, start, end, default_window):
            continue
        out.append(
            AllocationWarning(
                kind="contract",
                message=(
                    f"{s.name} {a.date.isoformat()}: {start}-{end} is outside the "
                    "contracted working window."
                ),
                staff_id=s.id,
                unit_id=a.unit_id,
                date=a.date,
            )
        )
    return out


def rest_interval_violations(
    assignments: Sequence[Assignment],
    staff_by_id: Mapping[str, Staff],
    pattern_by_id: Mapping[str, ShiftPattern],
) -> list[AllocationWarning]:
    """Consecutive work assignments of one staff member closer than their min_rest_hours."""
    spans: dict[str, list[tuple[datetime, datetime]]] = {}
    for a in assignments:
        s = staff_by_id.get(a.staff_id)
        p = pattern_by_id.get(a.pattern_id)
        if s is None or p is None or not p.is_work or not s.min_rest_hours:
            continue
        start, end = worked_window(a, p)
        day0 = datetime.combine(a.date, datetime.min.time())
        t0 = day0 + timedelta(minutes=start.minutes)
        t1 = day0 + timedelta(minutes=end.minutes)
        if t1 <= t0:
            t1 += timedelta(days=1)
        spans.setdefault(s.id, []).append((t0, t1))

    out: list[AllocationWarning] = []
    for sid, items in spans.items():
        s = staff_by_id[sid]
        items.sort()
        for (_, prev_end), (next_start, _) in zip(items, items[1:]):
            rest_h = (next_start - prev_end).total_seconds() / 3600.0
            if rest_h < float(s.min_rest_hours or 0):
                out.append(
                    AllocationWarning(
                        kind="rest_interval",
                        message=(
                            f"{s.name}: {rest_h:g}h rest before "
                            f"{next_start:%Y-%m-%d %H:%M}, needs {s.min_rest_hours:g}h."
                        ),
                        staff_id=s.id,
                        date=next_start.date(),
                        shortfall=float(s.min_rest_hours or 0) - rest_h,
                    )
                )
    return out
