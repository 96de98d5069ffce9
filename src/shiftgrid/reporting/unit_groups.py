from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping, Sequence

from shiftgrid.assignments import Assignment
from shiftgrid.patterns import CrossUnitKind, ShiftPattern
from shiftgrid.staff import Staff
from shiftgrid.units import Unit

from .data_models import UnitGroup, UnitGroupRow

SUPPORT_DEMAND = 0.5


def compute_unit_groups(
    day: date,
    units: Sequence[Unit],
    assignments: Sequence[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Mapping[str, Staff],
) -> list[UnitGroup]:
    """
    Gantt rows per unit for one date.

    Rows come from work assignments on `day` plus midnight-crossing ones from the
    day before (drawn from hour 0). Staff from another unit are listed as support
    when their pattern can cross units and this unit's demand at the check hour
    (the start hour, or 0 for carried-over shifts) is exactly half a person.
    """
    prev = day - timedelta(days=1)
    groups: list[UnitGroup] = []
    for unit in units:
        rows: list[UnitGroupRow] = []
        for a in assignments:
            if a.date != day and a.date != prev:
                continue
            p = pattern_by_id.get(a.pattern_id)
            if p is None or not p.is_work:
                continue
            if a.date == prev and not p.crosses_midnight:
                continue
            s = staff_by_id.get(a.staff_id)
            if s is None or not s.is_active:
                continue

            start_h = p.start.hour
            end_h = p.end_hour
            display_start, duration = start_h, float(end_h - start_h)
            if p.crosses_midnight:
                if a.date == day:
                    duration = float(24 - start_h)
                else:
                    display_start, duration = 0, float(end_h)

            check_hour = start_h if a.date == day else 0
            cross_unit = p.cross_unit is not CrossUnitKind.NONE
            half_demand = unit.demand[check_hour] == SUPPORT_DEMAND

            if a.unit_id == unit.id:
                is_support = cross_unit and half_demand
            elif cross_unit and half_demand:
                is_support = True
            else:
                continue

            rows.append(
                UnitGroupRow(
                    staff_id=s.id,
                    staff_name=s.name,
                    pattern_id=p.id,
                    is_support=is_support,
                    start_hour=display_start,
                    duration=duration,
                    unit_id=a.unit_id,
                )
            )
        rows.sort(key=lambda r: (r.start_hour, r.staff_name))
        groups.append(UnitGroup(unit_id=unit.id, unit_name=unit.name, rows=rows))
    return groups
