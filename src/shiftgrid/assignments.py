from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional

from shiftgrid.patterns import ShiftPattern
from shiftgrid.timegrid import Window


def _normalize_date(val: Any) -> date:
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        return date.fromisoformat(val)
    raise TypeError("Assignment dates must be datetime.date, datetime or ISO strings.")


@dataclass(slots=True)
class Assignment:
    """
    One staff member on one pattern for one date.

    `unit_id` is None for non-working patterns. Override times only matter for
    flex patterns and describe the window actually worked inside the frame.
    """

    date: date
    staff_id: str
    pattern_id: str
    unit_id: Optional[str] = None
    locked: bool = False
    override_start: Optional[str] = None
    override_end: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.date = _normalize_date(self.date)

    def window(self, pattern: ShiftPattern) -> Window:
        return pattern.window(self.override_start, self.override_end)

    def with_changes(self, **changes: Any) -> Assignment:
        return replace(self, **changes)
