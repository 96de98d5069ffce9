# src/shiftgrid/grid.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Literal, Sequence

import numpy as np
import pandas as pd

CellStatus = Literal["deficit", "satisfied", "surplus"]

DEFICIT, SATISFIED, SURPLUS = -1, 0, 1
_STATUS_NAMES: dict[int, CellStatus] = {
    DEFICIT: "deficit",
    SATISFIED: "satisfied",
    SURPLUS: "surplus",
}


@dataclass(frozen=True)
class CoverageCell:
    date: date
    unit_id: str
    hour: int
    required: float
    actual: float

    @property
    def status(self) -> CellStatus:
        return classify(self.required, self.actual)


def classify(required: float, actual: float) -> CellStatus:
    if actual < required:
        return "deficit"
    if actual > required:
        return "surplus"
    return "satisfied"


@dataclass
class CoverageGrid:
    """
    Dense (day, unit, hour) coverage arrays for a bounded period.

    `required` and `actual` have shape (len(dates), len(unit_ids), 24).
    `redistributed` marks cells whose `actual` was changed by cross-unit passes.
    """

    dates: list[date]
    unit_ids: list[str]
    required: np.ndarray = field(repr=False)
    actual: np.ndarray = field(repr=False)
    redistributed: np.ndarray = field(repr=False)

    @classmethod
    def empty(cls, dates: Sequence[date], unit_ids: Sequence[str]) -> CoverageGrid:
        shape = (len(dates), len(unit_ids), 24)
        return cls(
            dates=list(dates),
            unit_ids=list(unit_ids),
            required=np.zeros(shape, dtype=float),
            actual=np.zeros(shape, dtype=float),
            redistributed=np.zeros(shape, dtype=bool),
        )

    def __post_init__(self) -> None:
        self._day_index = {d: i for i, d in enumerate(self.dates)}
        self._unit_index = {u: i for i, u in enumerate(self.unit_ids)}
        expected = (len(self.dates), len(self.unit_ids), 24)
        for name in ("required", "actual", "redistributed"):
            arr = getattr(self, name)
            if arr.shape != expected:
                raise ValueError(f"{name} has shape {arr.shape}; expected {expected}.")

    @property
    def shape(self) -> tuple[int, int, int]:
        return (len(self.dates), len(self.unit_ids), 24)

    @property
    def start(self) -> date:
        return self.dates[0]

    def day_index(self, day: date) -> int | None:
        return self._day_index.get(day)

    def unit_index(self, unit_id: str | None) -> int | None:
        if unit_id is None:
            return None
        return self._unit_index.get(unit_id)

    def day_offset(self, day: date) -> int | None:
        """Offset from the first date; may fall outside the grid. None for an empty period."""
        if not self.dates:
            return None
        return (day - self.dates[0]).days

    def cell(self, day: date, unit_id: str, hour: int) -> CoverageCell:
        d = self._day_index[day]
        u = self._unit_index[unit_id]
        return CoverageCell(
            date=day,
            unit_id=unit_id,
            hour=hour,
            required=float(self.required[d, u, hour]),
            actual=float(self.actual[d, u, hour]),
        )

    def deficit(self) -> np.ndarray:
        return np.maximum(self.required - self.actual, 0.0)

    def status_codes(self) -> np.ndarray:
        """-1 deficit, 0 satisfied, 1 surplus for every cell."""
        return np.sign(self.actual - self.required).astype(int)

    def status(self, day: date, unit_id: str, hour: int) -> CellStatus:
        return self.cell(day, unit_id, hour).status

    def copy(self) -> CoverageGrid:
        return CoverageGrid(
            dates=list(self.dates),
            unit_ids=list(self.unit_ids),
            required=self.required.copy(),
            actual=self.actual.copy(),
            redistributed=self.redistributed.copy(),
        )

    def to_frame(self) -> pd.DataFrame:
        """Long frame: one row per (date, unit_id, hour)."""
        D, U, H = self.shape
        idx = pd.MultiIndex.from_product(
            [pd.to_datetime(self.dates), self.unit_ids, range(H)],
            names=["date", "unit_id", "hour"],
        )
        codes = self.status_codes().reshape(-1)
        df = pd.DataFrame(
            {
                "required": self.required.reshape(-1),
                "actual": self.actual.reshape(-1),
                "status": [_STATUS_NAMES[int(c)] for c in codes],
                "redistributed": self.redistributed.reshape(-1),
            },
            index=idx,
        )
        return df.reset_index()


def period_dates(start: date, days: int) -> list[date]:
    return [start + timedelta(days=d) for d in range(days)]
