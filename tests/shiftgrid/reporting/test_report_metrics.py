from __future__ import annotations

from datetime import date

import pandas as pd

from shiftgrid.grid import CoverageGrid
from shiftgrid.reporting.metrics import (
    avg_coverage_by_hour,
    compute_coverage_metrics,
    compute_slot_gaps,
    daily_coverage,
)

D0, D1 = date(2025, 11, 3), date(2025, 11, 4)


def make_grid() -> CoverageGrid:
    grid = CoverageGrid.empty([D0, D1], ["A", "B"])
    grid.required[:, 0, 9:17] = 2.0
    grid.required[:, 1, 9:17] = 1.0
    grid.actual[:, 0, 9:17] = 2.0
    grid.actual[:, 1, 9:17] = 1.0
    # A short by two at 10:00 on D1, B half short at 11:00 on D0
    grid.actual[1, 0, 10] = 0.0
    grid.actual[0, 1, 11] = 0.5
    grid.redistributed[0, 1, 11] = True
    # surplus overnight on B
    grid.actual[0, 1, 2] = 1.0
    return grid


def test_compute_coverage_metrics():
    m = compute_coverage_metrics(make_grid())
    assert m.required_hours == 48.0
    assert m.actual_hours == 46.5
    assert m.deficit_hours == 2.5
    assert m.surplus_hours == 1.0
    assert m.deficit_cells == 2
    assert m.surplus_cells == 1
    assert m.satisfied_cells == 2 * 2 * 24 - 3
    assert m.redistributed_cells == 1


def test_compute_slot_gaps_orders_by_deficit():
    top, df = compute_slot_gaps(make_grid(), top=5)
    assert [(g.date, g.unit_id, g.hour, g.deficit) for g in top] == [
        (D1, "A", 10, 2.0),
        (D0, "B", 11, 0.5),
    ]
    assert top[1].redistributed is True
    # only cells with demand are listed
    assert len(df) == 2 * 2 * 8
    assert (df["required"] > 0).all()


def test_compute_slot_gaps_respects_top():
    top, _ = compute_slot_gaps(make_grid(), top=1)
    assert len(top) == 1


def test_avg_coverage_by_hour():
    required, actual = avg_coverage_by_hour(make_grid())
    assert list(required.index) == list(range(24))
    assert required.loc[10] == 3.0
    assert actual.loc[10] == 2.0
    assert actual.loc[2] == 0.5


def test_avg_coverage_by_hour_empty_grid():
    required, actual = avg_coverage_by_hour(CoverageGrid.empty([], ["A"]))
    assert float(required.sum()) == 0.0
    assert float(actual.sum()) == 0.0


def test_daily_coverage():
    df = daily_coverage(make_grid())
    assert list(df.columns) == ["date", "unit_id", "required", "actual", "deficit"]
    assert len(df) == 4
    row = df[(df["date"] == pd.Timestamp(D1)) & (df["unit_id"] == "A")].iloc[0]
    assert row["required"] == 16.0
    assert row["deficit"] == 2.0
