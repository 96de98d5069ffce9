from __future__ import annotations

from typing import Any, cast

import numpy as np
import pandas as pd

from shiftgrid.grid import CoverageGrid

from .data_models import CoverageMetrics, SlotGap


def compute_coverage_metrics(grid: CoverageGrid) -> CoverageMetrics:
    """Compute CoverageMetrics for a coverage grid."""
    diff = grid.actual - grid.required
    codes = grid.status_codes()
    return CoverageMetrics(
        required_hours=float(grid.required.sum()),
        actual_hours=float(grid.actual.sum()),
        deficit_hours=float(np.maximum(-diff, 0.0).sum()),
        surplus_hours=float(np.maximum(diff, 0.0).sum()),
        deficit_cells=int((codes < 0).sum()),
        surplus_cells=int((codes > 0).sum()),
        satisfied_cells=int((codes == 0).sum()),
        redistributed_cells=int(grid.redistributed.sum()),
    )


def compute_slot_gaps(
    grid: CoverageGrid, top: int = 15
) -> tuple[list[SlotGap], pd.DataFrame]:
    """Return top deficit cells plus the DataFrame of every cell with demand."""
    df = grid.to_frame()
    df["deficit"] = (df["required"] - df["actual"]).clip(lower=0.0)
    df_pos = df[df["required"] > 0]
    df_sorted = df_pos.sort_values(
        ["deficit", "required", "date", "hour"],
        ascending=[False, False, True, True],
    )
    cols = ["date", "unit_id", "hour", "required", "actual", "deficit", "redistributed"]
    top_rows: list[SlotGap] = []
    for r in df_sorted[df_sorted["deficit"] > 0].head(top).to_dict(orient="records"):
        rec = cast(dict[str, Any], r)
        top_rows.append(
            SlotGap(
                date=pd.Timestamp(rec["date"]).date(),
                unit_id=str(rec["unit_id"]),
                hour=int(rec["hour"]),
                required=float(rec["required"]),
                actual=float(rec["actual"]),
                deficit=float(rec["deficit"]),
                redistributed=bool(rec["redistributed"]),
            )
        )
    return top_rows, df_sorted[cols]


def avg_coverage_by_hour(grid: CoverageGrid) -> tuple[pd.Series, pd.Series]:
    """Average required and actual headcount by hour-of-day, summed over units."""
    D, _, H = grid.shape
    if D == 0:
        zeros = pd.Series([0.0] * H, index=range(H))
        return zeros, zeros.copy()
    required = pd.Series(grid.required.sum(axis=1).mean(axis=0), index=range(H))
    actual = pd.Series(grid.actual.sum(axis=1).mean(axis=0), index=range(H))
    return required, actual


def daily_coverage(grid: CoverageGrid) -> pd.DataFrame:
    """Per (date, unit): required/actual headcount-hours and deficit hours."""
    df = grid.to_frame()
    df["deficit"] = (df["required"] - df["actual"]).clip(lower=0.0)
    return (
        df.groupby(["date", "unit_id"], sort=True)[["required", "actual", "deficit"]]
        .sum()
        .reset_index()
    )
