from __future__ import annotations

from typing import Any, Optional, Protocol, cast

import pandas as pd

from shiftgrid.grid import CoverageGrid
from shiftgrid.result_types import AllocationWarning


class ResultAdapter(Protocol):
    """Minimal interface the Reporter needs to work with any pipeline result."""

    def status_name(self, res: Any) -> str: ...
    def grid(self, res: Any) -> Optional[CoverageGrid]: ...
    def warnings(self, res: Any) -> list[AllocationWarning]: ...

    def df_coverage(self, res: Any) -> pd.DataFrame: ...
    def df_assignments(self, res: Any) -> pd.DataFrame: ...
    def df_burden(self, res: Any) -> pd.DataFrame: ...


class PandasResultAdapter:
    """Default adapter for the shipped PipelineResult dataclass."""

    def status_name(self, res: Any) -> str:
        return getattr(res, "status_name", "UNKNOWN")

    def grid(self, res: Any) -> Optional[CoverageGrid]:
        g = getattr(res, "grid", None)
        return g if isinstance(g, CoverageGrid) else None

    def warnings(self, res: Any) -> list[AllocationWarning]:
        return list(getattr(res, "warnings", None) or [])

    def df_coverage(self, res: Any) -> pd.DataFrame:
        df = cast(pd.DataFrame, getattr(res, "df_coverage", pd.DataFrame()))
        if not isinstance(df, pd.DataFrame) or df.empty:
            return pd.DataFrame()
        cols = {str(c).lower(): c for c in df.columns}
        req = ("date", "unit_id", "hour", "required", "actual")
        if not all(k in cols for k in req):
            return pd.DataFrame()
        out = df[[cols[k] for k in req]].copy()
        out.columns = list(req)
        out["date"] = pd.to_datetime(out["date"])
        return out.astype({"hour": int, "required": float, "actual": float})

    def df_assignments(self, res: Any) -> pd.DataFrame:
        df = cast(pd.DataFrame, getattr(res, "df_assignments", pd.DataFrame()))
        return df if isinstance(df, pd.DataFrame) else pd.DataFrame()

    def df_burden(self, res: Any) -> pd.DataFrame:
        df = cast(pd.DataFrame, getattr(res, "df_burden", pd.DataFrame()))
        if not isinstance(df, pd.DataFrame) or df.empty:
            return pd.DataFrame()
        sc = {str(c).lower(): c for c in df.columns}
        hours_col = next(
            (sc[c] for c in ("total_hours", "hours", "totalhours") if c in sc), None
        )
        id_col = next((sc[c] for c in ("staff_id", "id", "staffid") if c in sc), None)
        if hours_col is None or id_col is None:
            return pd.DataFrame()
        out = df.rename(columns={hours_col: "total_hours", id_col: "staff_id"}).copy()
        out["total_hours"] = pd.to_numeric(out["total_hours"], errors="coerce")
        return out
