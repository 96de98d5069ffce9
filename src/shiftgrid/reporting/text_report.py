from __future__ import annotations

from collections import Counter
from io import StringIO
from pathlib import Path
from typing import Any, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages

from shiftgrid.input_data import InputData
from shiftgrid.result_types import AllocationWarning

from .adapters import ResultAdapter
from .metrics import compute_coverage_metrics, compute_slot_gaps

LINES_PER_PAGE = 90


class ReportDocument:
    """Collects printed lines and figures; written as one PDF."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.lines: list[str] = []
        self.figures: list[plt.Figure] = []

    def add_text(self, text: str) -> None:
        self.lines.extend(text.split("\n"))

    def add_figure(self, fig: plt.Figure) -> None:
        self.figures.append(fig)

    def _text_page(self, pdf: PdfPages, text: str, *, centered: bool = False) -> None:
        fig, ax = plt.subplots(figsize=(8.27, 11.69))
        ax.axis("off")
        if centered:
            ax.text(0.5, 0.5, text, ha="center", va="center", fontsize=12)
        else:
            ax.text(
                0.01, 0.99, text, ha="left", va="top", fontsize=8, family="monospace"
            )
        pdf.savefig(fig, bbox_inches="tight")
        plt.close(fig)

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with PdfPages(self.path) as pdf:
            for i in range(0, len(self.lines), LINES_PER_PAGE):
                self._text_page(pdf, "\n".join(self.lines[i : i + LINES_PER_PAGE]))
            if not self.lines and not self.figures:
                self._text_page(pdf, "Report contains no data.", centered=True)
            for fig in self.figures:
                pdf.savefig(fig, bbox_inches="tight")
                plt.close(fig)


_ACTIVE_REPORT: Optional[ReportDocument] = None


def set_active_report(doc: Optional[ReportDocument]) -> None:
    global _ACTIVE_REPORT
    _ACTIVE_REPORT = doc


def get_active_report() -> Optional[ReportDocument]:
    return _ACTIVE_REPORT


def _log_print(*args, **kwargs) -> None:
    """print(), and copy the same text into the active report if there is one."""
    buf = StringIO()
    print(*args, **{**kwargs, "file": buf})
    print(*args, **kwargs)
    if _ACTIVE_REPORT is not None:
        _ACTIVE_REPORT.add_text(buf.getvalue().rstrip("\n"))


def _fmt_float(x: float | None, nd: int = 2, as_pct: bool = False) -> str:
    if x is None:
        return "nan"
    try:
        if pd.isna(x):
            return "nan"
        return f"{float(100 * x):.{nd}f}%" if as_pct else f"{float(x):.{nd}f}"
    except (TypeError, ValueError):
        return "nan"


def print_warnings(
    warnings: Sequence[AllocationWarning], *, num_print_examples: int = 6
) -> None:
    if not warnings:
        _log_print("\n✅ No allocation warnings.")
        return
    by_kind = Counter(w.kind for w in warnings)
    summary = ", ".join(f"{k}={n}" for k, n in sorted(by_kind.items()))
    _log_print(f"\n⚠️ Allocation warnings ({len(warnings)}): {summary}")
    for kind in sorted(by_kind):
        items = [w for w in warnings if w.kind == kind]
        for w in items[:num_print_examples]:
            _log_print(f"  - [{kind}] {w.message}")
        if len(items) > num_print_examples:
            _log_print(f"    … {len(items) - num_print_examples} more {kind}")


def _print_hours_histogram(df_burden: pd.DataFrame) -> None:
    if df_burden.empty or "total_hours" not in df_burden.columns:
        _log_print("\nHours distribution: (no data)")
        return
    hours_series = (
        pd.to_numeric(df_burden["total_hours"], errors="coerce")
        .dropna()
        .round()
        .astype(int)
    )
    counts = hours_series.value_counts().sort_index()
    _log_print("\nHours distribution (staff per total nominal hours):")
    for h, n in counts.items():
        bar = "█" * min(int(n), 50)
        _log_print(f"  {h:>3}h : {n:>4} staff  {bar}")


def render_text_report(
    cfg: Any,
    adapter: ResultAdapter,
    res: Any,
    data: InputData,
    *,
    num_print_examples: int = 6,
) -> None:
    status = adapter.status_name(res)
    _log_print(f"Pipeline status: {status}")
    _log_print(
        f"Period: {cfg.start.isoformat()} .. {cfg.end_date.isoformat()} "
        f"({cfg.DAYS} days) | units={len(data.units)} | staff={len(data.staff)}"
    )

    descriptors = getattr(res, "pass_descriptors", None) or []
    if descriptors:
        _log_print("\nCoverage passes:")
        for desc in descriptors:
            details = ", ".join(
                f"{k}={_fmt_float(v, 1) if isinstance(v, float) else v}"
                for k, v in desc.items()
                if k not in ("type", "name")
            )
            suffix = f": {details}" if details else ""
            _log_print(f"  - {desc.get('name', desc.get('type', '?'))}{suffix}")

    grid = adapter.grid(res)
    if grid is None:
        _log_print("No coverage grid available; exiting.")
        return

    cov = compute_coverage_metrics(grid)
    ratio = cov.actual_hours / cov.required_hours if cov.required_hours > 0 else None
    _log_print(
        f"\nSummary: required={_fmt_float(cov.required_hours, 1)} headcount-hours | "
        f"actual={_fmt_float(cov.actual_hours, 1)} "
        f"({_fmt_float(ratio, nd=1, as_pct=True)})"
    )
    _log_print(
        f"Deficit hours={_fmt_float(cov.deficit_hours, 1)} over {cov.deficit_cells:,} "
        f"cells | surplus hours={_fmt_float(cov.surplus_hours, 1)} over "
        f"{cov.surplus_cells:,} cells | satisfied cells={cov.satisfied_cells:,}"
    )
    _log_print(f"Cells changed by cross-unit redistribution: {cov.redistributed_cells:,}")
    _log_print(
        "\nDefinitions:"
        "\n- headcount-hour: one person required/present in one unit for one hour."
        "\n- deficit: required - actual where positive; surplus the reverse."
        "\n- redistribution: half-person support top-ups and surplus pooling across units.\n"
    )

    if cov.deficit_cells == 0:
        _log_print("✅ Every unit-hour is covered.")
    else:
        top_gaps, df_gaps = compute_slot_gaps(grid, top=num_print_examples)
        _log_print(f"❌ Top unit-hour deficits (of {len(df_gaps[df_gaps['deficit'] > 0]):,}):")
        _log_print(
            pd.DataFrame([g.__dict__ for g in top_gaps])
            .drop(columns=["redistributed"])
            .to_string(index=False)
        )

    print_warnings(adapter.warnings(res), num_print_examples=num_print_examples)

    df_burden = adapter.df_burden(res)
    if not df_burden.empty:
        _log_print(f"\nPer-staff burden (top {num_print_examples} by hours):")
        _log_print(
            df_burden.sort_values("total_hours", ascending=False)
            .head(num_print_examples)
            .to_string(index=False)
        )
        hrs = df_burden["total_hours"].to_numpy(dtype=float)
        hrs = hrs[~np.isnan(hrs)]
        if hrs.size:
            std = float(np.std(hrs, ddof=1)) if hrs.size > 1 else float("nan")
            _log_print(
                "\nHours across staff: "
                f"mean={_fmt_float(float(np.mean(hrs)))} | std={_fmt_float(std)} | "
                f"min={_fmt_float(float(hrs.min()))} | max={_fmt_float(float(hrs.max()))}"
            )
        if "over_max_hours" in df_burden.columns:
            over = df_burden[df_burden["over_max_hours"].astype(bool)]
            if not over.empty:
                _log_print(f"\n⚠️ Staff over their max hours ({len(over)}):")
                _log_print(
                    over[["staff_id", "name", "total_hours", "max_hours"]].to_string(
                        index=False
                    )
                )
        _print_hours_histogram(df_burden)
