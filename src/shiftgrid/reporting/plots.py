from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import TwoSlopeNorm
from matplotlib.patches import Patch

from shiftgrid.grid import CoverageGrid

from .data_models import UnitGroup
from .metrics import avg_coverage_by_hour
from .text_report import get_active_report

SUPPORT_COLOR = "#42a5f5"
NIGHT_COLOR = "#757575"
DAY_COLOR = "#81c784"


def _save_and_show(fig: plt.Figure, filename: str) -> None:
    """Persist the plot under outputs/, show it and add it to the active report."""
    out_dir = Path("outputs")
    out_dir.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_dir / filename, dpi=fig.dpi, bbox_inches="tight")
    plt.show()
    report = get_active_report()
    if report is not None:
        report.add_figure(fig)


def _strip_spines(ax: plt.Axes) -> None:
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    for spine in ax.spines.values():
        spine.set_zorder(0)


def show_hour_of_day_coverage(grid: CoverageGrid, enable_plot: bool = True) -> None:
    """Average required vs actual headcount by hour of day, summed over units."""
    if not enable_plot or grid.shape[0] == 0:
        return

    required, actual = avg_coverage_by_hour(grid)
    hours = list(required.index)

    fig, ax = plt.subplots(figsize=(7.5, 4), dpi=150)
    ax.set_title("Coverage by hour of day (avg over period)", pad=35)
    ax.bar(
        hours,
        [float(actual.loc[h]) for h in hours],
        color="#81c784",
        alpha=0.8,
        width=0.9,
        edgecolor="none",
        label="Actual",
    )
    ax.step(
        hours,
        [float(required.loc[h]) for h in hours],
        where="mid",
        linewidth=1.25,
        color="black",
        label="Required",
    )
    ax.set_xmargin(0.0)
    ax.set_ymargin(0.0)
    _strip_spines(ax)
    max_y = max(float(required.max()), float(actual.max()), 1.0)
    ax.set_ylim(0, max_y * 1.05)
    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Avg headcount (all units)")
    ax.set_xticks(hours)
    ax.legend(ncol=2, loc="upper center", bbox_to_anchor=(0.5, 1.15), borderaxespad=0.3)
    fig.tight_layout(rect=(0, 0, 1, 0.92))
    _save_and_show(fig, "hour_of_day_coverage.png")


def show_coverage_heatmap(grid: CoverageGrid, enable_plot: bool = True) -> None:
    """actual - required per (unit, hour) summed over the period; red is short."""
    D, U, H = grid.shape
    if not enable_plot or D == 0 or U == 0:
        return

    balance = (grid.actual - grid.required).sum(axis=0)
    span = float(np.abs(balance).max()) or 1.0

    fig, ax = plt.subplots(figsize=(9, 1.5 + 0.45 * U), dpi=150)
    img = ax.imshow(
        balance,
        aspect="auto",
        cmap="RdYlGn",
        norm=TwoSlopeNorm(vcenter=0.0, vmin=-span, vmax=span),
        interpolation="nearest",
    )
    ax.set_yticks(range(U), grid.unit_ids)
    ax.set_xticks(range(H))
    ax.set_xlabel("Hour of day")
    ax.set_title(
        f"Coverage balance {grid.dates[0]:%b %d} - {grid.dates[-1]:%b %d} "
        "(headcount-hours, actual - required)",
        fontsize=10,
    )
    fig.colorbar(img, ax=ax, fraction=0.03, pad=0.02)
    fig.tight_layout()
    _save_and_show(fig, "coverage_heatmap.png")


def show_daily_unit_gantt(
    groups: Sequence[UnitGroup],
    day: date,
    night_pattern_ids: Sequence[str] = (),
    enable_plot: bool = True,
) -> None:
    """Horizontal bars per staff row, one block of rows per unit."""
    if not enable_plot:
        return
    total_rows = sum(len(g.rows) for g in groups)
    if total_rows == 0:
        return

    fig_height = 2 + total_rows * 0.25 + len(groups) * 0.3
    fig, ax = plt.subplots(figsize=(9, fig_height), dpi=150)

    labels: list[str] = []
    y = 0
    boundaries: list[float] = []
    for g in groups:
        for row in g.rows:
            if row.is_support:
                color = SUPPORT_COLOR
            elif row.pattern_id in night_pattern_ids:
                color = NIGHT_COLOR
            else:
                color = DAY_COLOR
            ax.barh(
                -y,
                width=row.duration,
                left=row.start_hour,
                height=0.8,
                color=color,
                alpha=0.8 if row.is_support else 1.0,
                linewidth=0,
                zorder=3,
            )
            suffix = " (support)" if row.is_support else ""
            labels.append(f"{g.unit_id} | {row.staff_name} [{row.pattern_id}]{suffix}")
            y += 1
        boundaries.append(-y + 0.5)

    ax.set_yticks([-i for i in range(len(labels))], labels, fontsize=7)
    for b in boundaries[:-1]:
        ax.axhline(b, color="0.6", linewidth=0.8, zorder=1)
    for h in range(0, 25, 3):
        ax.axvline(h, color="0.9", linestyle="--", linewidth=0.6, zorder=1)
    ax.set_xlim(0, 24)
    ax.set_ylim(-y + 0.5, 0.5)
    ax.set_xticks(range(0, 25, 3))
    ax.set_xlabel("Hour of day")
    ax.set_title(f"Unit shifts on {day.isoformat()}", fontsize=11)
    _strip_spines(ax)
    ax.legend(
        handles=[
            Patch(facecolor=DAY_COLOR, label="Day"),
            Patch(facecolor=NIGHT_COLOR, label="Night"),
            Patch(facecolor=SUPPORT_COLOR, label="Support"),
        ],
        loc="upper center",
        bbox_to_anchor=(0.5, 1.12),
        ncol=3,
        frameon=False,
    )
    fig.tight_layout()
    _save_and_show(fig, f"unit_gantt_{day.isoformat()}.png")
