# src/shiftgrid/coverage.py
from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence, Type

import numpy as np

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.config import cfg as default_cfg
from shiftgrid.contributions import Contribution, supporter_counts
from shiftgrid.grid import CoverageGrid
from shiftgrid.input_data import InputData
from shiftgrid.passes.base import CoveragePass, PassSpec
from shiftgrid.passes.registry import build_sequence, normalize_pass_specs
from shiftgrid.patterns import ShiftPattern
from shiftgrid.staff import Staff
from shiftgrid.units import Unit

PassArg = Sequence[PassSpec | Type[CoveragePass]] | None


class CoverageContext:
    """Holds shared state while the coverage passes run."""

    def __init__(
        self,
        cfg: Config,
        units: Sequence[Unit],
        assignments: Sequence[Assignment],
        pattern_by_id: Mapping[str, ShiftPattern],
        staff_by_id: Mapping[str, Staff],
        dates: Sequence[date],
    ) -> None:
        self.cfg = cfg
        self.units = list(units)
        self.assignments = list(assignments)
        self.pattern_by_id = pattern_by_id
        self.staff_by_id = staff_by_id
        self.grid = CoverageGrid.empty(dates, [u.id for u in self.units])

        # Filled by the direct pass
        self.contributions: list[Contribution] = []
        self._supporters: Optional[np.ndarray] = None

        self._passes: list[CoveragePass] = []

    def supporters(self) -> np.ndarray:
        """(day, unit, hour) count of active shareable staff; computed once."""
        if self._supporters is None:
            self._supporters = supporter_counts(self.contributions, self.grid)
        return self._supporters

    def report_descriptors(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for p in self._passes:
            out.extend(p.report_descriptors())
        return out


def run_passes(ctx: CoverageContext, passes: PassArg = None) -> CoverageContext:
    """
    Run each registered pass in order, then sanity check the grid.
    Default order: demand -> direct -> half support -> surplus pool.
    """
    ctx._passes = build_sequence(ctx, normalize_pass_specs(passes))
    for p in ctx._passes:
        p.apply()

    # ---- sanity checks (fail fast with clear messages) ----
    grid = ctx.grid
    expected = (len(grid.dates), len(ctx.units), 24)
    if grid.actual.shape != expected or grid.required.shape != expected:
        raise RuntimeError(
            f"[coverage sanity] grid has shape {grid.actual.shape}; expected {expected} "
            "(days, units, hours)."
        )
    if np.any(grid.actual < 0):
        d, u, h = (int(i[0]) for i in np.nonzero(grid.actual < 0))
        raise RuntimeError(
            f"[coverage sanity] negative actual at day={d}, unit={grid.unit_ids[u]}, "
            f"hour={h}; a pass subtracted coverage it never added."
        )
    return ctx


def compute_coverage(
    units: Sequence[Unit],
    assignments: Sequence[Assignment],
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Mapping[str, Staff],
    dates: Sequence[date],
    *,
    passes: PassArg = None,
    cfg: Config | None = None,
) -> CoverageGrid:
    """
    Required vs actual headcount for every (date, unit, hour) in `dates`.

    Parameters
    ----------
    units, assignments, pattern_by_id, staff_by_id:
        Reference data and the assignments to evaluate. Assignments dated the day
        before `dates[0]` are honored for their midnight spill.
    dates:
        Consecutive dates forming the grid's day axis.
    passes:
        Optional pass list. `None` runs demand, direct coverage, the half support
        top-up and the surplus pool.
    cfg:
        Thresholds for the cross-unit passes. Defaults to `shiftgrid.config.cfg`.

    Returns
    -------
    CoverageGrid
        Fresh arrays; the inputs are never mutated.
    """
    ctx = CoverageContext(
        cfg or default_cfg, units, assignments, pattern_by_id, staff_by_id, dates
    )
    return run_passes(ctx, passes).grid


def coverage_for(
    data: InputData,
    assignments: Sequence[Assignment] | None = None,
    *,
    passes: PassArg = None,
) -> CoverageGrid:
    """compute_coverage over an InputData's period and lookups."""
    return compute_coverage(
        data.units,
        data.assignments if assignments is None else assignments,
        data.pattern_by_id,
        data.staff_by_id,
        data.cfg.dates(),
        passes=passes,
        cfg=data.cfg,
    )
