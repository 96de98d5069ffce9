from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

import numpy as np

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.config import cfg as default_cfg
from shiftgrid.contributions import apply_contribution, direct_contribution
from shiftgrid.grid import CoverageGrid
from shiftgrid.patterns import ShiftPattern
from shiftgrid.staff import Staff


@dataclass(frozen=True)
class Substitution:
    """Replace `old` with `new`; either side may be None (pure add / pure removal)."""

    old: Optional[Assignment] = None
    new: Optional[Assignment] = None


@dataclass
class ProjectedCoverage:
    grid: CoverageGrid
    # cells whose direct contribution changed
    touched: np.ndarray
    # cells whose cross-unit adjustment may differ from a full recompute
    stale: np.ndarray

    @property
    def has_stale(self) -> bool:
        return bool(self.stale.any())


def project_coverage(
    base: CoverageGrid,
    substitutions: Iterable[Substitution],
    pattern_by_id: Mapping[str, ShiftPattern],
    staff_by_id: Mapping[str, Staff],
    cfg: Config | None = None,
) -> ProjectedCoverage:
    """
    Apply pending substitutions to a copy of `base` without rerunning the passes.

    Each old assignment's direct contribution is removed hour by hour (clamped at
    0) and the new one's added, on its own date and the following date when it
    spills past midnight. Cross-unit redistribution is not replayed: every unit
    in a touched (day, hour) slice is marked stale when that slice was
    redistributed in `base` or is eligible for redistribution after the edit.
    """
    C = cfg or default_cfg
    grid = base.copy()
    touched = np.zeros(grid.shape, dtype=bool)

    for sub in substitutions:
        for assignment, sign in ((sub.old, -1), (sub.new, 1)):
            if assignment is None:
                continue
            c = direct_contribution(assignment, pattern_by_id, staff_by_id, grid)
            if c is None:
                continue
            for d, u, hours in apply_contribution(grid.actual, grid, c, sign):
                touched[d, u, hours] = True

    stale = _stale_cells(base, grid, touched, C)
    return ProjectedCoverage(grid=grid, touched=touched, stale=stale)


def _stale_cells(
    base: CoverageGrid, projected: CoverageGrid, touched: np.ndarray, C: Config
) -> np.ndarray:
    touched_slices = touched.any(axis=1)  # (day, hour)
    if not touched_slices.any():
        return np.zeros(projected.shape, dtype=bool)

    deficit = projected.required - projected.actual
    half_short = ((deficit > 0) & (deficit <= C.HALF_DEMAND)).any(axis=1)
    has_surplus = ((-deficit > 0) & (-deficit >= C.MIN_SURPLUS_CONTRIBUTION)).any(axis=1)
    has_deficit = (deficit > 0).any(axis=1)
    eligible = half_short | (has_surplus & has_deficit)

    stale_slices = touched_slices & (base.redistributed.any(axis=1) | eligible)
    return np.broadcast_to(stale_slices[:, None, :], projected.shape).copy()
