from __future__ import annotations

from typing import Any

import numpy as np

from shiftgrid.passes.base import CoveragePass


class DemandPass(CoveragePass):
    """Seed every cell's `required` from its unit's 24-hour demand; `actual` starts at 0."""

    order = 0
    name = "Demand"

    def apply(self) -> None:
        grid = self.ctx.grid
        for unit in self.ctx.units:
            u = grid.unit_index(unit.id)
            if u is None:
                continue
            grid.required[:, u, :] = np.asarray(unit.demand, dtype=float)
        grid.actual[...] = 0.0
        grid.redistributed[...] = False

    def report_descriptors(self) -> list[dict[str, Any]]:
        grid = self.ctx.grid
        return [
            {
                "type": "demand",
                "name": self.name,
                "required_person_hours": float(grid.required.sum()),
            }
        ]
