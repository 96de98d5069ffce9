from __future__ import annotations

from typing import Any

from shiftgrid.contributions import apply_contribution, collect_contributions
from shiftgrid.passes.base import CoveragePass


class DirectCoveragePass(CoveragePass):
    """
    Add +1 to `actual` for every hour a working assignment covers in its own unit.

    Start is the flex override start when present, else the nominal start. The
    span is start + ceil(duration); hours past midnight (or any pattern flagged as
    crossing midnight) land on the following date. Assignments dated the day
    before the grid only contribute that spill.
    """

    order = 10
    name = "DirectCoverage"

    def apply(self) -> None:
        ctx = self.ctx
        ctx.contributions = collect_contributions(
            ctx.assignments, ctx.pattern_by_id, ctx.staff_by_id, ctx.grid
        )
        for c in ctx.contributions:
            apply_contribution(ctx.grid.actual, ctx.grid, c)

    def report_descriptors(self) -> list[dict[str, Any]]:
        return [
            {
                "type": "direct",
                "name": self.name,
                "contributing_assignments": len(self.ctx.contributions),
            }
        ]
