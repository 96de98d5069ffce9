from __future__ import annotations

from typing import Any

import numpy as np

from shiftgrid.passes.base import CoveragePass


class HalfSupportPass(CoveragePass):
    """
    Binary half-person top-up for cells short by at most HALF_DEMAND.

    A cell qualifies when 0 < required - actual <= 0.5 and at least one active
    shareable/support-only staff member is working in a different unit at the
    same (day, hour). The top-up is +0.5 no matter how many supporters exist.
    """

    order = 20
    name = "HalfSupport"

    def apply(self) -> None:
        grid = self.ctx.grid
        half = float(self.setting("top_up", self.ctx.cfg.HALF_DEMAND))

        supporters = self.ctx.supporters()
        others = supporters.sum(axis=1, keepdims=True) - supporters

        deficit = grid.required - grid.actual
        mask = (deficit > 0) & (deficit <= half) & (others > 0)
        grid.actual[mask] += half
        grid.redistributed |= mask
        self._topped_up = int(np.count_nonzero(mask))

    def report_descriptors(self) -> list[dict[str, Any]]:
        return [
            {
                "type": "half_support",
                "name": self.name,
                "cells_topped_up": getattr(self, "_topped_up", 0),
            }
        ]
