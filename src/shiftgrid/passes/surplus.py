from __future__ import annotations

from typing import Any

import numpy as np

from shiftgrid.passes.base import CoveragePass


class SurplusPoolPass(CoveragePass):
    """
    Pool per-(day, hour) surplus across units and drain it into deficits.

    Each unit whose excess is at least MIN_SURPLUS_CONTRIBUTION adds
    min(excess, MAX_TRANSFER_PER_CELL) to the pool. Deficit units are served
    largest deficit first, each absorbing at most MAX_TRANSFER_PER_CELL, until
    the pool runs dry. Contributing units keep their own `actual`.

    With `require_shareable=True` a unit's contribution is further capped by the
    number of shareable staff working in it at that hour.
    """

    order = 30
    name = "SurplusPool"

    def apply(self) -> None:
        grid = self.ctx.grid
        cfg = self.ctx.cfg
        cap = float(self.setting("max_transfer", cfg.MAX_TRANSFER_PER_CELL))
        floor = float(self.setting("min_contribution", cfg.MIN_SURPLUS_CONTRIBUTION))

        excess = grid.actual - grid.required
        contrib = np.where(
            (excess > 0) & (excess >= floor), np.minimum(excess, cap), 0.0
        )
        if self.setting("require_shareable", False):
            contrib = np.minimum(contrib, self.ctx.supporters())
        pool = contrib.sum(axis=1)  # (day, hour)

        transferred = 0.0
        for d, h in zip(*np.nonzero(pool > 0)):
            remaining = float(pool[d, h])
            deficits = grid.required[d, :, h] - grid.actual[d, :, h]
            # stable sort keeps unit order for equal deficits
            for u in np.argsort(-deficits, kind="stable"):
                if remaining <= 0 or deficits[u] <= 0:
                    break
                fill = min(float(deficits[u]), cap, remaining)
                grid.actual[d, u, h] += fill
                grid.redistributed[d, u, h] = True
                remaining -= fill
                transferred += fill
        self._transferred = transferred

    def report_descriptors(self) -> list[dict[str, Any]]:
        return [
            {
                "type": "surplus_pool",
                "name": self.name,
                "transferred": getattr(self, "_transferred", 0.0),
            }
        ]
