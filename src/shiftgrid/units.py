from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

HOURS_PER_DAY = 24


def _normalize_demand(values: Sequence[float]) -> tuple[float, ...]:
    demand = tuple(float(v) for v in values)
    if len(demand) != HOURS_PER_DAY:
        raise ValueError(
            f"Unit demand must have exactly {HOURS_PER_DAY} hourly entries; got {len(demand)}."
        )
    for hour, val in enumerate(demand):
        if val < 0:
            raise ValueError(f"Demand at hour {hour} is negative ({val}).")
        if (val * 2) != int(val * 2):
            raise ValueError(f"Demand at hour {hour} must be a multiple of 0.5 ({val}).")
    return demand


@dataclass(slots=True)
class Unit:
    """An organizational unit with a per-hour headcount demand (index 0 = 00:00-01:00)."""

    id: str
    name: str
    demand: Sequence[float] = field(default_factory=lambda: [0.0] * HOURS_PER_DAY)

    def __post_init__(self) -> None:
        self.demand = _normalize_demand(self.demand)

    def __repr__(self) -> str:
        return f"Unit(id='{self.id}', name='{self.name}', peak={max(self.demand):g})"
