# src/shiftgrid/passes/base.py
from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, Type

import numpy as np

if TYPE_CHECKING:
    from shiftgrid.assignments import Assignment
    from shiftgrid.config import Config
    from shiftgrid.contributions import Contribution
    from shiftgrid.grid import CoverageGrid
    from shiftgrid.patterns import ShiftPattern
    from shiftgrid.staff import Staff
    from shiftgrid.units import Unit


class CoverageCtxProto(Protocol):
    cfg: Config
    units: Sequence[Unit]
    assignments: Sequence[Assignment]
    pattern_by_id: Mapping[str, ShiftPattern]
    staff_by_id: Mapping[str, Staff]
    grid: CoverageGrid
    contributions: list[Contribution]

    def supporters(self) -> np.ndarray: ...


@dataclass
class PassSpec:
    cls: Type["CoveragePass"]
    order: int | None = None
    enabled: bool = True
    settings: dict[str, Any] = field(default_factory=dict)


class CoveragePass(ABC):
    order: int = 100
    enabled: bool = True
    name: str = "Pass"

    def __init__(self, ctx: CoverageCtxProto, **settings: Any) -> None:
        self.ctx: CoverageCtxProto = ctx
        self._settings: dict[str, Any] = settings

    def apply(self) -> None:
        return

    def report_descriptors(self) -> list[dict[str, Any]]:
        """Return zero or more JSON-serializable descriptors that a reporter can use.
        Default: [] (pass has nothing to report)."""
        return []

    # Helper for subclasses to read optional settings
    def setting(self, key: str, default: Any) -> Any:
        return self._settings.get(key, default)
