# shiftgrid/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, Optional

import pandas as pd

from shiftgrid.assignments import Assignment
from shiftgrid.grid import CoverageGrid

WarningKind = Literal[
    "rest_shortfall",
    "gap_unfilled",
    "gap_residual",
    "contract",
    "rest_interval",
]


@dataclass(frozen=True)
class AllocationWarning:
    """Recoverable shortfall reported next to (never instead of) a result."""

    kind: WarningKind
    message: str
    staff_id: Optional[str] = None
    unit_id: Optional[str] = None
    date: Optional[date] = None
    shortfall: float = 0.0


@dataclass
class AllocationResult:
    """Full assignment list after an allocator ran, plus what it added."""

    assignments: list[Assignment]
    added: list[Assignment] = field(default_factory=list)
    warnings: list[AllocationWarning] = field(default_factory=list)


@dataclass
class PipelineResult:
    """Structured output of a pipeline run."""

    status_name: str
    assignments: list[Assignment]
    grid: CoverageGrid
    df_coverage: pd.DataFrame
    df_assignments: pd.DataFrame
    df_burden: pd.DataFrame
    warnings: list[AllocationWarning] = field(default_factory=list)
    pass_descriptors: list[dict[str, Any]] = field(default_factory=list)
