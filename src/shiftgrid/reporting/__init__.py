from __future__ import annotations

from .adapters import PandasResultAdapter, ResultAdapter
from .burden import burden_to_dataframe, compute_staff_burden
from .data_models import CoverageMetrics, SlotGap, StaffBurden, UnitGroup, UnitGroupRow
from .reporter import Reporter
from .unit_groups import compute_unit_groups

__all__ = [
    "Reporter",
    "ResultAdapter",
    "PandasResultAdapter",
    "CoverageMetrics",
    "SlotGap",
    "StaffBurden",
    "UnitGroup",
    "UnitGroupRow",
    "burden_to_dataframe",
    "compute_staff_burden",
    "compute_unit_groups",
]
