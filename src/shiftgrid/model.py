# shiftgrid/model.py
from __future__ import annotations

from typing import Sequence, Type

import pandas as pd

from shiftgrid.allocation import (
    allocate_rest_days,
    contract_violations,
    fill_gaps,
    rest_interval_violations,
)
from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.coverage import CoverageContext, run_passes
from shiftgrid.input_data import InputData
from shiftgrid.passes.base import CoveragePass, PassSpec
from shiftgrid.precheck import precheck_rest_capacity
from shiftgrid.reporting.burden import burden_to_dataframe, compute_staff_burden
from shiftgrid.result_types import AllocationWarning, PipelineResult
from shiftgrid.staff import Staff

ASSIGNMENT_COLUMNS = [
    "date",
    "staff_id",
    "staff_name",
    "pattern_id",
    "work_type",
    "unit_id",
    "start",
    "end",
    "duration_hours",
    "locked",
    "source",
]


class ShiftPlanner:
    """
    Thin orchestrator around:
      - precheck_rest_capacity() -> rest-day slots vs requirements per band
      - allocate_rest_days()     -> statutory rest days for regular staff
      - fill_gaps()              -> auxiliary staff into residual gaps
      - contract/rest checks     -> warnings
      - coverage passes          -> CoverageGrid + pandas frames
    """

    def __init__(
        self,
        cfg: Config,
        data: InputData,
        passes: Sequence[PassSpec | Type[CoveragePass]] | None = None,
        fill_gaps: bool = True,
    ):
        self.cfg = cfg
        self.data = data
        self._pass_specs = passes
        self._fill_gaps = fill_gaps
        self._ctx: CoverageContext | None = None  # populated by evaluate()

    # ---------- Precheck ----------
    def precheck(self):
        return precheck_rest_capacity(self.cfg, self.data)

    # ---------- Allocate ----------
    def auxiliary_staff(self) -> list[Staff]:
        return [s for s in self.data.staff if s.is_rental]

    def allocate(self) -> tuple[list[Assignment], list[AllocationWarning], dict]:
        """
        Rest days first, then gap fill on top of them, then the contract and
        minimum-rest checks over the final list.

        Returns (assignments, warnings, source) where `source` maps id() of
        each added assignment to the step that placed it.
        """
        data, dates = self.data, self.cfg.dates()
        rest_pattern = data.rest_pattern()
        warnings: list[AllocationWarning] = []
        source: dict[int, str] = {}

        assignments = list(data.assignments)
        if rest_pattern is None:
            print("ℹ️  No statutory-holiday pattern defined; skipping rest days.")
        else:
            print("\nAllocating rest days...")
            rest = allocate_rest_days(
                assignments,
                data.staff,
                data.units,
                data.pattern_by_id,
                data.required_rest_days(),
                dates,
                rest_pattern_id=rest_pattern.id,
                cfg=self.cfg,
            )
            assignments = rest.assignments
            warnings.extend(rest.warnings)
            source.update({id(a): "rest_day" for a in rest.added})
            print(f"  placed {len(rest.added):,} rest day(s)")

        if self._fill_gaps:
            print("Filling gaps with auxiliary staff...")
            filled = fill_gaps(
                assignments,
                self.auxiliary_staff(),
                data.units,
                data.pattern_by_id,
                dates,
                staff_by_id=data.staff_by_id,
                cfg=self.cfg,
            )
            assignments = filled.assignments
            warnings.extend(filled.warnings)
            source.update({id(a): "gap_fill" for a in filled.added})
            print(f"  placed {len(filled.added):,} auxiliary shift(s)")

        warnings.extend(
            contract_violations(
                assignments,
                data.staff_by_id,
                data.pattern_by_id,
                self.cfg.PART_TIME_WINDOW,
            )
        )
        warnings.extend(
            rest_interval_violations(assignments, data.staff_by_id, data.pattern_by_id)
        )
        return assignments, warnings, source

    # ---------- Evaluate ----------
    def evaluate(self, assignments: Sequence[Assignment]) -> CoverageContext:
        """Run the coverage passes over `assignments`; keeps the context for reporting."""
        ctx = CoverageContext(
            self.cfg,
            self.data.units,
            assignments,
            self.data.pattern_by_id,
            self.data.staff_by_id,
            self.cfg.dates(),
        )
        self._ctx = run_passes(ctx, self._pass_specs)
        return self._ctx

    def run(self) -> PipelineResult:
        """
        Allocate, evaluate and package the run as a PipelineResult.

        status_name is "COVERED" when no unit-hour is short after the passes,
        "SHORT" otherwise.
        """
        assignments, warnings, source = self.allocate()
        ctx = self.evaluate(assignments)
        grid = ctx.grid

        burden = compute_staff_burden(
            self.data.staff,
            assignments,
            self.data.pattern_by_id,
            self.data.required_rest_days(),
            self.cfg,
        )
        status = "SHORT" if bool((grid.deficit() > 0).any()) else "COVERED"
        return PipelineResult(
            status_name=status,
            assignments=assignments,
            grid=grid,
            df_coverage=grid.to_frame(),
            df_assignments=self.assignments_frame(assignments, source),
            df_burden=burden_to_dataframe(burden),
            warnings=warnings,
            pass_descriptors=ctx.report_descriptors(),
        )

    def assignments_frame(
        self, assignments: Sequence[Assignment], source: dict[int, str] | None = None
    ) -> pd.DataFrame:
        source = source or {}
        rows = []
        for a in assignments:
            p = self.data.pattern_by_id.get(a.pattern_id)
            s = self.data.staff_by_id.get(a.staff_id)
            if p is not None and p.is_work:
                w = a.window(p)
                duration = w.duration_hours(p.duration_hours)
            else:
                duration = 0.0
            rows.append(
                {
                    "date": a.date,
                    "staff_id": a.staff_id,
                    "staff_name": s.name if s is not None else "",
                    "pattern_id": a.pattern_id,
                    "work_type": p.work_type.value if p is not None else "",
                    "unit_id": a.unit_id,
                    "start": a.override_start or (str(p.start) if p else ""),
                    "end": a.override_end or (str(p.end) if p else ""),
                    "duration_hours": duration,
                    "locked": a.locked,
                    "source": source.get(id(a), "input"),
                }
            )
        df = pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)
        return df.sort_values(["date", "staff_id"], kind="stable").reset_index(drop=True)

    def get_report_descriptors(self) -> list[dict]:
        if self._ctx is None:
            raise RuntimeError("Call evaluate() before get_report_descriptors().")
        return self._ctx.report_descriptors()
