from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

from shiftgrid.input_data import InputData
from shiftgrid.reporting.adapters import PandasResultAdapter, ResultAdapter
from shiftgrid.reporting.plots import (
    show_coverage_heatmap,
    show_daily_unit_gantt,
    show_hour_of_day_coverage,
)
from shiftgrid.reporting.text_report import (
    ReportDocument,
    render_text_report,
    set_active_report,
)
from shiftgrid.reporting.unit_groups import compute_unit_groups
from shiftgrid.result_types import PipelineResult


class Reporter:
    """High-level orchestrator: runs pre-check confirmations and renders reports."""

    def __init__(
        self,
        cfg: Any,
        adapter: ResultAdapter | None = None,
        num_print_examples: int = 6,
        enable_plots: bool = True,
        report_path: Path = Path("outputs/report.pdf"),
    ) -> None:
        """
        cfg must expose:
          - DAYS / START_DATE (period)
          - start / end_date
        """
        self.cfg = cfg
        self.adapter: ResultAdapter = adapter or PandasResultAdapter()
        self.num_print_examples = num_print_examples
        self.enable_plots = enable_plots
        self.report_path = report_path

    def pre_allocate(self, planner: object, *, stage: str = "precheck") -> None:
        """
        stage="precheck" -> run the rest-day capacity pre-check and ask whether to
        continue when it fails. Other stages are ignored.
        """
        if stage != "precheck":
            return

        precheck = getattr(planner, "precheck", None)
        if not callable(precheck):
            print("Pre-check: (planner has no `precheck()`; skipping)")
            return

        cap, req, ok_cap, *_ = precheck()
        if not ok_cap:
            proceed = self._prompt_yes_no_default_yes(
                "Pre-check indicates too few rest-day slots. Continue anyway?"
            )
            if not proceed:
                raise SystemExit("Stopped by user after failed pre-check.")

    def render_text_report(self, res: object, data: object) -> None:
        """Public entry point for callers that want text reporting only."""
        render_text_report(
            self.cfg,
            self.adapter,
            res,
            data,  # type: ignore[arg-type]
            num_print_examples=self.num_print_examples,
        )

    def post_allocate(self, res: PipelineResult, data: InputData) -> None:
        """Render textual report (and optional plots), then write the PDF."""
        report_doc = ReportDocument(self.report_path)
        set_active_report(report_doc)
        try:
            self.render_text_report(res, data)
            grid = self.adapter.grid(res)
            if not self.enable_plots or grid is None:
                return
            show_hour_of_day_coverage(grid, enable_plot=self.enable_plots)
            show_coverage_heatmap(grid, enable_plot=self.enable_plots)
            day = self._busiest_deficit_day(res)
            if day is not None:
                groups = compute_unit_groups(
                    day,
                    data.units,
                    res.assignments,
                    data.pattern_by_id,
                    data.staff_by_id,
                )
                night_ids = [p.id for p in data.patterns if p.is_night_shift]
                show_daily_unit_gantt(groups, day, night_pattern_ids=night_ids)
        finally:
            set_active_report(None)
            report_doc.write()

    # ---------- helpers ----------

    def _busiest_deficit_day(self, res: Any) -> Optional[Any]:
        """Date with the largest summed deficit, else the first date."""
        grid = self.adapter.grid(res)
        if grid is None or not grid.dates:
            return None
        per_day = grid.deficit().sum(axis=(1, 2))
        return grid.dates[int(per_day.argmax())]

    def _prompt_yes_no_default_yes(self, msg: str) -> bool:
        """Prompt '[Y/n]' and return True for yes (default)."""
        try:
            if not sys.stdin or not sys.stdin.isatty():
                print(f"{msg} [Y/n] (non-interactive -> default: Y)")
                return True

            while True:
                resp = input(f"{msg} [Y/n]: ").strip().lower()
                if resp in ("", "y", "yes"):
                    return True
                if resp in ("n", "no"):
                    return False
                print("Please type 'y' or 'n'.")
        except (EOFError, KeyboardInterrupt):
            print("\nAborted by user.")
            return False
