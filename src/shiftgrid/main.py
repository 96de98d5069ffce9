from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence, Type

import pandas as pd

from shiftgrid.config import Config, cfg
from shiftgrid.input_data import InputData, build_input
from shiftgrid.model import ShiftPlanner
from shiftgrid.passes.base import CoveragePass, PassSpec
from shiftgrid.reporting import Reporter
from shiftgrid.reporting.metrics import daily_coverage
from shiftgrid.result_types import PipelineResult

InputBuilder = Callable[[Config], InputData]

OUTPUT_DIR = Path("outputs")


def default_input_builder(config: Config) -> InputData:
    """Build synthetic input data using the project's helper."""
    seed = config.SEED if config.SEED is not None else 7
    return build_input(config, seed=seed)


def run_pipeline(
    config: Config | None = None,
    data: InputData | None = None,
    input_builder: InputBuilder | None = None,
    reporter: Reporter | None = None,
    validate_config: bool = True,
    enable_reporting: bool = True,
    passes: Sequence[PassSpec | Type[CoveragePass]] | None = None,
    fill_gaps: bool = True,
) -> PipelineResult:
    """
    Allocate rest days and auxiliary shifts, evaluate coverage and optionally report.

    Parameters
    ----------
    config:
        The configuration for the run. Defaults to `shiftgrid.config.cfg` when omitted.
    data:
        Pre-built `InputData`. When omitted then `input_builder` (or the default synthetic
        builder) is used to construct data from the given config.
    input_builder:
        Optional callable that accepts a `Config` and returns `InputData`. Ignored when
        `data` is supplied.
    reporter:
        Custom reporter instance. When `enable_reporting` is True and no reporter is
        provided, the default `Reporter` is used.
    validate_config:
        Toggle to run `Config.validate()` before building inputs.
    enable_reporting:
        When False, skips the pre-check prompt, the text/PDF report and the plots.
        CSV exports are always written.
    passes:
        Optional coverage pass list. `None` falls back to the library defaults.
    fill_gaps:
        When False, auxiliary staff are not placed into residual gaps.

    Returns
    -------
    PipelineResult
        Final assignments, the coverage grid and the tabular views of both.
    """
    cfg_obj = config or cfg

    if validate_config:
        cfg_obj.validate()

    input_data = data
    if input_data is None:
        builder = input_builder or default_input_builder
        input_data = builder(cfg_obj)

    if input_data.cfg is not cfg_obj and input_data.cfg.dates() != cfg_obj.dates():
        raise ValueError(
            f"Config period {cfg_obj.start}..{cfg_obj.end_date} does not match the "
            f"input data period {input_data.cfg.start}..{input_data.cfg.end_date}."
        )

    planner = ShiftPlanner(cfg_obj, input_data, passes=passes, fill_gaps=fill_gaps)

    active_reporter = reporter if enable_reporting else None
    if active_reporter is None and enable_reporting:
        active_reporter = Reporter(cfg_obj)

    if active_reporter is not None:
        active_reporter.pre_allocate(planner, stage="precheck")

    result = planner.run()

    if active_reporter is not None:
        active_reporter.post_allocate(result, input_data)

    _export_coverage_reports(result)

    return result


def main() -> PipelineResult:
    """CLI entry point using the default config and synthetic data."""
    return run_pipeline(
        config=cfg,
        validate_config=True,
        input_builder=default_input_builder,
        reporter=Reporter(cfg),
        enable_reporting=True,
    )


def _export_coverage_reports(res: PipelineResult, out_dir: Path = OUTPUT_DIR) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    df = res.df_coverage
    if not df.empty:
        hourly = df.pivot_table(
            index=["date", "hour"],
            columns="unit_id",
            values=["required", "actual"],
            aggfunc="sum",
            fill_value=0.0,
        )
        hourly.columns = [f"{unit}_{value}" for value, unit in hourly.columns]
        hourly = hourly[sorted(hourly.columns)]
        hourly.to_csv(out_dir / "coverage_hourly.csv")

        daily = daily_coverage(res.grid)
        daily["date"] = pd.to_datetime(daily["date"]).dt.date
        daily.to_csv(out_dir / "coverage_daily.csv", index=False)

    res.df_assignments.to_csv(out_dir / "assignments.csv", index=False)
    res.df_burden.to_csv(out_dir / "staff_burden.csv", index=False)


if __name__ == "__main__":
    main()
