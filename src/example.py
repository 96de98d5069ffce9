"""
Module with example code for running the shift planning pipeline.

There are three ways to run the code:

1. Run the code with default options. This will generate a synthetic
    scenario (units, patterns, staff and a base roster) from the config.
2. Run the code with a small scenario defined via code.
3. Run the code with a scenario pre-defined in a JSON file.

Usage via cli:
    python3 -m src.example --option 1
"""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta
from pathlib import Path

from shiftgrid import Config, InputData, run_pipeline
from shiftgrid.assignments import Assignment
from shiftgrid.generate.scenario import default_patterns, scenario_from_json
from shiftgrid.main import Reporter, default_input_builder
from shiftgrid.passes.base import PassSpec
from shiftgrid.passes.registry import default_pass_specs
from shiftgrid.passes.surplus import SurplusPoolPass
from shiftgrid.staff import EmploymentType, Staff
from shiftgrid.units import Unit

cfg = Config(
    DAYS=14,
    HOURS=24,
    START_DATE=datetime(2025, 11, 1),
    NIGHT_BAND_START=16,
    NIGHT_BAND_END=7,
    MIN_GAP_HOURS=2,
    SEED=11,
)


def _example_pass_specs() -> list[PassSpec]:
    """Default passes, but only shareable staff may feed the surplus pool."""
    specs = [s for s in default_pass_specs() if s.cls is not SurplusPoolPass]
    specs.append(
        PassSpec(cls=SurplusPoolPass, order=30, settings={"require_shareable": True})
    )
    return specs


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run shift planning examples.")
    parser.add_argument(
        "--option",
        type=int,
        default=3,
        choices=(1, 2, 3),
        help="Example scenario to run (default: 3).",
    )
    return parser.parse_args()


def run_option(option: int) -> None:
    print(f"Running example code with option {option}")

    # Run the code with default options. This will generate
    # a synthetic scenario from the config and plan it.
    if option == 1:

        # The parameters below are defaults, with the exception of config,
        # they can be omitted i.e. the below is equivalent to:
        # run_pipeline(cfg)
        run_pipeline(
            config=cfg,
            validate_config=True,
            input_builder=default_input_builder,
            reporter=Reporter(cfg),
            enable_reporting=True,
        )

    # Run the code with a scenario defined via code.
    elif option == 2:

        base = cfg.START_DATE.date()
        half_night = [0.5] * 7 + [1.0] * 9 + [0.5] * 8
        units = [
            Unit(id="A", name="Ward A", demand=[1.0] * 7 + [2.0] * 9 + [1.0] * 8),
            Unit(id="B", name="Ward B", demand=half_night),
        ]
        staff = [
            Staff(id="s1", name="Ana", pattern_ids=["E", "L", "N"], unit_id="A"),
            Staff(id="s2", name="Ben", pattern_ids=["E", "L"], unit_id="A"),
            Staff(id="s3", name="Cai", pattern_ids=["E", "L"], unit_id="B"),
            Staff(
                id="r1",
                name="Dev",
                employment=EmploymentType.RENTAL,
                pattern_ids=["R4", "R6", "R8"],
            ),
        ]
        assignments = [
            Assignment(date=base + timedelta(days=d), staff_id=sid, pattern_id=pid, unit_id=uid)
            for d in range(2, 7)
            for sid, pid, uid in (("s1", "E", "A"), ("s2", "L", "A"), ("s3", "E", "B"))
        ]

        run_pipeline(
            cfg,
            data=InputData(
                units=units,
                patterns=default_patterns(),
                staff=staff,
                cfg=cfg,
                assignments=assignments,
            ),
        )

    # Run the code with a scenario defined via JSON. Typical production use.
    elif option == 3:

        units, patterns, staff, assignments, rest_req = scenario_from_json(
            Path("src/example_scenario.json")
        )
        cfg.DAYS = 7
        cfg.DEFAULT_REQUIRED_REST_DAYS = 2
        run_pipeline(
            cfg,
            data=InputData(
                units=units,
                patterns=patterns,
                staff=staff,
                cfg=cfg,
                assignments=assignments,
                rest_requirements=rest_req,
            ),
            passes=_example_pass_specs(),
        )
    else:
        raise SystemExit(f"Unknown option {option}")


def main() -> None:
    args = parse_args()
    run_option(args.option)


if __name__ == "__main__":
    main()
