from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.generate.scenario import (
    ScenarioGenConfig,
    create_base_roster,
    create_scenario,
)
from shiftgrid.patterns import ShiftPattern
from shiftgrid.staff import Staff
from shiftgrid.units import Unit


def _index_by_id(items: list, kind: str) -> dict:
    out: dict = {}
    for item in items:
        if item.id in out:
            raise ValueError(f"Duplicate {kind} id {item.id!r}.")
        out[item.id] = item
    return out


@dataclass
class InputData:
    units: list[Unit]
    patterns: list[ShiftPattern]
    staff: list[Staff]
    cfg: Config
    assignments: list[Assignment] = field(default_factory=list)
    # staff id -> required rest days; missing ids use cfg.default_rest_days()
    rest_requirements: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.unit_by_id: dict[str, Unit] = _index_by_id(self.units, "unit")
        self.pattern_by_id: dict[str, ShiftPattern] = _index_by_id(
            self.patterns, "pattern"
        )
        self.staff_by_id: dict[str, Staff] = _index_by_id(self.staff, "staff")

    def required_rest_days(self) -> dict[str, int]:
        default = self.cfg.default_rest_days()
        return {s.id: int(self.rest_requirements.get(s.id, default)) for s in self.staff}

    def rest_pattern(self) -> Optional[ShiftPattern]:
        return next((p for p in self.patterns if p.is_rest_day), None)


def build_input(cfg: Config, seed: int = 7) -> InputData:
    """
    Build an InputData object with a synthetic scenario for the Config's period.

    Parameters:
    cfg (Config): the configuration to use
    seed (int, optional): the random seed to use. Defaults to 7.

    Returns:
    InputData: the generated input data
    """
    gen_cfg = ScenarioGenConfig(seed=seed)
    gen_cfg.validate()
    units, patterns, staff = create_scenario(gen_cfg)
    assignments = create_base_roster(staff, patterns, cfg.dates(), gen_cfg)
    return InputData(
        units=units, patterns=patterns, staff=staff, cfg=cfg, assignments=assignments
    )
