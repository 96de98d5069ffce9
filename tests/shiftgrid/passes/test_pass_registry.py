from __future__ import annotations

from types import SimpleNamespace

import pytest

from shiftgrid.passes.base import PassSpec
from shiftgrid.passes.demand import DemandPass
from shiftgrid.passes.direct import DirectCoveragePass
from shiftgrid.passes.registry import (
    build_sequence,
    default_pass_specs,
    direct_only_pass_specs,
    normalize_pass_specs,
)
from shiftgrid.passes.support import HalfSupportPass
from shiftgrid.passes.surplus import SurplusPoolPass


def test_normalize_pass_specs_accepts_classes():
    specs = normalize_pass_specs([HalfSupportPass])
    assert len(specs) == 1
    assert specs[0].cls is HalfSupportPass
    assert specs[0].order is None


def test_normalize_pass_specs_rejects_other_objects():
    with pytest.raises(TypeError, match="PassSpec"):
        normalize_pass_specs([object()])


def test_default_pass_specs_returns_fresh_instances():
    first = default_pass_specs()
    second = default_pass_specs()
    assert [s.cls for s in first] == [
        DemandPass,
        DirectCoveragePass,
        HalfSupportPass,
        SurplusPoolPass,
    ]
    first[-1].settings["require_shareable"] = True
    assert second[-1].settings["require_shareable"] is False


def test_direct_only_pass_specs():
    assert [s.cls for s in direct_only_pass_specs()] == [DemandPass, DirectCoveragePass]


def test_build_sequence_sorts_and_skips_disabled():
    ctx = SimpleNamespace()
    specs = [
        PassSpec(SurplusPoolPass, order=30),
        PassSpec(DemandPass),
        PassSpec(HalfSupportPass, enabled=False),
        PassSpec(DirectCoveragePass, order=5, settings={"note": "x"}),
    ]
    seq = build_sequence(ctx, specs)  # type: ignore[arg-type]
    assert [type(p) for p in seq] == [DemandPass, DirectCoveragePass, SurplusPoolPass]
    assert seq[1].setting("note", None) == "x"
    assert seq[2].setting("missing", 7) == 7
