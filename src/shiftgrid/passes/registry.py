from __future__ import annotations

from typing import Sequence, Tuple, Type

from shiftgrid.passes.base import CoverageCtxProto, CoveragePass, PassSpec
from shiftgrid.passes.demand import DemandPass
from shiftgrid.passes.direct import DirectCoveragePass
from shiftgrid.passes.support import HalfSupportPass
from shiftgrid.passes.surplus import SurplusPoolPass

PassTemplate = Tuple[Type[CoveragePass], int, dict[str, object]]

DEMAND_PASS_TEMPLATE: PassTemplate = (DemandPass, 0, {})
DIRECT_PASS_TEMPLATE: PassTemplate = (DirectCoveragePass, 10, {})
HALF_SUPPORT_PASS_TEMPLATE: PassTemplate = (HalfSupportPass, 20, {})
SURPLUS_POOL_PASS_TEMPLATE: PassTemplate = (
    SurplusPoolPass,
    30,
    {"require_shareable": False},
)
_DEFAULT_PASS_TEMPLATES: list[PassTemplate] = [
    DEMAND_PASS_TEMPLATE,
    DIRECT_PASS_TEMPLATE,
    HALF_SUPPORT_PASS_TEMPLATE,
    SURPLUS_POOL_PASS_TEMPLATE,
]


def default_pass_specs() -> list[PassSpec]:
    """Return fresh copies of the default pass specifications."""
    specs: list[PassSpec] = []
    for cls, order, settings in _DEFAULT_PASS_TEMPLATES:
        specs.append(PassSpec(cls=cls, order=order, settings=dict(settings)))
    return specs


def direct_only_pass_specs() -> list[PassSpec]:
    """Demand + direct coverage, without cross-unit redistribution."""
    return [
        PassSpec(cls=cls, order=order, settings=dict(settings))
        for cls, order, settings in (DEMAND_PASS_TEMPLATE, DIRECT_PASS_TEMPLATE)
    ]


def normalize_pass_specs(
    passes: Sequence[PassSpec | Type[CoveragePass]] | None,
) -> list[PassSpec]:
    """Turn user-provided passes into PassSpec objects."""
    if passes is None:
        return default_pass_specs()

    normalized: list[PassSpec] = []
    for item in passes:
        if isinstance(item, PassSpec):
            normalized.append(item)
        elif isinstance(item, type) and issubclass(item, CoveragePass):
            normalized.append(PassSpec(cls=item))
        else:
            raise TypeError(
                "Passes must be PassSpec instances or CoveragePass subclasses; "
                f"got {type(item)!r}"
            )
    return normalized


def build_sequence(
    ctx: CoverageCtxProto, specs: Sequence[PassSpec]
) -> list[CoveragePass]:
    """Instantiate enabled passes sorted by order (spec order, else class order)."""
    ranked: list[tuple[int, int, CoveragePass]] = []
    for i, spec in enumerate(specs):
        if not spec.enabled:
            continue
        instance = spec.cls(ctx, **spec.settings)
        if not instance.enabled:
            continue
        order = spec.order if spec.order is not None else instance.order
        ranked.append((order, i, instance))
    ranked.sort(key=lambda t: (t[0], t[1]))
    return [p for _, _, p in ranked]
