# shiftgrid/precheck.py
from __future__ import annotations

import sys
from datetime import date
from typing import Any, Dict, List, Tuple

from shiftgrid.allocation.holidays import band_capacity, band_peaks, partition_staff
from shiftgrid.assignments import Assignment
from shiftgrid.config import Config
from shiftgrid.input_data import InputData


def _strippable_rest_day(a: Assignment, data: InputData) -> bool:
    p = data.pattern_by_id.get(a.pattern_id)
    return p is not None and p.is_rest_day and not a.locked


def precheck_rest_capacity(
    cfg: Config,
    data: InputData,
    *,
    verbose: bool = True,
    examples_per_band: int = 3,
    stream=None,
) -> Tuple[
    float,  # capacity
    int,  # required
    bool,  # ok_cap
    Dict[str, List[date]],  # zero-capacity days per band
    Dict[str, Dict[str, Any]],  # band_stats
]:
    """
    Returns:
      capacity: rest-day slots over the period summed across the night and day bands
      required: rest days required by full-time staff
      ok_cap: every band has at least as many slots as its staff require
      zero_days[band]: dates on which the band has no rest-day slot at all
      band_stats[band]: {
          'staff_count': members of the band,
          'peak_demand': peak summed unit demand inside the band's hours,
          'capacity': total slots over the period,
          'required': rest days required by band members,
          'slack': capacity - required,
      }
    Part-time/rental staff are reported under 'part-time' with unconstrained
    capacity (one slot per day per person).
    If `verbose` is True, the header and per-band lines are printed to `stream`.
    """
    stream = stream or sys.stdout
    dates = cfg.dates()
    groups = partition_staff(data.staff, data.pattern_by_id)
    peak_night, peak_day = band_peaks(data.units, cfg)
    required_by_staff = data.required_rest_days()
    existing = [a for a in data.assignments if not _strippable_rest_day(a, data)]

    zero_days: Dict[str, List[date]] = {}
    band_stats: Dict[str, Dict[str, Any]] = {}
    for band, group, peak in (
        ("night", groups.night, peak_night),
        ("day", groups.day, peak_day),
    ):
        capacity = band_capacity(group, peak, existing, data.pattern_by_id, dates)
        total = float(sum(capacity.values()))
        required = sum(required_by_staff[s.id] for s in group)
        zero_days[band] = [d for d in dates if capacity[d] <= 0]
        band_stats[band] = {
            "staff_count": len(group),
            "peak_demand": peak,
            "capacity": total,
            "required": required,
            "slack": total - required,
        }

    pt_required = sum(required_by_staff[s.id] for s in groups.part_time)
    band_stats["part-time"] = {
        "staff_count": len(groups.part_time),
        "peak_demand": 0.0,
        "capacity": float(len(groups.part_time) * len(dates)),
        "required": pt_required,
        "slack": float(len(groups.part_time) * len(dates)) - pt_required,
    }
    zero_days["part-time"] = []

    cap = band_stats["night"]["capacity"] + band_stats["day"]["capacity"]
    req = band_stats["night"]["required"] + band_stats["day"]["required"]
    ok_cap = all(band_stats[b]["slack"] >= 0 for b in ("night", "day"))

    if verbose:
        print_precheck_header(cap, req, ok_cap, stream=stream)
        print_band_status(
            band_stats,
            zero_days=zero_days,
            examples_per_band=examples_per_band,
            stream=stream,
        )

    return cap, req, ok_cap, zero_days, band_stats


def print_precheck_header(
    cap: float, req: int, ok_cap: bool, *, stream=sys.stdout
) -> None:
    """Print 'Pre-check' on its own line, then capacity line with ✅/❌"""
    print("\nPre-check:\n", file=stream)
    if ok_cap:
        print(
            f"✅ Rest-day capacity = {cap:,.1f} | required rest days = {req:,} | OK",
            file=stream,
        )
    else:
        print(
            f"❌ Rest-day capacity = {cap:,.1f} | required rest days = {req:,} | NOT OK",
            file=stream,
        )
    print(
        "ℹ️  Pre-check only compares band totals; placement may still fall short on "
        "individual days or staff.",
        file=stream,
    )


def print_band_status(
    band_stats: Dict[str, Dict[str, Any]],
    *,
    zero_days: Dict[str, List[date]],
    examples_per_band: int = 3,
    stream=sys.stdout,
) -> None:
    """
    One line per band using ✅/❌ only
    Shows: staff S, capacity C vs required R (peak demand P). Examples of full days.
    """
    for band in ("night", "day", "part-time"):
        st = band_stats.get(band)
        if st is None:
            continue
        suffix = (
            f" | staff {st['staff_count']}, capacity {st['capacity']:,.1f}, "
            f"required {st['required']:,}"
        )
        if band != "part-time":
            suffix += f" (peak demand={st['peak_demand']:g})"

        days = zero_days.get(band, [])
        sample = ", ".join(d.isoformat() for d in days[:examples_per_band])
        more = (
            f", +{len(days) - examples_per_band} more"
            if len(days) > examples_per_band
            else ""
        )
        full = f" — no slot on {sample}{more}" if sample else ""

        if st["slack"] >= 0:
            print(f"✅ {band} — satisfied{suffix}{full}", file=stream)
        else:
            print(
                f"❌ {band} — short by {-st['slack']:,.1f} rest day(s){suffix}{full}",
                file=stream,
            )
