from __future__ import annotations

from datetime import date, datetime

import pytest

from shiftgrid.config import Config, cfg, hours_between, is_weekend


def test_default_config_is_valid() -> None:
    cfg.validate()
    assert cfg.start == date(2025, 11, 1)
    assert cfg.end_date == date(2025, 11, 30)
    assert len(cfg.dates()) == cfg.DAYS


@pytest.mark.parametrize(
    "field, value, match",
    [
        ("DAYS", 0, "DAYS"),
        ("HOURS", 48, "HOURS must be 24"),
        ("NIGHT_BAND_START", 24, "NIGHT_BAND_START"),
        ("HALF_DEMAND", 0.0, "HALF_DEMAND"),
        ("MAX_TRANSFER_PER_CELL", -1.0, "MAX_TRANSFER_PER_CELL"),
        ("MIN_SURPLUS_CONTRIBUTION", -0.5, "MIN_SURPLUS_CONTRIBUTION"),
        ("MIN_GAP_HOURS", 0, "MIN_GAP_HOURS"),
        ("DEFAULT_REQUIRED_REST_DAYS", 40, "DEFAULT_REQUIRED_REST_DAYS"),
        ("BURDEN_WEEKS", 0, "BURDEN_WEEKS"),
        ("PART_TIME_WINDOW", ("08:00",), "PART_TIME_WINDOW"),
    ],
)
def test_validate_names_the_offending_field(field, value, match) -> None:
    c = Config()
    setattr(c, field, value)
    with pytest.raises(ValueError, match=match):
        c.validate()


def test_default_rest_days_counts_weekend_days() -> None:
    # 2025-11-01 is a Saturday: 7 days hold one Saturday and one Sunday
    c = Config(DAYS=7, START_DATE=datetime(2025, 11, 1))
    assert c.default_rest_days() == 2
    c.DEFAULT_REQUIRED_REST_DAYS = 3
    assert c.default_rest_days() == 3


def test_night_band_wraps_midnight() -> None:
    night = Config(NIGHT_BAND_START=16, NIGHT_BAND_END=7).night_hours()
    assert [h for h in range(24) if night(h)] == list(range(0, 7)) + list(range(16, 24))


def test_hours_between_plain_range() -> None:
    pred = hours_between(9, 12)
    assert [h for h in range(24) if pred(h)] == [9, 10, 11]
    assert not pred(24)


def test_is_weekend() -> None:
    assert is_weekend(date(2025, 11, 1))
    assert is_weekend(date(2025, 11, 2))
    assert not is_weekend(date(2025, 11, 3))
