from __future__ import annotations

import pytest

from shiftgrid.timegrid import (
    FixedWindow,
    FlexWindow,
    HourSegment,
    TimeOfDay,
    hour_segments,
    parse_hhmm,
    span_hours,
)


@pytest.mark.parametrize(
    "raw, minutes",
    [
        ("08:30", 510),
        ("7:05", 425),
        ("24:00", 1440),
        ("09:00:00", 540),
        (None, 0),
        ("", 0),
        ("25:00", 0),
        ("12:75", 0),
        ("noon", 0),
        (930, 0),
    ],
)
def test_parse_hhmm_is_total(raw, minutes) -> None:
    assert parse_hhmm(raw) == minutes


def test_time_of_day_hour_helpers() -> None:
    t = TimeOfDay.parse("08:30")
    assert t.hour == 8
    assert t.ceil_hour == 9
    assert TimeOfDay.parse("16:00").ceil_hour == 16
    assert str(t) == "08:30"
    assert TimeOfDay.parse(t) == t
    assert TimeOfDay.parse("07:00") < TimeOfDay.parse("07:01")


def test_span_hours_wraps_past_midnight() -> None:
    assert span_hours(TimeOfDay.parse("09:00"), TimeOfDay.parse("13:30")) == 4.5
    assert span_hours(TimeOfDay.parse("22:00"), TimeOfDay.parse("06:00")) == 8.0


def test_flex_window_uses_override_only_when_both_ends_given() -> None:
    frame = (TimeOfDay.parse("07:00"), TimeOfDay.parse("22:00"))
    full = FlexWindow(*frame, TimeOfDay.parse("10:00"), TimeOfDay.parse("14:30"))
    assert full.start_hour == 10
    assert full.duration_hours(6) == 4.5

    start_only = FlexWindow(*frame, actual_start=TimeOfDay.parse("11:00"))
    assert start_only.start_hour == 11
    assert start_only.duration_hours(6) == 6.0

    assert FixedWindow(*frame).duration_hours(9) == 9.0
    assert FixedWindow(*frame).start_hour == 7


def test_hour_segments_same_day() -> None:
    assert hour_segments(9, 4, False) == [HourSegment(0, 9, 13)]
    # fractional duration rounds the end hour up
    assert hour_segments(9, 3.5, False) == [HourSegment(0, 9, 13)]


def test_hour_segments_spill_into_next_day() -> None:
    segs = hour_segments(16, 17, True)
    assert segs == [HourSegment(0, 16, 24), HourSegment(1, 0, 9)]
    assert list(segs[1].hours()) == list(range(0, 9))


def test_hour_segments_overflow_without_crossing_flag() -> None:
    assert hour_segments(20, 6, False) == [HourSegment(0, 20, 24), HourSegment(1, 0, 2)]


def test_hour_segments_crossing_flag_without_overflow_adds_nothing() -> None:
    assert hour_segments(20, 3, True) == [HourSegment(0, 20, 23)]


def test_hour_segments_zero_duration_is_empty() -> None:
    assert hour_segments(10, 0, False) == []
