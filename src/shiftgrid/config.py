# src/shiftgrid/config.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional


@dataclass
class Config:

    # Planning horizon
    DAYS: int = 30
    HOURS: int = 24
    START_DATE: datetime = datetime(2025, 11, 1)  # Saturday

    ### DEMAND BANDS ###

    # Night band wraps midnight: hour >= START or hour < END
    NIGHT_BAND_START: int = 16
    NIGHT_BAND_END: int = 7

    ### CROSS-UNIT REDISTRIBUTION ###

    # Smallest demand step; also the size of a support top-up
    HALF_DEMAND: float = 0.5
    MAX_TRANSFER_PER_CELL: float = 1.0
    MIN_SURPLUS_CONTRIBUTION: float = 0.5

    ### ALLOCATION ###

    MIN_GAP_HOURS: int = 2

    # None = number of weekend days in the period
    DEFAULT_REQUIRED_REST_DAYS: Optional[int] = None

    # Part-time contract window when a staff member declares none
    PART_TIME_WINDOW: tuple[str, str] = ("08:00", "20:00")

    ### BURDEN SUMMARY ###

    DEFAULT_MAX_CONSEC_DAYS: int = 5
    BURDEN_HOURS_PER_DAY: int = 8
    BURDEN_WEEKS: int = 4

    # RANDOM SEED
    SEED: Optional[int] = None

    def validate(self):
        """
        Validate the Config object has sensible values before allocating.
        """
        if self.DAYS <= 0:
            raise ValueError("DAYS must be > 0.")
        if self.HOURS != 24:
            raise ValueError("HOURS must be 24; demand is declared per hour-of-day.")
        for attr in ("NIGHT_BAND_START", "NIGHT_BAND_END"):
            val = getattr(self, attr)
            if not (0 <= val <= 23):
                raise ValueError(f"{attr} must be within [0, 23].")
        if self.HALF_DEMAND <= 0.0:
            raise ValueError("HALF_DEMAND must be > 0.")
        if self.MAX_TRANSFER_PER_CELL <= 0.0:
            raise ValueError("MAX_TRANSFER_PER_CELL must be > 0.")
        if self.MIN_SURPLUS_CONTRIBUTION < 0.0:
            raise ValueError("MIN_SURPLUS_CONTRIBUTION must be non-negative.")
        if self.MIN_GAP_HOURS < 1:
            raise ValueError("MIN_GAP_HOURS must be >= 1.")
        if (
            self.DEFAULT_REQUIRED_REST_DAYS is not None
            and not 0 <= self.DEFAULT_REQUIRED_REST_DAYS <= self.DAYS
        ):
            raise ValueError("DEFAULT_REQUIRED_REST_DAYS must be in [0, DAYS].")
        for attr in ("DEFAULT_MAX_CONSEC_DAYS", "BURDEN_HOURS_PER_DAY", "BURDEN_WEEKS"):
            if getattr(self, attr) <= 0:
                raise ValueError(f"{attr} must be > 0.")
        if len(self.PART_TIME_WINDOW) != 2:
            raise ValueError("PART_TIME_WINDOW must be a (start, end) pair.")

    @property
    def start(self) -> date:
        return self.START_DATE.date()

    @property
    def end_date(self) -> date:
        """Last day of the period (inclusive)."""
        return self.start + timedelta(days=self.DAYS - 1)

    def dates(self) -> list[date]:
        return [self.start + timedelta(days=d) for d in range(self.DAYS)]

    def default_rest_days(self) -> int:
        """
        Required rest days for staff without an explicit requirement.
        Falls back to the number of Saturdays and Sundays in the period.
        """
        if self.DEFAULT_REQUIRED_REST_DAYS is not None:
            return self.DEFAULT_REQUIRED_REST_DAYS
        return sum(1 for d in self.dates() if is_weekend(d))

    def night_hours(self) -> Callable[[int], bool]:
        return hours_between(self.NIGHT_BAND_START, self.NIGHT_BAND_END, period=self.HOURS)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def hours_between(
    start: float, end: float, *, period: int = 24
) -> Callable[[int], bool]:
    """
    Start inclusive, end exclusive, wrapping on 'period'.
    Works with float boundaries (e.g., 22.5 to 6.0). Predicate takes int hour index.
    """
    start = float(start) % period
    end = float(end) % period
    length = (end - start) % period
    return lambda h: 0 <= h < period and ((h - start) % period) < length


cfg = Config(
    DAYS=30,
    START_DATE=datetime(2025, 11, 1),
    NIGHT_BAND_START=16,
    NIGHT_BAND_END=7,
    MIN_GAP_HOURS=2,
    SEED=3,
)
