"""
Domain models for the working schedule and business quantities.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from pendulum import DateTime

from .exceptions import InvalidInputError


@dataclass(frozen=True)
class WorkSchedule:
    """
    Fixed weekly schedule with a morning and an afternoon block.

    Hours are whole local hours in ``timezone``. Weekend days use ISO
    numbering (1=Monday, 7=Sunday).

    Invariant: morning_start < morning_end <= afternoon_start < afternoon_end.
    """
    morning_start: int = 8
    morning_end: int = 12
    afternoon_start: int = 13
    afternoon_end: int = 17
    weekend_days: Tuple[int, ...] = (6, 7)
    timezone: str = "America/Bogota"
    max_search_days: int = 366

    def __post_init__(self):
        hours = (self.morning_start, self.morning_end, self.afternoon_start, self.afternoon_end)
        if any(not 0 <= hour <= 23 for hour in hours):
            raise ValueError(f"Schedule hours must be between 0 and 23, got {hours}")
        if not (
            self.morning_start < self.morning_end <= self.afternoon_start < self.afternoon_end
        ):
            raise ValueError(f"Schedule blocks are out of order: {hours}")
        invalid_days = [day for day in self.weekend_days if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"weekend_days must be between 1 and 7, got {invalid_days}")
        if self.max_search_days <= 0:
            raise ValueError("max_search_days must be greater than zero")

    def is_weekend(self, dt: DateTime) -> bool:
        """Check if the local date of ``dt`` falls on a weekend day."""
        return dt.in_timezone(self.timezone).isoweekday() in self.weekend_days

    def at_hour(self, dt: DateTime, hour: int) -> DateTime:
        """Return ``dt``'s local date at ``hour``:00:00.000."""
        return dt.in_timezone(self.timezone).set(hour=hour, minute=0, second=0, microsecond=0)

    def boundaries(self, dt: DateTime) -> Tuple[DateTime, DateTime, DateTime, DateTime]:
        """
        Get the four block boundaries for the local date of ``dt``.

        Returns:
            (morning_start, morning_end, afternoon_start, afternoon_end)
        """
        return (
            self.at_hour(dt, self.morning_start),
            self.at_hour(dt, self.morning_end),
            self.at_hour(dt, self.afternoon_start),
            self.at_hour(dt, self.afternoon_end),
        )


@dataclass(frozen=True)
class BusinessQuantity:
    """
    Whole business days plus a business-hour duration.

    Hours may be fractional; they are rounded to whole minutes exactly
    once, here, and never again while walking the schedule.
    """
    days: int = 0
    hours: float = 0

    def __post_init__(self):
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days < 0:
            raise InvalidInputError(f"days must be a non-negative integer, got {self.days!r}")
        if (
            isinstance(self.hours, bool)
            or not isinstance(self.hours, (int, float))
            or not math.isfinite(self.hours)
            or self.hours < 0
        ):
            raise InvalidInputError(f"hours must be a non-negative number, got {self.hours!r}")

    @property
    def minutes(self) -> int:
        """Business minutes to consume, rounded half up to the nearest minute."""
        return math.floor(self.hours * 60 + 0.5)

    def is_zero(self) -> bool:
        return self.days == 0 and self.minutes == 0

    def __str__(self) -> str:
        return f"{self.days} day(s) + {self.hours:g} hour(s)"
