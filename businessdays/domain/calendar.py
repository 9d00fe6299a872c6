"""
Working calendar: weekend rule plus an injected holiday predicate.

The holiday predicate may answer synchronously (a pre-fetched set) or hand
back an awaitable (an on-demand lookup). ``WorkingCalendar`` hides the
difference so the engine only ever awaits ``is_working_day``.
"""

import inspect
from datetime import date
from typing import Awaitable, Iterable, Protocol, Union

from pendulum import DateTime

from .models import WorkSchedule


class HolidayCalendarProtocol(Protocol):
    """Protocol describing a holiday lookup for a civil date."""

    def is_holiday(self, day: date) -> Union[bool, Awaitable[bool]]:
        """Return whether ``day`` is a holiday, possibly as an awaitable."""


class StaticHolidayCalendar:
    """Pre-materialized holiday set with a synchronous membership test."""

    def __init__(self, dates: Iterable[Union[str, date]] = ()):
        self._dates = frozenset(
            d.isoformat()[:10] if isinstance(d, date) else str(d)[:10]
            for d in dates
        )

    def is_holiday(self, day: date) -> bool:
        return day.isoformat()[:10] in self._dates


class WorkingCalendar:
    """
    Decides whether a date is a working day under a schedule.

    Dates are always judged on the local calendar of the schedule
    timezone, whatever zone the incoming instant carries.
    """

    def __init__(
        self,
        schedule: WorkSchedule,
        holidays: HolidayCalendarProtocol | None = None,
    ):
        self.schedule = schedule
        self._holidays = holidays if holidays is not None else StaticHolidayCalendar()

    def is_weekend(self, dt: DateTime) -> bool:
        return self.schedule.is_weekend(dt)

    async def is_holiday(self, dt: DateTime) -> bool:
        local_date = dt.in_timezone(self.schedule.timezone).date()
        result = self._holidays.is_holiday(local_date)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    async def is_working_day(self, dt: DateTime) -> bool:
        """Check if ``dt`` falls on a day that is neither weekend nor holiday."""
        if self.is_weekend(dt):
            return False
        return not await self.is_holiday(dt)
