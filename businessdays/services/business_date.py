"""
Application service for business date calculations.

The service resolves the starting instant, warms the holiday cache so an
unreachable source fails before any arithmetic, and delegates the actual
computation to the domain-level ``BusinessTimeCalculator``. Each call works
on its own values; the only shared state is the holiday cache.
"""

from __future__ import annotations

import logging

import pendulum
from pendulum import DateTime

from ..adapters.holiday_cache import HolidayCache
from ..domain.business_time import BusinessTimeCalculator
from ..domain.calendar import HolidayCalendarProtocol, WorkingCalendar
from ..domain.models import BusinessQuantity, WorkSchedule

logger = logging.getLogger(__name__)


def format_utc(dt: DateTime) -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SSZ`` without sub-seconds."""
    return dt.in_timezone("UTC").strftime("%Y-%m-%dT%H:%M:%SZ")


class BusinessDateService:
    """
    Orchestrates calendar warm-up and business time calculation.

    The holiday predicate is injected, so callers choose between a
    pre-fetched ``StaticHolidayCalendar`` and the on-demand calendar of a
    ``HolidayCache``.
    """

    def __init__(
        self,
        schedule: WorkSchedule,
        holidays: HolidayCalendarProtocol | None = None,
        cache: HolidayCache | None = None,
        prefetch_years_ahead: int = 1,
    ) -> None:
        self.schedule = schedule
        self._cache = cache
        self._prefetch_years_ahead = prefetch_years_ahead

        if holidays is None and cache is not None:
            holidays = cache.calendar()
        self._calculator = BusinessTimeCalculator(WorkingCalendar(schedule, holidays))

    @classmethod
    def from_cache(
        cls,
        schedule: WorkSchedule,
        cache: HolidayCache,
        prefetch_years_ahead: int = 1,
    ) -> "BusinessDateService":
        return cls(schedule, cache=cache, prefetch_years_ahead=prefetch_years_ahead)

    def now(self) -> DateTime:
        return pendulum.now(self.schedule.timezone)

    async def warm_up(self, start: DateTime) -> None:
        """
        Make sure holidays around ``start`` are loaded.

        Raises:
            CalendarSourceUnavailableError: If the holiday source fails
        """
        if self._cache is None:
            return

        first_year = start.in_timezone(self.schedule.timezone).year
        # The previous year is needed when normalization rolls back past New Year
        years = range(first_year - 1, first_year + self._prefetch_years_ahead + 1)
        await self._cache.prefetch(years)

    async def compute(
        self,
        *,
        start: DateTime | None = None,
        days: int = 0,
        hours: float = 0,
    ) -> DateTime:
        """
        Normalize ``start`` and add the business quantity to it.

        Returns:
            Resulting instant in UTC
        """
        quantity = BusinessQuantity(days=days, hours=hours)
        start = pendulum.instance(start) if start is not None else self.now()

        await self.warm_up(start)
        result = await self._calculator.apply(start, quantity)

        logger.info("%s + %s -> %s", format_utc(start), quantity, format_utc(result))
        return result.in_timezone("UTC")
