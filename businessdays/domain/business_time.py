"""
Core business-time arithmetic.

This is the heart of the application - pure domain logic over a working
calendar. The only suspension point is the holiday lookup behind
``WorkingCalendar.is_working_day``, which is awaited one date at a time.
"""

import logging

import pendulum
from pendulum import DateTime

from .calendar import WorkingCalendar
from .exceptions import CalendarExhaustedError
from .models import BusinessQuantity

logger = logging.getLogger(__name__)


class BusinessTimeCalculator:
    """
    Adds business days and business hours to an instant.

    Algorithm (see ``apply``):
    1. Normalize the start backward to the latest legal working instant
    2. Advance whole business days, keeping the time of day
    3. Consume business minutes block by block, skipping lunch,
       weekends and holidays
    """

    def __init__(self, calendar: WorkingCalendar):
        self.calendar = calendar
        self.schedule = calendar.schedule

    def _local(self, dt: DateTime) -> DateTime:
        return pendulum.instance(dt).in_timezone(self.schedule.timezone)

    async def _step_to_working_day(self, cursor: DateTime, step_days: int) -> DateTime:
        """
        Move ``step_days`` at a time until landing on a working day.

        At least one step is always taken. The time of day is preserved.

        Raises:
            CalendarExhaustedError: If no working day shows up within
                ``max_search_days`` steps
        """
        for _ in range(self.schedule.max_search_days):
            cursor = cursor.add(days=step_days)
            if await self.calendar.is_working_day(cursor):
                return cursor

        raise CalendarExhaustedError(
            f"No working day found within {self.schedule.max_search_days} days "
            f"{'after' if step_days > 0 else 'before'} {cursor.to_date_string()}"
        )

    async def previous_working_day(self, dt: DateTime) -> DateTime:
        """
        Get the end of the last working day strictly before ``dt``'s date.

        Returns:
            That day at the afternoon block end (17:00:00.000 by default)
        """
        day = await self._step_to_working_day(self._local(dt).start_of("day"), -1)
        return self.schedule.at_hour(day, self.schedule.afternoon_end)

    async def normalize_backward(self, dt: DateTime) -> DateTime:
        """
        Snap ``dt`` back to the latest working instant not after it.

        Non-working days and early mornings roll back to the previous
        working day's close; lunch clamps to the morning block end;
        evenings clamp to the same day's close.
        """
        cursor = self._local(dt)
        schedule = self.schedule

        if not await self.calendar.is_working_day(cursor):
            result = await self.previous_working_day(cursor)
            logger.debug("normalize %s: non-working day -> %s", cursor, result)
            return result

        if cursor.hour < schedule.morning_start:
            result = await self.previous_working_day(cursor)
            logger.debug("normalize %s: before opening -> %s", cursor, result)
            return result

        if schedule.morning_end <= cursor.hour < schedule.afternoon_start:
            return schedule.at_hour(cursor, schedule.morning_end)

        if cursor.hour >= schedule.afternoon_end:
            return schedule.at_hour(cursor, schedule.afternoon_end)

        return cursor.set(second=0, microsecond=0)

    async def add_business_days(self, dt: DateTime, days: int) -> DateTime:
        """
        Advance ``days`` working days, preserving the time of day.

        Each step lands on the next working day no matter how many
        weekend or holiday dates it skips.
        """
        days = BusinessQuantity(days=days).days
        cursor = self._local(dt)

        for _ in range(days):
            cursor = await self._step_to_working_day(cursor, 1)

        logger.debug("add %d business day(s) to %s -> %s", days, dt, cursor)
        return cursor

    async def add_business_hours(self, dt: DateTime, hours: float) -> DateTime:
        """
        Consume ``hours`` of business time starting at ``dt``.

        The duration is rounded to whole minutes once, before walking.
        Minutes only elapse inside the morning and afternoon blocks of
        working days.
        """
        remaining = BusinessQuantity(hours=hours).minutes
        cursor = self._local(dt)
        schedule = self.schedule

        while remaining > 0:
            if not await self.calendar.is_working_day(cursor):
                day = await self._step_to_working_day(cursor, 1)
                cursor = schedule.at_hour(day, schedule.morning_start)
                continue

            morning_start, morning_end, afternoon_start, afternoon_end = schedule.boundaries(cursor)

            if cursor < morning_start:
                cursor = morning_start
                interval_end = morning_end
            elif cursor < morning_end:
                interval_end = morning_end
            elif cursor < afternoon_start:
                cursor = afternoon_start
                interval_end = afternoon_end
            elif cursor < afternoon_end:
                interval_end = afternoon_end
            else:
                day = await self._step_to_working_day(cursor, 1)
                cursor = schedule.at_hour(day, schedule.morning_start)
                continue

            available = max(0, int((interval_end - cursor).total_seconds() // 60))
            if available == 0:
                cursor = interval_end
                continue

            take = min(available, remaining)
            cursor = cursor.add(minutes=take)
            remaining -= take
            logger.debug("consumed %d minute(s), %d left, cursor %s", take, remaining, cursor)

        return cursor

    async def apply(self, dt: DateTime, quantity: BusinessQuantity) -> DateTime:
        """
        Normalize ``dt`` and then add the quantity, days before hours.

        Returns:
            Resulting instant in the schedule timezone
        """
        cursor = await self.normalize_backward(dt)
        if quantity.is_zero():
            return cursor

        if quantity.days > 0:
            cursor = await self.add_business_days(cursor, quantity.days)

        if quantity.minutes > 0:
            cursor = await self.add_business_hours(cursor, quantity.hours)

        logger.debug("%s + %s -> %s", dt, quantity, cursor)
        return cursor
