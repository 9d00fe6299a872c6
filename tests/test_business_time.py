"""
Tests for the business time calculator.
"""

import asyncio

import pendulum
import pytest

from businessdays.domain.business_time import BusinessTimeCalculator
from businessdays.domain.calendar import StaticHolidayCalendar, WorkingCalendar
from businessdays.domain.exceptions import CalendarExhaustedError
from businessdays.domain.models import BusinessQuantity, WorkSchedule

TZ = "America/Bogota"
HOLY_WEEK = ["2025-04-17", "2025-04-18"]


class AsyncHolidayCalendar:
    """Holiday lookup answering through a coroutine, recording each date asked."""

    def __init__(self, dates):
        self._dates = set(dates)
        self.calls = []

    async def is_holiday(self, day):
        self.calls.append(day.isoformat())
        await asyncio.sleep(0)
        return day.isoformat() in self._dates


def _calculator(holidays=(), schedule=None) -> BusinessTimeCalculator:
    schedule = schedule or WorkSchedule()
    return BusinessTimeCalculator(WorkingCalendar(schedule, StaticHolidayCalendar(holidays)))


def _local(text: str) -> pendulum.DateTime:
    return pendulum.parse(text, tz=TZ)


def _is_working_minute(dt, holidays) -> bool:
    if dt.isoweekday() in (6, 7) or dt.to_date_string() in holidays:
        return False
    return 8 <= dt.hour < 12 or 13 <= dt.hour < 17


def _working_minutes_between(start, end, holidays) -> int:
    count = 0
    cursor = start
    while cursor < end:
        if _is_working_minute(cursor, holidays):
            count += 1
        cursor = cursor.add(minutes=1)
    return count


class TestNormalizeBackward:
    """Tests for normalize_backward."""

    def test_saturday_rolls_back_to_friday_close(self):
        calculator = _calculator()

        result = asyncio.run(calculator.normalize_backward(_local("2025-04-12 10:00")))

        assert result == _local("2025-04-11 17:00")

    def test_sunday_rolls_back_to_friday_close(self):
        calculator = _calculator()

        result = asyncio.run(calculator.normalize_backward(_local("2025-04-13 20:15")))

        assert result == _local("2025-04-11 17:00")

    def test_before_opening_rolls_back_to_previous_working_day(self):
        """Monday 07:59 belongs to Friday's close."""
        calculator = _calculator()

        result = asyncio.run(calculator.normalize_backward(_local("2025-04-14 07:59")))

        assert result == _local("2025-04-11 17:00")

    def test_lunch_clamps_to_morning_end(self):
        calculator = _calculator()

        result = asyncio.run(calculator.normalize_backward(_local("2025-04-14 12:40:31")))

        assert result == _local("2025-04-14 12:00")

    def test_evening_clamps_to_close(self):
        calculator = _calculator()

        assert asyncio.run(calculator.normalize_backward(_local("2025-04-14 18:30"))) == _local("2025-04-14 17:00")
        assert asyncio.run(calculator.normalize_backward(_local("2025-04-14 17:00:45"))) == _local("2025-04-14 17:00")

    def test_working_time_drops_seconds(self):
        calculator = _calculator()
        instant = _local("2025-04-14 10:15:42.123456")

        result = asyncio.run(calculator.normalize_backward(instant))

        assert result == _local("2025-04-14 10:15")
        assert (result.second, result.microsecond) == (0, 0)

    def test_holidays_are_skipped_backward(self):
        """Good Friday rolls back over Holy Thursday to Wednesday."""
        calculator = _calculator(HOLY_WEEK)

        result = asyncio.run(calculator.normalize_backward(_local("2025-04-18 09:00")))

        assert result == _local("2025-04-16 17:00")

    def test_rollback_crosses_year_boundary(self):
        calculator = _calculator(["2025-01-01"])

        result = asyncio.run(calculator.normalize_backward(_local("2025-01-01 10:00")))

        assert result == _local("2024-12-31 17:00")

    def test_utc_input_is_judged_in_local_time(self):
        """Saturday 01:00 UTC is Friday 20:00 in Bogota."""
        calculator = _calculator()

        result = asyncio.run(calculator.normalize_backward(pendulum.parse("2025-04-12T01:00:00Z")))

        assert result == _local("2025-04-11 17:00")
        assert result.timezone_name == TZ

    def test_idempotent_and_in_range(self):
        """Normalizing twice equals normalizing once; results are legal instants."""
        calculator = _calculator(HOLY_WEEK)
        start = _local("2025-04-11 00:00")

        for offset in range(0, 24 * 12 * 60, 37):
            instant = start.add(minutes=offset)
            once = asyncio.run(calculator.normalize_backward(instant))
            twice = asyncio.run(calculator.normalize_backward(once))

            assert once == twice
            assert once <= instant
            assert once.isoweekday() not in (6, 7)
            assert once.to_date_string() not in HOLY_WEEK
            minutes = once.hour * 60 + once.minute
            assert 8 * 60 <= minutes < 12 * 60 or 13 * 60 <= minutes < 17 * 60 or (
                minutes in (12 * 60, 17 * 60) and once.second == 0
            )


class TestAddBusinessDays:
    """Tests for add_business_days."""

    def test_zero_days_is_identity(self):
        calculator = _calculator()
        instant = _local("2025-04-14 10:30:15")

        assert asyncio.run(calculator.add_business_days(instant, 0)) == instant

    def test_friday_plus_one_is_monday(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_days(_local("2025-04-11 10:00"), 1))

        assert result == _local("2025-04-14 10:00")

    def test_holidays_are_skipped(self):
        """Wednesday + 1 jumps Holy Thursday, Good Friday and the weekend."""
        calculator = _calculator(HOLY_WEEK)

        result = asyncio.run(calculator.add_business_days(_local("2025-04-16 10:00"), 1))

        assert result == _local("2025-04-21 10:00")

    def test_preserves_time_of_day(self):
        calculator = _calculator(HOLY_WEEK)
        instant = _local("2025-04-10 14:27:09")

        for days in range(0, 12):
            result = asyncio.run(calculator.add_business_days(instant, days))

            assert (result.hour, result.minute, result.second) == (14, 27, 9)
            assert result.isoweekday() not in (6, 7)
            assert result.to_date_string() not in HOLY_WEEK

    def test_one_full_week(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_days(_local("2025-04-14 09:00"), 5))

        assert result == _local("2025-04-21 09:00")


class TestAddBusinessHours:
    """Tests for add_business_hours."""

    def test_zero_hours_is_identity(self):
        calculator = _calculator()
        instant = _local("2025-04-14 10:30:15")

        assert asyncio.run(calculator.add_business_hours(instant, 0)) == instant

    def test_friday_afternoon_spills_into_monday(self):
        """30 minutes on Friday, 90 on Monday morning."""
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-11 16:30"), 2))

        assert result == _local("2025-04-14 08:30")

    def test_lunch_break_is_skipped(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-14 11:45"), 0.5))

        assert result == _local("2025-04-14 13:15")

    def test_full_day_ends_at_close(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-14 08:00"), 8))

        assert result == _local("2025-04-14 17:00")

    def test_from_close_moves_to_next_morning(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-11 17:00"), 1))

        assert result == _local("2025-04-14 09:00")

    def test_from_weekend_starts_monday_morning(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-12 10:00"), 1))

        assert result == _local("2025-04-14 09:00")

    def test_before_opening_snaps_to_opening(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-14 06:10"), 1))

        assert result == _local("2025-04-14 09:00")

    def test_holidays_are_skipped(self):
        calculator = _calculator(HOLY_WEEK)

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-16 16:00"), 3))

        assert result == _local("2025-04-21 10:00")

    def test_fractional_hours(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-14 08:00"), 1.5))

        assert result == _local("2025-04-14 09:30")

    def test_partial_minute_at_interval_end_is_dropped(self):
        """11:59:30 has no whole minute left before lunch."""
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(_local("2025-04-14 11:59:30"), 1))

        assert result == _local("2025-04-14 14:00")

    def test_utc_input(self):
        calculator = _calculator()

        result = asyncio.run(calculator.add_business_hours(pendulum.parse("2025-04-14T13:00:00Z"), 1))

        assert result.in_timezone("UTC") == pendulum.parse("2025-04-14T14:00:00Z")

    @pytest.mark.parametrize("hours", [0.25, 3, 7.75, 9, 20, 41])
    @pytest.mark.parametrize(
        "start",
        ["2025-04-14 08:00", "2025-04-15 11:10", "2025-04-16 15:45", "2025-04-11 16:59"],
    )
    def test_consumes_exactly_the_requested_minutes(self, start, hours):
        calculator = _calculator(HOLY_WEEK)
        instant = _local(start)

        result = asyncio.run(calculator.add_business_hours(instant, hours))

        assert _working_minutes_between(instant, result, HOLY_WEEK) == round(hours * 60)
        assert _is_working_minute(result.subtract(minutes=1), HOLY_WEEK)


class TestApply:
    """Tests for the normalize, days, hours pipeline."""

    def test_days_then_hours(self):
        """Thursday 10:00 + 5 days + 4 hours across Holy Week."""
        calculator = _calculator(HOLY_WEEK)

        result = asyncio.run(
            calculator.apply(_local("2025-04-10 10:00"), BusinessQuantity(days=5, hours=4))
        )

        assert result == _local("2025-04-21 15:00")

    def test_normalizes_before_adding(self):
        """Saturday start is treated as Friday 17:00."""
        calculator = _calculator()

        result = asyncio.run(
            calculator.apply(_local("2025-04-12 14:00"), BusinessQuantity(days=1, hours=1))
        )

        assert result == _local("2025-04-15 09:00")

    def test_zero_quantity_only_normalizes(self):
        calculator = _calculator()

        result = asyncio.run(calculator.apply(_local("2025-04-14 12:30"), BusinessQuantity()))

        assert result == _local("2025-04-14 12:00")

    def test_seconds_do_not_cost_a_minute_at_block_end(self):
        """08:00:30 + 4 hours closes the morning block exactly."""
        calculator = _calculator()

        result = asyncio.run(
            calculator.apply(_local("2025-04-14 08:00:30"), BusinessQuantity(hours=4))
        )

        assert result == _local("2025-04-14 12:00")

    def test_async_holiday_calendar_gives_same_result(self):
        holidays = AsyncHolidayCalendar(HOLY_WEEK)
        calculator = BusinessTimeCalculator(WorkingCalendar(WorkSchedule(), holidays))

        result = asyncio.run(
            calculator.apply(_local("2025-04-10 10:00"), BusinessQuantity(days=5, hours=4))
        )

        assert result == _local("2025-04-21 15:00")
        assert "2025-04-17" in holidays.calls
        assert "2025-04-18" in holidays.calls


class TestTermination:
    """A calendar without working days fails instead of looping forever."""

    def _closed_calculator(self) -> BusinessTimeCalculator:
        schedule = WorkSchedule(weekend_days=(1, 2, 3, 4, 5, 6, 7), max_search_days=30)
        return _calculator(schedule=schedule)

    def test_normalize_raises(self):
        with pytest.raises(CalendarExhaustedError, match="30 days before"):
            asyncio.run(self._closed_calculator().normalize_backward(_local("2025-04-14 10:00")))

    def test_add_hours_raises(self):
        with pytest.raises(CalendarExhaustedError, match="after"):
            asyncio.run(self._closed_calculator().add_business_hours(_local("2025-04-14 10:00"), 1))

    def test_add_days_raises(self):
        with pytest.raises(CalendarExhaustedError):
            asyncio.run(self._closed_calculator().add_business_days(_local("2025-04-14 10:00"), 1))
