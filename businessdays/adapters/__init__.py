"""
Adapters layer - External integrations (remote holiday list).
"""

from .holiday_cache import HolidayCache, HolidaySourceProtocol, YearlyHolidayCalendar
from .holiday_client import HolidayClient, extract_holiday_dates
from .mock_holiday_client import MockHolidayClient

__all__ = [
    "HolidayCache",
    "HolidaySourceProtocol",
    "YearlyHolidayCalendar",
    "HolidayClient",
    "extract_holiday_dates",
    "MockHolidayClient",
]
