"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_time import BusinessTimeCalculator
from .calendar import HolidayCalendarProtocol, StaticHolidayCalendar, WorkingCalendar
from .models import BusinessQuantity, WorkSchedule

__all__ = [
    "BusinessTimeCalculator",
    "HolidayCalendarProtocol",
    "StaticHolidayCalendar",
    "WorkingCalendar",
    "BusinessQuantity",
    "WorkSchedule",
]
