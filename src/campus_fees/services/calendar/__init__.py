"""Special-date calendar and holiday synchronisation."""

from .holiday_sync import HolidayApiClient
from .special_dates import SpecialDate, SpecialDateCalendar, SpecialDateType, SpecialTimeRange

__all__ = [
    "HolidayApiClient",
    "SpecialDate",
    "SpecialDateCalendar",
    "SpecialDateType",
    "SpecialTimeRange",
]
