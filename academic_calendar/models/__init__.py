"""
Database models
"""
from academic_calendar.models.calendar import Calendar
from academic_calendar.models.term import (
    CalendarTerm,
    HolidayFlag,
    HOLIDAY_FLAG_VACATION_CODE,
    HOLIDAY_FLAG_TEACHING_CODE,
    HOLIDAY_FLAG_LEGACY_CODE,
)
from academic_calendar.models.day import CalendarDay, DayType, NotificationReason

__all__ = [
    "Calendar",
    "CalendarTerm",
    "HolidayFlag",
    "HOLIDAY_FLAG_VACATION_CODE",
    "HOLIDAY_FLAG_TEACHING_CODE",
    "HOLIDAY_FLAG_LEGACY_CODE",
    "CalendarDay",
    "DayType",
    "NotificationReason",
]
