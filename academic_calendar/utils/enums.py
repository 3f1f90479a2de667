"""Utility functions for handling enum/string values safely."""
import math
from enum import Enum
from typing import Any, Optional

from academic_calendar.models.term import (
    HolidayFlag,
    HOLIDAY_FLAG_LEGACY_CODE,
    HOLIDAY_FLAG_TEACHING_CODE,
    HOLIDAY_FLAG_VACATION_CODE,
)


def enum_to_str(v):
    """
    Safely convert enum or string value to string.

    Examples:
        >>> enum_to_str(DayType.CLASS)
        'CLASS'
        >>> enum_to_str('CLASS')
        'CLASS'
        >>> enum_to_str(None)
        None
    """
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    return str(v)


def normalize_holiday_flag(value: Any) -> Optional[HolidayFlag]:
    """
    Map any accepted holiday flag representation to the two-valued enum.

    Accepts HolidayFlag members, their names (case-insensitive), the stored
    integer codes (1 = vacation, 2 = teaching, legacy 0 = teaching) and
    booleans (True = vacation). Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, HolidayFlag):
        return value
    if isinstance(value, bool):
        return HolidayFlag.VACATION if value else HolidayFlag.TEACHING
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
            return None
        code = int(value)
        if code == HOLIDAY_FLAG_VACATION_CODE:
            return HolidayFlag.VACATION
        if code in (HOLIDAY_FLAG_TEACHING_CODE, HOLIDAY_FLAG_LEGACY_CODE):
            return HolidayFlag.TEACHING
        return None
    if isinstance(value, str):
        candidate = value.strip().upper()
        if candidate in HolidayFlag.__members__:
            return HolidayFlag[candidate]
        if candidate.isdigit():
            return normalize_holiday_flag(int(candidate))
    return None


def holiday_flag_to_code(flag: Optional[HolidayFlag]) -> Optional[int]:
    """Store representation of a holiday flag; never writes the legacy code."""
    if flag is None:
        return None
    if flag == HolidayFlag.VACATION:
        return HOLIDAY_FLAG_VACATION_CODE
    return HOLIDAY_FLAG_TEACHING_CODE
