"""
Date helpers for calendar days.

Two weekday numberings are in play:
- class weekday: Monday-based, 1=Mon..7=Sun (stored on days, matches date.isoweekday())
- assigned weekday: Sunday-based, 0=Sun..6=Sat (used for buckets and labels)
"""
import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Tuple

from academic_calendar.core.constants import WEEKDAY_LABELS

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for created_at / updated_at."""
    return datetime.now(UTC)


def derive_class_weekday(day: date) -> int:
    """Monday-based weekday of the date itself (Sunday = 7)."""
    return day.isoweekday()


def calendar_weekday(day: date) -> int:
    """Sunday-based weekday of the date itself (Sunday = 0)."""
    return day.isoweekday() % 7


def valid_class_weekday(value) -> Optional[int]:
    """Truncate value to an int in 1..7, or None if it is not a usable override."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    if value < 1 or value > 7:
        return None
    return int(value)


def assigned_weekday(class_weekday, day: date) -> int:
    """
    Sunday-based weekday whose timetable governs the day.

    A stored override is reduced mod 7 (so 7 becomes Sunday); without one the
    date's own weekday is used.
    """
    if (
        class_weekday is not None
        and not isinstance(class_weekday, bool)
        and isinstance(class_weekday, (int, float))
        and math.isfinite(class_weekday)
    ):
        return int(class_weekday) % 7
    return calendar_weekday(day)


def weekday_label(sunday_based: int) -> str:
    return WEEKDAY_LABELS[sunday_based % 7]


def parse_weekday_label(label: Optional[str]) -> Optional[int]:
    """Sunday-based weekday for a single-character label, or None if unrecognized."""
    if label is None:
        return None
    normalized = label.strip()
    if normalized in WEEKDAY_LABELS:
        return WEEKDAY_LABELS.index(normalized)
    return None


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def fiscal_period(fiscal_year: int, start_month: int = 4) -> Tuple[date, date]:
    """First and last date of a fiscal year that begins on the 1st of start_month."""
    start = date(fiscal_year, start_month, 1)
    next_start = date(fiscal_year + 1, start_month, 1)
    return start, next_start - timedelta(days=1)
