"""
Calendar service - business logic for calendar records and day-grid initialization
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from academic_calendar.core.config import settings
from academic_calendar.core.errors import CalendarNotFoundError, DuplicateNameError, EmptyNameError
from academic_calendar.models.calendar import Calendar
from academic_calendar.models.day import CalendarDay, DayType
from academic_calendar.utils.datetime_utils import (
    derive_class_weekday,
    fiscal_period,
    iter_dates,
    now_utc,
)

logger = logging.getLogger(__name__)


def get_calendar(db: Session, calendar_id: int) -> Optional[Calendar]:
    """Get a calendar by ID"""
    return db.query(Calendar).filter(Calendar.id == calendar_id).first()


def require_calendar(db: Session, calendar_id: int) -> Calendar:
    """
    Get a calendar by ID or fail

    Raises:
        CalendarNotFoundError: If no calendar has this ID
    """
    calendar = get_calendar(db, calendar_id)
    if not calendar:
        raise CalendarNotFoundError(f"Calendar with id {calendar_id} not found")
    return calendar


def _clean_memo(memo: Optional[str]) -> Optional[str]:
    if memo is None:
        return None
    trimmed = memo.strip()
    return trimmed or None


def create_calendar(
    db: Session,
    name: str,
    fiscal_year: int,
    disable_saturday: bool = False,
    memo: Optional[str] = None,
    terms: Optional[List[Dict[str, Any]]] = None,
) -> Tuple[Calendar, bool]:
    """
    Create a calendar, or return the existing one with the same year and name

    Args:
        db: Database session
        name: Calendar name (trimmed)
        fiscal_year: Fiscal year the calendar covers
        disable_saturday: If True, Saturday classes are excluded from summaries
        memo: Optional free-text note
        terms: Optional initial terms (name, order, short_name, class_count, holiday_flag)

    Returns:
        (calendar, created) where created is False for an existing calendar

    Raises:
        EmptyNameError: If name is blank
    """
    from academic_calendar.services.term_service import seed_terms

    normalized = (name or "").strip()
    if not normalized:
        raise EmptyNameError("Calendar name must not be empty")

    existing = db.query(Calendar).filter(
        Calendar.fiscal_year == fiscal_year,
        Calendar.name == normalized
    ).first()
    if existing:
        logger.debug("Calendar %s/%s already exists (id=%s)", fiscal_year, normalized, existing.id)
        return existing, False

    fiscal_start, fiscal_end = fiscal_period(fiscal_year, settings.FISCAL_YEAR_START_MONTH)
    now = now_utc()
    calendar = Calendar(
        name=normalized,
        fiscal_year=fiscal_year,
        fiscal_start=fiscal_start,
        fiscal_end=fiscal_end,
        disable_saturday=bool(disable_saturday),
        memo=_clean_memo(memo),
        created_at=now,
        updated_at=now
    )
    db.add(calendar)
    db.flush()

    seeded = seed_terms(db, calendar.id, terms or [])

    db.commit()
    db.refresh(calendar)
    logger.info("Created calendar id=%s (%s %s) with %d terms", calendar.id, fiscal_year, normalized, seeded)
    return calendar, True


def update_calendar(
    db: Session,
    calendar_id: int,
    name: Optional[str] = None,
    disable_saturday: Optional[bool] = None,
    memo: Optional[str] = None,
) -> Calendar:
    """
    Update a calendar; fields left as None are untouched

    Raises:
        CalendarNotFoundError: If calendar not found
        EmptyNameError: If a blank name is given
        DuplicateNameError: If another calendar of the same fiscal year has the name
    """
    calendar = require_calendar(db, calendar_id)

    if name is not None:
        normalized = name.strip()
        if not normalized:
            raise EmptyNameError("Calendar name must not be empty")
        calendar.name = normalized
    if disable_saturday is not None:
        calendar.disable_saturday = disable_saturday
    if memo is not None:
        calendar.memo = _clean_memo(memo)

    calendar.updated_at = now_utc()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateNameError(
            f"A calendar named {(name or calendar.name).strip()!r} already exists for fiscal year {calendar.fiscal_year}"
        )
    db.refresh(calendar)
    return calendar


def delete_calendar(db: Session, calendar_id: int) -> bool:
    """Delete a calendar with its terms and days. Returns False if it does not exist."""
    calendar = get_calendar(db, calendar_id)
    if not calendar:
        return False
    db.delete(calendar)
    db.commit()
    logger.info("Deleted calendar id=%s", calendar_id)
    return True


def initialize_calendar_days(
    db: Session,
    calendar_id: int,
    holidays: Iterable[Tuple[date, str]] = (),
) -> Dict[str, Any]:
    """
    Fill an empty calendar with one unspecified day per fiscal-year date

    Args:
        db: Database session
        calendar_id: Calendar ID
        holidays: (date, name) pairs of national holidays to mark

    Returns:
        {"initialized": bool, "days_inserted": int}; a calendar that already
        has days is left untouched
    """
    calendar = require_calendar(db, calendar_id)

    has_days = db.query(CalendarDay.id).filter(CalendarDay.calendar_id == calendar_id).first()
    if has_days:
        return {"initialized": False, "days_inserted": 0}

    holiday_names = {holiday_date: holiday_name for holiday_date, holiday_name in holidays}
    now = now_utc()
    inserted = 0
    for current in iter_dates(calendar.fiscal_start, calendar.fiscal_end):
        holiday_name = holiday_names.get(current)
        db.add(CalendarDay(
            calendar_id=calendar_id,
            date=current,
            type=DayType.UNSPECIFIED.value,
            is_holiday=holiday_name is not None,
            national_holiday_name=holiday_name,
            class_weekday=derive_class_weekday(current),
            updated_at=now
        ))
        inserted += 1

    db.commit()
    logger.info("Initialized %d days for calendar id=%s", inserted, calendar_id)
    return {"initialized": True, "days_inserted": inserted}
