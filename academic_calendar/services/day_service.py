"""
Day classifier service - create-or-replace of per-date classifications

Every write goes through the (calendar_id, date) lookup so a calendar holds
exactly one day per date. Day types carry no transition rule: any type may
overwrite any other.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from academic_calendar.core.constants import WEEKLY_HOLIDAY_TARGETS
from academic_calendar.core.errors import CalendarError, InvalidDateRangeError
from academic_calendar.models.day import CalendarDay, DayType
from academic_calendar.services.calendar_service import require_calendar
from academic_calendar.services.term_service import require_calendar_term
from academic_calendar.utils.datetime_utils import (
    derive_class_weekday,
    iter_dates,
    now_utc,
    valid_class_weekday,
)
from academic_calendar.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def resolve_class_weekday(requested, day_date: date, stored=None) -> int:
    """
    Pick the class weekday to store for a day

    Priority: an explicit value in 1..7, then the previously stored value on
    this date if it was valid, then the date's own Monday-based weekday.
    """
    explicit = valid_class_weekday(requested)
    if explicit is not None:
        return explicit
    previous = valid_class_weekday(stored)
    if previous is not None:
        return previous
    return derive_class_weekday(day_date)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _find_day(db: Session, calendar_id: int, day_date: date) -> Optional[CalendarDay]:
    return db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.date == day_date
    ).first()


def _upsert_day(
    db: Session,
    calendar_id: int,
    day_date: date,
    day_type: DayType,
    term_id: Optional[int] = None,
    description: Optional[str] = None,
    class_weekday=None,
) -> CalendarDay:
    """Write one day without committing"""
    if term_id is not None:
        require_calendar_term(db, calendar_id, term_id)

    type_value = enum_to_str(day_type)
    existing = _find_day(db, calendar_id, day_date)
    now = now_utc()

    if existing:
        existing.type = type_value
        existing.term_id = term_id
        existing.description = _clean_text(description)
        existing.class_weekday = resolve_class_weekday(class_weekday, day_date, existing.class_weekday)
        if type_value != DayType.CLASS.value:
            existing.class_order = None
        existing.updated_at = now
        db.flush()
        return existing

    day = CalendarDay(
        calendar_id=calendar_id,
        date=day_date,
        type=type_value,
        term_id=term_id,
        description=_clean_text(description),
        is_holiday=False,
        class_weekday=resolve_class_weekday(class_weekday, day_date),
        updated_at=now
    )
    db.add(day)
    db.flush()
    return day


def upsert_day(
    db: Session,
    calendar_id: int,
    day_date: date,
    day_type: DayType,
    term_id: Optional[int] = None,
    description: Optional[str] = None,
    class_weekday=None,
) -> CalendarDay:
    """
    Create or replace the classification of a single date

    Args:
        db: Database session
        calendar_id: Calendar ID
        day_date: Date to classify
        day_type: New day type
        term_id: Optional term link (must belong to the calendar)
        description: Optional free text (blank clears)
        class_weekday: Optional timetable weekday override, 1=Mon..7=Sun

    Returns:
        The stored CalendarDay

    Raises:
        CalendarNotFoundError, TermNotFoundError, CrossCalendarAccessError
    """
    require_calendar(db, calendar_id)
    try:
        day = _upsert_day(db, calendar_id, day_date, day_type, term_id, description, class_weekday)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(day)
    logger.debug("Upserted day %s on calendar %s as %s", day_date, calendar_id, day.type)
    return day


def upsert_days_batch(db: Session, calendar_id: int, entries: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Apply several single-date upserts in one transaction

    Each entry holds date, type and optionally term_id, description and
    class_weekday. A failing entry rolls back the whole batch.

    Returns:
        {"processed": int}
    """
    require_calendar(db, calendar_id)
    processed = 0
    try:
        for entry in entries:
            _upsert_day(
                db,
                calendar_id,
                entry["date"],
                entry["type"],
                term_id=entry.get("term_id"),
                description=entry.get("description"),
                class_weekday=entry.get("class_weekday"),
            )
            processed += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Batch upserted %d days on calendar %s", processed, calendar_id)
    return {"processed": processed}


def update_range(
    db: Session,
    calendar_id: int,
    start_date: date,
    end_date: date,
    day_type: DayType,
    term_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Set the type of every date in an inclusive range

    Existing days keep their term link unless term_id is given, keep a valid
    stored class weekday, and keep their other fields. Missing dates are
    created with the derived class weekday.

    Returns:
        {"updated_count": int, "date_range": str}

    Raises:
        InvalidDateRangeError: If start_date is after end_date
    """
    if start_date > end_date:
        raise InvalidDateRangeError(f"start_date {start_date} is after end_date {end_date}")
    require_calendar(db, calendar_id)
    if term_id is not None:
        require_calendar_term(db, calendar_id, term_id)

    existing_days = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.date >= start_date,
        CalendarDay.date <= end_date
    ).all()
    by_date = {day.date: day for day in existing_days}

    type_value = enum_to_str(day_type)
    now = now_utc()
    updated_count = 0
    for current in iter_dates(start_date, end_date):
        existing = by_date.get(current)
        if existing:
            existing.type = type_value
            if term_id is not None:
                existing.term_id = term_id
            existing.class_weekday = resolve_class_weekday(None, current, existing.class_weekday)
            existing.updated_at = now
        else:
            db.add(CalendarDay(
                calendar_id=calendar_id,
                date=current,
                type=type_value,
                term_id=term_id,
                is_holiday=False,
                class_weekday=derive_class_weekday(current),
                updated_at=now
            ))
        updated_count += 1

    db.commit()
    logger.info(
        "Range %s..%s on calendar %s set to %s (%d days)",
        start_date, end_date, calendar_id, type_value, updated_count
    )
    return {
        "updated_count": updated_count,
        "date_range": f"{start_date.isoformat()}..{end_date.isoformat()}",
    }


def set_weekly_holiday(db: Session, calendar_id: int, target: str) -> Dict[str, int]:
    """
    Cancel every stored Saturday or Sunday of a calendar

    The class weekday and class order of those days are cleared.

    Returns:
        {"updated_count": int}
    """
    if target not in WEEKLY_HOLIDAY_TARGETS:
        raise CalendarError(f"target must be one of {sorted(WEEKLY_HOLIDAY_TARGETS)}")
    require_calendar(db, calendar_id)
    target_weekday = WEEKLY_HOLIDAY_TARGETS[target]

    days = db.query(CalendarDay).filter(CalendarDay.calendar_id == calendar_id).all()
    now = now_utc()
    updated_count = 0
    for day in days:
        if day.date.isoweekday() != target_weekday:
            continue
        day.type = DayType.CANCELLED.value
        day.class_weekday = None
        day.class_order = None
        day.updated_at = now
        updated_count += 1

    db.commit()
    logger.info("Cancelled %d %s days on calendar %s", updated_count, target, calendar_id)
    return {"updated_count": updated_count}


def clear_days(db: Session, calendar_id: int) -> Dict[str, int]:
    """Delete every day of a calendar. Returns {"deleted_count": int}."""
    deleted = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("Cleared %d days from calendar %s", deleted, calendar_id)
    return {"deleted_count": deleted}
