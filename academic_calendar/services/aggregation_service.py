"""
Aggregation service - read-only statistics over terms and classified days

Nothing here raises on incomplete data: missing calendars yield empty
results, blank or dangling term references fall back to placeholder labels.
Weekday bucketing always uses the assigned (timetable) weekday while rows
keep the calendar weekday for display.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from academic_calendar.core.constants import (
    UNCLASSIFIED_TERM_LABEL,
    UNNAMED_TERM_LABEL,
    VACATION_BUCKETS,
)
from academic_calendar.models.day import CalendarDay, DayType
from academic_calendar.models.term import CalendarTerm
from academic_calendar.services.calendar_service import get_calendar
from academic_calendar.services.class_order_service import parse_notification_reasons
from academic_calendar.services.term_service import finite_or_none
from academic_calendar.utils.collation import collation_key, order_key
from academic_calendar.utils.datetime_utils import (
    assigned_weekday,
    calendar_weekday,
    derive_class_weekday,
    parse_weekday_label,
    valid_class_weekday,
    weekday_label,
)

logger = logging.getLogger(__name__)

SATURDAY = 6


def _display_name(name: Optional[str]) -> str:
    trimmed = (name or "").strip()
    return trimmed or UNNAMED_TERM_LABEL


def _term_meta(terms: List[CalendarTerm]) -> Dict[int, Tuple[str, Optional[float]]]:
    """term id -> (display name, order or None)"""
    return {term.id: (_display_name(term.name), finite_or_none(term.order)) for term in terms}


def _calendar_terms(db: Session, calendar_id: int) -> List[CalendarTerm]:
    return db.query(CalendarTerm).filter(CalendarTerm.calendar_id == calendar_id).all()


def _days_of_type(db: Session, calendar_id: int, day_type: DayType) -> List[CalendarDay]:
    return db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.type == day_type.value
    ).all()


def get_term_summary(db: Session, calendar_id: int) -> Dict[str, List[Dict[str, Any]]]:
    """
    Per-term Monday..Saturday class-day counts plus vacation-day counts

    Args:
        db: Database session
        calendar_id: Calendar ID

    Returns:
        {"term_summaries": [{term_id, display_name, weekday_counts[6]}],
         "vacation_summaries": [{key, label, count}]}
    """
    calendar = get_calendar(db, calendar_id)
    saturday_disabled = bool(calendar and calendar.disable_saturday)

    class_days = _days_of_type(db, calendar_id, DayType.CLASS)
    cancelled_days = _days_of_type(db, calendar_id, DayType.CANCELLED)
    terms = _calendar_terms(db, calendar_id)
    meta = _term_meta(terms)

    # None is the unassigned bucket
    counts_by_term: Dict[Optional[int], List[int]] = {}
    for day in class_days:
        counts = counts_by_term.setdefault(day.term_id, [0, 0, 0, 0, 0, 0])
        weekday = assigned_weekday(day.class_weekday, day.date)
        if weekday < 1 or weekday > 6:
            continue
        if saturday_disabled and weekday == SATURDAY:
            continue
        counts[weekday - 1] += 1

    rows = []
    for term_id, counts in counts_by_term.items():
        if term_id is None:
            display_name, order = UNCLASSIFIED_TERM_LABEL, None
        else:
            display_name, order = meta.get(term_id, (UNNAMED_TERM_LABEL, None))
        rows.append((order, display_name, {
            "term_id": term_id,
            "display_name": display_name,
            "weekday_counts": counts,
        }))
    rows.sort(key=lambda row: (order_key(row[0]), collation_key(row[1])))

    # Reserved labels match the stored name exactly; "春休み " or "春休み(前期)" do not count
    names_by_id = {term.id: term.name for term in terms}
    bucket_by_label = {label: key for key, label in VACATION_BUCKETS}
    vacation_counts = {key: 0 for key, _ in VACATION_BUCKETS}
    for day in cancelled_days:
        if day.term_id is None:
            continue
        key = bucket_by_label.get(names_by_id.get(day.term_id))
        if key:
            vacation_counts[key] += 1

    return {
        "term_summaries": [row[2] for row in rows],
        "vacation_summaries": [
            {"key": key, "label": label, "count": vacation_counts[key]}
            for key, label in VACATION_BUCKETS
        ],
    }


def get_unique_terms(db: Session, calendar_id: int) -> List[Dict[str, Any]]:
    """
    Distinct terms referenced by any day, plus an unclassified entry when
    at least one day has no term

    Ordered terms come first, then terms without an order, then the
    unclassified entry; ties break by name collation.
    """
    days = db.query(CalendarDay.term_id).filter(CalendarDay.calendar_id == calendar_id).all()
    meta = _term_meta(_calendar_terms(db, calendar_id))

    term_ids = set()
    include_unclassified = False
    for (term_id,) in days:
        if term_id is None:
            include_unclassified = True
        else:
            term_ids.add(term_id)

    entries = []
    for term_id in term_ids:
        display_name, order = meta.get(term_id, (UNNAMED_TERM_LABEL, None))
        rank = 0 if order is not None else 1
        entries.append(((rank, order or 0, collation_key(display_name)), term_id, display_name))
    if include_unclassified:
        entries.append(((2, 0, collation_key(UNCLASSIFIED_TERM_LABEL)), None, UNCLASSIFIED_TERM_LABEL))

    entries.sort(key=lambda entry: entry[0])
    return [{"term_id": term_id, "display_name": name} for _, term_id, name in entries]


def get_term_weekday_dates(
    db: Session,
    calendar_id: int,
    weekday: str,
    term_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Class days of one term (or of no term) whose assigned weekday matches a label

    Args:
        db: Database session
        calendar_id: Calendar ID
        weekday: Single-character weekday label (日, 月, 火, 水, 木, 金, 土)
        term_id: Term to match exactly; None matches days without a term

    Returns:
        Rows sorted by date; an unrecognized label yields []
    """
    target = parse_weekday_label(weekday)
    if target is None:
        logger.debug("Unrecognized weekday label %r", weekday)
        return []

    display_name = None
    if term_id is not None:
        term = db.query(CalendarTerm).filter(CalendarTerm.id == term_id).first()
        display_name = _display_name(term.name if term else None)

    query = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.type == DayType.CLASS.value
    )
    if term_id is None:
        query = query.filter(CalendarDay.term_id.is_(None))
    else:
        query = query.filter(CalendarDay.term_id == term_id)

    rows = []
    for day in query.order_by(CalendarDay.date).all():
        assigned = assigned_weekday(day.class_weekday, day.date)
        if assigned != target:
            continue
        rows.append({
            "date": day.date,
            "type": day.type,
            "term_id": day.term_id,
            "display_name": display_name,
            "actual_weekday_label": weekday_label(calendar_weekday(day.date)),
            "assigned_weekday_label": weekday_label(assigned),
            "class_weekday": day.class_weekday,
            "class_order": day.class_order,
            "notification_reasons": parse_notification_reasons(day.notification_reasons) or None,
        })
    return rows


def _term_names(db: Session, calendar_id: int) -> Dict[int, str]:
    return {
        term.id: term.name.strip()
        for term in _calendar_terms(db, calendar_id)
        if term.name and term.name.strip()
    }


def day_row(day: CalendarDay, term_names: Dict[int, str]) -> Dict[str, Any]:
    """Hydrate a stored day with its term name and effective class weekday"""
    manual_weekday = valid_class_weekday(day.class_weekday)
    return {
        "id": day.id,
        "date": day.date,
        "type": day.type,
        "term_id": day.term_id,
        "term_name": term_names.get(day.term_id) if day.term_id is not None else None,
        "description": day.description,
        "is_holiday": bool(day.is_holiday),
        "national_holiday_name": day.national_holiday_name,
        "class_weekday": manual_weekday,
        "effective_class_weekday": manual_weekday or derive_class_weekday(day.date),
        "class_order": day.class_order,
        "notification_reasons": parse_notification_reasons(day.notification_reasons),
        "updated_at": day.updated_at,
    }


def hydrate_day(db: Session, day: CalendarDay) -> Dict[str, Any]:
    return day_row(day, _term_names(db, day.calendar_id))


def list_calendar_days(db: Session, calendar_id: int) -> List[Dict[str, Any]]:
    """All days of a calendar in date order, hydrated with term names and effective weekdays"""
    days = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id
    ).order_by(CalendarDay.date).all()
    term_names = _term_names(db, calendar_id)
    return [day_row(day, term_names) for day in days]


def list_term_assignments_in_range(
    db: Session,
    calendar_id: int,
    start_date: date,
    end_date: date,
) -> List[Dict[str, Any]]:
    """Term-linked days within an inclusive date range; an inverted range yields []"""
    if start_date > end_date:
        return []

    days = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.date >= start_date,
        CalendarDay.date <= end_date,
        CalendarDay.term_id.isnot(None)
    ).order_by(CalendarDay.date).all()
    term_names = _term_names(db, calendar_id)
    return [
        {"date": day.date, "term_id": day.term_id, "term_name": term_names.get(day.term_id)}
        for day in days
    ]
