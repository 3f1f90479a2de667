"""
Class order service - numbers class days and flags days that need attention

Class days are grouped by (term, effective class weekday) and numbered 1..n
in date order. Every day also gets its notification reasons recomputed; see
NotificationReason for the codes.
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Set
from sqlalchemy.orm import Session
from academic_calendar.models.day import CalendarDay, DayType, NotificationReason
from academic_calendar.models.term import CalendarTerm, HolidayFlag
from academic_calendar.services.calendar_service import require_calendar
from academic_calendar.utils.datetime_utils import derive_class_weekday, now_utc, valid_class_weekday
from academic_calendar.utils.enums import normalize_holiday_flag

logger = logging.getLogger(__name__)

# How far back to look for the previous term-linked day
TERM_LOOKBACK_DAYS = 7


def parse_notification_reasons(value: Optional[str]) -> List[str]:
    """Split the stored comma-separated reasons into a list of codes"""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def format_notification_reasons(reasons: List[NotificationReason]) -> Optional[str]:
    if not reasons:
        return None
    return ",".join(reason.value for reason in reasons)


def _starts_after_vacation(
    day: CalendarDay,
    days_by_date: Dict,
    vacation_term_ids: Set[int],
) -> bool:
    """True if the nearest earlier term-linked day (within the lookback) is in another, vacation term"""
    for offset in range(1, TERM_LOOKBACK_DAYS + 1):
        previous = days_by_date.get(day.date - timedelta(days=offset))
        if previous is None or previous.term_id is None:
            continue
        return previous.term_id != day.term_id and previous.term_id in vacation_term_ids
    return False


def compute_notification_reasons(
    day: CalendarDay,
    teaching_term_ids: Set[int],
    vacation_term_ids: Set[int],
    term_first_dates: Dict[int, date],
    days_by_date: Dict,
) -> List[NotificationReason]:
    """Notification reasons for one day given the calendar's terms and days"""
    manual_weekday = valid_class_weekday(day.class_weekday)
    true_weekday = derive_class_weekday(day.date)
    is_class_or_exam = day.type in (DayType.CLASS.value, DayType.EXAM.value)
    in_teaching_term = day.term_id is not None and day.term_id in teaching_term_ids

    reasons = []
    if day.is_holiday and is_class_or_exam:
        reasons.append(NotificationReason.HOLIDAY_CLASS)
    if (
        in_teaching_term
        and day.type == DayType.CANCELLED.value
        and not day.is_holiday
        and true_weekday != 7
    ):
        reasons.append(NotificationReason.UNEXPECTED_CLOSURE)
    if (
        in_teaching_term
        and is_class_or_exam
        and manual_weekday is not None
        and manual_weekday != true_weekday
    ):
        reasons.append(NotificationReason.WEEKDAY_SUBSTITUTION)
    if in_teaching_term:
        if term_first_dates.get(day.term_id) == day.date:
            reasons.append(NotificationReason.TERM_START)
        elif _starts_after_vacation(day, days_by_date, vacation_term_ids):
            reasons.append(NotificationReason.TERM_START)
    return reasons


def assign_class_order(db: Session, calendar_id: int) -> Dict[str, int]:
    """
    Recompute class_order and notification_reasons for every day of a calendar

    Returns:
        {"updated_count": class orders changed, "cleared_count": class orders removed}
    """
    require_calendar(db, calendar_id)
    days = db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id
    ).order_by(CalendarDay.date).all()
    terms = db.query(CalendarTerm).filter(CalendarTerm.calendar_id == calendar_id).all()

    vacation_term_ids = {
        t.id for t in terms if normalize_holiday_flag(t.holiday_flag) == HolidayFlag.VACATION
    }
    teaching_term_ids = {t.id for t in terms} - vacation_term_ids

    days_by_date = {day.date: day for day in days}
    term_first_dates: Dict[int, date] = {}
    for day in days:
        if day.term_id in teaching_term_ids and day.term_id not in term_first_dates:
            term_first_dates[day.term_id] = day.date

    now = now_utc()
    updated_count = 0
    cleared_count = 0
    groups: Dict[tuple, int] = {}

    # days are in date order, so a running counter per group yields the ordinal
    for day in days:
        reasons = format_notification_reasons(compute_notification_reasons(
            day, teaching_term_ids, vacation_term_ids, term_first_dates, days_by_date
        ))
        changed = False
        if reasons != (day.notification_reasons or None):
            day.notification_reasons = reasons
            changed = True

        if day.type == DayType.CLASS.value:
            effective_weekday = valid_class_weekday(day.class_weekday) or derive_class_weekday(day.date)
            group_key = (day.term_id, effective_weekday)
            groups[group_key] = groups.get(group_key, 0) + 1
            expected = groups[group_key]
            if day.class_order != expected:
                day.class_order = expected
                updated_count += 1
                changed = True
        elif day.class_order is not None:
            day.class_order = None
            cleared_count += 1
            changed = True

        if changed:
            day.updated_at = now

    db.commit()
    logger.info(
        "Assigned class order on calendar %s: updated=%d cleared=%d",
        calendar_id, updated_count, cleared_count
    )
    return {"updated_count": updated_count, "cleared_count": cleared_count}
