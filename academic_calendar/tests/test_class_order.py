"""
Tests for class order numbering and notification reasons
"""
import pytest
from datetime import date
from fastapi import status
from academic_calendar.core.errors import CalendarNotFoundError
from academic_calendar.models.day import CalendarDay, DayType, NotificationReason
from academic_calendar.models.term import HolidayFlag
from academic_calendar.services.calendar_service import initialize_calendar_days
from academic_calendar.services.class_order_service import (
    assign_class_order,
    format_notification_reasons,
    parse_notification_reasons,
)
from academic_calendar.services.day_service import upsert_day
from academic_calendar.services.term_service import add_term, update_term


def _day(db, calendar_id, day_date):
    return db.query(CalendarDay).filter(
        CalendarDay.calendar_id == calendar_id,
        CalendarDay.date == day_date
    ).one()


@pytest.fixture
def first_term(db, calendar):
    initialize_calendar_days(db, calendar.id, holidays=[
        (date(2025, 4, 29), "昭和の日"),
        (date(2025, 5, 5), "こどもの日"),
    ])
    term, _ = add_term(db, calendar.id, "前期")
    for day_date, class_weekday in (
        (date(2025, 4, 7), None),   # Mon
        (date(2025, 4, 8), None),   # Tue
        (date(2025, 4, 9), 1),      # Wed, runs the Monday timetable
        (date(2025, 4, 14), None),  # Mon
        (date(2025, 4, 21), None),  # Mon
        (date(2025, 4, 29), None),  # Tue, national holiday
    ):
        upsert_day(db, calendar.id, day_date, DayType.CLASS, term_id=term["id"], class_weekday=class_weekday)
    upsert_day(db, calendar.id, date(2025, 4, 10), DayType.CANCELLED, term_id=term["id"])
    return term


def test_parse_and_format_notification_reasons():
    assert parse_notification_reasons(None) == []
    assert parse_notification_reasons(" 1, 3 ,,") == ["1", "3"]
    assert format_notification_reasons([]) is None
    assert format_notification_reasons(
        [NotificationReason.HOLIDAY_CLASS, NotificationReason.TERM_START]
    ) == "1,4"


def test_assign_class_order_numbers_per_term_and_weekday(db, calendar, first_term):
    result = assign_class_order(db, calendar.id)

    assert result == {"updated_count": 6, "cleared_count": 0}
    orders = {
        d.date: d.class_order
        for d in db.query(CalendarDay).filter(CalendarDay.class_order.isnot(None)).all()
    }
    assert orders == {
        date(2025, 4, 7): 1,
        date(2025, 4, 8): 1,
        date(2025, 4, 9): 2,
        date(2025, 4, 14): 3,
        date(2025, 4, 21): 4,
        date(2025, 4, 29): 2,
    }


def test_assign_class_order_is_idempotent(db, calendar, first_term):
    assign_class_order(db, calendar.id)

    assert assign_class_order(db, calendar.id) == {"updated_count": 0, "cleared_count": 0}


def test_assign_class_order_renumbers_after_change(db, calendar, first_term):
    assign_class_order(db, calendar.id)
    upsert_day(db, calendar.id, date(2025, 4, 14), DayType.CANCELLED, term_id=first_term["id"])

    assert assign_class_order(db, calendar.id) == {"updated_count": 1, "cleared_count": 0}
    assert _day(db, calendar.id, date(2025, 4, 21)).class_order == 3


def test_assign_class_order_clears_stale_order(db, calendar, first_term):
    assign_class_order(db, calendar.id)
    stale = _day(db, calendar.id, date(2025, 4, 2))
    stale.class_order = 9
    db.commit()

    result = assign_class_order(db, calendar.id)

    assert result == {"updated_count": 0, "cleared_count": 1}
    assert _day(db, calendar.id, date(2025, 4, 2)).class_order is None


def test_notification_reasons(db, calendar, first_term):
    assign_class_order(db, calendar.id)

    def reasons(day_date):
        return parse_notification_reasons(_day(db, calendar.id, day_date).notification_reasons)

    assert reasons(date(2025, 4, 7)) == [NotificationReason.TERM_START.value]
    assert reasons(date(2025, 4, 8)) == []
    assert reasons(date(2025, 4, 9)) == [NotificationReason.WEEKDAY_SUBSTITUTION.value]
    assert reasons(date(2025, 4, 10)) == [NotificationReason.UNEXPECTED_CLOSURE.value]
    assert reasons(date(2025, 4, 29)) == [NotificationReason.HOLIDAY_CLASS.value]
    # National holiday without classes needs no notice
    assert reasons(date(2025, 5, 5)) == []


def test_term_start_after_vacation(db, calendar):
    term, _ = add_term(db, calendar.id, "前期")
    vacation, _ = add_term(db, calendar.id, "GW休み")
    update_term(db, calendar.id, vacation["id"], {"holiday_flag": HolidayFlag.VACATION})

    upsert_day(db, calendar.id, date(2025, 4, 28), DayType.CLASS, term_id=term["id"])
    upsert_day(db, calendar.id, date(2025, 5, 2), DayType.CANCELLED, term_id=vacation["id"])
    upsert_day(db, calendar.id, date(2025, 5, 7), DayType.CLASS, term_id=term["id"])
    upsert_day(db, calendar.id, date(2025, 5, 8), DayType.CLASS, term_id=term["id"])

    assign_class_order(db, calendar.id)

    assert _day(db, calendar.id, date(2025, 5, 7)).notification_reasons == NotificationReason.TERM_START.value
    assert _day(db, calendar.id, date(2025, 5, 8)).notification_reasons is None
    # Vacation days are not teaching days
    assert _day(db, calendar.id, date(2025, 5, 2)).notification_reasons is None


def test_assign_class_order_unknown_calendar(db):
    with pytest.raises(CalendarNotFoundError):
        assign_class_order(db, 9999)


def test_class_order_endpoint(client, calendar, first_term):
    base = f"/api/v1/calendars/{calendar.id}/days"

    response = client.post(f"{base}/class-order")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"updated_count": 6, "cleared_count": 0}

    days = {d["date"]: d for d in client.get(base).json()}
    assert days["2025-04-09"]["class_order"] == 2
    assert days["2025-04-09"]["effective_class_weekday"] == 1
    assert days["2025-04-29"]["notification_reasons"] == ["1"]
