"""
Tests for the calendar registry and day-grid initialization
"""
import pytest
from datetime import date
from fastapi import status
from academic_calendar.core.errors import CalendarNotFoundError, DuplicateNameError, EmptyNameError
from academic_calendar.models.calendar import Calendar
from academic_calendar.models.day import CalendarDay, DayType
from academic_calendar.models.term import CalendarTerm, HolidayFlag
from academic_calendar.services.calendar_service import (
    create_calendar,
    delete_calendar,
    initialize_calendar_days,
    update_calendar,
)
from academic_calendar.services.day_service import upsert_day
from academic_calendar.services.term_service import add_term, list_terms


def test_create_calendar_sets_fiscal_period(db):
    calendar, created = create_calendar(db, "  学年暦  ", 2025, memo="  ")

    assert created is True
    assert calendar.name == "学年暦"
    assert calendar.fiscal_start == date(2025, 4, 1)
    assert calendar.fiscal_end == date(2026, 3, 31)
    assert calendar.disable_saturday is False
    assert calendar.memo is None


def test_create_calendar_is_idempotent_per_year_and_name(db):
    first, _ = create_calendar(db, "学年暦", 2025)
    second, created = create_calendar(db, "学年暦", 2025, disable_saturday=True)
    next_year, next_created = create_calendar(db, "学年暦", 2026)

    assert created is False
    assert second.id == first.id
    assert second.disable_saturday is False
    assert next_created is True
    assert next_year.id != first.id


def test_create_calendar_rejects_blank_name(db):
    with pytest.raises(EmptyNameError):
        create_calendar(db, "   ", 2025)


def test_create_calendar_seeds_terms_in_order(db):
    calendar, _ = create_calendar(db, "学年暦", 2025, terms=[
        {"name": "後期", "order": 2},
        {"name": " 前期 ", "order": 1, "short_name": "前"},
        {"name": "夏休み", "holiday_flag": True},
        {"name": "前期", "order": 5},
        {"name": "  "},
    ])

    terms = list_terms(db, calendar.id)

    assert [t["name"] for t in terms] == ["前期", "後期", "夏休み"]
    assert [t["order"] for t in terms] == [1, 2, 3]
    assert terms[0]["short_name"] == "前"
    assert terms[0]["holiday_flag"] == HolidayFlag.TEACHING
    assert terms[2]["holiday_flag"] == HolidayFlag.VACATION


def test_create_calendar_seeds_unordered_terms_in_japanese_order(db):
    calendar, _ = create_calendar(db, "学年暦", 2025, terms=[
        {"name": name} for name in ["冬休み", "前期", "夏休み", "後期", "春休み"]
    ])

    terms = list_terms(db, calendar.id)

    assert [(t["name"], t["order"]) for t in terms] == [
        ("夏休み", 1), ("後期", 2), ("春休み", 3), ("前期", 4), ("冬休み", 5)
    ]


def test_update_calendar(db, calendar):
    updated = update_calendar(db, calendar.id, disable_saturday=True, memo=" 土曜授業なし ")

    assert updated.disable_saturday is True
    assert updated.memo == "土曜授業なし"
    assert updated.name == "2025年度 学年暦"

    with pytest.raises(EmptyNameError):
        update_calendar(db, calendar.id, name=" ")
    with pytest.raises(CalendarNotFoundError):
        update_calendar(db, 9999, memo="x")


def test_update_calendar_rejects_name_taken_in_same_year(db, calendar, other_calendar):
    with pytest.raises(DuplicateNameError):
        update_calendar(db, other_calendar.id, name=" 2025年度 学年暦 ")

    db.refresh(other_calendar)
    assert other_calendar.name == "別キャンパス"

    next_year, _ = create_calendar(db, "別キャンパス", 2026)
    renamed = update_calendar(db, next_year.id, name="2025年度 学年暦")
    assert renamed.name == "2025年度 学年暦"


def test_delete_calendar_removes_terms_and_days(db, calendar):
    calendar_id = calendar.id
    term, _ = add_term(db, calendar_id, "前期")
    upsert_day(db, calendar_id, date(2025, 4, 7), DayType.CLASS, term_id=term["id"])

    assert delete_calendar(db, calendar_id) is True
    assert db.query(Calendar).count() == 0
    assert db.query(CalendarTerm).count() == 0
    assert db.query(CalendarDay).count() == 0
    assert delete_calendar(db, calendar_id) is False


def test_initialize_calendar_days_fills_fiscal_year(db, calendar):
    result = initialize_calendar_days(db, calendar.id, holidays=[(date(2025, 4, 29), "昭和の日")])

    assert result == {"initialized": True, "days_inserted": 365}
    holiday = db.query(CalendarDay).filter(CalendarDay.date == date(2025, 4, 29)).one()
    assert holiday.is_holiday is True
    assert holiday.national_holiday_name == "昭和の日"
    assert holiday.type == DayType.UNSPECIFIED.value
    assert holiday.class_weekday == 2

    first = db.query(CalendarDay).filter(CalendarDay.date == date(2025, 4, 1)).one()
    assert first.is_holiday is False
    assert first.national_holiday_name is None


def test_initialize_calendar_days_skips_populated_calendar(db, calendar):
    upsert_day(db, calendar.id, date(2025, 4, 7), DayType.CLASS)

    result = initialize_calendar_days(db, calendar.id)

    assert result == {"initialized": False, "days_inserted": 0}
    assert db.query(CalendarDay).count() == 1


def test_create_calendar_endpoint(client):
    payload = {"name": "学年暦", "fiscal_year": 2025, "terms": [{"name": "前期", "order": 1}]}

    response = client.post("/api/v1/calendars", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["fiscal_start"] == "2025-04-01"
    assert data["fiscal_end"] == "2026-03-31"

    again = client.post("/api/v1/calendars", json=payload)
    assert again.status_code == status.HTTP_200_OK
    assert again.json()["id"] == data["id"]

    terms = client.get(f"/api/v1/calendars/{data['id']}/terms").json()
    assert [t["name"] for t in terms] == ["前期"]


def test_get_missing_calendar_returns_404(client):
    response = client.get("/api/v1/calendars/9999")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["error"] is True
    assert data["status_code"] == 404
    assert data["path"] == "/api/v1/calendars/9999"


def test_patch_and_delete_calendar_endpoints(client, calendar):
    url = f"/api/v1/calendars/{calendar.id}"
    response = client.patch(url, json={"disable_saturday": True})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["disable_saturday"] is True

    response = client.delete(url)
    assert response.json() == {"deleted": True}

    response = client.delete(url)
    assert response.json() == {"deleted": False}


def test_initialize_days_endpoint(client, calendar):
    response = client.post(
        f"/api/v1/calendars/{calendar.id}/initialize-days",
        json={"holidays": [{"date": "2025-05-05", "name": "こどもの日"}]}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"initialized": True, "days_inserted": 365}

    days = client.get(f"/api/v1/calendars/{calendar.id}/days").json()
    assert len(days) == 365
    children_day = next(d for d in days if d["date"] == "2025-05-05")
    assert children_day["is_holiday"] is True
    assert children_day["national_holiday_name"] == "こどもの日"


def test_patch_calendar_to_taken_name_returns_409(client, calendar, other_calendar):
    response = client.patch(f"/api/v1/calendars/{other_calendar.id}", json={"name": calendar.name})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["status_code"] == 409

    response = client.get(f"/api/v1/calendars/{other_calendar.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "別キャンパス"
