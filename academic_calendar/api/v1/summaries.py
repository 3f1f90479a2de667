"""
Aggregation endpoints (read-only)
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from academic_calendar.core.deps import get_db
from academic_calendar.schemas.summary import (
    TermSummaryOut,
    UniqueTermOut,
    TermWeekdayDateOut,
    TermAssignmentOut,
)
from academic_calendar.services.aggregation_service import (
    get_term_summary,
    get_unique_terms,
    get_term_weekday_dates,
    list_term_assignments_in_range,
)

router = APIRouter()


@router.get("/{calendar_id}/summary", response_model=TermSummaryOut)
async def term_summary_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Per-term Monday..Saturday class counts and vacation-day counts"""
    return get_term_summary(db, calendar_id)


@router.get("/{calendar_id}/unique-terms", response_model=List[UniqueTermOut])
async def unique_terms_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Distinct terms referenced by the calendar's days"""
    return get_unique_terms(db, calendar_id)


@router.get("/{calendar_id}/term-weekday-dates", response_model=List[TermWeekdayDateOut])
async def term_weekday_dates_endpoint(
    calendar_id: int,
    weekday: str = Query(..., description="Weekday label: 日 月 火 水 木 金 土"),
    term_id: Optional[int] = Query(None, description="Term ID; omit for days without a term"),
    db: Session = Depends(get_db)
):
    """Class days of a term whose timetable weekday matches the label"""
    return get_term_weekday_dates(db, calendar_id, weekday, term_id=term_id)


@router.get("/{calendar_id}/term-assignments", response_model=List[TermAssignmentOut])
async def term_assignments_endpoint(
    calendar_id: int,
    start_date: date = Query(..., description="Range start (inclusive)"),
    end_date: date = Query(..., description="Range end (inclusive)"),
    db: Session = Depends(get_db)
):
    """Term-linked days within a date range"""
    return list_term_assignments_in_range(db, calendar_id, start_date, end_date)
