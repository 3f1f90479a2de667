"""
Day classification endpoints
"""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from academic_calendar.core.deps import get_db
from academic_calendar.schemas.day import (
    DayUpsert,
    DayBatchRequest,
    DayBatchResult,
    DayRangeRequest,
    DayRangeResult,
    WeeklyHolidayRequest,
    UpdatedCountResult,
    ClassOrderResult,
    ClearDaysResult,
    DayOut,
)
from academic_calendar.services.aggregation_service import hydrate_day, list_calendar_days
from academic_calendar.services.calendar_service import require_calendar
from academic_calendar.services.class_order_service import assign_class_order
from academic_calendar.services.day_service import (
    upsert_day,
    upsert_days_batch,
    update_range,
    set_weekly_holiday,
    clear_days,
)

router = APIRouter()


@router.get("/{calendar_id}/days", response_model=List[DayOut])
async def list_days_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """List every stored day of a calendar in date order"""
    require_calendar(db, calendar_id)
    return list_calendar_days(db, calendar_id)


@router.put("/{calendar_id}/days/{day_date}", response_model=DayOut)
async def upsert_day_endpoint(
    calendar_id: int,
    day_date: date,
    day_data: DayUpsert,
    db: Session = Depends(get_db)
):
    """Create or replace the classification of one date"""
    day = upsert_day(
        db=db,
        calendar_id=calendar_id,
        day_date=day_date,
        day_type=day_data.type,
        term_id=day_data.term_id,
        description=day_data.description,
        class_weekday=day_data.class_weekday
    )
    return hydrate_day(db, day)


@router.post("/{calendar_id}/days/batch", response_model=DayBatchResult)
async def upsert_days_batch_endpoint(
    calendar_id: int,
    batch_data: DayBatchRequest,
    db: Session = Depends(get_db)
):
    """Upsert several dates in one transaction"""
    return upsert_days_batch(db, calendar_id, [entry.model_dump() for entry in batch_data.days])


@router.post("/{calendar_id}/days/range", response_model=DayRangeResult)
async def update_range_endpoint(
    calendar_id: int,
    range_data: DayRangeRequest,
    db: Session = Depends(get_db)
):
    """Set the type (and optionally the term) of every date in an inclusive range"""
    return update_range(
        db=db,
        calendar_id=calendar_id,
        start_date=range_data.start_date,
        end_date=range_data.end_date,
        day_type=range_data.type,
        term_id=range_data.term_id
    )


@router.post("/{calendar_id}/days/weekly-holiday", response_model=UpdatedCountResult)
async def weekly_holiday_endpoint(
    calendar_id: int,
    request: WeeklyHolidayRequest,
    db: Session = Depends(get_db)
):
    """Cancel every stored Saturday or Sunday"""
    return set_weekly_holiday(db, calendar_id, request.target)


@router.post("/{calendar_id}/days/class-order", response_model=ClassOrderResult)
async def assign_class_order_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Recompute class order and notification reasons"""
    return assign_class_order(db, calendar_id)


@router.delete("/{calendar_id}/days", response_model=ClearDaysResult)
async def clear_days_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Delete every day of a calendar"""
    return clear_days(db, calendar_id)
