"""
Calendar registry endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from academic_calendar.core.deps import get_db
from academic_calendar.schemas.calendar import (
    CalendarCreate,
    CalendarUpdate,
    CalendarOut,
    InitializeDaysRequest,
    InitializeDaysResult,
)
from academic_calendar.services.calendar_service import (
    create_calendar,
    require_calendar,
    update_calendar,
    delete_calendar,
    initialize_calendar_days,
)

router = APIRouter()


@router.post("", response_model=CalendarOut, status_code=201)
async def create_calendar_endpoint(
    calendar_data: CalendarCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """Create a calendar; an existing calendar with the same year and name is returned with 200"""
    calendar, created = create_calendar(
        db=db,
        name=calendar_data.name,
        fiscal_year=calendar_data.fiscal_year,
        disable_saturday=calendar_data.disable_saturday,
        memo=calendar_data.memo,
        terms=[term.model_dump() for term in calendar_data.terms]
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return calendar


@router.get("/{calendar_id}", response_model=CalendarOut)
async def get_calendar_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Get a calendar by ID"""
    return require_calendar(db, calendar_id)


@router.patch("/{calendar_id}", response_model=CalendarOut)
async def update_calendar_endpoint(
    calendar_id: int,
    calendar_data: CalendarUpdate,
    db: Session = Depends(get_db)
):
    """Update a calendar's name, Saturday setting or memo"""
    return update_calendar(
        db=db,
        calendar_id=calendar_id,
        name=calendar_data.name,
        disable_saturday=calendar_data.disable_saturday,
        memo=calendar_data.memo
    )


@router.delete("/{calendar_id}")
async def delete_calendar_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """Delete a calendar with its terms and days"""
    return {"deleted": delete_calendar(db, calendar_id)}


@router.post("/{calendar_id}/initialize-days", response_model=InitializeDaysResult)
async def initialize_days_endpoint(
    calendar_id: int,
    request: Optional[InitializeDaysRequest] = None,
    db: Session = Depends(get_db)
):
    """Fill an empty calendar with one unspecified day per fiscal-year date"""
    holidays = request.holidays if request else []
    return initialize_calendar_days(
        db,
        calendar_id,
        holidays=[(holiday.date, holiday.name) for holiday in holidays]
    )
