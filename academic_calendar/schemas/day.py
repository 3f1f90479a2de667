"""
Day classification schemas
"""
from datetime import date as date_type, datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field
from academic_calendar.models.day import DayType


class DayUpsert(BaseModel):
    """Classification of a single date (date comes from the path)"""
    type: DayType = Field(..., description="Day type")
    term_id: Optional[int] = Field(None, description="Term of the same calendar")
    description: Optional[str] = Field(None, description="Free text; blank clears")
    class_weekday: Optional[float] = Field(None, description="Timetable weekday override, 1=Mon..7=Sun")


class DayBatchEntry(DayUpsert):
    date: date_type


class DayBatchRequest(BaseModel):
    days: List[DayBatchEntry]


class DayBatchResult(BaseModel):
    processed: int


class DayRangeRequest(BaseModel):
    start_date: date_type
    end_date: date_type
    type: DayType
    term_id: Optional[int] = None


class DayRangeResult(BaseModel):
    updated_count: int
    date_range: str


class WeeklyHolidayRequest(BaseModel):
    target: Literal["saturday", "sunday"]


class UpdatedCountResult(BaseModel):
    updated_count: int


class ClassOrderResult(BaseModel):
    updated_count: int
    cleared_count: int


class ClearDaysResult(BaseModel):
    deleted_count: int


class DayOut(BaseModel):
    """Stored day with its term name and effective timetable weekday"""
    id: int
    date: date_type
    type: DayType
    term_id: Optional[int] = None
    term_name: Optional[str] = None
    description: Optional[str] = None
    is_holiday: bool = False
    national_holiday_name: Optional[str] = None
    class_weekday: Optional[int] = None
    effective_class_weekday: int
    class_order: Optional[int] = None
    notification_reasons: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
