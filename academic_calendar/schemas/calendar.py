"""
Calendar schemas
"""
from datetime import date as date_type, datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict


class InitialTerm(BaseModel):
    """Term supplied when creating a calendar"""
    name: str = Field(..., description="Term name")
    order: Optional[float] = Field(None, description="Sort key (non-negative)")
    short_name: Optional[str] = Field(None, description="Abbreviated name")
    class_count: Optional[float] = Field(None, description="Expected number of classes")
    holiday_flag: Optional[Union[bool, int, str]] = Field(None, description="TEACHING or VACATION")


class CalendarCreate(BaseModel):
    """Schema for creating a calendar"""
    name: str = Field(..., description="Calendar name")
    fiscal_year: int = Field(..., description="Fiscal year (e.g., 2025)")
    disable_saturday: bool = Field(False, description="Exclude Saturday classes from summaries")
    memo: Optional[str] = Field(None, description="Free-text note")
    terms: List[InitialTerm] = Field(default_factory=list, description="Initial terms")


class CalendarUpdate(BaseModel):
    """Schema for updating a calendar"""
    name: Optional[str] = Field(None, description="Calendar name")
    disable_saturday: Optional[bool] = Field(None, description="Exclude Saturday classes from summaries")
    memo: Optional[str] = Field(None, description="Free-text note")


class CalendarOut(BaseModel):
    """Schema for calendar output"""
    id: int
    name: str
    fiscal_year: int
    fiscal_start: date_type
    fiscal_end: date_type
    disable_saturday: bool
    memo: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NationalHoliday(BaseModel):
    date: date_type
    name: str


class InitializeDaysRequest(BaseModel):
    """National holidays to mark while filling the day grid"""
    holidays: List[NationalHoliday] = Field(default_factory=list)


class InitializeDaysResult(BaseModel):
    initialized: bool
    days_inserted: int
