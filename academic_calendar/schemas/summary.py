"""
Aggregation output schemas
"""
from datetime import date as date_type
from typing import Optional, List
from pydantic import BaseModel


class TermSummaryRow(BaseModel):
    term_id: Optional[int] = None
    display_name: str
    # Monday..Saturday
    weekday_counts: List[int]


class VacationSummaryRow(BaseModel):
    key: str
    label: str
    count: int


class TermSummaryOut(BaseModel):
    term_summaries: List[TermSummaryRow]
    vacation_summaries: List[VacationSummaryRow]


class UniqueTermOut(BaseModel):
    term_id: Optional[int] = None
    display_name: str


class TermWeekdayDateOut(BaseModel):
    date: date_type
    type: str
    term_id: Optional[int] = None
    display_name: Optional[str] = None
    actual_weekday_label: str
    assigned_weekday_label: str
    class_weekday: Optional[int] = None
    class_order: Optional[int] = None
    notification_reasons: Optional[List[str]] = None


class TermAssignmentOut(BaseModel):
    date: date_type
    term_id: int
    term_name: Optional[str] = None
