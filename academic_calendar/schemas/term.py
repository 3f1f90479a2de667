"""
Term schemas
"""
from typing import Optional, List, Union
from pydantic import BaseModel, Field
from academic_calendar.models.term import HolidayFlag

# Accepts enum names, stored integer codes (incl. legacy 0) and booleans
HolidayFlagInput = Union[bool, int, str]


class TermOut(BaseModel):
    """Sanitized term"""
    id: int
    calendar_id: int
    name: str
    order: Optional[Union[int, float]] = None
    short_name: Optional[str] = None
    class_count: Optional[Union[int, float]] = None
    holiday_flag: Optional[HolidayFlag] = None


class TermAdd(BaseModel):
    name: str = Field(..., description="Term name (trimmed)")


class TermAddResult(BaseModel):
    added: bool
    term: TermOut


class TermBulkUpsert(BaseModel):
    names: List[str] = Field(..., description="Term names, inserted in order")


class TermBulkUpsertResult(BaseModel):
    added: int


class TermUpdate(BaseModel):
    """
    Patch for a term.

    Omitted fields are left untouched; fields sent as null are cleared.
    """
    name: Optional[str] = None
    order: Optional[float] = None
    short_name: Optional[str] = None
    class_count: Optional[float] = None
    holiday_flag: Optional[HolidayFlagInput] = None


class TermUpdateResult(BaseModel):
    updated: bool


class PresetTerm(BaseModel):
    name: str
    short_name: Optional[str] = None
    holiday_flag: Optional[HolidayFlagInput] = None


class PresetTermsRequest(BaseModel):
    terms: List[PresetTerm]


class PresetTermsResult(BaseModel):
    added: int
    updated: int
