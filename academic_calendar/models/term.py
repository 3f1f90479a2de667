"""
Calendar term (period) model
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from academic_calendar.db.base import Base


class HolidayFlag(str, enum.Enum):
    TEACHING = "TEACHING"
    VACATION = "VACATION"


# Stored integer codes. 0 is a legacy value that means TEACHING.
HOLIDAY_FLAG_VACATION_CODE = 1
HOLIDAY_FLAG_TEACHING_CODE = 2
HOLIDAY_FLAG_LEGACY_CODE = 0


class CalendarTerm(Base):
    __tablename__ = "calendar_terms"

    id = Column(Integer, primary_key=True, index=True)
    calendar_id = Column(Integer, ForeignKey("calendars.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    order = Column(Integer, nullable=True)  # absent = sorts last
    short_name = Column(String(64), nullable=True)
    class_count = Column(Integer, nullable=True)
    holiday_flag = Column(Integer, nullable=True)  # see HOLIDAY_FLAG_*_CODE
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    calendar = relationship("Calendar", back_populates="terms")

    __table_args__ = (
        UniqueConstraint('calendar_id', 'name', name='uq_calendar_term_name'),
    )
