"""
Calendar day classification model
"""
from sqlalchemy import Column, Integer, Date, DateTime, String, Boolean, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from academic_calendar.db.base import Base


class DayType(str, enum.Enum):
    UNSPECIFIED = "UNSPECIFIED"
    CLASS = "CLASS"
    EXAM = "EXAM"
    RESERVE = "RESERVE"
    CANCELLED = "CANCELLED"


class NotificationReason(str, enum.Enum):
    HOLIDAY_CLASS = "1"          # class or exam on a national holiday
    UNEXPECTED_CLOSURE = "2"     # cancelled weekday inside a teaching term
    WEEKDAY_SUBSTITUTION = "3"   # timetable weekday differs from the calendar weekday
    TERM_START = "4"             # first teaching day of a term or after a vacation


class CalendarDay(Base):
    __tablename__ = "calendar_days"

    id = Column(Integer, primary_key=True, index=True)
    calendar_id = Column(Integer, ForeignKey("calendars.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    type = Column(String(20), nullable=False, default=DayType.UNSPECIFIED.value)
    term_id = Column(Integer, ForeignKey("calendar_terms.id", ondelete="SET NULL"), nullable=True, index=True)
    description = Column(String(500), nullable=True)
    is_holiday = Column(Boolean, default=False, nullable=False)
    national_holiday_name = Column(String(255), nullable=True)
    class_weekday = Column(Integer, nullable=True)  # 1=Mon..7=Sun
    class_order = Column(Integer, nullable=True)
    notification_reasons = Column(String(64), nullable=True)  # comma-separated NotificationReason values
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    calendar = relationship("Calendar", back_populates="days")

    __table_args__ = (
        UniqueConstraint('calendar_id', 'date', name='uq_calendar_day_date'),
        Index('ix_calendar_days_calendar_type', 'calendar_id', 'type'),
    )
