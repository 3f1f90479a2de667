"""
Academic calendar model
"""
from sqlalchemy import Column, Integer, Date, DateTime, String, Boolean, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from academic_calendar.db.base import Base


class Calendar(Base):
    __tablename__ = "calendars"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    fiscal_year = Column(Integer, nullable=False, index=True)  # e.g., 2025 for April 2025 - March 2026
    fiscal_start = Column(Date, nullable=False)
    fiscal_end = Column(Date, nullable=False)
    disable_saturday = Column(Boolean, default=False, nullable=False)
    memo = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    terms = relationship("CalendarTerm", back_populates="calendar", cascade="all, delete-orphan")
    days = relationship("CalendarDay", back_populates="calendar", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('fiscal_year', 'name', name='uq_calendar_year_name'),
    )
