"""
Seed a standard two-semester calendar for given fiscal year(s).
If a calendar with the same year and name exists, it is left unchanged. Run from
the repository root with .env loaded.

Usage:
  python scripts/seed_calendar.py              # seeds the current fiscal year
  python scripts/seed_calendar.py 2026 2027   # seeds 2026 and 2027
"""
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from academic_calendar.core.config import settings
from academic_calendar.db.session import SessionLocal
from academic_calendar.models.term import HolidayFlag
from academic_calendar.services.calendar_service import create_calendar, initialize_calendar_days

CALENDAR_NAME = "学年暦"

DEFAULT_TERMS = [
    {"name": "前期", "order": 1, "short_name": "前", "holiday_flag": HolidayFlag.TEACHING},
    {"name": "夏休み", "order": 2, "holiday_flag": HolidayFlag.VACATION},
    {"name": "後期", "order": 3, "short_name": "後", "holiday_flag": HolidayFlag.TEACHING},
    {"name": "冬休み", "order": 4, "holiday_flag": HolidayFlag.VACATION},
    {"name": "春休み", "order": 5, "holiday_flag": HolidayFlag.VACATION},
]


def current_fiscal_year() -> int:
    today = date.today()
    return today.year if today.month >= settings.FISCAL_YEAR_START_MONTH else today.year - 1


def main():
    years = [current_fiscal_year()]
    if len(sys.argv) > 1:
        years = [int(y) for y in sys.argv[1:]]

    db = SessionLocal()
    try:
        for year in sorted(years):
            calendar, created = create_calendar(db, CALENDAR_NAME, year, terms=DEFAULT_TERMS)
            result = initialize_calendar_days(db, calendar.id)
            state = "created" if created else "exists"
            print(f"Calendar {year} ({state}): id={calendar.id}, {calendar.fiscal_start}..{calendar.fiscal_end}, days_inserted={result['days_inserted']}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
