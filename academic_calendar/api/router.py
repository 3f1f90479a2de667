"""
Main API router
"""
from fastapi import APIRouter

from academic_calendar.api.v1 import (
    health,
    version,
    calendars,
    terms,
    days,
    summaries,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(calendars.router, prefix="/calendars", tags=["calendars"])
api_router.include_router(terms.router, prefix="/calendars", tags=["terms"])
api_router.include_router(days.router, prefix="/calendars", tags=["days"])
api_router.include_router(summaries.router, prefix="/calendars", tags=["summaries"])
