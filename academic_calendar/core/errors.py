"""
Central error handling for the Academic Calendar backend
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException


class CalendarError(HTTPException):
    """
    Base class for domain failures raised by the service layer.

    Subclasses fix the HTTP status so callers outside a request (scripts,
    the verification workflow) can still catch them by type.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Calendar operation failed"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class EmptyNameError(CalendarError):
    default_detail = "Name must not be empty"


class DuplicateNameError(CalendarError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A term with the same name already exists in this calendar"


class InvalidOrderError(CalendarError):
    default_detail = "order must be a non-negative number"


class InvalidClassCountError(CalendarError):
    default_detail = "class_count must be a non-negative number"


class InvalidHolidayFlagError(CalendarError):
    default_detail = "holiday_flag must be TEACHING or VACATION"


class InvalidDateRangeError(CalendarError):
    default_detail = "start_date must be on or before end_date"


class TermNotFoundError(CalendarError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Term not found"


class CalendarNotFoundError(CalendarError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Calendar not found"


class CrossCalendarAccessError(CalendarError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Term belongs to a different calendar"


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "status_code": exc.status_code,
            "detail": exc.detail,
            "path": str(request.url.path)
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    from academic_calendar.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "status_code": 422,
                "detail": "Validation error: Invalid request data",
                "path": str(request.url.path)
            }
        )

    # ctx may hold exception instances (e.g. ValueError), which are not JSON serializable
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "status_code": 422,
            "detail": "Validation error",
            "errors": errors,
            "path": str(request.url.path)
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    from academic_calendar.core.config import settings
    import logging
    import traceback

    logger = logging.getLogger(__name__)
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "status_code": 500,
                "detail": "Internal server error",
                "path": str(request.url.path)
            }
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "status_code": 500,
            "detail": str(exc),
            "path": str(request.url.path),
            "traceback": traceback.format_exc() if settings.APP_ENV == "local" else None
        }
    )
