import logging
import traceback
from fastapi import Request, status
from fastapi.responses import HTMLResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.pages.cars import render_error_page
from app.schemas.common import error_details
from app.utils.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: AppException) -> HTMLResponse:
    """Handle all AppException subclasses (our custom exceptions)."""
    detail = exc.detail
    error = detail.get("error") or {}
    return HTMLResponse(
        render_error_page(
            exc.status_code,
            detail.get("message", "An error occurred"),
            error.get("code", ErrorCode.INTERNAL_SERVER_ERROR),
        ),
        status_code=exc.status_code,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    """Plain HTTP errors raised by routing itself (unknown page, wrong method)."""
    return HTMLResponse(
        render_error_page(exc.status_code, str(exc.detail)),
        status_code=exc.status_code,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> HTMLResponse:
    """
    Handle malformed query/path/form params (422).
    Lists every offending parameter on a plain error page.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        # loc is a tuple like ("query", "view")
        loc = error.get("loc", [])
        field = ".".join(str(l) for l in loc if l not in ("body", "query", "path")) if loc else "unknown"
        errors[field] = error.get("msg", "Invalid value")

    message = "; ".join(f"{d.field}: {d.message}" for d in error_details(errors))
    return HTMLResponse(
        render_error_page(status.HTTP_422_UNPROCESSABLE_ENTITY, message, ErrorCode.VALIDATION_ERROR),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """
    Catch-all handler for unexpected exceptions.
    Logs the full traceback, returns a safe 500 page.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url}\n"
        f"{traceback.format_exc()}"
    )
    return HTMLResponse(
        render_error_page(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred. Please try again later.",
            ErrorCode.INTERNAL_SERVER_ERROR,
        ),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
