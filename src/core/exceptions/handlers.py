"""Turn exceptions into the standard error envelope."""

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.exceptions import AppException
from src.shared.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, errors: list[ErrorDetail] | None = None) -> JSONResponse:
    response = ErrorResponse(
        message=message,
        errors=errors if errors is not None else [ErrorDetail(field=None, message=message)],
    )
    return JSONResponse(status_code=status_code, content=response.model_dump())


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application exceptions. ``message`` reaches the dashboard verbatim."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    field = exc.details.get("field")
    return _error_response(exc.status_code, exc.message, [ErrorDetail(field=field, message=exc.message)])


def _format_validation_errors(errors: list[dict]) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for error in errors:
        loc = error.get("loc", ())
        # Drop "body"/"query"/"path" so fields read like the form or JSON key
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) if loc else None
        details.append(ErrorDetail(field=field, message=error.get("msg", "Invalid value")))
    return details


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request validation errors (body, query, path, multipart form)."""
    errors = _format_validation_errors(exc.errors())
    message = errors[0].message if len(errors) == 1 else "Validation error"
    return _error_response(422, message, errors)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle generic HTTP exceptions (unknown routes, wrong methods)."""
    message = str(exc.detail) if exc.detail else "HTTP error"
    return _error_response(exc.status_code, message)


def _friendly_db_error(exc: Exception) -> tuple[str, int]:
    """
    Convert common DB errors to a stable, user-facing message.

    Full DB error text is only exposed when debug is enabled.
    """
    raw = str(getattr(exc, "orig", exc))
    lower = raw.lower()

    if "does not exist" in lower and ("column" in lower or "relation" in lower):
        # Typical after deploying code without running Alembic migrations.
        return "Database schema is out of date. Run the latest migrations and try again.", 500
    if "foreign key" in lower:
        return "Referenced record does not exist", 409
    if "unique" in lower or "duplicate key" in lower:
        return "Record already exists", 409
    if settings.debug:
        return raw, 500
    return "Database error", 500


async def sqlalchemy_db_error_handler(request: Request, exc: Exception) -> JSONResponse:
    message, status_code = _friendly_db_error(exc)
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(status_code, message)
