"""
Exception Handlers.

Turn failures into the error envelope. Status codes:

    NotFoundError          404  RES_NOT_FOUND
    ValidationError        400  VAL_VALIDATION_ERROR   (error.errors per field)
    PersistenceError       500  SYS_PERSISTENCE_ERROR  (notes file unusable)
    RequestValidationError 422  VAL_REQUEST_INVALID    (malformed request)
    anything else          500  SYS_INTERNAL_ERROR

Usage:
    from notekeeper.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notekeeper.backend.core.exceptions import (
    ApplicationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.schemas.base import ErrorResponse

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    PersistenceError: 500,
}


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _log_context(request: Request, **fields: Any) -> dict[str, Any]:
    context = {"method": request.method, "path": request.url.path, **fields}
    request_id = _get_request_id(request)
    if request_id:
        context["request_id"] = request_id
    return context


def _respond(request: Request, status_code: int, body: ErrorResponse) -> JSONResponse:
    body.metadata.request_id = _get_request_id(request)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle note lookups, rejected payloads and notes file failures.

    Rejected payloads put their per-field messages in ``error.errors`` and
    the offending wire names in ``error.details.fields``. The notes file
    location is logged but never returned.
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    body = ErrorResponse.build(exc.code, exc.message)

    if isinstance(exc, ValidationError):
        body.error.errors = exc.errors
        body.error.details = {"fields": exc.fields}
        logger.warning(
            "Note rejected",
            extra=_log_context(request, code=exc.code, fields=exc.fields),
        )
    elif isinstance(exc, PersistenceError):
        logger.error(
            "Notes file unavailable",
            extra=_log_context(
                request,
                code=exc.code,
                reason=exc.message,
                data_file=str(exc.path) if exc.path else None,
            ),
        )
    elif status_code >= 500:
        logger.error("Server error", extra=_log_context(request, code=exc.code))
    else:
        logger.warning(
            "Note lookup failed",
            extra=_log_context(request, code=exc.code, reason=exc.message),
        )

    return _respond(request, status_code, body)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle requests FastAPI could not bind (non-object bodies, unknown
    ``view`` values). Each problem is reported as ``"<location>: <msg>"``.
    """
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        if location:
            message = f"{location}: {message}"
        if message not in errors:
            errors.append(message)

    logger.warning(
        "Request validation failed",
        extra=_log_context(request, error_count=len(errors)),
    )

    body = ErrorResponse.build(
        "VAL_REQUEST_INVALID", "Request validation failed", errors=errors
    )
    return _respond(request, 422, body)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Generic 500 without internal details."""
    logger.exception(
        "Unhandled exception",
        extra=_log_context(request, exception_type=type(exc).__name__),
    )

    body = ErrorResponse.build("SYS_INTERNAL_ERROR", "An unexpected error occurred")
    return _respond(request, 500, body)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
