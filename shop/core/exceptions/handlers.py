"""Exception handlers for the shop API."""

from typing import Any

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from .http_exceptions import AppError, ErrorResponse, InternalServerError

logger = structlog.get_logger(__name__)


def _error_json(status_code: int, error_response: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle AppError and its subclasses (product errors included)."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("app_error", error_code=exc.error_code, message=exc.message)
    else:
        logger.info("client_error", error_code=exc.error_code, message=exc.message)

    return _error_json(exc.status_code, exc.to_error_response(path=request.url.path))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors (422)."""
    error_response = ErrorResponse(
        error_code="ValidationError",
        message="Request validation failed",
        detail={"errors": jsonable_errors(exc)},
        path=request.url.path,
    )
    return _error_json(status.HTTP_422_UNPROCESSABLE_ENTITY, error_response)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors without the raw ``ctx``/``input`` values, which may not serialize."""
    return [
        {key: value for key, value in error.items() if key not in ("ctx", "input", "url")}
        for error in exc.errors()
    ]


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle database constraint violations that escaped a repository (409)."""
    logger.error("database_integrity_error", error=str(exc.orig), exc_info=True)

    error_response = ErrorResponse(
        error_code="IntegrityError",
        message="Database constraint violation",
        detail={"database_error": str(exc.orig)},
        path=request.url.path,
    )
    return _error_json(status.HTTP_409_CONFLICT, error_response)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (500)."""
    logger.error("unexpected_error", error=str(exc), exc_info=True)

    internal_exc = InternalServerError(message="An unexpected error occurred")
    return _error_json(internal_exc.status_code, internal_exc.to_error_response(path=request.url.path))


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
