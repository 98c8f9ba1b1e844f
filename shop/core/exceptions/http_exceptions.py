"""Application exception hierarchy and standardized error responses.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   ├── BadRequestError (400)
    │   │   └── ProductInvalidArgumentError
    │   ├── NotFoundError (404)
    │   │   └── ProductNotFoundError
    │   └── ConflictError (409)
    └── ServerError (5xx errors)
        └── InternalServerError (500)

Usage:
    raise ProductNotFoundError(
        message="Product not found",
        detail={"product_id": 123}
    )

    # Or with a prepared ErrorResponse
    error = ErrorResponse(error_code="PRODUCT_NOT_FOUND", message="Product not found")
    raise NotFoundError(error)
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    success: bool = Field(default=False, description="Always False for errors")
    error_code: str = Field(description="Error code identifier")
    message: str = Field(description="Human-readable error message")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path where error occurred")


class AppError(HTTPException):
    """Base exception for all application errors."""

    default_message = "An error occurred"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str | ErrorResponse | None = None,
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            message, error_code, detail = message.message, message.error_code, message.detail

        # HTTPException.__init__ assigns self.detail, so it must run first
        super().__init__(status_code=status_code or self.default_status)
        self.message = message or self.default_message
        self.error_code = error_code or self.__class__.__name__
        self.detail = detail

    def __str__(self) -> str:
        return self.message

    def to_error_response(self, path: str | None = None) -> ErrorResponse:
        """Convert exception to ErrorResponse object."""
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            detail=self.detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    """Base exception for client errors (4xx)."""

    default_message = "Client error"
    default_status = status.HTTP_400_BAD_REQUEST


class BadRequestError(ClientError):
    """400 Bad Request - Invalid request parameters."""

    default_message = "Bad request"
    default_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(ClientError):
    """404 Not Found - Resource does not exist."""

    default_message = "Not found"
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(ClientError):
    """409 Conflict - Resource already exists or state conflict."""

    default_message = "Conflict"
    default_status = status.HTTP_409_CONFLICT


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    """Base exception for server errors (5xx)."""

    default_message = "Server error"


class InternalServerError(ServerError):
    """500 Internal Server Error - Unexpected server error."""

    default_message = "Internal server error"


# ============================================================================
# Product Exceptions
# ============================================================================


class ProductNotFoundError(NotFoundError):
    """No product matches the requested id or filter."""

    default_message = "Product not found"


class ProductInvalidArgumentError(BadRequestError):
    """A product write was rejected by a database constraint or bad input."""

    default_message = "Invalid product data"
