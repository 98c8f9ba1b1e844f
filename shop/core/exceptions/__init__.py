"""Exception handling package for the shop API.

Provides the application exception hierarchy and the handlers that turn
those exceptions into standardized error responses.
"""

from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadRequestError,
    ClientError,
    ConflictError,
    ErrorResponse,
    InternalServerError,
    NotFoundError,
    ProductInvalidArgumentError,
    ProductNotFoundError,
    ServerError,
)

__all__ = [
    "AppError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "ErrorResponse",
    "InternalServerError",
    "NotFoundError",
    "ProductInvalidArgumentError",
    "ProductNotFoundError",
    "ServerError",
    "register_exception_handlers",
]
