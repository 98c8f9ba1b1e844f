"""Test cases for exception handling system."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from shop.core.exceptions import (
    AppError,
    BadRequestError,
    ConflictError,
    ErrorResponse,
    InternalServerError,
    NotFoundError,
    ProductInvalidArgumentError,
    ProductNotFoundError,
    register_exception_handlers,
)


@pytest.fixture
def app() -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client; unexpected errors come back as responses."""
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Test ErrorResponse Model
# =============================================================================


def test_error_response_model():
    """Test ErrorResponse model creation and validation."""
    error = ErrorResponse(
        error_code="TEST_ERROR",
        message="Test error message",
        detail={"key": "value"},
        path="/test/path",
    )

    assert error.success is False
    assert error.error_code == "TEST_ERROR"
    assert error.detail == {"key": "value"}
    assert error.path == "/test/path"


def test_error_response_validation_error() -> None:
    """Detail must be a mapping."""
    with pytest.raises(Exception):  # Pydantic ValidationError
        ErrorResponse(error_code="TEST", message="Test", detail="invalid_string")


# =============================================================================
# Test Exception Classes
# =============================================================================


def test_not_found_error_with_params(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-not-found")
    async def route():
        raise NotFoundError(
            message="Resource not found", error_code="RESOURCE_NOT_FOUND", detail={"id": 123}
        )

    response = client.get("/test-not-found")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "RESOURCE_NOT_FOUND"
    assert data["message"] == "Resource not found"
    assert data["detail"] == {"id": 123}
    assert data["path"] == "/test-not-found"


def test_bad_request_error(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-bad-request")
    async def route():
        raise BadRequestError(message="Invalid input", detail={"field": "sku"})

    response = client.get("/test-bad-request")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "BadRequestError"
    assert data["detail"] == {"field": "sku"}


def test_conflict_error(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-conflict")
    async def route():
        raise ConflictError(message="Slug already taken", detail={"slug": "shoe"})

    response = client.get("/test-conflict")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error_code"] == "ConflictError"


def test_internal_server_error(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-server-error")
    async def route():
        raise InternalServerError(message="Database error", detail={"db": "primary"})

    response = client.get("/test-server-error")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "InternalServerError"
    assert data["message"] == "Database error"


def test_bad_request_with_error_response(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-bad-request-obj")
    async def route():
        error = ErrorResponse(
            error_code="INVALID_PRICE",
            message="Price must not be negative",
            detail={"price": -1},
        )
        raise BadRequestError(error)

    response = client.get("/test-bad-request-obj")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "INVALID_PRICE"
    assert data["message"] == "Price must not be negative"
    assert data["detail"] == {"price": -1}


# =============================================================================
# Test Product Exceptions
# =============================================================================


def test_product_not_found_error(app: FastAPI, client: TestClient) -> None:
    @app.get("/products/{product_id}")
    async def route(product_id: int):
        raise ProductNotFoundError(detail={"product_id": product_id})

    response = client.get("/products/7")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["error_code"] == "ProductNotFoundError"
    assert data["message"] == "Product not found"
    assert data["detail"] == {"product_id": 7}


def test_product_invalid_argument_error(app: FastAPI, client: TestClient) -> None:
    @app.post("/products")
    async def route():
        raise ProductInvalidArgumentError(
            message="UNIQUE constraint failed: products.sku",
            detail={"database_error": "UNIQUE constraint failed: products.sku"},
        )

    response = client.post("/products")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "ProductInvalidArgumentError"
    assert data["detail"]["database_error"].startswith("UNIQUE constraint failed")


def test_product_errors_are_client_errors() -> None:
    assert isinstance(ProductNotFoundError(), NotFoundError)
    assert isinstance(ProductInvalidArgumentError(), BadRequestError)
    assert str(ProductInvalidArgumentError()) == "Invalid product data"


def test_detail_survives_http_exception_init() -> None:
    exc = AppError(message="boom", detail={"key": "value"})

    assert exc.detail == {"key": "value"}
    assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


# =============================================================================
# Test Default Error Messages
# =============================================================================


def test_not_found_error_default_message(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-default")
    async def route():
        raise NotFoundError()

    response = client.get("/test-default")

    data = response.json()
    assert data["message"] == "Not found"
    assert data["error_code"] == "NotFoundError"
    assert "detail" not in data  # None values are excluded


# =============================================================================
# Test Database and Generic Exception Handlers
# =============================================================================


def test_integrity_error_handler(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-integrity")
    async def route():
        raise IntegrityError("INSERT INTO products", {}, Exception("NOT NULL constraint failed"))

    response = client.get("/test-integrity")

    assert response.status_code == status.HTTP_409_CONFLICT
    data = response.json()
    assert data["error_code"] == "IntegrityError"
    assert data["detail"] == {"database_error": "NOT NULL constraint failed"}


def test_generic_exception_handler(app: FastAPI, client: TestClient) -> None:
    @app.get("/test-unexpected")
    async def route():
        msg = "Unexpected error"
        raise ValueError(msg)

    response = client.get("/test-unexpected")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert data["path"] == "/test-unexpected"


# =============================================================================
# Test Pydantic Validation Error Handler
# =============================================================================


def test_validation_error_handler(app: FastAPI, client: TestClient) -> None:
    class ProductIn(BaseModel):
        name: str
        quantity: int

    @app.post("/test-validation")
    async def route(data: ProductIn):
        return data

    response = client.post("/test-validation", json={"name": "Shoe", "quantity": "many"})

    assert response.status_code == 422
    data = response.json()
    assert data["error_code"] == "ValidationError"
    assert data["message"] == "Request validation failed"
    assert data["detail"]["errors"][0]["loc"] == ["body", "quantity"]


def test_exception_to_error_response_conversion() -> None:
    exc = ProductNotFoundError(detail={"product_id": 789})

    error_response = exc.to_error_response(path="/api/products/789")

    assert isinstance(error_response, ErrorResponse)
    assert error_response.error_code == "ProductNotFoundError"
    assert error_response.message == "Product not found"
    assert error_response.path == "/api/products/789"
