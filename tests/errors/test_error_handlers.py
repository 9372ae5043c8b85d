# tests/errors/test_error_handlers.py
"""Tests for the error envelope and the exception handler factories."""

from unittest.mock import MagicMock

import orjson
import pytest
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkpost.errors import (
    BaseAppError,
    BlogNotFoundError,
    DuplicateEntryError,
    ForbiddenError,
    ImageTooLargeError,
    InvalidReferenceError,
    UnsupportedImageTypeError,
    ValidationError,
    create_exception_handler,
    create_http_exception_handler,
    create_unhandled_exception_handler,
    error_content,
    format_validation_errors,
    validate_payload,
)


def mock_request(path: str = "/blogs") -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = path
    return request


class TestBaseAppError:
    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_representation(self) -> None:
        assert str(BaseAppError("Test error", 400)) == "Test error"


class TestErrorContent:
    def test_client_errors_carry_message(self) -> None:
        assert error_content("Blog not found", 404) == {
            "success": False,
            "message": "Blog not found",
        }

    def test_server_errors_carry_error(self) -> None:
        assert error_content("Invalid reference format", 500) == {
            "success": False,
            "error": "Invalid reference format",
        }

    def test_extra_fields(self) -> None:
        content = error_content("Validation failed", 422, errors=[])
        assert content == {"success": False, "message": "Validation failed", "errors": []}


class TestErrorStatusCodes:
    def test_not_found(self) -> None:
        error = BlogNotFoundError()
        assert (error.status_code, error.detail) == (404, "Blog not found")

    def test_forbidden(self) -> None:
        assert ForbiddenError("no").status_code == 403

    def test_duplicate(self) -> None:
        assert DuplicateEntryError().status_code == 409

    def test_invalid_reference_is_a_server_error(self) -> None:
        error = InvalidReferenceError()
        assert (error.status_code, error.detail) == (500, "Invalid reference format")

    def test_image_too_large_mentions_sizes(self) -> None:
        error = ImageTooLargeError(max_size_mb=5, actual_size_mb=7.3)
        assert error.status_code == 413
        assert "5MB" in error.detail
        assert "7.3MB" in error.detail


class TestCreateExceptionHandler:
    @pytest.mark.asyncio
    async def test_app_error(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(mock_request("/api/test"), BaseAppError("Test error", 400))

        assert response.status_code == 400
        assert orjson.loads(response.body) == {"success": False, "message": "Test error"}
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    @pytest.mark.asyncio
    async def test_public_attributes_are_included(self) -> None:
        handler = create_exception_handler(MagicMock())
        error = UnsupportedImageTypeError("image/gif", ["image/png"])

        response = await handler(mock_request(), error)

        assert response.status_code == 415
        assert orjson.loads(response.body)["allowed_types"] == ["image/png"]

    @pytest.mark.asyncio
    async def test_validation_error_lists_fields(self) -> None:
        handler = create_exception_handler(MagicMock())
        error = ValidationError(
            errors=[{"field": "title", "message": "Field required", "type": "missing"}],
        )

        response = await handler(mock_request(), error)

        assert response.status_code == 422
        assert orjson.loads(response.body) == {
            "success": False,
            "message": "Validation failed",
            "errors": [{"field": "title", "message": "Field required", "type": "missing"}],
        }

    @pytest.mark.asyncio
    async def test_generic_exception(self) -> None:
        handler = create_exception_handler(MagicMock())

        response = await handler(mock_request(), ValueError("Something went wrong"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {
            "success": False,
            "error": "Internal Server Error",
        }


class TestHttpExceptionHandler:
    @pytest.mark.asyncio
    async def test_wraps_http_exception(self) -> None:
        handler = create_http_exception_handler(MagicMock())
        exc = StarletteHTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

        response = await handler(mock_request(), exc)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert orjson.loads(response.body) == {"success": False, "message": "Not authenticated"}


class TestUnhandledExceptionHandler:
    @pytest.mark.asyncio
    async def test_hides_details(self) -> None:
        logger = MagicMock()
        handler = create_unhandled_exception_handler(logger)

        response = await handler(mock_request(), RuntimeError("db password is hunter2"))

        assert response.status_code == 500
        assert b"hunter2" not in response.body
        assert orjson.loads(response.body) == {
            "success": False,
            "error": "Internal Server Error",
        }
        logger.exception.assert_called_once()


class Sample(BaseModel):
    title: str = Field(..., min_length=1)
    count: int = 0


class TestValidationHelpers:
    def test_format_strips_location_prefix(self) -> None:
        errors = [{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}]

        assert format_validation_errors(errors) == [
            {"field": "title", "message": "Field required", "type": "missing"},
        ]

    def test_format_nested_location(self) -> None:
        errors = [{"loc": ("query", "tags", 0), "msg": "bad", "type": "value_error"}]

        assert format_validation_errors(errors)[0]["field"] == "tags.0"

    def test_validate_payload_success(self) -> None:
        assert validate_payload(Sample, {"title": "ok"}).title == "ok"

    def test_validate_payload_raises_app_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(Sample, {"count": "many"})

        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"title", "count"}
