"""Custom validation error handling for FastAPI."""

from collections.abc import Sequence
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from inkpost.errors.base import BaseAppError, create_exception_handler, error_content
from inkpost.monitoring import get_logger
from inkpost.utils.helpers import host

logger = get_logger(__name__)

# Location prefixes FastAPI adds in front of the field name
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "form", "header", "cookie"})


class ValidationError(BaseAppError):
    """Custom validation error class."""

    def __init__(
        self,
        detail: str = "Validation failed",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_422_UNPROCESSABLE_ENTITY)
        self.errors = errors or []


def format_validation_errors(errors: Sequence[Any]) -> list[dict[str, Any]]:
    """
    Flatten pydantic error dicts into ``{field, message, type}`` entries.

    Args:
        errors: Output of ``exc.errors()`` from pydantic or FastAPI

    Returns:
        list[dict[str, Any]]: Client-facing error entries
    """
    formatted = []
    for error in errors:
        loc = list(error.get("loc", []))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        formatted.append(
            {
                "field": ".".join(str(part) for part in loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            },
        )
    return formatted


def validate_payload[ModelT: BaseModel](model: type[ModelT], data: Any) -> ModelT:
    """
    Validate ``data`` against ``model`` raising the application error type.

    Raises:
        ValidationError: With field-level messages when validation fails
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(errors=format_validation_errors(e.errors())) from e


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request validation errors with the standard error envelope.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)
    formatted_errors = format_validation_errors(exec_error.errors())

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_content(
            "Validation failed",
            HTTP_422_UNPROCESSABLE_ENTITY,
            errors=formatted_errors,
        ),
    )


app_validation_exception_handler = create_exception_handler(logger)
