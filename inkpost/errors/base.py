from collections.abc import Awaitable, Callable
from typing import Any, cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from inkpost.configs import DEFAULT_ERROR_MESSAGE
from inkpost.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_content(detail: str, status_code: int, **extra: Any) -> dict[str, Any]:
    """
    Build the error envelope.

    Client errors carry ``message``; server faults carry ``error``.

    Examples:
    --------
    >>> error_content("Blog not found", 404)
    {'success': False, 'message': 'Blog not found'}
    """
    key = "error" if status_code >= HTTP_500_INTERNAL_SERVER_ERROR else "message"
    return {"success": False, key: detail, **extra}


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", DEFAULT_ERROR_MESSAGE)

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Extra public attributes of the exception travel with the envelope
        extra = {
            k: v
            for k, v in exc.__dict__.items()
            if k not in ("status_code", "detail", "headers") and not k.startswith("_")
        }

        return ORJSONResponse(
            content=error_content(str(detail), status_code, **extra),
            status_code=status_code,
        )

    return handler


def create_http_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Render Starlette/FastAPI ``HTTPException`` through the error envelope."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        http_exc = cast(StarletteHTTPException, exc)
        logger.warning(
            f"{http_exc.detail} for ip: {host(request)} for endpoint {request.url.path}",
        )
        return ORJSONResponse(
            content=error_content(str(http_exc.detail), http_exc.status_code),
            status_code=http_exc.status_code,
            headers=getattr(http_exc, "headers", None),
        )

    return handler


def create_unhandled_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Render any unexpected exception as a generic 500 envelope."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(
            f"Unhandled error for ip: {host(request)} for endpoint {request.url.path}",
            exc_info=exc,
        )
        return ORJSONResponse(
            content=error_content(DEFAULT_ERROR_MESSAGE, HTTP_500_INTERNAL_SERVER_ERROR),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler
