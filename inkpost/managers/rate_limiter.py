"""Rate limiter configuration using slowapi."""

from collections.abc import Callable
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from inkpost.configs import LimiterConfig
from inkpost.errors import error_content
from inkpost.monitoring import get_logger
from inkpost.utils.helpers import host

logger = get_logger(__name__)


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Uses API key from header if available, otherwise falls back to IP address.
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"apikey:{api_key}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """Render ``RateLimitExceeded`` through the error envelope."""
    http_exc = cast(RateLimitExceeded, exc)
    logger.warning(f"Rate limit exceeded for ip: {host(request)} at {request.url.path}")
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content=error_content(
            f"Rate limit exceeded: {http_exc.detail}",
            HTTP_429_TOO_MANY_REQUESTS,
        ),
    )


def tiered_limit(with_api_key: str, default: str) -> Callable[[str], str]:
    """
    Limit provider giving identified clients a higher quota.

    Example:
        @limiter.limit(tiered_limit("60/minute", "20/minute"))
    """
    return lambda key: with_api_key if key.startswith("apikey:") else default
