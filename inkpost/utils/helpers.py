from collections.abc import MutableMapping
from datetime import UTC, datetime
from re import sub
from typing import Any
from unicodedata import normalize
from uuid import UUID

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel
from starlette.routing import BaseRoute, Match, Route

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(DATE_FORMAT)


def format_datetime(value: datetime | None) -> str | None:
    """
    Format a stored timestamp for API responses.

    Naive values (as returned by SQLite) are treated as UTC.

    Args:
        value: Timestamp read from the database

    Returns:
        str | None: ``YYYY-MM-DD HH:MM:SS`` in local time, or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone().strftime(DATE_FORMAT)


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def slugify(text: str) -> str:
    """
    Derive a URL slug: lowercase, alphanumerics and single hyphens only.

    Accented letters are folded to their ASCII base letter first.

    Args:
        text: Source text (usually a title)

    Returns:
        str: Slug, empty when ``text`` has no usable characters

    Examples:
    --------
    >>> slugify("Hello World")
    'hello-world'
    >>> slugify("  What's New in 2025?  ")
    'whats-new-in-2025'
    >>> slugify("Crème Brûlée")
    'creme-brulee'
    """
    slug = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii").lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def parse_positive_int(value: str | int | None, default: int, maximum: int | None = None) -> int:
    """
    Parse a query parameter as a positive integer.

    Absent, non-numeric, zero or negative values fall back to ``default``.

    Args:
        value: Raw parameter value
        default: Value used when ``value`` is unusable
        maximum: Optional upper bound

    Returns:
        int: Parsed and bounded value
    """
    try:
        number = int(str(value).strip()) if value is not None else default
    except ValueError:
        number = default
    if number < 1:
        number = default
    if maximum is not None:
        number = min(number, maximum)
    return number


def parse_uuid(value: str | UUID | None) -> UUID | None:
    """Return ``value`` as a UUID, or None when it is absent or malformed."""
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so ``text`` matches literally."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def respond(model: BaseModel, status_code: int = 200, **dump_options: Any) -> ORJSONResponse:
    """
    Serialize a response envelope with camelCase aliases.

    Args:
        model: Envelope to send
        status_code: HTTP status code
        **dump_options: Extra ``model_dump`` options such as ``exclude``

    Returns:
        ORJSONResponse: JSON response
    """
    return ORJSONResponse(
        content=model.model_dump(mode="json", by_alias=True, **dump_options),
        status_code=status_code,
    )
