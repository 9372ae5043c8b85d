from starlette.status import HTTP_404_NOT_FOUND

from inkpost.errors.base import BaseAppError, create_exception_handler
from inkpost.monitoring import get_logger

logger = get_logger(__name__)


class NotFoundError(BaseAppError):
    """Base exception for missing resources."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class BlogNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Blog not found") -> None:
        super().__init__(detail)


class UserNotFoundError(NotFoundError):
    def __init__(self, detail: str = "User not found") -> None:
        super().__init__(detail)


not_found_exception_handler = create_exception_handler(logger)
