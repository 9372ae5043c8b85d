from inkpost.errors.auth import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserAuthenticationError,
    auth_exception_handler,
)
from inkpost.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_http_exception_handler,
    create_unhandled_exception_handler,
    error_content,
)
from inkpost.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    InvalidReferenceError,
    database_exception_handler,
)
from inkpost.errors.password_hasher import PasswordHashingError, password_hashing_exception_handler
from inkpost.errors.resource import (
    BlogNotFoundError,
    NotFoundError,
    UserNotFoundError,
    not_found_exception_handler,
)
from inkpost.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from inkpost.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    format_validation_errors,
    validate_payload,
    validation_exception_handler,
)

__all__ = [
    "BaseAppError",
    "BlogNotFoundError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "InvalidReferenceError",
    "InvalidTokenError",
    "NotFoundError",
    "PasswordHashingError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "UserNotFoundError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "create_http_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_content",
    "format_validation_errors",
    "not_found_exception_handler",
    "password_hashing_exception_handler",
    "upload_exception_handler",
    "validate_payload",
    "validation_exception_handler",
]
