"""
Cover image service.

Validates uploaded cover images (type, size, decodability) before handing
them to storage.
"""

from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from inkpost.configs.settings import settings
from inkpost.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedImageTypeError,
)
from inkpost.services.storage import LocalStorage


class CoverImageService:
    """Validate and store blog cover images."""

    def __init__(self, storage: LocalStorage | None = None) -> None:
        self.storage = storage or LocalStorage()
        self.max_size_bytes = settings.MAX_COVER_IMAGE_MB * 1024 * 1024
        self.allowed_types = settings.COVER_IMAGE_ALLOWED_TYPES

    def validate_content_type(self, content_type: str | None) -> None:
        """
        Raises:
            UnsupportedImageTypeError: If content type is not allowed
        """
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def validate_file_size(self, file_data: bytes) -> None:
        """
        Raises:
            ImageTooLargeError: If file exceeds maximum size
        """
        actual_size = len(file_data)
        if actual_size > self.max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MAX_COVER_IMAGE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def validate_image_content(self, file_data: bytes) -> None:
        """
        Raises:
            InvalidImageError: If the bytes do not decode as an image
        """
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidImageError from e

    async def save(self, upload: UploadFile) -> str:
        """
        Validate an uploaded cover image and store it.

        Args:
            upload: Multipart file from the request

        Returns:
            str: Public path to store in ``cover_image``
        """
        self.validate_content_type(upload.content_type)
        file_data = await upload.read()
        self.validate_file_size(file_data)
        self.validate_image_content(file_data)
        # pyrefly: ignore [bad-argument-type]
        return await self.storage.save_cover_image(file_data, upload.content_type)
