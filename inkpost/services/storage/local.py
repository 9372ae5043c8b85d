"""
Local filesystem storage for blog cover images.

Files are written under ``UPLOADS_DIR/blog_covers`` and served by the
``/uploads`` static mount.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles

from inkpost.configs.settings import settings
from inkpost.errors.upload import StorageError
from inkpost.monitoring import get_logger

logger = get_logger(__name__)

COVERS_FOLDER = "blog_covers"

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class LocalStorage:
    """Stores cover images on the local filesystem."""

    def __init__(self, uploads_dir: Path | None = None) -> None:
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.base_path = self.uploads_dir / COVERS_FOLDER

    def _ensure_directory(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _public_path(self, filename: str) -> str:
        return f"{settings.UPLOADS_URL_PREFIX}/{COVERS_FOLDER}/{filename}"

    async def save_cover_image(self, file_data: bytes, content_type: str) -> str:
        """
        Write a cover image under a fresh random name.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            str: Public URL path of the stored file

        Raises:
            StorageError: If the file cannot be written
        """
        filename = f"{uuid4().hex}.{EXTENSIONS.get(content_type, 'jpg')}"
        try:
            self._ensure_directory()
            async with aiofiles.open(self.base_path / filename, "wb") as f:
                await f.write(file_data)
        except OSError as e:
            logger.exception("Failed to write cover image")
            raise StorageError from e

        return self._public_path(filename)

    async def delete_cover_image(self, public_path: str | None) -> bool:
        """
        Delete a stored cover image by its public path.

        Returns:
            bool: True if a file was removed
        """
        if not public_path:
            return False
        file_path = self.base_path / Path(public_path).name
        if file_path.exists():
            file_path.unlink()
            return True
        return False
