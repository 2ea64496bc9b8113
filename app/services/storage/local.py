"""
Local filesystem storage implementation.

This module provides a local storage backend for development
and testing purposes. Images are written unchanged under the uploads
directory and served from ``/uploads``.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os

from app.configs.settings import settings
from app.monitoring import get_logger
from app.services.storage.base import RESPONSIVE_SIZES, StoredAsset

logger = get_logger(__name__)

IMAGE_FOLDER = "blog-images"


class LocalStorage:
    """
    Local filesystem storage implementation.

    There is no transformation pipeline locally: every responsive URL
    points at the original file.
    """

    provider = "local"

    def __init__(self, uploads_dir: str | Path | None = None) -> None:
        """Initialize local storage with configured paths."""
        self.uploads_dir = Path(uploads_dir or settings.LOCAL_UPLOAD_DIR)
        self.base_path = self.uploads_dir / IMAGE_FOLDER
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, public_id: str) -> Path:
        """
        Get the file path for a stored image.

        Args:
            public_id: ``blog-images/<name>.<ext>`` identifier

        Returns:
            Path: Full path to the image file
        """
        return self.uploads_dir / public_id

    async def store(
        self,
        file_data: bytes,
        filename: str,
        *,
        source_format: str,
        animated: bool = False,
    ) -> StoredAsset:
        """
        Write an image to the local filesystem.

        Args:
            file_data: Raw image bytes
            filename: Original filename sent by the client
            source_format: Format detected from the bytes
            animated: Whether the image has more than one frame

        Returns:
            StoredAsset: Path-based URL and identifier of the file
        """
        extension = source_format.lower()
        public_id = f"{IMAGE_FOLDER}/{uuid4().hex}.{extension}"
        file_path = self._get_file_path(public_id)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_data)

        logger.debug(f"Stored {filename} at {file_path}")
        return StoredAsset(
            url=f"/uploads/{public_id}",
            public_id=public_id,
            format=extension,
            size_bytes=len(file_data),
        )

    async def delete(self, public_id: str) -> bool:
        """
        Delete an image from the local filesystem.

        Args:
            public_id: Identifier returned by ``store``

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        file_path = self._get_file_path(public_id)
        if not file_path.exists():
            return False
        await aiofiles.os.remove(file_path)
        return True

    async def size_of(self, public_id: str) -> int | None:
        file_path = self._get_file_path(public_id)
        if not file_path.exists():
            return None
        stat = await aiofiles.os.stat(file_path)
        return stat.st_size

    def responsive_urls(self, asset: StoredAsset) -> dict[str, str]:
        return {"original": asset.url} | dict.fromkeys(RESPONSIVE_SIZES, asset.url)
