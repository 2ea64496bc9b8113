"""
Cloudinary storage implementation.

This module provides a Cloudinary-based storage backend for production
use. Cloudinary converts static images to WebP on upload and serves the
responsive variants through delivery-time transformations.
"""

import asyncio
from functools import partial
from typing import Any

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader

from app.configs.settings import settings
from app.decorators.with_retry import TRANSIENT_ERRORS, with_retry
from app.monitoring import get_logger
from app.services.storage.base import RESPONSIVE_SIZES, StoredAsset

logger = get_logger(__name__)


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    Stores blog images in the configured folder. The blocking SDK calls
    run in the default thread pool.
    """

    provider = "cloudinary"

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        api_secret = settings.CLOUDINARY_API_SECRET
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=api_secret.get_secret_value() if api_secret else None,
            secure=True,
        )
        self.folder = settings.CLOUDINARY_FOLDER

    async def _run(self, func: Any, *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def store(
        self,
        file_data: bytes,
        filename: str,
        *,
        source_format: str,
        animated: bool = False,
    ) -> StoredAsset:
        """
        Upload an image to Cloudinary.

        Static images are stored as WebP; animated images keep their
        format so the animation survives.

        Args:
            file_data: Raw image bytes
            filename: Original filename sent by the client
            source_format: Format detected from the bytes
            animated: Whether the image has more than one frame

        Returns:
            StoredAsset: Uploaded image details
        """
        upload_options: dict[str, Any] = {
            "folder": self.folder,
            "resource_type": "image",
            "use_filename": False,
            "unique_filename": True,
            "timeout": settings.CLOUDINARY_TIMEOUT,
        }
        if not animated:
            upload_options["format"] = "webp"
            upload_options["quality"] = "auto"

        result = await self._run(cloudinary.uploader.upload, file_data, **upload_options)
        logger.info(f"Uploaded {filename} to Cloudinary as {result.get('public_id')}")

        return StoredAsset(
            url=result["secure_url"],
            public_id=result["public_id"],
            format=result.get("format") or ("webp" if not animated else source_format),
            width=result.get("width"),
            height=result.get("height"),
            size_bytes=result.get("bytes"),
        )

    async def delete(self, public_id: str) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            public_id: Cloudinary public ID

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        result = await self._destroy(public_id)
        return result.get("result") == "ok"

    @with_retry(
        max_retries=settings.STORAGE_RETRY_ATTEMPTS,
        exec_retry=(*TRANSIENT_ERRORS, cloudinary.exceptions.Error),
    )
    async def _destroy(self, public_id: str) -> dict[str, Any]:
        return await self._run(cloudinary.uploader.destroy, public_id, resource_type="image")

    async def size_of(self, public_id: str) -> int | None:
        """
        Fetch the stored size of an image from the Admin API.

        Args:
            public_id: Cloudinary public ID

        Returns:
            int | None: Size in bytes, or None if not found
        """
        try:
            result = await self._run(cloudinary.api.resource, public_id)
        except cloudinary.exceptions.NotFound:
            return None
        return result.get("bytes")

    def responsive_urls(self, asset: StoredAsset) -> dict[str, str]:
        """
        Build delivery URLs for every responsive size.

        Each variant is cropped to fill its box, with automatic quality,
        served as WebP.
        """
        urls = {"original": asset.url}
        for name, (width, height) in RESPONSIVE_SIZES.items():
            urls[name] = cloudinary.CloudinaryImage(asset.public_id).build_url(
                width=width,
                height=height,
                crop="fill",
                quality="auto",
                format="webp",
                secure=True,
            )
        return urls
