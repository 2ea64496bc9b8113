"""
Blog image service.

Validates uploaded cover images, hands the bytes to the configured asset
backend and derives the metadata stored on the blog. Releasing an old
image is best-effort: failures are logged and never fail the request.
"""

from asyncio import wait_for
from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from app.configs.settings import settings
from app.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from app.monitoring import get_logger, metrics
from app.schemas.blog import ImageMetadata, ResponsiveUrls, UploadedImage
from app.services.storage import StorageService, StoredAsset, get_storage_service

logger = get_logger(__name__)

SIZE_PENDING = "processing"


class BlogImageService:
    """
    Service for blog cover images.

    Handles image validation, storage and release of replaced images.
    """

    def __init__(self, storage: StorageService | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage service instance. If not provided,
                    the default storage service will be used.
        """
        self.storage = storage or get_storage_service()
        self.image_max_size_bytes = settings.MEDIA_IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.image_allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES
        self.stats_timeout = settings.MEDIA_STATS_TIMEOUT

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.image_allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        """Validate image file size."""
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    @staticmethod
    def _inspect_image(file_data: bytes) -> tuple[str, bool]:
        """
        Check that the bytes decode as an image.

        Returns:
            tuple[str, bool]: Lower-cased format and whether it is animated
        """
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
            with Image.open(BytesIO(file_data)) as img:
                image_format = (img.format or "").lower()
                animated = bool(getattr(img, "is_animated", False))
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidImageError from e
        if not image_format:
            raise InvalidImageError
        return image_format, animated

    async def validate(self, file: UploadFile) -> tuple[bytes, str, bool]:
        """
        Read and validate an uploaded image.

        Args:
            file: Uploaded file

        Returns:
            tuple[bytes, str, bool]: Bytes, detected format, animation flag
        """
        self._validate_image_type(file.content_type)
        file_data = await file.read()
        self._validate_image_size(file_data)
        image_format, animated = self._inspect_image(file_data)
        return file_data, image_format, animated

    async def _stored_size(self, asset: StoredAsset) -> int | str:
        if asset.size_bytes is not None:
            return asset.size_bytes
        try:
            size = await wait_for(self.storage.size_of(asset.public_id), self.stats_timeout)
        except TimeoutError:
            logger.warning(f"Size lookup timed out for {asset.public_id}")
            return SIZE_PENDING
        except Exception as e:
            logger.warning(f"Size lookup failed for {asset.public_id}: {e!r}")
            return SIZE_PENDING
        return size if size is not None else SIZE_PENDING

    async def upload(self, file: UploadFile) -> UploadedImage:
        """
        Validate and store a blog cover image.

        Args:
            file: Uploaded file

        Returns:
            UploadedImage: Delivery URL and derived metadata

        Raises:
            UploadError: If the file is not an acceptable image
            StorageError: If the asset backend fails
        """
        file_data, image_format, animated = await self.validate(file)
        provider = self.storage.provider

        try:
            asset = await self.storage.store(
                file_data,
                file.filename or "image",
                source_format=image_format,
                animated=animated,
            )
        except Exception as e:
            metrics.record_asset_operation(provider, "upload", success=False)
            logger.exception(f"Image upload to {provider} failed")
            raise StorageError from e
        metrics.record_asset_operation(provider, "upload", success=True)

        metadata = ImageMetadata(
            format=asset.format,
            original_format=image_format,
            is_animated=animated,
            size=await self._stored_size(asset),
            public_id=asset.public_id,
            width=asset.width,
            height=asset.height,
            responsive_urls=ResponsiveUrls(**self.storage.responsive_urls(asset)),
        )
        return UploadedImage(url=asset.url, metadata=metadata)

    async def release(self, public_id: str | None) -> bool:
        """
        Delete a stored image without failing the caller.

        Args:
            public_id: Provider identifier; None is a no-op

        Returns:
            bool: True if the backend confirmed the deletion
        """
        if not public_id:
            return False
        provider = self.storage.provider
        try:
            deleted = await self.storage.delete(public_id)
        except Exception:
            metrics.record_asset_operation(provider, "delete", success=False)
            logger.exception(f"Failed to delete image {public_id} from {provider}")
            return False
        metrics.record_asset_operation(provider, "delete", success=deleted)
        if not deleted:
            logger.warning(f"Image {public_id} was not deleted from {provider}")
        return deleted


def public_id_of(image_metadata: dict | None) -> str | None:
    """Provider identifier recorded in a blog's stored image metadata."""
    if not image_metadata:
        return None
    return image_metadata.get("publicId") or image_metadata.get("public_id")
