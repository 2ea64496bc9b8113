"""
Storage services package.

This package provides asset backends for blog images,
with support for local filesystem and Cloudinary.
"""

from app.configs.settings import settings
from app.services.storage.base import RESPONSIVE_SIZES, StorageService, StoredAsset
from app.services.storage.cloudinary_storage import CloudinaryStorage
from app.services.storage.local import LocalStorage


def get_storage_service() -> StorageService:
    """
    Get the configured storage service.

    Returns the appropriate storage implementation based on
    the STORAGE_PROVIDER setting.

    Returns:
        StorageService: Configured storage service instance
    """
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryStorage()
    return LocalStorage()


__all__ = [
    "RESPONSIVE_SIZES",
    "CloudinaryStorage",
    "LocalStorage",
    "StorageService",
    "StoredAsset",
    "get_storage_service",
]
