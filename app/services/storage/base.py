"""
Base storage protocol for blog image assets.

This module defines the interface every asset backend implements, so the
media service can run against Cloudinary in production and the local
filesystem in development.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol

# Responsive variants served to clients: name -> (width, height)
RESPONSIVE_SIZES: dict[str, tuple[int, int]] = {
    "thumbnail": (400, 300),
    "medium": (800, 600),
    "large": (1200, 900),
    "mobile": (480, 360),
}


@dataclass(frozen=True, slots=True)
class StoredAsset:
    """
    Result of storing one image.

    Attributes:
        url: Delivery URL of the stored image.
        public_id: Provider identifier used for later deletion.
        format: Stored format (``webp`` unless the image is animated).
        width: Width in pixels, when the provider reports it.
        height: Height in pixels, when the provider reports it.
        size_bytes: Stored size, or None when the provider did not report it.
    """

    url: str
    public_id: str
    format: str
    width: int | None = None
    height: int | None = None
    size_bytes: int | None = None


class StorageService(Protocol):
    """
    Protocol defining the interface for asset storage services.

    All storage implementations must implement these methods
    to ensure consistent behavior across different backends.
    """

    provider: str

    @abstractmethod
    async def store(
        self,
        file_data: bytes,
        filename: str,
        *,
        source_format: str,
        animated: bool = False,
    ) -> StoredAsset:
        """
        Store an image.

        Args:
            file_data: Raw image bytes
            filename: Original filename sent by the client
            source_format: Format detected from the bytes (e.g. ``png``)
            animated: Whether the image has more than one frame

        Returns:
            StoredAsset: Where the image lives and what was stored
        """
        ...

    @abstractmethod
    async def delete(self, public_id: str) -> bool:
        """
        Delete a stored image.

        Args:
            public_id: Provider identifier of the image

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        ...

    @abstractmethod
    async def size_of(self, public_id: str) -> int | None:
        """
        Look up the stored size of an image.

        Args:
            public_id: Provider identifier of the image

        Returns:
            int | None: Size in bytes, or None if unknown
        """
        ...

    @abstractmethod
    def responsive_urls(self, asset: StoredAsset) -> dict[str, str]:
        """
        Delivery URLs of the image at the ``RESPONSIVE_SIZES``.

        Args:
            asset: Stored image

        Returns:
            dict[str, str]: ``original`` plus one URL per responsive size
        """
        ...
