# tests/services/test_storage_backends.py
"""Tests for the Cloudinary and local asset backends."""

from pathlib import Path
from unittest.mock import patch

import cloudinary.exceptions
import pytest

from app.configs import settings
from app.services.storage import (
    RESPONSIVE_SIZES,
    CloudinaryStorage,
    LocalStorage,
    StoredAsset,
    get_storage_service,
)

UPLOAD_RESULT = {
    "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/blog-images/abc.webp",
    "public_id": "blog-images/abc",
    "format": "webp",
    "width": 640,
    "height": 480,
    "bytes": 20480,
}


@pytest.fixture
def cloudinary_storage(monkeypatch: pytest.MonkeyPatch) -> CloudinaryStorage:
    monkeypatch.setattr(settings, "CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setattr(settings, "CLOUDINARY_API_KEY", "key")
    return CloudinaryStorage()


class TestCloudinaryStorage:
    """Cloudinary backend with the SDK patched out."""

    @pytest.mark.asyncio
    async def test_static_images_are_stored_as_webp(
        self,
        cloudinary_storage: CloudinaryStorage,
    ) -> None:
        """Test static uploads request WebP with automatic quality."""
        with patch("cloudinary.uploader.upload", return_value=UPLOAD_RESULT) as upload:
            asset = await cloudinary_storage.store(b"bytes", "cover.png", source_format="png")

        options = upload.call_args.kwargs
        assert options["format"] == "webp"
        assert options["quality"] == "auto"
        assert options["folder"] == settings.CLOUDINARY_FOLDER
        assert asset == StoredAsset(
            url=UPLOAD_RESULT["secure_url"],
            public_id="blog-images/abc",
            format="webp",
            width=640,
            height=480,
            size_bytes=20480,
        )

    @pytest.mark.asyncio
    async def test_animated_images_keep_format(
        self,
        cloudinary_storage: CloudinaryStorage,
    ) -> None:
        """Test animated uploads are not converted."""
        result = UPLOAD_RESULT | {"format": "gif"}
        with patch("cloudinary.uploader.upload", return_value=result) as upload:
            asset = await cloudinary_storage.store(
                b"bytes",
                "loop.gif",
                source_format="gif",
                animated=True,
            )

        assert "format" not in upload.call_args.kwargs
        assert asset.format == "gif"

    @pytest.mark.asyncio
    async def test_delete(self, cloudinary_storage: CloudinaryStorage) -> None:
        """Test deletion reports the SDK outcome."""
        with patch("cloudinary.uploader.destroy", return_value={"result": "ok"}):
            assert await cloudinary_storage.delete("blog-images/abc") is True
        with patch("cloudinary.uploader.destroy", return_value={"result": "not found"}):
            assert await cloudinary_storage.delete("blog-images/abc") is False

    @pytest.mark.asyncio
    async def test_delete_retries_transient_sdk_errors(
        self,
        cloudinary_storage: CloudinaryStorage,
    ) -> None:
        """Test a failed destroy call is retried before giving up."""
        with patch(
            "cloudinary.uploader.destroy",
            side_effect=[cloudinary.exceptions.Error("reset by peer"), {"result": "ok"}],
        ) as destroy:
            assert await cloudinary_storage.delete("blog-images/abc") is True

        assert destroy.call_count == 2

    @pytest.mark.asyncio
    async def test_size_of_missing_resource(self, cloudinary_storage: CloudinaryStorage) -> None:
        """Test unknown resources report no size."""
        with patch(
            "cloudinary.api.resource",
            side_effect=cloudinary.exceptions.NotFound("missing"),
        ):
            assert await cloudinary_storage.size_of("blog-images/abc") is None

    def test_responsive_urls(self, cloudinary_storage: CloudinaryStorage) -> None:
        """Test every responsive size is a fill-cropped WebP delivery URL."""
        asset = StoredAsset(
            url=UPLOAD_RESULT["secure_url"],
            public_id="blog-images/abc",
            format="webp",
        )

        urls = cloudinary_storage.responsive_urls(asset)

        assert urls["original"] == asset.url
        for name, (width, height) in RESPONSIVE_SIZES.items():
            assert urls[name].startswith("https://res.cloudinary.com/demo/image/upload/")
            assert f"w_{width}" in urls[name]
            assert f"h_{height}" in urls[name]
            assert "c_fill" in urls[name]
            assert "q_auto" in urls[name]
            assert "blog-images/abc" in urls[name]


class TestLocalStorage:
    """Filesystem backend."""

    @pytest.mark.asyncio
    async def test_store_size_and_delete(self, tmp_path: Path) -> None:
        """Test a stored file can be measured and removed once."""
        storage = LocalStorage(uploads_dir=tmp_path)

        asset = await storage.store(b"12345", "cover.png", source_format="PNG")

        assert asset.public_id.startswith("blog-images/")
        assert asset.public_id.endswith(".png")
        assert asset.url == f"/uploads/{asset.public_id}"
        assert (tmp_path / asset.public_id).read_bytes() == b"12345"
        assert await storage.size_of(asset.public_id) == 5

        assert await storage.delete(asset.public_id) is True
        assert await storage.delete(asset.public_id) is False
        assert await storage.size_of(asset.public_id) is None

    def test_responsive_urls_point_at_original(self, tmp_path: Path) -> None:
        """Test every local variant is the original file."""
        storage = LocalStorage(uploads_dir=tmp_path)
        asset = StoredAsset(url="/uploads/blog-images/a.png", public_id="blog-images/a.png", format="png")

        urls = storage.responsive_urls(asset)

        assert set(urls) == {"original", *RESPONSIVE_SIZES}
        assert set(urls.values()) == {asset.url}


def test_provider_selection(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test STORAGE_PROVIDER picks the backend."""
    monkeypatch.setattr(settings, "STORAGE_PROVIDER", "local")
    monkeypatch.setattr(settings, "LOCAL_UPLOAD_DIR", str(tmp_path))
    assert isinstance(get_storage_service(), LocalStorage)

    monkeypatch.setattr(settings, "STORAGE_PROVIDER", "cloudinary")
    assert isinstance(get_storage_service(), CloudinaryStorage)
