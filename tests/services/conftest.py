# tests/services/conftest.py
"""Pytest fixtures for service tests."""

from collections.abc import Callable
from io import BytesIO

import pytest
from fastapi import UploadFile
from PIL import Image
from starlette.datastructures import Headers


def image_bytes(image_format: str = "JPEG", size: tuple[int, int] = (64, 48)) -> bytes:
    img = Image.new("RGB", size, color="blue")
    buffer = BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def make_upload() -> Callable[..., UploadFile]:
    """Factory for uploaded files as FastAPI hands them to routes."""

    def _make(
        data: bytes | None = None,
        content_type: str = "image/jpeg",
        filename: str = "cover.jpg",
    ) -> UploadFile:
        return UploadFile(
            file=BytesIO(image_bytes() if data is None else data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG")
