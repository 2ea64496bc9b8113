# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime, timedelta
from io import BytesIO
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from app.db import get_session
from app.dependencies import get_current_user, get_media_service
from app.main import app
from app.managers.rate_limiter import limiter
from app.managers.token_manager import create_access_token
from app.models import BlogDB, UserDB
from app.schemas import BlogResponse, NamedRef

ARGON_HASH = "$argon2id$v=19$m=65536,t=3,p=4$c29tZXNhbHQ$somehash"


def image_metadata(public_id: str) -> dict[str, Any]:
    """Stored image metadata as the image service records it."""
    url = f"https://res.cloudinary.com/demo/image/upload/{public_id}.webp"
    return {
        "format": "webp",
        "originalFormat": "jpeg",
        "isAnimated": False,
        "size": 2048,
        "publicId": public_id,
        "width": 200,
        "height": 200,
        "responsiveUrls": dict.fromkeys(
            ("original", "thumbnail", "medium", "large", "mobile"),
            url,
        ),
    }


@pytest.fixture
def media_service() -> MagicMock:
    """Mock blog image service."""
    media = MagicMock()
    media.upload = AsyncMock()
    media.release = AsyncMock(return_value=True)
    return media


@pytest.fixture(autouse=True)
def clear_overrides(media_service: MagicMock) -> Generator[None]:
    """Give every test a mocked session and image service, then reset overrides."""
    session = MagicMock()
    session.bind = None
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_media_service] = lambda: media_service

    yield

    app.dependency_overrides = {}


@pytest.fixture
def sample_user() -> UserDB:
    """Create a sample user for testing."""
    return UserDB(
        id=uuid4(),
        name="Test User",
        email="test@example.com",
        password_hash=ARGON_HASH,
        role="user",
    )


@pytest.fixture
def admin_user() -> UserDB:
    """Create an admin user for testing."""
    return UserDB(
        id=uuid4(),
        name="Admin User",
        email="admin@example.com",
        password_hash=ARGON_HASH,
        role="admin",
    )


@pytest.fixture
def auth_headers(sample_user: UserDB) -> dict[str, str]:
    """Create auth headers with a valid access token."""
    token = create_access_token(sample_user.id, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def as_user(sample_user: UserDB) -> UserDB:
    """Authenticate every request as the regular user."""
    app.dependency_overrides[get_current_user] = lambda: sample_user
    return sample_user


@pytest.fixture
def as_admin(admin_user: UserDB) -> UserDB:
    """Authenticate every request as the admin."""
    app.dependency_overrides[get_current_user] = lambda: admin_user
    return admin_user


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def make_blog() -> Callable[..., BlogDB]:
    """Factory for blog rows with sensible defaults."""

    def _make(**overrides: Any) -> BlogDB:
        now = datetime.now(tz=UTC)
        values: dict[str, Any] = {
            "id": uuid4(),
            "author_id": uuid4(),
            "category_id": uuid4(),
            "created_by": None,
            "title": "Hello, World!",
            "slug": "hello-world",
            "content": "First post body",
            "excerpt": "A first post",
            "image_url": "https://res.cloudinary.com/demo/image/upload/blog-images/abc.webp",
            "image_alt": "Sunrise",
            "image_metadata": image_metadata("blog-images/abc"),
            "tags": ["intro"],
            "meta_keywords": [],
            "status": "published",
            "is_featured": False,
            "publish_date": now - timedelta(days=1),
            "created_at": now - timedelta(days=1),
            "updated_at": now - timedelta(days=1),
        }
        values.update(overrides)
        return BlogDB(**values)

    return _make


def render(blog: BlogDB) -> BlogResponse:
    """Render a blog row the way the repository does, with named references."""
    data = blog.model_dump()
    data["author_ref"] = NamedRef(id=blog.author_id, name="Jane Doe")
    data["category_ref"] = NamedRef(id=blog.category_id, name="News")
    data["created_by_ref"] = None
    return BlogResponse.model_validate(data)


@pytest.fixture
def blog_repo() -> MagicMock:
    """Mock blog repository whose populate renders rows like the real one."""
    repo = MagicMock()
    repo.supports_full_text = False
    repo.find = AsyncMock(return_value=([], 0))
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_slug = AsyncMock(return_value=None)
    repo.populate = AsyncMock(side_effect=lambda blogs: [render(b) for b in blogs])
    repo.populate_one = AsyncMock(side_effect=render)
    repo.commit = AsyncMock()
    return repo


@pytest.fixture
def render_blog() -> Callable[[BlogDB], BlogResponse]:
    return render
