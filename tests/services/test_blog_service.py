# tests/services/test_blog_service.py
"""Tests for app/services/blog.py module."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import UploadFile

from app.errors import (
    DatabaseError,
    DuplicateEntryError,
    MissingImageError,
    RecordNotFoundError,
)
from app.models import BlogDB, UserDB
from app.queries import ListingEndpoint, ListingParams
from app.schemas import BlogCreate, BlogPatch
from app.schemas.blog import UploadedImage
from app.services.blog import BlogService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def uploaded(public_id: str) -> UploadedImage:
    url = f"https://cdn.example.com/{public_id}.webp"
    return UploadedImage.model_validate(
        {
            "url": url,
            "metadata": {
                "format": "webp",
                "originalFormat": "jpeg",
                "size": 10,
                "publicId": public_id,
                "responsiveUrls": dict.fromkeys(
                    ("original", "thumbnail", "medium", "large", "mobile"),
                    url,
                ),
            },
        },
    )


def stored_blog(**overrides: object) -> BlogDB:
    values: dict[str, object] = {
        "id": uuid4(),
        "slug": "hello-world",
        "status": "published",
        "publish_date": NOW - timedelta(days=1),
        "image_metadata": {"publicId": "blog-images/old"},
    }
    values.update(overrides)
    return BlogDB(**values)


@pytest.fixture
def repo() -> MagicMock:
    mock = MagicMock()
    mock.supports_full_text = True
    mock.find = AsyncMock(return_value=([], 0))
    mock.populate = AsyncMock(return_value=[])
    mock.populate_one = AsyncMock(return_value="rendered")
    mock.get_by_id = AsyncMock(return_value=stored_blog())
    mock.get_by_slug = AsyncMock(return_value=None)
    mock.ensure_references = AsyncMock()
    mock.resolve_new_slug = AsyncMock(return_value="hello-world")
    mock.create = AsyncMock(side_effect=lambda data, **kw: stored_blog(slug=kw["slug"]))
    mock.update = AsyncMock(side_effect=lambda blog, patch, **kw: blog)
    mock.delete = AsyncMock()
    mock.commit = AsyncMock()
    return mock


@pytest.fixture
def media() -> MagicMock:
    mock = MagicMock()
    mock.upload = AsyncMock(return_value=uploaded("blog-images/new"))
    mock.release = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def service(repo: MagicMock, media: MagicMock) -> BlogService:
    return BlogService(repo, media)


@pytest.fixture
def admin() -> UserDB:
    return UserDB(id=uuid4(), name="Admin", email="admin@example.com", password_hash="h", role="admin")


def create_payload() -> BlogCreate:
    return BlogCreate.model_validate(
        {
            "title": "Hello, World!",
            "content": "Body",
            "excerpt": "Short",
            "imageAlt": "Alt",
            "tags": ["intro"],
            "authorId": str(uuid4()),
            "categoryId": str(uuid4()),
        },
    )


class TestListing:
    """Listing envelopes."""

    @pytest.mark.asyncio
    async def test_paginated_envelope(self, service: BlogService, repo: MagicMock) -> None:
        """Test page keys are set when a limit was given."""
        repo.find.return_value = ([], 25)

        envelope = await service.list_blogs(
            ListingEndpoint.PUBLISHED,
            ListingParams(page=2, limit=10),
            now=NOW,
        )

        assert envelope.total_count == 25
        assert envelope.current_page == 2
        assert envelope.total_pages == 3

    @pytest.mark.asyncio
    async def test_unpaginated_envelope_leaves_keys_unset(
        self,
        service: BlogService,
        repo: MagicMock,
    ) -> None:
        """Test unpaginated envelopes omit page keys on serialization."""
        repo.find.return_value = ([], 4)

        envelope = await service.list_blogs(ListingEndpoint.ALL, ListingParams(), now=NOW)

        dumped = envelope.model_dump(by_alias=True, exclude_unset=True)
        assert dumped == {"success": True, "blogs": [], "totalCount": 4}


class TestLookups:
    """Single blog reads."""

    @pytest.mark.asyncio
    async def test_scheduled_slug_is_hidden(self, service: BlogService, repo: MagicMock) -> None:
        """Test a future-dated post is not found by slug."""
        repo.get_by_slug.return_value = stored_blog(publish_date=datetime.now(tz=UTC) + timedelta(days=1))

        with pytest.raises(RecordNotFoundError, match="Blog not found"):
            await service.get_by_slug("hello-world")

    @pytest.mark.asyncio
    async def test_unknown_id(self, service: BlogService, repo: MagicMock) -> None:
        """Test unknown ids raise RecordNotFoundError."""
        repo.get_by_id.return_value = None

        with pytest.raises(RecordNotFoundError):
            await service.get_by_id(uuid4())


class TestCreate:
    """Blog creation."""

    @pytest.mark.asyncio
    async def test_missing_image(self, service: BlogService, repo: MagicMock, admin: UserDB) -> None:
        """Test creation without an image is rejected before any write."""
        with pytest.raises(MissingImageError, match="Blog image is required"):
            await service.create(create_payload(), None, admin)
        repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_validates_before_upload(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
        admin: UserDB,
    ) -> None:
        """Test a duplicate slug is detected before the image is stored."""
        repo.resolve_new_slug.side_effect = DuplicateEntryError("Blog with slug 'x' already exists")

        with pytest.raises(DuplicateEntryError):
            await service.create(create_payload(), MagicMock(spec=UploadFile), admin)
        media.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_create(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
        admin: UserDB,
    ) -> None:
        """Test the row is written once with the stored image and creator."""
        result = await service.create(create_payload(), MagicMock(spec=UploadFile), admin)

        assert result == "rendered"
        kwargs = repo.create.await_args.kwargs
        assert kwargs["slug"] == "hello-world"
        assert kwargs["created_by"] == admin.id
        assert kwargs["image"].metadata.public_id == "blog-images/new"
        media.release.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_write_releases_new_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
        admin: UserDB,
    ) -> None:
        """Test the uploaded image is released when the write fails."""
        repo.create.side_effect = DuplicateEntryError("Blog with slug 'hello-world' already exists")

        with pytest.raises(DuplicateEntryError):
            await service.create(create_payload(), MagicMock(spec=UploadFile), admin)
        media.release.assert_awaited_once_with("blog-images/new")

    @pytest.mark.asyncio
    async def test_failed_commit_releases_new_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
        admin: UserDB,
    ) -> None:
        """Test a commit failure after the insert still releases the upload."""
        repo.commit.side_effect = DatabaseError("Failed to save record")

        with pytest.raises(DatabaseError):
            await service.create(create_payload(), MagicMock(spec=UploadFile), admin)
        media.release.assert_awaited_once_with("blog-images/new")


class TestUpdate:
    """Partial updates and image replacement."""

    @pytest.mark.asyncio
    async def test_new_image_releases_old_one(
        self,
        service: BlogService,
        media: MagicMock,
    ) -> None:
        """Test the previous image is released after the write."""
        await service.update(uuid4(), BlogPatch(), MagicMock(spec=UploadFile))

        media.release.assert_awaited_once_with("blog-images/old")

    @pytest.mark.asyncio
    async def test_without_image_keeps_old_one(
        self,
        service: BlogService,
        media: MagicMock,
    ) -> None:
        """Test field-only updates leave the image alone."""
        await service.update(uuid4(), BlogPatch.model_validate({"title": "New"}), None)

        media.upload.assert_not_called()
        media.release.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_write_keeps_old_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
    ) -> None:
        """Test a failed write releases the new image, never the old one."""
        repo.update.side_effect = DuplicateEntryError("taken")

        with pytest.raises(DuplicateEntryError):
            await service.update(uuid4(), BlogPatch(), MagicMock(spec=UploadFile))
        media.release.assert_awaited_once_with("blog-images/new")

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_old_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
    ) -> None:
        """Test the old image survives when the update cannot be committed."""
        repo.commit.side_effect = DatabaseError("Failed to save record")

        with pytest.raises(DatabaseError):
            await service.update(uuid4(), BlogPatch(), MagicMock(spec=UploadFile))
        media.release.assert_awaited_once_with("blog-images/new")


class TestDelete:
    """Blog deletion."""

    @pytest.mark.asyncio
    async def test_delete_releases_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
    ) -> None:
        """Test the row is deleted, then its image released."""
        await service.delete(uuid4())

        repo.delete.assert_awaited_once()
        media.release.assert_awaited_once_with("blog-images/old")

    @pytest.mark.asyncio
    async def test_delete_unknown(self, service: BlogService, repo: MagicMock) -> None:
        """Test deleting an unknown blog raises RecordNotFoundError."""
        repo.get_by_id.return_value = None

        with pytest.raises(RecordNotFoundError):
            await service.delete(uuid4())
        repo.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_commit_precedes_release(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
    ) -> None:
        """Test the deletion is committed before the image goes."""
        calls: list[str] = []
        repo.commit.side_effect = lambda: calls.append("commit")
        media.release.side_effect = lambda public_id: calls.append(f"release {public_id}")

        await service.delete(uuid4())

        assert calls == ["commit", "release blog-images/old"]

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_image(
        self,
        service: BlogService,
        repo: MagicMock,
        media: MagicMock,
    ) -> None:
        """Test an uncommitted deletion never releases the image."""
        repo.commit.side_effect = DatabaseError("Failed to save record")

        with pytest.raises(DatabaseError):
            await service.delete(uuid4())
        repo.delete.assert_awaited_once()
        media.release.assert_not_called()
