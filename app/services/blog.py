"""
Blog service.

Ties the listing builder, the blog repository and the image service
together for the blog routes. Every mutation validates fields and
references before the image is uploaded, and the row is written once.
"""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import UploadFile

from app.errors.database import RecordNotFoundError
from app.errors.upload import MissingImageError
from app.models import BlogDB, UserDB
from app.monitoring import get_logger
from app.queries import ListingEndpoint, ListingParams, build_listing_plan, is_publicly_visible
from app.queries.pagination import pagination_fields
from app.repositories import BlogRepository
from app.schemas.blog import BlogCreate, BlogListEnvelope, BlogPatch, BlogResponse, UploadedImage
from app.services.media import BlogImageService, public_id_of

logger = get_logger(__name__)

BLOG_NOT_FOUND = "Blog not found"


class BlogService:
    """Use cases behind the blog routes."""

    def __init__(self, repo: BlogRepository, media: BlogImageService) -> None:
        self.repo = repo
        self.media = media

    async def list_blogs(
        self,
        endpoint: ListingEndpoint,
        params: ListingParams,
        now: datetime | None = None,
    ) -> BlogListEnvelope:
        """
        Run one listing endpoint.

        Only the keys that apply are set on the envelope, so routes that
        serialize with ``exclude_unset`` omit pagination for unpaginated
        requests.

        Args:
            endpoint: Listing endpoint being served
            params: Request query values
            now: Reference time for the publish-date rules

        Returns:
            BlogListEnvelope: Page of populated blogs with counts
        """
        plan = build_listing_plan(
            endpoint,
            params,
            now=now,
            full_text=self.repo.supports_full_text,
        )
        blogs, total = await self.repo.find(plan)
        rendered = await self.repo.populate(blogs)
        return BlogListEnvelope(
            success=True,
            blogs=rendered,
            total_count=total,
            **pagination_fields(plan.window, total),
        )

    async def _get(self, blog_id: UUID) -> BlogDB:
        blog = await self.repo.get_by_id(blog_id)
        if blog is None:
            raise RecordNotFoundError(BLOG_NOT_FOUND)
        return blog

    async def get_by_id(self, blog_id: UUID) -> BlogResponse:
        return await self.repo.populate_one(await self._get(blog_id))

    async def get_by_slug(self, slug: str, now: datetime | None = None) -> BlogResponse:
        """
        Look a blog up by slug.

        Raises:
            RecordNotFoundError: If no blog has the slug, or it is scheduled
                for a future publish date
        """
        blog = await self.repo.get_by_slug(slug)
        if blog is None or not is_publicly_visible(blog, now):
            raise RecordNotFoundError(BLOG_NOT_FOUND)
        return await self.repo.populate_one(blog)

    async def create(
        self,
        data: BlogCreate,
        image: UploadFile | None,
        user: UserDB,
    ) -> BlogResponse:
        """
        Create a blog with its cover image.

        Args:
            data: Validated fields
            image: Uploaded cover image
            user: Admin creating the post

        Returns:
            BlogResponse: The created, populated blog
        """
        if image is None:
            raise MissingImageError
        now = datetime.now(tz=UTC)
        await self.repo.ensure_references(data.author_id, data.category_id)
        slug = await self.repo.resolve_new_slug(data, now)

        uploaded = await self.media.upload(image)
        try:
            blog = await self.repo.create(
                data,
                slug=slug,
                image=uploaded,
                created_by=user.id,
                now=now,
            )
            await self.repo.commit()
        except Exception:
            await self.media.release(uploaded.metadata.public_id)
            raise

        logger.info(f"Blog created: {blog.id} ({blog.slug})")
        return await self.repo.populate_one(blog)

    async def update(
        self,
        blog_id: UUID,
        patch: BlogPatch,
        image: UploadFile | None,
    ) -> BlogResponse:
        """
        Apply a partial update, optionally replacing the cover image.

        The previous image is released only after the new values are committed.

        Args:
            blog_id: Blog to change
            patch: Validated partial update
            image: New cover image, if any

        Returns:
            BlogResponse: The updated, populated blog
        """
        blog = await self._get(blog_id)
        await self.repo.ensure_references(patch.author_id, patch.category_id)
        previous_public_id = public_id_of(blog.image_metadata)

        uploaded: UploadedImage | None = None
        if image is not None:
            uploaded = await self.media.upload(image)
        try:
            blog = await self.repo.update(blog, patch, image=uploaded)
            await self.repo.commit()
        except Exception:
            if uploaded is not None:
                await self.media.release(uploaded.metadata.public_id)
            raise

        if uploaded is not None and previous_public_id != uploaded.metadata.public_id:
            await self.media.release(previous_public_id)
        logger.info(f"Blog updated: {blog.id}")
        return await self.repo.populate_one(blog)

    async def delete(self, blog_id: UUID) -> None:
        """
        Delete a blog and commit, then release its image.

        A failed image release is logged and does not fail the deletion.
        """
        blog = await self._get(blog_id)
        public_id = public_id_of(blog.image_metadata)
        await self.repo.delete(blog)
        await self.repo.commit()
        await self.media.release(public_id)
        logger.info(f"Blog deleted: {blog_id}")
