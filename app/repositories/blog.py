"""Blog repository for database operations."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select

from app.configs import settings
from app.errors.database import DuplicateEntryError
from app.errors.validation import ValidationError
from app.models.blog import BlogDB
from app.models.taxonomy import AuthorDB, CategoryDB
from app.models.user import UserDB
from app.monitoring import get_logger
from app.queries.blog import ListingPlan
from app.repositories.base import BaseRepository
from app.schemas.blog import BlogCreate, BlogPatch, BlogResponse, UploadedImage
from app.schemas.common import NamedRef
from app.utils.slug import slugify

logger = get_logger(__name__)

SLUG_SUFFIX_DIGITS = 6


def slug_suffix(now: datetime) -> str:
    """
    Suffix appended to a colliding title-derived slug.

    The last six digits of the current epoch second. Two collisions on the
    same title within one second are not disambiguated further; the unique
    index rejects the second write.
    """
    return str(int(now.timestamp()))[-SLUG_SUFFIX_DIGITS:]


def apply_patch(
    current: dict[str, Any],
    patch: BlogPatch,
    now: datetime,
    image: UploadedImage | None = None,
) -> dict[str, Any]:
    """
    Apply a partial update to a blog document.

    Only fields present in the request are applied; a new image replaces
    ``image_url`` and ``image_metadata`` wholesale. ``updated_at`` moves to
    ``now`` when any value actually changed.

    Args:
        current: Blog values keyed by field name.
        patch: Validated partial update.
        now: Update time.
        image: Newly stored cover image, if one was uploaded.

    Returns:
        dict[str, Any]: New blog values; ``current`` is left untouched.
    """
    updated = dict(current)
    changes = patch.model_dump(include=patch.model_fields_set)
    if image is not None:
        changes["image_url"] = image.url
        changes["image_metadata"] = image.metadata.model_dump(mode="json", by_alias=True)

    changed = False
    for key, value in changes.items():
        if updated.get(key) != value:
            updated[key] = value
            changed = True

    if changed:
        updated["updated_at"] = now
    return updated


class BlogRepository(BaseRepository[BlogDB]):
    """
    Repository for Blog database operations.

    This class implements the repository pattern for Blog entities:
    slug resolution, reference checks, listing through a ``ListingPlan``
    and population of the author, category and creator references.
    """

    model = BlogDB
    entity = "Blog"

    @property
    def supports_full_text(self) -> bool:
        bind = self.session.bind
        return bind is not None and bind.dialect.name == "postgresql"

    async def get_by_slug(self, slug: str) -> BlogDB | None:
        """
        Get blog by slug.

        Args:
            slug: Blog slug

        Returns:
            BlogDB | None: Blog if found, None otherwise
        """
        return await self.get_by_field("slug", slug)

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        return await self._value_taken("slug", slug, exclude_id)

    async def resolve_new_slug(self, data: BlogCreate, now: datetime) -> str:
        """
        Choose the slug for a new blog.

        An explicit slug must be free. A title-derived slug that collides
        gets a timestamp suffix.

        Args:
            data: Validated creation payload
            now: Creation time

        Returns:
            str: Slug to persist

        Raises:
            ValidationError: If the title yields an empty slug
            DuplicateEntryError: If an explicit slug is taken
        """
        if data.slug:
            if await self.slug_exists(data.slug):
                raise DuplicateEntryError(detail=f"Blog with slug '{data.slug}' already exists")
            return data.slug

        slug = slugify(data.title)
        if not slug:
            raise ValidationError("title", "Title must contain at least one letter or digit")
        if await self.slug_exists(slug):
            slug = f"{slug}-{slug_suffix(now)}"
            logger.info(f"Slug collision resolved with suffix: {slug}")
        return slug

    async def ensure_references(
        self,
        author_id: UUID | None = None,
        category_id: UUID | None = None,
    ) -> None:
        """
        Verify that referenced author and category rows exist.

        Raises:
            ValidationError: If a referenced row is missing
        """
        if author_id is not None:
            result = await self._execute(
                select(1).where(AuthorDB.id == author_id).limit(1),  # pyrefly: ignore [bad-argument-type]
                "author_exists",
            )
            if result.scalar_one_or_none() is None:
                raise ValidationError("authorId", "Author not found")
        if category_id is not None:
            result = await self._execute(
                select(1).where(CategoryDB.id == category_id).limit(1),  # pyrefly: ignore [bad-argument-type]
                "category_exists",
            )
            if result.scalar_one_or_none() is None:
                raise ValidationError("categoryId", "Category not found")

    async def create(
        self,
        data: BlogCreate,
        *,
        slug: str,
        image: UploadedImage,
        created_by: UUID | None,
        now: datetime | None = None,
    ) -> BlogDB:
        """
        Create a new blog post in the database.

        Args:
            data: Validated creation payload
            slug: Resolved unique slug
            image: Stored cover image
            created_by: ID of the user creating the post
            now: Creation time

        Returns:
            BlogDB: Created blog database model

        Raises:
            DuplicateEntryError: If slug already exists
        """
        created_at = now or datetime.now(tz=UTC)
        values = data.model_dump(exclude={"slug", "publish_date"})
        db_blog = BlogDB(
            **values,
            slug=slug,
            image_url=image.url,
            image_metadata=image.metadata.model_dump(mode="json", by_alias=True),
            created_by=created_by,
            publish_date=data.publish_date or created_at,
            created_at=created_at,
            updated_at=created_at,
        )
        return await self._save(
            db_blog,
            duplicate_message=f"Blog with slug '{slug}' already exists",
        )

    async def update(
        self,
        db_blog: BlogDB,
        patch: BlogPatch,
        *,
        image: UploadedImage | None = None,
        now: datetime | None = None,
    ) -> BlogDB:
        """
        Update blog information.

        Args:
            db_blog: Loaded blog to change
            patch: Validated partial update
            image: Newly stored cover image, if any
            now: Update time

        Returns:
            BlogDB: Updated blog

        Raises:
            DuplicateEntryError: If the new slug belongs to another blog
        """
        if "slug" in patch.model_fields_set and patch.slug and patch.slug != db_blog.slug:
            if await self.slug_exists(patch.slug, exclude_id=db_blog.id):
                raise DuplicateEntryError(detail=f"Blog with slug '{patch.slug}' already exists")

        current = db_blog.model_dump()
        updated = apply_patch(current, patch, now or datetime.now(tz=UTC), image)
        for key, value in updated.items():
            if current.get(key) != value:
                setattr(db_blog, key, value)

        return await self._save(
            db_blog,
            duplicate_message=f"Blog with slug '{db_blog.slug}' already exists",
        )

    async def find(self, plan: ListingPlan) -> tuple[list[BlogDB], int]:
        """
        Run a listing plan.

        Args:
            plan: Filter, sort and window built for the endpoint

        Returns:
            tuple[list[BlogDB], int]: The page of blogs and the total count
                of blogs matching the filter
        """
        result = await self._execute(
            plan.select(),
            f"list_{plan.endpoint}",
            timeout_ms=settings.QUERY_TIMEOUT_MS,
        )
        blogs = list(result.scalars().all())
        total = await self._execute(
            plan.count(),
            f"count_{plan.endpoint}",
            timeout_ms=settings.QUERY_TIMEOUT_MS,
        )
        return blogs, total.scalar() or 0

    async def _names(self, model: type[Any], ids: set[UUID]) -> dict[UUID, NamedRef]:
        if not ids:
            return {}
        result = await self._execute(
            select(model.id, model.name).where(model.id.in_(ids)),
            f"populate_{model.__tablename__}",
        )
        return {row.id: NamedRef(id=row.id, name=row.name) for row in result.all()}

    async def populate(self, blogs: list[BlogDB]) -> list[BlogResponse]:
        """
        Render blogs with their author, category and creator references.

        References are loaded with one ``IN`` query per referenced table.
        A reference whose row no longer exists renders as null.

        Args:
            blogs: Blogs to render

        Returns:
            list[BlogResponse]: Blogs in the same order
        """
        authors = await self._names(AuthorDB, {blog.author_id for blog in blogs})
        categories = await self._names(CategoryDB, {blog.category_id for blog in blogs})
        creators = await self._names(
            UserDB,
            {blog.created_by for blog in blogs if blog.created_by is not None},
        )

        rendered = []
        for blog in blogs:
            data = blog.model_dump()
            data["author_ref"] = authors.get(blog.author_id)
            data["category_ref"] = categories.get(blog.category_id)
            data["created_by_ref"] = creators.get(blog.created_by) if blog.created_by else None
            rendered.append(BlogResponse.model_validate(data))
        return rendered

    async def populate_one(self, blog: BlogDB) -> BlogResponse:
        return (await self.populate([blog]))[0]
