"""Category and Author repositories."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import ColumnElement
from sqlalchemy.exc import IntegrityError

from app.errors.database import DuplicateEntryError, ReferenceInUseError
from app.errors.validation import ValidationError
from app.models.blog import BlogDB
from app.models.taxonomy import AuthorDB, CategoryDB
from app.monitoring import get_logger
from app.repositories.base import BaseRepository
from app.repositories.blog import BlogRepository
from app.schemas.taxonomy import AuthorCreate, AuthorUpdate, CategoryCreate, CategoryUpdate
from app.utils.slug import slugify

logger = get_logger(__name__)


class _GuardedDeleteMixin[ModelT: (CategoryDB, AuthorDB)](BaseRepository[ModelT]):
    """Deletion that refuses while blogs still reference the record."""

    def _references(self, record: ModelT) -> ColumnElement[bool]:
        raise NotImplementedError

    def _delete_conflict(self, record: ModelT, error: IntegrityError) -> Exception:
        logger.warning(f"Foreign key blocked {self.entity.lower()} delete: {record.id}")
        return ReferenceInUseError(self.entity.lower(), 1)

    async def delete_guarded(self, record: ModelT) -> None:
        """
        Delete a record no blog references.

        The count runs first; the RESTRICT foreign key catches a blog
        written between the count and the delete.

        Args:
            record: Loaded category or author

        Raises:
            ReferenceInUseError: If one or more blogs use the record
        """
        in_use = await BlogRepository(self.session).count(self._references(record))
        if in_use:
            raise ReferenceInUseError(self.entity.lower(), in_use)
        await self.delete(record)


class CategoryRepository(_GuardedDeleteMixin[CategoryDB]):
    """Repository for Category database operations."""

    model = CategoryDB
    entity = "Category"

    def _references(self, record: CategoryDB) -> ColumnElement[bool]:
        # pyrefly: ignore [bad-return]
        return BlogDB.category_id == record.id

    async def list_all(self) -> list[CategoryDB]:
        # pyrefly: ignore [missing-attribute]
        return await self.get_all(CategoryDB.name.asc())

    async def _ensure_unique(self, name: str, exclude_id: UUID | None = None) -> None:
        if await self._value_taken(
            "name",
            name,
            exclude_id,
            case_insensitive=True,
        ):
            raise DuplicateEntryError(detail="Category with this name already exists")

    @staticmethod
    def _slug_for(name: str) -> str:
        slug = slugify(name)
        if not slug:
            raise ValidationError("name", "Name must contain at least one letter or digit")
        return slug

    async def create(self, data: CategoryCreate) -> CategoryDB:
        """
        Create a category with a slug derived from its name.

        Args:
            data: Validated creation payload

        Returns:
            CategoryDB: Created category

        Raises:
            DuplicateEntryError: If the name is taken, ignoring case
        """
        await self._ensure_unique(data.name)
        category = CategoryDB(
            name=data.name,
            slug=self._slug_for(data.name),
            description=data.description,
        )
        return await self._save(
            category,
            duplicate_message="Category with this name already exists",
        )

    async def update(self, category: CategoryDB, data: CategoryUpdate) -> CategoryDB:
        """
        Update a category; a new name also re-derives the slug.

        Args:
            category: Loaded category
            data: Validated partial update

        Returns:
            CategoryDB: Updated category
        """
        changes = data.model_dump(exclude_unset=True)
        name = changes.get("name")
        if name and name != category.name:
            await self._ensure_unique(name, exclude_id=category.id)
            category.name = name
            category.slug = self._slug_for(name)
        if "description" in changes:
            category.description = changes["description"]
        category.updated_at = datetime.now(tz=UTC)
        return await self._save(
            category,
            duplicate_message="Category with this name already exists",
        )


class AuthorRepository(_GuardedDeleteMixin[AuthorDB]):
    """Repository for Author database operations."""

    model = AuthorDB
    entity = "Author"

    def _references(self, record: AuthorDB) -> ColumnElement[bool]:
        # pyrefly: ignore [bad-return]
        return BlogDB.author_id == record.id

    async def list_all(self) -> list[AuthorDB]:
        # pyrefly: ignore [missing-attribute]
        return await self.get_all(AuthorDB.name.asc())

    async def _ensure_unique(self, name: str, exclude_id: UUID | None = None) -> None:
        if await self._value_taken("name", name, exclude_id):
            raise DuplicateEntryError(detail="Author with this name already exists")

    async def create(self, data: AuthorCreate) -> AuthorDB:
        await self._ensure_unique(data.name)
        return await self._save(
            AuthorDB(name=data.name),
            duplicate_message="Author with this name already exists",
        )

    async def update(self, author: AuthorDB, data: AuthorUpdate) -> AuthorDB:
        if data.name and data.name != author.name:
            await self._ensure_unique(data.name, exclude_id=author.id)
            author.name = data.name
        author.updated_at = datetime.now(tz=UTC)
        return await self._save(
            author,
            duplicate_message="Author with this name already exists",
        )
