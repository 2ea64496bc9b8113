"""Blog database model using SQLModel."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import Boolean, DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class BlogDB(SQLModel, table=True):
    """
    Blog database model for PostgreSQL.

    Document-shaped fields (tags, meta keywords, image metadata) live in
    JSONB columns. ``publish_date`` is nullable only for legacy rows; new
    posts default it to the creation time.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_status_publish_date", "status", "publish_date"),
        Index("ix_blogs_status_is_featured", "status", "is_featured"),
        Index("ix_blogs_tags_gin", "tags", postgresql_using="gin"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    # References
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("authors.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Byline author (foreign key to authors.id)",
    )
    category_id: UUID = Field(
        sa_column=Column(
            "category_id",
            ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Category (foreign key to categories.id)",
    )
    created_by: UUID | None = Field(
        default=None,
        sa_column=Column(
            "created_by",
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        description="User who created the post (foreign key to users.id)",
    )

    # Content
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Blog title",
    )
    slug: str = Field(
        sa_column=Column(String(250), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content",
    )
    excerpt: str = Field(
        sa_column=Column(String(1000), nullable=False),
        description="Short summary shown in listings",
    )
    image_url: str = Field(
        sa_column=Column(String(1000), nullable=False),
        description="Delivery URL of the cover image",
    )
    image_alt: str = Field(
        sa_column=Column(String(300), nullable=False),
        description="Alternative text of the cover image",
    )
    image_metadata: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB),
        description="Derived metadata of the uploaded cover image",
    )
    meta_description: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="SEO description",
    )
    meta_keywords: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False),
        description="SEO keywords",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False),
        description="Blog tags (at least one)",
    )

    # Lifecycle
    status: str = Field(
        default="published",
        sa_column=Column(String(20), nullable=False, index=True),
        description="Blog status (draft, published)",
    )
    is_featured: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, index=True),
        description="Featured flag",
    )
    publish_date: datetime | None = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=True, index=True),
        description="Moment the post becomes publicly visible",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "category_id": "123e4567-e89b-12d3-a456-426614174001",
                "title": "Hello, World!",
                "slug": "hello-world",
                "content": "First post...",
                "excerpt": "A first post",
                "status": "published",
                "tags": ["intro"],
            },
        },
    )
