"""Category and Author database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class CategoryDB(SQLModel, table=True):
    """Category a blog post is filed under. Owns a slug derived from its name."""

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False, index=True),
        description="Category name (unique)",
    )
    slug: str = Field(
        sa_column=Column(String(120), unique=True, nullable=False, index=True),
        description="URL-friendly slug derived from the name",
    )
    description: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Optional description",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class AuthorDB(SQLModel, table=True):
    """Byline author shown on blog posts."""

    __tablename__ = cast("declared_attr[str]", "authors")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False, index=True),
        description="Author name (unique)",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
