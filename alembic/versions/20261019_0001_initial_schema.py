"""
Initial schema: users, authors, categories and blogs.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

- users: Accounts with a role; emails are stored lower-cased
- authors / categories: Blog references, deletion restricted while in use
- blogs: Posts with JSONB tags, keywords and image metadata, plus a GIN
  full-text index over title, content and excerpt
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# Revision identifiers, used by Alembic
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Must stay identical to app.queries.blog.search_document()
SEARCH_DOCUMENT = "to_tsvector('english', title || ' ' || content || ' ' || excerpt)"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Apply schema changes for this revision."""
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), server_default="user", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "authors",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_authors_name", "authors", ["name"], unique=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_categories_name", "categories", ["name"], unique=True)
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)

    op.create_table(
        "blogs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("category_id", sa.UUID(), nullable=False),
        sa.Column("created_by", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=250), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.String(length=1000), nullable=False),
        sa.Column("image_url", sa.String(length=1000), nullable=False),
        sa.Column("image_alt", sa.String(length=300), nullable=False),
        sa.Column("image_metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("meta_description", sa.String(length=500), nullable=True),
        sa.Column("meta_keywords", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("tags", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["authors.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blogs_slug", "blogs", ["slug"], unique=True)
    op.create_index("ix_blogs_author_id", "blogs", ["author_id"])
    op.create_index("ix_blogs_category_id", "blogs", ["category_id"])
    op.create_index("ix_blogs_created_by", "blogs", ["created_by"])
    op.create_index("ix_blogs_status", "blogs", ["status"])
    op.create_index("ix_blogs_is_featured", "blogs", ["is_featured"])
    op.create_index("ix_blogs_publish_date", "blogs", ["publish_date"])
    op.create_index("ix_blogs_created_at", "blogs", ["created_at"])
    op.create_index("ix_blogs_status_publish_date", "blogs", ["status", "publish_date"])
    op.create_index("ix_blogs_status_is_featured", "blogs", ["status", "is_featured"])
    op.create_index("ix_blogs_tags_gin", "blogs", ["tags"], postgresql_using="gin")
    op.execute(f"CREATE INDEX ix_blogs_search_fts ON blogs USING gin ({SEARCH_DOCUMENT})")


def downgrade() -> None:
    """Revert schema changes for this revision."""
    op.execute("DROP INDEX IF EXISTS ix_blogs_search_fts")
    op.drop_table("blogs")
    op.drop_table("categories")
    op.drop_table("authors")
    op.drop_table("users")
