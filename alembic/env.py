"""
Alembic migration environment for the blog schema.

Runs migrations over the async engine (asyncpg) against SQLModel metadata,
with the database URL taken from application settings. Indexes created by
raw SQL in migrations are hidden from autogenerate so it never proposes
dropping them.
"""

from asyncio import run as asyncio_run
from logging.config import fileConfig
from typing import Any

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context
from app.configs import settings

# Registers every table on SQLModel.metadata
from app.models import AuthorDB, BlogDB, CategoryDB, UserDB  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

# Expression indexes that exist only in migrations
UNMANAGED_INDEXES = frozenset({"ix_blogs_search_fts"})


def include_object(
    obj: Any,
    name: str | None,
    type_: str,
    reflected: bool,  # noqa: FBT001
    compare_to: Any,
) -> bool:
    """Skip indexes autogenerate cannot see in the models."""
    return not (type_ == "index" and name in UNMANAGED_INDEXES)


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits the SQL script without connecting, for review or manual application.
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Connect through the async engine and run migrations on a sync shim."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio_run(run_migrations_online())
