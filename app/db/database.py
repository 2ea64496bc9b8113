"""Database engine and session management."""

from asyncio import Lock
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.configs import pool_kwargs, settings
from app.errors.database import DatabaseConnectionError, QueryTimeoutError
from app.monitoring import get_logger, metrics

logger = get_logger(__name__)

# PostgreSQL SQLSTATE for "canceling statement due to statement timeout"
QUERY_CANCELED_SQLSTATE = "57014"


def is_timeout_error(exc: BaseException) -> bool:
    """
    Tell whether a driver error means the store hit its time bound.

    Args:
        exc: Exception raised while executing a statement.

    Returns:
        bool: True for statement timeouts and driver command timeouts.
    """
    if isinstance(exc, TimeoutError):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if code == QUERY_CANCELED_SQLSTATE:
            return True
        return "statement timeout" in str(orig or exc).lower()
    return False


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")


class Database:
    """
    Connection pool owner for one process.

    The engine is created lazily by the first ``connect()`` call; concurrent
    callers wait on the same lock and every later caller reuses the engine.
    An instance is created by the application lifespan and handed to the
    request dependencies through ``app.state``.

    Attributes:
        url: SQLAlchemy database URL.
        statement_timeout_ms: Server-side bound applied to every statement.
    """

    def __init__(
        self,
        url: str = settings.DATABASE_URL,
        *,
        echo: bool = settings.DATABASE_ECHO,
        statement_timeout_ms: int = settings.STATEMENT_TIMEOUT_MS,
    ) -> None:
        self.url = url
        self.echo = echo
        self.statement_timeout_ms = statement_timeout_ms
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[SQLModelAsyncSession] | None = None
        self._lock = Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            mssg = "Database.connect() has not been awaited"
            raise DatabaseConnectionError(mssg)
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        connect_args: dict[str, object] = {}
        if self.url.startswith("postgresql+asyncpg"):
            connect_args = {
                "command_timeout": self.statement_timeout_ms / 1000,
                "server_settings": {
                    "statement_timeout": str(self.statement_timeout_ms),
                    "lock_timeout": str(self.statement_timeout_ms),
                },
            }
            return create_async_engine(
                self.url,
                echo=self.echo,
                connect_args=connect_args,
                **pool_kwargs(),
            )
        return create_async_engine(self.url, echo=self.echo)

    async def connect(self) -> AsyncEngine:
        """
        Create the engine and session factory once.

        Returns:
            AsyncEngine: The shared engine.
        """
        if self._engine is not None:
            return self._engine
        async with self._lock:
            if self._engine is None:
                engine = self._create_engine()
                if settings.DEBUG:
                    _configure_engine_events(engine)
                self._session_maker = async_sessionmaker(
                    engine,
                    class_=SQLModelAsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )
                self._engine = engine
                logger.info("Database engine created")
        return self._engine

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """
        Context manager for explicit transaction management.

        Yields:
            AsyncSession: Database session within a transaction

        Example:
            ```python
            async with database.transaction() as session:
                session.add(CategoryDB(name="Python", slug="python"))
                # Commits on successful exit, rolls back on exception
            ```
        """
        await self.connect()
        if self._session_maker is None:
            raise DatabaseConnectionError
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.exception("Transaction error")
                raise

    async def ping(self) -> bool:
        """Return True when a trivial statement round-trips to the store."""
        try:
            engine = await self.connect()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database ping failed")
            return False
        return True

    async def create_all(self) -> None:
        """
        Initialize database tables.

        Note:
            This is a simple initialization for development.
            For production, use the Alembic migrations.
        """
        engine = await self.connect()
        async with engine.begin() as conn:
            # Import all models to ensure they are registered
            from app.models import AuthorDB, BlogDB, CategoryDB, UserDB  # noqa: F401, PLC0415

            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database initialized successfully!")

    async def close(self) -> None:
        """Dispose the pool; a later ``connect()`` starts a fresh one."""
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                self._session_maker = None
                logger.info("Database connections closed")


async def execute_bounded(
    session: AsyncSession,
    statement: object,
    *,
    operation: str,
    timeout_ms: int | None = None,
) -> object:
    """
    Execute a statement under an explicit time bound.

    On PostgreSQL the bound is applied with ``SET LOCAL statement_timeout``
    for the rest of the current transaction. Timeouts are re-raised as
    ``QueryTimeoutError`` so the HTTP layer can answer 504.

    Args:
        session: Active session.
        statement: SQLAlchemy executable.
        operation: Short label used in logs and metrics.
        timeout_ms: Bound in milliseconds; None keeps the server default.

    Returns:
        The SQLAlchemy result.
    """
    try:
        if timeout_ms is not None and session.bind is not None:
            if session.bind.dialect.name == "postgresql":
                await session.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
        return await session.execute(statement)
    except (DBAPIError, TimeoutError) as e:
        if is_timeout_error(e):
            logger.warning(f"Store timeout during {operation}")
            metrics.record_store_timeout(operation)
            raise QueryTimeoutError from e
        raise


async def get_database(request: Request) -> Database:
    """Return the process database owned by the application lifespan."""
    database: Database = request.app.state.database
    await database.connect()
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session bound to one request transaction
    """
    database = await get_database(request)
    async with database.transaction() as session:
        yield session
