"""Generic repository shared by the user, blog and taxonomy stores."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Result, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.configs import settings
from app.db.database import execute_bounded, is_timeout_error
from app.errors.database import (
    DatabaseError,
    DuplicateEntryError,
    QueryTimeoutError,
    RecordNotFoundError,
)
from app.monitoring import get_logger

logger = get_logger(__name__)

type FieldValue = str | int | bool | UUID | datetime | None

# Client-facing messages; driver text stays in the logs
INTEGRITY_FAILED_MESSAGE = "Database integrity error"
SAVE_FAILED_MESSAGE = "Failed to save record"


def integrity_detail(error: IntegrityError) -> str:
    """Driver message behind an integrity violation."""
    return str(error.orig) if error.orig else str(error)


def is_unique_violation(error: IntegrityError) -> bool:
    detail = integrity_detail(error).lower()
    return "unique" in detail or "duplicate" in detail


class BaseRepository[ModelT: SQLModel]:
    """
    Request-scoped access to one table.

    Subclasses set ``model`` and ``entity``. Statements go through
    ``execute_bounded`` so a store timeout always surfaces as
    ``QueryTimeoutError``. Writes flush inside the request transaction;
    ``commit`` ends it early when later side effects must not run for a
    write that did not persist. The session dependency commits whatever
    remains.

    Attributes:
        model: SQLModel table class.
        entity: Name used in "<entity> not found" messages.
    """

    model: type[ModelT]
    entity: str = "Record"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _id_column(self) -> Any:
        return self.model.id  # type: ignore[attr-defined]

    async def _execute(
        self,
        statement: Any,
        operation: str,
        timeout_ms: int | None = None,
    ) -> Result[Any]:
        return await execute_bounded(  # type: ignore[return-value]
            self.session,
            statement,
            operation=f"{self.model.__tablename__}.{operation}",
            timeout_ms=timeout_ms,
        )

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """
        Load one record by primary key.

        Args:
            record_id: Record UUID

        Returns:
            ModelT | None: The record, or None when absent
        """
        result = await self._execute(
            select(self.model).where(self._id_column == record_id),
            "get_by_id",
        )
        return result.scalar_one_or_none()

    async def get_by_field(self, field_name: str, value: FieldValue) -> ModelT | None:
        result = await self._execute(
            select(self.model).where(getattr(self.model, field_name) == value),
            f"get_by_{field_name}",
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: UUID) -> ModelT:
        """
        Load one record by primary key or fail with a 404.

        Raises:
            RecordNotFoundError: "<entity> not found"
        """
        record = await self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(detail=f"{self.entity} not found")
        return record

    async def get_all(self, *order_by: Any) -> list[ModelT]:
        result = await self._execute(
            select(self.model).order_by(*order_by),
            "get_all",
            timeout_ms=settings.QUERY_TIMEOUT_MS,
        )
        return list(result.scalars().all())

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        """
        Count rows matching every predicate.

        Args:
            *criteria: Predicates joined with AND; none counts the table

        Returns:
            int: Matching row count
        """
        result = await self._execute(
            select(func.count()).select_from(self.model).where(*criteria),
            "count",
            timeout_ms=settings.QUERY_TIMEOUT_MS,
        )
        return result.scalar() or 0

    async def delete(self, record: ModelT) -> None:
        """
        Delete a loaded record.

        A foreign key violation rolls the transaction back and is handed to
        ``_delete_conflict`` so subclasses can name the blocking reference.

        Args:
            record: Record to delete
        """
        try:
            await self.session.delete(record)
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise self._delete_conflict(record, e) from e

    def _delete_conflict(self, record: ModelT, error: IntegrityError) -> Exception:
        record_id = getattr(record, "id", None)
        detail = integrity_detail(error)
        logger.error(f"Integrity error deleting {self.entity.lower()} {record_id}: {detail}")
        return DatabaseError(detail=INTEGRITY_FAILED_MESSAGE)

    async def _write_failure(
        self,
        error: Exception,
        operation: str,
        duplicate_message: str | None = None,
    ) -> Exception:
        """
        Roll back a failed write and pick the error to report.

        Args:
            error: What the session raised
            operation: Short label for the log line
            duplicate_message: Client message for a unique index violation

        Returns:
            Exception: ``DuplicateEntryError``, ``QueryTimeoutError`` or a
            ``DatabaseError`` whose message never carries driver text
        """
        await self.session.rollback()
        if isinstance(error, IntegrityError):
            detail = integrity_detail(error)
            if is_unique_violation(error):
                logger.warning(f"Unique violation on {self.entity.lower()} {operation}: {detail}")
                if duplicate_message:
                    return DuplicateEntryError(detail=duplicate_message)
                return DuplicateEntryError()
            logger.error(f"Integrity error on {self.entity.lower()} {operation}: {detail}")
            return DatabaseError(detail=INTEGRITY_FAILED_MESSAGE)
        if is_timeout_error(error):
            return QueryTimeoutError()
        logger.error(f"Failed {self.entity.lower()} {operation}: {error!r}")
        return DatabaseError(detail=SAVE_FAILED_MESSAGE)

    async def _save(self, record: ModelT, duplicate_message: str | None = None) -> ModelT:
        """
        Flush a new or modified record and reload server-side defaults.

        Args:
            record: Record to persist
            duplicate_message: Client message for a unique index violation

        Returns:
            ModelT: The refreshed record

        Raises:
            DuplicateEntryError: A unique index rejected the row
            QueryTimeoutError: The store aborted the write on its time bound
            DatabaseError: Any other store failure
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except Exception as e:
            raise await self._write_failure(e, "save", duplicate_message) from e
        return record

    async def commit(self) -> None:
        """
        Commit the request transaction now.

        Callers use this before side effects outside the store, such as
        releasing an image, so those never run for a write that is later
        lost. Failures are reported like flush failures.
        """
        try:
            await self.session.commit()
        except Exception as e:
            raise await self._write_failure(e, "commit") from e

    async def _value_taken(
        self,
        field_name: str,
        value: FieldValue,
        exclude_id: UUID | None = None,
        *,
        case_insensitive: bool = False,
    ) -> bool:
        """
        Tell whether another row already holds ``value`` in ``field_name``.

        Args:
            field_name: Column to check
            value: Candidate value
            exclude_id: Row being updated, ignored by the check
            case_insensitive: Compare lower-cased strings

        Returns:
            bool: True when the value is taken
        """
        field = getattr(self.model, field_name)
        if case_insensitive and isinstance(value, str):
            statement = select(1).where(func.lower(field) == value.lower())
        else:
            statement = select(1).where(field == value)
        if exclude_id is not None:
            statement = statement.where(self._id_column != exclude_id)

        result = await self._execute(statement.limit(1), f"taken_{field_name}")
        return result.scalar_one_or_none() is not None
