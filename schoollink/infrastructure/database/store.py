# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory store: the narrow data-access interface used by every service.

The store exposes reads by key, filtered queries, and one atomic write
primitive, ``transact(reads, writes, deletes)``. Records are detached ORM
instances; each carries a ``version`` that is checked and incremented on
commit so a transaction built from stale reads fails with ConflictError
instead of overwriting a concurrent change.

Services wrap their read-validate-write cycle in ``retrying`` which re-runs
it with fresh reads on conflict, up to a bounded number of attempts.

Example:
    store = DirectoryStore(get_sessionmaker(), timeout=5.0)

    async def attempt() -> None:
        student = await store.get(Student, "12345678A")
        student.observations = "allergic to nuts"
        await store.transact(writes=[student])

    await store.retrying(attempt, operation_name="update_observations")
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete, func, inspect, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from schoollink.domains.errors import (
    ConcurrentModificationError,
    NotFoundError,
    StoreUnavailableError,
)
from schoollink.infrastructure.database.models import Base
from schoollink.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
ResultT = TypeVar("ResultT")

# Columns the store manages itself; never copied from the caller's record.
_MANAGED_COLUMNS = frozenset({"id", "version", "created_at", "updated_at"})


class ConflictError(Exception):
    """Raised when a transaction lost a race against a concurrent write.

    Attributes:
        entity: Table of the record whose version no longer matched.
        entity_id: Identifier of that record.
    """

    def __init__(self, message: str, entity: str | None = None, entity_id: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class DirectoryStore:
    """Async repository over the directory database.

    Attributes:
        timeout: Seconds allowed for any single store call.
        max_conflict_retries: Attempts made by ``retrying``.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        timeout: float = 5.0,
        max_conflict_retries: int = 3,
    ) -> None:
        self._sessionmaker = sessionmaker
        self.timeout = timeout
        self.max_conflict_retries = max_conflict_retries
        self._write_lock = asyncio.Lock()

    # =========================================================================
    # Reads
    # =========================================================================

    async def find(self, model: type[ModelT], record_id: str) -> ModelT | None:
        """Get a record by id, or None if it does not exist."""
        async with self._bounded("find", model), self._sessionmaker() as session:
            return await session.get(model, record_id)

    async def get(self, model: type[ModelT], record_id: str) -> ModelT:
        """Get a record by id.

        Raises:
            NotFoundError: If no record has this id.
        """
        record = await self.find(model, record_id)
        if record is None:
            raise NotFoundError(_entity_name(model), record_id)
        return record

    async def query(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ModelT]:
        """Get every record of ``model`` matching ``criteria``.

        Args:
            model: ORM model to query.
            *criteria: SQLAlchemy filter expressions, combined with AND.
            order_by: Ordering expressions.
            limit: Maximum number of records.
            offset: Number of records to skip.

        Returns:
            Detached records.
        """
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        async with self._bounded("query", model), self._sessionmaker() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self, model: type[Base], *criteria: Any) -> int:
        """Count records of ``model`` matching ``criteria``."""
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)

        async with self._bounded("count", model), self._sessionmaker() as session:
            return int(await session.scalar(stmt) or 0)

    async def ping(self) -> None:
        """Round-trip to the database.

        Raises:
            StoreUnavailableError: The database timed out or is unreachable.
        """
        async with self._bounded("ping"), self._sessionmaker() as session:
            await session.execute(text("SELECT 1"))

    # =========================================================================
    # Writes
    # =========================================================================

    async def transact(
        self,
        reads: Iterable[Base] = (),
        writes: Iterable[Base] = (),
        deletes: Iterable[Base] = (),
    ) -> None:
        """Atomically apply writes if nothing read has changed since.

        Every record in ``reads``, and every previously loaded record in
        ``writes`` or ``deletes``, must still carry the version it was read
        with. New (never persisted) records in ``writes`` are inserted.
        Written records get their version incremented, so writing an
        unchanged record serialises concurrent transactions on it.

        Args:
            reads: Records the decision was based on.
            writes: Records to insert or update.
            deletes: Records to delete.

        Raises:
            ConflictError: A version no longer matched or a uniqueness
                constraint was violated.
            StoreUnavailableError: The database timed out or is unreachable.
        """
        reads = list(reads)
        writes = list(writes)
        deletes = list(deletes)
        touched = {_key(record) for record in (*writes, *deletes) if _is_persisted(record)}
        updated: list[Base] = []

        async with self._bounded("transact"), self._write_lock:
            async with self._sessionmaker() as session:
                try:
                    async with session.begin():
                        for record in reads:
                            if _key(record) not in touched:
                                await self._check_version(session, record)

                        for record in writes:
                            if _is_persisted(record):
                                await self._update(session, record)
                                updated.append(record)
                            else:
                                record.version = 1
                                session.add(record)

                        for record in deletes:
                            await self._delete(session, record)
                except IntegrityError as e:
                    raise ConflictError(f"Uniqueness constraint violated: {e.orig}") from e

        for record in updated:
            record.version += 1

        logger.debug(
            "transaction_committed",
            reads=len(reads),
            writes=len(writes),
            deletes=len(deletes),
        )

    async def retrying(
        self,
        operation: Callable[[], Awaitable[ResultT]],
        *,
        operation_name: str = "transaction",
    ) -> ResultT:
        """Run a read-validate-transact closure, re-running it on conflict.

        Args:
            operation: Closure performing fresh reads then ``transact``.
            operation_name: Name used in logs and errors.

        Returns:
            The closure's result.

        Raises:
            ConcurrentModificationError: Every attempt hit a conflict.
        """
        last_error: ConflictError | None = None
        for attempt in range(1, self.max_conflict_retries + 1):
            try:
                return await operation()
            except ConflictError as e:
                last_error = e
                logger.info(
                    "transaction_conflict",
                    operation=operation_name,
                    attempt=attempt,
                    entity=e.entity,
                    entity_id=e.entity_id,
                )

        raise ConcurrentModificationError(
            f"{operation_name} kept conflicting with concurrent changes",
            attempts=self.max_conflict_retries,
        ) from last_error

    # =========================================================================
    # Internals
    # =========================================================================

    @asynccontextmanager
    async def _bounded(self, operation: str, model: type[Base] | None = None) -> AsyncIterator[None]:
        """Bound a store call by the timeout and translate driver outages."""
        try:
            async with asyncio.timeout(self.timeout):
                yield
        except TimeoutError as e:
            logger.warning("store_timeout", operation=operation, timeout=self.timeout)
            raise StoreUnavailableError(
                f"Directory store did not answer {operation} within {self.timeout}s",
                operation=operation,
            ) from e
        except (OperationalError, DBAPIError) as e:
            if isinstance(e, IntegrityError):
                raise
            logger.warning(
                "store_unavailable",
                operation=operation,
                model=model.__name__ if model else None,
                error=str(e.orig),
            )
            raise StoreUnavailableError(
                f"Directory store failed during {operation}",
                operation=operation,
            ) from e

    async def _check_version(self, session: AsyncSession, record: Base) -> None:
        model = type(record)
        stmt = select(model.version).where(model.id == record.id).with_for_update()
        current = await session.scalar(stmt)
        if current != record.version:
            raise ConflictError(
                f"{model.__tablename__} {record.id} changed since it was read",
                entity=model.__tablename__,
                entity_id=record.id,
            )

    async def _update(self, session: AsyncSession, record: Base) -> None:
        model = type(record)
        table = model.__table__
        values = {
            attr.key: getattr(record, attr.key)
            for attr in inspect(model).column_attrs
            if attr.key not in _MANAGED_COLUMNS
        }
        stmt = (
            update(table)
            .where(table.c.id == record.id, table.c.version == record.version)
            .values(**values, version=record.version + 1)
        )
        result = await session.execute(stmt)
        if result.rowcount != 1:
            raise ConflictError(
                f"{model.__tablename__} {record.id} changed since it was read",
                entity=model.__tablename__,
                entity_id=record.id,
            )

    async def _delete(self, session: AsyncSession, record: Base) -> None:
        model = type(record)
        table = model.__table__
        stmt = delete(table).where(table.c.id == record.id, table.c.version == record.version)
        result = await session.execute(stmt)
        if result.rowcount != 1:
            raise ConflictError(
                f"{model.__tablename__} {record.id} changed since it was read",
                entity=model.__tablename__,
                entity_id=record.id,
            )


def _is_persisted(record: Base) -> bool:
    return inspect(record).has_identity


def _key(record: Base) -> tuple[str, str]:
    return type(record).__tablename__, record.id


def _entity_name(model: type[Base]) -> str:
    return getattr(model, "__entity_name__", model.__name__)
