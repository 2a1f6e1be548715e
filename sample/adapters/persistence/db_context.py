# sample/adapters/persistence/db_context.py

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, List, Optional, Type

import structlog
from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sample.adapters.persistence.database import Database
from sample.core.domain.entities import TEntity
from sample.core.domain.exceptions import ConstraintViolationError, PersistenceError

logger = structlog.get_logger(__name__)


class ApplicationDbContext:
    """
    Request-scoped unit of work over one ``AsyncSession``.

    Implements the ``IDbContext`` port. Never share an instance between two
    concurrently running requests: the session's change tracking is not safe
    for that. The owning ServiceScope calls ``aclose`` when the request ends.
    """

    def __init__(self, database: Database) -> None:
        self._session: AsyncSession = database.session_factory()

    @property
    def session(self) -> AsyncSession:
        return self._session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def query(
        self,
        entity_type: Type[TEntity],
        *criteria: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TEntity]:
        stmt = select(entity_type).where(*criteria)
        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                stmt = stmt.order_by(*order_by)
            else:
                stmt = stmt.order_by(order_by)
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._translate_errors():
            result = await self._session.execute(stmt)
            return list(result.scalars().all())

    async def find(self, entity_type: Type[TEntity], key: Any) -> Optional[TEntity]:
        # Primary key lookup: at most one row by construction.
        async with self._translate_errors():
            return await self._session.get(entity_type, key)

    async def count(self, entity_type: Type[TEntity], *criteria: Any) -> int:
        stmt = select(func.count()).select_from(entity_type).where(*criteria)
        async with self._translate_errors():
            result = await self._session.execute(stmt)
            return int(result.scalar_one())

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    def add(self, entity: Any) -> None:
        try:
            self._session.add(entity)
        except SQLAlchemyError as exc:  # e.g. an unmapped class
            raise PersistenceError(f"Cannot stage {type(entity).__name__}: {exc}") from exc

    def add_all(self, entities: Iterable[Any]) -> None:
        staged: List[Any] = []
        try:
            for entity in entities:
                self._session.add(entity)
                staged.append(entity)
        except SQLAlchemyError as exc:
            # all or nothing: drop what was staged so far
            for entity in staged:
                self._session.expunge(entity)
            raise PersistenceError(f"Cannot stage entities: {exc}") from exc

    async def update(self, entity: TEntity) -> TEntity:
        """
        Applies the entity's state to the stored row with the same key.

        Raises PersistenceError when no such row exists; an update never
        inserts.
        """
        async with self._translate_errors():
            key = inspect(type(entity)).primary_key_from_instance(entity)
            if any(part is None for part in key):
                raise PersistenceError(f"Cannot update {type(entity).__name__} without a key.")
            stored = await self._session.get(type(entity), key[0] if len(key) == 1 else tuple(key))
            if stored is None:
                raise PersistenceError(f"No stored {type(entity).__name__} with key {key!r} to update.")
            return await self._session.merge(entity)

    async def remove(self, entity: Any) -> None:
        async with self._translate_errors():
            await self._session.delete(entity)

    async def commit(self) -> None:
        async with self._translate_errors():
            await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def aclose(self) -> None:
        # close() rolls back anything left uncommitted
        await self._session.close()

    @asynccontextmanager
    async def _translate_errors(self) -> AsyncIterator[None]:
        """
        Rolls back and re-raises SQLAlchemy failures as PersistenceError.

        After the rollback no partially written state is visible to later
        reads in this scope. The rollback also expires every instance loaded
        by this context; read them again through the context instead of
        touching attributes of the old objects. Cancellation is not an
        Exception and passes through untouched.
        """
        try:
            yield
        except IntegrityError as exc:
            await self.rollback()
            logger.debug("persistence_error", error_type=type(exc).__name__)
            raise ConstraintViolationError(f"Constraint violated: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            await self.rollback()
            logger.debug("persistence_error", error_type=type(exc).__name__)
            raise PersistenceError(f"Persistence failure: {exc}") from exc
