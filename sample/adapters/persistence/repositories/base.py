# sample/adapters/persistence/repositories/base.py

from __future__ import annotations

from typing import Any, Generic, Iterable, List, Optional, Sequence, Type

import structlog

from sample.core.domain.entities import TEntity, TKey
from sample.core.domain.exceptions import InvalidConfigurationError, PersistenceError
from sample.core.ports.db_context import IDbContext


def _require_context(db_context: Optional[IDbContext], owner: str) -> IDbContext:
    if db_context is None:
        raise InvalidConfigurationError(f"{owner} requires a persistence context.")
    return db_context


class QueryRepository(Generic[TEntity, TKey]):
    """
    Generic read-only repository for one entity type.

    Pure pass-through to the context: no caching, no pagination policy, no
    retries. Errors from the store arrive as PersistenceError and are not
    touched here.
    """

    def __init__(self, db_context: IDbContext, entity_type: Type[TEntity]) -> None:
        self._context = _require_context(db_context, type(self).__name__)
        if entity_type is None:
            raise InvalidConfigurationError(f"{type(self).__name__} requires an entity type.")
        self._entity_type = entity_type

    @property
    def entity_type(self) -> Type[TEntity]:
        return self._entity_type

    async def get_by_id(self, key: TKey) -> Optional[TEntity]:
        return await self._context.find(self._entity_type, key)

    async def list_all(self) -> List[TEntity]:
        return await self._context.query(self._entity_type)

    async def find(
        self,
        *criteria: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TEntity]:
        return await self._context.query(
            self._entity_type, *criteria, order_by=order_by, limit=limit, offset=offset
        )

    async def first_or_none(self, *criteria: Any) -> Optional[TEntity]:
        rows = await self._context.query(self._entity_type, *criteria, limit=1)
        return rows[0] if rows else None

    async def count(self, *criteria: Any) -> int:
        return await self._context.count(self._entity_type, *criteria)

    async def exists(self, key: TKey) -> bool:
        return await self.get_by_id(key) is not None


class CommandRepository:
    """
    Write repository over the context's change tracking.

    Each public call is one transaction: stage, commit, done. When the commit
    fails the context has already rolled back and PersistenceError
    propagates. Besides delegating, the repository logs exactly one event per
    call (never per row). A cancelled call logs nothing.

    ``update`` only changes an existing row; an unknown key is a
    PersistenceError, never an insert. After any failed call the context has
    rolled back and expired the entities it handed out: re-read them through
    a query repository before using them again.
    """

    def __init__(self, db_context: IDbContext, logger: Optional[Any] = None) -> None:
        self._context = _require_context(db_context, type(self).__name__)
        self._logger = logger or structlog.get_logger(__name__).bind(
            repository=type(self).__name__
        )

    async def add(self, entity: TEntity) -> TEntity:
        try:
            self._context.add(entity)
            await self._context.commit()
        except PersistenceError as exc:
            self._failed("add", exc, entity_type=type(entity).__name__)
            raise
        self._logger.info("command_succeeded", operation="add", entity_type=type(entity).__name__)
        return entity

    async def add_range(self, entities: Iterable[TEntity]) -> Sequence[TEntity]:
        items = list(entities)
        try:
            self._context.add_all(items)
            await self._context.commit()
        except PersistenceError as exc:
            self._failed("add_range", exc, count=len(items))
            raise
        self._logger.info("command_succeeded", operation="add_range", count=len(items))
        return items

    async def update(self, entity: TEntity) -> TEntity:
        try:
            merged = await self._context.update(entity)
            await self._context.commit()
        except PersistenceError as exc:
            self._failed("update", exc, entity_type=type(entity).__name__)
            raise
        self._logger.info("command_succeeded", operation="update", entity_type=type(entity).__name__)
        return merged

    async def remove(self, entity: TEntity) -> None:
        try:
            await self._context.remove(entity)
            await self._context.commit()
        except PersistenceError as exc:
            self._failed("remove", exc, entity_type=type(entity).__name__)
            raise
        self._logger.info("command_succeeded", operation="remove", entity_type=type(entity).__name__)

    async def remove_by_id(self, entity_type: Type[TEntity], key: TKey) -> bool:
        try:
            entity = await self._context.find(entity_type, key)
            if entity is not None:
                await self._context.remove(entity)
                await self._context.commit()
        except PersistenceError as exc:
            self._failed("remove_by_id", exc, entity_type=entity_type.__name__)
            raise
        self._logger.info(
            "command_succeeded",
            operation="remove_by_id",
            entity_type=entity_type.__name__,
            found=entity is not None,
        )
        return entity is not None

    def _failed(self, operation: str, exc: PersistenceError, **fields: Any) -> None:
        self._logger.warning(
            "command_failed",
            operation=operation,
            error_type=type(exc).__name__,
            error=exc.message,
            **fields,
        )
