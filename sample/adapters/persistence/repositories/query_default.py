# sample/adapters/persistence/repositories/query_default.py

from __future__ import annotations

from typing import Type

from sample.adapters.persistence.db_context import ApplicationDbContext
from sample.adapters.persistence.repositories.base import QueryRepository
from sample.core.domain.entities import TEntity, TKey


class QueryDefaultRepository(QueryRepository[TEntity, TKey]):
    """Query repository bound to the application's own context."""

    def __init__(self, db_context: ApplicationDbContext, entity_type: Type[TEntity]) -> None:
        super().__init__(db_context, entity_type)
