# sample/core/ports/db_context.py
from typing import Any, Iterable, List, Optional, Protocol, Type

from sample.core.domain.entities import TEntity


class IDbContext(Protocol):
    """
    Port for the request-scoped unit of work.

    One instance lives for exactly one request scope and is never shared
    between concurrently running requests. Every method may suspend on I/O.
    Store failures surface as PersistenceError; cancellation propagates.
    """

    async def query(
        self,
        entity_type: Type[TEntity],
        *criteria: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TEntity]:
        """Returns every entity of the given type matching all criteria."""
        ...

    async def find(self, entity_type: Type[TEntity], key: Any) -> Optional[TEntity]:
        """Returns the unique entity with that key, or None."""
        ...

    async def count(self, entity_type: Type[TEntity], *criteria: Any) -> int:
        ...

    def add(self, entity: Any) -> None:
        """Stages a new entity; nothing is written before commit()."""
        ...

    def add_all(self, entities: Iterable[Any]) -> None:
        ...

    async def update(self, entity: TEntity) -> TEntity:
        """Attaches a (possibly detached) entity and stages its state."""
        ...

    async def remove(self, entity: Any) -> None:
        ...

    async def commit(self) -> None:
        """Writes all staged changes atomically; rolls back on failure."""
        ...

    async def rollback(self) -> None:
        ...

    async def aclose(self) -> None:
        """Releases the underlying connection. Called when the scope ends."""
        ...
