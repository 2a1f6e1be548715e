# sample/core/ports/repositories.py
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Type

from sample.core.domain.entities import TEntity, TKey


class IQueryRepository(Protocol[TEntity, TKey]):
    """
    Read-only access to one entity collection.

    Registered as an open generic: the same implementation serves every
    (entity, key) pair, e.g. ``IQueryRepository[TodoItem, int]``.
    """

    async def get_by_id(self, key: TKey) -> Optional[TEntity]:
        """
        Retrieves a single entity by its identity.

        Returns:
            The entity if found, None otherwise. Never more than one.
        """
        ...

    async def list_all(self) -> List[TEntity]:
        ...

    async def find(
        self,
        *criteria: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TEntity]:
        """Retrieves every entity matching all criteria."""
        ...

    async def first_or_none(self, *criteria: Any) -> Optional[TEntity]:
        ...

    async def count(self, *criteria: Any) -> int:
        ...

    async def exists(self, key: TKey) -> bool:
        ...


class ICommandRepository(Protocol):
    """
    Write access over the default entity set.

    Every call is one all-or-nothing write and records one log event.
    """

    async def add(self, entity: Any) -> Any:
        ...

    async def add_range(self, entities: Iterable[Any]) -> Sequence[Any]:
        ...

    async def update(self, entity: Any) -> Any:
        ...

    async def remove(self, entity: Any) -> None:
        ...

    async def remove_by_id(self, entity_type: Type[Any], key: Any) -> bool:
        """Deletes the entity with that key. Returns False if none existed."""
        ...
