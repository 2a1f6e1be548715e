# sample/core/use_cases/todo_items.py
from typing import Annotated, List, Optional

import structlog

from sample.core.domain.constants import ServiceKeys
from sample.core.domain.exceptions import EntityNotFoundError
from sample.core.domain.todo_item import TodoItem
from sample.core.ports.repositories import ICommandRepository, IQueryRepository
from sample.shared.services import FromKeyedServices

logger = structlog.get_logger(__name__)

TodoItemQueries = Annotated[
    IQueryRepository[TodoItem, int], FromKeyedServices(ServiceKeys.QUERY_REPOSITORY)
]
TodoItemCommands = Annotated[
    ICommandRepository, FromKeyedServices(ServiceKeys.COMMAND_REPOSITORY)
]


class TodoItemService:
    """
    Use case for the sample TodoItem slice.
    Reads go through the keyed query repository, writes through the keyed
    command repository; both share the request's context.
    """

    def __init__(self, queries: TodoItemQueries, commands: TodoItemCommands):
        self.queries = queries
        self.commands = commands

    async def list_items(self) -> List[TodoItem]:
        items = await self.queries.list_all()
        return sorted(items, key=lambda item: item.id)

    async def get_item(self, item_id: int) -> TodoItem:
        item = await self.queries.get_by_id(item_id)
        if item is None:
            raise EntityNotFoundError("TodoItem", item_id)
        return item

    async def create_item(self, title: str, is_done: bool = False) -> TodoItem:
        return await self.commands.add(TodoItem(title=title, is_done=is_done))

    async def update_item(
        self,
        item_id: int,
        *,
        title: Optional[str] = None,
        is_done: Optional[bool] = None,
    ) -> TodoItem:
        item = await self.get_item(item_id)
        if title is not None:
            item.rename(title)
        if is_done is not None:
            item.mark(is_done)
        return await self.commands.update(item)

    async def delete_item(self, item_id: int) -> None:
        if not await self.commands.remove_by_id(TodoItem, item_id):
            raise EntityNotFoundError("TodoItem", item_id)
        logger.debug("todo_item_deleted", item_id=item_id)
