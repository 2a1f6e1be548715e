# sample/adapters/api/dependencies.py
from typing import AsyncIterator

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from sample.core.use_cases.todo_items import TodoItemService
from sample.shared.container import Container
from sample.shared.services import ServiceProvider, ServiceScope


# -----------------------------------------------------------------------------
# Request scope
# -----------------------------------------------------------------------------
@inject
def get_service_provider(
    provider: ServiceProvider = Depends(Provide[Container.services]),
) -> ServiceProvider:
    """The container-managed provider holding the keyed registrations."""
    return provider


async def get_service_scope(
    provider: ServiceProvider = Depends(get_service_provider),
) -> AsyncIterator[ServiceScope]:
    """
    One ServiceScope (and so one database session) per request.

    The scope is closed when the request finishes, also when the endpoint
    raised or the client disconnected and the task was cancelled.
    """
    async with provider.create_scope() as scope:
        yield scope


# -----------------------------------------------------------------------------
# Use case injection
# -----------------------------------------------------------------------------
async def get_todo_item_service(
    scope: ServiceScope = Depends(get_service_scope),
) -> TodoItemService:
    return scope.get_required_service(TodoItemService)
