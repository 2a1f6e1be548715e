# sample/core/register.py
from sample.core.use_cases.todo_items import TodoItemService
from sample.shared.config import Settings
from sample.shared.services import ServiceCollection


def add_application_services(services: ServiceCollection, settings: Settings) -> ServiceCollection:
    """
    Registers the application layer (use cases).
    Use cases are stateless and resolved once per request scope.
    """
    services.try_add(TodoItemService)
    return services
