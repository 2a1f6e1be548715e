from .todo_items import TodoItemService

__all__ = ["TodoItemService"]
