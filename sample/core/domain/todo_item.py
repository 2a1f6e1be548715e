# sample/core/domain/todo_item.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class TodoItem:
    """
    Sample entity shipped with the template.

    Plain dataclass; the ORM mapping lives in the persistence adapter.
    ``id`` stays None until the store assigns one.
    """
    title: str
    is_done: bool = False
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def rename(self, title: str) -> None:
        self.title = title
        self.updated_at = utcnow()

    def mark(self, done: bool) -> None:
        self.is_done = done
        self.updated_at = utcnow()
