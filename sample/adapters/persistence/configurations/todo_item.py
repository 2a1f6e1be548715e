# sample/adapters/persistence/configurations/todo_item.py

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Table

from sample.adapters.persistence.models import mapper_registry, metadata
from sample.core.domain.todo_item import TodoItem, utcnow

todo_items_table = Table(
    "todo_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False, unique=True),
    Column("is_done", Boolean, nullable=False, default=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow),
)

mapper_registry.map_imperatively(TodoItem, todo_items_table)
