"""
sample/adapters/api/schemas.py

Pydantic models for the sample "todo-items" HTTP API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class APIModel(BaseModel):
    """Common base: read straight from ORM-mapped domain objects."""

    model_config = ConfigDict(from_attributes=True)


class TodoItemCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=200, description="Unique title")
    is_done: bool = Field(False, description="Completion flag")


class TodoItemUpdate(APIModel):
    """Partial update; omitted fields stay unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_done: Optional[bool] = None


class TodoItemRead(APIModel):
    id: int
    title: str
    is_done: bool
    created_at: datetime
    updated_at: datetime
