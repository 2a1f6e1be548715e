# sample/adapters/persistence/repositories/command_default.py

from __future__ import annotations

from typing import Any, Optional

from sample.adapters.persistence.db_context import ApplicationDbContext
from sample.adapters.persistence.repositories.base import CommandRepository


class CommandDefaultRepository(CommandRepository):
    """Command repository bound to the application's own context."""

    def __init__(self, db_context: ApplicationDbContext, logger: Optional[Any] = None) -> None:
        super().__init__(db_context, logger)
