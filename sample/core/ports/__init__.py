"""
Core Ports (Interfaces).

Protocols the infrastructure adapters implement. The use cases depend on
these only, never on SQLAlchemy directly.
"""

from .db_context import IDbContext
from .repositories import ICommandRepository, IQueryRepository

__all__ = [
    "ICommandRepository",
    "IDbContext",
    "IQueryRepository",
]
