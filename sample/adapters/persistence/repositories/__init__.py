# sample/adapters/persistence/repositories/__init__.py
"""
Repository layer public exports.

    from sample.adapters.persistence.repositories import QueryDefaultRepository
"""

from .base import CommandRepository, QueryRepository
from .command_default import CommandDefaultRepository
from .query_default import QueryDefaultRepository

__all__ = [
    "CommandDefaultRepository",
    "CommandRepository",
    "QueryDefaultRepository",
    "QueryRepository",
]
