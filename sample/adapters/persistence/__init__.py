"""
sample.adapters.persistence
===========================

SQLAlchemy (asyncio) implementation of the persistence ports:

    from sample.adapters.persistence import Database, ApplicationDbContext

Importing this package maps every entity configured under
``sample.adapters.persistence.configurations``.
"""

from .database import Database
from .db_context import ApplicationDbContext
from .models import configure_mappings, mapper_registry, metadata

configure_mappings()

__all__ = [
    "ApplicationDbContext",
    "Database",
    "configure_mappings",
    "mapper_registry",
    "metadata",
]
