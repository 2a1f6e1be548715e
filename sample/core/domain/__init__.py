"""
Core Domain.

Entity contract, service keys and the exception taxonomy shared by every
layer. Nothing in here depends on FastAPI or SQLAlchemy.
"""

from .constants import ServiceKeys
from .entities import IEntity, TEntity, TKey
from .exceptions import (
    ConstraintViolationError,
    DomainError,
    EntityNotFoundError,
    InvalidConfigurationError,
    PersistenceError,
)

__all__ = [
    "ConstraintViolationError",
    "DomainError",
    "EntityNotFoundError",
    "IEntity",
    "InvalidConfigurationError",
    "PersistenceError",
    "ServiceKeys",
    "TEntity",
    "TKey",
]
