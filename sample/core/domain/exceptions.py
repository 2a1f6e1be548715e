# sample/core/domain/exceptions.py
from typing import Any


class DomainError(Exception):
    """Base class for all application-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Startup / Wiring Errors ---

class InvalidConfigurationError(DomainError):
    """
    Raised for a missing or malformed binding or connection setup.
    Fatal at startup; never retried.
    """

# --- Persistence Errors ---

class PersistenceError(DomainError):
    """
    Raised for any failure of the underlying store (connection loss,
    constraint violation, mapping mismatch). The original driver/ORM error
    is kept as ``__cause__``.
    """

class ConstraintViolationError(PersistenceError):
    """Raised when a write breaks a uniqueness or integrity constraint."""

# --- Lookup Errors ---

class EntityNotFoundError(DomainError):
    """Raised when no entity exists for the requested key."""
    def __init__(self, entity_name: str, key: Any):
        self.entity_name = entity_name
        self.key = key
        super().__init__(f"{entity_name} with key '{key}' was not found.")
