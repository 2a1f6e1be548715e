# sample/core/domain/constants.py
from enum import Enum


class ServiceKeys(str, Enum):
    """
    Discriminators for keyed registrations.
    The same abstract role can be bound once per key (e.g. a default store
    and an alternate one side by side).
    """
    COMMAND_REPOSITORY = "command.default"
    QUERY_REPOSITORY = "query.default"
