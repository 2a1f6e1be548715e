# sample/core/domain/entities.py
from typing import Hashable, Protocol, TypeVar, runtime_checkable

TKey = TypeVar("TKey", bound=Hashable)
TKey_co = TypeVar("TKey_co", bound=Hashable, covariant=True)


@runtime_checkable
class IEntity(Protocol[TKey_co]):
    """
    Minimal contract for anything the repositories persist.

    An entity only has to expose an identity value. The key type must support
    equality; the repositories never interpret it, they hand it to the
    persistence context as-is.
    """

    @property
    def id(self) -> TKey_co:
        ...


TEntity = TypeVar("TEntity", bound=IEntity)
