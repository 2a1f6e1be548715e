# sample/shared/services.py
"""
Keyed service registry with request scopes.

The process-level wiring (settings, engine, health checks) lives in the
dependency-injector ``Container``. This module covers what that container
does not: bindings keyed by ``(role, key)`` so several implementations of
one abstract role can coexist, open generic roles such as
``IQueryRepository`` served for any ``IQueryRepository[Entity, Key]``, and
scoped lifetimes tied to one request.

Typical usage::

    services = ServiceCollection()
    services.add_keyed_scoped(ICommandRepository, ServiceKeys.COMMAND_REPOSITORY,
                              CommandDefaultRepository)
    provider = services.build_provider()

    async with provider.create_scope() as scope:
        repo = scope.get_required_service(
            ICommandRepository, key=ServiceKeys.COMMAND_REPOSITORY
        )

Constructor injection reads type hints. A parameter annotated with a
registered role is resolved from the scope, ``Annotated[Role,
FromKeyedServices(key)]`` picks a keyed binding, and ``Type[T]`` receives the
closed type argument of an open generic registration.
"""

import inspect
import threading
from dataclasses import dataclass
from enum import Enum
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Hashable,
    Iterator,
    List,
    Optional,
    Tuple,
    get_args,
    get_origin,
    get_type_hints,
)

import structlog

from sample.core.domain.exceptions import InvalidConfigurationError

logger = structlog.get_logger(__name__)

BindingKey = Tuple[Any, Optional[Hashable]]


class ServiceLifetime(str, Enum):
    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class FromKeyedServices:
    """Annotation marker selecting a keyed binding for a constructor parameter."""
    key: Hashable


@dataclass(frozen=True)
class ServiceDescriptor:
    role: Any
    key: Optional[Hashable]
    lifetime: ServiceLifetime
    implementation: Optional[type] = None
    factory: Optional[Callable[["ServiceScope"], Any]] = None
    instance: Any = None

    @property
    def is_open_generic(self) -> bool:
        return get_origin(self.role) is None and bool(getattr(self.role, "__parameters__", ()))


def _role_name(role: Any, key: Optional[Hashable] = None) -> str:
    name = getattr(role, "__qualname__", None) or repr(role)
    if get_origin(role) is not None:
        name = repr(role)
    return name if key is None else f"{name} [key={getattr(key, 'value', key)!r}]"


def _describe(
    role: Any,
    key: Optional[Hashable],
    lifetime: ServiceLifetime,
    implementation: Optional[type],
    factory: Optional[Callable[["ServiceScope"], Any]],
    instance: Any,
) -> ServiceDescriptor:
    provided = [value for value in (implementation, factory, instance) if value is not None]
    if len(provided) > 1:
        raise InvalidConfigurationError(
            f"{_role_name(role, key)}: give exactly one of implementation, factory or instance."
        )
    if not provided:
        if not inspect.isclass(role) or getattr(role, "_is_protocol", False):
            raise InvalidConfigurationError(
                f"{_role_name(role, key)} is abstract; an implementation is required."
            )
        implementation = role
    if instance is not None and lifetime is not ServiceLifetime.SINGLETON:
        raise InvalidConfigurationError(
            f"{_role_name(role, key)}: an existing instance can only be a singleton."
        )

    descriptor = ServiceDescriptor(
        role=role,
        key=key,
        lifetime=lifetime,
        implementation=implementation,
        factory=factory,
        instance=instance,
    )
    if descriptor.is_open_generic and implementation is None:
        raise InvalidConfigurationError(
            f"Open generic {_role_name(role, key)} needs an implementation class."
        )
    return descriptor


class ServiceCollection:
    """
    Mutable set of bindings, one per ``(role, key)`` pair.

    ``add`` replaces an existing binding; ``try_add`` keeps the first one.
    """

    def __init__(self) -> None:
        self._descriptors: Dict[BindingKey, ServiceDescriptor] = {}

    def add(
        self,
        role: Any,
        implementation: Optional[type] = None,
        *,
        key: Optional[Hashable] = None,
        lifetime: ServiceLifetime = ServiceLifetime.SCOPED,
        factory: Optional[Callable[["ServiceScope"], Any]] = None,
        instance: Any = None,
    ) -> "ServiceCollection":
        descriptor = _describe(role, key, lifetime, implementation, factory, instance)
        if (role, key) in self._descriptors:
            logger.debug("service_binding_replaced", role=_role_name(role, key))
        self._descriptors[(role, key)] = descriptor
        return self

    def try_add(
        self,
        role: Any,
        implementation: Optional[type] = None,
        *,
        key: Optional[Hashable] = None,
        lifetime: ServiceLifetime = ServiceLifetime.SCOPED,
        factory: Optional[Callable[["ServiceScope"], Any]] = None,
        instance: Any = None,
    ) -> bool:
        if (role, key) in self._descriptors:
            logger.debug("service_binding_kept", role=_role_name(role, key))
            return False
        self._descriptors[(role, key)] = _describe(
            role, key, lifetime, implementation, factory, instance
        )
        return True

    # --- Shorthands ---

    def add_singleton(self, role, implementation=None, *, key=None, factory=None, instance=None):
        return self.add(
            role, implementation, key=key, lifetime=ServiceLifetime.SINGLETON,
            factory=factory, instance=instance,
        )

    def add_scoped(self, role, implementation=None, *, key=None, factory=None):
        return self.add(role, implementation, key=key, lifetime=ServiceLifetime.SCOPED, factory=factory)

    def add_transient(self, role, implementation=None, *, key=None, factory=None):
        return self.add(role, implementation, key=key, lifetime=ServiceLifetime.TRANSIENT, factory=factory)

    def add_keyed_scoped(self, role, key, implementation=None, *, factory=None):
        return self.add(role, implementation, key=key, lifetime=ServiceLifetime.SCOPED, factory=factory)

    def try_add_keyed_scoped(self, role, key, implementation=None, *, factory=None):
        return self.try_add(role, implementation, key=key, lifetime=ServiceLifetime.SCOPED, factory=factory)

    # --- Introspection ---

    def get_descriptor(self, role: Any, key: Optional[Hashable] = None) -> Optional[ServiceDescriptor]:
        return self._descriptors.get((role, key))

    def __contains__(self, binding: BindingKey) -> bool:
        return binding in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(list(self._descriptors.values()))

    def build_provider(self) -> "ServiceProvider":
        logger.info("service_provider_built", bindings=len(self._descriptors))
        return ServiceProvider(dict(self._descriptors))


class ServiceProvider:
    """
    Immutable snapshot of a ServiceCollection.

    Owns the singletons it creates; everything else is resolved through a
    ServiceScope.
    """

    def __init__(self, descriptors: Dict[BindingKey, ServiceDescriptor]) -> None:
        self._descriptors = descriptors
        self._singletons: Dict[BindingKey, Any] = {}
        self._owned_singletons: List[Any] = []
        self._lock = threading.RLock()

    def lookup(self, role: Any, key: Optional[Hashable] = None) -> Tuple[Optional[ServiceDescriptor], Tuple[Any, ...]]:
        """Finds the binding for a role, falling back to its open generic form."""
        try:
            descriptor = self._descriptors.get((role, key))
        except TypeError:
            # unhashable annotation, cannot be a role
            return None, ()
        if descriptor is not None:
            return descriptor, ()

        origin = get_origin(role)
        if origin is not None:
            descriptor = self._descriptors.get((origin, key))
            if descriptor is not None and descriptor.is_open_generic:
                return descriptor, get_args(role)
        return None, ()

    def is_registered(self, role: Any, key: Optional[Hashable] = None) -> bool:
        return self.lookup(role, key)[0] is not None

    def create_scope(self) -> "ServiceScope":
        return ServiceScope(self)

    def _get_or_create_singleton(self, binding: BindingKey, descriptor: ServiceDescriptor, create: Callable[[], Any]) -> Any:
        with self._lock:
            if binding not in self._singletons:
                instance = create()
                self._singletons[binding] = instance
                if descriptor.instance is None:
                    self._owned_singletons.append(instance)
            return self._singletons[binding]

    async def aclose(self) -> None:
        """Releases the singletons this provider created (not given instances)."""
        owned, self._owned_singletons = self._owned_singletons, []
        self._singletons.clear()
        for instance in reversed(owned):
            await _dispose(instance)


class ServiceScope:
    """
    One resolution scope, normally one HTTP request.

    Scoped services are created once per scope. Everything the scope created
    is released in reverse order when it closes, whatever the exit path.
    """

    def __init__(self, provider: ServiceProvider) -> None:
        self._provider = provider
        self._scoped: Dict[BindingKey, Any] = {}
        self._disposables: List[Any] = []
        self._resolving: List[BindingKey] = []
        self._closed = False

    @property
    def provider(self) -> ServiceProvider:
        return self._provider

    async def __aenter__(self) -> "ServiceScope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def get_service(self, role: Any, *, key: Optional[Hashable] = None) -> Optional[Any]:
        if not self._provider.is_registered(role, key):
            return None
        return self.get_required_service(role, key=key)

    def get_required_service(self, role: Any, *, key: Optional[Hashable] = None) -> Any:
        return self._resolve(role, key, within_singleton=False)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True

        errors: List[Exception] = []
        for instance in reversed(self._disposables):
            try:
                await _dispose(instance)
            except Exception as exc:
                logger.error("service_dispose_failed", service=type(instance).__name__, error=str(exc))
                errors.append(exc)
        self._disposables.clear()
        self._scoped.clear()

        if errors:
            raise errors[0]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve(self, role: Any, key: Optional[Hashable], within_singleton: bool) -> Any:
        if self._closed:
            raise InvalidConfigurationError("Service scope is already closed.")

        descriptor, type_args = self._provider.lookup(role, key)
        if descriptor is None:
            raise InvalidConfigurationError(f"No service registered for {_role_name(role, key)}.")

        binding = (role, key)
        if binding in self._resolving:
            chain = " -> ".join(_role_name(r, k) for r, k in self._resolving + [binding])
            raise InvalidConfigurationError(f"Circular dependency: {chain}")

        self._resolving.append(binding)
        try:
            if descriptor.lifetime is ServiceLifetime.SINGLETON:
                return self._provider._get_or_create_singleton(
                    binding,
                    descriptor,
                    lambda: self._activate(descriptor, type_args, within_singleton=True),
                )

            if within_singleton:
                raise InvalidConfigurationError(
                    f"A singleton cannot depend on {descriptor.lifetime.value} "
                    f"service {_role_name(role, key)}."
                )

            if descriptor.lifetime is ServiceLifetime.SCOPED and binding in self._scoped:
                return self._scoped[binding]

            instance = self._activate(descriptor, type_args, within_singleton=False)
            if descriptor.lifetime is ServiceLifetime.SCOPED:
                self._scoped[binding] = instance
            self._disposables.append(instance)
            return instance
        finally:
            self._resolving.pop()

    def _activate(self, descriptor: ServiceDescriptor, type_args: Tuple[Any, ...], within_singleton: bool) -> Any:
        if descriptor.instance is not None:
            return descriptor.instance
        if descriptor.factory is not None:
            return descriptor.factory(_SingletonResolver(self) if within_singleton else self)

        implementation = descriptor.implementation
        kwargs = self._inject(implementation, type_args, within_singleton)
        return implementation(**kwargs)

    def _inject(self, implementation: type, type_args: Tuple[Any, ...], within_singleton: bool) -> Dict[str, Any]:
        bindings = dict(zip(getattr(implementation, "__parameters__", ()), type_args))
        try:
            hints = get_type_hints(implementation.__init__, include_extras=True)
        except NameError as exc:
            raise InvalidConfigurationError(
                f"Cannot read constructor annotations of {implementation.__qualname__}: {exc}"
            ) from exc

        kwargs: Dict[str, Any] = {}
        for name, param in inspect.signature(implementation).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            role, key = _unwrap(hints.get(name, param.annotation))
            bound = _bind_type_argument(role, bindings)
            if bound is not None:
                kwargs[name] = bound
            elif role is not inspect.Parameter.empty and self._provider.is_registered(role, key):
                kwargs[name] = self._resolve(role, key, within_singleton)
            elif param.default is inspect.Parameter.empty:
                raise InvalidConfigurationError(
                    f"Cannot resolve parameter '{name}' of {implementation.__qualname__}: "
                    f"{_role_name(role, key)} is not registered."
                )
        return kwargs


class _SingletonResolver:
    """
    What a singleton factory receives instead of the scope.
    Resolves other singletons only; scoped and transient roles raise.
    """

    def __init__(self, scope: ServiceScope) -> None:
        self._scope = scope

    def get_service(self, role: Any, *, key: Optional[Hashable] = None) -> Optional[Any]:
        if not self._scope.provider.is_registered(role, key):
            return None
        return self.get_required_service(role, key=key)

    def get_required_service(self, role: Any, *, key: Optional[Hashable] = None) -> Any:
        return self._scope._resolve(role, key, within_singleton=True)


def _unwrap(hint: Any) -> Tuple[Any, Optional[Hashable]]:
    if get_origin(hint) is Annotated:
        role, *metadata = get_args(hint)
        for item in metadata:
            if isinstance(item, FromKeyedServices):
                return role, item.key
        return role, None
    return hint, None


def _bind_type_argument(hint: Any, bindings: Dict[Any, Any]) -> Optional[type]:
    # Type[TEntity] -> the closed entity type
    if bindings and get_origin(hint) is type:
        args = get_args(hint)
        if args and args[0] in bindings:
            return bindings[args[0]]
    return None


async def _dispose(instance: Any) -> None:
    aclose = getattr(instance, "aclose", None)
    if callable(aclose):
        await aclose()
        return
    close = getattr(instance, "close", None)
    if callable(close):
        result = close()
        if inspect.isawaitable(result):
            await result
