from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, overload

from ._errors import DependencyNotFoundError, DuplicateDependencyError
from ._factory import Factory, TypeKey


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class ScopeStrategy(Enum):
    TRANSIENT = "transient"
    SHARED = "shared"


@dataclass(frozen=True)
class Scope:
    """Identifier of a scope store inside a container.

    `Scope.DEFAULT` hands out a fresh instance per resolve, `Scope.SHARED`
    caches the first one. `Scope.custom(name, strategy)` adds further
    namespaces with a caller-chosen strategy; custom scopes never compare
    equal to the built-in ones, even when given the same name.
    """

    name: str
    strategy: ScopeStrategy = ScopeStrategy.TRANSIENT
    _builtin: bool = field(default=False, init=False, repr=False)

    DEFAULT: ClassVar[Scope]
    SHARED: ClassVar[Scope]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = f"Scope name must be a non-empty string, got {self.name!r}"
            raise ValueError(msg)
        if not isinstance(self.strategy, ScopeStrategy):
            msg = f"Scope strategy must be a ScopeStrategy, got {self.strategy!r}"
            raise TypeError(msg)

    @classmethod
    def custom(cls, name: str, strategy: ScopeStrategy = ScopeStrategy.TRANSIENT) -> Scope:
        return cls(name, strategy)

    def new_store(self) -> ScopeStore:
        return new_scope_store(self.strategy)

    def __repr__(self) -> str:
        if self._builtin:
            return f"Scope.{self.name.upper()}"
        return f"Scope.custom({self.name!r}, {self.strategy})"


def _builtin_scope(name: str, strategy: ScopeStrategy) -> Scope:
    scope = Scope(name, strategy)
    object.__setattr__(scope, "_builtin", True)
    return scope


Scope.DEFAULT = _builtin_scope("default", ScopeStrategy.TRANSIENT)
Scope.SHARED = _builtin_scope("shared", ScopeStrategy.SHARED)


class ScopeStore(ABC):
    """Registrations of one scope: at most one factory per type.

    Stores do no locking of their own; `Container` serializes access.
    """

    strategy: ClassVar[ScopeStrategy]

    def __init__(self) -> None:
        self._factories: dict[TypeKey[Any], Factory] = {}

    def register(self, tp: type[T] | TypeKey[T], producer: Callable[[], T]) -> None:
        key = TypeKey.of(tp)
        if key in self._factories:
            raise DuplicateDependencyError(key)
        self._factories[key] = Factory(producer)

    @overload
    def resolve(self, tp: type[T]) -> T: ...

    @overload
    def resolve(self, tp: TypeKey[T]) -> T: ...

    @abstractmethod
    def resolve(self, tp: Any) -> Any:
        """Return an instance for the type or raise `DependencyNotFoundError`."""

    def reset(self) -> None:
        self._factories.clear()

    def _factory_for(self, key: TypeKey[Any]) -> Factory:
        factory = self._factories.get(key)
        if factory is None:
            raise DependencyNotFoundError(key)
        return factory

    def __contains__(self, tp: object) -> bool:
        try:
            return TypeKey.of(tp) in self._factories
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        names = ", ".join(key.name for key in self._factories)
        return f"{type(self).__name__}([{names}])"


class TransientScopeStore(ScopeStore):
    """Invokes the factory on every resolve."""

    strategy = ScopeStrategy.TRANSIENT

    def resolve(self, tp: Any) -> Any:
        key = TypeKey.of(tp)
        return self._factory_for(key).invoke(key)


class SharedScopeStore(ScopeStore):
    """Invokes the factory on the first resolve and reuses its result until reset."""

    strategy = ScopeStrategy.SHARED

    def __init__(self) -> None:
        super().__init__()
        self._cache: dict[TypeKey[Any], object] = {}

    def resolve(self, tp: Any) -> Any:
        key = TypeKey.of(tp)
        if key in self._cache:
            return self._cache[key]

        # A failing producer or a type mismatch leaves the cache untouched
        instance = self._factory_for(key).invoke(key)
        self._cache[key] = instance
        return instance

    def reset(self) -> None:
        super().reset()
        self._cache.clear()

    @property
    def cached_count(self) -> int:
        return len(self._cache)


_STORES: dict[ScopeStrategy, type[ScopeStore]] = {
    ScopeStrategy.TRANSIENT: TransientScopeStore,
    ScopeStrategy.SHARED: SharedScopeStore,
}


def new_scope_store(strategy: ScopeStrategy) -> ScopeStore:
    try:
        store_cls = _STORES[strategy]
    except KeyError:
        msg = f"Unknown scope strategy: {strategy!r}"
        raise ValueError(msg) from None

    logger.debug("Creating %s for strategy %s", store_cls.__name__, strategy.value)
    return store_cls()
