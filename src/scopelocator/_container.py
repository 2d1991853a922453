from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import DependencyNotFoundError, TypeMismatchError
from ._factory import TypeKey
from ._scope import Scope


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._scope import ScopeStore

T = TypeVar("T")


class Container:
    """Service locator routing registrations across scopes.

    - register zero-argument producers per type and scope
    - resolve by type across every known scope
    - scopes: transient (`Scope.DEFAULT`) / shared (`Scope.SHARED`) / custom.

    A single reentrant lock guards everything, producers included, so a
    producer may resolve other dependencies from the same container while a
    slow producer blocks every other caller.
    """

    def __init__(self) -> None:
        # Insertion order is the resolution precedence
        self._stores: dict[Scope, ScopeStore] = {}
        self._lock = threading.RLock()

    def register(
        self,
        tp: type[T],
        producer: Callable[[], T],
        *,
        scope: Scope = Scope.DEFAULT,
    ) -> Container:
        """Register `producer` for `tp` in `scope`.

        Example:
          container.register(Counter, lambda: Counter(0))
          container.register(Logger, Logger, scope=Scope.SHARED)

        Raises `DuplicateDependencyError` when the scope already holds `tp`;
        the existing registration is kept.
        """
        if not isinstance(scope, Scope):
            msg = f"Expected a Scope, got {scope!r}"
            raise TypeError(msg)

        key = TypeKey.of(tp)
        with self._lock:
            store = self._stores.get(scope)
            if store is None:
                store = scope.new_store()
                store.register(key, producer)
                # Only keep the store once the first registration succeeded
                self._stores[scope] = store
            else:
                store.register(key, producer)

        logger.debug("Registered %s in %r", key.name, scope)
        return self

    @overload
    def resolve(self, tp: type[T]) -> T: ...

    @overload
    def resolve(self, tp: Any) -> Any: ...

    def resolve(self, tp: Any) -> Any:
        """Resolve `tp` to an instance.

        Scopes are asked in the order they were first registered to and the
        first one that produces an instance wins. Scopes without a factory for
        `tp` are skipped, as are scopes whose producer raises or produces an
        instance of the wrong type. When no scope succeeds, the first such
        failure is raised, else `DependencyNotFoundError`.
        """
        key = TypeKey.of(tp)
        failure: Exception | None = None

        with self._lock:
            for scope, store in tuple(self._stores.items()):
                if key not in store:
                    continue
                try:
                    return store.resolve(key)
                except TypeMismatchError as e:
                    if e.key != key:
                        # raised by a nested resolve inside the producer
                        raise
                    logger.debug("Skipping %r for %s: %s", scope, key.name, e)
                    if failure is None:
                        failure = e
                except Exception as e:  # noqa: BLE001
                    logger.debug("Producer in %r failed for %s: %r", scope, key.name, e)
                    if failure is None:
                        failure = e

        if failure is not None:
            raise failure
        raise DependencyNotFoundError(key)

    def reset(self) -> None:
        """Clear every scope store. Stores stay known, keeping their precedence."""
        with self._lock:
            for store in self._stores.values():
                store.reset()

        logger.debug("Reset %d scope store(s)", len(self._stores))

    @property
    def scopes(self) -> tuple[Scope, ...]:
        with self._lock:
            return tuple(self._stores)

    def __contains__(self, tp: object) -> bool:
        with self._lock:
            return any(tp in store for store in self._stores.values())
