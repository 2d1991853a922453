"""Minimal service locator.

This package provides a lightweight service locator for Python: register a
zero-argument producer per type, then resolve instances of that type later,
with per-scope caching strategies.

Exports:
- `Container`: Locator routing registrations and resolutions across scopes.
- `Scope`: Scope identifiers (`Scope.DEFAULT`, `Scope.SHARED`, `Scope.custom(...)`).
- `ScopeStrategy`: Enum selecting whether a scope caches instances.
- `TransientScopeStore` / `SharedScopeStore`: The per-scope stores, usable on their own.
- `DuplicateDependencyError`, `DependencyNotFoundError`, `TypeMismatchError`:
  Errors raised on registration and resolution, all `LocatorError` subclasses.
"""

from ._container import Container
from ._errors import DependencyNotFoundError, DuplicateDependencyError, LocatorError, TypeMismatchError
from ._factory import Factory, TypeKey
from ._scope import Scope, ScopeStore, ScopeStrategy, SharedScopeStore, TransientScopeStore, new_scope_store


__all__ = [
    "Container",
    "DependencyNotFoundError",
    "DuplicateDependencyError",
    "Factory",
    "LocatorError",
    "Scope",
    "ScopeStore",
    "ScopeStrategy",
    "SharedScopeStore",
    "TransientScopeStore",
    "TypeKey",
    "TypeMismatchError",
    "new_scope_store",
]
