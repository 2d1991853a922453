import unittest
from dataclasses import dataclass
from enum import Enum

import pytest

from scopelocator import (
    DependencyNotFoundError,
    DuplicateDependencyError,
    ScopeStrategy,
    SharedScopeStore,
    TransientScopeStore,
    TypeMismatchError,
    new_scope_store,
)


class Named:
    def __init__(self, name: str):
        self.name = name

    def __eq__(self, other):
        return isinstance(other, Named) and other.name == self.name

    __hash__ = None


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Color(Enum):
    RED = "red"


class TestTransientScopeStore(unittest.TestCase):
    store: TransientScopeStore

    def setUp(self):
        self.store = TransientScopeStore()

    def test_register_different_kinds_of_types(self):
        assert len(self.store) == 0

        self.store.register(Named, lambda: Named("name"))
        self.store.register(Point, lambda: Point(1, 2))
        self.store.register(Color, lambda: Color.RED)

        assert len(self.store) == 3
        assert Named in self.store
        assert Point in self.store
        assert Color in self.store

    def test_resolve_returns_distinct_but_equal_instances(self):
        self.store.register(Named, lambda: Named("name"))

        first = self.store.resolve(Named)
        second = self.store.resolve(Named)

        assert first is not second
        assert first == second

    def test_resolve_invokes_producer_every_time(self):
        calls = []

        def produce():
            calls.append(1)
            return Point(0, 0)

        self.store.register(Point, produce)
        self.store.resolve(Point)
        self.store.resolve(Point)

        assert len(calls) == 2

    def test_resolve_enum_value(self):
        self.store.register(Color, lambda: Color.RED)
        assert self.store.resolve(Color) is Color.RED

    def test_register_twice_raises_and_keeps_first(self):
        self.store.register(Named, lambda: Named("first"))

        with pytest.raises(DuplicateDependencyError) as ctx:
            self.store.register(Named, lambda: Named("second"))

        assert ctx.value.type_name == Named.__qualname__
        assert len(self.store) == 1
        assert self.store.resolve(Named).name == "first"

    def test_resolve_unregistered_type_raises(self):
        class Other: ...

        self.store.register(Named, lambda: Named("name"))

        with pytest.raises(DependencyNotFoundError) as ctx:
            self.store.resolve(Other)

        assert ctx.value.type_name == Other.__qualname__
        assert not isinstance(ctx.value, TypeMismatchError)

    def test_resolve_wrong_type_raises_type_mismatch(self):
        # the producer returns the class itself instead of an instance
        self.store.register(Named, lambda: Named)

        with pytest.raises(TypeMismatchError):
            self.store.resolve(Named)

    def test_reset_clears_registrations(self):
        self.store.register(Named, lambda: Named("name"))
        self.store.reset()

        assert len(self.store) == 0
        with pytest.raises(DependencyNotFoundError):
            self.store.resolve(Named)

        self.store.register(Named, lambda: Named("again"))
        assert self.store.resolve(Named).name == "again"


class TestSharedScopeStore(unittest.TestCase):
    store: SharedScopeStore

    def setUp(self):
        self.store = SharedScopeStore()

    def test_register_does_not_populate_cache(self):
        self.store.register(Named, lambda: Named("name"))
        self.store.register(Point, lambda: Point(1, 2))
        self.store.register(Color, lambda: Color.RED)

        assert len(self.store) == 3
        assert self.store.cached_count == 0

    def test_resolve_returns_produced_instance_and_caches_it(self):
        expected = Named("name")
        self.store.register(Named, lambda: expected)

        dependency = self.store.resolve(Named)

        assert dependency is expected
        assert self.store.cached_count == 1

    def test_resolve_invokes_producer_once(self):
        calls = []

        def produce():
            calls.append(1)
            return Named("name")

        self.store.register(Named, produce)
        first = self.store.resolve(Named)
        second = self.store.resolve(Named)

        assert first is second
        assert len(calls) == 1

    def test_resolve_caches_none(self):
        calls = []

        def produce():
            calls.append(1)

        self.store.register(type(None), produce)
        assert self.store.resolve(None) is None
        assert self.store.resolve(None) is None
        assert len(calls) == 1

    def test_register_twice_raises(self):
        self.store.register(Named, lambda: Named("first"))

        with pytest.raises(DuplicateDependencyError):
            self.store.register(Named, lambda: Named("second"))

        assert self.store.resolve(Named).name == "first"

    def test_resolve_unregistered_type_raises(self):
        class Other: ...

        with pytest.raises(DependencyNotFoundError) as ctx:
            self.store.resolve(Other)
        assert ctx.value.type_name == Other.__qualname__

    def test_type_mismatch_does_not_populate_cache(self):
        self.store.register(Named, lambda: Named)

        with pytest.raises(TypeMismatchError):
            self.store.resolve(Named)

        assert self.store.cached_count == 0

    def test_failing_producer_does_not_populate_cache(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                msg = "not yet"
                raise ConnectionError(msg)
            return Named("ok")

        self.store.register(Named, flaky)

        with pytest.raises(ConnectionError):
            self.store.resolve(Named)
        assert self.store.cached_count == 0

        assert self.store.resolve(Named).name == "ok"
        assert self.store.cached_count == 1

    def test_reset_clears_registrations_and_cache(self):
        self.store.register(Named, lambda: Named("name"))
        first = self.store.resolve(Named)

        self.store.reset()

        assert len(self.store) == 0
        assert self.store.cached_count == 0
        with pytest.raises(DependencyNotFoundError):
            self.store.resolve(Named)

        self.store.register(Named, lambda: Named("name"))
        assert self.store.resolve(Named) is not first


def test_new_scope_store_picks_variant_by_strategy():
    assert isinstance(new_scope_store(ScopeStrategy.TRANSIENT), TransientScopeStore)
    assert isinstance(new_scope_store(ScopeStrategy.SHARED), SharedScopeStore)


def test_new_scope_store_rejects_unknown_strategy():
    with pytest.raises(ValueError, match="Unknown scope strategy"):
        new_scope_store("sometimes")


def test_store_contains_ignores_non_types():
    store = TransientScopeStore()
    assert "Named" not in store
