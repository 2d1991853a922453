from __future__ import annotations

import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Generic, TypeVar, Union, cast, get_args, get_origin

from ._errors import TypeMismatchError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


@dataclass(frozen=True)
class TypeKey(Generic[T]):
    """Hashable registry key wrapping a type object.

    Classes, protocols and `typing` aliases (`list[int]`, `int | None`, ...)
    are keyed by identity/equality of the type object, never by name.
    """

    token: Any

    @classmethod
    def of(cls, tp: Any) -> TypeKey[Any]:
        if isinstance(tp, TypeKey):
            return tp
        if tp is None:
            tp = type(None)

        if not (inspect.isclass(tp) or get_origin(tp) is not None or tp is Any):
            msg = f"Expected a type to key registrations by, got {tp!r}"
            raise TypeError(msg)

        try:
            hash(tp)
        except TypeError as e:
            msg = f"Type {tp!r} is not hashable and cannot be used as a registry key"
            raise TypeError(msg) from e

        return cls(tp)

    @property
    def name(self) -> str:
        if inspect.isclass(self.token) and get_origin(self.token) is None:
            return self.token.__qualname__
        return repr(self.token)

    def accepts(self, instance: object) -> bool:
        """Runtime check that `instance` can be handed out for this key."""
        return _matches(instance, self.token)

    def __str__(self) -> str:
        return self.name


class Factory:
    """Type-erased wrapper around a zero-argument producer.

    The produced value is only checked against the requested type when the
    factory is invoked.
    """

    __slots__ = ("_producer",)

    def __init__(self, producer: Callable[[], object]) -> None:
        if not callable(producer):
            msg = f"Producer must be callable, got {type(producer).__name__}"
            raise TypeError(msg)
        self._producer = producer

    def __call__(self, key: TypeKey[T]) -> T:
        return self.invoke(key)

    def invoke(self, key: TypeKey[T]) -> T:
        # Producer failures propagate unchanged
        instance = self._producer()
        if not key.accepts(instance):
            raise TypeMismatchError(key, instance)
        return cast("T", instance)

    def __repr__(self) -> str:
        return f"Factory({self._producer!r})"


def _matches(instance: object, tp: Any) -> bool:  # noqa: PLR0911
    if tp is Any or tp is object:
        return True

    origin = get_origin(tp)
    if origin is not None:
        if origin is Union or origin is types.UnionType:
            return any(_matches(instance, arg) for arg in get_args(tp))
        if origin is Annotated:
            return _matches(instance, get_args(tp)[0])
        if inspect.isclass(origin):
            # Parameters are erased at runtime; only the origin can be checked.
            return _matches(instance, origin)
        return True

    if _is_protocol(tp):
        if tp in type(instance).__mro__:
            return True
        if _is_runtime_checkable_protocol(tp):
            return isinstance(instance, tp)
        return all(hasattr(instance, name) for name in _protocol_members(tp))

    return isinstance(instance, tp)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: object) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: object) -> bool:
        return inspect.isclass(tp) and bool(getattr(tp, "_is_protocol", False))


def _is_runtime_checkable_protocol(tp: type) -> bool:
    try:
        isinstance(None, tp)
    except TypeError:
        return False
    else:
        return True


def _protocol_members(proto: type) -> set[str]:
    members: set[str] = set()
    for base in proto.__mro__:
        if base in (object, typing.Protocol, typing.Generic) or not getattr(base, "_is_protocol", False):
            continue

        members.update(name for name in base.__dict__ if not name.startswith("_"))
        try:
            annotations = getattr(base, "__annotations__", {})
        except NameError as exc:
            logger.warning("'%s' name error retrieving %s annotations", exc.name, base.__qualname__)
            annotations = {}
        members.update(name for name in annotations if not name.startswith("_"))

    return members
