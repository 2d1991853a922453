from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from ._factory import TypeKey


class LocatorError(RuntimeError):
    """Base class for every error raised by the locator.

    Carries the `TypeKey` that caused the failure and its readable name.
    """

    def __init__(self, key: TypeKey, msg: str) -> None:
        super().__init__(msg)
        self.key = key
        self.type_name = key.name

    def __reduce__(self) -> tuple[object, ...]:
        # args only hold the message; restore attributes without re-running __init__
        return (_rebuild, (type(self), self.args, self.__dict__))


class DuplicateDependencyError(LocatorError):
    """A scope store already holds a factory for the type."""

    def __init__(self, key: TypeKey) -> None:
        super().__init__(key, f"Duplicated dependency found for type `{key.name}`.")


class DependencyNotFoundError(LocatorError):
    """No scope store could produce an instance of the type."""

    def __init__(self, key: TypeKey, msg: str | None = None) -> None:
        if msg is None:
            msg = f"Dependency not found for type `{key.name}`."
        super().__init__(key, msg)


class TypeMismatchError(DependencyNotFoundError):
    """A factory ran but produced an instance of the wrong type.

    Subclasses `DependencyNotFoundError`, so handlers written for a missing
    dependency also catch it.
    """

    def __init__(self, key: TypeKey, actual: object) -> None:
        self.actual_type_name = _describe(type(actual))
        super().__init__(
            key,
            f"Dependency for type `{key.name}` produced an instance of `{self.actual_type_name}`.",
        )


def _rebuild(cls: type[LocatorError], args: tuple[object, ...], state: dict[str, object]) -> LocatorError:
    err = cls.__new__(cls, *args)
    err.args = args
    err.__dict__.update(state)
    return err


def _describe(tp: object) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)
