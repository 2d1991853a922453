"""pytest plugin providing an isolated container per test.

Loaded automatically through the ``pytest11`` entry point once the package
is installed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ._container import Container


if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture()
def scopelocator_container() -> Iterator[Container]:
    """Create a per-test container.

    The fixture is function-scoped, so registrations are isolated between
    tests unless users override the fixture scope explicitly. The container
    is reset at teardown so shared instances are released.
    """
    container = Container()
    yield container
    container.reset()
