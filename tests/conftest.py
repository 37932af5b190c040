"""Global pytest fixtures and default marks for LIBRIS."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
    "tests.fixtures.datagen",
]

TESTS_ROOT = Path(__file__).parent.resolve()

# Top-level test directory -> mark added to every test collected under it.
DEFAULT_MARKS = {
    "unit": pytest.mark.unit,
    "integration": pytest.mark.integration,
    "functional": pytest.mark.functional,
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each test after the top-level directory it lives in.

    Explicit marks win: a test already carrying the directory's mark is left
    alone.
    """
    for item in items:
        try:
            top = item.path.resolve().relative_to(TESTS_ROOT).parts[0]
        except (ValueError, IndexError):
            continue
        mark = DEFAULT_MARKS.get(top)
        if mark is None:
            continue
        if not any(m.name == mark.name for m in item.iter_markers()):
            item.add_marker(mark)


# Helper to route to an existing engine fixture by name
@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """Indirection fixture to parametrize over engine-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize(
            "engine", ["postgres_engine", "sqlite_engine_file"], indirect=True
        )
        def test_something(engine): ...
        ```
    """
    return request.getfixturevalue(request.param)
