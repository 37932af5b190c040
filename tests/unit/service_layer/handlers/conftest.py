"""Pytest fixtures for service layer handler unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from .fakes import bootstrap_test_bus

if TYPE_CHECKING:
    from libris.adapters.clocks import FixedClock
    from libris.service_layer.messagebus import MessageBus

# pylint: disable=redefined-outer-name


@pytest.fixture
def make_test_bus(clock: FixedClock) -> Callable[[], MessageBus]:
    """Factory for a message bus over in-memory repositories.

    Every bus shares the `clock` fixture, so tests can move time with
    ``clock.advance(...)``.
    """

    def _make() -> MessageBus:
        return bootstrap_test_bus(clock)

    return _make
