"""Fake implementations for testing service layer handlers."""

from __future__ import annotations

from libris.adapters.clocks import FixedClock
from libris.adapters.unit_of_work import InMemoryUnitOfWork
from libris.bootstrap.bootstrap import build_message_bus
from libris.interfaces.clock import Clock
from libris.service_layer.handlers import COMMAND_HANDLERS
from libris.service_layer.messagebus import MessageBus

from tests.fixtures.datagen import T0


class FakeUoW(InMemoryUnitOfWork):
    """In-memory unit of work that records whether it was committed."""

    def __init__(self):
        super().__init__()
        self.committed = False

    def commit(self):
        super().commit()
        self.committed = True


def bootstrap_test_bus(clock: Clock | None = None) -> MessageBus:
    """Bootstrap a message bus over a `FakeUoW` and a fixed clock."""
    return build_message_bus(
        uow=FakeUoW(),
        command_handlers=COMMAND_HANDLERS,
        clock=clock or FixedClock(T0),
    )
