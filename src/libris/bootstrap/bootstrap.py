"""Composition root: turn a database URL into a ready `AppContainer`."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from libris import config
from libris.adapters.clocks import SystemClock
from libris.adapters.db.engine import make_engine
from libris.adapters.unit_of_work import SqlAlchemyUnitOfWork
from libris.interfaces.clock import Clock
from libris.interfaces.unit_of_work import AbstractUnitOfWork
from libris.service_layer.handlers import COMMAND_HANDLERS
from libris.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from libris.service_layer.commands import Command


@dataclass(frozen=True)
class AppContainer:
    """Everything an entry point needs.

    Writes go through `message_bus`; reads use `uow` with the functions in
    `libris.service_layer.queries`. `clock` is the one the handlers see, so
    "now" in a report matches "now" in a command.
    """

    message_bus: MessageBus
    uow: AbstractUnitOfWork
    clock: Clock


def build_write_uow(url: str) -> AbstractUnitOfWork:
    """SQLAlchemy unit of work over a freshly tuned engine for `url`."""
    return SqlAlchemyUnitOfWork(make_engine(url))


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> partial:
    """Bind the entries of `dependencies` that `handler` asks for by name."""
    wanted = inspect.signature(handler).parameters.keys()
    return partial(
        handler, **{name: dep for name, dep in dependencies.items() if name in wanted}
    )


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: Mapping[type[Command], Callable[..., object]],
    clock: Clock | None = None,
) -> MessageBus:
    """Bus whose handlers share `uow` and `clock` (system time by default)."""
    available = {"uow": uow, "clock": clock or SystemClock()}
    routes = {
        cmd_type: inject_dependencies(handler, available)
        for cmd_type, handler in command_handlers.items()
    }
    return MessageBus(uow, command_handlers=routes)


def bootstrap(db_url: str | None = None, clock: Clock | None = None) -> AppContainer:
    """Wire LIBRIS against `db_url`, falling back to ``LIBRIS_DB_URL``.

    Raises:
        DatabaseUrlNotSetError: No URL was given and the variable is unset.
    """
    clock = clock or SystemClock()
    uow = build_write_uow(db_url or config.get_db_url())
    return AppContainer(
        message_bus=build_message_bus(uow, COMMAND_HANDLERS, clock),
        uow=uow,
        clock=clock,
    )
