"""Command dispatch.

Every write in LIBRIS enters as a `Command` and leaves through exactly one
handler. The bus owns nothing but the routing table and the logging around
each call; transactions belong to the handlers.
"""

import logging
from collections.abc import Callable, Mapping

from libris.domain.errors import LibraryError
from libris.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command

logger = logging.getLogger(__name__)

type Handler = Callable[..., object]

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """The routing table has no entry for this command type."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


def handler_name(handler: Handler) -> str:
    """Name used for `handler` in log lines; sees through `functools.partial`."""
    target = getattr(handler, "func", handler)
    return getattr(target, "__name__", repr(handler))


class MessageBus:
    """Route commands to their handlers and return the handlers' results.

    Handlers take the command as their only positional argument; `uow` and
    `clock` are bound beforehand by `libris.bootstrap`. A `LibraryError`
    is a refusal the caller reports to the user, so it is logged at INFO.
    Any other exception is a bug and is logged with its traceback. Both are
    re-raised unchanged.

    `uow` is kept on the bus so entry points can run read-only queries
    against the same store the handlers write to.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: Mapping[type[Command], Handler],
    ) -> None:
        self.uow = uow
        self._routes = dict(command_handlers)

    def _route(self, cmd: Command) -> Handler:
        try:
            return self._routes[type(cmd)]
        except KeyError:
            logger.error("No handler found for command %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd) from None

    def handle(self, cmd: Command) -> object:
        """Run the handler registered for ``type(cmd)``.

        Raises:
            NoHandlerForCommand: Nothing is registered for the command type.
        """
        handler = self._route(cmd)
        name = handler_name(handler)
        logger.debug("Handling command %s with handler %s", cmd, name)
        try:
            return handler(cmd)
        except LibraryError as refusal:
            logger.info("Command %s rejected: %s", type(cmd).__name__, refusal)
            raise
        except Exception:
            logger.exception("Exception handling command %s with handler %s", cmd, name)
            raise
