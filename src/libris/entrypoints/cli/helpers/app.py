"""Access to the wired application from inside a command.

Commands call `get_app()` instead of bootstrapping themselves, so the app is
built at most once per invocation and tests can hand in their own container
through ``CliRunner.invoke(libris, args, obj=container)``.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

import click

from libris.bootstrap import AppContainer, bootstrap
from libris.config import DatabaseUrlNotSetError
from libris.domain.errors import LibraryError

from .messages import error

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

APP_META_KEY = "libris.app"  # pragma: no mutate

MISSING_DB_URL_MSG = (
    "LIBRIS_DB_URL is not set. Point it at your database, e.g. "
    "export LIBRIS_DB_URL='sqlite:///library.db', then run 'libris db upgrade'."
)


def get_app() -> AppContainer:
    """Return the application container for the current invocation."""
    ctx = click.get_current_context()
    if (app := ctx.find_object(AppContainer)) is not None:
        return app
    if APP_META_KEY not in ctx.meta:
        try:
            ctx.meta[APP_META_KEY] = bootstrap()
        except DatabaseUrlNotSetError as e:
            raise click.ClickException(MISSING_DB_URL_MSG) from e
    return ctx.meta[APP_META_KEY]


def library_errors(fn: Callable[P, R]) -> Callable[P, R]:
    """Turn a `LibraryError` into a red error line and exit status 1.

    Anything else propagates so Click shows the traceback.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return fn(*args, **kwargs)
        except LibraryError as e:
            error(str(e))
            raise click.exceptions.Exit(1) from e

    return wrapper
