"""Logging setup for the ``libris`` command.

Two sinks hang off the root logger:

* a Rich console handler on stderr, filtered by ``-v``/``-q``;
* an optional "flight recorder", a `MemoryHandler` that keeps the last few
  thousand records at every level and writes them to a file only once a
  WARNING or worse shows up, so a failed borrow can be diagnosed after the
  fact without running everything at DEBUG.

Modules under `libris` only call ``logging.getLogger(__name__)``. Handlers
are attached by `configure_logging`, which the CLI calls once per run.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "libris"
DEFAULT_FLIGHT_CAPACITY = 2000

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
FLIGHT_RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` so console lines show where they came from.

    ``sqlalchemy.engine.Engine`` becomes ``[sqlalchemy]``; records from
    `libris` itself get an empty prefix. Always lets the record through.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.partition(".")[0]
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Rich handler for stderr.

    In `debug_mode` the handler passes everything and shows timestamps,
    logger names and clickable source paths; otherwise it honours `level`
    and tags third-party records. `color` follows click-extra's ``--color``.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = DEFAULT_FLIGHT_CAPACITY,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Buffer up to `capacity` records and dump them to `path` on trouble.

    The buffer is written out when a record at `flush_level` arrives, when
    it fills up, and, with `flush_on_close`, when the handler is closed.
    `path` is truncated when the handler is created.
    """
    sink = logging.FileHandler(path, mode="w", encoding="utf-8")
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))
    return MemoryHandler(
        capacity,
        flushLevel=flush_level,
        target=sink,
        flushOnClose=flush_on_close,
    )


@dataclass(frozen=True)
class LoggingOptions:
    """Logging switches after the CLI has parsed them."""

    level: int = logging.WARNING
    debug_mode: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder: bool = False
    flight_capacity: int = DEFAULT_FLIGHT_CAPACITY
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def records_to_file(self) -> bool:
        return self.flight_recorder and self.log_path is not None


def effective_level(verbose_count: int, quiet_count: int) -> int:
    """WARNING, moved one level down per ``-v`` and up per ``-q``.

    The result never leaves the DEBUG..CRITICAL range.
    """
    steps = quiet_count - verbose_count
    return min(logging.CRITICAL, max(logging.DEBUG, logging.WARNING + 10 * steps))


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Replace the root logger's handlers according to `options`.

    The root logger itself is opened to DEBUG and each handler applies its
    own threshold. ``-L NAME=LEVEL`` floors are set afterwards, on the named
    loggers, so they limit the console and the flight recorder alike.

    Returns:
        The handlers now attached to the root logger.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(options.level, options.debug_mode, options.color)
    ]
    if options.records_to_file:
        handlers.append(
            config_flight_recorder(
                options.log_path,  # type: ignore[arg-type]
                capacity=options.flight_capacity,
                flush_on_close=options.force_flush,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def log_startup(
    logger: Logger,
    *,
    app_version: str,
    options: LoggingOptions,
    handlers: list[logging.Handler],
) -> None:
    """One INFO summary line, then the environment at DEBUG."""
    logger.info(
        "LIBRIS %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(options.level),
        "ON" if options.flight_recorder else "OFF",
    )

    diagnostics = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "Alembic": alembic.__version__,
        "SQLAlchemy": sqlalchemy.__version__,
        "Handlers": [type(h).__name__ for h in handlers],
    }
    for label, value in diagnostics.items():
        logger.debug("%s: %s", label, value)

    if options.flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path or "<none>",
            options.flight_capacity,
            options.force_flush,
        )
    if options.logger_levels:
        overrides = {
            name: logging.getLevelName(level)
            for name, level in options.logger_levels.items()
        }
        logger.debug("Per-logger overrides: %s", overrides)
