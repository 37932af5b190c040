"""The ``libris`` command.

The top-level group only sets up logging; the work happens in its groups:

- ``libris db``: forward-only schema management.
- ``libris books``: the catalogue and the shelf.
- ``libris members``: enrolment and standing.
- ``libris loans``: borrowing, returning and the overdue report.
- ``libris fines``: listing and paying fines.

Examples
    $ libris db upgrade
    $ libris books add 9780441013593 Dune "Frank Herbert" --copies 2
    $ libris -v loans borrow 1 42
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from libris import __version__
from libris.logging import (
    LoggingOptions,
    configure_logging,
    effective_level,
    log_startup,
)

from .books import books as books_group
from .db import db as db_group
from .fines import fines as fines_group
from .helpers import parse_log_level
from .loans import loans as loans_group
from .members import members as members_group

logger = logging.getLogger(__name__)


HELP = """LIBRIS command-line interface.

    LIBRIS tracks a library's books, members and loans. It enforces the
    circulation rules (availability, borrowing limits, late fines and
    suspensions) atomically against a SQL database.
    """


def default_log_path() -> Path:
    log_dir = user_log_dir("libris", appauthor=False, ensure_exists=True)
    return Path(log_dir) / "latest.log"


# Logging switches shared by every subcommand. Each maps onto a field of
# LoggingOptions in `libris()` below.
LOGGING_PARAMS = [
    click.Option(
        ["--verbose", "-v", "verbose_count"],
        count=True,
        help="One level more chatty than WARNING per repetition.",
    ),
    click.Option(
        ["--quiet", "-q", "quiet_count"],
        count=True,
        help="One level quieter than WARNING per repetition.",
    ),
    click.Option(
        ["--debug/--no-debug"],
        default=False,
        help="Log everything with timestamps, logger names and source paths.",
    ),
    click.Option(
        ["--log-path"],
        type=click.Path(dir_okay=False, path_type=Path),
        default=default_log_path,
        envvar="LIBRIS_LOG_PATH",
        show_envvar=True,
        help="File the flight recorder writes to.",
    ),
    click.Option(
        ["--flight-recorder/--no-flight-recorder", "flight_recorder"],
        default=True,
        show_envvar=True,
        help=(
            "Buffer recent DEBUG records in memory and write them to --log-path "
            "once a WARNING or ERROR is logged."
        ),
    ),
    click.Option(
        ["--flight-recorder-capacity", "flight_capacity"],
        type=click.IntRange(min=1),
        default=2000,
        hidden=True,
        envvar="LIBRIS_FLIGHT_RECORDER_CAPACITY",
        help="Number of records the flight recorder keeps.",
    ),
    click.Option(
        ["--force-flush/--no-force-flush", "force_flush"],
        default=False,
        show_default=True,
        help="Also write the flight recorder buffer on exit.",
    ),
    click.Option(
        ["-L", "--logger-level", "logger_levels"],
        multiple=True,
        callback=parse_log_level,
        default=("sqlalchemy=WARNING", "alembic=WARNING"),
        envvar="LIBRIS_LOGGER_LEVELS",
        show_default=True,
        show_envvar=True,
        help=(
            "NAME=LEVEL floor for one logger, e.g. -L sqlalchemy=INFO. Repeatable; "
            "LIBRIS_LOGGER_LEVELS takes a comma or space separated list."
        ),
    ),
]


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
        *LOGGING_PARAMS,
    ],
)
@clickx.pass_context
def libris(ctx: click.Context, verbose_count: int, quiet_count: int, **options) -> None:
    """LIBRIS command-line interface."""

    logging_options = LoggingOptions(
        level=effective_level(verbose_count, quiet_count),
        debug_mode=options["debug"],
        color=ctx.color is not False,
        log_path=options["log_path"],
        flight_recorder=options["flight_recorder"],
        flight_capacity=options["flight_capacity"],
        force_flush=options["force_flush"],
        logger_levels=options["logger_levels"],
    )
    handlers = configure_logging(logging_options)
    log_startup(
        logger, app_version=__version__, options=logging_options, handlers=handlers
    )

    ctx.call_on_close(logging.shutdown)


for group in (db_group, books_group, members_group, loans_group, fines_group):
    libris.add_command(group)
