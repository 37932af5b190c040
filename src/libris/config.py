"""Where LIBRIS finds its database and its migrations.

Only the composition root and the entry points read configuration; the
domain and service layers get everything they need injected.
"""

import os
import sys
from collections.abc import Mapping
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

DB_URL_ENV_VAR = "LIBRIS_DB_URL"
MIGRATIONS_PACKAGE = "libris.adapters.db.alembic"


class DatabaseUrlNotSetError(Exception):
    """``LIBRIS_DB_URL`` is missing or empty."""

    def __init__(self) -> None:
        super().__init__(f"{DB_URL_ENV_VAR} is not set")


def get_db_url(environ: Mapping[str, str] | None = None) -> str:
    """Return the SQLAlchemy URL from ``LIBRIS_DB_URL``.

    Raises:
        DatabaseUrlNotSetError: When the variable is unset or empty.
    """
    env = os.environ if environ is None else environ
    url = env.get(DB_URL_ENV_VAR, "").strip()
    if not url:
        raise DatabaseUrlNotSetError
    return url


def migrations_location() -> str:
    """Filesystem path of the packaged Alembic scripts."""
    return str(files(MIGRATIONS_PACKAGE))


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Alembic `Config` for the packaged migrations, with no ``alembic.ini``.

    `db_url` may be left out for commands that only read the scripts
    (``heads``, ``history``). Alembic's status lines go to `stdout`.
    """
    cfg = Config(stdout=stdout)
    cfg.set_main_option("script_location", migrations_location())
    if db_url is not None:
        cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg
