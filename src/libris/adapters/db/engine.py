"""The one place LIBRIS creates SQLAlchemy engines.

Postgres is used as configured. SQLite connections are tuned on connect:

- foreign keys are enforced, so deleting a book or member cascades to its
  loans and fines;
- WAL journaling lets readers and a writer work side by side;
- a busy timeout makes a second writer wait for the lock instead of failing.

SQLite transactions also start with ``BEGIN IMMEDIATE``. A borrow reads the
copy count and then writes it, and with a deferred ``BEGIN`` two borrowers
could both read the last copy before either takes the write lock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Connection, Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
SQLITE_BUSY_TIMEOUT_MS = 5000

SQLITE_PRAGMAS = (
    "foreign_keys=ON",
    "journal_mode=WAL",
    f"busy_timeout={SQLITE_BUSY_TIMEOUT_MS}",
    "synchronous=NORMAL",
    "temp_store=MEMORY",
)


def is_sqlite(url: str | URL) -> bool:
    """True when `url` (string or `URL`) targets SQLite."""
    return make_url(str(url)).get_backend_name() in SQLITE_NAMES


def _tune_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _apply_pragmas(dbapi_conn: SQLiteConnection, _record) -> None:
        # autocommit at the driver level; _begin_immediate emits BEGIN
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        try:
            for pragma in SQLITE_PRAGMAS:
                cursor.execute(f"PRAGMA {pragma};")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Build an engine for `url`, tuned as described above when it is SQLite.

    `echo` turns on SQLAlchemy's statement logging.
    """
    engine = create_engine(url, echo=echo)
    if is_sqlite(url):
        _tune_sqlite(engine)
    return engine
