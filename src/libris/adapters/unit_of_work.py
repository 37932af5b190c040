"""Units of work for LIBRIS.

`SqlAlchemyUnitOfWork` opens one `Connection` per ``with`` block and binds the
four SQLAlchemy repositories to it. `InMemoryUnitOfWork` runs the in-memory
repositories over a shared `InMemoryLibraryData` and restores a snapshot on
rollback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from libris.adapters.repositories.memory import (
    InMemoryBookRepository,
    InMemoryFineRepository,
    InMemoryLibraryData,
    InMemoryLoanRepository,
    InMemoryMemberRepository,
)
from libris.adapters.repositories.sqlalchemy_repositories import (
    SqlAlchemyBookRepository,
    SqlAlchemyFineRepository,
    SqlAlchemyLoanRepository,
    SqlAlchemyMemberRepository,
)
from libris.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        self.books = SqlAlchemyBookRepository(self.connection)
        self.members = SqlAlchemyMemberRepository(self.connection)
        self.loans = SqlAlchemyLoanRepository(self.connection)
        self.fines = SqlAlchemyFineRepository(self.connection)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.connection.close()

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of Work over in-memory repositories.

    Entering takes a snapshot of the shared data; `rollback` restores it and
    `commit` moves the savepoint forward. Not suitable for production use.
    """

    def __init__(self, data: InMemoryLibraryData | None = None):
        self.data = data if data is not None else InMemoryLibraryData()
        self.books = InMemoryBookRepository(self.data)
        self.members = InMemoryMemberRepository(self.data)
        self.loans = InMemoryLoanRepository(self.data)
        self.fines = InMemoryFineRepository(self.data)
        self._saved = self.data.snapshot()

    def __enter__(self):
        self._saved = self.data.snapshot()
        return super().__enter__()

    def commit(self):
        self._saved = self.data.snapshot()

    def rollback(self):
        self.data.restore(self._saved)
