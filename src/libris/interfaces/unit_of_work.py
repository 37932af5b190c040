"""Unit of Work interface for LIBRIS.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing the four repositories and abstract commit/rollback methods. Every
borrow and return runs inside exactly one unit.
"""

from __future__ import annotations

import abc

from .repositories import (
    BookRepository,
    FineRepository,
    LoanRepository,
    MemberRepository,
)


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    books: BookRepository
    members: MemberRepository
    loans: LoanRepository
    fines: FineRepository

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit. Anything committed before
        exit is unaffected.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
