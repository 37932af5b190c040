"""Repository contracts for books, members, loans and fines.

Repositories are bound to a single unit of work: every read and write they
perform happens inside the unit's transaction. Implementations raise
`ConflictError` when a storage constraint rejects a write and
`StoreUnavailableError` when the store cannot be reached.

Status fields are written only through the dedicated ``set_status`` /
``mark_*`` methods; the ``update_details`` methods have no status parameter.
"""

from __future__ import annotations

import abc
from datetime import datetime

from libris.domain.model import (
    Book,
    BookStatus,
    Fine,
    Loan,
    Member,
    MemberStatus,
    NewBook,
    NewFine,
    NewLoan,
    NewMember,
    OverdueLoan,
)

# pylint: disable=too-many-arguments


class BookRepository(abc.ABC):
    """Persistence port for books."""

    @abc.abstractmethod
    def get(self, book_id: int, *, for_update: bool = False) -> Book | None:
        """Return the book with id `book_id`, or None if absent.

        Args:
            book_id: Identity of the book.
            for_update: Lock the row for the rest of the transaction where the
                backend supports row locks.
        """

    @abc.abstractmethod
    def list_all(self, *, available_only: bool = False) -> list[Book]:
        """Return all books ordered by id, optionally only lendable ones."""

    @abc.abstractmethod
    def add(self, book: NewBook) -> Book:
        """Insert a new book with its `NewBook.initial_status` and return it.

        Raises:
            ConflictError: If the ISBN is already catalogued.
        """

    @abc.abstractmethod
    def update_details(
        self,
        book_id: int,
        *,
        isbn: str,
        title: str,
        author: str,
        category: str | None,
        total_copies: int,
        available_copies: int,
    ) -> Book:
        """Overwrite the descriptive fields and copy counts of a book."""

    @abc.abstractmethod
    def adjust_available_copies(self, book_id: int, delta: int) -> bool:
        """Atomically add `delta` (+1 or -1) to the available copy count.

        The change is guarded in the store so the count never leaves the
        range ``0..total_copies``.

        Returns:
            True if the row was changed, False if the guard rejected it.
        """

    @abc.abstractmethod
    def set_status(self, book_id: int, status: BookStatus) -> None:
        """Write the book status. Reserved for the book lifecycle manager."""

    @abc.abstractmethod
    def remove(self, book_id: int) -> None:
        """Delete a book; its loans go with it."""


class MemberRepository(abc.ABC):
    """Persistence port for members."""

    @abc.abstractmethod
    def get(self, member_id: int) -> Member | None:
        """Return the member with id `member_id`, or None if absent."""

    @abc.abstractmethod
    def list_all(self) -> list[Member]:
        """Return all members ordered by id."""

    @abc.abstractmethod
    def add(self, member: NewMember) -> Member:
        """Insert a new member with status ``active`` and return it.

        Raises:
            ConflictError: If the email or membership number is taken.
        """

    @abc.abstractmethod
    def update_details(self, member_id: int, *, name: str, email: str) -> Member:
        """Overwrite the contact fields of a member."""

    @abc.abstractmethod
    def set_status(self, member_id: int, status: MemberStatus) -> None:
        """Write the member status. Reserved for the eligibility manager."""

    @abc.abstractmethod
    def remove(self, member_id: int) -> None:
        """Delete a member; their loans and fines go with them."""


class LoanRepository(abc.ABC):
    """Persistence port for loans."""

    @abc.abstractmethod
    def get(self, loan_id: int) -> Loan | None:
        """Return the loan with id `loan_id`, or None if absent."""

    @abc.abstractmethod
    def list_all(self, *, open_only: bool = False) -> list[Loan]:
        """Return all loans ordered by id, optionally only unreturned ones."""

    @abc.abstractmethod
    def add(self, loan: NewLoan) -> Loan:
        """Insert a new ``active`` loan and return it."""

    @abc.abstractmethod
    def mark_returned(self, loan_id: int, returned_at: datetime) -> Loan:
        """Close the loan: set `returned_at` and status ``returned``."""

    @abc.abstractmethod
    def mark_overdue(self, now: datetime) -> int:
        """Relabel every open ``active`` loan due before `now` as ``overdue``.

        Returns:
            The number of loans relabelled.
        """

    @abc.abstractmethod
    def list_overdue(self) -> list[OverdueLoan]:
        """Return every loan currently labelled ``overdue``, ordered by id."""

    @abc.abstractmethod
    def list_open_for_member(self, member_id: int) -> list[Loan]:
        """Return the member's loans that have not been returned."""

    @abc.abstractmethod
    def count_open(self, member_id: int) -> int:
        """Count the member's loans that have not been returned."""

    @abc.abstractmethod
    def count_past_due(self, member_id: int, now: datetime) -> int:
        """Count the member's open loans whose due date is before `now`."""


class FineRepository(abc.ABC):
    """Persistence port for fines."""

    @abc.abstractmethod
    def get(self, fine_id: int) -> Fine | None:
        """Return the fine with id `fine_id`, or None if absent."""

    @abc.abstractmethod
    def list_all(self, *, unpaid_only: bool = False) -> list[Fine]:
        """Return all fines ordered by id, optionally only unpaid ones."""

    @abc.abstractmethod
    def add(self, fine: NewFine) -> Fine:
        """Insert an unpaid fine and return it."""

    @abc.abstractmethod
    def mark_paid(self, fine_id: int, paid_at: datetime) -> Fine:
        """Set `paid_at` on the fine and return it."""

    @abc.abstractmethod
    def list_for_member(self, member_id: int) -> list[Fine]:
        """Return all fines of a member, ordered by id."""

    @abc.abstractmethod
    def count_unpaid(self, member_id: int) -> int:
        """Count the member's fines with no `paid_at`."""
