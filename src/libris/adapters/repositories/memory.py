"""In-memory repositories for LIBRIS.

These adapters emulate the relational store closely enough for service-layer
tests: identities are assigned sequentially, unique and foreign-key
constraints raise `ConflictError`, deletes cascade, and the copy-count guard
behaves like the SQL one.

This implementation is intended for testing and development purposes only.
It does not persist data and is not suitable for production use.
"""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field, replace
from datetime import datetime

from libris.domain.errors import ConflictError, NotFoundError
from libris.domain.model import (
    Book,
    BookStatus,
    Fine,
    Loan,
    LoanStatus,
    Member,
    MemberStatus,
    NewBook,
    NewFine,
    NewLoan,
    NewMember,
    OverdueLoan,
)
from libris.interfaces.repositories import (
    BookRepository,
    FineRepository,
    LoanRepository,
    MemberRepository,
)

# pylint: disable=too-many-arguments

DUPLICATE_MSG = "A record with this value already exists"
BAD_REFERENCE_MSG = "Invalid reference to related resource"


@dataclass(slots=True)
class InMemoryLibraryData:
    """Shared backing store for the in-memory repositories.

    A single instance is passed to all four repositories so cascades and
    cross-table lookups see the same rows. Rows are immutable snapshots, so a
    shallow copy of the mappings is a consistent savepoint.
    """

    books: dict[int, Book] = field(default_factory=dict)
    members: dict[int, Member] = field(default_factory=dict)
    loans: dict[int, Loan] = field(default_factory=dict)
    fines: dict[int, Fine] = field(default_factory=dict)
    ids: dict[str, itertools.count] = field(
        default_factory=lambda: {
            name: itertools.count(1) for name in ("books", "members", "loans", "fines")
        }
    )

    def next_id(self, table: str) -> int:
        """Return the next identity for `table`."""
        return next(self.ids[table])

    def snapshot(self) -> InMemoryLibraryData:
        """Return a copy that can later be restored with `restore`."""
        return InMemoryLibraryData(
            books=dict(self.books),
            members=dict(self.members),
            loans=dict(self.loans),
            fines=dict(self.fines),
            ids=copy.deepcopy(self.ids),
        )

    def restore(self, saved: InMemoryLibraryData) -> None:
        """Reset every table to the state captured in `saved`."""
        self.books = dict(saved.books)
        self.members = dict(saved.members)
        self.loans = dict(saved.loans)
        self.fines = dict(saved.fines)
        self.ids = copy.deepcopy(saved.ids)


class _InMemoryRepository:
    def __init__(self, data: InMemoryLibraryData) -> None:
        self._data = data


class InMemoryBookRepository(_InMemoryRepository, BookRepository):
    """In-memory books table."""

    def get(self, book_id: int, *, for_update: bool = False) -> Book | None:
        return self._data.books.get(book_id)

    def list_all(self, *, available_only: bool = False) -> list[Book]:
        rows = sorted(self._data.books.values(), key=lambda b: b.id)
        if available_only:
            return [b for b in rows if b.is_lendable]
        return rows

    def _check_unique_isbn(self, isbn: str, book_id: int | None = None) -> None:
        if any(b.isbn == isbn and b.id != book_id for b in self._data.books.values()):
            raise ConflictError(DUPLICATE_MSG, detail=f"UNIQUE books.isbn: {isbn}")

    def add(self, book: NewBook) -> Book:
        self._check_unique_isbn(book.isbn)
        row = Book(
            id=self._data.next_id("books"),
            isbn=book.isbn,
            title=book.title,
            author=book.author,
            category=book.category,
            status=book.initial_status,
            total_copies=book.total_copies,
            available_copies=book.initial_available,
        )
        self._data.books[row.id] = row
        return row

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
        if (current := self._data.books.get(book_id)) is None:
            raise NotFoundError("Book", book_id)
        self._check_unique_isbn(isbn, book_id)
        row = replace(
            current,
            isbn=isbn,
            title=title,
            author=author,
            category=category,
            total_copies=total_copies,
            available_copies=available_copies,
        )
        self._data.books[book_id] = row
        return row

    def adjust_available_copies(self, book_id: int, delta: int) -> bool:
        if (current := self._data.books.get(book_id)) is None:
            return False
        new_count = current.available_copies + delta
        if not 0 <= new_count <= current.total_copies:
            return False
        self._data.books[book_id] = replace(current, available_copies=new_count)
        return True

    def set_status(self, book_id: int, status: BookStatus) -> None:
        if (current := self._data.books.get(book_id)) is not None:
            self._data.books[book_id] = replace(current, status=status)

    def remove(self, book_id: int) -> None:
        self._data.books.pop(book_id, None)
        doomed = {
            lid for lid, loan in self._data.loans.items() if loan.book_id == book_id
        }
        _cascade_loans(self._data, doomed)


class InMemoryMemberRepository(_InMemoryRepository, MemberRepository):
    """In-memory members table."""

    def get(self, member_id: int) -> Member | None:
        return self._data.members.get(member_id)

    def list_all(self) -> list[Member]:
        return sorted(self._data.members.values(), key=lambda m: m.id)

    def _check_unique(
        self, email: str, membership_number: str | None, member_id: int | None = None
    ) -> None:
        for other in self._data.members.values():
            if other.id == member_id:
                continue
            if other.email == email:
                raise ConflictError(
                    DUPLICATE_MSG, detail=f"UNIQUE members.email: {email}"
                )
            if membership_number is not None and (
                other.membership_number == membership_number
            ):
                raise ConflictError(
                    DUPLICATE_MSG,
                    detail=f"UNIQUE members.membership_number: {membership_number}",
                )

    def add(self, member: NewMember) -> Member:
        self._check_unique(member.email, member.membership_number)
        row = Member(
            id=self._data.next_id("members"),
            name=member.name,
            email=member.email,
            membership_number=member.membership_number,
            status=MemberStatus.ACTIVE,
        )
        self._data.members[row.id] = row
        return row

    def update_details(self, member_id: int, *, name: str, email: str) -> Member:
        if (current := self._data.members.get(member_id)) is None:
            raise NotFoundError("Member", member_id)
        self._check_unique(email, None, member_id)
        row = replace(current, name=name, email=email)
        self._data.members[member_id] = row
        return row

    def set_status(self, member_id: int, status: MemberStatus) -> None:
        if (current := self._data.members.get(member_id)) is not None:
            self._data.members[member_id] = replace(current, status=status)

    def remove(self, member_id: int) -> None:
        self._data.members.pop(member_id, None)
        doomed = {
            lid for lid, loan in self._data.loans.items() if loan.member_id == member_id
        }
        _cascade_loans(self._data, doomed)
        owed = [f.id for f in self._data.fines.values() if f.member_id == member_id]
        for fid in owed:
            del self._data.fines[fid]


class InMemoryLoanRepository(_InMemoryRepository, LoanRepository):
    """In-memory loans table."""

    def get(self, loan_id: int) -> Loan | None:
        return self._data.loans.get(loan_id)

    def list_all(self, *, open_only: bool = False) -> list[Loan]:
        rows = sorted(self._data.loans.values(), key=lambda lo: lo.id)
        if open_only:
            return [loan for loan in rows if loan.is_open]
        return rows

    def add(self, loan: NewLoan) -> Loan:
        if (
            loan.book_id not in self._data.books
            or loan.member_id not in self._data.members
        ):
            raise ConflictError(BAD_REFERENCE_MSG, detail="FOREIGN KEY loans")
        row = Loan(
            id=self._data.next_id("loans"),
            book_id=loan.book_id,
            member_id=loan.member_id,
            borrowed_at=loan.borrowed_at,
            due_date=loan.due_date,
            status=LoanStatus.ACTIVE,
        )
        self._data.loans[row.id] = row
        return row

    def mark_returned(self, loan_id: int, returned_at: datetime) -> Loan:
        if (current := self._data.loans.get(loan_id)) is None:
            raise NotFoundError("Loan", loan_id)
        row = replace(current, returned_at=returned_at, status=LoanStatus.RETURNED)
        self._data.loans[loan_id] = row
        return row

    def mark_overdue(self, now: datetime) -> int:
        relabelled = 0
        for loan_id, loan in list(self._data.loans.items()):
            if loan.status is LoanStatus.ACTIVE and loan.is_past_due(now):
                self._data.loans[loan_id] = replace(loan, status=LoanStatus.OVERDUE)
                relabelled += 1
        return relabelled

    def list_overdue(self) -> list[OverdueLoan]:
        return [
            OverdueLoan(
                loan=loan,
                book_title=self._data.books[loan.book_id].title,
                member_name=self._data.members[loan.member_id].name,
            )
            for loan in sorted(self._data.loans.values(), key=lambda lo: lo.id)
            if loan.status is LoanStatus.OVERDUE
        ]

    def list_open_for_member(self, member_id: int) -> list[Loan]:
        return [
            loan
            for loan in sorted(self._data.loans.values(), key=lambda lo: lo.id)
            if loan.member_id == member_id and loan.is_open
        ]

    def count_open(self, member_id: int) -> int:
        return len(self.list_open_for_member(member_id))

    def count_past_due(self, member_id: int, now: datetime) -> int:
        return sum(
            1 for loan in self.list_open_for_member(member_id) if loan.is_past_due(now)
        )


class InMemoryFineRepository(_InMemoryRepository, FineRepository):
    """In-memory fines table."""

    def get(self, fine_id: int) -> Fine | None:
        return self._data.fines.get(fine_id)

    def list_all(self, *, unpaid_only: bool = False) -> list[Fine]:
        rows = sorted(self._data.fines.values(), key=lambda f: f.id)
        if unpaid_only:
            return [f for f in rows if not f.is_paid]
        return rows

    def add(self, fine: NewFine) -> Fine:
        if (
            fine.member_id not in self._data.members
            or fine.loan_id not in self._data.loans
        ):
            raise ConflictError(BAD_REFERENCE_MSG, detail="FOREIGN KEY fines")
        if any(f.loan_id == fine.loan_id for f in self._data.fines.values()):
            raise ConflictError(
                DUPLICATE_MSG, detail=f"UNIQUE fines.loan_id: {fine.loan_id}"
            )
        row = Fine(
            id=self._data.next_id("fines"),
            member_id=fine.member_id,
            loan_id=fine.loan_id,
            amount=fine.amount,
        )
        self._data.fines[row.id] = row
        return row

    def mark_paid(self, fine_id: int, paid_at: datetime) -> Fine:
        if (current := self._data.fines.get(fine_id)) is None:
            raise NotFoundError("Fine", fine_id)
        row = replace(current, paid_at=paid_at)
        self._data.fines[fine_id] = row
        return row

    def list_for_member(self, member_id: int) -> list[Fine]:
        return sorted(
            (f for f in self._data.fines.values() if f.member_id == member_id),
            key=lambda f: f.id,
        )

    def count_unpaid(self, member_id: int) -> int:
        return sum(1 for f in self.list_for_member(member_id) if not f.is_paid)


def _cascade_loans(data: InMemoryLibraryData, loan_ids: set[int]) -> None:
    for loan_id in loan_ids:
        del data.loans[loan_id]
    for fid in [f.id for f in data.fines.values() if f.loan_id in loan_ids]:
        del data.fines[fid]
