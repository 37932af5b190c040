"""SQLAlchemy-backed repositories for LIBRIS.

Each repository is bound to the `Connection` of one unit of work, so every
statement it issues runs in that unit's transaction. Storage errors are
mapped to LIBRIS errors:

- `IntegrityError` (unique, foreign key, check) → `ConflictError`
- any other `DBAPIError` (operational, interface, ...) → `StoreUnavailableError`

Copy-count changes are single guarded ``UPDATE`` statements whose rowcount
reports whether the guard held. That makes the last-copy race safe even on
SQLite, which has no row locks.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError

from libris.adapters.db.schema import books, fines, loans, members
from libris.domain.errors import ConflictError, NotFoundError, StoreUnavailableError
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

if TYPE_CHECKING:
    from sqlalchemy import Executable, RowMapping
    from sqlalchemy.engine import Connection, CursorResult

# pylint: disable=too-many-arguments

UNIQUE_CONSTRAINT_KEYWORDS = ("unique", "duplicate")  # pragma: no mutate
FOREIGN_KEY_KEYWORDS = ("foreign key",)  # pragma: no mutate


def _conflict_from_integrity_error(integrity_error: IntegrityError) -> ConflictError:
    """Build a ConflictError with a caller-friendly message.

    The driver message is kept on ``detail`` for logs; the exception text
    only says which kind of constraint failed.
    """
    detail = str(integrity_error.orig or integrity_error)
    lowered = detail.lower()
    if any(kw in lowered for kw in UNIQUE_CONSTRAINT_KEYWORDS):
        message = "A record with this value already exists"
    elif any(kw in lowered for kw in FOREIGN_KEY_KEYWORDS):
        message = "Invalid reference to related resource"
    else:
        message = "Database constraint violation"
    return ConflictError(message, detail=detail)


class _SqlAlchemyRepository:
    """Shared plumbing: statement execution with error translation."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def _execute(self, stmt: Executable) -> CursorResult[Any]:
        try:
            return self.connection.execute(stmt)
        except IntegrityError as e:
            raise _conflict_from_integrity_error(e) from e
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    def _fetch_one(self, stmt: Executable) -> RowMapping | None:
        return self._execute(stmt).mappings().one_or_none()

    def _fetch_all(self, stmt: Executable) -> list[RowMapping]:
        return list(self._execute(stmt).mappings().all())

    def _count(self, stmt: Executable) -> int:
        return int(self._execute(stmt).scalar_one())


# --------------------------------------------------------------------------- #
# Row mappers
# --------------------------------------------------------------------------- #


def _book(row: RowMapping) -> Book:
    return Book(
        id=row["id"],
        isbn=row["isbn"],
        title=row["title"],
        author=row["author"],
        category=row["category"],
        status=BookStatus(row["status"]),
        total_copies=row["total_copies"],
        available_copies=row["available_copies"],
        created_at=row["created_at"],
    )


def _member(row: RowMapping) -> Member:
    return Member(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        membership_number=row["membership_number"],
        status=MemberStatus(row["status"]),
        created_at=row["created_at"],
    )


def _loan(row: RowMapping) -> Loan:
    return Loan(
        id=row["id"],
        book_id=row["book_id"],
        member_id=row["member_id"],
        borrowed_at=row["borrowed_at"],
        due_date=row["due_date"],
        returned_at=row["returned_at"],
        status=LoanStatus(row["status"]),
    )


def _fine(row: RowMapping) -> Fine:
    return Fine(
        id=row["id"],
        member_id=row["member_id"],
        loan_id=row["loan_id"],
        amount=row["amount_cents"],
        paid_at=row["paid_at"],
        created_at=row["created_at"],
    )


# --------------------------------------------------------------------------- #
# Repositories
# --------------------------------------------------------------------------- #


class SqlAlchemyBookRepository(_SqlAlchemyRepository, BookRepository):
    """Books table adapter."""

    def get(self, book_id: int, *, for_update: bool = False) -> Book | None:
        stmt = select(books).where(books.c.id == book_id)
        if for_update:
            # Rendered as FOR UPDATE on Postgres; SQLite ignores it.
            stmt = stmt.with_for_update()
        row = self._fetch_one(stmt)
        return _book(row) if row else None

    def list_all(self, *, available_only: bool = False) -> list[Book]:
        stmt = select(books).order_by(books.c.id)
        if available_only:
            stmt = stmt.where(
                books.c.available_copies > 0,
                books.c.status == BookStatus.AVAILABLE.value,
            )
        return [_book(row) for row in self._fetch_all(stmt)]

    def add(self, book: NewBook) -> Book:
        stmt = (
            insert(books)
            .values(
                isbn=book.isbn,
                title=book.title,
                author=book.author,
                category=book.category,
                total_copies=book.total_copies,
                available_copies=book.initial_available,
                status=book.initial_status.value,
            )
            .returning(books)
        )
        row = self._fetch_one(stmt)
        assert row is not None  # pragma: no mutate
        return _book(row)

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
        stmt = (
            update(books)
            .where(books.c.id == book_id)
            .values(
                isbn=isbn,
                title=title,
                author=author,
                category=category,
                total_copies=total_copies,
                available_copies=available_copies,
            )
            .returning(books)
        )
        if not (row := self._fetch_one(stmt)):
            raise NotFoundError("Book", book_id)
        return _book(row)

    def adjust_available_copies(self, book_id: int, delta: int) -> bool:
        new_count = books.c.available_copies + delta
        stmt = (
            update(books)
            .where(
                books.c.id == book_id,
                new_count >= 0,
                new_count <= books.c.total_copies,
            )
            .values(available_copies=new_count)
        )
        return self._execute(stmt).rowcount == 1

    def set_status(self, book_id: int, status: BookStatus) -> None:
        self._execute(
            update(books).where(books.c.id == book_id).values(status=status.value)
        )

    def remove(self, book_id: int) -> None:
        self._execute(delete(books).where(books.c.id == book_id))


class SqlAlchemyMemberRepository(_SqlAlchemyRepository, MemberRepository):
    """Members table adapter."""

    def get(self, member_id: int) -> Member | None:
        row = self._fetch_one(select(members).where(members.c.id == member_id))
        return _member(row) if row else None

    def list_all(self) -> list[Member]:
        stmt = select(members).order_by(members.c.id)
        return [_member(row) for row in self._fetch_all(stmt)]

    def add(self, member: NewMember) -> Member:
        stmt = (
            insert(members)
            .values(
                name=member.name,
                email=member.email,
                membership_number=member.membership_number,
                status=MemberStatus.ACTIVE.value,
            )
            .returning(members)
        )
        row = self._fetch_one(stmt)
        assert row is not None  # pragma: no mutate
        return _member(row)

    def update_details(self, member_id: int, *, name: str, email: str) -> Member:
        stmt = (
            update(members)
            .where(members.c.id == member_id)
            .values(name=name, email=email)
            .returning(members)
        )
        if not (row := self._fetch_one(stmt)):
            raise NotFoundError("Member", member_id)
        return _member(row)

    def set_status(self, member_id: int, status: MemberStatus) -> None:
        self._execute(
            update(members)
            .where(members.c.id == member_id)
            .values(status=status.value)
        )

    def remove(self, member_id: int) -> None:
        self._execute(delete(members).where(members.c.id == member_id))


class SqlAlchemyLoanRepository(_SqlAlchemyRepository, LoanRepository):
    """Loans table adapter."""

    def get(self, loan_id: int) -> Loan | None:
        row = self._fetch_one(select(loans).where(loans.c.id == loan_id))
        return _loan(row) if row else None

    def list_all(self, *, open_only: bool = False) -> list[Loan]:
        stmt = select(loans).order_by(loans.c.id)
        if open_only:
            stmt = stmt.where(loans.c.returned_at.is_(None))
        return [_loan(row) for row in self._fetch_all(stmt)]

    def add(self, loan: NewLoan) -> Loan:
        stmt = (
            insert(loans)
            .values(
                book_id=loan.book_id,
                member_id=loan.member_id,
                borrowed_at=loan.borrowed_at,
                due_date=loan.due_date,
                status=LoanStatus.ACTIVE.value,
            )
            .returning(loans)
        )
        row = self._fetch_one(stmt)
        assert row is not None  # pragma: no mutate
        return _loan(row)

    def mark_returned(self, loan_id: int, returned_at: datetime) -> Loan:
        stmt = (
            update(loans)
            .where(loans.c.id == loan_id)
            .values(returned_at=returned_at, status=LoanStatus.RETURNED.value)
            .returning(loans)
        )
        if not (row := self._fetch_one(stmt)):
            raise NotFoundError("Loan", loan_id)
        return _loan(row)

    def mark_overdue(self, now: datetime) -> int:
        stmt = (
            update(loans)
            .where(
                loans.c.returned_at.is_(None),
                loans.c.status == LoanStatus.ACTIVE.value,
                loans.c.due_date < now,
            )
            .values(status=LoanStatus.OVERDUE.value)
        )
        return self._execute(stmt).rowcount

    def list_overdue(self) -> list[OverdueLoan]:
        stmt = (
            select(
                loans,
                books.c.title.label("book_title"),
                members.c.name.label("member_name"),
            )
            .join(books, books.c.id == loans.c.book_id)
            .join(members, members.c.id == loans.c.member_id)
            .where(loans.c.status == LoanStatus.OVERDUE.value)
            .order_by(loans.c.id)
        )
        return [
            OverdueLoan(
                loan=_loan(row),
                book_title=row["book_title"],
                member_name=row["member_name"],
            )
            for row in self._fetch_all(stmt)
        ]

    def list_open_for_member(self, member_id: int) -> list[Loan]:
        stmt = (
            select(loans)
            .where(loans.c.member_id == member_id, loans.c.returned_at.is_(None))
            .order_by(loans.c.id)
        )
        return [_loan(row) for row in self._fetch_all(stmt)]

    def count_open(self, member_id: int) -> int:
        return self._count(
            select(func.count())
            .select_from(loans)
            .where(loans.c.member_id == member_id, loans.c.returned_at.is_(None))
        )

    def count_past_due(self, member_id: int, now: datetime) -> int:
        return self._count(
            select(func.count())
            .select_from(loans)
            .where(
                loans.c.member_id == member_id,
                loans.c.returned_at.is_(None),
                loans.c.due_date < now,
            )
        )


class SqlAlchemyFineRepository(_SqlAlchemyRepository, FineRepository):
    """Fines table adapter."""

    def get(self, fine_id: int) -> Fine | None:
        row = self._fetch_one(select(fines).where(fines.c.id == fine_id))
        return _fine(row) if row else None

    def list_all(self, *, unpaid_only: bool = False) -> list[Fine]:
        stmt = select(fines).order_by(fines.c.id)
        if unpaid_only:
            stmt = stmt.where(fines.c.paid_at.is_(None))
        return [_fine(row) for row in self._fetch_all(stmt)]

    def add(self, fine: NewFine) -> Fine:
        stmt = (
            insert(fines)
            .values(
                member_id=fine.member_id,
                loan_id=fine.loan_id,
                amount_cents=fine.amount,
            )
            .returning(fines)
        )
        row = self._fetch_one(stmt)
        assert row is not None  # pragma: no mutate
        return _fine(row)

    def mark_paid(self, fine_id: int, paid_at: datetime) -> Fine:
        stmt = (
            update(fines)
            .where(fines.c.id == fine_id)
            .values(paid_at=paid_at)
            .returning(fines)
        )
        if not (row := self._fetch_one(stmt)):
            raise NotFoundError("Fine", fine_id)
        return _fine(row)

    def list_for_member(self, member_id: int) -> list[Fine]:
        stmt = select(fines).where(fines.c.member_id == member_id).order_by(fines.c.id)
        return [_fine(row) for row in self._fetch_all(stmt)]

    def count_unpaid(self, member_id: int) -> int:
        return self._count(
            select(func.count())
            .select_from(fines)
            .where(fines.c.member_id == member_id, fines.c.paid_at.is_(None))
        )
