"""Read and write models for books, members, loans and fines.

Read models are immutable snapshots of persisted rows. Status fields appear
only on read models; the write models (`NewBook`, `BookPatch`, ...) have no
way to express a status, so the lifecycle and eligibility managers are the
only code paths that change one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .errors import ValidationError
from .unsettable import UNSET, Unsettable

# pylint: disable=too-many-instance-attributes


class BookStatus(str, Enum):
    """Lifecycle states of a book."""

    AVAILABLE = "available"
    BORROWED = "borrowed"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class MemberStatus(str, Enum):
    """Lifecycle states of a member."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class LoanStatus(str, Enum):
    """Visibility labels of a loan.

    ``OVERDUE`` is materialized lazily by the overdue sweep; it is not a
    terminal state of the loan itself.
    """

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


# --- Read Models ---


@dataclass(frozen=True, slots=True)
class Book:
    """Immutable snapshot of a catalogued book.

    Conventions:
      - `total_copies` is at least 1.
      - `available_copies` is between 0 and `total_copies`.
    """

    id: int
    isbn: str
    title: str
    author: str
    status: BookStatus
    total_copies: int
    available_copies: int
    category: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.total_copies < 1:
            raise ValidationError("total_copies must be at least 1")
        if not 0 <= self.available_copies <= self.total_copies:
            raise ValidationError(
                "available_copies must be between 0 and total_copies"
            )

    @property
    def copies_on_loan(self) -> int:
        """Number of copies currently lent out."""
        return self.total_copies - self.available_copies

    @property
    def is_lendable(self) -> bool:
        """True if a copy can be borrowed right now."""
        return self.available_copies > 0 and self.status is BookStatus.AVAILABLE


@dataclass(frozen=True, slots=True)
class Member:
    """Immutable snapshot of an enrolled member."""

    id: int
    name: str
    email: str
    membership_number: str
    status: MemberStatus
    created_at: datetime | None = None

    @property
    def is_suspended(self) -> bool:
        """True if the member is currently suspended."""
        return self.status is MemberStatus.SUSPENDED


@dataclass(frozen=True, slots=True)
class Loan:
    """Immutable snapshot of a loan (borrow transaction) record."""

    id: int
    book_id: int
    member_id: int
    borrowed_at: datetime
    due_date: datetime
    status: LoanStatus
    returned_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        """True while the book has not been returned."""
        return self.returned_at is None

    def is_past_due(self, now: datetime) -> bool:
        """True if the loan is open and its due date is before *now*."""
        return self.is_open and self.due_date < now


@dataclass(frozen=True, slots=True)
class Fine:
    """Immutable snapshot of a fine raised by a late return."""

    id: int
    member_id: int
    loan_id: int
    amount: Decimal
    paid_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        """True once the fine has been settled."""
        return self.paid_at is not None


@dataclass(frozen=True, slots=True)
class OverdueLoan:
    """Overdue report row: a loan plus the names needed to display it."""

    loan: Loan
    book_title: str
    member_name: str


@dataclass(frozen=True, slots=True)
class ReturnReceipt:
    """Outcome of a return: the closed loan, the fine (if any) and suspension."""

    loan: Loan
    fine: Fine | None
    member_suspended: bool


# --- Write Models ---


@dataclass(frozen=True, slots=True)
class NewBook:
    """Write model for cataloguing a book.

    `available_copies` defaults to `total_copies` when not given. A book
    catalogued with no copy on the shelf starts out ``borrowed``.
    """

    isbn: str
    title: str
    author: str
    total_copies: int = 1
    category: str | None = None
    available_copies: int | None = None

    def __post_init__(self) -> None:
        if self.total_copies < 1:
            raise ValidationError("total_copies must be at least 1")
        if self.available_copies is not None and not (
            0 <= self.available_copies <= self.total_copies
        ):
            raise ValidationError(
                "available_copies must be between 0 and total_copies"
            )

    @property
    def initial_available(self) -> int:
        """Number of copies available right after cataloguing."""
        if self.available_copies is None:
            return self.total_copies
        return self.available_copies

    @property
    def initial_status(self) -> BookStatus:
        """``borrowed`` when no copy starts on the shelf, else ``available``."""
        if self.initial_available == 0:
            return BookStatus.BORROWED
        return BookStatus.AVAILABLE


@dataclass(frozen=True, slots=True)
class NewMember:
    """Write model for enrolling a member."""

    name: str
    email: str
    membership_number: str


@dataclass(frozen=True, slots=True)
class NewLoan:
    """Write model for opening a loan."""

    book_id: int
    member_id: int
    borrowed_at: datetime
    due_date: datetime


@dataclass(frozen=True, slots=True)
class NewFine:
    """Write model for recording a fine."""

    member_id: int
    loan_id: int
    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValidationError("fine amount must be positive")


@dataclass(frozen=True, slots=True)
class BookPatch:
    """Partial update of a book's descriptive fields. Carries no status."""

    isbn: Unsettable[str] = UNSET
    title: Unsettable[str] = UNSET
    author: Unsettable[str] = UNSET
    category: Unsettable[str] = UNSET
    total_copies: Unsettable[int] = UNSET


@dataclass(frozen=True, slots=True)
class MemberPatch:
    """Partial update of a member's contact fields. Carries no status."""

    name: Unsettable[str] = UNSET
    email: Unsettable[str] = UNSET
