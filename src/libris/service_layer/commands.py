"""Module defining Commands."""

from dataclasses import dataclass

from libris.domain.unsettable import UNSET, Unsettable

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


# --- Circulation ---


@dataclass(frozen=True)
class BorrowBook(Command):
    """Command to lend one copy of a book to a member."""

    member_id: int
    book_id: int


@dataclass(frozen=True)
class ReturnBook(Command):
    """Command to close a loan, assessing any late fine."""

    loan_id: int


@dataclass(frozen=True)
class ListOverdueLoans(Command):
    """Command to relabel past-due loans as overdue and list them."""


@dataclass(frozen=True)
class PayFine(Command):
    """Command to settle a fine."""

    fine_id: int


@dataclass(frozen=True)
class ReactivateMember(Command):
    """Command to lift a member's suspension."""

    member_id: int


# --- Catalog ---


@dataclass(frozen=True)
class AddBook(Command):
    """Command to catalogue a new book."""

    isbn: str
    title: str
    author: str
    total_copies: int = 1
    category: str | None = None
    available_copies: int | None = None


@dataclass(frozen=True)
class UpdateBook(Command):
    """Command to patch a book's descriptive fields.

    `status` exists only so that callers passing one get a clear rejection;
    book status is never writable through this command.
    """

    book_id: int
    isbn: Unsettable[str] = UNSET
    title: Unsettable[str] = UNSET
    author: Unsettable[str] = UNSET
    category: Unsettable[str] = UNSET
    total_copies: Unsettable[int] = UNSET
    status: Unsettable[str] = UNSET


@dataclass(frozen=True)
class RemoveBook(Command):
    """Command to delete a book and its loan history."""

    book_id: int


# --- Membership ---


@dataclass(frozen=True)
class EnrollMember(Command):
    """Command to enrol a new member."""

    name: str
    email: str
    membership_number: str


@dataclass(frozen=True)
class UpdateMember(Command):
    """Command to patch a member's contact details. `status` is always rejected."""

    member_id: int
    name: Unsettable[str] = UNSET
    email: Unsettable[str] = UNSET
    status: Unsettable[str] = UNSET


@dataclass(frozen=True)
class RemoveMember(Command):
    """Command to delete a member with their loans and fines."""

    member_id: int
