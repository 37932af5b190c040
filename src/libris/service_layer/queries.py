"""Read-only queries.

Each query opens its own unit of work and leaves it without committing.
"""

from libris.domain.errors import NotFoundError
from libris.domain.model import Book, Fine, Loan, Member
from libris.interfaces.unit_of_work import AbstractUnitOfWork

from . import books, members


def get_book(uow: AbstractUnitOfWork, book_id: int) -> Book:
    """Return a book or raise `NotFoundError`."""
    with uow:
        return books.get_book(uow, book_id)


def available_books(uow: AbstractUnitOfWork) -> list[Book]:
    """Books with at least one copy on the shelf and status ``available``."""
    with uow:
        return uow.books.list_all(available_only=True)


def list_books(uow: AbstractUnitOfWork) -> list[Book]:
    with uow:
        return uow.books.list_all()


def get_member(uow: AbstractUnitOfWork, member_id: int) -> Member:
    """Return a member or raise `NotFoundError`."""
    with uow:
        return members.get_member(uow, member_id)


def open_loans_for(uow: AbstractUnitOfWork, member_id: int) -> list[Loan]:
    """The member's loans that have not been returned yet."""
    with uow:
        members.get_member(uow, member_id)
        return uow.loans.list_open_for_member(member_id)


def get_loan(uow: AbstractUnitOfWork, loan_id: int) -> Loan:
    """Return a loan or raise `NotFoundError`."""
    with uow:
        loan = uow.loans.get(loan_id)
    if loan is None:
        raise NotFoundError("Loan", loan_id)
    return loan


def fines_for_member(uow: AbstractUnitOfWork, member_id: int) -> list[Fine]:
    """All fines of a member, paid or not."""
    with uow:
        members.get_member(uow, member_id)
        return uow.fines.list_for_member(member_id)


def list_members(uow: AbstractUnitOfWork) -> list[Member]:
    with uow:
        return uow.members.list_all()


def list_loans(uow: AbstractUnitOfWork, *, open_only: bool = False) -> list[Loan]:
    """Every loan, or only those not returned yet."""
    with uow:
        return uow.loans.list_all(open_only=open_only)


def get_fine(uow: AbstractUnitOfWork, fine_id: int) -> Fine:
    """Return a fine or raise `NotFoundError`."""
    with uow:
        fine = uow.fines.get(fine_id)
    if fine is None:
        raise NotFoundError("Fine", fine_id)
    return fine


def list_fines(uow: AbstractUnitOfWork, *, unpaid_only: bool = False) -> list[Fine]:
    """Fines of every member, or only the unpaid ones."""
    with uow:
        return uow.fines.list_all(unpaid_only=unpaid_only)
