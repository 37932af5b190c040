"""Service layer handlers.

Each handler runs one command inside exactly one unit of work. Leaving the
``with uow:`` block without an explicit commit rolls back, so a failure at
any step undoes every write the handler made.
"""

import logging
from collections.abc import Callable

from libris.domain.errors import (
    BookUnavailableError,
    DirectStatusUpdateError,
    LoanAlreadyReturnedError,
    NotFoundError,
)
from libris.domain.model import (
    Book,
    BookPatch,
    Fine,
    Loan,
    Member,
    MemberPatch,
    NewBook,
    NewLoan,
    NewMember,
    OverdueLoan,
    ReturnReceipt,
)
from libris.domain.policies import due_date_for
from libris.domain.unsettable import is_set
from libris.interfaces.clock import Clock
from libris.interfaces.unit_of_work import AbstractUnitOfWork

from . import books, commands, fines, members

logger = logging.getLogger(__name__)

# ============================================================================
#                           Circulation Handlers
# ============================================================================


def borrow_book(
    cmd: commands.BorrowBook, uow: AbstractUnitOfWork, clock: Clock
) -> Loan:
    """Lend one copy of a book to a member and return the new loan."""

    with uow:
        members.can_borrow(uow, cmd.member_id)

        book = books.get_book(uow, cmd.book_id, for_update=True)
        if not book.is_lendable:
            raise BookUnavailableError(book.id)

        borrowed_at = clock.now()
        loan = uow.loans.add(
            NewLoan(
                book_id=book.id,
                member_id=cmd.member_id,
                borrowed_at=borrowed_at,
                due_date=due_date_for(borrowed_at),
            )
        )
        books.decrement_available_copies(uow, book.id)
        uow.commit()

    logger.info(
        "Loan %s: book %s to member %s, due %s",
        loan.id,
        loan.book_id,
        loan.member_id,
        loan.due_date.isoformat(),
    )
    return loan


def return_book(
    cmd: commands.ReturnBook, uow: AbstractUnitOfWork, clock: Clock
) -> ReturnReceipt:
    """Close a loan, assess any late fine and re-check the member's standing."""

    with uow:
        loan = uow.loans.get(cmd.loan_id)
        if loan is None:
            raise NotFoundError("Loan", cmd.loan_id)
        if not loan.is_open:
            raise LoanAlreadyReturnedError(loan.id)

        returned_at = clock.now()
        fine = fines.assess_fine(uow, loan, returned_at)
        closed = uow.loans.mark_returned(loan.id, returned_at)
        books.increment_available_copies(uow, loan.book_id)
        suspended = members.check_and_suspend_for_overdue(
            uow, loan.member_id, returned_at
        )
        uow.commit()

    logger.info("Loan %s returned (fine=%s)", closed.id, fine.amount if fine else None)
    return ReturnReceipt(loan=closed, fine=fine, member_suspended=suspended)


def list_overdue_loans(
    cmd: commands.ListOverdueLoans,  # pylint: disable=unused-argument
    uow: AbstractUnitOfWork,
    clock: Clock,
) -> list[OverdueLoan]:
    """Relabel past-due loans as overdue, then list every overdue loan."""

    with uow:
        relabelled = uow.loans.mark_overdue(clock.now())
        uow.commit()
        if relabelled:
            logger.info("Marked %d loans overdue", relabelled)
        return uow.loans.list_overdue()


def pay_fine(cmd: commands.PayFine, uow: AbstractUnitOfWork, clock: Clock) -> Fine:
    """Settle a fine."""

    with uow:
        fine = fines.pay_fine(uow, cmd.fine_id, clock.now())
        uow.commit()
    logger.info("Fine %s paid", fine.id)
    return fine


def reactivate_member(
    cmd: commands.ReactivateMember, uow: AbstractUnitOfWork, clock: Clock
) -> Member:
    """Lift a member's suspension."""

    with uow:
        member = members.reactivate(uow, cmd.member_id, clock.now())
        uow.commit()
    return member


# ============================================================================
#                           Catalog Handlers
# ============================================================================


def add_book(cmd: commands.AddBook, uow: AbstractUnitOfWork) -> Book:
    """Catalogue a new book."""

    new_book = NewBook(
        isbn=cmd.isbn,
        title=cmd.title,
        author=cmd.author,
        total_copies=cmd.total_copies,
        category=cmd.category,
        available_copies=cmd.available_copies,
    )
    with uow:
        book = uow.books.add(new_book)
        uow.commit()
    logger.info("Book %s catalogued (isbn %s)", book.id, book.isbn)
    return book


def update_book(cmd: commands.UpdateBook, uow: AbstractUnitOfWork) -> Book:
    """Patch a book's descriptive fields. Rejects any attempt to set status."""

    if is_set(cmd.status):
        raise DirectStatusUpdateError("Book")

    patch = BookPatch(
        isbn=cmd.isbn,
        title=cmd.title,
        author=cmd.author,
        category=cmd.category,
        total_copies=cmd.total_copies,
    )
    with uow:
        book = books.update_book_details(uow, cmd.book_id, patch)
        uow.commit()
    return book


def remove_book(cmd: commands.RemoveBook, uow: AbstractUnitOfWork) -> None:
    """Delete a book along with its loans."""

    with uow:
        books.get_book(uow, cmd.book_id)
        uow.books.remove(cmd.book_id)
        uow.commit()
    logger.info("Book %s removed", cmd.book_id)


# ============================================================================
#                           Membership Handlers
# ============================================================================


def enroll_member(cmd: commands.EnrollMember, uow: AbstractUnitOfWork) -> Member:
    """Enrol a new member."""

    with uow:
        member = uow.members.add(
            NewMember(
                name=cmd.name,
                email=cmd.email,
                membership_number=cmd.membership_number,
            )
        )
        uow.commit()
    logger.info("Member %s enrolled (%s)", member.id, member.membership_number)
    return member


def update_member(cmd: commands.UpdateMember, uow: AbstractUnitOfWork) -> Member:
    """Patch a member's contact details. Rejects any attempt to set status."""

    if is_set(cmd.status):
        raise DirectStatusUpdateError("Member")

    with uow:
        member = members.update_member_details(
            uow, cmd.member_id, MemberPatch(name=cmd.name, email=cmd.email)
        )
        uow.commit()
    return member


def remove_member(cmd: commands.RemoveMember, uow: AbstractUnitOfWork) -> None:
    """Delete a member along with their loans and fines."""

    with uow:
        members.get_member(uow, cmd.member_id)
        uow.members.remove(cmd.member_id)
        uow.commit()
    logger.info("Member %s removed", cmd.member_id)


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.BorrowBook: borrow_book,
    commands.ReturnBook: return_book,
    commands.ListOverdueLoans: list_overdue_loans,
    commands.PayFine: pay_fine,
    commands.ReactivateMember: reactivate_member,
    commands.AddBook: add_book,
    commands.UpdateBook: update_book,
    commands.RemoveBook: remove_book,
    commands.EnrollMember: enroll_member,
    commands.UpdateMember: update_member,
    commands.RemoveMember: remove_member,
}
