"""Book lifecycle manager.

Owns the book state machine and copy-count bookkeeping. Every function here
runs inside a unit of work the caller has already entered and never commits;
the caller decides whether the whole unit persists.
"""

from __future__ import annotations

import logging

from libris.domain.errors import (
    BookUnavailableError,
    BusinessRuleError,
    NotFoundError,
    ValidationError,
)
from libris.domain.model import Book, BookPatch, BookStatus
from libris.domain.policies import check_book_transition
from libris.domain.unsettable import resolve
from libris.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

NO_COPIES_MSG = "No available copies of this book"
_SHELF_STATUSES = frozenset({BookStatus.AVAILABLE, BookStatus.RESERVED})


def get_book(
    uow: AbstractUnitOfWork, book_id: int, *, for_update: bool = False
) -> Book:
    """Load a book or raise `NotFoundError`."""
    book = uow.books.get(book_id, for_update=for_update)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


def transition_book_status(
    uow: AbstractUnitOfWork, book_id: int, new_status: BookStatus
) -> Book:
    """Move a book to `new_status` if the transition table allows it.

    Raises:
        NotFoundError: If the book does not exist.
        InvalidTransitionError: If the transition is not allowed.
    """
    book = get_book(uow, book_id)
    check_book_transition(book.status, new_status)
    uow.books.set_status(book_id, new_status)
    logger.debug("Book %s: %s -> %s", book_id, book.status.value, new_status.value)
    return get_book(uow, book_id)


def decrement_available_copies(uow: AbstractUnitOfWork, book_id: int) -> Book:
    """Take one copy off the shelf.

    The decrement is a guarded update in the store, so of two units racing
    for the last copy only one can win. Lending the last copy moves the book
    to ``borrowed``.

    Raises:
        NotFoundError: If the book does not exist.
        BookUnavailableError: If no copy is left, including a lost race.
    """
    book = get_book(uow, book_id, for_update=True)
    if book.available_copies <= 0:
        raise BookUnavailableError(book_id, NO_COPIES_MSG)

    if not uow.books.adjust_available_copies(book_id, -1):
        logger.info("Book %s: lost the race for the last copy", book_id)
        raise BookUnavailableError(book_id, NO_COPIES_MSG)

    if book.available_copies == 1:
        return transition_book_status(uow, book_id, BookStatus.BORROWED)
    return get_book(uow, book_id)


def increment_available_copies(uow: AbstractUnitOfWork, book_id: int) -> Book:
    """Put one copy back on the shelf.

    The count never exceeds ``total_copies``; an increment that would is
    logged and skipped. A ``borrowed`` book becomes ``available`` again.

    Raises:
        NotFoundError: If the book does not exist.
    """
    book = get_book(uow, book_id, for_update=True)
    if not uow.books.adjust_available_copies(book_id, +1):
        logger.warning(
            "Book %s already has all %s copies on the shelf; count left unchanged",
            book_id,
            book.total_copies,
        )

    if book.status is BookStatus.BORROWED:
        return transition_book_status(uow, book_id, BookStatus.AVAILABLE)
    return get_book(uow, book_id)


def update_book_details(
    uow: AbstractUnitOfWork, book_id: int, patch: BookPatch
) -> Book:
    """Apply a descriptive patch to a book.

    A new ``total_copies`` shifts ``available_copies`` by the same amount, so
    the number of copies on loan is preserved. The status then follows the new
    shelf count, see `sync_status_with_copies`.

    Raises:
        NotFoundError: If the book does not exist.
        ValidationError: If a required field is cleared or the total is below 1.
        BusinessRuleError: If the new total is smaller than the copies on loan.
    """
    book = get_book(uow, book_id, for_update=True)

    total = resolve(
        patch.total_copies, book.total_copies, clearable=False, field="total_copies"
    )
    if total < 1:
        raise ValidationError("total_copies must be at least 1")
    if total < book.copies_on_loan:
        raise BusinessRuleError(
            f"Cannot reduce total copies to {total}: "
            f"{book.copies_on_loan} copies are on loan"
        )
    # Re-validate through the read model before touching the store.
    updated = Book(
        id=book.id,
        isbn=resolve(patch.isbn, book.isbn, clearable=False, field="isbn"),
        title=resolve(patch.title, book.title, clearable=False, field="title"),
        author=resolve(patch.author, book.author, clearable=False, field="author"),
        category=resolve(
            patch.category, book.category, clearable=True, field="category"
        ),
        status=book.status,
        total_copies=total,
        available_copies=book.available_copies + (total - book.total_copies),
    )
    stored = uow.books.update_details(
        book_id,
        isbn=updated.isbn,
        title=updated.title,
        author=updated.author,
        category=updated.category,
        total_copies=updated.total_copies,
        available_copies=updated.available_copies,
    )
    return sync_status_with_copies(uow, stored)


def sync_status_with_copies(uow: AbstractUnitOfWork, book: Book) -> Book:
    """Keep ``available`` and ``borrowed`` in step with the shelf count.

    An empty shelf means ``borrowed``; a ``borrowed`` book with a copy back
    on the shelf is ``available``. Books in ``maintenance`` are left alone.
    """
    if book.available_copies == 0 and book.status in _SHELF_STATUSES:
        return transition_book_status(uow, book.id, BookStatus.BORROWED)
    if book.available_copies > 0 and book.status is BookStatus.BORROWED:
        return transition_book_status(uow, book.id, BookStatus.AVAILABLE)
    return book
