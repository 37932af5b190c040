"""Circulation policies: loan period, fines, limits and the book state machine.

Everything here is pure; no I/O and no clock access. Callers pass in the
current time.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from .errors import InvalidTransitionError
from .model import BookStatus

LOAN_PERIOD = timedelta(days=14)
FINE_PER_DAY = Decimal("0.50")
MAX_OPEN_LOANS = 3
SUSPENSION_OVERDUE_THRESHOLD = 3

_ONE_DAY = timedelta(days=1)

BOOK_TRANSITIONS: dict[BookStatus, frozenset[BookStatus]] = {
    BookStatus.AVAILABLE: frozenset(
        {BookStatus.BORROWED, BookStatus.RESERVED, BookStatus.MAINTENANCE}
    ),
    BookStatus.BORROWED: frozenset({BookStatus.AVAILABLE, BookStatus.MAINTENANCE}),
    BookStatus.RESERVED: frozenset(
        {BookStatus.AVAILABLE, BookStatus.BORROWED, BookStatus.MAINTENANCE}
    ),
    BookStatus.MAINTENANCE: frozenset({BookStatus.AVAILABLE}),
}


def check_book_transition(current: BookStatus, target: BookStatus) -> None:
    """Validate a book status change against the transition table.

    Raises:
        InvalidTransitionError: If `target` is not reachable from `current`.
    """
    if target not in BOOK_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError("Book", current.value, target.value)


def due_date_for(borrowed_at: datetime) -> datetime:
    """Return the due date of a loan opened at `borrowed_at`."""
    return borrowed_at + LOAN_PERIOD


def days_late(due_date: datetime, returned_at: datetime) -> int:
    """Whole 24-hour periods between `due_date` and `returned_at`.

    Fractional days round down; an early return gives a negative count.
    """
    return (returned_at - due_date) // _ONE_DAY


def calculate_fine(due_date: datetime, returned_at: datetime) -> Decimal | None:
    """Fine owed for returning at `returned_at` a loan due at `due_date`.

    Returns:
        ``days_late × FINE_PER_DAY`` when strictly positive, otherwise None.
    """
    days = days_late(due_date, returned_at)
    if days <= 0:
        return None
    return days * FINE_PER_DAY
