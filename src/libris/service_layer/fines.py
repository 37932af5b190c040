"""Fine ledger: assessing late-return fines and settling them."""

from __future__ import annotations

import logging
from datetime import datetime

from libris.domain.errors import FineAlreadyPaidError, NotFoundError
from libris.domain.model import Fine, Loan, NewFine
from libris.domain.policies import calculate_fine
from libris.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def assess_fine(
    uow: AbstractUnitOfWork, loan: Loan, returned_at: datetime
) -> Fine | None:
    """Record an unpaid fine for `loan` if it comes back late.

    Returns:
        The persisted fine, or None when the return is on time.
    """
    amount = calculate_fine(loan.due_date, returned_at)
    if amount is None:
        return None

    fine = uow.fines.add(
        NewFine(member_id=loan.member_id, loan_id=loan.id, amount=amount)
    )
    logger.info(
        "Fine %s of %s assessed to member %s for loan %s",
        fine.id,
        fine.amount,
        fine.member_id,
        loan.id,
    )
    return fine


def pay_fine(uow: AbstractUnitOfWork, fine_id: int, now: datetime) -> Fine:
    """Mark a fine as paid at `now`. Paying twice is an error.

    Raises:
        NotFoundError: If the fine does not exist.
        FineAlreadyPaidError: If the fine has already been paid.
    """
    fine = uow.fines.get(fine_id)
    if fine is None:
        raise NotFoundError("Fine", fine_id)
    if fine.is_paid:
        raise FineAlreadyPaidError(fine_id)
    return uow.fines.mark_paid(fine_id, now)
