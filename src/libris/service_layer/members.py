"""Member eligibility manager.

Decides whether a member may borrow and owns the ``active``/``suspended``
state. Like the book manager, these functions run inside the caller's unit
of work and never commit.
"""

from __future__ import annotations

import logging
from datetime import datetime

from libris.domain.errors import (
    BorrowLimitReachedError,
    MemberNotSuspendedError,
    MemberSuspendedError,
    NotFoundError,
    OverdueLimitReachedError,
    UnpaidFinesError,
)
from libris.domain.model import Member, MemberPatch, MemberStatus
from libris.domain.policies import MAX_OPEN_LOANS, SUSPENSION_OVERDUE_THRESHOLD
from libris.domain.unsettable import resolve
from libris.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def get_member(uow: AbstractUnitOfWork, member_id: int) -> Member:
    """Load a member or raise `NotFoundError`."""
    member = uow.members.get(member_id)
    if member is None:
        raise NotFoundError("Member", member_id)
    return member


def can_borrow(uow: AbstractUnitOfWork, member_id: int) -> Member:
    """Check that a member may open another loan.

    Checks run in order: suspension, unpaid fines, open-loan limit. No side
    effects.

    Returns:
        The member, for convenience.

    Raises:
        NotFoundError: If the member does not exist.
        MemberSuspendedError: If the member is suspended.
        UnpaidFinesError: If the member has at least one unpaid fine.
        BorrowLimitReachedError: If the member already holds the maximum.
    """
    member = get_member(uow, member_id)
    if member.is_suspended:
        raise MemberSuspendedError(member_id)
    if uow.fines.count_unpaid(member_id) > 0:
        raise UnpaidFinesError(member_id)
    if uow.loans.count_open(member_id) >= MAX_OPEN_LOANS:
        raise BorrowLimitReachedError(member_id, MAX_OPEN_LOANS)
    return member


def check_and_suspend_for_overdue(
    uow: AbstractUnitOfWork, member_id: int, now: datetime
) -> bool:
    """Suspend the member if enough of their open loans are past due.

    Returns:
        True if the member was suspended, False otherwise (nothing written).
    """
    overdue = uow.loans.count_past_due(member_id, now)
    if overdue < SUSPENSION_OVERDUE_THRESHOLD:
        return False

    uow.members.set_status(member_id, MemberStatus.SUSPENDED)
    logger.info("Member %s suspended: %d overdue loans", member_id, overdue)
    return True


def reactivate(uow: AbstractUnitOfWork, member_id: int, now: datetime) -> Member:
    """Lift a suspension once the member is back in good standing.

    Raises:
        NotFoundError: If the member does not exist.
        MemberNotSuspendedError: If the member is not suspended.
        UnpaidFinesError: If any fine is unpaid.
        OverdueLimitReachedError: If the member still has too many overdue loans.
    """
    member = get_member(uow, member_id)
    if not member.is_suspended:
        raise MemberNotSuspendedError(member_id)
    if uow.fines.count_unpaid(member_id) > 0:
        raise UnpaidFinesError(member_id, "Cannot reactivate member with unpaid fines")
    if uow.loans.count_past_due(member_id, now) >= SUSPENSION_OVERDUE_THRESHOLD:
        raise OverdueLimitReachedError(member_id, SUSPENSION_OVERDUE_THRESHOLD)

    uow.members.set_status(member_id, MemberStatus.ACTIVE)
    logger.info("Member %s reactivated", member_id)
    return get_member(uow, member_id)


def update_member_details(
    uow: AbstractUnitOfWork, member_id: int, patch: MemberPatch
) -> Member:
    """Apply a contact-details patch. The membership number never changes."""
    member = get_member(uow, member_id)
    return uow.members.update_details(
        member_id,
        name=resolve(patch.name, member.name, clearable=False, field="name"),
        email=resolve(patch.email, member.email, clearable=False, field="email"),
    )
