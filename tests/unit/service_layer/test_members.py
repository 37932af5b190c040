"""Unit tests for the member eligibility manager."""

from decimal import Decimal

import pytest

from libris.adapters.unit_of_work import InMemoryUnitOfWork
from libris.domain.errors import (
    BorrowLimitReachedError,
    MemberSuspendedError,
    NotFoundError,
    UnpaidFinesError,
)
from libris.domain.model import MemberStatus, NewFine
from libris.service_layer import members

from tests.fixtures.datagen import T0, days, seed_book, seed_member, seed_open_loan

# pylint: disable=redefined-outer-name


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


@pytest.fixture
def member(uow):
    return seed_member(uow)


def open_loans(uow, member_id, n, borrowed_at=T0):
    """Open `n` loans on fresh books for `member_id`."""
    return [
        seed_open_loan(uow, member_id, seed_book(uow).id, borrowed_at)
        for _ in range(n)
    ]


class TestCanBorrow:
    """Eligibility checks and their order."""

    @staticmethod
    def test_fresh_member(uow, member):
        """A new member may borrow."""
        with uow:
            assert members.can_borrow(uow, member.id) == member

    @staticmethod
    def test_unknown(uow):
        """Unknown members are reported, not treated as ineligible."""
        with uow, pytest.raises(NotFoundError):
            members.can_borrow(uow, 42)

    @staticmethod
    def test_suspension_checked_first(uow, member):
        """A suspended member at the limit hears about the suspension."""
        open_loans(uow, member.id, 3)
        uow.members.set_status(member.id, MemberStatus.SUSPENDED)

        with uow, pytest.raises(MemberSuspendedError):
            members.can_borrow(uow, member.id)

    @staticmethod
    def test_fines_checked_before_limit(uow, member):
        """Unpaid fines take precedence over the open-loan limit."""
        loans = open_loans(uow, member.id, 3)
        with uow:
            uow.fines.add(
                NewFine(member_id=member.id, loan_id=loans[0].id, amount=Decimal("1"))
            )
            uow.commit()

        with uow, pytest.raises(UnpaidFinesError):
            members.can_borrow(uow, member.id)

    @staticmethod
    def test_limit(uow, member):
        """Three open loans is the maximum."""
        open_loans(uow, member.id, 3)
        with uow, pytest.raises(BorrowLimitReachedError):
            members.can_borrow(uow, member.id)


class TestCheckAndSuspend:
    """Suspension after a return."""

    @pytest.mark.parametrize("past_due, suspended", [(2, False), (3, True), (4, True)])
    def test_threshold(self, uow, member, past_due, suspended):
        """Three or more past-due open loans suspend the member."""
        open_loans(uow, member.id, past_due, borrowed_at=T0 - days(30))

        with uow:
            result = members.check_and_suspend_for_overdue(uow, member.id, T0)
            uow.commit()
        assert result is suspended

        expected = MemberStatus.SUSPENDED if suspended else MemberStatus.ACTIVE
        assert uow.members.get(member.id).status is expected

    @staticmethod
    def test_not_yet_due_ignored(uow, member):
        """Open loans that are not yet due do not count."""
        open_loans(uow, member.id, 3)
        with uow:
            assert members.check_and_suspend_for_overdue(uow, member.id, T0) is False
