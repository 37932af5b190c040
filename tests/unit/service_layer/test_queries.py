"""Unit tests for the read-only queries."""

from decimal import Decimal

import pytest

from libris.adapters.unit_of_work import InMemoryUnitOfWork
from libris.domain.errors import NotFoundError
from libris.domain.model import LoanStatus, NewFine
from libris.service_layer import queries

from tests.fixtures.datagen import T0, days, seed_book, seed_member, seed_open_loan

# pylint: disable=redefined-outer-name


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


@pytest.fixture
def library(uow):
    """Two members; Ada returned one book late and Bob still has one out."""
    ada, bob = seed_member(uow), seed_member(uow)
    book = seed_book(uow, total_copies=2)
    returned = seed_open_loan(uow, ada.id, book.id, T0)
    out = seed_open_loan(uow, bob.id, book.id, T0)
    with uow:
        uow.loans.mark_returned(returned.id, T0 + days(16))
        fine = uow.fines.add(
            NewFine(member_id=ada.id, loan_id=returned.id, amount=Decimal("1.00"))
        )
        uow.commit()
    return {"ada": ada, "bob": bob, "returned": returned, "out": out, "fine": fine}


class TestLoans:
    """Loan lookups."""

    @staticmethod
    def test_get_loan(uow, library):
        loan = queries.get_loan(uow, library["returned"].id)
        assert loan.status is LoanStatus.RETURNED
        assert loan.returned_at == T0 + days(16)

    @staticmethod
    def test_get_missing_loan(uow):
        with pytest.raises(NotFoundError, match=r"Loan \(9\) not found"):
            queries.get_loan(uow, 9)

    @staticmethod
    def test_list_loans(uow, library):
        """All loans by default; only the unreturned one with `open_only`."""
        every = [loan.id for loan in queries.list_loans(uow)]
        assert every == [library["returned"].id, library["out"].id]
        (still_out,) = queries.list_loans(uow, open_only=True)
        assert still_out.member_id == library["bob"].id


class TestFines:
    """Fine lookups across members."""

    @staticmethod
    def test_get_fine(uow, library):
        fine = queries.get_fine(uow, library["fine"].id)
        assert (fine.member_id, fine.amount) == (library["ada"].id, Decimal("1.00"))

    @staticmethod
    def test_get_missing_fine(uow):
        with pytest.raises(NotFoundError, match=r"Fine \(3\) not found"):
            queries.get_fine(uow, 3)

    @staticmethod
    def test_unpaid_filter(uow, library):
        """A paid fine drops out of the unpaid listing but stays in the full one."""
        assert queries.list_fines(uow, unpaid_only=True) == [library["fine"]]
        with uow:
            uow.fines.mark_paid(library["fine"].id, T0 + days(17))
            uow.commit()
        assert queries.list_fines(uow, unpaid_only=True) == []
        assert len(queries.list_fines(uow)) == 1


def test_list_members(uow, library):
    """Members come back in enrolment order."""
    names = [m.name for m in queries.list_members(uow)]
    assert names == [library["ada"].name, library["bob"].name]
