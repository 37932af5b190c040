"""Unit tests for the list_overdue_loans handler."""

from libris.domain.model import LoanStatus
from libris.service_layer import commands

from tests.fixtures.datagen import T0, days, seed_book, seed_member, seed_open_loan

from .base import HandlerTestBase

# pylint: disable=magic-value-comparison
# pylint: disable=attribute-defined-outside-init


class TestListOverdueLoans(HandlerTestBase):
    """The overdue sweep relabels past-due loans and reports them."""

    def _seed(self):
        self.alice = seed_member(self.uow, name="Alice")
        self.bob = seed_member(self.uow, name="Bob")
        self.dune = seed_book(self.uow, title="Dune")
        self.emma = seed_book(self.uow, title="Emma")
        self.late = seed_open_loan(self.uow, self.alice.id, self.dune.id, T0 - days(20))
        self.fresh = seed_open_loan(self.uow, self.bob.id, self.emma.id, T0)

    def test_empty_when_nothing_is_late(self):
        """With no past-due loans the report is empty."""
        self.clock.set(T0 - days(10))
        assert self.bus.handle(commands.ListOverdueLoans()) == []

    def test_reports_past_due_loan_with_names(self):
        """Each row carries the loan, the book title and the member name."""
        rows = self.bus.handle(commands.ListOverdueLoans())

        assert len(rows) == 1
        (row,) = rows
        assert row.loan.id == self.late.id
        assert row.loan.status is LoanStatus.OVERDUE
        assert row.book_title == "Dune"
        assert row.member_name == "Alice"

    def test_relabel_is_persisted(self):
        """The relabel is committed, not just reported."""
        self.bus.handle(commands.ListOverdueLoans())

        self.assert_committed()
        assert self.uow.loans.get(self.late.id).status is LoanStatus.OVERDUE
        assert self.uow.loans.get(self.fresh.id).status is LoanStatus.ACTIVE

    def test_idempotent(self):
        """Running the sweep twice at the same instant gives the same report."""
        first = self.bus.handle(commands.ListOverdueLoans())
        second = self.bus.handle(commands.ListOverdueLoans())

        assert first == second

    def test_later_sweep_picks_up_new_loans(self):
        """Loans that fall due between sweeps join the report."""
        self.bus.handle(commands.ListOverdueLoans())
        self.clock.advance(days(15))

        rows = self.bus.handle(commands.ListOverdueLoans())

        assert [r.loan.id for r in rows] == [self.late.id, self.fresh.id]

    def test_returned_loans_leave_the_report(self):
        """A returned overdue loan is no longer listed."""
        self.bus.handle(commands.ListOverdueLoans())
        self.bus.handle(commands.ReturnBook(self.late.id))

        assert self.bus.handle(commands.ListOverdueLoans()) == []
        assert self.uow.loans.get(self.late.id).status is LoanStatus.RETURNED

    def test_returning_overdue_loan_still_fines(self):
        """The overdue label does not change how the return is handled."""
        self.bus.handle(commands.ListOverdueLoans())

        receipt = self.bus.handle(commands.ReturnBook(self.late.id))

        assert receipt.fine is not None
        assert receipt.loan.status is LoanStatus.RETURNED
