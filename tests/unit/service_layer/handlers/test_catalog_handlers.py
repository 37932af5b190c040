"""Unit tests for the book and member maintenance handlers."""

import pytest

from libris.domain.errors import (
    BusinessRuleError,
    ConflictError,
    DirectStatusUpdateError,
    NotFoundError,
    ValidationError,
)
from libris.domain.model import BookStatus, MemberStatus
from libris.service_layer import commands

from tests.fixtures.datagen import T0, days, seed_book, seed_member, seed_open_loan

from .base import HandlerTestBase

# pylint: disable=magic-value-comparison
# pylint: disable=attribute-defined-outside-init


class TestAddBook(HandlerTestBase):
    """Cataloguing books."""

    def test_add(self):
        """A new book starts available with every copy on the shelf."""
        book = self.bus.handle(
            commands.AddBook(
                isbn="9780441013593",
                title="Dune",
                author="Frank Herbert",
                total_copies=3,
                category="Fiction",
            )
        )

        assert book.id is not None
        assert book.status is BookStatus.AVAILABLE
        assert (book.total_copies, book.available_copies) == (3, 3)
        assert self.uow.books.get(book.id) == book
        self.assert_committed()

    def test_explicit_available_copies(self):
        """An explicit available count is honoured when within range."""
        book = self.bus.handle(
            commands.AddBook(
                isbn="1", title="T", author="A", total_copies=3, available_copies=1
            )
        )
        assert book.available_copies == 1

    def test_no_copy_on_the_shelf(self):
        """A book catalogued with nothing on the shelf starts out borrowed."""
        book = self.bus.handle(
            commands.AddBook(
                isbn="1", title="T", author="A", total_copies=2, available_copies=0
            )
        )

        assert (book.available_copies, book.status) == (0, BookStatus.BORROWED)
        assert self.uow.books.list_all(available_only=True) == []

    @pytest.mark.parametrize(
        "total, available",
        [(0, None), (-2, None), (2, 3), (2, -1)],
    )
    def test_invalid_counts(self, total, available):
        """Copy counts outside the allowed range are rejected before storage."""
        with pytest.raises(ValidationError):
            self.bus.handle(
                commands.AddBook(
                    isbn="1",
                    title="T",
                    author="A",
                    total_copies=total,
                    available_copies=available,
                )
            )
        assert not self.uow.books.list_all()
        self.assert_not_committed()

    def test_duplicate_isbn(self):
        """A second book with the same ISBN is a conflict."""
        self.bus.handle(commands.AddBook(isbn="111", title="A", author="X"))
        self.reset_committed()

        with pytest.raises(ConflictError, match="already exists"):
            self.bus.handle(commands.AddBook(isbn="111", title="B", author="Y"))

        assert len(self.uow.books.list_all()) == 1
        self.assert_not_committed()


class TestUpdateBook(HandlerTestBase):
    """Patching books."""

    def _seed(self):
        self.member = seed_member(self.uow)
        self.book = seed_book(self.uow, total_copies=3, category="Fiction")
        seed_open_loan(self.uow, self.member.id, self.book.id, T0)
        seed_open_loan(self.uow, self.member.id, self.book.id, T0)

    def test_descriptive_fields(self):
        """Only the given fields change."""
        book = self.bus.handle(commands.UpdateBook(self.book.id, title="New title"))

        assert book.title == "New title"
        assert book.author == self.book.author
        assert book.category == "Fiction"
        self.assert_committed()

    def test_clear_category(self):
        """Category may be cleared with None."""
        book = self.bus.handle(commands.UpdateBook(self.book.id, category=None))
        assert book.category is None

    def test_title_cannot_be_cleared(self):
        """Required fields cannot be cleared."""
        with pytest.raises(ValidationError, match="title cannot be cleared"):
            self.bus.handle(commands.UpdateBook(self.book.id, title=None))

    @pytest.mark.parametrize("status", ["maintenance", BookStatus.AVAILABLE])
    def test_status_rejected(self, status):
        """Setting status directly is always refused."""
        with pytest.raises(DirectStatusUpdateError, match="Cannot directly update"):
            self.bus.handle(commands.UpdateBook(self.book.id, status=status))

        assert self.uow.books.get(self.book.id).status is BookStatus.AVAILABLE
        self.assert_not_committed()

    def test_status_rejected_even_with_other_fields(self):
        """A patch carrying status is rejected as a whole."""
        with pytest.raises(DirectStatusUpdateError):
            self.bus.handle(
                commands.UpdateBook(self.book.id, title="X", status="borrowed")
            )
        assert self.uow.books.get(self.book.id).title == self.book.title

    def test_raise_total_shifts_available(self):
        """Adding copies adds them to the shelf; copies on loan are kept."""
        book = self.bus.handle(commands.UpdateBook(self.book.id, total_copies=5))

        assert (book.total_copies, book.available_copies) == (5, 3)

    def test_lower_total_to_copies_on_loan(self):
        """Dropping the total to the copies on loan empties the shelf."""
        book = self.bus.handle(commands.UpdateBook(self.book.id, total_copies=2))

        assert (book.total_copies, book.available_copies) == (2, 0)
        assert book.status is BookStatus.BORROWED
        assert self.uow.books.get(self.book.id).status is BookStatus.BORROWED

    def test_raise_total_on_borrowed_book(self):
        """New copies put a fully lent book back on the shelf, ready to borrow."""
        self.bus.handle(commands.UpdateBook(self.book.id, total_copies=2))

        book = self.bus.handle(commands.UpdateBook(self.book.id, total_copies=3))

        assert (book.available_copies, book.status) == (1, BookStatus.AVAILABLE)
        loan = self.bus.handle(commands.BorrowBook(self.member.id, self.book.id))
        assert loan.book_id == self.book.id
        assert self.uow.books.get(self.book.id).status is BookStatus.BORROWED

    def test_maintenance_left_alone(self):
        """A book in maintenance keeps its status whatever the shelf count."""
        with self.uow:
            self.uow.books.set_status(self.book.id, BookStatus.MAINTENANCE)
            self.uow.commit()

        book = self.bus.handle(commands.UpdateBook(self.book.id, total_copies=2))

        assert (book.available_copies, book.status) == (0, BookStatus.MAINTENANCE)

    def test_lower_total_below_copies_on_loan(self):
        """The total may not drop below the copies on loan."""
        with pytest.raises(BusinessRuleError, match="2 copies are on loan"):
            self.bus.handle(commands.UpdateBook(self.book.id, total_copies=1))

    def test_total_below_one(self):
        """A total below one is invalid."""
        with pytest.raises(ValidationError, match="at least 1"):
            self.bus.handle(commands.UpdateBook(self.book.id, total_copies=0))

    def test_isbn_taken(self):
        """Changing to another book's ISBN is a conflict and writes nothing."""
        other = seed_book(self.uow)

        with pytest.raises(ConflictError):
            self.bus.handle(commands.UpdateBook(self.book.id, isbn=other.isbn))
        assert self.uow.books.get(self.book.id).isbn == self.book.isbn

    def test_unknown_book(self):
        """Patching an unknown book raises NotFoundError."""
        with pytest.raises(NotFoundError):
            self.bus.handle(commands.UpdateBook(999, title="X"))


class TestRemoveBook(HandlerTestBase):
    """Deleting books."""

    def _seed(self):
        self.member = seed_member(self.uow)
        self.book = seed_book(self.uow)
        self.loan = seed_open_loan(
            self.uow, self.member.id, self.book.id, T0 - days(20)
        )
        self.fine = self.bus.handle(commands.ReturnBook(self.loan.id)).fine

    def test_remove_cascades(self):
        """The book's loans and their fines go with it; the member stays."""
        self.bus.handle(commands.RemoveBook(self.book.id))

        assert self.uow.books.get(self.book.id) is None
        assert self.uow.loans.get(self.loan.id) is None
        assert self.uow.fines.get(self.fine.id) is None
        assert self.uow.members.get(self.member.id) is not None
        self.assert_committed()

    def test_unknown_book(self):
        """Removing an unknown book raises NotFoundError."""
        with pytest.raises(NotFoundError):
            self.bus.handle(commands.RemoveBook(999))
        self.assert_not_committed()


class TestEnrollMember(HandlerTestBase):
    """Enrolling members."""

    def test_enroll(self):
        """A new member starts active."""
        member = self.bus.handle(
            commands.EnrollMember(
                name="Ada", email="ada@example.org", membership_number="M-1"
            )
        )

        assert member.status is MemberStatus.ACTIVE
        assert self.uow.members.get(member.id) == member
        self.assert_committed()

    @pytest.mark.parametrize(
        "email, number",
        [("ada@example.org", "M-2"), ("other@example.org", "M-1")],
        ids=["email", "membership-number"],
    )
    def test_duplicates(self, email, number):
        """Email and membership number are unique."""
        self.bus.handle(
            commands.EnrollMember(
                name="Ada", email="ada@example.org", membership_number="M-1"
            )
        )

        with pytest.raises(ConflictError):
            self.bus.handle(
                commands.EnrollMember(name="Bo", email=email, membership_number=number)
            )
        assert len(self.uow.members.list_all()) == 1


class TestUpdateMember(HandlerTestBase):
    """Patching members."""

    def _seed(self):
        self.member = seed_member(self.uow, name="Ada")
        self.other = seed_member(self.uow)

    def test_update_contact(self):
        """Name and email change; membership number does not."""
        member = self.bus.handle(
            commands.UpdateMember(self.member.id, email="new@example.org")
        )

        assert member.email == "new@example.org"
        assert member.name == "Ada"
        assert member.membership_number == self.member.membership_number
        self.assert_committed()

    def test_status_rejected(self):
        """Setting member status directly is always refused."""
        with pytest.raises(DirectStatusUpdateError, match="member status"):
            self.bus.handle(commands.UpdateMember(self.member.id, status="suspended"))

        assert self.uow.members.get(self.member.id).status is MemberStatus.ACTIVE
        self.assert_not_committed()

    def test_email_taken(self):
        """Taking another member's email is a conflict."""
        with pytest.raises(ConflictError):
            self.bus.handle(
                commands.UpdateMember(self.member.id, email=self.other.email)
            )

    def test_name_cannot_be_cleared(self):
        """Name is required."""
        with pytest.raises(ValidationError):
            self.bus.handle(commands.UpdateMember(self.member.id, name=None))

    def test_unknown_member(self):
        """Patching an unknown member raises NotFoundError."""
        with pytest.raises(NotFoundError):
            self.bus.handle(commands.UpdateMember(999, name="X"))


class TestRemoveMember(HandlerTestBase):
    """Deleting members."""

    def _seed(self):
        self.member = seed_member(self.uow)
        self.book = seed_book(self.uow)
        self.loan = seed_open_loan(
            self.uow, self.member.id, self.book.id, T0 - days(20)
        )
        self.fine = self.bus.handle(commands.ReturnBook(self.loan.id)).fine

    def test_remove_cascades(self):
        """Loans and fines go with the member; the book stays."""
        self.bus.handle(commands.RemoveMember(self.member.id))

        assert self.uow.members.get(self.member.id) is None
        assert self.uow.loans.get(self.loan.id) is None
        assert self.uow.fines.get(self.fine.id) is None
        assert self.uow.books.get(self.book.id) is not None

    def test_unknown_member(self):
        """Removing an unknown member raises NotFoundError."""
        with pytest.raises(NotFoundError):
            self.bus.handle(commands.RemoveMember(999))
