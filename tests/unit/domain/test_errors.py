"""Unit tests for domain errors."""

import pytest

from libris.domain import errors


class TestHierarchy:
    """Every deliberate failure is a `LibraryError`."""

    @staticmethod
    @pytest.mark.parametrize(
        "exc",
        [
            errors.NotFoundError("Book", 1),
            errors.ValidationError("bad"),
            errors.ConflictError("dup"),
            errors.StoreUnavailableError("down"),
            errors.BookUnavailableError(1),
            errors.DirectStatusUpdateError("Book"),
            errors.MemberSuspendedError(1),
            errors.UnpaidFinesError(1),
            errors.BorrowLimitReachedError(1, 3),
            errors.MemberNotSuspendedError(1),
            errors.OverdueLimitReachedError(1, 3),
            errors.LoanAlreadyReturnedError(1),
            errors.FineAlreadyPaidError(1),
            errors.InvalidTransitionError("Book", "maintenance", "borrowed"),
        ],
        ids=lambda e: type(e).__name__,
    )
    def test_is_library_error(exc) -> None:
        """Callers can catch the whole family with one except clause."""
        assert isinstance(exc, errors.LibraryError)

    @staticmethod
    def test_rule_errors_are_business_rule_errors() -> None:
        """Refusals driven by circulation rules share a base class."""
        for cls in (
            errors.BookUnavailableError,
            errors.MemberSuspendedError,
            errors.UnpaidFinesError,
            errors.BorrowLimitReachedError,
            errors.LoanAlreadyReturnedError,
            errors.FineAlreadyPaidError,
        ):
            assert issubclass(cls, errors.BusinessRuleError)


class TestNotFoundError:
    """Tests for NotFoundError."""

    @staticmethod
    def test_attributes_and_message() -> None:
        """The message names the kind and the key."""
        error = errors.NotFoundError("Member", 7)
        assert (error.kind, error.key) == ("Member", 7)
        assert str(error) == "Member (7) not found"


class TestConflictError:
    """Tests for ConflictError."""

    @staticmethod
    def test_detail_is_kept_out_of_message() -> None:
        """The driver detail is kept for logs, not shown in the message."""
        error = errors.ConflictError("duplicate", detail="UNIQUE books.isbn")
        assert str(error) == "duplicate"
        assert error.detail == "UNIQUE books.isbn"


class TestMessages:
    """User-facing messages of the circulation errors."""

    @staticmethod
    @pytest.mark.parametrize(
        "exc, message",
        [
            (errors.BookUnavailableError(1), "Book is not available for borrowing"),
            (
                errors.BookUnavailableError(1, "No available copies of this book"),
                "No available copies of this book",
            ),
            (
                errors.MemberSuspendedError(1),
                "Member is suspended and cannot borrow books",
            ),
            (
                errors.UnpaidFinesError(1),
                "Cannot borrow books with unpaid fines. Please clear all fines first.",
            ),
            (
                errors.BorrowLimitReachedError(1, 3),
                "Borrowing limit exceeded. Maximum 3 books can be borrowed at once.",
            ),
            (errors.LoanAlreadyReturnedError(1), "Book has already been returned"),
            (errors.FineAlreadyPaidError(1), "Fine has already been paid"),
            (errors.MemberNotSuspendedError(1), "Member is not suspended"),
            (
                errors.OverdueLimitReachedError(1, 3),
                "Cannot reactivate member with 3 or more overdue books",
            ),
            (
                errors.InvalidTransitionError("Book", "maintenance", "borrowed"),
                "Cannot transition book from 'maintenance' to 'borrowed'",
            ),
            (
                errors.DirectStatusUpdateError("Member"),
                "Cannot directly update member status. "
                "Status is managed through borrowing/returning operations.",
            ),
        ],
    )
    def test_message(exc, message) -> None:
        """Messages are stable; the CLI shows them verbatim."""
        assert str(exc) == message
