"""Domain-layer error definitions.

Every error raised on purpose by LIBRIS derives from `LibraryError`. These are
expected outcomes that callers recover from; anything else escaping the
service layer is an unexpected failure.
"""

# ============================================================================
#                           General errors
# ============================================================================


class LibraryError(Exception):
    """Base class for all LIBRIS errors."""


class NotFoundError(LibraryError):
    """Raised when a referenced entity does not exist.

    Attributes:
        kind (str): The kind of entity (e.g. "Book").
        key (object): The identity that was looked up.
    """

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} ({key}) not found")
        self.kind = kind
        self.key = key


class ValidationError(LibraryError):
    """Raised when input is malformed (caller's responsibility)."""


class BusinessRuleError(LibraryError):
    """Raised when an operation would violate a domain invariant."""


class ConflictError(LibraryError):
    """Raised when a storage constraint (unique, foreign key, check) rejects a write.

    Attributes:
        detail (str | None): The driver message, for logs. Not meant for end users.
    """

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class StoreUnavailableError(LibraryError):
    """Raised when the underlying store cannot be reached or is locked."""


# ============================================================================
#                           Book rules
# ============================================================================


class InvalidTransitionError(BusinessRuleError):
    """Raised when a status change is not allowed by the transition table."""

    def __init__(self, kind: str, current: str, target: str) -> None:
        super().__init__(
            f"Cannot transition {kind.lower()} from '{current}' to '{target}'"
        )
        self.kind = kind
        self.current = current
        self.target = target


class BookUnavailableError(BusinessRuleError):
    """Raised when a book has no copy that can be lent out."""

    def __init__(self, book_id: int, message: str | None = None) -> None:
        super().__init__(message or "Book is not available for borrowing")
        self.book_id = book_id


class DirectStatusUpdateError(BusinessRuleError):
    """Raised when an update tries to set a status field directly."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Cannot directly update {kind.lower()} status. "
            "Status is managed through borrowing/returning operations."
        )
        self.kind = kind


# ============================================================================
#                           Member rules
# ============================================================================


class MemberSuspendedError(BusinessRuleError):
    """Raised when a suspended member tries to borrow."""

    def __init__(self, member_id: int) -> None:
        super().__init__("Member is suspended and cannot borrow books")
        self.member_id = member_id


class UnpaidFinesError(BusinessRuleError):
    """Raised when unpaid fines block the requested action."""

    def __init__(self, member_id: int, message: str | None = None) -> None:
        super().__init__(
            message
            or "Cannot borrow books with unpaid fines. Please clear all fines first."
        )
        self.member_id = member_id


class BorrowLimitReachedError(BusinessRuleError):
    """Raised when a member already holds the maximum number of open loans."""

    def __init__(self, member_id: int, limit: int) -> None:
        super().__init__(
            f"Borrowing limit exceeded. Maximum {limit} books can be borrowed at once."
        )
        self.member_id = member_id
        self.limit = limit


class MemberNotSuspendedError(BusinessRuleError):
    """Raised when reactivating a member that is not suspended."""

    def __init__(self, member_id: int) -> None:
        super().__init__("Member is not suspended")
        self.member_id = member_id


class OverdueLimitReachedError(BusinessRuleError):
    """Raised when too many overdue loans block reactivation."""

    def __init__(self, member_id: int, threshold: int) -> None:
        super().__init__(
            f"Cannot reactivate member with {threshold} or more overdue books"
        )
        self.member_id = member_id
        self.threshold = threshold


# ============================================================================
#                           Loan and fine rules
# ============================================================================


class LoanAlreadyReturnedError(BusinessRuleError):
    """Raised when returning a loan that is already closed."""

    def __init__(self, loan_id: int) -> None:
        super().__init__("Book has already been returned")
        self.loan_id = loan_id


class FineAlreadyPaidError(BusinessRuleError):
    """Raised when paying a fine twice."""

    def __init__(self, fine_id: int) -> None:
        super().__init__("Fine has already been paid")
        self.fine_id = fine_id
