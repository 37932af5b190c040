"""Relational schema for LIBRIS.

Defines the shared `MetaData` (with a deterministic naming convention so
Alembic autogenerate stays stable) and the four circulation tables.

Constraints (enforced here):

| Constraint                                    | Purpose                        |
|-----------------------------------------------|--------------------------------|
| UNIQUE(books.isbn)                            | one catalogue entry per ISBN   |
| UNIQUE(members.email), UNIQUE(membership_no)  | one enrollment per person      |
| CHECK(total_copies >= 1)                      | a book has at least one copy   |
| CHECK(0 <= available_copies <= total_copies)  | copy-count bounds              |
| CHECK(status IN ...)                          | enum domains                   |
| CHECK(amount_cents > 0)                       | fines are strictly positive    |
| FK loans → books/members ON DELETE CASCADE    | history goes with its parent   |
| FK fines → members/loans ON DELETE CASCADE    | fines go with member or loan   |
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Identity,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    text,
)

from .sa_types import BIGINT_PK, Cents, UTCDateTime

__all__ = ["metadata", "books", "members", "loans", "fines"]

#: Global metadata with enforced naming convention.
#: All LIBRIS tables must attach to this metadata object.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


books = Table(
    "books",
    metadata,
    Column("id", BIGINT_PK, Identity(start=1), primary_key=True),
    Column("isbn", String(13), nullable=False, unique=True),
    Column("title", String(255), nullable=False),
    Column("author", String(255), nullable=False),
    Column("category", String(100), nullable=True),
    Column(
        "status",
        String(16),
        nullable=False,
        server_default="available",
        comment="Lifecycle state; written only by the book lifecycle manager.",
    ),
    Column("total_copies", Integer, nullable=False, server_default="1"),
    Column("available_copies", Integer, nullable=False, server_default="1"),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    CheckConstraint(
        "status IN ('available', 'borrowed', 'reserved', 'maintenance')",
        name="valid_status",
    ),
    CheckConstraint("total_copies >= 1", name="positive_total_copies"),
    CheckConstraint("available_copies >= 0", name="non_negative_available_copies"),
    CheckConstraint(
        "available_copies <= total_copies", name="available_within_total"
    ),
    Index(None, "status"),
    comment="Catalogued titles with their copy counts.",
)


members = Table(
    "members",
    metadata,
    Column("id", BIGINT_PK, Identity(start=1), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("membership_number", String(50), nullable=False, unique=True),
    Column(
        "status",
        String(16),
        nullable=False,
        server_default="active",
        comment="Eligibility state; written only by the eligibility manager.",
    ),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    CheckConstraint("status IN ('active', 'suspended')", name="valid_status"),
    Index(None, "status"),
    comment="Enrolled library members.",
)


loans = Table(
    "loans",
    metadata,
    Column("id", BIGINT_PK, Identity(start=1), primary_key=True),
    Column(
        "book_id",
        BIGINT_PK,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "member_id",
        BIGINT_PK,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("borrowed_at", UTCDateTime(), nullable=False),
    Column("due_date", UTCDateTime(), nullable=False),
    Column("returned_at", UTCDateTime(), nullable=True),
    Column(
        "status",
        String(16),
        nullable=False,
        server_default="active",
        comment="Visibility label; 'overdue' is materialized by the overdue sweep.",
    ),
    CheckConstraint(
        "status IN ('active', 'returned', 'overdue')", name="valid_status"
    ),
    Index(None, "status"),
    Index(None, "member_id"),
    Index(None, "book_id"),
    comment="Borrow transactions. One row per loan of one copy.",
)


fines = Table(
    "fines",
    metadata,
    Column("id", BIGINT_PK, Identity(start=1), primary_key=True),
    Column(
        "member_id",
        BIGINT_PK,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "loan_id",
        BIGINT_PK,
        ForeignKey("loans.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="At most one fine per loan.",
    ),
    Column("amount_cents", Cents(), nullable=False),
    Column("paid_at", UTCDateTime(), nullable=True),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    CheckConstraint("amount_cents > 0", name="positive_amount"),
    Index(None, "member_id"),
    Index(None, "paid_at"),
    comment="Late-return fines. Immutable once created except for paid_at.",
)
