"""Create books, members, loans and fines tables

Revision ID: 3f9a1c2d7b10
Revises:
Create Date: 2026-10-19

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from libris.adapters.db.sa_types import BIGINT_PK, Cents, UTCDateTime

# deal with alembic stuff
# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2d7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "books",
        sa.Column("id", BIGINT_PK, sa.Identity(always=False, start=1), nullable=False),
        sa.Column("isbn", sa.String(length=13), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column(
            "status",
            sa.String(length=16),
            server_default="available",
            nullable=False,
            comment="Lifecycle state; written only by the book lifecycle manager.",
        ),
        sa.Column("total_copies", sa.Integer(), server_default="1", nullable=False),
        sa.Column(
            "available_copies", sa.Integer(), server_default="1", nullable=False
        ),
        sa.Column(
            "created_at",
            UTCDateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "status IN ('available', 'borrowed', 'reserved', 'maintenance')",
            name=op.f("ck_books_valid_status"),
        ),
        sa.CheckConstraint(
            "total_copies >= 1", name=op.f("ck_books_positive_total_copies")
        ),
        sa.CheckConstraint(
            "available_copies >= 0",
            name=op.f("ck_books_non_negative_available_copies"),
        ),
        sa.CheckConstraint(
            "available_copies <= total_copies",
            name=op.f("ck_books_available_within_total"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_books")),
        sa.UniqueConstraint("isbn", name=op.f("uq_books_isbn")),
        comment="Catalogued titles with their copy counts.",
    )
    op.create_index(
        op.f("ix_books_books_status"), "books", ["status"], unique=False
    )

    op.create_table(
        "members",
        sa.Column("id", BIGINT_PK, sa.Identity(always=False, start=1), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("membership_number", sa.String(length=50), nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            server_default="active",
            nullable=False,
            comment="Eligibility state; written only by the eligibility manager.",
        ),
        sa.Column(
            "created_at",
            UTCDateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "status IN ('active', 'suspended')",
            name=op.f("ck_members_valid_status"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_members")),
        sa.UniqueConstraint("email", name=op.f("uq_members_email")),
        sa.UniqueConstraint(
            "membership_number", name=op.f("uq_members_membership_number")
        ),
        comment="Enrolled library members.",
    )
    op.create_index(
        op.f("ix_members_members_status"), "members", ["status"], unique=False
    )

    op.create_table(
        "loans",
        sa.Column("id", BIGINT_PK, sa.Identity(always=False, start=1), nullable=False),
        sa.Column("book_id", BIGINT_PK, nullable=False),
        sa.Column("member_id", BIGINT_PK, nullable=False),
        sa.Column("borrowed_at", UTCDateTime(timezone=True), nullable=False),
        sa.Column("due_date", UTCDateTime(timezone=True), nullable=False),
        sa.Column("returned_at", UTCDateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.String(length=16),
            server_default="active",
            nullable=False,
            comment="Visibility label; 'overdue' is materialized by the overdue sweep.",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'returned', 'overdue')",
            name=op.f("ck_loans_valid_status"),
        ),
        sa.ForeignKeyConstraint(
            ["book_id"],
            ["books.id"],
            name=op.f("fk_loans_book_id_books"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.id"],
            name=op.f("fk_loans_member_id_members"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_loans")),
        comment="Borrow transactions. One row per loan of one copy.",
    )
    op.create_index(op.f("ix_loans_loans_status"), "loans", ["status"], unique=False)
    op.create_index(
        op.f("ix_loans_loans_member_id"), "loans", ["member_id"], unique=False
    )
    op.create_index(op.f("ix_loans_loans_book_id"), "loans", ["book_id"], unique=False)

    op.create_table(
        "fines",
        sa.Column("id", BIGINT_PK, sa.Identity(always=False, start=1), nullable=False),
        sa.Column("member_id", BIGINT_PK, nullable=False),
        sa.Column(
            "loan_id", BIGINT_PK, nullable=False, comment="At most one fine per loan."
        ),
        sa.Column("amount_cents", Cents(), nullable=False),
        sa.Column("paid_at", UTCDateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            UTCDateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint("amount_cents > 0", name=op.f("ck_fines_positive_amount")),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.id"],
            name=op.f("fk_fines_member_id_members"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["loan_id"],
            ["loans.id"],
            name=op.f("fk_fines_loan_id_loans"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_fines")),
        sa.UniqueConstraint("loan_id", name=op.f("uq_fines_loan_id")),
        comment="Late-return fines. Immutable once created except for paid_at.",
    )
    op.create_index(
        op.f("ix_fines_fines_member_id"), "fines", ["member_id"], unique=False
    )
    op.create_index(op.f("ix_fines_fines_paid_at"), "fines", ["paid_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("fines")
    op.drop_table("loans")
    op.drop_table("members")
    op.drop_table("books")
