"""Rich tables for listing books, loans and fines on stdout."""

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from libris.domain.model import Book, Fine, Loan, Member, OverdueLoan


def stamp(value, empty: str = "-") -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else empty


def print_table(table: Table) -> None:
    """Render `table` to stdout. Width is not capped when stdout is not a TTY."""
    console = Console()
    if not console.is_terminal:
        console = Console(width=200)
    console.print(table)


def books_table(rows: Iterable[Book], title: str = "Books") -> Table:
    table = Table(title=title)
    for column in ("ID", "ISBN", "Title", "Author", "Category", "Status", "Copies"):
        table.add_column(column)
    for book in rows:
        table.add_row(
            str(book.id),
            book.isbn,
            book.title,
            book.author,
            book.category or "-",
            book.status.value,
            f"{book.available_copies}/{book.total_copies}",
        )
    return table


def loans_table(rows: Iterable[Loan], title: str = "Loans") -> Table:
    table = Table(title=title)
    for column in ("Loan", "Book", "Member", "Borrowed", "Due", "Status"):
        table.add_column(column)
    for loan in rows:
        table.add_row(
            str(loan.id),
            str(loan.book_id),
            str(loan.member_id),
            stamp(loan.borrowed_at),
            stamp(loan.due_date),
            loan.status.value,
        )
    return table


def overdue_table(rows: Iterable[OverdueLoan]) -> Table:
    table = Table(title="Overdue loans")
    for column in ("Loan", "Book", "Title", "Member", "Name", "Due"):
        table.add_column(column)
    for row in rows:
        table.add_row(
            str(row.loan.id),
            str(row.loan.book_id),
            row.book_title,
            str(row.loan.member_id),
            row.member_name,
            stamp(row.loan.due_date),
        )
    return table


def fines_table(rows: Iterable[Fine], title: str = "Fines") -> Table:
    table = Table(title=title)
    for column in ("Fine", "Loan", "Amount", "Created", "Paid"):
        table.add_column(column)
    for fine in rows:
        table.add_row(
            str(fine.id),
            str(fine.loan_id),
            f"{fine.amount:.2f}",
            stamp(fine.created_at),
            stamp(fine.paid_at),
        )
    return table


def members_table(rows: Iterable[Member], title: str = "Members") -> Table:
    table = Table(title=title)
    for column in ("ID", "Name", "Email", "Membership", "Status"):
        table.add_column(column)
    for member in rows:
        table.add_row(
            str(member.id),
            member.name,
            member.email,
            member.membership_number,
            member.status.value,
        )
    return table
