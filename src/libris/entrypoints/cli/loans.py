"""``libris loans``: lending copies out and taking them back."""

import click
import click_extra as clickx

from libris.service_layer import commands, queries

from .helpers import success, warn
from .helpers.app import get_app, library_errors
from .helpers.tables import loans_table, overdue_table, print_table, stamp


@click.group(cls=clickx.ExtraGroup)
def loans() -> None:
    """Borrow and return books."""


@loans.command()
@click.argument("member_id", type=int)
@click.argument("book_id", type=int)
@library_errors
def borrow(member_id: int, book_id: int):
    """Lend BOOK_ID to MEMBER_ID and print the loan id."""
    loan = get_app().message_bus.handle(
        commands.BorrowBook(member_id=member_id, book_id=book_id)
    )
    success(f"Loan {loan.id} due {loan.due_date:%Y-%m-%d}")
    click.echo(loan.id)


@loans.command(name="return")
@click.argument("loan_id", type=int)
@library_errors
def return_(loan_id: int):
    """Close LOAN_ID, assessing a fine if it is late."""
    receipt = get_app().message_bus.handle(commands.ReturnBook(loan_id=loan_id))
    success(f"Loan {receipt.loan.id} returned")
    if receipt.fine is not None:
        warn(f"Late return: fine {receipt.fine.id} of {receipt.fine.amount:.2f}")
    if receipt.member_suspended:
        warn(f"Member {receipt.loan.member_id} is suspended for overdue books")


@loans.command()
@library_errors
def overdue():
    """Mark past-due loans overdue and list them."""
    rows = get_app().message_bus.handle(commands.ListOverdueLoans())
    if not rows:
        click.echo("No overdue loans.")
        return
    print_table(overdue_table(rows))


@loans.command(name="list")
@click.option("--open", "open_only", is_flag=True, help="Only loans not returned.")
@library_errors
def list_loans(open_only: bool):
    """List every loan, oldest first."""
    rows = queries.list_loans(get_app().uow, open_only=open_only)
    print_table(loans_table(rows))


@loans.command()
@click.argument("loan_id", type=int)
@library_errors
def show(loan_id: int):
    """Show one loan."""
    loan = queries.get_loan(get_app().uow, loan_id)
    click.echo(f"ID       : {loan.id}")
    click.echo(f"Book     : {loan.book_id}")
    click.echo(f"Member   : {loan.member_id}")
    click.echo(f"Borrowed : {stamp(loan.borrowed_at)}")
    click.echo(f"Due      : {stamp(loan.due_date)}")
    click.echo(f"Returned : {stamp(loan.returned_at, empty='no')}")
    click.echo(f"Status   : {loan.status.value}")
