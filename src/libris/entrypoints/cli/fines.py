"""``libris fines``: looking up and paying fines."""

import click
import click_extra as clickx

from libris.service_layer import commands, queries

from .helpers import success
from .helpers.app import get_app, library_errors
from .helpers.tables import fines_table, print_table, stamp


@click.group(cls=clickx.ExtraGroup)
def fines() -> None:
    """List and pay fines."""


@fines.command(name="list")
@click.argument("member_id", type=int, required=False)
@click.option("--unpaid", is_flag=True, help="Only fines not paid yet.")
@library_errors
def list_fines(member_id: int | None, unpaid: bool):
    """List the fines of MEMBER_ID, or of every member when it is omitted."""
    if member_id is None:
        rows = queries.list_fines(get_app().uow, unpaid_only=unpaid)
        print_table(fines_table(rows))
        return
    rows = queries.fines_for_member(get_app().uow, member_id)
    if unpaid:
        rows = [fine for fine in rows if not fine.is_paid]
    print_table(fines_table(rows, title=f"Fines of member {member_id}"))


@fines.command()
@click.argument("fine_id", type=int)
@library_errors
def show(fine_id: int):
    """Show one fine."""
    fine = queries.get_fine(get_app().uow, fine_id)
    click.echo(f"ID      : {fine.id}")
    click.echo(f"Member  : {fine.member_id}")
    click.echo(f"Loan    : {fine.loan_id}")
    click.echo(f"Amount  : {fine.amount:.2f}")
    click.echo(f"Created : {stamp(fine.created_at)}")
    click.echo(f"Paid    : {stamp(fine.paid_at, empty='no')}")


@fines.command()
@click.argument("fine_id", type=int)
@library_errors
def pay(fine_id: int):
    """Mark FINE_ID as paid."""
    fine = get_app().message_bus.handle(commands.PayFine(fine_id=fine_id))
    success(f"Fine {fine.id} of {fine.amount:.2f} paid")
