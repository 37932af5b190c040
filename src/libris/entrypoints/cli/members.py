"""``libris members``: enrolment and member standing."""

import click
import click_extra as clickx

from libris.domain.unsettable import UNSET
from libris.service_layer import commands, queries

from .helpers import success
from .helpers.app import get_app, library_errors
from .helpers.tables import loans_table, members_table, print_table


@click.group(cls=clickx.ExtraGroup)
def members() -> None:
    """Enrol members and manage their standing."""


@members.command()
@click.argument("name")
@click.argument("email")
@click.argument("membership_number")
@library_errors
def enroll(name: str, email: str, membership_number: str):
    """Enrol a new member and print their id."""
    member = get_app().message_bus.handle(
        commands.EnrollMember(
            name=name, email=email, membership_number=membership_number
        )
    )
    success(f"Enrolled {member.name} ({member.membership_number})")
    click.echo(member.id)


@members.command()
@click.argument("member_id", type=int)
@click.option("--name", default=None)
@click.option("--email", default=None)
@click.option(
    "--status",
    default=None,
    hidden=True,
    help="Not allowed: use 'libris members reactivate'.",
)
@library_errors
def update(member_id: int, name: str | None, email: str | None, status: str | None):
    """Change a member's name or email."""
    member = get_app().message_bus.handle(
        commands.UpdateMember(
            member_id=member_id,
            name=UNSET if name is None else name,
            email=UNSET if email is None else email,
            status=UNSET if status is None else status,
        )
    )
    success(f"Member {member.id} updated")


@members.command()
@click.argument("member_id", type=int)
@click.confirmation_option(prompt="Remove this member with their loans and fines?")
@library_errors
def remove(member_id: int):
    """Delete a member together with their loans and fines."""
    get_app().message_bus.handle(commands.RemoveMember(member_id=member_id))
    success(f"Member {member_id} removed")


@members.command(name="list")
@library_errors
def list_members():
    """List every member."""
    print_table(members_table(queries.list_members(get_app().uow)))


@members.command()
@click.argument("member_id", type=int)
@library_errors
def show(member_id: int):
    """Show one member."""
    member = queries.get_member(get_app().uow, member_id)
    click.echo(f"ID         : {member.id}")
    click.echo(f"Name       : {member.name}")
    click.echo(f"Email      : {member.email}")
    click.echo(f"Membership : {member.membership_number}")
    click.echo(f"Status     : {member.status.value}")


@members.command()
@click.argument("member_id", type=int)
@library_errors
def loans(member_id: int):
    """List the member's books that are still out."""
    rows = queries.open_loans_for(get_app().uow, member_id)
    print_table(loans_table(rows, title=f"Open loans of member {member_id}"))


@members.command()
@click.argument("member_id", type=int)
@library_errors
def reactivate(member_id: int):
    """Lift a suspension once fines are paid and overdue books are back."""
    member = get_app().message_bus.handle(
        commands.ReactivateMember(member_id=member_id)
    )
    success(f"Member {member.id} is active again")
