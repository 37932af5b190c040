"""``libris books``: catalogue management and shelf browsing."""

import click
import click_extra as clickx

from libris.domain.unsettable import UNSET
from libris.service_layer import commands, queries

from .helpers import success
from .helpers.app import get_app, library_errors
from .helpers.tables import books_table, print_table


def _given(value):
    return UNSET if value is None else value


@click.group(cls=clickx.ExtraGroup)
def books() -> None:
    """Catalogue books and browse the shelf."""


@books.command()
@click.argument("isbn")
@click.argument("title")
@click.argument("author")
@click.option("--copies", "total_copies", type=click.IntRange(min=1), default=1)
@click.option("--category", default=None, help="Shelf category, e.g. Fiction.")
@library_errors
def add(isbn: str, title: str, author: str, total_copies: int, category: str | None):
    """Catalogue a new book and print its id."""
    book = get_app().message_bus.handle(
        commands.AddBook(
            isbn=isbn,
            title=title,
            author=author,
            total_copies=total_copies,
            category=category,
        )
    )
    success(f"Catalogued '{book.title}' with {book.total_copies} copies")
    click.echo(book.id)


@books.command()
@click.argument("book_id", type=int)
@click.option("--isbn", default=None)
@click.option("--title", default=None)
@click.option("--author", default=None)
@click.option("--category", default=None)
@click.option("--clear-category", is_flag=True, help="Remove the category.")
@click.option("--copies", "total_copies", type=int, default=None)
@click.option(
    "--status",
    default=None,
    help="Not allowed: status follows borrowing and returning.",
    hidden=True,
)
@library_errors
def update(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    book_id: int,
    isbn: str | None,
    title: str | None,
    author: str | None,
    category: str | None,
    clear_category: bool,
    total_copies: int | None,
    status: str | None,
):
    """Change a book's descriptive fields or copy count."""
    if clear_category and category is not None:
        raise click.UsageError("--category and --clear-category are exclusive")
    book = get_app().message_bus.handle(
        commands.UpdateBook(
            book_id=book_id,
            isbn=_given(isbn),
            title=_given(title),
            author=_given(author),
            category=None if clear_category else _given(category),
            total_copies=_given(total_copies),
            status=_given(status),
        )
    )
    success(f"Book {book.id} updated")


@books.command()
@click.argument("book_id", type=int)
@click.confirmation_option(prompt="Remove this book and its loan history?")
@library_errors
def remove(book_id: int):
    """Delete a book together with its loans."""
    get_app().message_bus.handle(commands.RemoveBook(book_id=book_id))
    success(f"Book {book_id} removed")


@books.command()
@click.argument("book_id", type=int)
@library_errors
def show(book_id: int):
    """Show one book."""
    book = queries.get_book(get_app().uow, book_id)
    click.echo(f"ID       : {book.id}")
    click.echo(f"ISBN     : {book.isbn}")
    click.echo(f"Title    : {book.title}")
    click.echo(f"Author   : {book.author}")
    click.echo(f"Category : {book.category or '-'}")
    click.echo(f"Status   : {book.status.value}")
    click.echo(f"Copies   : {book.available_copies}/{book.total_copies} available")


@books.command(name="list")
def list_books():
    """List the whole catalogue."""
    print_table(books_table(queries.list_books(get_app().uow)))


@books.command()
def available():
    """List books that can be borrowed right now."""
    print_table(books_table(queries.available_books(get_app().uow), "Available books"))
