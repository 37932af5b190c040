"""Terminal message helpers for the LIBRIS CLI.

Status lines go to **stderr** so stdout stays clean for tables and ids that
may be piped elsewhere. Each line starts with an emoji, or an ASCII marker
when stderr cannot encode it.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
FAILURE = ("❌", "[X]")  # pragma: no mutate


def glyph(pair: tuple[str, str]) -> str:
    """Return the emoji of `pair` if stderr can encode it, else its fallback.

    Example:
        >>> glyph(SUCCESS) in {"✅", "[OK]"}
        True
    """
    emoji, fallback = pair
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except UnicodeEncodeError:
        return fallback
    return emoji


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr."""
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr."""
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr.

    Example:
        ``❌  Member is suspended and cannot borrow books``
    """
    click.secho(f"{glyph(FAILURE)}  {msg}", fg="red", bold=True, err=True)
