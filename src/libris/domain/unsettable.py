"""Tri-state patch fields.

Update commands and patches use ``Unsettable[T]`` fields, which tell three
cases apart:

* ``UNSET``: leave the stored value alone (the default for every field);
* ``None``: clear the value, where the field allows it;
* a value of type ``T``: store it.
"""

from enum import Enum
from typing import TypeVar

from .errors import ValidationError


class _Unset(Enum):
    """Single-member enum, so the sentinel survives pickling and copying."""

    UNSET = "UNSET"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return self.value


UNSET = _Unset.UNSET

T = TypeVar("T")
type Unsettable[T] = T | _Unset | None


def is_set(value: object) -> bool:
    """True for anything but ``UNSET``; ``None`` and falsy values count as set."""
    return value is not UNSET


def resolve(
    value: Unsettable[T], current: T, *, clearable: bool, field: str
) -> T | None:
    """Apply one patch field to the value currently stored.

    Raises:
        ValidationError: If ``None`` is given for a field that cannot be cleared.
    """
    if value is UNSET:
        return current
    if value is None and not clearable:
        raise ValidationError(f"{field} cannot be cleared")
    return value  # type: ignore[return-value]
