"""Custom SQLAlchemy types for LIBRIS.

These types encapsulate small, backend-aware behaviors while preserving clear
Python-side types: timestamps are always aware UTC ``datetime`` objects and
money is always a ``Decimal``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import BigInteger, Integer
from sqlalchemy.types import DateTime, TypeDecorator

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["BIGINT_PK", "UTCDateTime", "Cents"]


BIGINT_PK = BigInteger().with_variant(Integer(), "sqlite")

_CENTS_PER_UNIT = Decimal(100)
_SQLITE = "sqlite"


class UTCDateTime(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """Timezone-aware UTC datetime.

    Ensures values are stored and returned as aware ``datetime`` objects in UTC.
    Naive datetimes are treated as UTC. On SQLite values are stored as naive
    UTC so string comparison in ``WHERE due_date < :now`` stays chronological.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None) if dialect.name == _SQLITE else value

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            # SQLite returns naive values; they are stored as UTC
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value

    def process_literal_param(self, value: datetime | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[datetime]:
        return datetime


class Cents(TypeDecorator[Decimal]):  # pylint: disable=too-many-ancestors
    """Currency amount stored as an integer number of cents.

    Python side is a ``Decimal`` with two places; amounts with sub-cent
    precision are rejected rather than rounded.
    """

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        cents = Decimal(value) * _CENTS_PER_UNIT
        if cents != cents.to_integral_value():
            raise ValueError(f"amount {value} has sub-cent precision")
        return int(cents)

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return (Decimal(int(value)) / _CENTS_PER_UNIT).quantize(Decimal("0.01"))

    def process_literal_param(self, value: Decimal | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[Decimal]:
        return Decimal
