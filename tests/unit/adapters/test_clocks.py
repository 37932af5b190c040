"""Unit tests for the clock adapters."""

from datetime import datetime, timedelta, timezone

from libris.adapters.clocks import FixedClock, SystemClock


def test_system_clock_is_aware_utc():
    """SystemClock returns the current time in UTC."""
    before = datetime.now(timezone.utc)
    now = SystemClock().now()
    assert now.tzinfo is timezone.utc
    assert before <= now <= datetime.now(timezone.utc)


class TestFixedClock:
    """The manually driven clock."""

    @staticmethod
    def test_naive_start_is_utc():
        """A naive start is taken as UTC."""
        clock = FixedClock(datetime(2026, 1, 1, 12))
        assert clock.now() == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)

    @staticmethod
    def test_aware_start_is_converted():
        """Other offsets are normalised to UTC."""
        mst = timezone(timedelta(hours=-7))
        clock = FixedClock(datetime(2026, 1, 1, 5, tzinfo=mst))
        assert clock.now() == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
        assert clock.now().tzinfo is timezone.utc

    @staticmethod
    def test_stands_still_until_moved():
        """Time only moves on advance or set."""
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        assert clock.now() == clock.now()

        moved = clock.advance(timedelta(days=20))
        assert moved == clock.now() == datetime(2026, 1, 21, tzinfo=timezone.utc)

        clock.set(datetime(2025, 6, 1))
        assert clock.now() == datetime(2025, 6, 1, tzinfo=timezone.utc)
