"""
Clock Tests.
"""

from datetime import datetime, timedelta, timezone

from core.clock import ClockFactory, MockClock, SystemClock, ensure_utc
from trade_order.commit_writer import TradeCommitWriter
from trade_order.id_generator import InMemoryTradeIdGenerator


class TestClock:
    """Tests for the clock abstraction."""

    def test_system_clock_is_utc(self):
        assert SystemClock().now().tzinfo == timezone.utc

    def test_frozen_mock_clock(self):
        start = datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)
        clock = MockClock(start)

        assert clock.now() == start
        assert clock.now() == start

    def test_stepping_clock_increases_per_reading(self):
        start = datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)
        clock = MockClock(start, step=timedelta(seconds=1))

        readings = [clock.now() for _ in range(3)]

        assert readings == [start + timedelta(seconds=n) for n in range(3)]

    def test_naive_start_is_utc(self):
        clock = MockClock(datetime(2024, 1, 1))

        assert clock.now() == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_ensure_utc_converts_offsets(self):
        eastern = timezone(timedelta(hours=-4))

        converted = ensure_utc(datetime(2024, 6, 3, 10, 30, tzinfo=eastern))

        assert converted == datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)
        assert converted.tzinfo == timezone.utc


class TestClockFactory:

    def test_writer_defaults_to_process_clock(self):
        original = ClockFactory.get_clock()
        fixed = datetime(2024, 6, 3, tzinfo=timezone.utc)

        with ClockFactory.use_mock(fixed) as mock:
            writer = TradeCommitWriter(InMemoryTradeIdGenerator())
            assert ClockFactory.get_clock() is mock
            assert writer._clock is mock

        assert ClockFactory.get_clock() is original
