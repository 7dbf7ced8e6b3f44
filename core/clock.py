"""
Core Module - Trade Clock.

============================================================
RESPONSIBILITY
============================================================
Source of the timestamps written with every trade.

A committed order takes ONE reading: the trade row and its
first history entry carry the same instant. Readings are
timezone-aware UTC; naive datetimes handed in are taken as UTC.

============================================================
TESTING
============================================================
MockClock pins time. With a `step` it moves forward on every
reading, so a run of orders gets strictly increasing trade
timestamps and "newest first" listings are deterministic.

    clock = MockClock(datetime(2024, 6, 3, 14, 30), step=timedelta(seconds=1))
    service = TradeOrderService(factory, ids, clock=clock)

============================================================
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional
import threading


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime, convert an aware one."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ClockProtocol(ABC):
    """Anything that can stamp a trade."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant, UTC."""


class SystemClock(ClockProtocol):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class MockClock(ClockProtocol):
    """
    Hand-driven clock for tests and replays.

    Args:
        initial_time: First reading (defaults to the wall clock)
        step: Added after every reading; None keeps time frozen
    """

    def __init__(
        self,
        initial_time: Optional[datetime] = None,
        step: Optional[timedelta] = None,
    ):
        self._current = ensure_utc(initial_time or datetime.now(timezone.utc))
        self._step = step
        self._guard = threading.Lock()

    def now(self) -> datetime:
        with self._guard:
            reading = self._current
            if self._step is not None:
                self._current = reading + self._step
            return reading


class ClockFactory:
    """Holder of the process-wide clock used when none is injected."""

    _clock: Optional[ClockProtocol] = None
    _guard = threading.Lock()

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        with cls._guard:
            if cls._clock is None:
                cls._clock = SystemClock()
            return cls._clock

    @classmethod
    @contextmanager
    def use_mock(
        cls,
        initial_time: Optional[datetime] = None,
        step: Optional[timedelta] = None,
    ) -> Generator[MockClock, None, None]:
        """Install a MockClock as the process-wide clock for the block."""
        mock = MockClock(initial_time, step=step)
        with cls._guard:
            previous, cls._clock = cls._clock, mock
        try:
            yield mock
        finally:
            with cls._guard:
                cls._clock = previous


__all__ = [
    "ensure_utc",
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
]
