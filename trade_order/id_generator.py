"""
Trade Order - Trade Identifier Generation.

============================================================
PURPOSE
============================================================
Hands out trade identifiers to the commit writer.

Identifiers are globally unique and never decrease. They need
not be gap-free: an identifier taken by a trade whose
transaction later rolls back is simply never used.

============================================================
IMPLEMENTATIONS
============================================================
- SequenceTradeIdGenerator: database sequence (nextval);
  production, PostgreSQL
- InMemoryTradeIdGenerator: process-local counter; tests and
  single-process runs

============================================================
"""

import itertools
import logging
import threading
from abc import ABC, abstractmethod

from sqlalchemy import Sequence, select
from sqlalchemy.engine import Engine

from storage.models.trades import TRADE_ID_SEQUENCE


logger = logging.getLogger(__name__)


class TradeIdGenerator(ABC):
    """Source of new trade identifiers."""

    @abstractmethod
    def next(self) -> int:
        """Return a fresh trade identifier."""
        pass


class InMemoryTradeIdGenerator(TradeIdGenerator):
    """
    Thread-safe in-process counter.

    Unique only within one process; use a sequence when several
    processes write to the same store.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


class SequenceTradeIdGenerator(TradeIdGenerator):
    """
    Database sequence backed generator.

    nextval runs on its own connection, outside the caller's
    transaction, so a rolled back trade never returns its id.
    """

    def __init__(self, engine: Engine, sequence: Sequence = TRADE_ID_SEQUENCE):
        self._engine = engine
        self._sequence = sequence

    def next(self) -> int:
        with self._engine.connect() as conn:
            value = conn.execute(select(self._sequence.next_value())).scalar_one()
            conn.commit()

        logger.debug(f"Sequence {self._sequence.name} issued trade id {value}")
        return int(value)
