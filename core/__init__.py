"""
Core Module Package.

This package contains the core infrastructure components
that all other modules depend on.

Components:
- clock: Unified time abstraction
- exceptions: Custom exception hierarchy
- constants: Reference codes of the brokerage dataset
"""

from .clock import ClockFactory, ClockProtocol, MockClock, SystemClock
from .exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    TradeOrderError,
    TradingException,
    TransactionFailureError,
)
