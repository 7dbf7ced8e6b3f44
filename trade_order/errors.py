"""
Trade Order - Error Mapping.

============================================================
PURPOSE
============================================================
Maps repository failures onto the workflow's error taxonomy.

- RecordNotFoundError  -> NotFoundError (missing reference row)
- any other repository or SQLAlchemy error propagates and the
  transaction scope turns it into TransactionFailureError

============================================================
"""

from contextlib import contextmanager
from typing import Any, Generator

from core.exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    TradeOrderError,
    TransactionFailureError,
)
from storage.repositories.exceptions import RecordNotFoundError


@contextmanager
def required_row(entity: str, key: Any) -> Generator[None, None, None]:
    """
    Context manager for lookups whose row must exist.

    Usage:
        with required_row("Security", symbol):
            security = securities.get_by_symbol(symbol)
    """
    try:
        yield
    except RecordNotFoundError as e:
        raise NotFoundError(entity, key, cause=e) from e


__all__ = [
    "required_row",
    "TradeOrderError",
    "NotFoundError",
    "InvalidInputError",
    "PermissionDeniedError",
    "TransactionFailureError",
]
