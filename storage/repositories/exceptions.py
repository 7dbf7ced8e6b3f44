"""
Repository Layer Exceptions.

============================================================
PURPOSE
============================================================
Failures of the data access layer, raised by repositories in
place of raw SQLAlchemy errors.

============================================================
MAPPING
============================================================

    lookup found no row         -> RecordNotFoundError
    unique / primary key clash  -> DuplicateKeyError
    foreign key / check clash   -> ConstraintViolationError
    store unreachable           -> StoreUnavailableError
    anything else               -> StatementFailedError

The trade order layer turns RecordNotFoundError into its own
NotFoundError. Every other repository exception aborts the
surrounding transaction; `retryable` tells the caller whether
running the whole transaction again can succeed.

============================================================
"""

from typing import Any, Optional


class RepositoryException(Exception):
    """Base exception of the data access layer."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        repository_name: str,
        operation: str,
        details: Optional[dict] = None
    ) -> None:
        self.message = message
        self.repository_name = repository_name
        self.operation = operation
        self.details = details or {}
        super().__init__(f"[{repository_name}] {operation}: {message}")


class RecordNotFoundError(RepositoryException):
    """A row that must exist is absent."""

    def __init__(
        self,
        repository_name: str,
        record_id: Any,
        id_field: str = "id"
    ) -> None:
        super().__init__(
            message=f"no row with {id_field}={record_id}",
            repository_name=repository_name,
            operation="lookup",
            details={id_field: str(record_id)}
        )
        self.record_id = record_id
        self.id_field = id_field


class DuplicateKeyError(RepositoryException):
    """
    An insert collided with an existing key.

    For trades this means the id generator handed out an id that
    is already taken.
    """

    def __init__(
        self,
        repository_name: str,
        key_field: str,
        value: Any
    ) -> None:
        super().__init__(
            message=f"{key_field}={value} already exists",
            repository_name=repository_name,
            operation="insert",
            details={"key_field": key_field, "value": str(value)}
        )
        self.key_field = key_field
        self.value = value


class ConstraintViolationError(RepositoryException):
    """A write referenced a missing parent row or broke a check."""

    def __init__(
        self,
        repository_name: str,
        operation: str,
        reason: str
    ) -> None:
        super().__init__(
            message=f"constraint violated: {reason}",
            repository_name=repository_name,
            operation=operation,
            details={"reason": reason}
        )


class StoreUnavailableError(RepositoryException):
    """The database could not be reached or dropped the connection."""

    retryable = True

    def __init__(
        self,
        repository_name: str,
        operation: str,
        reason: str
    ) -> None:
        super().__init__(
            message=f"store unavailable: {reason}",
            repository_name=repository_name,
            operation=operation,
            details={"reason": reason}
        )


class StatementFailedError(RepositoryException):
    """Any other failure while executing a statement."""

    def __init__(
        self,
        repository_name: str,
        operation: str,
        reason: str
    ) -> None:
        super().__init__(
            message=f"statement failed: {reason}",
            repository_name=repository_name,
            operation=operation,
            details={"reason": reason}
        )
