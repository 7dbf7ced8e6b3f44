"""
Base Repository Class.

============================================================
PURPOSE
============================================================
Shared plumbing for the brokerage repositories: primary key
lookups, select helpers, flushed inserts and translation of
SQLAlchemy errors into repository exceptions.

============================================================
TRANSACTIONS
============================================================
A repository works inside the session it is handed and never
commits or rolls back. The trade order workflow opens one
transaction_scope per operation and builds the repositories it
needs on that session.

    with transaction_scope(factory) as session:
        account = CustomerAccountRepository(session).get_account(1000)

============================================================
"""

import logging
from abc import ABC
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.engine import Row
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError as SQLAlchemyIntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session

from storage.models.base import Base
from storage.repositories.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    RepositoryException,
    StatementFailedError,
    StoreUnavailableError,
)


T = TypeVar("T", bound=Base)

_UNIQUE_MARKERS = ("unique", "duplicate key")


def translate_db_error(
    error: SQLAlchemyError,
    repository_name: str,
    operation: str,
    key_field: str = "unknown",
    key_value: Any = "unknown",
) -> RepositoryException:
    """
    Map a SQLAlchemy error onto the repository exception family.

    Disconnects and operational failures become StoreUnavailableError,
    unique key clashes DuplicateKeyError, other integrity failures
    ConstraintViolationError and the rest StatementFailedError.
    """
    reason = str(getattr(error, "orig", None) or error)

    if isinstance(error, OperationalError) or (
        isinstance(error, DBAPIError) and error.connection_invalidated
    ):
        return StoreUnavailableError(repository_name, operation, reason)

    if isinstance(error, SQLAlchemyIntegrityError):
        if any(marker in reason.lower() for marker in _UNIQUE_MARKERS):
            return DuplicateKeyError(repository_name, key_field, key_value)
        return ConstraintViolationError(repository_name, operation, reason)

    return StatementFailedError(repository_name, operation, reason)


class BaseRepository(ABC, Generic[T]):
    """
    Common base of the brokerage repositories.

    Subclasses bind one ORM model:

        class TradeRepository(BaseRepository[Trade]):
            def __init__(self, session: Session):
                super().__init__(session, Trade, "TradeRepository")
    """

    def __init__(
        self,
        session: Session,
        model_class: Type[T],
        repository_name: str
    ) -> None:
        self._session = session
        self._model_class = model_class
        self._repository_name = repository_name
        self._logger = logging.getLogger(f"repository.{repository_name}")

    @property
    def session(self) -> Session:
        return self._session

    @property
    def model_class(self) -> Type[T]:
        return self._model_class

    @property
    def repository_name(self) -> str:
        return self._repository_name

    # =========================================================
    # ERROR HANDLING
    # =========================================================

    def _handle_db_error(
        self,
        error: SQLAlchemyError,
        operation: str,
        context: Optional[dict] = None
    ) -> None:
        """
        Log a failed statement and raise its repository exception.

        Args:
            error: The SQLAlchemy error
            operation: Repository operation that failed
            context: Optional "field" / "value" naming the key an
                insert was writing

        Raises:
            RepositoryException: Always
        """
        context = context or {}
        wrapped = translate_db_error(
            error,
            self._repository_name,
            operation,
            key_field=context.get("field", "unknown"),
            key_value=context.get("value", "unknown"),
        )

        # A duplicate trade id is reported by the caller, the rest is unexpected.
        if isinstance(wrapped, DuplicateKeyError):
            self._logger.warning(f"{operation} rejected: {wrapped.message}")
        else:
            self._logger.error(
                f"{operation} failed: {error}",
                extra={"context": context},
                exc_info=True
            )

        raise wrapped from error

    def _not_found(self, record_id: Any, id_field: str) -> RecordNotFoundError:
        return RecordNotFoundError(
            repository_name=self._repository_name,
            record_id=record_id,
            id_field=id_field
        )

    # =========================================================
    # WRITES
    # =========================================================

    def _add(self, entity: T, context: Optional[dict] = None) -> T:
        """
        Stage a new row and flush it so key clashes surface here.

        Args:
            entity: New ORM instance
            context: Key field and value for DuplicateKeyError
        """
        try:
            self._session.add(entity)
            self._session.flush()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "insert", context or {"entity": str(entity)})
            raise

        self._logger.debug(f"Inserted {entity}")
        return entity

    # =========================================================
    # READS
    # =========================================================

    def _get_by_id(self, record_id: Any) -> Optional[T]:
        """Primary key lookup; composite keys are passed as a tuple."""
        try:
            return self._session.get(self._model_class, record_id)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get", {"id": str(record_id)})
            raise

    def _get_by_id_or_raise(self, record_id: Any, id_field: str = "id") -> T:
        """
        Primary key lookup for a row that must exist.

        Raises:
            RecordNotFoundError: No such row
        """
        entity = self._get_by_id(record_id)
        if entity is None:
            raise self._not_found(record_id, id_field)
        return entity

    def _execute_query(self, stmt: Any) -> List[T]:
        try:
            return list(self._session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self._handle_db_error(e, "select")
            raise

    def _execute_scalar(self, stmt: Any) -> Optional[Any]:
        """Single value or entity, None when nothing matches."""
        try:
            return self._session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "select_scalar")
            raise

    def _execute_rows(self, stmt: Any) -> Sequence[Row]:
        try:
            return self._session.execute(stmt).all()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "select_rows")
            raise

    def _execute_one_row(self, stmt: Any) -> Optional[Row]:
        """Multi-column select matching at most one row."""
        try:
            return self._session.execute(stmt).one_or_none()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "select_row")
            raise
