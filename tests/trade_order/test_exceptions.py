"""
Error Taxonomy Tests.

Workflow exceptions, repository error mapping and the
transaction scope.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from core.exceptions import (
    ErrorClassification,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    Severity,
    TradeOrderError,
    TradingException,
    TransactionFailureError,
)
from database import transaction_scope
from storage.models import Exchange
from storage.repositories.base import translate_db_error
from storage.repositories.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    RepositoryException,
    StatementFailedError,
    StoreUnavailableError,
)
from trade_order.errors import required_row


class TestTradeOrderErrors:
    """Tests for exception attributes and serialization."""

    def test_hierarchy(self):
        for cls in (NotFoundError, InvalidInputError, PermissionDeniedError, TransactionFailureError):
            assert issubclass(cls, TradeOrderError)
            assert issubclass(cls, TradingException)

    def test_not_found_context(self):
        error = NotFoundError("Security", "NOPE")

        assert str(error) == "Security not found: NOPE"
        assert error.context == {"entity": "Security", "key": "NOPE"}
        assert error.classification is ErrorClassification.NON_RECOVERABLE
        assert not error.is_recoverable

    def test_permission_denied_severity(self):
        error = PermissionDeniedError(1000, "Eve Mallory")

        assert error.severity is Severity.HIGH
        assert "1000" in error.message

    def test_transaction_failure_is_critical(self):
        error = TransactionFailureError("boom", operation="commit")

        assert error.severity is Severity.CRITICAL
        assert error.to_dict()["context"] == {"operation": "commit"}

    def test_log_format(self):
        line = InvalidInputError("bad quantity", field="trade_qty").to_log_format()

        assert line.startswith("[MEDIUM] InvalidInputError: bad quantity")
        assert "field=trade_qty" in line


class TestRequiredRow:
    """Tests for repository error mapping."""

    def test_maps_record_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            with required_row("Charge", "tier=3"):
                raise RecordNotFoundError("ChargeRepository", "tier=3", "ch_c_tier")

        assert exc_info.value.entity == "Charge"
        assert isinstance(exc_info.value.cause, RecordNotFoundError)
        assert exc_info.value.context["cause_type"] == "RecordNotFoundError"

    def test_other_repository_errors_pass_through(self):
        with pytest.raises(RepositoryException):
            with required_row("Charge", "tier=3"):
                raise RepositoryException("connection lost", "ChargeRepository", "query")


class TestTransactionScope:
    """Tests for commit and rollback behavior."""

    def _exchange_count(self, session_factory) -> int:
        with session_factory() as session:
            return session.execute(select(func.count()).select_from(Exchange)).scalar_one()

    def test_commits_on_success(self, session_factory):
        before = self._exchange_count(session_factory)

        with transaction_scope(session_factory) as session:
            session.add(Exchange(ex_id="AMEX", ex_name="American Stock Exchange"))

        assert self._exchange_count(session_factory) == before + 1

    def test_workflow_error_propagates_unchanged(self, session_factory):
        before = self._exchange_count(session_factory)

        with pytest.raises(InvalidInputError):
            with transaction_scope(session_factory) as session:
                session.add(Exchange(ex_id="AMEX", ex_name="American Stock Exchange"))
                session.flush()
                raise InvalidInputError("rejected")

        assert self._exchange_count(session_factory) == before

    def test_integrity_error_becomes_transaction_failure(self, session_factory):
        """A duplicate key surfaces as TransactionFailureError."""
        with pytest.raises(TransactionFailureError) as exc_info:
            with transaction_scope(session_factory) as session:
                session.add(Exchange(ex_id="NYSE", ex_name="Duplicate"))

        assert exc_info.value.operation == "commit"

    def test_unexpected_error_becomes_transaction_failure(self, session_factory):
        with pytest.raises(TransactionFailureError) as exc_info:
            with transaction_scope(session_factory):
                raise ValueError("unexpected")

        assert exc_info.value.operation == "unit_of_work"
        assert isinstance(exc_info.value.cause, ValueError)

    def test_unreachable_store_is_transient(self, session_factory):
        with pytest.raises(TransactionFailureError) as exc_info:
            with transaction_scope(session_factory):
                raise StoreUnavailableError("TradeRepository", "insert", "server closed the connection")

        assert exc_info.value.classification is ErrorClassification.TRANSIENT
        assert exc_info.value.is_recoverable


class TestTranslateDbError:
    """Tests for SQLAlchemy error translation."""

    def test_unique_clash(self):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: trade.t_id"))

        wrapped = translate_db_error(error, "TradeRepository", "insert", "t_id", 5001)

        assert isinstance(wrapped, DuplicateKeyError)
        assert wrapped.value == 5001
        assert not wrapped.retryable

    def test_foreign_key_clash(self):
        error = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        wrapped = translate_db_error(error, "TradeRepository", "insert")

        assert isinstance(wrapped, ConstraintViolationError)
        assert "FOREIGN KEY" in wrapped.details["reason"]

    def test_operational_error(self):
        error = OperationalError("SELECT 1", {}, Exception("could not connect"))

        wrapped = translate_db_error(error, "SecurityRepository", "select")

        assert isinstance(wrapped, StoreUnavailableError)
        assert wrapped.retryable

    def test_anything_else(self):
        error = ProgrammingError("SELECT", {}, Exception("no such column"))

        wrapped = translate_db_error(error, "SecurityRepository", "select")

        assert isinstance(wrapped, StatementFailedError)
        assert str(wrapped) == "[SecurityRepository] select: statement failed: no such column"
