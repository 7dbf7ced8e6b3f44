"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines all custom exceptions for the trade order workflow.

- Provides clear exception hierarchy
- Separates bad input from missing reference data
- Carries context for debugging and structured logging
- Marks which failures are fatal to the caller

============================================================
EXCEPTION HIERARCHY
============================================================
TradingException (base)
├── ConfigurationError
│   └── InvalidConfigError
└── TradeOrderError
    ├── NotFoundError
    ├── InvalidInputError
    ├── PermissionDeniedError
    └── TransactionFailureError

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels for alerting."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, may impact operations."""

    CRITICAL = "critical"
    """Critical issue, requires immediate action."""


# ============================================================
# ERROR CLASSIFICATION
# ============================================================

class ErrorClassification(Enum):
    """Classification of error recoverability."""

    RECOVERABLE = "recoverable"
    """Caller can correct the request and try again."""

    TRANSIENT = "transient"
    """Temporary error, a later attempt may succeed."""

    NON_RECOVERABLE = "non_recoverable"
    """Permanent error, requires intervention."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class TradingException(Exception):
    """
    Base exception for all trade order errors.

    All exceptions carry:
    - severity: for alerting
    - context: for debugging
    - classification: for the caller's retry decision
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_classification: ErrorClassification = ErrorClassification.RECOVERABLE

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        classification: Optional[ErrorClassification] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.classification = classification or self.default_classification
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    @property
    def is_recoverable(self) -> bool:
        """Check if error is recoverable."""
        return self.classification in (
            ErrorClassification.RECOVERABLE,
            ErrorClassification.TRANSIENT,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging/storage."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "classification": self.classification.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        if ctx_str:
            line = f"{line} | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(TradingException):
    """Error in configuration."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# TRADE ORDER ERRORS
# ============================================================

class TradeOrderError(TradingException):
    """Base class for trade order workflow errors."""


class NotFoundError(TradeOrderError):
    """
    A required reference row is absent.

    Covers accounts, securities, companies, prices, trade types
    and rate bands. Always propagated to the caller.
    """

    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        entity: str,
        key: Any,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["entity"] = entity
        context["key"] = str(key)

        super().__init__(
            message=f"{entity} not found: {key}",
            context=context,
            **kwargs,
        )
        self.entity = entity
        self.key = key


class InvalidInputError(TradeOrderError):
    """Request parameters are inconsistent; rejected before any lookup."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field

        super().__init__(message, context=context, **kwargs)
        self.field = field


class PermissionDeniedError(TradeOrderError):
    """Executor holds no permission grant on the account."""

    default_severity = Severity.HIGH

    def __init__(self, account_id: int, executor: str):
        super().__init__(
            message=f"Executor {executor} is not authorized on account {account_id}",
            context={"account_id": account_id, "executor": executor},
        )
        self.account_id = account_id
        self.executor = executor


class TransactionFailureError(TradeOrderError):
    """
    The atomic unit of work could not complete.

    Fatal to the caller. Nothing from the failed unit of work is
    persisted and the core never retries.
    """

    default_severity = Severity.CRITICAL
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)
        self.operation = operation


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "Severity",
    "ErrorClassification",
    "TradingException",
    "ConfigurationError",
    "InvalidConfigError",
    "TradeOrderError",
    "NotFoundError",
    "InvalidInputError",
    "PermissionDeniedError",
    "TransactionFailureError",
]
