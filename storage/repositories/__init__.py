"""
Repository Layer Package.

============================================================
PURPOSE
============================================================
The Repository Layer is the ONLY gateway to persistent storage.
All database access MUST go through repository classes.

============================================================
ARCHITECTURE PRINCIPLES
============================================================
1. DAO Pattern: One repository per table (or tightly related set)
2. Session Injection: Sessions are injected, not created internally
3. Explicit Methods: No generic 'execute', clear method names
4. Explicit NotFound: Reference lookups raise, never return None
5. Exception Handling: All DB errors wrapped in repository exceptions

============================================================
REPOSITORY GROUPS
============================================================

REFERENCE DATA (Read-Only)
--------------------------
- CompanyRepository, SecurityRepository, LastTradeRepository
- TradeTypeRepository
- CommissionRateRepository, ChargeRepository, TaxRateRepository

ACCOUNTS & POSITIONS (Read-Only)
--------------------------------
- CustomerAccountRepository, AccountPermissionRepository
- HoldingRepository, HoldingSummaryRepository

TRADES
------
- TradeRepository, TradeRequestRepository
- TradeHistoryRepository (Append-Only)

============================================================
USAGE
============================================================

    from storage.repositories import SecurityRepository

    with transaction_scope(factory) as session:
        security = SecurityRepository(session).get_by_symbol("AAPL")

============================================================
"""

from storage.repositories.base import BaseRepository
from storage.repositories.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    RepositoryException,
    StatementFailedError,
    StoreUnavailableError,
)
from storage.repositories.reference import (
    ChargeRepository,
    CommissionRateRepository,
    CompanyRepository,
    LastTradeRepository,
    SecurityRepository,
    TaxRateRepository,
    TradeTypeRepository,
)
from storage.repositories.accounts import (
    AccountPermissionRepository,
    CustomerAccountRepository,
)
from storage.repositories.holdings import (
    HoldingRepository,
    HoldingSummaryRepository,
)
from storage.repositories.trades import (
    TradeHistoryRepository,
    TradeRepository,
    TradeRequestRepository,
)


__all__ = [
    # Base
    "BaseRepository",
    # Exceptions
    "RepositoryException",
    "RecordNotFoundError",
    "DuplicateKeyError",
    "ConstraintViolationError",
    "StoreUnavailableError",
    "StatementFailedError",
    # Reference
    "CompanyRepository",
    "SecurityRepository",
    "LastTradeRepository",
    "TradeTypeRepository",
    "CommissionRateRepository",
    "ChargeRepository",
    "TaxRateRepository",
    # Accounts
    "CustomerAccountRepository",
    "AccountPermissionRepository",
    "HoldingRepository",
    "HoldingSummaryRepository",
    # Trades
    "TradeRepository",
    "TradeRequestRepository",
    "TradeHistoryRepository",
]
