"""
Storage Models Package.

This package contains all ORM models of the brokerage data store.
Models are organized by domain.

============================================================
MODEL ORGANIZATION
============================================================

Domain 1: Reference Data (reference.py)
- Exchange
- Company
- Security
- LastTrade
- TradeType
- StatusType
- CommissionRate
- Charge
- TaxRate

Domain 2: Accounts & Positions (accounts.py)
- Broker
- Customer
- CustomerTaxrate
- CustomerAccount
- AccountPermission
- Holding
- HoldingSummary

Domain 3: Trades (trades.py)
- Trade
- TradeRequest
- TradeHistory

============================================================
"""

from storage.models.base import Base
from storage.models.reference import (
    Charge,
    CommissionRate,
    Company,
    Exchange,
    LastTrade,
    Security,
    StatusType,
    TaxRate,
    TradeType,
)
from storage.models.accounts import (
    AccountPermission,
    Broker,
    Customer,
    CustomerAccount,
    CustomerTaxrate,
    Holding,
    HoldingSummary,
)
from storage.models.trades import (
    TRADE_ID_SEQUENCE,
    Trade,
    TradeHistory,
    TradeRequest,
)


__all__ = [
    "Base",
    # Reference
    "Exchange",
    "Company",
    "Security",
    "LastTrade",
    "TradeType",
    "StatusType",
    "CommissionRate",
    "Charge",
    "TaxRate",
    # Accounts
    "Broker",
    "Customer",
    "CustomerTaxrate",
    "CustomerAccount",
    "AccountPermission",
    "Holding",
    "HoldingSummary",
    # Trades
    "TRADE_ID_SEQUENCE",
    "Trade",
    "TradeRequest",
    "TradeHistory",
]
