"""
Trade Order - Types.

============================================================
PURPOSE
============================================================
All type definitions of the order-placement workflow: frame
inputs and outputs, holding lots, lot-matching results and the
commit plan variants.

CRITICAL PRINCIPLE:
    "Estimation reads, commit writes, nothing in between."
    Every output of frames 1-3 is an immutable value.

============================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from core.constants import STATUS_PENDING, STATUS_SUBMITTED, ZERO
from storage.models.trades import TradeRequest
from storage.repositories.trades import TradeRequestRepository


# ============================================================
# LOT ORDERING
# ============================================================

class LotOrdering(Enum):
    """Order in which existing lots are closed."""

    MOST_RECENT_FIRST = "LIFO"
    """Close the most recently opened lots first."""

    OLDEST_FIRST = "FIFO"
    """Close the oldest lots first."""

    @classmethod
    def from_is_lifo(cls, is_lifo: bool) -> "LotOrdering":
        """Map the caller's LIFO flag to an ordering."""
        return cls.MOST_RECENT_FIRST if is_lifo else cls.OLDEST_FIRST

    @property
    def most_recent_first(self) -> bool:
        return self is LotOrdering.MOST_RECENT_FIRST


# ============================================================
# FRAME 1 / FRAME 2
# ============================================================

@dataclass(frozen=True)
class AccountProfile:
    """Account, owner and broker attributes (Frame 1 output)."""

    account_id: int
    broker_id: int
    customer_id: int
    account_name: str
    tax_status: int
    customer_last_name: str
    customer_first_name: str
    customer_tax_id: str
    customer_tier: int
    broker_name: str

    @property
    def customer_full_name(self) -> str:
        return f"{self.customer_first_name} {self.customer_last_name}"


# ============================================================
# SECURITY RESOLUTION
# ============================================================

@dataclass(frozen=True)
class SecurityQuote:
    """Resolved security with its current market price."""

    symbol: str
    """Security symbol."""

    security_name: str
    """Security display name."""

    company_name: str
    """Issuing company name."""

    exchange_id: str
    """Listing exchange."""

    market_price: Decimal
    """Price of the most recent trade."""


@dataclass(frozen=True)
class TradeTypeInfo:
    """Characteristics of a trade type."""

    trade_type_id: str
    is_market: bool
    is_sell: bool


# ============================================================
# LOT MATCHING
# ============================================================

@dataclass(frozen=True)
class HoldingLot:
    """
    One lot of an existing position.

    Quantity is signed: positive for long lots, negative for
    short lots.
    """

    lot_id: int
    quantity: int
    price: Decimal
    opened_at: Optional[datetime] = None


@dataclass(frozen=True)
class LotMatchResult:
    """
    Outcome of reconciling a trade against existing lots.

    acquisition_value and disposal_value are never negative.
    unmatched_quantity is what remains after the lots ran out; it
    opens a new (or opposite) position and realizes nothing.
    """

    acquisition_value: Decimal = ZERO
    """Value at which the closed shares were acquired (buy value)."""

    disposal_value: Decimal = ZERO
    """Value at which the closed shares are disposed of (sell value)."""

    unmatched_quantity: int = 0
    """Requested quantity not covered by existing lots."""

    @property
    def realized_gain(self) -> Decimal:
        """Disposal value minus acquisition value."""
        return self.disposal_value - self.acquisition_value


# ============================================================
# FRAME 3
# ============================================================

@dataclass(frozen=True)
class TradeImpactRequest:
    """
    Inputs of the trade impact estimation (Frame 3).

    Exactly one of symbol or (company_name, issue) identifies the
    security.
    """

    account_id: int
    customer_id: int
    customer_tier: int
    trade_type_id: str
    trade_qty: int
    tax_status: int
    is_lifo: bool = True
    is_margin: bool = False
    symbol: str = ""
    company_name: str = ""
    issue: str = ""
    requested_price: Decimal = ZERO
    pending_status_id: str = STATUS_PENDING
    submitted_status_id: str = STATUS_SUBMITTED


@dataclass(frozen=True)
class TradeImpactEstimate:
    """Estimated financial impact of a trade (Frame 3 output)."""

    company_name: str
    """Issuing company name."""

    requested_price: Decimal
    """Effective requested price (market price for market orders)."""

    symbol: str
    """Resolved security symbol."""

    security_name: str
    """Security display name."""

    buy_value: Decimal
    """Acquisition value of the lots the trade would close."""

    charge_amount: Decimal
    """Flat charge for the customer tier and trade type."""

    commission_rate: Decimal
    """Commission rate in percent."""

    customer_assets: Decimal
    """Customer asset base (see margin calculator)."""

    market_price: Decimal
    """Current market price."""

    sell_value: Decimal
    """Disposal value of the lots the trade would close."""

    status_id: str
    """Initial status the trade would be created with."""

    tax_amount: Decimal
    """Estimated capital gains tax."""

    is_market: bool
    is_sell: bool

    exchange_id: str = ""
    """Listing exchange used for the commission lookup."""


# ============================================================
# FRAME 4
# ============================================================

@dataclass(frozen=True)
class TradeCommitRequest:
    """Inputs of the trade commit (Frame 4)."""

    account_id: int
    charge: Decimal
    commission: Decimal
    exec_name: str
    is_cash: bool
    is_lifo: bool
    requested_price: Decimal
    status_id: str
    symbol: str
    trade_qty: int
    trade_type_id: str
    is_market: bool
    tax_amount: Decimal = ZERO


@dataclass(frozen=True)
class TradeCommitPlan(ABC):
    """
    Everything the commit writer needs to persist one trade.

    Built by the status selector. Concrete variants decide what
    extra rows the trade carries, so the writer treats every plan
    the same way.
    """

    is_market: ClassVar[bool]

    account_id: int
    trade_type_id: str
    symbol: str
    trade_qty: int
    requested_price: Decimal
    status_id: str
    exec_name: str
    is_cash: bool
    is_lifo: bool
    charge: Decimal
    commission: Decimal
    tax: Decimal = ZERO

    @abstractmethod
    def stage_request(
        self,
        requests: TradeRequestRepository,
        trade_id: int,
    ) -> Optional[TradeRequest]:
        """Insert whatever pending request the order needs."""


@dataclass(frozen=True)
class MarketCommit(TradeCommitPlan):
    """Market order: executes immediately, no pending request."""

    is_market: ClassVar[bool] = True

    def stage_request(
        self,
        requests: TradeRequestRepository,
        trade_id: int,
    ) -> Optional[TradeRequest]:
        return None


@dataclass(frozen=True)
class LimitCommit(TradeCommitPlan):
    """Limit order: waits in trade_request until matched."""

    is_market: ClassVar[bool] = False

    def stage_request(
        self,
        requests: TradeRequestRepository,
        trade_id: int,
    ) -> Optional[TradeRequest]:
        return requests.create_request(
            t_id=trade_id,
            trade_type_id=self.trade_type_id,
            symbol=self.symbol,
            qty=self.trade_qty,
            bid_price=self.requested_price,
            ca_id=self.account_id,
        )


# ============================================================
# FULL TRANSACTION
# ============================================================

@dataclass(frozen=True)
class TradeOrderRequest:
    """Inputs of a complete trade order transaction (frames 1-4)."""

    account_id: int
    exec_first_name: str
    exec_last_name: str
    exec_tax_id: str
    trade_type_id: str
    trade_qty: int
    requested_price: Decimal = ZERO
    symbol: str = ""
    company_name: str = ""
    issue: str = ""
    is_lifo: bool = True
    is_margin: bool = False
    roll_it_back: bool = False
    """Roll the transaction back after the trade is written."""

    @property
    def exec_name(self) -> str:
        return f"{self.exec_first_name} {self.exec_last_name}"


@dataclass(frozen=True)
class TradeOrderResult:
    """Outcome of a complete trade order transaction."""

    trade_id: int
    account: AccountProfile
    estimate: TradeImpactEstimate
    commission_amount: Decimal
    rolled_back: bool = False
