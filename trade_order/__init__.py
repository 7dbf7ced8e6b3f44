"""
Trade Order Module.

============================================================
PURPOSE
============================================================
Order placement for a brokerage: validates the account and
the executor's authority, estimates the financial impact of
the trade (lot matching, tax, commission, charges, customer
assets) and records the order atomically.

============================================================
USAGE
============================================================

    from database import create_session_factory, get_engine
    from trade_order import (
        TradeOrderService,
        SequenceTradeIdGenerator,
        TradeOrderRequest,
        load_config,
    )

    engine = get_engine()
    service = TradeOrderService(
        session_factory=create_session_factory(engine),
        id_generator=SequenceTradeIdGenerator(engine),
        config=load_config(),
    )
    result = service.place_order(TradeOrderRequest(...))

============================================================
"""

from .account_lookup import AccountLookup
from .commit_writer import TradeCommitWriter
from .config import StatusConfig, TradeOrderConfig, load_config
from .fee_calculator import FeeCalculator, commission_amount
from .id_generator import (
    InMemoryTradeIdGenerator,
    SequenceTradeIdGenerator,
    TradeIdGenerator,
)
from .lot_matcher import LotMatcher, closes_existing_position, match_lots
from .margin_calculator import MarginCalculator, customer_assets
from .security_resolver import (
    SecurityResolver,
    effective_requested_price,
    validate_security_selector,
)
from .service import TradeOrderService
from .status_selector import build_commit_plan, select_status
from .tax_estimator import TaxEstimator, compute_tax, is_taxable
from .types import (
    AccountProfile,
    HoldingLot,
    LimitCommit,
    LotMatchResult,
    LotOrdering,
    MarketCommit,
    SecurityQuote,
    TradeCommitPlan,
    TradeCommitRequest,
    TradeImpactEstimate,
    TradeImpactRequest,
    TradeOrderRequest,
    TradeOrderResult,
    TradeTypeInfo,
)


__all__ = [
    # Service
    "TradeOrderService",
    # Config
    "StatusConfig",
    "TradeOrderConfig",
    "load_config",
    # Components
    "AccountLookup",
    "SecurityResolver",
    "LotMatcher",
    "TaxEstimator",
    "FeeCalculator",
    "MarginCalculator",
    "TradeCommitWriter",
    # Id generation
    "TradeIdGenerator",
    "InMemoryTradeIdGenerator",
    "SequenceTradeIdGenerator",
    # Pure functions
    "validate_security_selector",
    "effective_requested_price",
    "closes_existing_position",
    "match_lots",
    "is_taxable",
    "compute_tax",
    "commission_amount",
    "customer_assets",
    "select_status",
    "build_commit_plan",
    # Types
    "AccountProfile",
    "SecurityQuote",
    "TradeTypeInfo",
    "HoldingLot",
    "LotMatchResult",
    "LotOrdering",
    "TradeImpactRequest",
    "TradeImpactEstimate",
    "TradeCommitRequest",
    "TradeCommitPlan",
    "MarketCommit",
    "LimitCommit",
    "TradeOrderRequest",
    "TradeOrderResult",
]
