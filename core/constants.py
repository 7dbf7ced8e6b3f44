"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Defines the fixed reference codes of the brokerage dataset.

- Trade status identifiers
- Trade type identifiers
- Customer tax status codes

Values are the ones loaded by the benchmark's reference data,
so they must not be changed independently of the dataset.

============================================================
"""

from decimal import Decimal
from typing import Dict, FrozenSet, Tuple


# ============================================================
# TRADE STATUS
# ============================================================

STATUS_COMPLETED = "CMPT"
STATUS_ACTIVE = "ACTV"
STATUS_SUBMITTED = "SBMT"
STATUS_PENDING = "PNDG"
STATUS_CANCELED = "CNCL"

STATUS_NAMES: Dict[str, str] = {
    STATUS_COMPLETED: "Completed",
    STATUS_ACTIVE: "Active",
    STATUS_SUBMITTED: "Submitted",
    STATUS_PENDING: "Pending",
    STATUS_CANCELED: "Canceled",
}


# ============================================================
# TRADE TYPES
# ============================================================

TRADE_TYPE_LIMIT_BUY = "TLB"
TRADE_TYPE_LIMIT_SELL = "TLS"
TRADE_TYPE_MARKET_BUY = "TMB"
TRADE_TYPE_MARKET_SELL = "TMS"
TRADE_TYPE_STOP_LOSS = "TSL"

# (name, is_sell, is_market)
TRADE_TYPES: Dict[str, Tuple[str, bool, bool]] = {
    TRADE_TYPE_LIMIT_BUY: ("Limit-Buy", False, False),
    TRADE_TYPE_LIMIT_SELL: ("Limit-Sell", True, False),
    TRADE_TYPE_MARKET_BUY: ("Market-Buy", False, True),
    TRADE_TYPE_MARKET_SELL: ("Market-Sell", True, True),
    TRADE_TYPE_STOP_LOSS: ("Stop-Loss", True, False),
}


# ============================================================
# TAX STATUS
# ============================================================

TAX_STATUS_NON_TAXABLE = 0
TAX_STATUS_TAXABLE_WITHHOLD = 1
TAX_STATUS_TAXABLE = 2

TAXABLE_STATUSES: FrozenSet[int] = frozenset({
    TAX_STATUS_TAXABLE_WITHHOLD,
    TAX_STATUS_TAXABLE,
})


# ============================================================
# MONEY
# ============================================================

ZERO = Decimal("0")
CENT = Decimal("0.01")
