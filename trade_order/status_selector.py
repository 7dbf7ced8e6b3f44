"""
Trade Order - Status Selector.

Chooses the initial status of a trade and builds the commit
plan variant matching its order type.
"""

from decimal import Decimal

from core.constants import STATUS_PENDING, STATUS_SUBMITTED, ZERO

from .types import LimitCommit, MarketCommit, TradeCommitPlan


def select_status(
    is_market: bool,
    pending_status_id: str = STATUS_PENDING,
    submitted_status_id: str = STATUS_SUBMITTED,
) -> str:
    """Market orders are submitted at once; limit orders wait as pending."""
    return submitted_status_id if is_market else pending_status_id


def build_commit_plan(
    is_market: bool,
    account_id: int,
    trade_type_id: str,
    symbol: str,
    trade_qty: int,
    requested_price: Decimal,
    status_id: str,
    exec_name: str,
    is_cash: bool,
    is_lifo: bool,
    charge: Decimal,
    commission: Decimal,
    tax: Decimal = ZERO,
) -> TradeCommitPlan:
    """
    Build the commit plan of an order.

    Returns:
        MarketCommit for market orders, LimitCommit otherwise
    """
    plan_class = MarketCommit if is_market else LimitCommit
    return plan_class(
        account_id=account_id,
        trade_type_id=trade_type_id,
        symbol=symbol,
        trade_qty=trade_qty,
        requested_price=requested_price,
        status_id=status_id,
        exec_name=exec_name,
        is_cash=is_cash,
        is_lifo=is_lifo,
        charge=charge,
        commission=commission,
        tax=tax,
    )
