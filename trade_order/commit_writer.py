"""
Trade Order - Trade Commit Writer.

============================================================
PURPOSE
============================================================
Persists a placed order: the trade, the pending request of a
limit order, and the first audit trail entry.

CRITICAL REQUIREMENTS:
- One trade id and one timestamp for every row of the order
- All rows in the caller's transaction; nothing is committed
  here, so a failure at any step leaves no partial order
- TradeHistory is append-only

============================================================
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.clock import ClockFactory, ClockProtocol
from storage.repositories.trades import (
    TradeHistoryRepository,
    TradeRepository,
    TradeRequestRepository,
)

from .id_generator import TradeIdGenerator
from .types import TradeCommitPlan


logger = logging.getLogger(__name__)


class TradeCommitWriter:
    """
    Writes commit plans into the trade tables.
    """

    def __init__(
        self,
        id_generator: TradeIdGenerator,
        clock: Optional[ClockProtocol] = None,
    ):
        """
        Initialize writer.

        Args:
            id_generator: Source of trade identifiers
            clock: Timestamp source (defaults to the global clock)
        """
        self._id_generator = id_generator
        self._clock = clock or ClockFactory.get_clock()

    def write(self, session: Session, plan: TradeCommitPlan) -> int:
        """
        Stage every row of an order in the session.

        Args:
            session: Session of the surrounding transaction
            plan: Market or limit commit plan

        Returns:
            Generated trade identifier
        """
        trade_id = self._id_generator.next()
        now_dts = self._clock.now()

        TradeRepository(session).create_trade(
            t_id=trade_id,
            t_dts=now_dts,
            status_id=plan.status_id,
            trade_type_id=plan.trade_type_id,
            is_cash=plan.is_cash,
            symbol=plan.symbol,
            qty=plan.trade_qty,
            bid_price=plan.requested_price,
            ca_id=plan.account_id,
            exec_name=plan.exec_name,
            charge=plan.charge,
            commission=plan.commission,
            tax=plan.tax,
            is_lifo=plan.is_lifo,
        )

        plan.stage_request(TradeRequestRepository(session), trade_id)

        TradeHistoryRepository(session).append(
            t_id=trade_id,
            dts=now_dts,
            status_id=plan.status_id,
        )

        logger.debug(
            f"Staged trade {trade_id} ({type(plan).__name__}) {plan.trade_type_id} "
            f"{plan.trade_qty} {plan.symbol} @ {plan.requested_price} "
            f"for account {plan.account_id}, status {plan.status_id}"
        )
        return trade_id
