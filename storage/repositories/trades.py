"""
Trade Repositories.

============================================================
PURPOSE
============================================================
Write and read access to trades, pending trade requests and
the trade history audit trail.

============================================================
DATA LIFECYCLE
============================================================
- Trade and TradeRequest rows are inserted once per order
- TradeHistory is APPEND-ONLY; no update or delete methods
- All inserts of one order share the caller's transaction

============================================================
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from storage.models.trades import Trade, TradeHistory, TradeRequest
from storage.repositories.base import BaseRepository


class TradeRepository(BaseRepository[Trade]):
    """Repository for trades."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, Trade, "TradeRepository")

    def create_trade(
        self,
        t_id: int,
        t_dts: datetime,
        status_id: str,
        trade_type_id: str,
        is_cash: bool,
        symbol: str,
        qty: int,
        bid_price: Decimal,
        ca_id: int,
        exec_name: str,
        charge: Decimal,
        commission: Decimal,
        tax: Decimal,
        is_lifo: bool,
    ) -> Trade:
        """
        Insert a trade. The realized trade price is left unset.

        Returns:
            Created Trade record
        """
        entity = Trade(
            t_id=t_id,
            t_dts=t_dts,
            t_st_id=status_id,
            t_tt_id=trade_type_id,
            t_is_cash=is_cash,
            t_s_symb=symbol,
            t_qty=qty,
            t_bid_price=bid_price,
            t_ca_id=ca_id,
            t_exec_name=exec_name,
            t_trade_price=None,
            t_chrg=charge,
            t_comm=commission,
            t_tax=tax,
            t_lifo=is_lifo,
        )
        return self._add(entity, {"field": "t_id", "value": t_id})

    def get_trade(self, t_id: int) -> Optional[Trade]:
        """Get trade by ID."""
        return self._get_by_id(t_id)

    def list_trades_by_account(self, ca_id: int, limit: int = 100) -> List[Trade]:
        """List an account's trades, newest first."""
        stmt = (
            select(Trade)
            .where(Trade.t_ca_id == ca_id)
            .order_by(desc(Trade.t_dts), desc(Trade.t_id))
            .limit(limit)
        )
        return self._execute_query(stmt)


class TradeRequestRepository(BaseRepository[TradeRequest]):
    """Repository for pending limit order requests."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, TradeRequest, "TradeRequestRepository")

    def create_request(
        self,
        t_id: int,
        trade_type_id: str,
        symbol: str,
        qty: int,
        bid_price: Decimal,
        ca_id: int,
    ) -> TradeRequest:
        """Insert the pending request of a limit order."""
        entity = TradeRequest(
            tr_t_id=t_id,
            tr_tt_id=trade_type_id,
            tr_s_symb=symbol,
            tr_qty=qty,
            tr_bid_price=bid_price,
            tr_ca_id=ca_id,
        )
        return self._add(entity, {"field": "tr_t_id", "value": t_id})

    def get_request(self, t_id: int) -> Optional[TradeRequest]:
        """Get the pending request of a trade, if any."""
        return self._get_by_id(t_id)

    def list_requests_by_symbol(self, symbol: str) -> List[TradeRequest]:
        """List pending requests on a security."""
        stmt = (
            select(TradeRequest)
            .where(TradeRequest.tr_s_symb == symbol)
            .order_by(TradeRequest.tr_t_id)
        )
        return self._execute_query(stmt)


class TradeHistoryRepository(BaseRepository[TradeHistory]):
    """
    Repository for the trade audit trail.

    APPEND-ONLY: entries are never updated or deleted.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(session, TradeHistory, "TradeHistoryRepository")

    def append(self, t_id: int, dts: datetime, status_id: str) -> TradeHistory:
        """Append one lifecycle entry for a trade."""
        entity = TradeHistory(th_t_id=t_id, th_dts=dts, th_st_id=status_id)
        return self._add(entity, {"field": "th_t_id/th_st_id", "value": f"{t_id}/{status_id}"})

    def list_for_trade(self, t_id: int) -> List[TradeHistory]:
        """List a trade's history, oldest first."""
        stmt = (
            select(TradeHistory)
            .where(TradeHistory.th_t_id == t_id)
            .order_by(TradeHistory.th_dts)
        )
        return self._execute_query(stmt)
