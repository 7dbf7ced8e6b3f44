"""
Repository Tests.

Trade-side repositories and the error wrapping of the
repository base class.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from storage.repositories import (
    DuplicateKeyError,
    HoldingSummaryRepository,
    RecordNotFoundError,
    SecurityRepository,
    TradeHistoryRepository,
    TradeRepository,
    TradeRequestRepository,
)


def _create_trade(session, t_id, dts, status_id="PNDG", symbol="ACME"):
    return TradeRepository(session).create_trade(
        t_id=t_id,
        t_dts=dts,
        status_id=status_id,
        trade_type_id="TLB",
        is_cash=True,
        symbol=symbol,
        qty=10,
        bid_price=Decimal("11.50"),
        ca_id=1000,
        exec_name="Alex Smith",
        charge=Decimal("10.00"),
        commission=Decimal("0.58"),
        tax=Decimal("0"),
        is_lifo=True,
    )


class TestTradeRepositories:
    """Tests for trade, request and history repositories."""

    def test_trades_listed_newest_first(self, session):
        _create_trade(session, 1, datetime(2024, 6, 1, 9, 30))
        _create_trade(session, 2, datetime(2024, 6, 2, 9, 30))

        trades = TradeRepository(session).list_trades_by_account(1000)

        assert [t.t_id for t in trades] == [2, 1]
        assert TradeRepository(session).get_trade(1).t_qty == 10
        assert TradeRepository(session).get_trade(99) is None

    def test_duplicate_trade_id(self, session):
        _create_trade(session, 1, datetime(2024, 6, 1, 9, 30))

        with pytest.raises(DuplicateKeyError):
            _create_trade(session, 1, datetime(2024, 6, 1, 9, 31))

    def test_requests_by_symbol(self, session):
        requests = TradeRequestRepository(session)
        _create_trade(session, 1, datetime(2024, 6, 1, 9, 30))
        _create_trade(session, 2, datetime(2024, 6, 1, 9, 31), symbol="GLBX")
        requests.create_request(1, "TLB", "ACME", 10, Decimal("11.50"), 1000)
        requests.create_request(2, "TLB", "GLBX", 10, Decimal("49.00"), 1000)

        pending = requests.list_requests_by_symbol("ACME")

        assert [r.tr_t_id for r in pending] == [1]
        assert requests.get_request(2).tr_bid_price == Decimal("49.00")

    def test_history_is_chronological(self, session):
        history = TradeHistoryRepository(session)
        _create_trade(session, 1, datetime(2024, 6, 1, 9, 30))
        history.append(1, datetime(2024, 6, 1, 9, 35), "SBMT")
        history.append(1, datetime(2024, 6, 1, 9, 30), "PNDG")

        entries = history.list_for_trade(1)

        assert [e.th_st_id for e in entries] == ["PNDG", "SBMT"]


class TestReferenceRepositories:

    def test_missing_symbol_raises(self, session):
        with pytest.raises(RecordNotFoundError) as exc_info:
            SecurityRepository(session).get_by_symbol("NOPE")

        assert exc_info.value.record_id == "NOPE"

    def test_holding_summary_quantity(self, session):
        summaries = HoldingSummaryRepository(session)

        assert summaries.get_quantity(1000, "ACME") == 150
        assert summaries.get_quantity(3000, "GLBX", lock=False) == -50
        assert summaries.get_quantity(2000, "GLBX") == 0
