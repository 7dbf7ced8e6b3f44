"""
Trade Order - Holding Lot Matcher.

============================================================
PURPOSE
============================================================
Estimates what a trade would realize against the position the
account already holds in the security.

A sell closes long lots; a buy covers short lots. Lots are
consumed in the caller-chosen order (most recent first for
LIFO, oldest first for FIFO) until the requested quantity is
covered or the lots run out.

============================================================
ACCUMULATION
============================================================
For each consumed share:

    closing a long lot (sell):
        acquisition += lot price
        disposal    += requested price

    covering a short lot (buy):
        acquisition += requested price
        disposal    += lot price

Whatever is left after the last lot liquidates the whole
position and opens a new one in the trade's direction. That
remainder realizes nothing and is reported as unmatched.

============================================================
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from core.constants import ZERO
from core.exceptions import InvalidInputError
from storage.repositories.holdings import HoldingRepository, HoldingSummaryRepository

from .types import HoldingLot, LotMatchResult, LotOrdering


logger = logging.getLogger(__name__)


def closes_existing_position(is_sell: bool, holding_summary: int) -> bool:
    """
    Whether the trade works against the current position.

    A sell against a long position, or a buy against a short one.
    """
    if is_sell:
        return holding_summary > 0
    return holding_summary < 0


def match_lots(
    lots: Iterable[HoldingLot],
    trade_qty: int,
    requested_price: Decimal,
    is_sell: bool,
) -> LotMatchResult:
    """
    Partition a trade quantity across lots in the given order.

    Pure function: the lots must already be in closing order.
    Lots on the same side as the trade are skipped, they cannot
    be closed by it.

    Args:
        lots: Lots in closing order
        trade_qty: Requested quantity, positive
        requested_price: Effective requested price
        is_sell: Trade direction

    Returns:
        LotMatchResult with the accumulated values and the
        quantity no lot covered
    """
    if trade_qty <= 0:
        raise InvalidInputError(
            f"trade quantity must be positive, got {trade_qty}",
            field="trade_qty",
        )

    acquisition = ZERO
    disposal = ZERO
    needed = trade_qty

    for lot in lots:
        if needed == 0:
            break

        # Short lots are negative; flip them so both sides count up
        held = lot.quantity if is_sell else -lot.quantity
        if held <= 0:
            continue

        consumed = min(needed, held)
        if is_sell:
            acquisition += consumed * lot.price
            disposal += consumed * requested_price
        else:
            acquisition += consumed * requested_price
            disposal += consumed * lot.price
        needed -= consumed

    return LotMatchResult(
        acquisition_value=acquisition,
        disposal_value=disposal,
        unmatched_quantity=needed,
    )


class LotMatcher:
    """
    Reads the position of an account and matches a trade against it.
    """

    def __init__(self, session: Session):
        self._holdings = HoldingRepository(session)
        self._summaries = HoldingSummaryRepository(session)

    def read_holding_summary(self, account_id: int, symbol: str) -> int:
        """Signed position quantity, locked for the rest of the transaction."""
        return self._summaries.get_quantity(account_id, symbol, lock=True)

    def load_lots(
        self,
        account_id: int,
        symbol: str,
        ordering: LotOrdering,
    ) -> List[HoldingLot]:
        """Load the position's lots in closing order."""
        return [
            HoldingLot(
                lot_id=holding.h_t_id,
                quantity=holding.h_qty,
                price=holding.h_price,
                opened_at=holding.h_dts,
            )
            for holding in self._holdings.list_lots(
                account_id, symbol, most_recent_first=ordering.most_recent_first
            )
        ]

    def estimate(
        self,
        account_id: int,
        symbol: str,
        trade_qty: int,
        is_sell: bool,
        ordering: LotOrdering,
        requested_price: Decimal,
        holding_summary: Optional[int] = None,
    ) -> LotMatchResult:
        """
        Estimate acquisition and disposal values of a trade.

        Args:
            account_id: Account identifier
            symbol: Security symbol
            trade_qty: Requested quantity, positive
            is_sell: Trade direction
            ordering: Lot closing order
            requested_price: Effective requested price
            holding_summary: Pre-read position quantity; read when None

        Returns:
            LotMatchResult; all zero when no position is closed
        """
        if holding_summary is None:
            holding_summary = self.read_holding_summary(account_id, symbol)

        if not closes_existing_position(is_sell, holding_summary):
            return LotMatchResult(unmatched_quantity=trade_qty)

        lots = self.load_lots(account_id, symbol, ordering)
        result = match_lots(lots, trade_qty, requested_price, is_sell)

        logger.debug(
            f"Matched {trade_qty - result.unmatched_quantity}/{trade_qty} "
            f"{symbol} against {len(lots)} lots ({ordering.value}) for account "
            f"{account_id}: buy_value={result.acquisition_value} "
            f"sell_value={result.disposal_value}"
        )
        return result
