"""
Holding Repositories.

============================================================
PURPOSE
============================================================
Read access to position lots and per-security position
summaries of an account.

============================================================
CONCURRENCY
============================================================
The summary read used before lot matching takes a row lock
(SELECT ... FOR UPDATE) so concurrent orders on the same
account and security serialize at the store. Dialects without
row locks (sqlite) ignore the clause.

============================================================
"""

from typing import List, Sequence

from sqlalchemy import and_, asc, desc, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from storage.models.accounts import Holding, HoldingSummary
from storage.models.reference import LastTrade
from storage.repositories.base import BaseRepository


class HoldingRepository(BaseRepository[Holding]):
    """Repository for position lots."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, Holding, "HoldingRepository")

    def list_lots(
        self,
        ca_id: int,
        symbol: str,
        most_recent_first: bool,
    ) -> List[Holding]:
        """
        List the lots of one position in closing order.

        Lots are ordered by opening time; lots opened at the same
        instant fall back to their trade id, in the same direction.

        Args:
            ca_id: Account identifier
            symbol: Security symbol
            most_recent_first: Newest lots first (LIFO) or oldest (FIFO)

        Returns:
            List of Holding, possibly empty
        """
        direction = desc if most_recent_first else asc
        stmt = (
            select(Holding)
            .where(and_(
                Holding.h_ca_id == ca_id,
                Holding.h_s_symb == symbol,
            ))
            .order_by(direction(Holding.h_dts), direction(Holding.h_t_id))
        )
        return self._execute_query(stmt)


class HoldingSummaryRepository(BaseRepository[HoldingSummary]):
    """Repository for position summaries."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, HoldingSummary, "HoldingSummaryRepository")

    def get_quantity(self, ca_id: int, symbol: str, lock: bool = True) -> int:
        """
        Get the signed position quantity; 0 when there is no position.

        Args:
            ca_id: Account identifier
            symbol: Security symbol
            lock: Take a row lock for the rest of the transaction
        """
        stmt = select(HoldingSummary.hs_qty).where(and_(
            HoldingSummary.hs_ca_id == ca_id,
            HoldingSummary.hs_s_symb == symbol,
        ))
        if lock:
            stmt = stmt.with_for_update()
        qty = self._execute_scalar(stmt)
        return qty if qty is not None else 0

    def list_position_values(self, ca_id: int) -> Sequence[Row]:
        """
        List every position of an account with its market price.

        Returns:
            Rows of (hs_s_symb, hs_qty, lt_price)
        """
        stmt = (
            select(
                HoldingSummary.hs_s_symb,
                HoldingSummary.hs_qty,
                LastTrade.lt_price,
            )
            .join(LastTrade, LastTrade.lt_s_symb == HoldingSummary.hs_s_symb)
            .where(HoldingSummary.hs_ca_id == ca_id)
            .order_by(HoldingSummary.hs_s_symb)
        )
        return self._execute_rows(stmt)
