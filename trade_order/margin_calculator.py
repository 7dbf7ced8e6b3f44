"""
Trade Order - Margin Calculator.

============================================================
PURPOSE
============================================================
Computes the customer asset base a trade is checked against.

- holdings value: sum of position quantity x last trade price
- margin trade:
    no holdings  -> assets = cash balance
    holdings     -> assets = holdings value (cash NOT added)
- cash trade:
    assets = holdings value + cash balance

Callers comparing margin results must expect the balance to be
absent from the margin figure whenever any holding exists.

============================================================
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from storage.repositories.accounts import CustomerAccountRepository
from storage.repositories.holdings import HoldingSummaryRepository

from .errors import required_row


logger = logging.getLogger(__name__)


def customer_assets(
    is_margin: bool,
    cash_balance: Decimal,
    holdings_value: Optional[Decimal],
) -> Decimal:
    """
    Combine balance and holdings into the customer's asset base.

    Args:
        is_margin: Margin trade
        cash_balance: Account cash balance
        holdings_value: Marked-to-market holdings, None when the
            account has no holdings at all
    """
    if is_margin:
        if holdings_value is None:
            return cash_balance
        return holdings_value

    return (holdings_value or Decimal("0")) + cash_balance


class MarginCalculator:
    """Asset base computation for an account."""

    def __init__(self, session: Session):
        self._accounts = CustomerAccountRepository(session)
        self._summaries = HoldingSummaryRepository(session)

    def holdings_value(self, account_id: int) -> Optional[Decimal]:
        """
        Marked-to-market value of every position of the account.

        Returns:
            Sum of quantity x last price, or None without holdings
        """
        rows = self._summaries.list_position_values(account_id)
        if not rows:
            return None
        return sum((row.hs_qty * row.lt_price for row in rows), Decimal("0"))

    def compute(self, account_id: int, is_margin: bool) -> Decimal:
        """
        Customer asset base for a trade on the account.

        Raises:
            NotFoundError: Unknown account
        """
        with required_row("CustomerAccount", account_id):
            balance = self._accounts.get_balance(account_id)

        holdings = self.holdings_value(account_id)
        assets = customer_assets(is_margin, balance, holdings)

        logger.debug(
            f"Account {account_id} assets={assets} "
            f"(margin={is_margin}, balance={balance}, holdings={holdings})"
        )
        return assets
