"""
Trade Order - Fee Calculator.

Commission rate and flat charge lookups. A gap in either rate
table is a data-integrity failure and raises NotFoundError.
"""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from core.constants import CENT
from storage.repositories.reference import ChargeRepository, CommissionRateRepository

from .errors import required_row


def commission_amount(rate: Decimal, trade_qty: int, price: Decimal) -> Decimal:
    """
    Commission owed on a trade.

    The rate is a percentage of trade value; the result is
    rounded half-up to cents.
    """
    amount = rate / Decimal(100) * trade_qty * price
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class FeeCalculator:
    """Fee lookups for a customer tier."""

    def __init__(self, session: Session):
        self._commission_rates = CommissionRateRepository(session)
        self._charges = ChargeRepository(session)

    def commission_rate(
        self,
        customer_tier: int,
        trade_type_id: str,
        exchange_id: str,
        trade_qty: int,
    ) -> Decimal:
        """
        Commission rate of the band holding trade_qty.

        Raises:
            NotFoundError: No band covers the inputs
        """
        key = f"tier={customer_tier},type={trade_type_id},exchange={exchange_id},qty={trade_qty}"
        with required_row("CommissionRate", key):
            return self._commission_rates.find_rate(
                customer_tier, trade_type_id, exchange_id, trade_qty
            )

    def charge(self, customer_tier: int, trade_type_id: str) -> Decimal:
        """
        Flat charge for a tier and trade type.

        Raises:
            NotFoundError: No charge defined
        """
        with required_row("Charge", f"tier={customer_tier},type={trade_type_id}"):
            return self._charges.get_charge(customer_tier, trade_type_id)
