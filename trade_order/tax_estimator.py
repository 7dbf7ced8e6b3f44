"""
Trade Order - Tax Estimator.

Estimates the capital gains tax a trade would incur. Customers
can be subject to more than one jurisdiction (e.g. state and
federal), so every bound rate is summed.
"""

import logging
from decimal import Decimal
from typing import FrozenSet

from sqlalchemy.orm import Session

from core.constants import TAXABLE_STATUSES, ZERO
from storage.repositories.reference import TaxRateRepository

from .types import LotMatchResult


logger = logging.getLogger(__name__)


def is_taxable(tax_status: int, taxable_statuses: FrozenSet[int] = TAXABLE_STATUSES) -> bool:
    return tax_status in taxable_statuses


def compute_tax(gain: Decimal, rate_sum: Decimal) -> Decimal:
    """Tax on a positive gain; zero otherwise."""
    if gain <= ZERO:
        return ZERO
    return gain * rate_sum


class TaxEstimator:
    """Capital gains tax estimation for one customer."""

    def __init__(
        self,
        session: Session,
        taxable_statuses: FrozenSet[int] = TAXABLE_STATUSES,
    ):
        self._tax_rates = TaxRateRepository(session)
        self._taxable_statuses = taxable_statuses

    def estimate(
        self,
        match: LotMatchResult,
        customer_id: int,
        tax_status: int,
    ) -> Decimal:
        """
        Estimate tax on the gain realized by the matched lots.

        The rate table is only read when there is a gain and the
        account is taxable. A customer with no bound rates pays 0.
        """
        gain = match.realized_gain
        if gain <= ZERO or not is_taxable(tax_status, self._taxable_statuses):
            return ZERO

        rate_sum = self._tax_rates.sum_rates_for_customer(customer_id)
        tax = compute_tax(gain, rate_sum)

        logger.debug(
            f"Customer {customer_id} gain {gain} at combined rate {rate_sum}: tax {tax}"
        )
        return tax
