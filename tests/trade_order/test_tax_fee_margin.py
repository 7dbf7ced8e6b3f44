"""
Tax, Fee and Margin Tests.

============================================================
PURPOSE
============================================================
Tests for the estimators feeding the trade impact estimate.

TEST CATEGORIES:
- Tax: taxable statuses, summed rates, non-positive gains
- Fees: commission bands, charges, commission amount
- Margin: asset base for cash and margin trades

============================================================
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from core.exceptions import NotFoundError
from trade_order.fee_calculator import FeeCalculator, commission_amount
from trade_order.margin_calculator import MarginCalculator, customer_assets
from trade_order.tax_estimator import TaxEstimator, compute_tax, is_taxable
from trade_order.types import LotMatchResult


# ============================================================
# TAX TESTS
# ============================================================

class TestTaxEstimator:
    """Tests for capital gains tax estimation."""

    @pytest.mark.parametrize("status,expected", [(0, False), (1, True), (2, True), (3, False)])
    def test_is_taxable(self, status, expected):
        assert is_taxable(status) is expected

    def test_compute_tax_on_gain(self):
        assert compute_tax(Decimal("120.00"), Decimal("0.15")) == Decimal("18.00")

    def test_compute_tax_on_loss_is_zero(self):
        assert compute_tax(Decimal("-50.00"), Decimal("0.15")) == Decimal("0")

    def test_gain_taxed_at_sum_of_bound_rates(self, session):
        """Customer 100 is bound to 0.10 and 0.05."""
        match = LotMatchResult(
            acquisition_value=Decimal("600.00"),
            disposal_value=Decimal("720.00"),
        )

        tax = TaxEstimator(session).estimate(match, customer_id=100, tax_status=2)

        assert tax == Decimal("18.00")

    def test_non_taxable_account(self, session):
        match = LotMatchResult(
            acquisition_value=Decimal("600.00"),
            disposal_value=Decimal("720.00"),
        )

        tax = TaxEstimator(session).estimate(match, customer_id=100, tax_status=0)

        assert tax == Decimal("0")

    def test_loss_is_not_taxed(self, session):
        match = LotMatchResult(
            acquisition_value=Decimal("720.00"),
            disposal_value=Decimal("600.00"),
        )

        assert TaxEstimator(session).estimate(match, customer_id=100, tax_status=2) == Decimal("0")

    def test_customer_without_bindings_pays_nothing(self, session):
        match = LotMatchResult(
            acquisition_value=Decimal("100.00"),
            disposal_value=Decimal("200.00"),
        )

        assert TaxEstimator(session).estimate(match, customer_id=200, tax_status=2) == Decimal("0")

    def test_rate_table_not_read_without_gain(self):
        """No gain, no tax rate lookup."""
        estimator = TaxEstimator(MagicMock())
        estimator._tax_rates = MagicMock()

        tax = estimator.estimate(LotMatchResult(), customer_id=100, tax_status=2)

        assert tax == Decimal("0")
        estimator._tax_rates.sum_rates_for_customer.assert_not_called()

    def test_custom_taxable_statuses(self, session):
        match = LotMatchResult(
            acquisition_value=Decimal("100.00"),
            disposal_value=Decimal("200.00"),
        )

        estimator = TaxEstimator(session, taxable_statuses=frozenset({2}))

        assert estimator.estimate(match, customer_id=100, tax_status=1) == Decimal("0")
        assert estimator.estimate(match, customer_id=100, tax_status=2) == Decimal("15.00")


# ============================================================
# FEE TESTS
# ============================================================

class TestFeeCalculator:
    """Tests for commission and charge lookups."""

    def test_commission_rate_small_band(self, session):
        rate = FeeCalculator(session).commission_rate(1, "TMB", "NYSE", 200)

        assert rate == Decimal("0.50")

    def test_commission_rate_band_edges(self, session):
        fees = FeeCalculator(session)

        assert fees.commission_rate(1, "TMB", "NYSE", 1000) == Decimal("0.50")
        assert fees.commission_rate(1, "TMB", "NYSE", 1001) == Decimal("0.30")

    def test_commission_rate_missing_band(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            FeeCalculator(session).commission_rate(3, "TMB", "NYSE", 200)

        assert exc_info.value.entity == "CommissionRate"

    def test_quantity_beyond_every_band(self, session):
        with pytest.raises(NotFoundError):
            FeeCalculator(session).commission_rate(1, "TMB", "NYSE", 500000)

    def test_charge(self, session):
        fees = FeeCalculator(session)

        assert fees.charge(1, "TLS") == Decimal("10.00")
        assert fees.charge(2, "TLS") == Decimal("15.00")

    def test_missing_charge(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            FeeCalculator(session).charge(3, "TLS")

        assert exc_info.value.entity == "Charge"

    def test_commission_amount(self):
        assert commission_amount(Decimal("0.50"), 60, Decimal("12.00")) == Decimal("3.60")

    def test_commission_amount_rounds_half_up(self):
        # 0.25% of 1 x 2.00 = 0.005
        assert commission_amount(Decimal("0.25"), 1, Decimal("2.00")) == Decimal("0.01")


# ============================================================
# MARGIN TESTS
# ============================================================

class TestCustomerAssets:
    """Tests for the pure asset base rule."""

    def test_margin_without_holdings_uses_balance(self):
        assert customer_assets(True, Decimal("5000.00"), None) == Decimal("5000.00")

    def test_margin_with_holdings_ignores_balance(self):
        assert customer_assets(True, Decimal("5000.00"), Decimal("1800.00")) == Decimal("1800.00")

    def test_cash_adds_holdings_and_balance(self):
        assert customer_assets(False, Decimal("5000.00"), Decimal("1800.00")) == Decimal("6800.00")

    def test_cash_without_holdings(self):
        assert customer_assets(False, Decimal("5000.00"), None) == Decimal("5000.00")


class TestMarginCalculator:
    """Tests against the seeded store."""

    def test_holdings_value_marked_to_market(self, session):
        # 150 ACME x 12.00
        assert MarginCalculator(session).holdings_value(1000) == Decimal("1800.00")

    def test_short_position_has_negative_value(self, session):
        # -50 GLBX x 50.00
        assert MarginCalculator(session).holdings_value(3000) == Decimal("-2500.00")

    def test_no_holdings(self, session):
        assert MarginCalculator(session).holdings_value(2000) is None

    def test_compute(self, session):
        margin = MarginCalculator(session)

        assert margin.compute(1000, is_margin=False) == Decimal("11800.00")
        assert margin.compute(1000, is_margin=True) == Decimal("1800.00")
        assert margin.compute(2000, is_margin=True) == Decimal("5000.00")

    def test_unknown_account(self, session):
        with pytest.raises(NotFoundError):
            MarginCalculator(session).compute(9999, is_margin=False)
