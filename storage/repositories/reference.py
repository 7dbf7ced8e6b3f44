"""
Reference Data Repositories.

============================================================
PURPOSE
============================================================
Read-only access to securities, prices, trade types and the
fee and tax rate tables.

A lookup that finds nothing raises RecordNotFoundError instead
of returning None: missing reference data is a data-integrity
failure, never a default.

============================================================
REPOSITORIES
============================================================
- CompanyRepository
- SecurityRepository
- LastTradeRepository
- TradeTypeRepository
- CommissionRateRepository
- ChargeRepository
- TaxRateRepository

============================================================
"""

from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from storage.models.accounts import CustomerTaxrate
from storage.models.reference import (
    Charge,
    CommissionRate,
    Company,
    LastTrade,
    Security,
    TaxRate,
    TradeType,
)
from storage.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """Repository for issuing companies."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, Company, "CompanyRepository")

    def get_company(self, co_id: int) -> Company:
        """Get company by ID, raising if not found."""
        return self._get_by_id_or_raise(co_id, "co_id")

    def get_company_by_name(self, co_name: str) -> Company:
        """
        Get company by exact name.

        Raises:
            RecordNotFoundError: If no company has this name
        """
        stmt = select(Company).where(Company.co_name == co_name)
        company = self._execute_scalar(stmt)
        if company is None:
            raise self._not_found(co_name, "co_name")
        return company


class SecurityRepository(BaseRepository[Security]):
    """Repository for securities."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, Security, "SecurityRepository")

    def get_by_symbol(self, symbol: str) -> Security:
        """Get security by symbol, raising if not found."""
        return self._get_by_id_or_raise(symbol, "s_symb")

    def get_by_company_issue(self, co_id: int, issue: str) -> Security:
        """
        Get the security a company issued under an issue code.

        Raises:
            RecordNotFoundError: If the company has no such issue
        """
        stmt = select(Security).where(and_(
            Security.s_co_id == co_id,
            Security.s_issue == issue,
        ))
        security = self._execute_scalar(stmt)
        if security is None:
            raise self._not_found(f"{co_id}/{issue}", "s_co_id/s_issue")
        return security


class LastTradeRepository(BaseRepository[LastTrade]):
    """Repository for current market prices."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, LastTrade, "LastTradeRepository")

    def get_price(self, symbol: str) -> Decimal:
        """Get the current market price of a security."""
        return self._get_by_id_or_raise(symbol, "lt_s_symb").lt_price


class TradeTypeRepository(BaseRepository[TradeType]):
    """Repository for trade types."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, TradeType, "TradeTypeRepository")

    def get_trade_type(self, tt_id: str) -> TradeType:
        """Get trade type by code, raising if not found."""
        return self._get_by_id_or_raise(tt_id, "tt_id")


class CommissionRateRepository(BaseRepository[CommissionRate]):
    """Repository for commission rate bands."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, CommissionRate, "CommissionRateRepository")

    def find_rate(
        self,
        tier: int,
        tt_id: str,
        ex_id: str,
        qty: int,
    ) -> Decimal:
        """
        Find the commission rate whose quantity band holds qty.

        Args:
            tier: Customer tier
            tt_id: Trade type
            ex_id: Exchange
            qty: Trade quantity

        Returns:
            Commission rate in percent

        Raises:
            RecordNotFoundError: If no band covers the inputs
        """
        stmt = (
            select(CommissionRate.cr_rate)
            .where(and_(
                CommissionRate.cr_c_tier == tier,
                CommissionRate.cr_tt_id == tt_id,
                CommissionRate.cr_ex_id == ex_id,
                CommissionRate.cr_from_qty <= qty,
                CommissionRate.cr_to_qty >= qty,
            ))
            .order_by(CommissionRate.cr_from_qty)
            .limit(1)
        )
        rate = self._execute_scalar(stmt)
        if rate is None:
            raise self._not_found(
                f"tier={tier},type={tt_id},exchange={ex_id},qty={qty}",
                "commission_band",
            )
        return rate


class ChargeRepository(BaseRepository[Charge]):
    """Repository for flat trade charges."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, Charge, "ChargeRepository")

    def get_charge(self, tier: int, tt_id: str) -> Decimal:
        """
        Get the flat charge for a customer tier and trade type.

        Raises:
            RecordNotFoundError: If no charge is defined
        """
        stmt = select(Charge.ch_chrg).where(and_(
            Charge.ch_c_tier == tier,
            Charge.ch_tt_id == tt_id,
        ))
        charge = self._execute_scalar(stmt)
        if charge is None:
            raise self._not_found(f"tier={tier},type={tt_id}", "charge")
        return charge


class TaxRateRepository(BaseRepository[TaxRate]):
    """Repository for tax rates and customer bindings."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, TaxRate, "TaxRateRepository")

    def sum_rates_for_customer(self, c_id: int) -> Decimal:
        """
        Sum every tax rate the customer is bound to.

        A customer may be subject to several jurisdictions at once
        (e.g. state and federal). No bindings yields 0.
        """
        bound = select(CustomerTaxrate.cx_tx_id).where(CustomerTaxrate.cx_c_id == c_id)
        stmt = select(func.sum(TaxRate.tx_rate)).where(TaxRate.tx_id.in_(bound))
        total = self._execute_scalar(stmt)
        return Decimal(total) if total is not None else Decimal("0")
