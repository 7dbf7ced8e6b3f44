"""
Reference Data ORM Models.

============================================================
PURPOSE
============================================================
Static market and rate tables read by the trade order
workflow: exchanges, companies, securities, last-trade prices,
trade and status types, commission, charge and tax rates.

============================================================
DATA LIFECYCLE ROLE
============================================================
- Stage: REFERENCE
- Mutability: READ-ONLY for this workflow
- Source: Benchmark dataset loader
- Consumers: Security resolver, fee calculator, tax estimator

============================================================
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, PRICE


class Exchange(Base):
    """Stock exchange a security is listed on."""

    __tablename__ = "exchange"

    ex_id: Mapped[str] = mapped_column(
        String(6),
        primary_key=True,
        comment="Exchange identifier, e.g. NYSE"
    )

    ex_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Exchange name"
    )


class Company(Base):
    """Issuing company."""

    __tablename__ = "company"

    co_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        comment="Company identifier"
    )

    co_name: Mapped[str] = mapped_column(
        String(60),
        nullable=False,
        unique=True,
        comment="Company name"
    )


class Security(Base):
    """
    Tradable security.

    Identified by symbol; alternatively addressed by the pair
    (company, issue).
    """

    __tablename__ = "security"

    s_symb: Mapped[str] = mapped_column(
        String(15),
        primary_key=True,
        comment="Security symbol"
    )

    s_issue: Mapped[str] = mapped_column(
        String(6),
        nullable=False,
        comment="Issue type, e.g. COMMON"
    )

    s_name: Mapped[str] = mapped_column(
        String(70),
        nullable=False,
        comment="Security display name"
    )

    s_co_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("company.co_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Issuing company"
    )

    s_ex_id: Mapped[str] = mapped_column(
        String(6),
        ForeignKey("exchange.ex_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Listing exchange"
    )

    __table_args__ = (
        UniqueConstraint("s_co_id", "s_issue", name="uq_security_company_issue"),
    )


class LastTrade(Base):
    """Most recent trade event of a security; source of market price."""

    __tablename__ = "last_trade"

    lt_s_symb: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("security.s_symb", ondelete="RESTRICT"),
        primary_key=True,
        comment="Security symbol"
    )

    lt_price: Mapped[Decimal] = mapped_column(
        PRICE,
        nullable=False,
        comment="Current market price"
    )

    lt_dts: Mapped[datetime] = mapped_column(
        nullable=False,
        comment="Timestamp of the last trade"
    )


class TradeType(Base):
    """Trade type: market or limit, buy or sell."""

    __tablename__ = "trade_type"

    tt_id: Mapped[str] = mapped_column(
        String(3),
        primary_key=True,
        comment="Trade type code, e.g. TMB"
    )

    tt_name: Mapped[str] = mapped_column(
        String(12),
        nullable=False,
        comment="Trade type name"
    )

    tt_is_sell: Mapped[bool] = mapped_column(
        nullable=False,
        comment="Whether the type sells"
    )

    tt_is_mrkt: Mapped[bool] = mapped_column(
        nullable=False,
        comment="Whether the type is priced at market"
    )


class StatusType(Base):
    """Trade lifecycle status."""

    __tablename__ = "status_type"

    st_id: Mapped[str] = mapped_column(
        String(4),
        primary_key=True,
        comment="Status code, e.g. PNDG"
    )

    st_name: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Status name"
    )


class CommissionRate(Base):
    """
    Commission rate per customer tier, trade type, exchange and
    quantity band. The band is closed: from_qty <= qty <= to_qty.
    """

    __tablename__ = "commission_rate"

    cr_c_tier: Mapped[int] = mapped_column(
        SmallInteger,
        primary_key=True,
        comment="Customer tier"
    )

    cr_tt_id: Mapped[str] = mapped_column(
        String(3),
        ForeignKey("trade_type.tt_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Trade type"
    )

    cr_ex_id: Mapped[str] = mapped_column(
        String(6),
        ForeignKey("exchange.ex_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Exchange"
    )

    cr_from_qty: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        comment="Lower bound of quantity band (inclusive)"
    )

    cr_to_qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Upper bound of quantity band (inclusive)"
    )

    cr_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        comment="Commission rate, percent of trade value"
    )

    __table_args__ = (
        CheckConstraint("cr_to_qty >= cr_from_qty", name="ck_commission_band"),
        Index("idx_commission_rate_lookup", "cr_c_tier", "cr_tt_id", "cr_ex_id"),
    )


class Charge(Base):
    """Flat charge per customer tier and trade type."""

    __tablename__ = "charge"

    ch_tt_id: Mapped[str] = mapped_column(
        String(3),
        ForeignKey("trade_type.tt_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Trade type"
    )

    ch_c_tier: Mapped[int] = mapped_column(
        SmallInteger,
        primary_key=True,
        comment="Customer tier"
    )

    ch_chrg: Mapped[Decimal] = mapped_column(
        nullable=False,
        comment="Flat charge amount"
    )


class TaxRate(Base):
    """Tax rate of one jurisdiction."""

    __tablename__ = "taxrate"

    tx_id: Mapped[str] = mapped_column(
        String(4),
        primary_key=True,
        comment="Tax jurisdiction identifier"
    )

    tx_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Jurisdiction name"
    )

    tx_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 5),
        nullable=False,
        comment="Rate as a fraction, e.g. 0.15000"
    )
