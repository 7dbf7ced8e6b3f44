"""
Account Domain ORM Models.

============================================================
PURPOSE
============================================================
Models for customers, their brokers, accounts, permission
grants and current positions.

============================================================
DATA LIFECYCLE ROLE
============================================================
- Stage: OPERATIONAL
- Mutability: READ-ONLY for the trade order workflow
  (lots and summaries are maintained by trade settlement)
- Consumers: Account lookup, lot matcher, margin calculator

============================================================
MODELS
============================================================
- Broker
- Customer
- CustomerTaxrate: Customer to tax jurisdiction binding
- CustomerAccount
- AccountPermission: Executors allowed to trade an account
- Holding: One lot of a position
- HoldingSummary: Signed sum of lots per account/security

============================================================
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, BALANCE, PRICE


class Broker(Base):
    """Broker servicing customer accounts."""

    __tablename__ = "broker"

    b_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        comment="Broker identifier"
    )

    b_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Broker name"
    )


class Customer(Base):
    """Customer owning one or more accounts."""

    __tablename__ = "customer"

    c_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        comment="Customer identifier"
    )

    c_tax_id: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Customer tax id"
    )

    c_l_name: Mapped[str] = mapped_column(
        String(25),
        nullable=False,
        comment="Last name"
    )

    c_f_name: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="First name"
    )

    c_tier: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        comment="Customer tier, drives fee lookups"
    )


class CustomerTaxrate(Base):
    """Tax jurisdictions a customer is subject to."""

    __tablename__ = "customer_taxrate"

    cx_tx_id: Mapped[str] = mapped_column(
        String(4),
        ForeignKey("taxrate.tx_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Tax jurisdiction"
    )

    cx_c_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer.c_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Customer"
    )

    __table_args__ = (
        Index("idx_customer_taxrate_customer", "cx_c_id"),
    )


class CustomerAccount(Base):
    """Brokerage account holding cash and positions."""

    __tablename__ = "customer_account"

    ca_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        comment="Account identifier"
    )

    ca_b_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("broker.b_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Servicing broker"
    )

    ca_c_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer.c_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning customer"
    )

    ca_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Account name"
    )

    ca_tax_st: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        comment="Tax status: 0 non-taxable, 1 and 2 taxable"
    )

    ca_bal: Mapped[Decimal] = mapped_column(
        BALANCE,
        nullable=False,
        comment="Cash balance"
    )


class AccountPermission(Base):
    """Executor allowed to place trades on an account."""

    __tablename__ = "account_permission"

    ap_ca_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer_account.ca_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Account"
    )

    ap_tax_id: Mapped[str] = mapped_column(
        String(20),
        primary_key=True,
        comment="Executor tax id"
    )

    ap_acl: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
        comment="Access control list"
    )

    ap_l_name: Mapped[str] = mapped_column(
        String(25),
        nullable=False,
        comment="Executor last name"
    )

    ap_f_name: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Executor first name"
    )


class Holding(Base):
    """
    One lot of a position.

    Positive quantity is long, negative is short. The lot is
    keyed by the trade that opened it, which also breaks ties
    between lots opened at the same instant.
    """

    __tablename__ = "holding"

    h_t_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        comment="Trade that opened the lot"
    )

    h_ca_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer_account.ca_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Account"
    )

    h_s_symb: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("security.s_symb", ondelete="RESTRICT"),
        nullable=False,
        comment="Security symbol"
    )

    h_dts: Mapped[datetime] = mapped_column(
        nullable=False,
        comment="When the lot was opened"
    )

    h_price: Mapped[Decimal] = mapped_column(
        PRICE,
        nullable=False,
        comment="Acquisition price"
    )

    h_qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Signed lot quantity"
    )

    __table_args__ = (
        Index("idx_holding_account_symbol_dts", "h_ca_id", "h_s_symb", "h_dts"),
    )


class HoldingSummary(Base):
    """Signed sum of lot quantities per account and security."""

    __tablename__ = "holding_summary"

    hs_ca_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer_account.ca_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Account"
    )

    hs_s_symb: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("security.s_symb", ondelete="RESTRICT"),
        primary_key=True,
        comment="Security symbol"
    )

    hs_qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Signed position quantity"
    )
