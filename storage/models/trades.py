"""
Trade Domain ORM Models.

============================================================
PURPOSE
============================================================
Models written by the trade order workflow: the trade itself,
the pending request of a limit order, and the audit trail.

============================================================
DATA LIFECYCLE ROLE
============================================================
- Stage: OPERATIONAL (order placement)
- Mutability: Trade is updated by later lifecycle stages;
  TradeHistory is APPEND-ONLY
- Source: Trade commit writer
- Consumers: Market matching, settlement, audit

============================================================
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    BigInteger,
    ForeignKey,
    Index,
    Integer,
    Sequence,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, PRICE


# Server-side trade id sequence. Created on PostgreSQL only;
# dialects without sequences skip it.
TRADE_ID_SEQUENCE = Sequence("seq_trade_id", start=1, metadata=Base.metadata)


class Trade(Base):
    """
    Trade records.

    ============================================================
    PURPOSE
    ============================================================
    One row per placed order. The identifier is generated at
    creation and never reused. The realized trade price stays
    NULL until execution.

    ============================================================
    TRACEABILITY
    ============================================================
    - t_ca_id: owning account
    - t_exec_name: who placed the order
    - trade_history rows: lifecycle audit trail

    ============================================================
    """

    __tablename__ = "trade"

    t_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="Trade identifier"
    )

    t_dts: Mapped[datetime] = mapped_column(
        nullable=False,
        comment="Creation timestamp"
    )

    t_st_id: Mapped[str] = mapped_column(
        String(4),
        ForeignKey("status_type.st_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Current status"
    )

    t_tt_id: Mapped[str] = mapped_column(
        String(3),
        ForeignKey("trade_type.tt_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Trade type"
    )

    t_is_cash: Mapped[bool] = mapped_column(
        nullable=False,
        comment="Cash (true) or margin (false) trade"
    )

    t_s_symb: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("security.s_symb", ondelete="RESTRICT"),
        nullable=False,
        comment="Security symbol"
    )

    t_qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Requested quantity"
    )

    t_bid_price: Mapped[Decimal] = mapped_column(
        PRICE,
        nullable=False,
        comment="Requested price"
    )

    t_ca_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer_account.ca_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning account"
    )

    t_exec_name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Executor name"
    )

    t_trade_price: Mapped[Optional[Decimal]] = mapped_column(
        PRICE,
        nullable=True,
        comment="Realized price, set by execution"
    )

    t_chrg: Mapped[Decimal] = mapped_column(
        nullable=False,
        comment="Flat charge"
    )

    t_comm: Mapped[Decimal] = mapped_column(
        nullable=False,
        comment="Commission amount"
    )

    t_tax: Mapped[Decimal] = mapped_column(
        nullable=False,
        comment="Estimated tax"
    )

    t_lifo: Mapped[bool] = mapped_column(
        nullable=False,
        comment="Lots closed most-recent-first"
    )

    __table_args__ = (
        Index("idx_trade_account_dts", "t_ca_id", "t_dts"),
        Index("idx_trade_symbol_dts", "t_s_symb", "t_dts"),
    )

    def __repr__(self) -> str:
        return (
            f"<Trade(t_id={self.t_id}, type={self.t_tt_id}, "
            f"symbol={self.t_s_symb}, qty={self.t_qty}, status={self.t_st_id})>"
        )


class TradeRequest(Base):
    """
    Pending limit order awaiting a matching market price.

    Exists only for limit orders and shares the trade id.
    """

    __tablename__ = "trade_request"

    tr_t_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("trade.t_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Trade identifier"
    )

    tr_tt_id: Mapped[str] = mapped_column(
        String(3),
        ForeignKey("trade_type.tt_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Trade type"
    )

    tr_s_symb: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("security.s_symb", ondelete="RESTRICT"),
        nullable=False,
        comment="Security symbol"
    )

    tr_qty: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Requested quantity"
    )

    tr_bid_price: Mapped[Decimal] = mapped_column(
        PRICE,
        nullable=False,
        comment="Limit price"
    )

    tr_ca_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customer_account.ca_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning account"
    )


class TradeHistory(Base):
    """
    Trade lifecycle audit trail.

    APPEND-ONLY: one row per status a trade passes through.
    """

    __tablename__ = "trade_history"

    th_t_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("trade.t_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Trade identifier"
    )

    th_st_id: Mapped[str] = mapped_column(
        String(4),
        ForeignKey("status_type.st_id", ondelete="RESTRICT"),
        primary_key=True,
        comment="Status entered"
    )

    th_dts: Mapped[datetime] = mapped_column(
        nullable=False,
        comment="When the status was entered"
    )
