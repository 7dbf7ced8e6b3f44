"""
Base ORM Model.

============================================================
PURPOSE
============================================================
Provides the declarative base used by all ORM models of the
brokerage data store.

============================================================
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric
from sqlalchemy.orm import DeclarativeBase


# Column types shared by the money-carrying tables
PRICE = Numeric(8, 2)
VALUE = Numeric(10, 2)
BALANCE = Numeric(12, 2)


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    All models in the brokerage store inherit from this base.
    Prices and amounts map to Decimal, never float.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
        Decimal: VALUE,
    }
