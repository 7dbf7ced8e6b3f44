"""
Shared fixtures for Trade Order tests.

============================================================
DATASET
============================================================
An in-memory sqlite store seeded with a small brokerage:

- ACME (NYSE, last 12.00), GLBX (NASDAQ, last 50.00)
- Customer 100 "Alex Smith", tier 1, taxed at 0.10 + 0.05
- Customer 200 "Sam Lee", tier 2, no tax bindings
- Account 1000 (customer 100, tax status 2, balance 10000.00)
    ACME lots: #1 100 @ 10.00 (Jan), #2 50 @ 11.00 (Feb)
    grant for "Pat Jones" / 999-88-7777
- Account 2000 (customer 200, tax status 0, balance 5000.00)
    no holdings
- Account 3000 (customer 100, tax status 1, balance 1000.00)
    GLBX short lot #3 -50 @ 60.00
- Commission bands for tiers 1 and 2 only:
    1-1000 at 0.50%, 1001-100000 at 0.30%
- Charges: tier 1 10.00, tier 2 15.00

============================================================
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.clock import MockClock
from core.constants import STATUS_NAMES, TRADE_TYPES
from database import (
    DatabaseConfig,
    create_all_tables,
    create_database_engine,
    create_session_factory,
)
from storage.models import (
    AccountPermission,
    Broker,
    Charge,
    CommissionRate,
    Company,
    Customer,
    CustomerAccount,
    CustomerTaxrate,
    Exchange,
    Holding,
    HoldingSummary,
    LastTrade,
    Security,
    StatusType,
    TaxRate,
    TradeType,
)
from trade_order import InMemoryTradeIdGenerator, TradeOrderService


FIXED_TIME = datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)


def _seed_batches():
    """Rows in foreign key order; each batch is flushed before the next."""
    parents = [
        Exchange(ex_id="NYSE", ex_name="New York Stock Exchange"),
        Exchange(ex_id="NASDAQ", ex_name="NASDAQ"),
        Company(co_id=1, co_name="Acme Corp"),
        Company(co_id=2, co_name="Globex Inc"),
        TaxRate(tx_id="US1", tx_name="Federal", tx_rate=Decimal("0.10000")),
        TaxRate(tx_id="ST1", tx_name="State", tx_rate=Decimal("0.05000")),
        Broker(b_id=1, b_name="Northgate Brokerage"),
        Customer(c_id=100, c_tax_id="111-22-3333", c_l_name="Smith", c_f_name="Alex", c_tier=1),
        Customer(c_id=200, c_tax_id="444-55-6666", c_l_name="Lee", c_f_name="Sam", c_tier=2),
    ]
    parents += [StatusType(st_id=st_id, st_name=name) for st_id, name in STATUS_NAMES.items()]
    parents += [
        TradeType(tt_id=tt_id, tt_name=name, tt_is_sell=is_sell, tt_is_mrkt=is_market)
        for tt_id, (name, is_sell, is_market) in TRADE_TYPES.items()
    ]

    securities = [
        Security(s_symb="ACME", s_issue="COMMON", s_name="Acme Corp Common",
                 s_co_id=1, s_ex_id="NYSE"),
        Security(s_symb="GLBX", s_issue="COMMON", s_name="Globex Inc Common",
                 s_co_id=2, s_ex_id="NASDAQ"),
        CustomerTaxrate(cx_tx_id="US1", cx_c_id=100),
        CustomerTaxrate(cx_tx_id="ST1", cx_c_id=100),
        CustomerAccount(ca_id=1000, ca_b_id=1, ca_c_id=100, ca_name="Alex Brokerage",
                        ca_tax_st=2, ca_bal=Decimal("10000.00")),
        CustomerAccount(ca_id=2000, ca_b_id=1, ca_c_id=200, ca_name="Sam IRA",
                        ca_tax_st=0, ca_bal=Decimal("5000.00")),
        CustomerAccount(ca_id=3000, ca_b_id=1, ca_c_id=100, ca_name="Alex Short",
                        ca_tax_st=1, ca_bal=Decimal("1000.00")),
    ]
    for tier, charge in ((1, Decimal("10.00")), (2, Decimal("15.00"))):
        for tt_id in TRADE_TYPES:
            securities.append(Charge(ch_tt_id=tt_id, ch_c_tier=tier, ch_chrg=charge))
            for ex_id in ("NYSE", "NASDAQ"):
                securities.append(CommissionRate(
                    cr_c_tier=tier, cr_tt_id=tt_id, cr_ex_id=ex_id,
                    cr_from_qty=1, cr_to_qty=1000, cr_rate=Decimal("0.50"),
                ))
                securities.append(CommissionRate(
                    cr_c_tier=tier, cr_tt_id=tt_id, cr_ex_id=ex_id,
                    cr_from_qty=1001, cr_to_qty=100000, cr_rate=Decimal("0.30"),
                ))

    positions = [
        LastTrade(lt_s_symb="ACME", lt_price=Decimal("12.00"),
                  lt_dts=datetime(2024, 6, 3, 14, 0)),
        LastTrade(lt_s_symb="GLBX", lt_price=Decimal("50.00"),
                  lt_dts=datetime(2024, 6, 3, 14, 0)),
        AccountPermission(ap_ca_id=1000, ap_tax_id="999-88-7777", ap_acl="0001",
                          ap_l_name="Jones", ap_f_name="Pat"),
        Holding(h_t_id=1, h_ca_id=1000, h_s_symb="ACME", h_dts=datetime(2024, 1, 2, 10, 0),
                h_price=Decimal("10.00"), h_qty=100),
        Holding(h_t_id=2, h_ca_id=1000, h_s_symb="ACME", h_dts=datetime(2024, 2, 1, 10, 0),
                h_price=Decimal("11.00"), h_qty=50),
        Holding(h_t_id=3, h_ca_id=3000, h_s_symb="GLBX", h_dts=datetime(2024, 3, 1, 10, 0),
                h_price=Decimal("60.00"), h_qty=-50),
        HoldingSummary(hs_ca_id=1000, hs_s_symb="ACME", hs_qty=150),
        HoldingSummary(hs_ca_id=3000, hs_s_symb="GLBX", hs_qty=-50),
    ]

    return [parents, securities, positions]


@pytest.fixture
def engine():
    """Fresh in-memory database with the schema created."""
    engine = create_database_engine(DatabaseConfig(url="sqlite://"))
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory over the seeded dataset."""
    factory = create_session_factory(engine)
    with factory() as session:
        for batch in _seed_batches():
            session.add_all(batch)
            session.flush()
        session.commit()
    return factory


@pytest.fixture
def session(session_factory):
    """Session for component-level tests; rolled back afterwards."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock():
    """Starts at FIXED_TIME and moves one second per reading."""
    return MockClock(FIXED_TIME, step=timedelta(seconds=1))


@pytest.fixture
def id_generator():
    return InMemoryTradeIdGenerator(start=5001)


@pytest.fixture
def service(session_factory, id_generator, clock):
    """Service wired to the seeded store."""
    return TradeOrderService(
        session_factory=session_factory,
        id_generator=id_generator,
        clock=clock,
    )
