"""
Scripts - Bootstrap Database.

============================================================
RESPONSIBILITY
============================================================
Initializes the brokerage database for first-time setup.

- Creates the schema (and the trade id sequence on PostgreSQL)
- Seeds the fixed reference codes (status and trade types)
- Validates that every table exists

Market, customer and rate data are loaded by the benchmark's
dataset loader, not here.

============================================================
USAGE
============================================================
python -m scripts.bootstrap_db

Options:
  --drop-existing    Drop existing tables (DANGEROUS)
  --seed-reference   Seed status and trade type codes
  --validate-only    Only validate, don't create
  --env-file PATH    Load settings from a .env file

EXIT CODES:
- 0: Success
- 1: Database connection failed
- 2: Table creation failed
- 3: Seeding failed
- 4: Validation failed (tables missing)

============================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.constants import STATUS_NAMES, TRADE_TYPES
from core.exceptions import TradingException
from database import (
    create_all_tables,
    create_database_engine,
    create_session_factory,
    load_database_config,
    missing_tables,
    transaction_scope,
    verify_database_connection,
)
from storage.models import StatusType, TradeType


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("bootstrap_db")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the trade order database")
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating them (DANGEROUS)",
    )
    parser.add_argument(
        "--seed-reference",
        action="store_true",
        help="Seed status and trade type reference codes",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only check that every table exists",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file",
    )
    return parser.parse_args(argv)


def seed_reference_codes(session_factory) -> int:
    """
    Upsert the status and trade type codes.

    Returns:
        Number of rows merged
    """
    count = 0
    with transaction_scope(session_factory) as session:
        for st_id, st_name in STATUS_NAMES.items():
            session.merge(StatusType(st_id=st_id, st_name=st_name))
            count += 1

        for tt_id, (tt_name, is_sell, is_market) in TRADE_TYPES.items():
            session.merge(TradeType(
                tt_id=tt_id,
                tt_name=tt_name,
                tt_is_sell=is_sell,
                tt_is_mrkt=is_market,
            ))
            count += 1

    return count


def main(argv: Optional[List[str]] = None) -> int:
    """Bootstrap database entry point."""
    args = parse_args(argv)

    config = load_database_config(args.env_file)
    engine = create_database_engine(config)

    logger.info("=" * 60)
    logger.info("BOOTSTRAP DATABASE")
    logger.info("=" * 60)
    logger.info(f"Target: {config.safe_url()}")

    try:
        verify_database_connection(engine)
    except TradingException as e:
        logger.error(f"Connection failed: {e}")
        return 1

    if not args.validate_only:
        if args.drop_existing:
            logger.warning("--drop-existing given: all trade order tables will be dropped")
        try:
            create_all_tables(engine, drop_existing=args.drop_existing)
        except Exception as e:
            logger.error(f"Table creation failed: {e}")
            return 2

        if args.seed_reference:
            try:
                count = seed_reference_codes(create_session_factory(engine))
            except TradingException as e:
                logger.error(f"Seeding failed: {e}")
                return 3
            logger.info(f"Seeded {count} reference codes")

    missing = missing_tables(engine)
    if missing:
        logger.error(f"Missing tables: {', '.join(missing)}")
        return 4

    logger.info("All tables present")
    return 0


if __name__ == "__main__":
    sys.exit(main())
