"""
Database Package Initialization.

============================================================
TRANSACTIONAL PERSISTENCE LAYER
============================================================

Engine creation, session factories and the transaction scope
every trade order call runs in.

REQUIRED:
- All transactions are explicit with commit/rollback
- Every failure raises a hard exception
- No partial unit of work is ever visible

============================================================
"""

from .config import DatabaseConfig, load_database_config
from .engine import (
    create_all_tables,
    create_database_engine,
    create_session_factory,
    get_engine,
    get_session_factory,
    missing_tables,
    transaction_scope,
    verify_database_connection,
)


__all__ = [
    "DatabaseConfig",
    "load_database_config",
    "create_all_tables",
    "create_database_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "missing_tables",
    "transaction_scope",
    "verify_database_connection",
]
