"""
Database Persistence Layer - Core Engine.

============================================================
TRANSACTIONAL DATA STORE ACCESS
============================================================

Every trade order call runs inside one explicit transaction.
The transaction boundary is the only concurrency-control
mechanism of the workflow.

Requirements:
- SQLAlchemy ORM with PostgreSQL (sqlite for tests)
- Explicit transaction management
- Hard failures on persistence errors, never partial writes

============================================================
"""

import logging
from contextlib import contextmanager
from typing import Generator, List, Optional

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from core.exceptions import ErrorClassification, TradingException, TransactionFailureError
from storage.models.base import Base
from storage.repositories.exceptions import RepositoryException

from .config import DatabaseConfig, load_database_config


logger = logging.getLogger(__name__)

# =============================================================
# DATABASE ENGINE
# =============================================================

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def create_database_engine(config: Optional[DatabaseConfig] = None) -> Engine:
    """
    Create SQLAlchemy engine for the given configuration.

    Server databases get a QueuePool. An in-memory sqlite URL gets
    a StaticPool so every session sees the same database.

    Args:
        config: Connection settings (defaults to environment)

    Returns:
        SQLAlchemy Engine
    """
    config = config or load_database_config()

    logger.info(f"Creating database engine for: {config.safe_url()}")

    if config.is_sqlite:
        engine = create_engine(
            config.url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=config.echo,
        )

        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    engine = create_engine(
        config.url,
        poolclass=QueuePool,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        echo=config.echo,
    )

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        logger.debug("Database connection established")

    @event.listens_for(engine, "checkout")
    def on_checkout(dbapi_conn, connection_record, connection_proxy):
        logger.debug("Database connection checked out from pool")

    return engine


def get_engine() -> Engine:
    """Get the process-wide database engine, creating if necessary."""
    global _engine
    if _engine is None:
        _engine = create_database_engine()
    return _engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Build a session factory bound to an engine."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def get_session_factory() -> sessionmaker:
    """Get the process-wide session factory, creating if necessary."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = create_session_factory(get_engine())

    return _SessionFactory


# =============================================================
# SESSION MANAGEMENT
# =============================================================


def _classify(error: Exception) -> ErrorClassification:
    """TRANSIENT when the store itself was unreachable."""
    if isinstance(error, OperationalError) or (
        isinstance(error, RepositoryException) and error.retryable
    ):
        return ErrorClassification.TRANSIENT
    return ErrorClassification.NON_RECOVERABLE


@contextmanager
def transaction_scope(
    session_factory: Optional[sessionmaker] = None,
) -> Generator[Session, None, None]:
    """
    Context manager for explicit transaction boundaries.

    Commits only if no exception occurs. Rolls back on ANY
    exception. Workflow errors (TradingException) propagate
    unchanged after the rollback; everything else surfaces as
    TransactionFailureError.

    Usage:
        with transaction_scope(factory) as session:
            TradeCommitWriter(id_generator).write(session, plan)
            # Commits automatically at end
    """
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
        logger.debug("Database transaction committed successfully")
    except TradingException:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database transaction failed, rolling back: {e}")
        session.rollback()
        raise TransactionFailureError(
            f"Transaction failed: {e}",
            operation="commit",
            cause=e,
            classification=_classify(e),
        ) from e
    except Exception as e:
        logger.error(f"Transaction failed with unexpected error: {e}")
        session.rollback()
        raise TransactionFailureError(
            f"Transaction failed: {e}",
            operation="unit_of_work",
            cause=e,
            classification=_classify(e),
        ) from e
    finally:
        session.close()


# =============================================================
# DATABASE INITIALIZATION
# =============================================================


def verify_database_connection(engine: Optional[Engine] = None) -> bool:
    """
    Verify database connection is working.

    Raises:
        TransactionFailureError if connection fails
    """
    engine = engine or get_engine()

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection verified successfully")
            return True
    except OperationalError as e:
        logger.error(f"Database connection failed: {e}")
        raise TransactionFailureError(
            f"Cannot connect to database: {e}",
            operation="connect",
            cause=e,
        ) from e


def create_all_tables(engine: Optional[Engine] = None, drop_existing: bool = False) -> None:
    """
    Create all tables defined in ORM models.

    Args:
        engine: Target engine (defaults to process-wide engine)
        drop_existing: Drop every mapped table first
    """
    # Register every model with Base.metadata
    import storage.models  # noqa: F401

    engine = engine or get_engine()

    if drop_existing:
        logger.warning("Dropping existing tables")
        Base.metadata.drop_all(bind=engine)

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def missing_tables(engine: Optional[Engine] = None) -> List[str]:
    """Return the mapped tables that do not exist in the database."""
    import storage.models  # noqa: F401

    engine = engine or get_engine()
    existing = set(inspect(engine).get_table_names())
    return sorted(name for name in Base.metadata.tables if name not in existing)


# =============================================================
# EXPORTS
# =============================================================

__all__ = [
    "create_database_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "transaction_scope",
    "verify_database_connection",
    "create_all_tables",
    "missing_tables",
]
