"""SQLAlchemy database session management.

This module provides database engine configuration, session factory,
transaction scoping and dependency injection for FastAPI endpoints.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.server.config import settings

logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for ORM models
Base = declarative_base()

# Global engine instance
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine() -> Engine:
    """Initialize SQLAlchemy engine.

    Creates the database directory if it doesn't exist and initializes
    the engine with appropriate settings for SQLite.

    Returns:
        Configured SQLAlchemy engine
    """
    global _engine

    if _engine is not None:
        return _engine

    # Ensure database directory exists
    db_dir = settings.get_database_path().parent
    if not db_dir.exists():
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created database directory: {db_dir}")

    _engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},  # Needed for SQLite
        pool_pre_ping=True,
        echo=settings.debug,
    )

    logger.info(f"Database engine initialized: {settings.database_url}")
    return _engine


def get_session_factory() -> sessionmaker:
    """Get SQLAlchemy session factory."""
    global _SessionLocal

    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=init_engine(),
        )

    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions.

    Provides a database session that is automatically closed after use.

    Yields:
        SQLAlchemy database session
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block of writes as one transaction.

    Commits when the block exits normally and rolls back everything
    written inside it when the block raises.

    Example:
        >>> with atomic(db):
        ...     repo.update(trade, status="Rolled")
        ...     repo.create(child)
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def create_tables(engine: Engine | None = None) -> None:
    """Create all database tables and seed default settings."""
    # Import models so they register with Base.metadata
    from src.server.database import models  # noqa: F401
    from src.server.database.models.setting import seed_default_settings

    engine = engine or init_engine()
    Base.metadata.create_all(bind=engine)
    seed_default_settings(engine)
    logger.info("Database tables created")


def check_database_connection() -> bool:
    """Check if database connection is working.

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        with init_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
