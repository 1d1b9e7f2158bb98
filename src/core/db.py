"""Database connection and session management."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, List

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import NullPool

from .config import get_settings
from .logging_config import get_logger

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

# Required tables that MUST exist for the system to function
REQUIRED_TABLES = [
    "user",
    "user_session",
    "project",
    "cp_project_map",
    "lead",
    "ad",
    "cp_profile",
    "marketing_counter",
    "marketing_request",
]


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(database_url: str) -> Engine:
    """
    Create an engine with dialect-appropriate pooling.

    SQLite gets NullPool, WAL and a busy timeout so concurrent writers wait
    instead of failing; server databases get a pre-pinged connection pool.
    """
    if _is_sqlite(database_url):
        new_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": 30},
            poolclass=NullPool,
        )

        @event.listens_for(new_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if ":memory:" not in database_url:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine

    return create_engine(
        database_url,
        pool_size=SETTINGS.db_pool_size,
        max_overflow=SETTINGS.db_max_overflow,
        pool_timeout=SETTINGS.db_pool_timeout,
        pool_pre_ping=True,
    )


engine = build_engine(SETTINGS.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Commits on success, rolls back on any exception.

    Yields:
        SQLAlchemy Session object.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _missing_tables(bind: Engine) -> List[str]:
    existing_tables = set(inspect(bind).get_table_names())
    return [t for t in REQUIRED_TABLES if t not in existing_tables]


def init_db(bind: Engine | None = None) -> dict:
    """
    Create any tables that do not exist yet.

    Existing tables are never altered; schema changes go through Alembic.

    Returns:
        Dict with initialization results.
    """
    # Import models to ensure they are registered with Base
    from . import models  # noqa: F401

    bind = bind or engine
    result = {
        "status": "success",
        "tables_created": [],
        "warnings": [],
    }

    try:
        before = set(inspect(bind).get_table_names())
        Base.metadata.create_all(bind=bind, checkfirst=True)
        after = set(inspect(bind).get_table_names())
        result["tables_created"] = sorted(after - before)

        missing_required = _missing_tables(bind)
        if missing_required:
            result["warnings"].append(f"Missing required tables: {missing_required}")
            result["status"] = "warning"

        if result["tables_created"]:
            LOGGER.info(f"Created tables: {result['tables_created']}")
    except Exception as e:
        result["status"] = "error"
        result["error"] = str(e)
        LOGGER.error(f"init_db failed: {e}")

    return result


def validate_database(bind: Engine | None = None) -> dict:
    """
    Validate database connection and required tables.

    Call this at application startup to ensure the database is ready.

    Returns:
        Dict with validation results.
    """
    bind = bind or engine
    result = {
        "status": "ok",
        "tables_missing": [],
        "errors": [],
    }

    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))

        missing = _missing_tables(bind)
        result["tables_missing"] = missing
        if missing:
            result["status"] = "missing_tables"
            result["errors"].append(f"Missing required tables: {missing}")

    except Exception as e:
        result["status"] = "error"
        result["errors"].append(str(e))

    return result
