"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from cash_or_card.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def configure_sqlite(engine: Engine) -> Engine:
    """Make SQLite enforce foreign keys and take the write lock up front.

    pysqlite's own transaction handling is disabled so that every transaction
    starts with ``BEGIN IMMEDIATE``; concurrent writers then queue on the
    busy timeout instead of failing a read-to-write lock upgrade. SAVEPOINTs
    also need this to behave.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(settings.sqlite_busy_timeout_seconds * 1000)}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # pragma: no cover - driver hook
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


# Ensure model modules are imported so that metadata is populated when create_all runs.
import cash_or_card.models  # noqa: E402,F401

engine = configure_sqlite(
    create_engine(
        settings.effective_database_url,
        pool_pre_ping=True,
        echo=settings.sql_debug,
    )
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
