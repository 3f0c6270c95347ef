"""
Database - engine, sessions and schema management

Uses SQLAlchemy ORM; the URL comes from flashdeck.config.
This module handles ONLY connection and schema concerns.
Card queries live in the repository module.
"""

from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from flashdeck.config import get_database_url
from flashdeck.storage.models import Base

logger = logging.getLogger(__name__)


def get_engine(db_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Server databases get a connection pool; SQLite uses SQLAlchemy's default.

    Args:
        db_url: Database URL (defaults to the configured DATABASE_URL)

    Returns:
        SQLAlchemy Engine instance
    """
    db_url = db_url or get_database_url()
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)

    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def get_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine (objects stay usable after commit)."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    existing_tables = set(inspect(engine).get_table_names())
    missing = {table.name for table in Base.metadata.sorted_tables} - existing_tables
    if missing:
        Base.metadata.create_all(engine)
        logger.info("Created tables: %s", ", ".join(sorted(missing)))


def reset_db(engine: Engine) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All decks, cards and review state will be lost!
    """
    Base.metadata.drop_all(engine)
    logger.warning("All tables dropped")
    init_db(engine)
