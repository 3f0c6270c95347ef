"""Card storage: ORM schema, database setup and repositories."""

from flashdeck.storage.database import get_engine, get_session_factory, init_db, reset_db
from flashdeck.storage.repository import (
    CardRepository,
    InMemoryCardRepository,
    SqlCardRepository,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_db",
    "CardRepository",
    "InMemoryCardRepository",
    "SqlCardRepository",
]
