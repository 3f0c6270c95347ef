from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from flashdeck.schemas import Card, CardStatus, Deck
from flashdeck.storage import InMemoryCardRepository, SqlCardRepository, get_session_factory, init_db

NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
USER_ID = "user-1"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_card():
    """Factory for cards with a given memory state; ids are card-1, card-2, ..."""
    ids = count(1)

    def _make(deck_id="deck-1", **fields):
        n = next(ids)
        fields.setdefault("id", f"card-{n}")
        fields.setdefault("front", f"front {n}")
        fields.setdefault("back", f"back {n}")
        fields.setdefault("status", CardStatus.NEW)
        # Older cards first: created_at increases with n
        fields.setdefault("created_at", NOW - timedelta(days=100) + timedelta(minutes=n))
        return Card(deck_id=deck_id, **fields)

    return _make


@pytest.fixture
def memory_repo():
    repo = InMemoryCardRepository(user_id=USER_ID)
    repo.add_deck(Deck(id="deck-1", title="Spanish", owner_id=USER_ID))
    return repo


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_repo(engine):
    return SqlCardRepository(get_session_factory(engine), user_id=USER_ID)
