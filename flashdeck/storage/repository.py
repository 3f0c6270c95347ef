"""
Card repository - decks and cards scoped to one user.

The study session talks to storage only through the CardRepository
protocol. Two implementations:
- SqlCardRepository: SQLAlchemy-backed (Postgres / SQLite)
- InMemoryCardRepository: process-local, for headless use and tests

Both raise NotFound for missing decks/cards and Unauthorized for decks
owned by another user.
"""

from __future__ import annotations
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from flashdeck.config import get_default_user_id
from flashdeck.errors import NotFound, Unauthorized
from flashdeck.schemas import Card, CardStatus, CardUpdate, Deck, DEFAULT_EASE, DEFAULT_INTERVAL
from flashdeck.session.selector import select_due
from flashdeck.storage.models import CardModel, DeckModel

logger = logging.getLogger(__name__)


class CardRepository(Protocol):
    """Operations the study session and deck views need from storage."""

    def get_deck(self, deck_id: str) -> Deck: ...

    def get_deck_cards(self, deck_id: str) -> list[Card]: ...

    def get_due_cards(self, deck_id: str, now: datetime) -> list[Card]: ...

    def get_card(self, card_id: str) -> Card: ...

    def create_card(
        self,
        deck_id: str,
        front: str,
        back: str,
        tags: Optional[list[str]] = None
    ) -> Card: ...

    def update_card(self, card_id: str, update: CardUpdate) -> Card: ...

    def delete_card(self, card_id: str) -> None: ...


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to UTC before writing; SQLite keeps the wall clock and drops the offset."""
    if value is None:
        return None
    return _as_utc(value).astimezone(timezone.utc)


# ---- SQLAlchemy implementation ----

class SqlCardRepository:
    """
    CardRepository backed by SQLAlchemy.

    Each call opens and closes its own session.
    """

    def __init__(self, session_factory: sessionmaker, user_id: Optional[str] = None):
        self._session_factory = session_factory
        self.user_id = user_id or get_default_user_id()

    # ---- Decks ----

    def create_deck(self, title: str, description: str = "") -> Deck:
        session = self._session_factory()
        try:
            db_deck = DeckModel(
                id=_new_id(),
                owner_id=self.user_id,
                title=title,
                description=description,
                created_at=_utcnow(),
            )
            session.add(db_deck)
            session.commit()
            logger.info("Created deck %s (%r)", db_deck.id, title)
            return self._to_deck(db_deck)
        finally:
            session.close()

    def get_deck(self, deck_id: str) -> Deck:
        session = self._session_factory()
        try:
            return self._to_deck(self._owned_deck(session, deck_id))
        finally:
            session.close()

    def list_decks(self) -> list[Deck]:
        """
        Get the current user's decks, newest first.
        """
        session = self._session_factory()
        try:
            db_decks = session.query(DeckModel).filter(
                DeckModel.owner_id == self.user_id
            ).order_by(DeckModel.created_at.desc()).all()
            return [self._to_deck(db_deck) for db_deck in db_decks]
        finally:
            session.close()

    def update_deck(
        self,
        deck_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None
    ) -> Deck:
        session = self._session_factory()
        try:
            db_deck = self._owned_deck(session, deck_id)
            if title is not None:
                db_deck.title = title
            if description is not None:
                db_deck.description = description
            session.commit()
            return self._to_deck(db_deck)
        finally:
            session.close()

    def delete_deck(self, deck_id: str) -> None:
        """
        Delete a deck together with all of its cards.
        """
        session = self._session_factory()
        try:
            db_deck = self._owned_deck(session, deck_id)
            # SQLite only honours ON DELETE CASCADE with foreign keys enabled
            removed = session.query(CardModel).filter(
                CardModel.deck_id == deck_id
            ).delete(synchronize_session=False)
            session.delete(db_deck)
            session.commit()
            logger.info("Deleted deck %s and %d card(s)", deck_id, removed)
        finally:
            session.close()

    # ---- Cards ----

    def get_deck_cards(self, deck_id: str) -> list[Card]:
        """
        Get all cards for a deck, newest first.
        """
        session = self._session_factory()
        try:
            self._owned_deck(session, deck_id)
            db_cards = session.query(CardModel).filter(
                CardModel.deck_id == deck_id
            ).order_by(CardModel.created_at.desc()).all()
            return [self._to_card(db_card) for db_card in db_cards]
        finally:
            session.close()

    def get_due_cards(self, deck_id: str, now: datetime) -> list[Card]:
        """
        Get the cards of a deck that are due at `now`, in presentation order.
        """
        return select_due(self.get_deck_cards(deck_id), now)

    def get_card(self, card_id: str) -> Card:
        session = self._session_factory()
        try:
            return self._to_card(self._owned_card(session, card_id))
        finally:
            session.close()

    def create_card(
        self,
        deck_id: str,
        front: str,
        back: str,
        tags: Optional[list[str]] = None
    ) -> Card:
        """
        Create a new card in a deck, with the initial memory state.
        """
        session = self._session_factory()
        try:
            self._owned_deck(session, deck_id)
            now = _utcnow()
            db_card = CardModel(
                id=_new_id(),
                deck_id=deck_id,
                front=front,
                back=back,
                tags=list(tags or []),
                status=CardStatus.NEW.value,
                ease=DEFAULT_EASE,
                interval=DEFAULT_INTERVAL,
                next_review=None,
                last_reviewed=None,
                review_count=0,
                created_at=now,
                updated_at=now,
            )
            session.add(db_card)
            session.commit()
            logger.debug("Created card %s in deck %s", db_card.id, deck_id)
            return self._to_card(db_card)
        finally:
            session.close()

    def update_card(self, card_id: str, update: CardUpdate) -> Card:
        """
        Apply a partial update (only explicitly set fields are written).
        """
        session = self._session_factory()
        try:
            db_card = self._owned_card(session, card_id)
            for name in update.model_fields_set:
                value = getattr(update, name)
                if name == "status" and value is not None:
                    value = CardStatus(value).value
                elif isinstance(value, datetime):
                    value = _to_utc(value)
                setattr(db_card, name, value)
            db_card.updated_at = _utcnow()
            session.commit()
            logger.debug("Updated card %s: %s", card_id, sorted(update.model_fields_set))
            return self._to_card(db_card)
        finally:
            session.close()

    def delete_card(self, card_id: str) -> None:
        session = self._session_factory()
        try:
            db_card = self._owned_card(session, card_id)
            session.delete(db_card)
            session.commit()
            logger.info("Deleted card %s", card_id)
        finally:
            session.close()

    # ---- Helpers ----

    def _owned_deck(self, session: Session, deck_id: str) -> DeckModel:
        db_deck = session.get(DeckModel, deck_id)
        if db_deck is None:
            raise NotFound(f"Deck not found: {deck_id}")
        if db_deck.owner_id != self.user_id:
            raise Unauthorized(f"Deck {deck_id} belongs to another user")
        return db_deck

    def _owned_card(self, session: Session, card_id: str) -> CardModel:
        db_card = session.get(CardModel, card_id)
        if db_card is None:
            raise NotFound(f"Card not found: {card_id}")
        self._owned_deck(session, db_card.deck_id)
        return db_card

    @staticmethod
    def _to_deck(db_deck: DeckModel) -> Deck:
        return Deck(
            id=db_deck.id,
            title=db_deck.title,
            description=db_deck.description or "",
            owner_id=db_deck.owner_id,
            created_at=_as_utc(db_deck.created_at),
        )

    @staticmethod
    def _to_card(db_card: CardModel) -> Card:
        return Card(
            id=db_card.id,
            deck_id=db_card.deck_id,
            front=db_card.front,
            back=db_card.back,
            tags=list(db_card.tags or []),
            status=CardStatus(db_card.status),
            ease=db_card.ease,
            interval=db_card.interval,
            next_review=_as_utc(db_card.next_review),
            last_reviewed=_as_utc(db_card.last_reviewed),
            review_count=db_card.review_count or 0,
            created_at=_as_utc(db_card.created_at),
            updated_at=_as_utc(db_card.updated_at),
        )


# ---- In-memory implementation ----

class InMemoryCardRepository:
    """
    CardRepository holding decks and cards in dictionaries.
    """

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id or get_default_user_id()
        self._decks: dict[str, Deck] = {}
        self._cards: dict[str, Card] = {}

    def create_deck(self, title: str, description: str = "") -> Deck:
        deck = Deck(id=_new_id(), title=title, description=description, owner_id=self.user_id)
        self._decks[deck.id] = deck
        return deck

    def add_deck(self, deck: Deck) -> Deck:
        """Store a prebuilt deck (any owner)."""
        self._decks[deck.id] = deck
        return deck

    def add_card(self, card: Card) -> Card:
        """Store a prebuilt card, e.g. one with an existing memory state."""
        self._owned_deck(card.deck_id)
        self._cards[card.id] = card
        return card

    def get_deck(self, deck_id: str) -> Deck:
        return self._owned_deck(deck_id)

    def list_decks(self) -> list[Deck]:
        decks = [deck for deck in self._decks.values() if deck.owner_id == self.user_id]
        return sorted(decks, key=lambda deck: deck.created_at, reverse=True)

    def update_deck(
        self,
        deck_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None
    ) -> Deck:
        deck = self._owned_deck(deck_id)
        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        deck = deck.model_copy(update=changes)
        self._decks[deck_id] = deck
        return deck

    def delete_deck(self, deck_id: str) -> None:
        self._owned_deck(deck_id)
        self._cards = {
            card_id: card for card_id, card in self._cards.items() if card.deck_id != deck_id
        }
        del self._decks[deck_id]

    def get_deck_cards(self, deck_id: str) -> list[Card]:
        self._owned_deck(deck_id)
        cards = [card for card in self._cards.values() if card.deck_id == deck_id]
        return sorted(cards, key=lambda card: card.created_at, reverse=True)

    def get_due_cards(self, deck_id: str, now: datetime) -> list[Card]:
        return select_due(self.get_deck_cards(deck_id), now)

    def get_card(self, card_id: str) -> Card:
        return self._owned_card(card_id)

    def create_card(
        self,
        deck_id: str,
        front: str,
        back: str,
        tags: Optional[list[str]] = None
    ) -> Card:
        self._owned_deck(deck_id)
        card = Card(id=_new_id(), deck_id=deck_id, front=front, back=back, tags=list(tags or []))
        self._cards[card.id] = card
        return card

    def update_card(self, card_id: str, update: CardUpdate) -> Card:
        card = update.apply_to(self._owned_card(card_id))
        self._cards[card_id] = card
        return card

    def delete_card(self, card_id: str) -> None:
        self._owned_card(card_id)
        del self._cards[card_id]

    def _owned_deck(self, deck_id: str) -> Deck:
        deck = self._decks.get(deck_id)
        if deck is None:
            raise NotFound(f"Deck not found: {deck_id}")
        if deck.owner_id != self.user_id:
            raise Unauthorized(f"Deck {deck_id} belongs to another user")
        return deck

    def _owned_card(self, card_id: str) -> Card:
        card = self._cards.get(card_id)
        if card is None:
            raise NotFound(f"Card not found: {card_id}")
        self._owned_deck(card.deck_id)
        return card
