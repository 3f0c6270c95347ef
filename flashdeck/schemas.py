"""
Pydantic models for decks and cards.

These mirror the rows handed out by the card repository. Scheduling fields
(status, ease, interval, next_review, last_reviewed, review_count) are only
ever written through a CardUpdate built by the scheduler's merge step.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# Configuration
DEFAULT_EASE = 2.5    # Ease factor of a freshly created card
DEFAULT_INTERVAL = 0  # 0 = never scheduled


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CardStatus(str, Enum):
    """Lifecycle stage of a card."""
    NEW = "new"            # Never rated
    LEARNING = "learning"  # Recently introduced or lapsed
    REVIEW = "review"      # Graduated to spaced reviews
    MASTERED = "mastered"  # Long intervals; regresses to LEARNING on AGAIN


# ---- Decks ----

class Deck(BaseModel):
    """A named collection of cards owned by one user."""
    id: str
    title: str
    description: str = ""
    owner_id: str
    created_at: datetime = Field(default_factory=_utcnow)


# ---- Cards ----

class Card(BaseModel):
    """
    A single flashcard with its memory state.

    One row per card; the memory state lives on the card itself.
    """
    id: str
    deck_id: str
    front: str
    back: str
    tags: list[str] = Field(default_factory=list)

    # Memory state
    status: CardStatus = CardStatus.NEW
    ease: float = Field(default=DEFAULT_EASE, description="Ease factor, 1.3 - 2.5")
    interval: int = Field(default=DEFAULT_INTERVAL, ge=0, description="Days until next review")
    next_review: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None
    review_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    class Config:
        frozen = True


class CardUpdate(BaseModel):
    """
    Partial update for a card, keyed by card id at the repository.

    Only fields that were explicitly set are written.
    """
    front: Optional[str] = None
    back: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Optional[CardStatus] = None
    ease: Optional[float] = None
    interval: Optional[int] = Field(default=None, ge=0)
    next_review: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None
    review_count: Optional[int] = Field(default=None, ge=0)

    def apply_to(self, card: Card) -> Card:
        """Return a copy of card with this update applied."""
        changes = {name: getattr(self, name) for name in self.model_fields_set}
        changes["updated_at"] = _utcnow()
        return card.model_copy(update=changes)
