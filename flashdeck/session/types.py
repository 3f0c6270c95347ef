"""
Result and summary types used by the session controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from flashdeck.schemas import Card, CardUpdate
from flashdeck.sm2.constants import Rating


@dataclass(frozen=True)
class RatingOutcome:
    """
    A persisted rating: the card as it was shown and the update that was stored.
    """
    card: Card
    rating: Rating
    update: CardUpdate
    rated_at: datetime


@dataclass
class SessionSummary:
    """
    Running totals for one study sitting (only persisted ratings count).
    """
    started_at: datetime
    completed_at: Optional[datetime] = None
    cards_studied: int = 0
    new_cards_learned: int = 0
    cards_reviewed: int = 0
    ratings: dict[Rating, int] = field(
        default_factory=lambda: {rating: 0 for rating in Rating}
    )

    @property
    def accuracy(self) -> float:
        """Share of ratings other than AGAIN (0.0 before the first rating)."""
        if self.cards_studied == 0:
            return 0.0
        return (self.cards_studied - self.ratings[Rating.AGAIN]) / self.cards_studied
