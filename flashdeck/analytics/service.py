"""
Service layer to assemble deck statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from flashdeck.analytics.metrics import (
    cards_to_frame,
    compute_average_ease,
    compute_due_count,
    compute_status_counts,
)
from flashdeck.analytics.types import DeckStats
from flashdeck.schemas import Card, CardStatus


def compute_deck_stats(cards: Iterable[Card], now: datetime) -> DeckStats:
    """
    Build the status breakdown, average ease and due count for a deck.
    """
    cards = list(cards)
    cards_df = cards_to_frame(cards)
    counts = compute_status_counts(cards_df)

    return DeckStats(
        total_cards=len(cards_df),
        new_cards=counts[CardStatus.NEW],
        learning_cards=counts[CardStatus.LEARNING],
        review_cards=counts[CardStatus.REVIEW],
        mastered_cards=counts[CardStatus.MASTERED],
        average_ease=compute_average_ease(cards_df),
        due_today=compute_due_count(cards, now),
    )
