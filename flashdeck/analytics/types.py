"""
Types for deck statistics.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeckStats:
    """
    Status breakdown and scheduling health of one deck.
    """
    total_cards: int
    new_cards: int
    learning_cards: int
    review_cards: int
    mastered_cards: int
    average_ease: float
    due_today: int
