"""
Metric computations for deck statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

import pandas as pd

from flashdeck.schemas import Card, CardStatus
from flashdeck.session.selector import count_due


CARD_COLUMNS = ["id", "status", "ease", "interval", "review_count", "next_review"]


def cards_to_frame(cards: Iterable[Card]) -> pd.DataFrame:
    """
    One row per card with its scheduling columns (status as plain string).
    """
    rows = [
        {
            "id": card.id,
            "status": CardStatus(card.status).value,
            "ease": card.ease,
            "interval": card.interval,
            "review_count": card.review_count,
            "next_review": card.next_review,
        }
        for card in cards
    ]
    return pd.DataFrame(rows, columns=CARD_COLUMNS)


def compute_status_counts(cards_df: pd.DataFrame) -> dict[CardStatus, int]:
    """
    Number of cards per lifecycle status (every status present, 0 if unused).
    """
    counts = cards_df["status"].value_counts()
    return {status: int(counts.get(status.value, 0)) for status in CardStatus}


def compute_average_ease(cards_df: pd.DataFrame) -> float:
    """
    Mean ease factor, rounded to 2 decimals (0.0 for an empty deck).
    """
    if cards_df.empty:
        return 0.0
    return round(float(cards_df["ease"].mean()), 2)


def compute_due_count(cards: Iterable[Card], now: datetime) -> int:
    """Cards a study session started at `now` would contain."""
    return count_due(cards, now)
