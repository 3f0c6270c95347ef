"""
Due-card selection for a study session.

Pure functions over a snapshot of a deck's cards (no DB calls).
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable

from flashdeck.errors import InvalidArgument
from flashdeck.schemas import Card, CardStatus


def is_due(card: Card, now: datetime) -> bool:
    """
    Check whether a card is eligible for review at `now`.

    - NEW cards are always due
    - Cards that were never scheduled (no next_review) are due
    - Otherwise the card is due once next_review has arrived

    MASTERED cards are only due through an elapsed next_review; a mastered
    card without one is never selected.
    """
    _require_aware(now)
    if card.status == CardStatus.NEW:
        return True
    if card.next_review is None:
        return card.status != CardStatus.MASTERED
    return card.next_review <= now


def select_due(cards: Iterable[Card], now: datetime) -> list[Card]:
    """
    Select the due cards of a deck, in presentation order.

    Cards without next_review come first (most overdue), then ascending
    next_review. Ties keep their input order.

    Args:
        cards: All cards of a deck
        now: Instant the selection is made for

    Returns:
        New list of due cards; calling again with the same input gives the same list
    """
    _require_aware(now)
    due = [card for card in cards if is_due(card, now)]
    due.sort(key=_presentation_key)
    return due


def count_due(cards: Iterable[Card], now: datetime) -> int:
    """Number of cards that select_due would return."""
    _require_aware(now)
    return sum(1 for card in cards if is_due(card, now))


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None:
        raise InvalidArgument("now must be timezone-aware")


def _presentation_key(card: Card) -> tuple:
    if card.next_review is None:
        return (0, 0.0)
    return (1, card.next_review.timestamp())
