"""
Memory State - SM-2 Card State

Defines the scheduling-relevant subset of a card record and the merge step
that turns a scheduling result into a persisted update.

Key concepts:
- Ease: multiplier controlling how fast intervals grow (1.3 - 2.5)
- Interval: days until the next review (0 = never scheduled)
- Status: lifecycle stage (new -> learning -> review -> mastered)
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from flashdeck.schemas import CardStatus, CardUpdate
from flashdeck.sm2.constants import INITIAL_EASE, INITIAL_INTERVAL


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single card.

    review_count is the number of rating events already persisted; the
    scheduler reads it but never changes it.
    """
    ease: float = INITIAL_EASE
    interval: int = INITIAL_INTERVAL
    status: CardStatus = CardStatus.NEW
    review_count: int = 0
    next_review: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None


@dataclass(frozen=True)
class ScheduleResult:
    """Fields recomputed by the scheduler for one rating event."""
    ease: float
    interval: int
    status: CardStatus
    next_review: datetime


def initial_memory_state() -> MemoryState:
    """State of a freshly created card."""
    return MemoryState()


def memory_state_of(card: Any) -> MemoryState:
    """
    Extract the memory state from a card record (or pass a MemoryState through).

    Missing or falsy ease falls back to INITIAL_EASE, missing interval to 0.
    """
    if isinstance(card, MemoryState):
        return card

    status = getattr(card, "status", None) or CardStatus.NEW
    return MemoryState(
        ease=getattr(card, "ease", None) or INITIAL_EASE,
        interval=getattr(card, "interval", None) or INITIAL_INTERVAL,
        status=CardStatus(status),
        review_count=getattr(card, "review_count", None) or 0,
        next_review=getattr(card, "next_review", None),
        last_reviewed=getattr(card, "last_reviewed", None),
    )


def build_review_update(
    state: Any,
    result: ScheduleResult,
    now: datetime
) -> CardUpdate:
    """
    Merge a scheduling result into the update persisted for one rating event.

    This is where review_count is incremented: the scheduler checks the
    mastery gates against the count *before* this event, and the persisted
    count includes it.

    Args:
        state: Card or MemoryState the result was computed from
        result: Output of compute_next_state for that state
        now: Instant of the rating event

    Returns:
        CardUpdate with all six memory-state fields set
    """
    previous = memory_state_of(state)
    return CardUpdate(
        status=result.status,
        ease=result.ease,
        interval=result.interval,
        next_review=result.next_review,
        last_reviewed=now,
        review_count=previous.review_count + 1,
    )


def apply_update(state: MemoryState, update: CardUpdate) -> MemoryState:
    """Return a new MemoryState with the memory fields of an update applied."""
    fields = {
        name: getattr(update, name)
        for name in ("ease", "interval", "status", "review_count", "next_review", "last_reviewed")
        if name in update.model_fields_set
    }
    return replace(state, **fields)
