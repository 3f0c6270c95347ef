"""
Scheduler - SM-2 Algorithm Logic

Pure scheduling (no database calls, no clock reads).

Main workflow:
1. Load card (caller's responsibility)
2. compute_next_state(card, rating, now) -> ScheduleResult
3. build_review_update(card, result, now) -> CardUpdate (increments review_count)
4. Persist the update (caller's responsibility)

review_count is read here as the count *before* the current rating event.
"""

from __future__ import annotations
import math
from datetime import datetime, timedelta
from typing import Any, Union

from flashdeck.errors import InvalidArgument
from flashdeck.sm2.constants import (
    CardStatus,
    Rating,
    parse_rating,
    EASE_DELTA,
    MIN_EASE,
    MAX_EASE,
    FIRST_INTERVAL,
    HARD_INTERVAL_FACTOR,
    EASY_INTERVAL_BONUS,
    STATUS_TRANSITIONS,
    EASY_MASTERY_REVIEW_COUNT,
    MASTERY_INTERVAL_DAYS,
    MASTERY_REVIEW_COUNT,
)
from flashdeck.sm2.memory_state import ScheduleResult, memory_state_of


def compute_next_state(
    state: Any,
    rating: Union[Rating, str, int],
    now: datetime
) -> ScheduleResult:
    """
    Compute the next memory state of a card for one rating event.

    The input is never mutated. The function is total over valid ratings;
    anything else is a programming error.

    Args:
        state: Card or MemoryState (ease/interval/status/review_count are read)
        rating: Rating, or its string value / numeric shortcut
        now: Timezone-aware instant of the rating event

    Returns:
        ScheduleResult with ease, interval, status and next_review recomputed

    Raises:
        InvalidArgument: for an unknown rating or a naive timestamp
    """
    rating = parse_rating(rating)
    if now.tzinfo is None:
        raise InvalidArgument("now must be timezone-aware")

    current = memory_state_of(state)

    ease = _next_ease(current.ease, rating)
    interval = _next_interval(current.interval, ease, rating)
    status = _next_status(current.status, rating, current.review_count)

    # Long-interval reviews graduate to mastered
    if (
        status == CardStatus.REVIEW
        and interval >= MASTERY_INTERVAL_DAYS
        and current.review_count >= MASTERY_REVIEW_COUNT
    ):
        status = CardStatus.MASTERED

    return ScheduleResult(
        ease=_round_half_up(_clamp_ease(ease), 2),
        interval=interval,
        status=status,
        next_review=now + timedelta(days=interval),
    )


def _next_ease(ease: float, rating: Rating) -> float:
    """Apply the rating's ease delta, bounded to [MIN_EASE, MAX_EASE]."""
    return _clamp_ease(ease + EASE_DELTA[rating])


def _next_interval(interval: int, ease: float, rating: Rating) -> int:
    """
    Compute the new interval in days.

    ease is the already-adjusted (unrounded) ease factor.
    """
    if rating == Rating.AGAIN or interval == 0:
        return FIRST_INTERVAL[rating]

    if rating == Rating.HARD:
        return max(1, _round_half_up(interval * HARD_INTERVAL_FACTOR))
    if rating == Rating.GOOD:
        return _round_half_up(interval * ease)
    return _round_half_up(interval * ease * EASY_INTERVAL_BONUS)


def _next_status(status: CardStatus, rating: Rating, review_count: int) -> CardStatus:
    if rating == Rating.EASY and review_count >= EASY_MASTERY_REVIEW_COUNT:
        return CardStatus.MASTERED
    return STATUS_TRANSITIONS[rating][status]


def _clamp_ease(ease: float) -> float:
    return max(MIN_EASE, min(MAX_EASE, ease))


def _round_half_up(value: float, digits: int = 0):
    """Round halves away from zero (Python's round() rounds halves to even)."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded
