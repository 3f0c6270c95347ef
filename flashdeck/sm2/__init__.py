"""
SM-2 - spaced repetition scheduling for flashcards

Quick start:
    from flashdeck import sm2

    # Compute the next state (algorithm only, no DB calls)
    result = sm2.compute_next_state(card, sm2.Rating.GOOD, now)

    # Merge into the persisted update (increments review_count)
    update = sm2.build_review_update(card, result, now)
"""

# Core scheduler API (algorithm logic)
from flashdeck.sm2.scheduler import compute_next_state

# Constants and parameters
from flashdeck.sm2.constants import (
    Rating,
    CardStatus,
    parse_rating,
    RATING_SHORTCUTS,
    INITIAL_EASE,
    MIN_EASE,
    MAX_EASE,
    MASTERY_INTERVAL_DAYS,
    MASTERY_REVIEW_COUNT,
    EASY_MASTERY_REVIEW_COUNT,
)

# Memory state
from flashdeck.sm2.memory_state import (
    MemoryState,
    ScheduleResult,
    initial_memory_state,
    memory_state_of,
    build_review_update,
    apply_update,
)


__all__ = [
    # Core algorithm
    "compute_next_state",

    # Enums
    "Rating",
    "CardStatus",
    "parse_rating",
    "RATING_SHORTCUTS",

    # Memory state
    "MemoryState",
    "ScheduleResult",
    "initial_memory_state",
    "memory_state_of",
    "build_review_update",
    "apply_update",

    # Parameters
    "INITIAL_EASE",
    "MIN_EASE",
    "MAX_EASE",
    "MASTERY_INTERVAL_DAYS",
    "MASTERY_REVIEW_COUNT",
    "EASY_MASTERY_REVIEW_COUNT",
]
