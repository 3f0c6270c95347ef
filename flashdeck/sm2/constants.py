"""
SM-2 Constants and Parameters

All tunable values for the scheduler in one place, plus the rating and
status enums shared across the package.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from flashdeck.errors import InvalidArgument
from flashdeck.schemas import CardStatus, DEFAULT_EASE, DEFAULT_INTERVAL


# ---- Ratings ----

class Rating(str, Enum):
    """User's self-reported recall quality for the card just reviewed."""
    AGAIN = "again"  # Recall failed
    HARD = "hard"    # Recalled with high effort
    GOOD = "good"    # Recalled normally
    EASY = "easy"    # Recalled fluently


# Numeric shortcuts used by the study screen (1=again ... 4=easy)
RATING_SHORTCUTS = {
    1: Rating.AGAIN,
    2: Rating.HARD,
    3: Rating.GOOD,
    4: Rating.EASY,
}


def parse_rating(value: Union[Rating, str, int]) -> Rating:
    """
    Normalize a rating given as enum, string value or numeric shortcut.

    Raises:
        InvalidArgument: if the value does not name one of the four ratings
    """
    if isinstance(value, Rating):
        return value
    if isinstance(value, bool):
        raise InvalidArgument(f"Invalid rating: {value!r}")
    if isinstance(value, int):
        if value in RATING_SHORTCUTS:
            return RATING_SHORTCUTS[value]
        raise InvalidArgument(f"Invalid rating shortcut: {value!r}")
    if isinstance(value, str):
        key = value.strip().lower()
        if key.isdigit():
            return parse_rating(int(key))
        try:
            return Rating(key)
        except ValueError:
            raise InvalidArgument(f"Invalid rating: {value!r}") from None
    raise InvalidArgument(f"Invalid rating: {value!r}")


# ---- Ease factor ----

INITIAL_EASE = DEFAULT_EASE
MIN_EASE = 1.3
MAX_EASE = 2.5

EASE_DELTA = {
    Rating.AGAIN: -0.30,
    Rating.HARD: -0.15,
    Rating.GOOD: 0.0,
    Rating.EASY: +0.30,
}


# ---- Intervals (days) ----

INITIAL_INTERVAL = DEFAULT_INTERVAL  # Never scheduled

# Interval assigned the first time a card is rated (interval == 0)
FIRST_INTERVAL = {
    Rating.AGAIN: 1,
    Rating.HARD: 1,
    Rating.GOOD: 1,
    Rating.EASY: 4,
}

HARD_INTERVAL_FACTOR = 1.2
EASY_INTERVAL_BONUS = 1.3


# ---- Status transitions ----
# Next status by rating and current status, before the mastery rules below.

STATUS_TRANSITIONS = {
    Rating.AGAIN: {
        CardStatus.NEW: CardStatus.LEARNING,
        CardStatus.LEARNING: CardStatus.LEARNING,
        CardStatus.REVIEW: CardStatus.LEARNING,
        CardStatus.MASTERED: CardStatus.LEARNING,
    },
    Rating.HARD: {
        CardStatus.NEW: CardStatus.LEARNING,
        CardStatus.LEARNING: CardStatus.LEARNING,
        CardStatus.REVIEW: CardStatus.REVIEW,
        CardStatus.MASTERED: CardStatus.REVIEW,
    },
    Rating.GOOD: {
        CardStatus.NEW: CardStatus.LEARNING,
        CardStatus.LEARNING: CardStatus.REVIEW,
        CardStatus.REVIEW: CardStatus.REVIEW,
        CardStatus.MASTERED: CardStatus.REVIEW,
    },
    Rating.EASY: {
        CardStatus.NEW: CardStatus.LEARNING,
        CardStatus.LEARNING: CardStatus.REVIEW,
        CardStatus.REVIEW: CardStatus.REVIEW,
        CardStatus.MASTERED: CardStatus.REVIEW,
    },
}


# ---- Mastery ----

# EASY promotes straight to MASTERED once the card has this many prior reviews
EASY_MASTERY_REVIEW_COUNT = 3

# A REVIEW outcome is promoted when both thresholds are met
MASTERY_INTERVAL_DAYS = 30
MASTERY_REVIEW_COUNT = 5
