"""
Error types raised by the scheduler, the study session and the card repository.
"""

from __future__ import annotations

from typing import Optional


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""


class InvalidArgument(FlashdeckError, ValueError):
    """A value outside its declared domain (e.g. an unknown rating)."""


class SessionStateError(FlashdeckError, RuntimeError):
    """A study session command issued in a state where it is not allowed."""


class RatingInProgress(SessionStateError):
    """A rating was submitted while a previous one is still being persisted."""


class NotFound(FlashdeckError, LookupError):
    """A deck or card does not exist."""


class Unauthorized(FlashdeckError, PermissionError):
    """The current user does not own the requested deck or card."""


class PersistenceFailure(FlashdeckError):
    """
    A card update could not be stored.

    Retryable: the study session is left exactly as it was before the rating.
    """

    def __init__(self, card_id: str, message: Optional[str] = None):
        self.card_id = card_id
        super().__init__(message or f"Failed to save review for card {card_id}")
