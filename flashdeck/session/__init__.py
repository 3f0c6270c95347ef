"""
Study sessions: due-card selection, session state and the rating controller.
"""

from flashdeck.session.selector import count_due, is_due, select_due
from flashdeck.session.state import (
    SessionState,
    start_session,
    flip,
    next_card,
    previous_card,
    remove_current,
)
from flashdeck.session.types import RatingOutcome, SessionSummary
from flashdeck.session.controller import StudySession

__all__ = [
    "count_due",
    "is_due",
    "select_due",
    "SessionState",
    "start_session",
    "flip",
    "next_card",
    "previous_card",
    "remove_current",
    "RatingOutcome",
    "SessionSummary",
    "StudySession",
]
