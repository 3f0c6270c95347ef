"""
Study session lifecycle: load due cards, navigate, rate and persist.

Rating is the only command that touches storage. The card leaves the queue
only after its update was stored; on failure the session stays exactly as
it was and the error is re-raised for the caller to offer a retry.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Union

from flashdeck.errors import (
    FlashdeckError,
    PersistenceFailure,
    RatingInProgress,
    SessionStateError,
)
from flashdeck.schemas import Card, CardStatus, CardUpdate, Deck
from flashdeck.session import state as transitions
from flashdeck.session.state import SessionState
from flashdeck.session.types import RatingOutcome, SessionSummary
from flashdeck.sm2 import Rating, build_review_update, compute_next_state, parse_rating

if TYPE_CHECKING:
    from flashdeck.storage.repository import CardRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudySession:
    """
    One study sitting over a deck, owned by a single user.

    Commands are serialized: while a rating is being persisted every other
    command raises RatingInProgress.
    """

    def __init__(
        self,
        repository: CardRepository,
        deck_id: str,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._repository = repository
        self.deck_id = deck_id
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self.deck: Optional[Deck] = None
        self.state = SessionState()
        self.summary: Optional[SessionSummary] = None

    # ---- Read-only views ----

    @property
    def current_card(self) -> Optional[Card]:
        return self.state.current_card

    @property
    def complete(self) -> bool:
        return self.state.complete

    @property
    def remaining(self) -> int:
        return self.state.remaining

    @property
    def progress(self) -> float:
        return self.state.progress

    # ---- Lifecycle ----

    def start(self, now: Optional[datetime] = None) -> SessionState:
        """
        Load the deck and build the due queue.

        Repository errors (NotFound, Unauthorized, transport) propagate as-is.
        """
        with self._exclusive():
            now = now or self._clock()
            self.deck = self._repository.get_deck(self.deck_id)
            cards = self._repository.get_deck_cards(self.deck_id)
            self.state = transitions.start_session(cards, now)
            self.summary = SessionSummary(started_at=now)
            if self.state.complete:
                self.summary.completed_at = now
            logger.info(
                "Started session for deck %s (%r): %d due card(s)",
                self.deck_id, self.deck.title, self.state.remaining
            )
            return self.state

    def restart(self, now: Optional[datetime] = None) -> SessionState:
        """Re-select due cards from the current persisted state."""
        return self.start(now)

    # ---- Navigation ----

    def flip(self) -> SessionState:
        with self._exclusive():
            self.state = transitions.flip(self.state)
            return self.state

    def next(self) -> SessionState:
        with self._exclusive():
            self.state = transitions.next_card(self.state)
            self._mark_complete_if_done(self._clock())
            return self.state

    def previous(self) -> SessionState:
        with self._exclusive():
            self.state = transitions.previous_card(self.state)
            return self.state

    # ---- Rating ----

    def rate(
        self,
        rating: Union[Rating, str, int],
        now: Optional[datetime] = None
    ) -> RatingOutcome:
        """
        Rate the current (flipped) card, persist its new state and drop it
        from the queue.

        Args:
            rating: Rating, or its string value / numeric shortcut
            now: Instant of the rating (defaults to the session clock)

        Returns:
            RatingOutcome with the card as shown and the stored update

        Raises:
            InvalidArgument: unknown rating
            SessionStateError: no current card, or the answer is not revealed
            RatingInProgress: another rating is still being persisted
            NotFound, Unauthorized: propagated from the repository
            PersistenceFailure: any other storage failure (retryable)
        """
        rating = parse_rating(rating)

        with self._exclusive():
            state = self.state
            card = state.current_card
            if card is None:
                raise SessionStateError("Cannot rate: session is complete")
            if not state.flipped:
                raise SessionStateError("Reveal the answer before rating")

            now = now or self._clock()
            result = compute_next_state(card, rating, now)
            update = build_review_update(card, result, now)

            self._persist(card, update)

            self.state = transitions.remove_current(state)
            self._record(card, rating, now)
            logger.debug(
                "Rated card %s %s: %s -> %s, interval %d day(s)",
                card.id, rating.value, card.status.value, result.status.value, result.interval
            )
            return RatingOutcome(card=card, rating=rating, update=update, rated_at=now)

    # ---- Helpers ----

    def _persist(self, card: Card, update: CardUpdate) -> None:
        try:
            self._repository.update_card(card.id, update)
        except FlashdeckError:
            logger.warning("Review for card %s was not saved", card.id, exc_info=True)
            raise
        except Exception as exc:
            logger.warning("Failed to save review for card %s: %s", card.id, exc)
            raise PersistenceFailure(card.id) from exc

    def _record(self, card: Card, rating: Rating, now: datetime) -> None:
        summary = self.summary
        if summary is None:
            return
        summary.cards_studied += 1
        summary.ratings[rating] += 1
        if card.status == CardStatus.NEW:
            summary.new_cards_learned += 1
        else:
            summary.cards_reviewed += 1
        self._mark_complete_if_done(now)

    def _mark_complete_if_done(self, now: datetime) -> None:
        if self.state.complete and self.summary is not None and self.summary.completed_at is None:
            self.summary.completed_at = now
            logger.info(
                "Session for deck %s complete: %d card(s) rated",
                self.deck_id, self.summary.cards_studied
            )

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise RatingInProgress("A rating is still being saved")
        try:
            yield
        finally:
            self._lock.release()
