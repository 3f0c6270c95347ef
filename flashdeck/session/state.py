"""
Study session state and its transitions.

The state is an immutable value; every command returns a new SessionState
(command -> new state). Rating is not here: it needs persistence and lives
in the session controller, which uses remove_current() once the update is
stored.

Flow per card: show front -> flip -> rate (or navigate) -> next card.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional

from flashdeck.errors import SessionStateError
from flashdeck.schemas import Card
from flashdeck.session.selector import select_due


@dataclass(frozen=True)
class SessionState:
    """
    One study sitting over a deck's due cards.

    queue holds the cards not yet rated in this session; index is a cursor
    for browsing them before rating.
    """
    queue: tuple[Card, ...] = ()
    index: int = 0
    flipped: bool = False
    complete: bool = True

    @property
    def current_card(self) -> Optional[Card]:
        if self.complete or not self.queue:
            return None
        return self.queue[self.index]

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def progress(self) -> float:
        """Position of the cursor as a fraction of the queue (0.0 when empty)."""
        if not self.queue:
            return 0.0
        return (self.index + 1) / len(self.queue)


def start_session(cards: Iterable[Card], now: datetime) -> SessionState:
    """
    Build the initial state from a deck's cards.

    Also used for Restart: pass the freshly loaded cards.
    """
    queue = tuple(select_due(cards, now))
    return SessionState(queue=queue, index=0, flipped=False, complete=not queue)


def flip(state: SessionState) -> SessionState:
    """Toggle between front and back of the current card."""
    _require_current(state, "flip")
    return replace(state, flipped=not state.flipped)


def next_card(state: SessionState) -> SessionState:
    """
    Move the cursor forward without rating.

    Past the last card the session completes.
    """
    _require_current(state, "move to the next card")
    if not state.flipped:
        raise SessionStateError("Reveal the answer before moving on")

    if state.index < len(state.queue) - 1:
        return replace(state, index=state.index + 1, flipped=False)
    return replace(state, complete=True)


def previous_card(state: SessionState) -> SessionState:
    """Move the cursor back one card."""
    _require_current(state, "move to the previous card")
    if state.index <= 0:
        raise SessionStateError("Already at the first card")
    return replace(state, index=state.index - 1, flipped=False)


def remove_current(state: SessionState) -> SessionState:
    """
    Drop the current card from the queue after its rating was persisted.

    The card is never requeued within the same session.
    """
    _require_current(state, "remove the current card")

    queue = state.queue[:state.index] + state.queue[state.index + 1:]
    if not queue:
        return SessionState(queue=(), index=0, flipped=False, complete=True)

    # Same index now points at the following card; clamp at the end
    return SessionState(
        queue=queue,
        index=min(state.index, len(queue) - 1),
        flipped=False,
        complete=False,
    )


def _require_current(state: SessionState, action: str) -> None:
    if state.current_card is None:
        raise SessionStateError(f"Cannot {action}: session is complete")
