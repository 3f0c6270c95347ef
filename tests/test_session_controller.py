from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from flashdeck.errors import (
    InvalidArgument,
    NotFound,
    PersistenceFailure,
    RatingInProgress,
    SessionStateError,
    Unauthorized,
)
from flashdeck.schemas import CardStatus, Deck
from flashdeck.session import StudySession
from flashdeck.sm2 import Rating


@pytest.fixture
def seeded_repo(memory_repo, make_card, now):
    memory_repo.add_card(make_card(status=CardStatus.NEW))
    memory_repo.add_card(make_card(
        status=CardStatus.REVIEW, ease=2.2, interval=6, review_count=4,
        next_review=now - timedelta(days=2),
    ))
    memory_repo.add_card(make_card(
        status=CardStatus.REVIEW, interval=3, review_count=2,
        next_review=now + timedelta(days=1),
    ))
    return memory_repo


@pytest.fixture
def session(seeded_repo, now):
    study = StudySession(seeded_repo, "deck-1", clock=lambda: now)
    study.start()
    return study


def test_start_selects_due_cards(session):
    assert session.remaining == 2
    assert session.current_card.id == "card-1"
    assert not session.complete


def test_rating_persists_update_and_removes_card(session, seeded_repo, now):
    session.flip()

    outcome = session.rate(Rating.GOOD)

    stored = seeded_repo.get_card("card-1")
    assert stored.status == CardStatus.LEARNING
    assert stored.interval == 1
    assert stored.review_count == 1
    assert stored.last_reviewed == now
    assert stored.next_review == now + timedelta(days=1)
    assert outcome.card.id == "card-1"
    assert outcome.update.review_count == 1

    assert session.remaining == 1
    assert session.current_card.id == "card-2"
    assert not session.state.flipped


def test_full_session_completes_with_summary(session, now):
    session.flip()
    session.rate("again")
    session.flip()
    session.rate(4)

    assert session.complete
    assert session.remaining == 0
    summary = session.summary
    assert summary.cards_studied == 2
    assert summary.new_cards_learned == 1
    assert summary.cards_reviewed == 1
    assert summary.ratings[Rating.AGAIN] == 1
    assert summary.ratings[Rating.EASY] == 1
    assert summary.accuracy == 0.5
    assert summary.completed_at == now


def test_rated_card_is_not_requeued_in_same_session(session, seeded_repo):
    session.flip()
    session.rate(Rating.AGAIN)

    assert "card-1" not in [c.id for c in session.state.queue]

    session.restart()
    assert [c.id for c in session.state.queue] == ["card-2"]


def test_rating_requires_revealed_answer(session, seeded_repo):
    with pytest.raises(SessionStateError):
        session.rate(Rating.GOOD)

    assert seeded_repo.get_card("card-1").review_count == 0
    assert session.remaining == 2


def test_invalid_rating_is_rejected_before_persistence(session, seeded_repo):
    session.flip()

    with pytest.raises(InvalidArgument):
        session.rate("perfect")

    assert seeded_repo.get_card("card-1").review_count == 0
    assert session.state.flipped


def test_rating_a_complete_session_is_rejected(memory_repo, now):
    study = StudySession(memory_repo, "deck-1", clock=lambda: now)
    study.start()

    assert study.complete
    with pytest.raises(SessionStateError):
        study.rate(Rating.GOOD)


def test_persistence_failure_leaves_session_unchanged(session, seeded_repo):
    session.flip()
    before = session.state
    real_update = seeded_repo.update_card
    seeded_repo.update_card = MagicMock(side_effect=OperationalError("UPDATE cards", {}, Exception("db down")))

    with pytest.raises(PersistenceFailure) as excinfo:
        session.rate(Rating.GOOD)

    assert excinfo.value.card_id == "card-1"
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert session.state == before
    assert session.summary.cards_studied == 0

    # User-initiated retry succeeds once storage is back
    seeded_repo.update_card = real_update
    session.rate(Rating.GOOD)
    assert session.remaining == 1
    assert seeded_repo.get_card("card-1").review_count == 1


@pytest.mark.parametrize("error", [NotFound("Card not found: card-1"), Unauthorized("nope")])
def test_repository_faults_propagate_unmodified(session, seeded_repo, error):
    session.flip()
    before = session.state
    seeded_repo.update_card = MagicMock(side_effect=error)

    with pytest.raises(type(error)) as excinfo:
        session.rate(Rating.HARD)

    assert excinfo.value is error
    assert session.state == before


def test_queue_shrinks_only_for_persisted_ratings(memory_repo, make_card, now):
    for _ in range(5):
        memory_repo.add_card(make_card(status=CardStatus.NEW))
    study = StudySession(memory_repo, "deck-1", clock=lambda: now)
    study.start()
    initial = study.remaining
    real_update = memory_repo.update_card
    calls = {"n": 0}

    def flaky_update(card_id, update):
        calls["n"] += 1
        if calls["n"] % 2 == 0:
            raise ConnectionError("timeout")
        return real_update(card_id, update)

    memory_repo.update_card = flaky_update
    persisted = 0
    for _ in range(6):
        if not study.state.flipped:
            study.flip()
        try:
            study.rate(Rating.GOOD)
            persisted += 1
        except PersistenceFailure:
            pass
        assert study.remaining == initial - persisted

    assert persisted == 3


def test_concurrent_command_while_rating_is_rejected(session, seeded_repo):
    session.flip()
    real_update = seeded_repo.update_card
    seen = []

    def update_and_interfere(card_id, update):
        with pytest.raises(RatingInProgress):
            session.rate(Rating.EASY)
        with pytest.raises(RatingInProgress):
            session.previous()
        seen.append(card_id)
        return real_update(card_id, update)

    seeded_repo.update_card = update_and_interfere
    session.rate(Rating.GOOD)

    assert seen == ["card-1"]
    assert seeded_repo.get_card("card-1").review_count == 1


def test_next_and_previous_do_not_persist(session, seeded_repo):
    seeded_repo.update_card = MagicMock()

    session.flip()
    session.next()
    assert session.current_card.id == "card-2"
    session.previous()
    session.flip()
    session.next()
    session.flip()
    session.next()

    assert session.complete
    assert session.summary.completed_at is not None
    seeded_repo.update_card.assert_not_called()


def test_rating_time_defaults_to_session_clock(seeded_repo, now):
    later = now + timedelta(hours=3)
    study = StudySession(seeded_repo, "deck-1", clock=lambda: later)
    study.start()
    study.flip()

    outcome = study.rate(Rating.GOOD)

    assert outcome.rated_at == later
    assert seeded_repo.get_card("card-1").last_reviewed == later


def test_explicit_time_wins_over_clock(session, seeded_repo, now):
    at = now + timedelta(minutes=5)
    session.flip()

    session.rate(Rating.EASY, now=at)

    assert seeded_repo.get_card("card-1").next_review == at + timedelta(days=4)


def test_start_propagates_repository_errors(memory_repo, now):
    memory_repo.add_deck(Deck(id="deck-2", title="Not mine", owner_id="someone-else"))

    with pytest.raises(NotFound):
        StudySession(memory_repo, "missing", clock=lambda: now).start()
    with pytest.raises(Unauthorized):
        StudySession(memory_repo, "deck-2", clock=lambda: now).start()


def test_progress_tracks_cursor(session):
    assert session.progress == 0.5
    session.flip()
    session.next()
    assert session.progress == 1.0


def test_start_rejects_naive_time(session, now):
    before = session.state

    with pytest.raises(InvalidArgument):
        session.restart(now=now.replace(tzinfo=None))

    assert session.state == before


def test_start_loads_deck(session):
    assert session.deck.id == "deck-1"
    assert session.deck.title == "Spanish"
