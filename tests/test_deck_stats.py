from datetime import timedelta

import pytest

from flashdeck.analytics import DeckStats, compute_deck_stats
from flashdeck.analytics.metrics import cards_to_frame, compute_status_counts
from flashdeck.schemas import CardStatus


def test_deck_stats(make_card, now):
    cards = [
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.LEARNING, ease=2.2, next_review=now - timedelta(hours=2)),
        make_card(status=CardStatus.REVIEW, ease=2.35, next_review=now + timedelta(days=4)),
        make_card(status=CardStatus.MASTERED, ease=2.5, next_review=now + timedelta(days=45)),
    ]

    stats = compute_deck_stats(cards, now)

    assert stats == DeckStats(
        total_cards=5,
        new_cards=2,
        learning_cards=1,
        review_cards=1,
        mastered_cards=1,
        average_ease=pytest.approx(2.41),
        due_today=3,
    )


def test_empty_deck(now):
    stats = compute_deck_stats([], now)

    assert stats.total_cards == 0
    assert stats.average_ease == 0.0
    assert stats.due_today == 0
    assert stats.mastered_cards == 0


def test_status_counts_include_unused_statuses(make_card):
    frame = cards_to_frame([make_card(status=CardStatus.REVIEW)])

    counts = compute_status_counts(frame)

    assert counts == {
        CardStatus.NEW: 0,
        CardStatus.LEARNING: 0,
        CardStatus.REVIEW: 1,
        CardStatus.MASTERED: 0,
    }
    assert list(frame.columns) == ["id", "status", "ease", "interval", "review_count", "next_review"]
