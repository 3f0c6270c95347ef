from datetime import timedelta

import pytest

from flashdeck.errors import InvalidArgument
from flashdeck.schemas import CardStatus
from flashdeck.session.selector import count_due, is_due, select_due


def test_due_selection_example(make_card, now):
    never = make_card(status=CardStatus.NEW)
    overdue = make_card(status=CardStatus.REVIEW, next_review=now - timedelta(days=1), interval=3)
    upcoming = make_card(status=CardStatus.REVIEW, next_review=now + timedelta(days=1), interval=3)

    selected = select_due([never, overdue, upcoming], now)

    assert [c.id for c in selected] == [never.id, overdue.id]


def test_cards_without_next_review_come_first(make_card, now):
    late = make_card(status=CardStatus.LEARNING, next_review=now - timedelta(hours=1))
    oldest = make_card(status=CardStatus.REVIEW, next_review=now - timedelta(days=9))
    unscheduled = make_card(status=CardStatus.LEARNING)

    selected = select_due([late, oldest, unscheduled], now)

    assert [c.id for c in selected] == [unscheduled.id, oldest.id, late.id]


def test_ties_keep_input_order(make_card, now):
    same_time = now - timedelta(days=2)
    cards = [
        make_card(status=CardStatus.REVIEW, next_review=same_time),
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.LEARNING, next_review=same_time),
        make_card(status=CardStatus.NEW),
    ]

    selected = select_due(cards, now)

    assert [c.id for c in selected] == ["card-2", "card-4", "card-1", "card-3"]


def test_new_cards_are_due_even_with_future_next_review(make_card, now):
    card = make_card(status=CardStatus.NEW, next_review=now + timedelta(days=5))

    assert is_due(card, now)


def test_next_review_exactly_now_is_due(make_card, now):
    assert is_due(make_card(status=CardStatus.REVIEW, next_review=now), now)


def test_mastered_cards_return_only_once_their_review_elapses(make_card, now):
    elapsed = make_card(status=CardStatus.MASTERED, next_review=now - timedelta(days=1))
    pending = make_card(status=CardStatus.MASTERED, next_review=now + timedelta(days=40))
    unscheduled = make_card(status=CardStatus.MASTERED)

    assert is_due(elapsed, now)
    assert not is_due(pending, now)
    assert not is_due(unscheduled, now)


def test_selection_is_repeatable_and_leaves_input_alone(make_card, now):
    cards = [
        make_card(status=CardStatus.REVIEW, next_review=now - timedelta(days=1)),
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.REVIEW, next_review=now + timedelta(days=1)),
    ]
    original = list(cards)

    first = select_due(cards, now)
    second = select_due(cards, now)

    assert first == second
    assert cards == original
    assert first is not cards


def test_count_due(make_card, now):
    cards = [
        make_card(status=CardStatus.NEW),
        make_card(status=CardStatus.REVIEW, next_review=now + timedelta(days=1)),
        make_card(status=CardStatus.LEARNING, next_review=now - timedelta(minutes=5)),
    ]

    assert count_due(cards, now) == 2
    assert count_due([], now) == 0


def test_naive_now_is_rejected(make_card, now):
    naive = now.replace(tzinfo=None)
    scheduled = make_card(status=CardStatus.REVIEW, next_review=now)

    with pytest.raises(InvalidArgument):
        select_due([scheduled], naive)
    with pytest.raises(InvalidArgument):
        select_due([], naive)
    with pytest.raises(InvalidArgument):
        count_due([scheduled], naive)
    with pytest.raises(InvalidArgument):
        is_due(make_card(status=CardStatus.NEW), naive)
