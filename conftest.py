import uuid
from datetime import date, datetime, timezone

import pytest


@pytest.fixture
def today():
    return date(2024, 3, 10)


@pytest.fixture
def now():
    return datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_deck():
    """Create a deck with ``size`` cards and enroll the given learners."""

    def _make(size=3, learners=(), title="Deck"):
        from catalog.models import Card, Deck, Enrollment

        deck = Deck.objects.create(title=title)
        for i in range(size):
            Card.objects.create(deck=deck, front=f"front {i}", back=f"back {i}", card_order=i)
        for user_id in learners:
            Enrollment.objects.create(user_id=user_id, deck=deck)
        return deck

    return _make


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def card(make_deck, user_id):
    return make_deck(size=1, learners=[user_id]).cards.get()
