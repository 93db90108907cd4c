import random
from datetime import date, datetime, timedelta

import pytest

from recollect.domain.models import Card, CardReviewState, CardState, Deck, DeckSettings
from recollect.infrastructure.adapters.memory_store import InMemoryCollection

TODAY = date(2026, 3, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def rng():
    return random.Random(1234)


def _make_card(
    card_id: str,
    deck_id: str = "deck_a",
    state: CardState = CardState.REVIEW,
    due_in: int = 0,
    interval: int = 5,
    repetitions: int = 2,
    easiness: float = 2.5,
) -> Card:
    """Build a card due `due_in` days from TODAY (negative = overdue)."""
    if state == CardState.NEW:
        review = CardReviewState.initial(TODAY + timedelta(days=due_in))
    else:
        review = CardReviewState(
            easiness_factor=easiness,
            interval=interval,
            repetitions=repetitions,
            next_due_date=TODAY + timedelta(days=due_in),
            state=state,
            last_review_date=TODAY + timedelta(days=due_in - interval),
        )
    return Card(
        id=card_id,
        deck_id=deck_id,
        review=review,
        payload={"front": f"Q {card_id}", "back": f"A {card_id}"},
        created_at=datetime(2026, 1, 1, 9, 0),
    )


@pytest.fixture
def make_card():
    return _make_card


@pytest.fixture
def collection():
    """Two decks: deck_a caps new cards at 2, deck_b at 1."""
    coll = InMemoryCollection()
    coll.save_deck(Deck("deck_a", "Spanish", DeckSettings(new_cards_per_day=2)))
    coll.save_deck(Deck("deck_b", "Anatomy", DeckSettings(new_cards_per_day=1)))
    return coll


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/data
    monkeypatch.setenv("HOME", str(home))
    for var in ("RECOLLECT_DATA_FILE", "RECOLLECT_SEED", "RECOLLECT_NEW_CARDS_PER_DAY"):
        monkeypatch.delenv(var, raising=False)
    return home
