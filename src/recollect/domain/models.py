"""
Domain models for cards, decks and review history.

These are pure data structures with no I/O or external dependencies
beyond id generation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from ulid import ULID

from .constants import (
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_REVIEWS_PER_DAY,
    INITIAL_EASINESS,
    MAX_DECK_NAME_LEN,
)
from .errors import InvalidDeckNameError


class CardState(str, Enum):
    """
    Learning progression of a card.

    new: never reviewed.
    learning: failed while new or still in its first pass.
    review: graduated (passed at least once).
    relearning: failed after having graduated.
    """

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class Difficulty(str, Enum):
    """The four answer buttons offered to the learner."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class OrderMode(str, Enum):
    RANDOM = "random"
    OLDEST = "oldest"
    NEWEST = "newest"


class ReviewMode(str, Enum):
    CLASSIC = "classic"
    QUIZ = "quiz"
    TYPING = "typing"
    REVERSED = "reversed"
    MIXED = "mixed"


@dataclass(frozen=True)
class CardReviewState:
    """
    SM-2 scheduling state embedded in every card.

    Attributes:
        easiness_factor: EF, never below 1.3.
        interval: Days until the next review.
        repetitions: Consecutive passing reviews since creation or last failure.
        next_due_date: Day the card becomes due.
        state: Learning progression.
        last_review_date: Day of the most recent review, None for fresh cards.
    """

    easiness_factor: float
    interval: int
    repetitions: int
    next_due_date: date
    state: CardState
    last_review_date: date | None = None

    @classmethod
    def initial(cls, today: date | None = None) -> "CardReviewState":
        return cls(
            easiness_factor=INITIAL_EASINESS,
            interval=0,
            repetitions=0,
            next_due_date=today or date.today(),
            state=CardState.NEW,
        )


@dataclass(frozen=True)
class Card:
    """
    A flashcard as seen by the scheduler.

    The payload (front, back, media, tags) is opaque to scheduling.
    """

    id: str
    deck_id: str
    review: CardReviewState
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        deck_id: str,
        payload: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> "Card":
        now = now or datetime.now()
        return cls(
            id=generate_id("card"),
            deck_id=deck_id,
            review=CardReviewState.initial(now.date()),
            payload=dict(payload or {}),
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class ReviewEvent:
    """
    Immutable record of a single review, kept for history and statistics.

    Attributes:
        quality: SM-2 quality, 0-5.
        time_spent: Seconds spent on the card.
        previous_interval: Interval before the review; 0 marks a new card's
            first review.
    """

    id: str
    card_id: str
    deck_id: str
    reviewed_at: datetime
    quality: int
    review_mode: ReviewMode
    time_spent: float
    previous_easiness: float
    new_easiness: float
    previous_interval: int
    new_interval: int

    @property
    def is_first_review(self) -> bool:
        return self.previous_interval == 0


@dataclass(frozen=True)
class DeckSettings:
    """Per-deck scheduling limits, supplied to the queue builder as parameters."""

    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY
    reviews_per_day: int = DEFAULT_REVIEWS_PER_DAY  # accepted, not enforced
    card_order: OrderMode = OrderMode.RANDOM


@dataclass
class Deck:
    id: str
    name: str
    settings: DeckSettings = field(default_factory=DeckSettings)
    is_archived: bool = False


@dataclass(frozen=True)
class DeckStats:
    """Derived deck statistics. Recomputed from cards, never stored."""

    total_cards: int
    new_cards: int
    learning_cards: int
    due_today: int  # due reviews + today's capped new cards
    average_easiness: float


def generate_id(prefix: str) -> str:
    """Generate a sortable record id using ULID."""
    return f"{prefix}_{ULID()}"


def validate_deck_name(name: str) -> str:
    """Return the stripped deck name or raise InvalidDeckNameError."""
    stripped = name.strip()
    if not stripped:
        raise InvalidDeckNameError("Deck name is required")
    if len(name) > MAX_DECK_NAME_LEN:
        raise InvalidDeckNameError(
            f"Deck name must be {MAX_DECK_NAME_LEN} characters or less"
        )
    return stripped
