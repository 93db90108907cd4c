"""
Metrics calculator for deriving deck and study statistics.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from recollect.application.queue_builder import (
    get_learning_cards,
    get_new_cards,
    todays_due_count,
)
from recollect.domain.constants import PASSING_QUALITY
from recollect.domain.models import Card, DeckSettings, DeckStats, ReviewEvent


@dataclass
class DailySummary:
    """
    What the learner did on a single day.
    """

    day: date
    reviews: int
    cards_reviewed: int  # distinct cards
    new_cards_seen: int  # first reviews (previous_interval == 0)
    accuracy: float | None  # share of reviews with quality >= 3
    time_spent: float  # seconds


class MetricsCalculator:
    """
    Computes derived statistics from cards and review events.

    Stateless and side-effect free.
    """

    def deck_stats(
        self, cards: Iterable[Card], settings: DeckSettings, today: date
    ) -> DeckStats:
        """
        Compute a deck's card counts and average easiness.
        """
        cards = list(cards)
        average = (
            sum(c.review.easiness_factor for c in cards) / len(cards) if cards else 0.0
        )
        return DeckStats(
            total_cards=len(cards),
            new_cards=len(get_new_cards(cards)),
            learning_cards=len(get_learning_cards(cards)),
            due_today=todays_due_count(cards, settings.new_cards_per_day, today),
            average_easiness=average,
        )

    def streak(self, events: Iterable[ReviewEvent], today: date) -> int:
        """
        Count consecutive days with at least one review.

        The streak is only alive if the latest review day is today or yesterday.
        """
        days = {e.reviewed_at.date() for e in events}
        if not days:
            return 0

        latest = max(days)
        if latest not in (today, today - timedelta(days=1)):
            return 0

        streak = 0
        day = latest
        while day in days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    def daily_summary(self, events: Iterable[ReviewEvent], day: date) -> DailySummary:
        todays = [e for e in events if e.reviewed_at.date() == day]
        passed = sum(1 for e in todays if e.quality >= PASSING_QUALITY)
        return DailySummary(
            day=day,
            reviews=len(todays),
            cards_reviewed=len({e.card_id for e in todays}),
            new_cards_seen=sum(1 for e in todays if e.is_first_review),
            accuracy=passed / len(todays) if todays else None,
            time_spent=sum(e.time_spent for e in todays),
        )
