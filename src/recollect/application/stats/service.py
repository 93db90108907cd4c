"""
Deck stats service: application layer orchestrator.

Coordinates fetching cards and review events from the repositories and
running them through the metrics calculator.
"""

import logging
from datetime import date

from recollect.domain.errors import DeckNotFoundError
from recollect.domain.models import DeckStats
from recollect.domain.ports import CardRepository, DeckRepository, ReviewLogRepository

from .metrics_calculator import DailySummary, MetricsCalculator

logger = logging.getLogger(__name__)


class DeckStatsService:
    """
    Application service for deck and study statistics.

    Depends on repository abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        cards: CardRepository,
        decks: DeckRepository,
        review_log: ReviewLogRepository,
        calculator: MetricsCalculator | None = None,
    ):
        """
        Args:
            cards: Card storage port.
            decks: Deck storage port.
            review_log: Review event log port.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._cards = cards
        self._decks = decks
        self._log = review_log
        self._calc = calculator or MetricsCalculator()

    def get_deck_stats(self, deck_id: str, today: date | None = None) -> DeckStats:
        """
        Compute statistics for a single deck.

        Raises:
            DeckNotFoundError: If the deck does not exist.
        """
        deck = self._decks.get_deck(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)

        today = today or date.today()
        stats = self._calc.deck_stats(self._cards.list_cards(deck_id), deck.settings, today)
        logger.debug(f"Stats for {deck.name!r}: {stats}")
        return stats

    def get_all_deck_stats(self, today: date | None = None) -> dict[str, DeckStats]:
        """
        Compute statistics for every non-archived deck, keyed by deck id.
        """
        today = today or date.today()
        return {
            deck.id: self._calc.deck_stats(
                self._cards.list_cards(deck.id), deck.settings, today
            )
            for deck in self._decks.list_decks()
        }

    def get_streak(self, today: date | None = None) -> int:
        return self._calc.streak(self._log.all_events(), today or date.today())

    def get_daily_summary(self, day: date | None = None) -> DailySummary:
        day = day or date.today()
        return self._calc.daily_summary(self._log.events_on(day), day)
