"""
Study session service.

Sits between storage and the pure scheduling core: works out today's
remaining new-card allowance from the review log, builds per-deck queues,
and turns an answer into an updated card plus a review event.
"""

import logging
import random
from dataclasses import replace
from datetime import date, datetime

from recollect.application.queue_builder import build_queue
from recollect.application.scheduler import apply_review, quality_from_difficulty
from recollect.domain.errors import CardNotFoundError, DeckNotFoundError
from recollect.domain.models import (
    Card,
    Deck,
    Difficulty,
    ReviewEvent,
    ReviewMode,
    generate_id,
)
from recollect.domain.ports import CardRepository, DeckRepository, ReviewLogRepository

logger = logging.getLogger(__name__)


class StudySessionService:
    """
    Application service for building study queues and recording reviews.
    """

    def __init__(
        self,
        cards: CardRepository,
        decks: DeckRepository,
        review_log: ReviewLogRepository,
        rng: random.Random | None = None,
    ):
        self._cards = cards
        self._decks = decks
        self._log = review_log
        self._rng = rng or random.Random()

    # ---- Daily accounting ----

    def new_cards_seen_today(self, deck_id: str, today: date | None = None) -> int:
        """
        Count new cards of a deck already introduced today.

        A review event with previous_interval == 0 is a new card's first review.
        """
        today = today or date.today()
        deck_card_ids = {c.id for c in self._cards.list_cards(deck_id)}
        return sum(
            1
            for e in self._log.events_on(today)
            if e.is_first_review and e.card_id in deck_card_ids
        )

    def reviewed_today_ids(self, today: date | None = None) -> set[str]:
        return {e.card_id for e in self._log.events_on(today or date.today())}

    # ---- Queues ----

    def build_deck_queue(
        self,
        deck_id: str,
        today: date | None = None,
        max_new: int | None = None,
        max_review: int | None = None,
    ) -> list[Card]:
        """
        Build today's queue for one deck.

        Args:
            deck_id: Deck to study.
            today: Local calendar day.
            max_new: Override for the deck's new_cards_per_day.
            max_review: Override for the deck's reviews_per_day (not enforced).

        Raises:
            DeckNotFoundError: If the deck does not exist.
        """
        deck = self._decks.get_deck(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)
        return self._queue_for(deck, today or date.today(), max_new, max_review)

    def build_all_decks_queue(
        self, today: date | None = None, max_new: int | None = None
    ) -> list[Card]:
        """
        Concatenate every non-archived deck's queue, each with its own caps.

        `max_new` replaces every deck's new_cards_per_day; cards already
        introduced today are still subtracted per deck. No cross-deck
        interleaving or re-sorting is performed.
        """
        today = today or date.today()
        combined: list[Card] = []
        for deck in self._decks.list_decks():
            combined.extend(self._queue_for(deck, today, max_new, None))
        return combined

    def _queue_for(
        self,
        deck: Deck,
        today: date,
        max_new: int | None,
        max_review: int | None,
    ) -> list[Card]:
        settings = deck.settings
        limit = settings.new_cards_per_day if max_new is None else max_new
        remaining_new = max(0, limit - self.new_cards_seen_today(deck.id, today))

        reviewed = self.reviewed_today_ids(today)
        candidates = [c for c in self._cards.list_cards(deck.id) if c.id not in reviewed]

        queue = build_queue(
            candidates,
            remaining_new,
            settings.reviews_per_day if max_review is None else max_review,
            settings.card_order,
            today=today,
            rng=self._rng,
        )
        logger.info(
            f"Deck {deck.name!r}: {len(queue)} cards queued "
            f"({remaining_new} new allowed, {len(reviewed)} reviewed today)"
        )
        return queue

    # ---- Reviews ----

    def review_card(
        self,
        card_id: str,
        difficulty: Difficulty | str,
        review_mode: ReviewMode | str = ReviewMode.CLASSIC,
        time_spent: float = 0.0,
        now: datetime | None = None,
    ) -> tuple[Card, ReviewEvent]:
        """
        Record an answer given with one of the four difficulty buttons.

        Returns:
            The updated card and the review event, both already persisted.

        Raises:
            CardNotFoundError: If the card does not exist.
        """
        return self.review_card_with_quality(
            card_id,
            quality_from_difficulty(difficulty),
            review_mode,
            time_spent,
            now,
        )

    def review_card_with_quality(
        self,
        card_id: str,
        quality: int,
        review_mode: ReviewMode | str = ReviewMode.CLASSIC,
        time_spent: float = 0.0,
        now: datetime | None = None,
    ) -> tuple[Card, ReviewEvent]:
        """
        Record an answer with a raw SM-2 quality (0-5).
        """
        card = self._cards.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        now = now or datetime.now()
        previous = card.review
        updated_review = apply_review(quality, previous, now.date())

        updated = replace(card, review=updated_review, updated_at=now)
        event = ReviewEvent(
            id=generate_id("rev"),
            card_id=card.id,
            deck_id=card.deck_id,
            reviewed_at=now,
            quality=quality,
            review_mode=ReviewMode(review_mode),
            time_spent=time_spent,
            previous_easiness=previous.easiness_factor,
            new_easiness=updated_review.easiness_factor,
            previous_interval=previous.interval,
            new_interval=updated_review.interval,
        )

        self._cards.save_card(updated)
        self._log.append(event)
        logger.debug(
            f"Reviewed {card.id} q={quality}: interval {previous.interval} -> "
            f"{updated_review.interval}, state {updated_review.state.value}"
        )
        return updated, event
