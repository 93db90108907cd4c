"""
Deck and card management.

Creating, editing, archiving and deleting decks and cards. Scheduling
state is never touched here; review history only goes away together with
its deck.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from recollect.domain.errors import CardNotFoundError, DeckNotFoundError
from recollect.domain.models import (
    Card,
    Deck,
    DeckSettings,
    OrderMode,
    generate_id,
    validate_deck_name,
)
from recollect.domain.ports import CardRepository, DeckRepository, ReviewLogRepository

logger = logging.getLogger(__name__)


class DeckService:
    def __init__(
        self,
        cards: CardRepository,
        decks: DeckRepository,
        review_log: ReviewLogRepository,
    ):
        self._cards = cards
        self._decks = decks
        self._log = review_log

    # ---- Decks ----

    def create_deck(self, name: str, settings: DeckSettings | None = None) -> Deck:
        deck = Deck(
            id=generate_id("deck"),
            name=validate_deck_name(name),
            settings=settings or DeckSettings(),
        )
        self._decks.save_deck(deck)
        logger.info(f"Created deck {deck.name!r} ({deck.id})")
        return deck

    def update_deck(
        self,
        deck_id: str,
        *,
        name: str | None = None,
        new_cards_per_day: int | None = None,
        reviews_per_day: int | None = None,
        card_order: OrderMode | str | None = None,
    ) -> Deck:
        """
        Rename a deck or change its daily limits. Arguments left as None are kept.

        Raises:
            DeckNotFoundError: If the deck does not exist.
            InvalidDeckNameError: If the new name is blank or too long.
        """
        deck = self._get_deck(deck_id)
        settings = deck.settings
        if new_cards_per_day is not None:
            settings = replace(settings, new_cards_per_day=new_cards_per_day)
        if reviews_per_day is not None:
            settings = replace(settings, reviews_per_day=reviews_per_day)
        if card_order is not None:
            settings = replace(settings, card_order=OrderMode(card_order))

        updated = replace(
            deck,
            name=deck.name if name is None else validate_deck_name(name),
            settings=settings,
        )
        self._decks.save_deck(updated)
        logger.info(f"Updated deck {updated.id}: {updated.settings}")
        return updated

    def set_archived(self, deck_id: str, archived: bool = True) -> Deck:
        """Archived decks keep their cards but drop out of the all-decks queue."""
        updated = replace(self._get_deck(deck_id), is_archived=archived)
        self._decks.save_deck(updated)
        return updated

    def delete_deck(self, deck_id: str) -> int:
        """
        Delete a deck together with its cards and review history.

        Returns:
            Number of cards removed.
        """
        deck = self._get_deck(deck_id)
        cards = self._cards.list_cards(deck.id)
        for card in cards:
            self._cards.remove_card(card.id)
        events = self._log.remove_deck_events(deck.id)
        self._decks.remove_deck(deck.id)
        logger.info(f"Deleted deck {deck.name!r}: {len(cards)} cards, {events} reviews")
        return len(cards)

    def _get_deck(self, deck_id: str) -> Deck:
        # Archived decks are still reachable by id
        deck = self._decks.get_deck(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)
        return deck

    # ---- Cards ----

    def add_card(
        self, deck_id: str, payload: dict[str, Any], now: datetime | None = None
    ) -> Card:
        self._get_deck(deck_id)
        card = Card.create(deck_id, payload, now)
        self._cards.save_card(card)
        return card

    def update_card(
        self, card_id: str, payload: dict[str, Any], now: datetime | None = None
    ) -> Card:
        """
        Merge `payload` into the card's payload. The review state is kept.

        Raises:
            CardNotFoundError: If the card does not exist.
        """
        card = self._cards.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        updated = replace(
            card,
            payload={**card.payload, **payload},
            updated_at=now or datetime.now(),
        )
        self._cards.save_card(updated)
        return updated

    def delete_card(self, card_id: str) -> Card:
        """Delete one card. Its past review events stay in the log."""
        card = self._cards.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        self._cards.remove_card(card_id)
        logger.info(f"Deleted card {card_id}")
        return card
