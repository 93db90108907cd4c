"""
Ports (interfaces) for card, deck and review-log storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date

from .models import Card, Deck, ReviewEvent


class CardRepository(ABC):
    """
    Port for reading and writing cards.

    Implementations:
        - InMemoryCollection: dict-backed, used by tests and embedding callers.
        - JsonCollection: snapshot file used by the CLI.
    """

    @abstractmethod
    def get_card(self, card_id: str) -> Card | None:
        pass

    @abstractmethod
    def list_cards(self, deck_id: str | None = None) -> list[Card]:
        """
        List cards, optionally restricted to a single deck.

        Returns:
            Cards in insertion order.
        """
        pass

    @abstractmethod
    def save_card(self, card: Card) -> None:
        """Insert or replace a card by id."""
        pass

    @abstractmethod
    def remove_card(self, card_id: str) -> None:
        """Delete a card. Unknown ids are ignored."""
        pass


class DeckRepository(ABC):
    @abstractmethod
    def get_deck(self, deck_id: str) -> Deck | None:
        pass

    @abstractmethod
    def list_decks(self, include_archived: bool = False) -> list[Deck]:
        pass

    @abstractmethod
    def save_deck(self, deck: Deck) -> None:
        """
        Insert or replace a deck by id.

        Raises:
            InvalidDeckNameError: If the deck name is blank or too long.
        """
        pass

    @abstractmethod
    def remove_deck(self, deck_id: str) -> None:
        """Delete the deck record only; its cards are left to the caller."""
        pass


class ReviewLogRepository(ABC):
    """Port for the review event log. Single events are never edited or removed."""

    @abstractmethod
    def append(self, event: ReviewEvent) -> None:
        pass

    @abstractmethod
    def events_on(self, day: date) -> list[ReviewEvent]:
        """
        Fetch every review event whose local calendar day is `day`.

        Returns:
            Events sorted by reviewed_at ascending.
        """
        pass

    @abstractmethod
    def all_events(self) -> list[ReviewEvent]:
        pass

    @abstractmethod
    def remove_deck_events(self, deck_id: str) -> int:
        """Drop every event of a deck. Returns how many were removed."""
        pass
