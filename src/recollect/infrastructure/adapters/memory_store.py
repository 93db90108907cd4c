"""In-memory implementation of the card, deck and review-log ports."""

from dataclasses import replace
from datetime import date

from recollect.domain.models import Card, Deck, ReviewEvent, validate_deck_name
from recollect.domain.ports import CardRepository, DeckRepository, ReviewLogRepository


class InMemoryCollection(CardRepository, DeckRepository, ReviewLogRepository):
    """
    Dict-backed collection of decks, cards and review events.

    Insertion order is preserved for decks and cards.
    """

    def __init__(
        self,
        decks: list[Deck] | None = None,
        cards: list[Card] | None = None,
        events: list[ReviewEvent] | None = None,
    ):
        self._decks: dict[str, Deck] = {d.id: d for d in decks or []}
        self._cards: dict[str, Card] = {c.id: c for c in cards or []}
        self._events: list[ReviewEvent] = list(events or [])

    # ---- Decks ----

    def save_deck(self, deck: Deck) -> None:
        self._decks[deck.id] = replace(deck, name=validate_deck_name(deck.name))

    def get_deck(self, deck_id: str) -> Deck | None:
        return self._decks.get(deck_id)

    def list_decks(self, include_archived: bool = False) -> list[Deck]:
        return [d for d in self._decks.values() if include_archived or not d.is_archived]

    def remove_deck(self, deck_id: str) -> None:
        self._decks.pop(deck_id, None)

    # ---- Cards ----

    def get_card(self, card_id: str) -> Card | None:
        return self._cards.get(card_id)

    def list_cards(self, deck_id: str | None = None) -> list[Card]:
        return [c for c in self._cards.values() if deck_id is None or c.deck_id == deck_id]

    def save_card(self, card: Card) -> None:
        self._cards[card.id] = card

    def remove_card(self, card_id: str) -> None:
        self._cards.pop(card_id, None)

    # ---- Review log ----

    def append(self, event: ReviewEvent) -> None:
        self._events.append(event)

    def events_on(self, day: date) -> list[ReviewEvent]:
        return sorted(
            (e for e in self._events if e.reviewed_at.date() == day),
            key=lambda e: e.reviewed_at,
        )

    def all_events(self) -> list[ReviewEvent]:
        return sorted(self._events, key=lambda e: e.reviewed_at)

    def remove_deck_events(self, deck_id: str) -> int:
        kept = [e for e in self._events if e.deck_id != deck_id]
        removed = len(self._events) - len(kept)
        self._events = kept
        return removed
