"""
JSON snapshot adapter.

Loads a whole collection (decks, cards, review events) from one JSON file
and writes it back after every change. The file is a plain dump of the
domain records validated through pydantic, used by the CLI.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from recollect.domain.errors import CollectionFormatError
from recollect.domain.models import Card, Deck, ReviewEvent

from .memory_store import InMemoryCollection

logger = logging.getLogger(__name__)


@dataclass
class CollectionSnapshot:
    decks: list[Deck] = field(default_factory=list)
    cards: list[Card] = field(default_factory=list)
    reviews: list[ReviewEvent] = field(default_factory=list)


_SNAPSHOT = TypeAdapter(CollectionSnapshot)


class JsonCollection(InMemoryCollection):
    """
    InMemoryCollection persisted to a JSON file.

    A missing file is treated as an empty collection.
    """

    def __init__(self, path: Path):
        self.path = path
        snapshot = load_snapshot(path)
        super().__init__(snapshot.decks, snapshot.cards, snapshot.reviews)

    def save_deck(self, deck: Deck) -> None:
        super().save_deck(deck)
        self.flush()

    def remove_deck(self, deck_id: str) -> None:
        super().remove_deck(deck_id)
        self.flush()

    def save_card(self, card: Card) -> None:
        super().save_card(card)
        self.flush()

    def remove_card(self, card_id: str) -> None:
        super().remove_card(card_id)
        self.flush()

    def append(self, event: ReviewEvent) -> None:
        super().append(event)
        self.flush()

    def remove_deck_events(self, deck_id: str) -> int:
        removed = super().remove_deck_events(deck_id)
        self.flush()
        return removed

    def flush(self) -> None:
        snapshot = CollectionSnapshot(
            decks=self.list_decks(include_archived=True),
            cards=self.list_cards(),
            reviews=self.all_events(),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_bytes(_SNAPSHOT.dump_json(snapshot, indent=2))
        tmp.replace(self.path)
        logger.debug(f"Wrote collection to {self.path}")


def load_snapshot(path: Path) -> CollectionSnapshot:
    """
    Read a collection snapshot.

    Raises:
        CollectionFormatError: If the file is not a valid snapshot.
    """
    if not path.exists():
        logger.info(f"No collection at {path}, starting empty")
        return CollectionSnapshot()

    try:
        return _SNAPSHOT.validate_json(path.read_bytes())
    except ValidationError as e:
        raise CollectionFormatError(f"Invalid collection file {path}: {e}") from e
