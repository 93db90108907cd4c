# Domain Package
from .models import (
    Card,
    CardReviewState,
    CardState,
    Deck,
    DeckSettings,
    DeckStats,
    Difficulty,
    OrderMode,
    ReviewEvent,
    ReviewMode,
)
from .ports import CardRepository, DeckRepository, ReviewLogRepository

__all__ = [
    "Card",
    "CardReviewState",
    "CardState",
    "Deck",
    "DeckSettings",
    "DeckStats",
    "Difficulty",
    "OrderMode",
    "ReviewEvent",
    "ReviewMode",
    "CardRepository",
    "DeckRepository",
    "ReviewLogRepository",
]
