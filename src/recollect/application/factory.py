"""
Service Factory
Centralizes wiring of repositories and services from configuration.
"""

import random

from recollect.application.config import AppConfig
from recollect.application.deck_service import DeckService
from recollect.application.session_service import StudySessionService
from recollect.application.stats.service import DeckStatsService
from recollect.infrastructure.adapters.json_store import JsonCollection


def get_collection(config: AppConfig) -> JsonCollection:
    """
    Returns the collection backing the configured data file.
    """
    return JsonCollection(config.data_file)


def get_session_service(
    config: AppConfig, collection: JsonCollection | None = None
) -> StudySessionService:
    """
    Returns a session service. A configured seed makes its queues reproducible.
    """
    collection = collection or get_collection(config)
    return StudySessionService(
        cards=collection,
        decks=collection,
        review_log=collection,
        rng=random.Random(config.seed),
    )


def get_stats_service(
    config: AppConfig, collection: JsonCollection | None = None
) -> DeckStatsService:
    collection = collection or get_collection(config)
    return DeckStatsService(cards=collection, decks=collection, review_log=collection)


def get_deck_service(
    config: AppConfig, collection: JsonCollection | None = None
) -> DeckService:
    collection = collection or get_collection(config)
    return DeckService(cards=collection, decks=collection, review_log=collection)
