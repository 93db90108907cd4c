# Application Stats Package
from .metrics_calculator import DailySummary, MetricsCalculator
from .service import DeckStatsService

__all__ = ["MetricsCalculator", "DailySummary", "DeckStatsService"]
