"""recollect: SM-2 scheduling and daily study queues."""

from recollect.application.queue_builder import build_queue
from recollect.application.scheduler import (
    apply_review,
    format_interval,
    predict_interval,
    quality_from_difficulty,
)
from recollect.domain.models import (
    Card,
    CardReviewState,
    CardState,
    Difficulty,
    OrderMode,
    ReviewEvent,
)

__version__ = "0.1.0"

__all__ = [
    "apply_review",
    "build_queue",
    "predict_interval",
    "quality_from_difficulty",
    "format_interval",
    "Card",
    "CardReviewState",
    "CardState",
    "Difficulty",
    "OrderMode",
    "ReviewEvent",
]
