"""
Queue builder for daily study sessions.

Builds ordered study queues by:
1. Splitting cards into overdue, due-today and new buckets
2. Sorting overdue cards oldest first, shuffling the other buckets
3. Capping new cards and interleaving them into the review stream
"""

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from recollect.domain.constants import REVIEWS_PER_NEW_CARD
from recollect.domain.models import Card, CardState, OrderMode

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueueBuildResult:
    """Result of queue building operation."""

    queue: list[Card]  # Final session order
    overdue: list[Card]  # Sorted oldest due date first
    due_today: list[Card]  # Shuffled
    new: list[Card]  # Shuffled and capped
    deferred_new: int  # New cards left out by the daily cap


def build_queue(
    cards: Iterable[Card],
    max_new_per_day: int,
    max_review_per_day: int,
    order_mode: OrderMode | str = OrderMode.RANDOM,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build the ordered list of cards to study today.

    Args:
        cards: Every card of the deck (any state, any due date).
        max_new_per_day: Remaining new-card allowance for today.
        max_review_per_day: Accepted but not enforced, see plan_queue.
        order_mode: Accepted; due-today and new cards are always shuffled.
        today: Local calendar day. Defaults to date.today().
        rng: Randomness source for shuffling. Seed it for reproducible queues.

    Returns:
        Overdue cards (oldest first) and today's cards, with one new card
        after every third review card and leftover new cards at the end.
    """
    return plan_queue(
        cards,
        max_new_per_day,
        max_review_per_day,
        order_mode,
        today=today,
        rng=rng,
    ).queue


def plan_queue(
    cards: Iterable[Card],
    max_new_per_day: int,
    max_review_per_day: int,
    order_mode: OrderMode | str = OrderMode.RANDOM,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> QueueBuildResult:
    """
    Same as build_queue, but also returns the intermediate buckets.
    """
    cards = list(cards)
    today = today or date.today()
    rng = rng or random.Random()

    if OrderMode(order_mode) is not OrderMode.RANDOM:
        # Session queues always shuffle today's and new cards; the mode only
        # drives sort_cards_by_priority.
        logger.debug(f"order_mode={OrderMode(order_mode).value} ignored for session queue")

    # max_review_per_day is not applied: the review stream is never truncated.
    # Enforcing it would drop overdue and due-today cards and change queue lengths.

    overdue = sorted(get_overdue_cards(cards, today), key=_due_key)
    due_today = shuffle(get_due_today_cards(cards, today), rng)

    all_new = shuffle(get_new_cards(cards), rng)
    new = all_new[: max(0, max_new_per_day)]

    queue = interleave(overdue + due_today, new, REVIEWS_PER_NEW_CARD)

    logger.debug(
        f"Queue: {len(overdue)} overdue, {len(due_today)} due today, "
        f"{len(new)}/{len(all_new)} new -> {len(queue)} cards"
    )

    return QueueBuildResult(
        queue=queue,
        overdue=overdue,
        due_today=due_today,
        new=new,
        deferred_new=len(all_new) - len(new),
    )


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


def get_overdue_cards(cards: Iterable[Card], today: date) -> list[Card]:
    """Reviewed cards whose due day is before today."""
    return [
        c for c in cards if c.review.state != CardState.NEW and c.review.next_due_date < today
    ]


def get_due_today_cards(cards: Iterable[Card], today: date) -> list[Card]:
    return [
        c for c in cards if c.review.state != CardState.NEW and c.review.next_due_date == today
    ]


def get_due_review_cards(cards: Iterable[Card], today: date) -> list[Card]:
    """Overdue and due-today cards together."""
    return [
        c for c in cards if c.review.state != CardState.NEW and c.review.next_due_date <= today
    ]


def get_new_cards(cards: Iterable[Card]) -> list[Card]:
    return [c for c in cards if c.review.state == CardState.NEW]


def get_learning_cards(cards: Iterable[Card]) -> list[Card]:
    return [
        c for c in cards if c.review.state in (CardState.LEARNING, CardState.RELEARNING)
    ]


def get_review_cards(cards: Iterable[Card]) -> list[Card]:
    """Graduated cards."""
    return [c for c in cards if c.review.state == CardState.REVIEW]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def sort_cards_by_priority(
    cards: Iterable[Card],
    order_mode: OrderMode | str = OrderMode.RANDOM,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Order cards for browsing: shuffled, oldest due first, or newest due first.
    """
    order_mode = OrderMode(order_mode)
    cards = list(cards)

    if order_mode is OrderMode.RANDOM:
        return shuffle(cards, rng or random.Random())
    if order_mode is OrderMode.OLDEST:
        return sorted(cards, key=_due_key)
    return sorted(cards, key=_due_key, reverse=True)


def todays_due_count(cards: Iterable[Card], max_new_per_day: int, today: date) -> int:
    """Due review cards plus today's capped share of new cards."""
    cards = list(cards)
    new_count = min(len(get_new_cards(cards)), max(0, max_new_per_day))
    return new_count + len(get_due_review_cards(cards, today))


def shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Uniform random permutation of `items` as a new list."""
    return rng.sample(list(items), len(items))


def interleave(reviews: Sequence[T], new: Sequence[T], ratio: int) -> list[T]:
    """
    Insert one item of `new` after every `ratio` items of `reviews`.

    Leftover new items are appended at the end.
    """
    result: list[T] = []
    new_iter = iter(new)

    for i, card in enumerate(reviews, start=1):
        result.append(card)
        if i % ratio == 0:
            nxt = next(new_iter, None)
            if nxt is not None:
                result.append(nxt)

    result.extend(new_iter)
    return result


def _due_key(card: Card) -> date:
    return card.review.next_due_date
