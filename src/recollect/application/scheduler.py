"""
SM-2 scheduler.

Maps a review quality and a card's current review state to its next review
state. Every function here is pure: no I/O, no clock reads unless `today`
is omitted, and inputs are never mutated.

Reference: https://www.supermemo.com/en/archives1990-2015/english/ol/sm2
"""

import math
from dataclasses import replace
from datetime import date, timedelta

from recollect.domain.constants import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    EASY_BONUS,
    EASY_FIRST_INTERVAL,
    EASY_SECOND_INTERVAL,
    FAILED_INTERVAL,
    FIRST_INTERVAL,
    HARD_FIRST_INTERVAL,
    HARD_MULTIPLIER,
    HARD_SECOND_INTERVAL,
    MAX_QUALITY,
    MIN_EASINESS,
    MIN_QUALITY,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from recollect.domain.errors import InvalidQualityError
from recollect.domain.models import CardReviewState, CardState, Difficulty

QUALITY_BY_DIFFICULTY: dict[Difficulty, int] = {
    Difficulty.AGAIN: 0,
    Difficulty.HARD: 2,
    Difficulty.GOOD: 3,
    Difficulty.EASY: 4,
}


def apply_review(
    quality: int, state: CardReviewState, today: date | None = None
) -> CardReviewState:
    """
    Apply one SM-2 review to a card's review state.

    Args:
        quality: Recall quality, 0 (blackout) to 5 (perfect).
        state: Current review state; left untouched.
        today: Review day. Defaults to the local calendar day.

    Returns:
        A new CardReviewState with updated EF, interval, repetitions,
        state and dates.

    Raises:
        InvalidQualityError: If quality is not an integer in 0..5.
    """
    _check_quality(quality)
    today = today or date.today()

    easiness = next_easiness(state.easiness_factor, quality)

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval = FAILED_INTERVAL
        if state.state in (CardState.REVIEW, CardState.RELEARNING):
            new_state = CardState.RELEARNING
        else:
            new_state = CardState.LEARNING
    else:
        if state.repetitions == 0:
            interval = FIRST_INTERVAL
        elif state.repetitions == 1:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(state.interval * easiness)
        repetitions = state.repetitions + 1
        new_state = CardState.REVIEW

    return replace(
        state,
        easiness_factor=easiness,
        interval=interval,
        repetitions=repetitions,
        next_due_date=today + timedelta(days=interval),
        last_review_date=today,
        state=new_state,
    )


def next_easiness(easiness: float, quality: int) -> float:
    """EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))."""
    miss = MAX_QUALITY - quality
    delta = 0.1 - miss * (0.08 + miss * 0.02)
    return max(MIN_EASINESS, easiness + delta)


def quality_from_difficulty(difficulty: Difficulty | str) -> int:
    """Map an answer button to its SM-2 quality: again=0, hard=2, good=3, easy=4."""
    return QUALITY_BY_DIFFICULTY[Difficulty(difficulty)]


def predict_interval(state: CardReviewState, difficulty: Difficulty | str) -> int:
    """
    Predict the interval a button would produce, for display under the button.

    Hard and easy use their own heuristics rather than plain SM-2: hard grows
    the interval by 1.2 instead of EF, easy adds a 1.3 bonus on top of EF.

    Returns:
        Interval in days. 0 means "again, due within the day".
    """
    difficulty = Difficulty(difficulty)
    if difficulty is Difficulty.AGAIN:
        return 0

    easiness = next_easiness(state.easiness_factor, quality_from_difficulty(difficulty))
    reps = state.repetitions

    if difficulty is Difficulty.HARD:
        if reps == 0:
            return HARD_FIRST_INTERVAL
        if reps == 1:
            return HARD_SECOND_INTERVAL
        return max(1, round_half_up(state.interval * HARD_MULTIPLIER))

    if difficulty is Difficulty.GOOD:
        if reps == 0:
            return FIRST_INTERVAL
        if reps == 1:
            return SECOND_INTERVAL
        return round_half_up(state.interval * easiness)

    if reps == 0:
        return EASY_FIRST_INTERVAL
    if reps == 1:
        return EASY_SECOND_INTERVAL
    return round_half_up(state.interval * easiness * EASY_BONUS)


def predict_intervals(state: CardReviewState) -> dict[Difficulty, int]:
    return {d: predict_interval(state, d) for d in Difficulty}


def format_interval(days: int) -> str:
    """Format an interval in days as a short label: <1d, 4d, 3mo, 1.2y."""
    if days == 0:
        return "<1d"
    if days < DAYS_PER_MONTH:
        return f"{days}d"
    if days < DAYS_PER_YEAR:
        return f"{round_half_up(days / DAYS_PER_MONTH)}mo"
    return f"{days / DAYS_PER_YEAR:.1f}y"


def round_half_up(value: float) -> int:
    # round() is banker's rounding; intervals round .5 upwards
    return math.floor(value + 0.5)


def _check_quality(quality: int) -> None:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQualityError(quality)
