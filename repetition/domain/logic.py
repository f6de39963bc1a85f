import math
from datetime import date, datetime, timedelta

from ..config import (
    EASE_DELTA,
    EASY_BONUS,
    FIRST_INTERVAL_DAYS,
    HARD_MULTIPLIER,
    MAX_EASE_FACTOR,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
)
from .enums import Rating
from .state import CardState


def next_interval(rating: Rating, interval_days: int, ease_factor: float, is_first: bool) -> int:
    if rating == Rating.AGAIN:
        return MIN_INTERVAL_DAYS

    if rating == Rating.HARD:
        # No first-review special case: 0 * 1.2 clamps to 1
        return max(MIN_INTERVAL_DAYS, math.floor(interval_days * HARD_MULTIPLIER))

    if is_first:
        return FIRST_INTERVAL_DAYS[int(rating)]

    if rating == Rating.EASY:
        return max(MIN_INTERVAL_DAYS, math.floor(interval_days * ease_factor * EASY_BONUS))
    return max(MIN_INTERVAL_DAYS, math.floor(interval_days * ease_factor))


def next_ease(rating: Rating, ease_factor: float) -> float:
    proposed = ease_factor + EASE_DELTA[int(rating)]
    return min(MAX_EASE_FACTOR, max(MIN_EASE_FACTOR, proposed))


def next_repetitions(rating: Rating, repetitions: int) -> int:
    if rating == Rating.AGAIN:
        return 0
    if rating == Rating.HARD:
        return repetitions
    return repetitions + 1


def schedule(state: CardState, rating, *, now: datetime, today: date) -> CardState:
    """Return the state that follows ``state`` after a review rated ``rating``.

    Pure: nothing is read from or written to the store. ``today`` is the
    calendar date the new due date is counted from, ``now`` the review instant.
    """
    rating = Rating.parse(rating)
    state.check()

    # First review is detected by a new-queue position, not repetitions == 0
    is_first = state.is_new

    interval = next_interval(rating, state.interval_days, state.ease_factor, is_first)
    return state.with_changes(
        queue=None,
        due=today + timedelta(days=interval),
        ease_factor=next_ease(rating, state.ease_factor),
        interval_days=interval,
        repetitions=next_repetitions(rating, state.repetitions),
        last_reviewed_at=now,
    )
