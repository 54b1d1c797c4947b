"""
SM-2 style review scheduler.

This is a pure computation module with no I/O. Given a card's scheduling
fields and a rating it returns a fresh ReviewResult; the card is never mutated.

Numeric policy:
    - The ease factor is clamped into [1.3, 2.5] before use and again after
      each per-rating adjustment.
    - Intervals are rounded half-up to one decimal place using scaled-integer
      arithmetic, so the result does not depend on float formatting.
    - Intervals have no fixed upper bound, but an interval so large that one
      more easy review would overflow the due date in milliseconds (about
      6e299 days) is treated as corrupted, like a negative interval.
"""

import math
from dataclasses import replace

from cadence.domain.constants import (
    AGAIN_EASE_PENALTY,
    DEFAULT_EASE_FACTOR,
    EASY_EASE_BONUS,
    EASY_INTERVAL_BONUS,
    EASY_STEPS,
    GOOD_STEPS,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_MULTIPLIER,
    HARD_MIN_INTERVAL,
    LEARNING_MAX_INTERVAL,
    MAX_EASE_FACTOR,
    MIN_EASE_FACTOR,
    MS_PER_DAY,
    REVIEW_MAX_INTERVAL,
)
from cadence.domain.errors import InvalidCardError
from cadence.domain.models import Card, CardState, Rating, ReviewResult

from .factory import get_clock

_MAX_GROWTH_MS = MS_PER_DAY * MAX_EASE_FACTOR * EASY_INTERVAL_BONUS


def clamp_ease(ease_factor: float) -> float:
    return max(MIN_EASE_FACTOR, min(MAX_EASE_FACTOR, ease_factor))


def round_interval(interval: float) -> float:
    """
    Round to one decimal place, halves going up.

    Built-in round() uses banker's rounding, which would turn 0.25 into 0.2.
    """
    return math.floor(interval * 10 + 0.5) / 10


def classify_state(rating: Rating, repetitions: int, interval: float) -> CardState:
    """
    Classify a card from its post-review repetitions and interval.

    Branches are checked in order; the first match wins.
    """
    if rating is Rating.AGAIN or repetitions == 0:
        return CardState.NEW
    if interval < LEARNING_MAX_INTERVAL:
        return CardState.LEARNING
    if interval < REVIEW_MAX_INTERVAL:
        return CardState.REVIEW
    return CardState.MASTERED


def _is_schedulable(interval: float) -> bool:
    # The largest single-review growth must still give a finite due date
    return interval >= 0 and math.isfinite(interval * _MAX_GROWTH_MS)


def validate_card(card: Card) -> None:
    """
    Reject scheduling fields that could not have come from the scheduler.

    Raises:
        InvalidCardError: interval is negative, non-finite or too large to
            schedule; ease factor is non-finite; repetitions is not a
            non-negative integer.
    """
    interval = card.interval
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise InvalidCardError("interval", interval)
    if not _is_schedulable(interval):
        raise InvalidCardError("interval", interval)

    ease = card.ease_factor
    if isinstance(ease, bool) or not isinstance(ease, (int, float)) or not math.isfinite(ease):
        raise InvalidCardError("ease_factor", ease)

    reps = card.repetitions
    if isinstance(reps, bool) or not isinstance(reps, int) or reps < 0:
        raise InvalidCardError("repetitions", reps)


def sanitize_card(card: Card) -> tuple[Card, list[str]]:
    """
    Clamp corrupted scheduling fields to safe values instead of rejecting them.

    An interval that validate_card would reject becomes 0, a non-finite ease
    factor becomes the default, and negative repetitions become 0.

    Returns:
        The repaired card and the names of the fields that were changed.
    """
    repaired: dict[str, object] = {}

    interval = card.interval
    if not isinstance(interval, (int, float)) or not _is_schedulable(interval):
        repaired["interval"] = 0.0

    ease = card.ease_factor
    if not isinstance(ease, (int, float)) or not math.isfinite(ease):
        repaired["ease_factor"] = DEFAULT_EASE_FACTOR

    reps = card.repetitions
    if not isinstance(reps, int) or reps < 0:
        try:
            repaired["repetitions"] = max(0, int(reps))
        except (TypeError, ValueError, OverflowError):
            repaired["repetitions"] = 0

    if not repaired:
        return card, []
    return replace(card, **repaired), sorted(repaired)


def calculate_next_review(
    card: Card,
    rating: Rating | str,
    now: int | None = None,
) -> ReviewResult:
    """
    Compute the next scheduling fields for a reviewed card.

    Args:
        card: Current scheduling snapshot. Only interval, ease_factor and
            repetitions are read.
        rating: The learner's answer.
        now: Review time in epoch milliseconds. Defaults to the system clock.

    Returns:
        A new ReviewResult; the input card is left untouched.

    Raises:
        InvalidCardError: If the card's scheduling fields are corrupted.
        ValueError: If rating is not one of again, hard, good, easy.
    """
    rating = Rating(rating)
    validate_card(card)
    if now is None:
        now = get_clock().now_ms()

    interval = float(card.interval)
    repetitions = card.repetitions
    ease = clamp_ease(card.ease_factor)

    if rating is Rating.AGAIN:
        interval = 0.0
        repetitions = 0
        ease = max(MIN_EASE_FACTOR, ease - AGAIN_EASE_PENALTY)

    elif rating is Rating.HARD:
        interval = max(HARD_MIN_INTERVAL, interval * HARD_INTERVAL_MULTIPLIER)
        ease = max(MIN_EASE_FACTOR, ease - HARD_EASE_PENALTY)
        repetitions += 1

    elif rating is Rating.GOOD:
        if repetitions < len(GOOD_STEPS):
            interval = GOOD_STEPS[repetitions]
        else:
            interval = interval * ease
        repetitions += 1

    else:  # easy
        if repetitions < len(EASY_STEPS):
            interval = EASY_STEPS[repetitions]
        else:
            interval = interval * ease * EASY_INTERVAL_BONUS
        ease = min(MAX_EASE_FACTOR, ease + EASY_EASE_BONUS)
        repetitions += 1

    interval = round_interval(interval)
    next_review_date = now + round(interval * MS_PER_DAY)

    return ReviewResult(
        interval=interval,
        ease_factor=ease,
        repetitions=repetitions,
        next_review_date=next_review_date,
        state=classify_state(rating, repetitions, interval),
    )
