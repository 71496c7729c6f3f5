"""
SM-2 review scheduler.

Maps a recall quality and a card's current scheduling state to the next
state. This is a pure computation module with no I/O: the caller supplies
"now" so results are deterministic.

Two behaviours differ from textbook SM-2 and are kept on purpose:
- A failed review resets repetitions and interval but leaves the ease
  factor untouched.
- next_review is "now" plus whole days, keeping the time of day.
"""

from datetime import datetime, timedelta

from cardwise.application.utils.numbers import round_half_up, round_to
from cardwise.domain.constants import (
    EASE_PRECISION,
    INITIAL_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    SECOND_INTERVAL,
    SUCCESS_THRESHOLD,
)
from cardwise.domain.errors import InvalidQualityError
from cardwise.domain.models import Quality, SchedulingState


def validate_quality(quality: object) -> Quality:
    """
    Check a raw rating at the boundary and convert it to a Quality.

    Raises:
        InvalidQualityError: If the value is not an integer in 0..5.
    """
    # bool is an int subclass; True/False are not ratings
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQualityError(quality)
    return Quality(quality)


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """
    Apply the SM-2 ease update for a successful review.

    EF' = max(1.3, EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02)))
    """
    miss = MAX_QUALITY - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def compute_next_state(
    quality: int,
    current: SchedulingState,
    now: datetime,
) -> SchedulingState:
    """
    Compute a card's scheduling state after a review.

    Args:
        quality: Recall quality, 0-5.
        current: The card's state before the review.
        now: Review time; next_review is derived from it.

    Returns:
        New SchedulingState with ease_factor rounded to 2 decimals.
    """
    quality = validate_quality(quality)

    ease_factor = current.ease_factor
    interval = current.interval
    repetitions = current.repetitions

    if quality < SUCCESS_THRESHOLD:
        repetitions = 0
        interval = INITIAL_INTERVAL
    else:
        ease_factor = next_ease_factor(ease_factor, quality)

        # Interval depends on the repetition count before incrementing
        if repetitions == 0:
            interval = INITIAL_INTERVAL
        elif repetitions == 1:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(interval * ease_factor)

        repetitions += 1

    return SchedulingState(
        ease_factor=round_to(ease_factor, EASE_PRECISION),
        interval=interval,
        repetitions=repetitions,
        next_review=now + timedelta(days=interval),
    )
