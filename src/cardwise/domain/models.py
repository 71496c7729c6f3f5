"""
Domain models for flashcard scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import IntEnum

from .constants import (
    DEFAULT_CARD_TYPE,
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL,
    MIN_EASE_FACTOR,
    SUCCESS_THRESHOLD,
)


class Quality(IntEnum):
    """Learner's self-assessed recall quality."""

    BLACKOUT = 0  # Complete blackout
    INCORRECT = 1  # Incorrect but remembered
    INCORRECT_EASY = 2  # Incorrect but easy to recall
    DIFFICULT = 3  # Correct but difficult
    HESITANT = 4  # Correct with hesitation
    PERFECT = 5  # Perfect recall

    @property
    def is_success(self) -> bool:
        return self >= SUCCESS_THRESHOLD


@dataclass(frozen=True)
class SchedulingState:
    """
    The part of a card that the scheduler reads and writes.

    Attributes:
        ease_factor: Interval growth multiplier, never below 1.3.
        interval: Days until the next review.
        repetitions: Consecutive successful reviews since the last lapse.
        next_review: When the card becomes due.
    """

    ease_factor: float
    interval: int
    repetitions: int
    next_review: datetime

    def __post_init__(self):
        if self.ease_factor < MIN_EASE_FACTOR:
            raise ValueError(f"ease_factor must be >= {MIN_EASE_FACTOR}, got {self.ease_factor}")
        if self.interval < 1:
            raise ValueError(f"interval must be a positive number of days, got {self.interval}")
        if self.repetitions < 0:
            raise ValueError(f"repetitions must be >= 0, got {self.repetitions}")


@dataclass
class Card:
    """
    A unit of knowledge to be reviewed.

    Scheduling fields are only ever changed by applying a SchedulingState
    produced by the scheduler.
    """

    id: str
    user_id: str
    question: str
    answer: str
    next_review: datetime
    note_id: str | None = None
    card_type: str = DEFAULT_CARD_TYPE
    ease_factor: float = INITIAL_EASE_FACTOR
    interval: int = INITIAL_INTERVAL
    repetitions: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def scheduling_state(self) -> SchedulingState:
        return SchedulingState(
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            next_review=self.next_review,
        )

    def with_state(self, state: SchedulingState, updated_at: datetime) -> "Card":
        """Return a copy of this card carrying the given scheduling state."""
        return replace(
            self,
            ease_factor=state.ease_factor,
            interval=state.interval,
            repetitions=state.repetitions,
            next_review=state.next_review,
            updated_at=updated_at,
        )


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single review outcome. Append-only.

    Attributes:
        card_id: The card that was reviewed.
        user_id: Owner of the card.
        quality: Rating given (0-5).
        reviewed_at: When the review happened.
        time_taken: Seconds spent on the card (0 when not reported).
    """

    card_id: str
    user_id: str
    quality: int
    reviewed_at: datetime
    time_taken: int = 0

    @property
    def is_success(self) -> bool:
        return self.quality >= SUCCESS_THRESHOLD


@dataclass(frozen=True)
class StudyStats:
    """Snapshot of a card population for display."""

    total: int
    due: int
    new: int
    learning: int
    mature: int
    average_ease: float
