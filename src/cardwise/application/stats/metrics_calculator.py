"""
Retention metrics derived from review history and card populations.

This is a pure computation module with no I/O.
"""

from collections.abc import Sequence
from datetime import datetime

from cardwise.application.utils.numbers import round_half_up, round_to
from cardwise.domain.constants import EASE_PRECISION, MATURE_REPETITIONS
from cardwise.domain.models import Card, ReviewEvent, StudyStats


class RetentionAnalyzer:
    """
    Computes summary statistics from cards and review events.

    Stateless and side-effect free. Empty input yields zero-valued results.
    """

    def retention_rate(self, events: Sequence[ReviewEvent]) -> int:
        """
        Percentage of successful reviews (quality >= 3), rounded.

        Returns 0 when there are no events.
        """
        if not events:
            return 0

        successful = sum(1 for event in events if event.is_success)
        return round_half_up(successful / len(events) * 100)

    def study_stats(self, cards: Sequence[Card], now: datetime) -> StudyStats:
        """
        Bucket cards by maturity and count the ones due at `now`.

        new: no successful reviews since the last reset.
        learning: 1-2 consecutive successes.
        mature: 3 or more consecutive successes.
        """
        return StudyStats(
            total=len(cards),
            due=sum(1 for c in cards if c.next_review <= now),
            new=sum(1 for c in cards if c.repetitions == 0),
            learning=sum(1 for c in cards if 0 < c.repetitions < MATURE_REPETITIONS),
            mature=sum(1 for c in cards if c.repetitions >= MATURE_REPETITIONS),
            average_ease=self._average_ease(cards),
        )

    def _average_ease(self, cards: Sequence[Card]) -> float:
        if not cards:
            return 0
        mean = sum(c.ease_factor for c in cards) / len(cards)
        return round_to(mean, EASE_PRECISION)
