"""
Study Stats Service — Application layer orchestrator.

Coordinates fetching cards and review history from the repository and
summarizing them with the RetentionAnalyzer.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from cardwise.application.clock import utc_now
from cardwise.domain.constants import DEFAULT_STATS_WINDOW_DAYS
from cardwise.domain.models import StudyStats
from cardwise.domain.ports import CardRepository

from .metrics_calculator import RetentionAnalyzer

logger = logging.getLogger(__name__)


@dataclass
class StudySummary:
    """Card population stats plus retention over a recent window."""

    stats: StudyStats
    retention_rate: int
    reviews_in_window: int
    window_days: int


class StudyStatsService:
    """
    Application service for the dashboard statistics.

    Depends on the CardRepository abstraction, not a concrete adapter.
    """

    def __init__(
        self,
        repo: CardRepository,
        analyzer: RetentionAnalyzer | None = None,
        clock: Callable[[], datetime] = utc_now,
        window_days: int = DEFAULT_STATS_WINDOW_DAYS,
    ):
        """
        Args:
            repo: The repository (port) for cards and reviews.
            analyzer: Optional custom analyzer; uses default if not provided.
            clock: Source of "now".
            window_days: How far back reviews count toward retention.
        """
        self._repo = repo
        self._analyzer = analyzer or RetentionAnalyzer()
        self._clock = clock
        self.window_days = window_days

    async def summary(self, user_id: str) -> StudySummary:
        now = self._clock()
        cards = await self._repo.list_cards(user_id)
        since = now - timedelta(days=self.window_days)
        events = await self._repo.list_reviews(user_id, since=since)

        logger.debug(f"Stats for {user_id}: {len(cards)} cards, {len(events)} recent reviews")

        return StudySummary(
            stats=self._analyzer.study_stats(cards, now),
            retention_rate=self._analyzer.retention_rate(events),
            reviews_in_window=len(events),
            window_days=self.window_days,
        )
