"""
Repository Factory
Centralizes the logic for selecting the storage adapter.
"""

import logging

from cardwise.application.config import AppConfig
from cardwise.application.review_service import ReviewService
from cardwise.application.stats.service import StudyStatsService
from cardwise.domain.ports import CardRepository
from cardwise.infrastructure.repository.sqlite_repo import SqliteCardRepository

logger = logging.getLogger(__name__)


def get_card_repository(config: AppConfig) -> CardRepository:
    """
    Returns the CardRepository implementation for the configured database.
    """
    logger.debug(f"Opening card store at {config.db_path}")
    return SqliteCardRepository(config.db_path)


def get_review_service(config: AppConfig, repo: CardRepository | None = None) -> ReviewService:
    return ReviewService(repo or get_card_repository(config), session_limit=config.session_limit)


def get_stats_service(config: AppConfig, repo: CardRepository | None = None) -> StudyStatsService:
    return StudyStatsService(
        repo or get_card_repository(config),
        window_days=config.stats_window_days,
    )
