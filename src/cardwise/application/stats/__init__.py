# Application Stats Package
from .metrics_calculator import RetentionAnalyzer
from .service import StudyStatsService, StudySummary

__all__ = ["RetentionAnalyzer", "StudyStatsService", "StudySummary"]
