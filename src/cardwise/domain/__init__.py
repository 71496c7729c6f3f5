# Domain Package
from .errors import CardNotFoundError, CardwiseError, DeckFormatError, InvalidQualityError
from .models import Card, Quality, ReviewEvent, SchedulingState, StudyStats

__all__ = [
    "Card",
    "Quality",
    "ReviewEvent",
    "SchedulingState",
    "StudyStats",
    "CardwiseError",
    "CardNotFoundError",
    "DeckFormatError",
    "InvalidQualityError",
]
