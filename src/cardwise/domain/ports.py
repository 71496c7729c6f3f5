"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Card, ReviewEvent


class CardRepository(ABC):
    """
    Port for reading and writing cards and their review history.

    Implementations:
        - SqliteCardRepository: Stores everything in a local SQLite file.

    Usable as a context manager; close() releases any held connection.
    """

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @abstractmethod
    async def get_card(self, card_id: str, user_id: str) -> Card | None:
        """
        Fetch a single card scoped to its owner.

        Returns:
            The card, or None if it does not exist or belongs to another user.
        """
        pass

    @abstractmethod
    async def list_cards(self, user_id: str, note_id: str | None = None) -> list[Card]:
        """
        Fetch all cards of a user, optionally restricted to one parent note.
        """
        pass

    @abstractmethod
    async def add_cards(self, cards: list[Card]) -> None:
        pass

    @abstractmethod
    async def update_card(self, card: Card) -> None:
        """
        Persist the scheduling fields of an existing card.

        Raises:
            CardNotFoundError: If the card no longer exists.
        """
        pass

    @abstractmethod
    async def append_review(self, event: ReviewEvent) -> None:
        pass

    @abstractmethod
    async def list_reviews(self, user_id: str, since: datetime | None = None) -> list[ReviewEvent]:
        """
        Fetch review history for a user.

        Args:
            user_id: Owner of the reviews.
            since: Only include reviews at or after this time.

        Returns:
            List of ReviewEvent objects, sorted by reviewed_at ascending.
        """
        pass
