"""
Review Service — Application layer orchestrator.

Runs the review flows against the CardRepository port:
- record a review (fetch, schedule, persist, log history)
- fetch the due queue for a drill session
- count due cards per note for the drill overview
- import newly generated cards
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from cardwise.application.card_import import build_cards
from cardwise.application.clock import utc_now
from cardwise.application.due_selector import (
    DueOverview,
    ReviewSession,
    build_session,
    due_by_note,
)
from cardwise.application.scheduler import compute_next_state, validate_quality
from cardwise.domain.constants import DEFAULT_SESSION_LIMIT
from cardwise.domain.errors import CardNotFoundError
from cardwise.domain.models import Card, ReviewEvent
from cardwise.domain.ports import CardRepository

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    """Result of recording a review."""

    card: Card  # Card with its new scheduling state
    event: ReviewEvent
    history_saved: bool = True

    @property
    def next_review(self) -> datetime:
        return self.card.next_review


class ReviewService:
    """
    Application service for recording reviews and building drill sessions.

    The clock is injected so that scheduling is deterministic under test.
    """

    def __init__(
        self,
        repo: CardRepository,
        clock: Callable[[], datetime] = utc_now,
        session_limit: int | None = DEFAULT_SESSION_LIMIT,
    ):
        self._repo = repo
        self._clock = clock
        self.session_limit = session_limit

    async def record_review(
        self,
        user_id: str,
        card_id: str,
        quality: Any,
        time_taken: int | None = None,
    ) -> ReviewOutcome:
        """
        Record a review and reschedule the card.

        Args:
            user_id: Owner of the card; lookups are scoped to this user.
            card_id: Card being reviewed.
            quality: Raw rating from the caller, validated here.
            time_taken: Seconds spent on the card.

        Returns:
            ReviewOutcome with the updated card.

        Raises:
            InvalidQualityError: If quality is not an integer in 0..5.
            CardNotFoundError: If the card is missing or owned by someone else.
        """
        rating = validate_quality(quality)

        card = await self._repo.get_card(card_id, user_id)
        if card is None:
            raise CardNotFoundError(card_id, user_id)

        now = self._clock()
        state = compute_next_state(rating, card.scheduling_state, now)
        updated = card.with_state(state, updated_at=now)

        await self._repo.update_card(updated)

        event = ReviewEvent(
            card_id=card_id,
            user_id=user_id,
            quality=int(rating),
            reviewed_at=now,
            time_taken=time_taken or 0,
        )

        # History is best-effort; the card itself is already rescheduled
        history_saved = True
        try:
            await self._repo.append_review(event)
        except Exception as e:
            history_saved = False
            logger.warning(f"Failed to record review history for {card_id}: {e}")

        logger.info(
            f"Reviewed {card_id} q={int(rating)}: interval={state.interval}d "
            f"ease={state.ease_factor} reps={state.repetitions}"
        )
        return ReviewOutcome(card=updated, event=event, history_saved=history_saved)

    async def due_cards(
        self,
        user_id: str,
        note_id: str | None = None,
        max_cards: int | None = None,
    ) -> ReviewSession:
        """
        Build the due queue for a user.

        Args:
            user_id: Owner of the cards.
            note_id: Drill a single note instead of the merged "all due" view.
            max_cards: Override the configured session cap for the merged view.
        """
        cards = await self._repo.list_cards(user_id, note_id=note_id)
        cap = self.session_limit if max_cards is None else max_cards
        return build_session(cards, self._clock(), note_id=note_id, max_cards=cap)

    async def due_overview(self, user_id: str) -> DueOverview:
        """Total and due card counts for each of the user's notes."""
        cards = await self._repo.list_cards(user_id)
        return due_by_note(cards, self._clock())

    async def import_cards(
        self,
        user_id: str,
        records: list[dict[str, Any]],
        note_id: str | None = None,
    ) -> list[Card]:
        """
        Create new cards from raw question/answer records.

        Raises:
            DeckFormatError: If any record is invalid; nothing is stored then.
        """
        cards = build_cards(records, user_id, self._clock(), note_id=note_id)
        if cards:
            await self._repo.add_cards(cards)
        logger.info(f"Imported {len(cards)} cards for {user_id}")
        return cards
