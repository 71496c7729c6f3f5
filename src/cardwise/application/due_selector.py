"""
Due-card selection for review sessions.

Builds ordered review queues by:
1. Keeping cards whose next_review has passed
2. Sorting most overdue first (stable on ties)
3. Capping the merged "all due" view at a session size
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from cardwise.domain.constants import DEFAULT_SESSION_LIMIT
from cardwise.domain.models import Card

logger = logging.getLogger(__name__)


@dataclass
class ReviewSession:
    """Result of building a review session."""

    cards: list[Card]  # Ordered, most overdue first
    total_due: int  # Due cards in scope before the cap was applied
    note_id: str | None = None  # Set in single-note mode

    @property
    def truncated(self) -> bool:
        return self.total_due > len(self.cards)


def select_due(cards: Iterable[Card], now: datetime) -> list[Card]:
    """Return the cards with next_review <= now, in input order."""
    return [card for card in cards if card.next_review <= now]


def sort_by_priority(cards: Iterable[Card]) -> list[Card]:
    """
    Sort ascending by next_review so the most overdue card comes first.

    sorted() is stable, so cards with equal next_review keep their
    original relative order.
    """
    return sorted(cards, key=lambda card: card.next_review)


def limit(cards: list[Card], n: int | None) -> list[Card]:
    """Truncate to at most n cards. None means no cap."""
    if n is None:
        return list(cards)
    if n < 0:
        raise ValueError(f"limit must be >= 0, got {n}")
    return cards[:n]


def build_session(
    cards: Iterable[Card],
    now: datetime,
    note_id: str | None = None,
    max_cards: int | None = DEFAULT_SESSION_LIMIT,
) -> ReviewSession:
    """
    Build the review queue for a drill session.

    Args:
        cards: Candidate cards, already scoped to one user.
        now: Reference time for due-ness.
        note_id: Single-note mode; only this note's cards are drilled and
            the session is not capped.
        max_cards: Cap for the merged "all due" view (default: 20).

    Returns:
        ReviewSession with the ordered cards and the uncapped due count.
    """
    if note_id is not None:
        cards = [card for card in cards if card.note_id == note_id]

    due = sort_by_priority(select_due(cards, now))

    if note_id is None:
        session_cards = limit(due, max_cards)
    else:
        session_cards = due

    logger.debug(
        f"Session built: {len(session_cards)}/{len(due)} due cards (note_id={note_id})"
    )
    return ReviewSession(cards=session_cards, total_due=len(due), note_id=note_id)


@dataclass
class NoteDueCount:
    """Card counts for one parent note."""

    note_id: str
    total_cards: int
    due_cards: int


@dataclass
class DueOverview:
    """Per-note due counts for the drill overview."""

    notes: list[NoteDueCount]  # Notes with at least one card, in first-seen order
    total_due: int  # Sum of due_cards across notes


def due_by_note(cards: Iterable[Card], now: datetime) -> DueOverview:
    """
    Count total and due cards per note.

    Cards without a note_id are not attached to any note and are skipped.
    """
    counts: dict[str, NoteDueCount] = {}
    for card in cards:
        if card.note_id is None:
            continue
        entry = counts.get(card.note_id)
        if entry is None:
            entry = counts[card.note_id] = NoteDueCount(card.note_id, 0, 0)
        entry.total_cards += 1
        if card.next_review <= now:
            entry.due_cards += 1

    notes = list(counts.values())
    return DueOverview(notes=notes, total_due=sum(n.due_cards for n in notes))
