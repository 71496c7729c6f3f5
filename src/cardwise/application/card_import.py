"""
Card import from deck files.

A deck file holds the question/answer records produced by the card
extraction step, either as a YAML mapping with a `cards:` list or as a
bare list. JSON decks load through the same path since YAML is a superset.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from cardwise.application.id_service import generate_card_id
from cardwise.domain.constants import CARD_TYPES, DEFAULT_CARD_TYPE
from cardwise.domain.errors import DeckFormatError
from cardwise.domain.models import Card

logger = logging.getLogger(__name__)


def parse_deck(text: str) -> list[dict[str, Any]]:
    """
    Parse deck text into a list of raw card records.

    Raises:
        DeckFormatError: If the text is not valid YAML or has no card list.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DeckFormatError(f"Invalid deck file: {e}") from e

    if isinstance(data, dict):
        data = data.get("cards")

    if not isinstance(data, list):
        raise DeckFormatError("Deck must be a list of cards or a mapping with a 'cards' list")

    return data


def load_deck(path: Path) -> list[dict[str, Any]]:
    return parse_deck(path.read_text(encoding="utf-8"))


def new_card(
    question: str,
    answer: str,
    user_id: str,
    now: datetime,
    note_id: str | None = None,
    card_type: str = DEFAULT_CARD_TYPE,
) -> Card:
    """Create a card that is due immediately with initial SM-2 state."""
    return Card(
        id=generate_card_id(),
        user_id=user_id,
        question=question,
        answer=answer,
        note_id=note_id,
        card_type=card_type,
        next_review=now,
        created_at=now,
        updated_at=now,
    )


def build_cards(
    records: list[dict[str, Any]],
    user_id: str,
    now: datetime,
    note_id: str | None = None,
) -> list[Card]:
    """
    Validate raw records and turn them into new cards.

    Raises:
        DeckFormatError: On the first record that is missing a field or has
            an unknown card_type. Nothing is returned for a partially valid deck.
    """
    cards: list[Card] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise DeckFormatError(f"Card #{index + 1} is not a mapping")

        question = str(record.get("question") or "").strip()
        answer = str(record.get("answer") or "").strip()
        if not question or not answer:
            raise DeckFormatError(f"Card #{index + 1} needs both 'question' and 'answer'")

        card_type = record.get("card_type") or DEFAULT_CARD_TYPE
        if card_type not in CARD_TYPES:
            raise DeckFormatError(
                f"Card #{index + 1} has unknown card_type {card_type!r} "
                f"(expected one of: {', '.join(CARD_TYPES)})"
            )

        cards.append(
            new_card(
                question,
                answer,
                user_id,
                now,
                note_id=record.get("note_id", note_id),
                card_type=card_type,
            )
        )

    logger.debug(f"Built {len(cards)} cards for {user_id}")
    return cards
