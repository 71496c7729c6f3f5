import json

import pytest

from cardwise.application.card_import import build_cards, load_deck, parse_deck
from cardwise.application.id_service import generate_card_id
from cardwise.domain.errors import DeckFormatError

YAML_DECK = """
cards:
  - question: What organelle produces ATP?
    answer: The mitochondrion
  - question: Define osmosis
    answer: Diffusion of water across a membrane
    card_type: concept
"""


def test_parse_deck_mapping():
    records = parse_deck(YAML_DECK)
    assert len(records) == 2
    assert records[1]["card_type"] == "concept"


def test_parse_deck_bare_list_json():
    text = json.dumps([{"question": "Q", "answer": "A", "card_type": "procedure"}])
    assert parse_deck(text) == [{"question": "Q", "answer": "A", "card_type": "procedure"}]


@pytest.mark.parametrize("text", ["cards: 3", "just a string", "", "key: [unclosed"])
def test_parse_deck_rejects_malformed(text):
    with pytest.raises(DeckFormatError):
        parse_deck(text)


def test_load_deck_from_file(tmp_path):
    path = tmp_path / "deck.yaml"
    path.write_text(YAML_DECK, encoding="utf-8")
    assert len(load_deck(path)) == 2


def test_build_cards_initial_state(now):
    cards = build_cards(parse_deck(YAML_DECK), "user-1", now, note_id="bio")

    assert [c.card_type for c in cards] == ["fact", "concept"]
    for card in cards:
        assert card.id.startswith("card_")
        assert card.user_id == "user-1"
        assert card.note_id == "bio"
        assert card.ease_factor == 2.5
        assert card.interval == 1
        assert card.repetitions == 0
        assert card.next_review == now
        assert card.created_at == now


def test_build_cards_record_note_id_wins(now):
    cards = build_cards([{"question": "Q", "answer": "A", "note_id": "own"}], "u", now, note_id="x")
    assert cards[0].note_id == "own"


def test_build_cards_strips_whitespace(now):
    cards = build_cards([{"question": "  Q  ", "answer": "A\n"}], "u", now)
    assert (cards[0].question, cards[0].answer) == ("Q", "A")


@pytest.mark.parametrize(
    "record",
    [
        {"question": "Q"},
        {"answer": "A"},
        {"question": "  ", "answer": "A"},
        {"question": "Q", "answer": "A", "card_type": "trivia"},
        "not a mapping",
    ],
)
def test_build_cards_rejects_bad_records(record, now):
    with pytest.raises(DeckFormatError):
        build_cards([record], "u", now)


def test_card_ids_are_unique():
    assert len({generate_card_id() for _ in range(100)}) == 100
