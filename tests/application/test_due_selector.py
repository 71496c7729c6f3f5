import pytest

from cardwise.application.due_selector import (
    build_session,
    due_by_note,
    limit,
    select_due,
    sort_by_priority,
)


def ids(cards):
    return [c.id for c in cards]


def test_select_due_straddling_now(make_card, now):
    cards = [
        make_card("past", due_in_days=-3),
        make_card("future", due_in_days=2),
        make_card("exact", due_in_days=0),
        make_card("soon", due_in_days=0.01),
        make_card("long-ago", due_in_days=-40),
    ]

    assert ids(select_due(cards, now)) == ["past", "exact", "long-ago"]


def test_select_due_empty(now):
    assert select_due([], now) == []


def test_sort_by_priority_most_overdue_first(make_card):
    cards = [
        make_card("b", due_in_days=-1),
        make_card("a", due_in_days=-5),
        make_card("c", due_in_days=0),
    ]

    assert ids(sort_by_priority(cards)) == ["a", "b", "c"]


def test_sort_by_priority_is_stable(make_card):
    cards = [
        make_card("first", due_in_days=-2),
        make_card("older", due_in_days=-4),
        make_card("second", due_in_days=-2),
        make_card("third", due_in_days=-2),
    ]

    assert ids(sort_by_priority(cards)) == ["older", "first", "second", "third"]


def test_sort_by_priority_does_not_mutate_input(make_card):
    cards = [make_card("b", due_in_days=-1), make_card("a", due_in_days=-5)]
    sort_by_priority(cards)
    assert ids(cards) == ["b", "a"]


def test_limit(make_card):
    cards = [make_card() for _ in range(5)]

    assert len(limit(cards, 3)) == 3
    assert len(limit(cards, 10)) == 5
    assert limit(cards, 0) == []
    assert len(limit(cards, None)) == 5
    with pytest.raises(ValueError):
        limit(cards, -1)


def test_build_session_all_due_is_capped_at_twenty(make_card, now):
    cards = [make_card(f"c{i}", due_in_days=-i) for i in range(30)]
    cards.append(make_card("not-due", due_in_days=1))

    session = build_session(cards, now)

    assert len(session.cards) == 20
    assert session.total_due == 30
    assert session.truncated
    assert session.cards[0].id == "c29"


def test_build_session_single_note_is_not_capped(make_card, now):
    cards = [make_card(f"n{i}", due_in_days=-1, note_id="bio") for i in range(25)]
    cards += [make_card(f"o{i}", due_in_days=-1, note_id="chem") for i in range(5)]

    session = build_session(cards, now, note_id="bio", max_cards=20)

    assert len(session.cards) == 25
    assert {c.note_id for c in session.cards} == {"bio"}
    assert session.note_id == "bio"
    assert not session.truncated


def test_build_session_custom_cap(make_card, now):
    cards = [make_card(due_in_days=-1) for _ in range(5)]
    assert len(build_session(cards, now, max_cards=2).cards) == 2
    assert len(build_session(cards, now, max_cards=None).cards) == 5


def test_due_by_note_counts_total_and_due(make_card, now):
    cards = [
        make_card("a", due_in_days=-2, note_id="bio"),
        make_card("b", due_in_days=3, note_id="chem"),
        make_card("c", due_in_days=0, note_id="bio"),
        make_card("d", due_in_days=1, note_id="bio"),
        make_card("loose", due_in_days=-1, note_id=None),
    ]

    overview = due_by_note(cards, now)

    assert [(n.note_id, n.total_cards, n.due_cards) for n in overview.notes] == [
        ("bio", 3, 2),
        ("chem", 1, 0),
    ]
    assert overview.total_due == 2


def test_due_by_note_empty(now):
    overview = due_by_note([], now)
    assert overview.notes == []
    assert overview.total_due == 0
