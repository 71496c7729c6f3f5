from datetime import datetime, timedelta, timezone

import pytest

from cardwise.domain.errors import CardNotFoundError
from cardwise.domain.models import ReviewEvent
from cardwise.infrastructure.repository.sqlite_repo import (
    SqliteCardRepository,
    from_db_time,
    to_db_time,
)


@pytest.mark.asyncio
async def test_add_and_get_card(repo, make_card):
    card = make_card("c1", ease_factor=2.36, interval=6, repetitions=2, due_in_days=3)
    await repo.add_cards([card])

    stored = await repo.get_card("c1", "user-1")

    assert stored == card


@pytest.mark.asyncio
async def test_get_card_is_scoped_to_user(repo, make_card):
    await repo.add_cards([make_card("c1", user_id="alice")])

    assert await repo.get_card("c1", "bob") is None
    assert await repo.get_card("missing", "alice") is None


@pytest.mark.asyncio
async def test_list_cards_keeps_insertion_order(repo, make_card):
    await repo.add_cards([make_card("z"), make_card("a"), make_card("m")])
    await repo.add_cards([make_card("b", note_id="other")])

    assert [c.id for c in await repo.list_cards("user-1")] == ["z", "a", "m", "b"]
    assert [c.id for c in await repo.list_cards("user-1", note_id="other")] == ["b"]
    assert await repo.list_cards("nobody") == []


@pytest.mark.asyncio
async def test_update_card(repo, make_card, now):
    card = make_card("c1")
    await repo.add_cards([card])

    card.ease_factor = 2.6
    card.interval = 6
    card.repetitions = 2
    card.next_review = now + timedelta(days=6)
    card.updated_at = now
    await repo.update_card(card)

    stored = await repo.get_card("c1", "user-1")
    assert (stored.ease_factor, stored.interval, stored.repetitions) == (2.6, 6, 2)
    assert stored.next_review == now + timedelta(days=6)
    assert stored.updated_at == now


@pytest.mark.asyncio
async def test_update_missing_card_raises(repo, make_card):
    with pytest.raises(CardNotFoundError):
        await repo.update_card(make_card("ghost"))


@pytest.mark.asyncio
async def test_reviews_since_window(repo, make_card, now):
    await repo.add_cards([make_card("c1")])
    for days_ago, quality in [(40, 1), (10, 4), (1, 5)]:
        await repo.append_review(
            ReviewEvent(
                card_id="c1",
                user_id="user-1",
                quality=quality,
                reviewed_at=now - timedelta(days=days_ago),
            )
        )

    assert [e.quality for e in await repo.list_reviews("user-1")] == [1, 4, 5]
    recent = await repo.list_reviews("user-1", since=now - timedelta(days=30))
    assert [e.quality for e in recent] == [4, 5]
    assert recent[0].reviewed_at == now - timedelta(days=10)


def test_db_time_normalizes_to_utc():
    plus_two = timezone(timedelta(hours=2))
    local = datetime(2025, 1, 1, 12, 0, tzinfo=plus_two)

    stored = to_db_time(local)

    assert stored == "2025-01-01T10:00:00.000000+00:00"
    assert from_db_time(stored) == local


def test_naive_times_are_read_as_utc():
    assert from_db_time("2025-01-01T10:00:00").tzinfo == timezone.utc


def test_repository_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "dir" / "cards.db"
    with SqliteCardRepository(path):
        pass
    assert path.exists()
