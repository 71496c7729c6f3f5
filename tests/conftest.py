from datetime import datetime, timedelta, timezone

import pytest

from cardwise.domain.models import Card
from cardwise.infrastructure.repository.sqlite_repo import SqliteCardRepository

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """A frozen clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def make_card():
    """Factory for cards; `due_in_days` is relative to NOW (negative = overdue)."""
    counter = {"n": 0}

    def _make(
        card_id: str | None = None,
        due_in_days: float = 0,
        user_id: str = "user-1",
        note_id: str | None = "note-1",
        ease_factor: float = 2.5,
        interval: int = 1,
        repetitions: int = 0,
    ) -> Card:
        counter["n"] += 1
        return Card(
            id=card_id or f"card-{counter['n']}",
            user_id=user_id,
            question=f"Question {counter['n']}",
            answer=f"Answer {counter['n']}",
            note_id=note_id,
            ease_factor=ease_factor,
            interval=interval,
            repetitions=repetitions,
            next_review=NOW + timedelta(days=due_in_days),
            created_at=NOW - timedelta(days=30),
            updated_at=NOW - timedelta(days=30),
        )

    return _make


@pytest.fixture
def repo(tmp_path):
    r = SqliteCardRepository(tmp_path / "cards.db")
    yield r
    r.close()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/db
    monkeypatch.setenv("HOME", str(home))
    for key in ("CARDWISE_DB_PATH", "CARDWISE_USER_ID", "CARDWISE_SESSION_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    return home
