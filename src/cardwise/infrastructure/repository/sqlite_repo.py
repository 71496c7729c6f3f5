"""
SQLite Card Repository — Infrastructure adapter for local storage.

Implements CardRepository on a single SQLite file. Timestamps are stored
as UTC ISO-8601 strings with fixed precision so they sort as text.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from cardwise.domain.errors import CardNotFoundError
from cardwise.domain.models import Card, ReviewEvent
from cardwise.domain.ports import CardRepository

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    note_id TEXT,
    card_type TEXT NOT NULL DEFAULT 'fact'
        CHECK(card_type IN ('fact', 'concept', 'procedure')),
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    ease_factor REAL NOT NULL DEFAULT 2.5 CHECK(ease_factor >= 1.3),
    interval INTEGER NOT NULL DEFAULT 1 CHECK(interval >= 1),
    repetitions INTEGER NOT NULL DEFAULT 0 CHECK(repetitions >= 0),
    next_review TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_cards_user_due ON cards(user_id, next_review);

CREATE TABLE IF NOT EXISTS card_reviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    card_id TEXT NOT NULL REFERENCES cards(id),
    user_id TEXT NOT NULL,
    quality INTEGER NOT NULL CHECK(quality BETWEEN 0 AND 5),
    time_taken INTEGER NOT NULL DEFAULT 0,
    reviewed_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_reviews_user_time ON card_reviews(user_id, reviewed_at);
"""

CARD_COLUMNS = (
    "id, user_id, note_id, card_type, question, answer, ease_factor, interval, "
    "repetitions, next_review, created_at, updated_at"
)


def to_db_time(value: datetime) -> str:
    """Normalize to UTC; naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SqliteCardRepository(CardRepository):
    """
    Stores cards and review history in SQLite.

    Cards are listed in insertion order so that callers sorting by
    next_review get a deterministic tie-break.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(self.db_path), timeout=5, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        if str(self.db_path) != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    async def get_card(self, card_id: str, user_id: str) -> Card | None:
        row = self.conn.execute(
            f"SELECT {CARD_COLUMNS} FROM cards WHERE id = ? AND user_id = ?",
            (card_id, user_id),
        ).fetchone()
        return self._row_to_card(row) if row else None

    async def list_cards(self, user_id: str, note_id: str | None = None) -> list[Card]:
        query = f"SELECT {CARD_COLUMNS} FROM cards WHERE user_id = ?"
        params: list[str] = [user_id]
        if note_id is not None:
            query += " AND note_id = ?"
            params.append(note_id)
        query += " ORDER BY rowid ASC"
        return [self._row_to_card(row) for row in self.conn.execute(query, params)]

    async def add_cards(self, cards: list[Card]) -> None:
        if not cards:
            return
        with self.conn:
            self.conn.executemany(
                f"INSERT INTO cards ({CARD_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [self._card_to_row(card) for card in cards],
            )
        logger.debug(f"Inserted {len(cards)} cards")

    async def update_card(self, card: Card) -> None:
        updated_at = card.updated_at or datetime.now(timezone.utc)
        with self.conn:
            cursor = self.conn.execute(
                "UPDATE cards SET ease_factor = ?, interval = ?, repetitions = ?, "
                "next_review = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (
                    card.ease_factor,
                    card.interval,
                    card.repetitions,
                    to_db_time(card.next_review),
                    to_db_time(updated_at),
                    card.id,
                    card.user_id,
                ),
            )
        if cursor.rowcount == 0:
            raise CardNotFoundError(card.id, card.user_id)

    async def append_review(self, event: ReviewEvent) -> None:
        with self.conn:
            self.conn.execute(
                "INSERT INTO card_reviews "
                "(card_id, user_id, quality, time_taken, reviewed_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    event.card_id,
                    event.user_id,
                    event.quality,
                    event.time_taken,
                    to_db_time(event.reviewed_at),
                ),
            )

    async def list_reviews(self, user_id: str, since: datetime | None = None) -> list[ReviewEvent]:
        query = (
            "SELECT card_id, user_id, quality, time_taken, reviewed_at "
            "FROM card_reviews WHERE user_id = ?"
        )
        params: list[str] = [user_id]
        if since is not None:
            query += " AND reviewed_at >= ?"
            params.append(to_db_time(since))
        query += " ORDER BY reviewed_at ASC, id ASC"

        return [
            ReviewEvent(
                card_id=row["card_id"],
                user_id=row["user_id"],
                quality=row["quality"],
                reviewed_at=from_db_time(row["reviewed_at"]),
                time_taken=row["time_taken"],
            )
            for row in self.conn.execute(query, params)
        ]

    def _card_to_row(self, card: Card) -> tuple:
        created_at = card.created_at or card.next_review
        return (
            card.id,
            card.user_id,
            card.note_id,
            card.card_type,
            card.question,
            card.answer,
            card.ease_factor,
            card.interval,
            card.repetitions,
            to_db_time(card.next_review),
            to_db_time(created_at),
            to_db_time(card.updated_at or created_at),
        )

    def _row_to_card(self, row: sqlite3.Row) -> Card:
        return Card(
            id=row["id"],
            user_id=row["user_id"],
            note_id=row["note_id"],
            card_type=row["card_type"],
            question=row["question"],
            answer=row["answer"],
            ease_factor=row["ease_factor"],
            interval=row["interval"],
            repetitions=row["repetitions"],
            next_review=from_db_time(row["next_review"]),
            created_at=from_db_time(row["created_at"]),
            updated_at=from_db_time(row["updated_at"]),
        )
