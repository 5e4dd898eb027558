"""
Habit Engine — SQLite Habit Store.

The whole habit collection persists in SQLite as one row per habit, holding
the record's JSON payload and its position in the collection. Saves replace
the full collection inside a single transaction.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from src.ports.habit_store_port import CorruptPersistedState

logger = logging.getLogger(__name__)


class HabitDB:
    """SQLite-backed storage for the habit collection (HabitStorePort)."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from src.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the habits table if it doesn't exist, and migrate schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS habits (
                    id        TEXT    PRIMARY KEY,
                    position  INTEGER NOT NULL,
                    payload   TEXT    NOT NULL,
                    updated_at TEXT
                )
            """)
            # Migrate existing DBs: add new columns if missing
            existing_cols = {
                row[1] for row in conn.execute("PRAGMA table_info(habits)").fetchall()
            }
            if "updated_at" not in existing_cols:
                conn.execute("ALTER TABLE habits ADD COLUMN updated_at TEXT")
        logger.debug("Habits table initialized at %s", self._db_path)

    def load(self) -> list[dict]:
        """Return every stored record in collection order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, payload FROM habits ORDER BY position"
            ).fetchall()

        records: list[dict] = []
        for row in rows:
            try:
                records.append(json.loads(row["payload"]))
            except json.JSONDecodeError as exc:
                logger.error("Habit %s has an undecodable payload: %s", row["id"], exc)
                raise CorruptPersistedState(
                    f"Habit {row['id']} payload is not valid JSON"
                ) from exc
        return records

    def save(self, records: list[dict]) -> None:
        """Replace the stored collection with ``records``."""
        rows = [
            (str(record["id"]), position, json.dumps(record))
            for position, record in enumerate(records)
        ]
        with self._connect() as conn:
            conn.execute("DELETE FROM habits")
            conn.executemany(
                """
                INSERT INTO habits (id, position, payload, updated_at)
                VALUES (?, ?, ?, datetime('now', 'localtime'))
                """,
                rows,
            )
        logger.info("Saved %d habits to %s", len(rows), self._db_path)

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM habits").fetchone()[0]
