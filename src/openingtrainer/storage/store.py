"""SQLite persistence for practice attempts and cached explorer positions."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from openingtrainer.core.enums import AttemptOutcome
from openingtrainer.review.history import AttemptHistory
from openingtrainer.review.models import Attempt
from openingtrainer.storage.models import DatabasePosition

_LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 2


class TrainerStore:
    """Database access layer for attempts and explorer positions."""

    def __init__(self, db_path: Path | str) -> None:
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    # ── Schema ───────────────────────────────────────────────────────────

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to the latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(
                f"Database schema version {current} is newer than supported "
                f"{SCHEMA_VERSION}."
            )
        migrations = {1: self._migrate_to_v1, 2: self._migrate_to_v2}
        for version in range(current + 1, SCHEMA_VERSION + 1):
            migrations[version]()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
            _LOGGER.debug("Migrated trainer database to version %d", version)

    def _migrate_to_v1(self) -> None:
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS attempts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    line_id TEXT NOT NULL,
                    study_name TEXT NOT NULL,
                    chapter_name TEXT NOT NULL,
                    outcome TEXT NOT NULL,
                    deviation_index INTEGER,
                    created_at TEXT NOT NULL
                )
                """)
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS attempts_line_id ON attempts (line_id)"
            )

    def _migrate_to_v2(self) -> None:
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS positions (
                    fen TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)

    # ── Attempts ─────────────────────────────────────────────────────────

    def add_attempt(self, attempt: Attempt) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO attempts (
                    line_id, study_name, chapter_name, outcome,
                    deviation_index, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    attempt.line_id,
                    attempt.study_name,
                    attempt.chapter_name,
                    attempt.outcome.value,
                    attempt.deviation_index,
                    attempt.timestamp.isoformat(),
                ),
            )

    def list_attempts(self, line_id: str | None = None) -> list[Attempt]:
        """Return attempts in insertion order, optionally for one line."""
        query = (
            "SELECT line_id, study_name, chapter_name, outcome, deviation_index, "
            "created_at FROM attempts"
        )
        params: tuple[str, ...] = ()
        if line_id is not None:
            query += " WHERE line_id = ?"
            params = (line_id,)
        rows = self._conn.execute(query + " ORDER BY id", params).fetchall()
        return [_attempt_from_row(row) for row in rows]

    def load_history(self) -> AttemptHistory:
        """History pre-loaded with stored attempts that persists new ones."""
        return AttemptHistory(self.list_attempts(), on_record=self.add_attempt)

    # ── Positions ────────────────────────────────────────────────────────

    def get_position(self, fen: str) -> DatabasePosition | None:
        row = self._conn.execute(
            "SELECT payload FROM positions WHERE fen = ?", (fen,)
        ).fetchone()
        if row is None:
            return None
        return DatabasePosition.from_dict(json.loads(row["payload"]))

    def put_position(self, fen: str, position: DatabasePosition) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO positions (fen, payload, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(fen) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (fen, json.dumps(position.to_dict()), datetime.now(UTC).isoformat()),
            )

    def get_or_fetch_position(
        self, fen: str, fetch: Callable[[str], DatabasePosition]
    ) -> DatabasePosition:
        """Return the stored position, fetching and storing it on a miss."""
        stored = self.get_position(fen)
        if stored is not None:
            return stored
        _LOGGER.debug("Fetching explorer data for %s", fen)
        fetched = fetch(fen)
        self.put_position(fen, fetched)
        return fetched

    def close(self) -> None:
        self._conn.close()


def _attempt_from_row(row: sqlite3.Row) -> Attempt:
    timestamp = datetime.fromisoformat(str(row["created_at"]))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    deviation = row["deviation_index"]
    return Attempt(
        line_id=str(row["line_id"]),
        study_name=str(row["study_name"]),
        chapter_name=str(row["chapter_name"]),
        outcome=AttemptOutcome(str(row["outcome"])),
        timestamp=timestamp,
        deviation_index=None if deviation is None else int(deviation),
    )
