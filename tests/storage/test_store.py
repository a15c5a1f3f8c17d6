"""Tests for SQLite persistence."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from openingtrainer.core import AttemptOutcome, STARTING_FEN
from openingtrainer.core.models import Line
from openingtrainer.storage import SCHEMA_VERSION, DatabaseMove, DatabasePosition, TrainerStore


@pytest.fixture
def store(tmp_path: Path) -> TrainerStore:
    return TrainerStore(tmp_path / "data" / "trainer.db")


def _explorer() -> DatabasePosition:
    return DatabasePosition(
        white=10,
        draws=5,
        black=7,
        moves=(DatabaseMove("e2e4", "e4", 6, 3, 4, 2100),),
    )


def test_schema_version_is_recorded(tmp_path: Path) -> None:
    path = tmp_path / "trainer.db"
    TrainerStore(path).close()
    with sqlite3.connect(path) as conn:
        assert conn.execute("PRAGMA user_version").fetchone()[0] == SCHEMA_VERSION


def test_newer_schema_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "trainer.db"
    conn = sqlite3.connect(path)
    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION + 1}")
    conn.close()
    with pytest.raises(RuntimeError, match="newer"):
        TrainerStore(path)


def test_attempts_round_trip(
    store: TrainerStore, sicilian_lines: list[Line], now: datetime
) -> None:
    history = store.load_history()
    line = sicilian_lines[0]
    history.record_attempt(line, AttemptOutcome.FAILURE, 2, timestamp=now)
    history.record_attempt(
        line, AttemptOutcome.SUCCESS, timestamp=now + timedelta(minutes=1)
    )

    stored = store.list_attempts(line.line_id)
    assert [a.outcome for a in stored] == [AttemptOutcome.FAILURE, AttemptOutcome.SUCCESS]
    assert stored[0].deviation_index == 2
    assert stored[0].timestamp == now
    assert stored[1].deviation_index is None
    assert store.list_attempts("other") == []


def test_history_reloads_after_reopen(
    tmp_path: Path, sicilian_lines: list[Line], now: datetime
) -> None:
    path = tmp_path / "trainer.db"
    first = TrainerStore(path)
    first.load_history().record_attempt(
        sicilian_lines[1], AttemptOutcome.SUCCESS, timestamp=now
    )
    first.close()

    second = TrainerStore(path)
    history = second.load_history()
    latest = history.latest(sicilian_lines[1].line_id)
    assert latest is not None
    assert latest.outcome is AttemptOutcome.SUCCESS
    assert len(history) == 1
    second.close()


def test_positions(store: TrainerStore) -> None:
    assert store.get_position(STARTING_FEN) is None
    store.put_position(STARTING_FEN, _explorer())
    loaded = store.get_position(STARTING_FEN)
    assert loaded == _explorer()
    assert loaded is not None and loaded.total_games == 22
    assert loaded.moves[0].total_games == 13


def test_put_position_overwrites(store: TrainerStore) -> None:
    store.put_position(STARTING_FEN, _explorer())
    store.put_position(STARTING_FEN, DatabasePosition(1, 1, 1))
    assert store.get_position(STARTING_FEN) == DatabasePosition(1, 1, 1)


def test_get_or_fetch_position_fetches_once(store: TrainerStore) -> None:
    calls: list[str] = []

    def fetch(fen: str) -> DatabasePosition:
        calls.append(fen)
        return _explorer()

    assert store.get_or_fetch_position(STARTING_FEN, fetch) == _explorer()
    assert store.get_or_fetch_position(STARTING_FEN, fetch) == _explorer()
    assert calls == [STARTING_FEN]


def test_explorer_json_shape() -> None:
    data = {
        "white": 1,
        "draws": 2,
        "black": 3,
        "moves": [
            {"uci": "d2d4", "san": "d4", "white": 1, "draws": 0, "black": 0, "averageRating": 1800}
        ],
    }
    position = DatabasePosition.from_dict(data)
    assert position.moves[0].average_rating == 1800
    assert position.to_dict() == data
