"""Tests for the command line entrypoint."""

from __future__ import annotations

from pathlib import Path

import pytest

from openingtrainer.cli import run

REPERTOIRE_PGN = """\
[Event "Repertoire: Open Games"]

1. e4 e5 (1... c5 2. Nf3) 2. Nf3 *

[Event "Repertoire: Queen's Gambit"]

1. d4 d5 2. c4 *
"""


@pytest.fixture
def pgn_file(tmp_path: Path) -> Path:
    path = tmp_path / "repertoire.pgn"
    path.write_text(REPERTOIRE_PGN, encoding="utf-8")
    return path


def _run(argv: list[str]) -> tuple[int, list[str], list[str]]:
    out: list[str] = []
    err: list[str] = []
    code = run(argv, print_fn=out.append, error_fn=err.append)
    return code, out, err


def test_chapters(pgn_file: Path) -> None:
    code, out, _ = _run(["chapters", str(pgn_file)])
    assert code == 0
    assert len(out) == 2
    assert "Open Games" in out[0] and "(2 lines)" in out[0]
    assert "Queen's Gambit" in out[1] and "(1 lines)" in out[1]


def test_lines_with_chapter_filter(pgn_file: Path) -> None:
    code, out, _ = _run(["lines", str(pgn_file), "--chapter", "Open Games"])
    assert code == 0
    assert out == [
        "[Open Games] 1. e4 e5 2. Nf3",
        "[Open Games] 1. e4 c5 2. Nf3",
    ]


def test_next_uses_database(pgn_file: Path, tmp_path: Path) -> None:
    db = tmp_path / "history.db"
    code, out, _ = _run(
        ["next", str(pgn_file), "--db", str(db), "--seed", "1", "--chapter", "Queen's Gambit"]
    )
    assert code == 0
    assert out == ["[Queen's Gambit] 1. d4 d5 2. c4"]
    assert db.exists()


def test_next_without_lines(tmp_path: Path) -> None:
    path = tmp_path / "empty.pgn"
    path.write_text('[Event "Study: Empty"]\n\n*\n', encoding="utf-8")
    code, _, err = _run(["next", str(path)])
    assert code == 1
    assert err and "No lines" in err[0]


def test_missing_file(tmp_path: Path) -> None:
    code, _, err = _run(["chapters", str(tmp_path / "missing.pgn")])
    assert code == 2
    assert "Cannot read" in err[0]


def test_parse_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.pgn"
    path.write_text("1. e4 c5 2. Nf3 d6 3. d4 Qxd4 *", encoding="utf-8")
    code, _, err = _run(["lines", str(path)])
    assert code == 2
    assert "Invalid PGN" in err[0]


def test_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "latin.pgn"
    path.write_bytes(b"\xff\xfe[Event \"x\"]\n\n1. e4 *\n")
    code, out, err = _run(["chapters", str(path)])
    assert code == 2
    assert out == []
    assert "Cannot decode" in err[0]


GAMES_PGN = """\
[White "me"]
[Black "Rival"]
[Result "0-1"]

1. e4 e6 0-1

[White "me"]
[Black "Rival"]
[Result "1-0"]

1. e4 e6 2. d4 1-0

[White "me"]
[Black "Other"]
[Result "1-0"]

1. e4 e5 2. Bc4 1-0

[White "Rival"]
[Black "me"]
[Result "1-0"]

1. d4 Nf6 1-0
"""


@pytest.fixture
def games_file(tmp_path: Path) -> Path:
    path = tmp_path / "games.pgn"
    path.write_text(GAMES_PGN, encoding="utf-8")
    return path


def test_compare_reports_deviations(pgn_file: Path, games_file: Path) -> None:
    code, out, _ = _run(["compare", str(pgn_file), str(games_file), "--player", "me"])
    assert code == 0
    assert out == [
        "3 games, 3 left the repertoire",
        "  2  opponent  e6  expected e5, c5  (2 games)",
        "  3  player  Bc4  expected Nf3  (1 games)",
    ]


def test_compare_as_black(pgn_file: Path, games_file: Path) -> None:
    code, out, _ = _run(
        ["compare", str(pgn_file), str(games_file), "--player", "me", "--color", "black"]
    )
    assert code == 0
    assert out == [
        "1 games, 1 left the repertoire",
        "  2  player  Nf6  expected d5  (1 games)",
    ]


def test_compare_missing_games_file(pgn_file: Path, tmp_path: Path) -> None:
    code, _, err = _run(
        ["compare", str(pgn_file), str(tmp_path / "none.pgn"), "--player", "me"]
    )
    assert code == 2
    assert "Cannot read" in err[0]
