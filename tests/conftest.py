"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from openingtrainer.core.models import Chapter, Line
from openingtrainer.lines import lines_of, lines_of_chapters
from openingtrainer.notation import parse_pgn

SICILIAN_PGN = """\
[Event "Repertoire: Sicilian"]
[Orientation "black"]

1. e4 c5 2. Nf3 (2. c3 d5) 2... d6 3. d4 cxd4 *
"""

TWO_CHAPTER_PGN = """\
[Event "Repertoire: Open Games"]

1. e4 e5 (1... c5 2. Nf3) 2. Nf3 *

[Event "Repertoire: Queen's Gambit"]

1. d4 d5 2. c4 *
"""


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def sicilian() -> Chapter:
    return parse_pgn(SICILIAN_PGN)[0]


@pytest.fixture
def sicilian_lines(sicilian: Chapter) -> list[Line]:
    return lines_of(sicilian)


@pytest.fixture
def two_chapters() -> list[Chapter]:
    return parse_pgn(TWO_CHAPTER_PGN)


@pytest.fixture
def all_lines(two_chapters: list[Chapter]) -> list[Line]:
    return lines_of_chapters(two_chapters)
