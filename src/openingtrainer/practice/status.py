"""Line status evaluation during a practice attempt."""

from __future__ import annotations

from openingtrainer.core.enums import LineStatus
from openingtrainer.core.models import Line, Move


def line_status(line: Line, line_index: int, deviated: bool) -> LineStatus:
    """Classify progress through *line* after *line_index* confirmed moves.

    A deviation wins over everything else, so once an attempt has gone wrong it
    stays ``INCORRECT`` for every later index.
    """
    if not 0 <= line_index <= len(line):
        raise ValueError(
            f"Line index {line_index} outside 0..{len(line)} for {line.line_id!r}"
        )
    if deviated:
        return LineStatus.INCORRECT
    if line_index == len(line):
        return LineStatus.COMPLETE
    if line_index == 0:
        return LineStatus.NOT_STARTED
    return LineStatus.IN_PROGRESS


def expected_move(line: Line, line_index: int) -> Move | None:
    """The move the learner should play next, or ``None`` at the end."""
    if line_index < 0:
        raise ValueError(f"Negative line index: {line_index}")
    moves = line.moves
    return moves[line_index] if line_index < len(moves) else None


def moves_match(played: Move | str, expected: Move) -> bool:
    """Compare a played move against the expected one by SAN or UCI."""
    if isinstance(played, Move):
        return played.uci == expected.uci or played.san == expected.san
    return played in (expected.san, expected.uci)
