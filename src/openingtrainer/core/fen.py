"""FEN string helpers."""

from __future__ import annotations

from openingtrainer.core.enums import Color

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def _fields(fen: str) -> list[str]:
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")
    return parts


def turn_of(fen: str) -> Color:
    """Return the side to move encoded in *fen*."""
    side = _fields(fen)[1]
    if side == "w":
        return Color.WHITE
    if side == "b":
        return Color.BLACK
    raise ValueError(f"Invalid FEN side-to-move field: {fen!r}")


def fen_key(fen: str) -> str:
    """Board, side, castling and en-passant fields; move counters dropped.

    Two positions reached with different clocks compare equal under this key.
    """
    return " ".join(_fields(fen)[:4])
