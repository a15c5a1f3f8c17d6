"""Exception types shared across the trainer core."""

from __future__ import annotations


class OpeningTrainerError(Exception):
    """Base class for all errors raised by :mod:`openingtrainer`."""


class ParseError(OpeningTrainerError, ValueError):
    """Malformed PGN input.

    Args:
        offset: Character offset in the source text where the problem was found.
        reason: Human-readable description.
    """

    def __init__(self, offset: int, reason: str) -> None:
        super().__init__(f"{reason} (at offset {offset})")
        self.offset = offset
        self.reason = reason


class IllegalMoveError(OpeningTrainerError, ValueError):
    """A move token does not name a legal move in the given position."""

    def __init__(self, move_text: str, fen: str) -> None:
        super().__init__(f"Illegal move {move_text!r} in position {fen!r}")
        self.move_text = move_text
        self.fen = fen


class NoLinesAvailable(OpeningTrainerError, LookupError):
    """The scheduler has no candidate line to present."""


class LineIntegrityError(OpeningTrainerError, RuntimeError):
    """A derived line does not replay to the leaf it was built from."""
