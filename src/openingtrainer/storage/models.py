"""Opening explorer statistics cached per position."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class DatabaseMove:
    """Games played with one move from a position."""

    uci: str
    san: str
    white: int
    draws: int
    black: int
    average_rating: int

    @property
    def total_games(self) -> int:
        return self.white + self.draws + self.black


@dataclass(slots=True, frozen=True)
class DatabasePosition:
    """Game totals for a position and its continuations."""

    white: int
    draws: int
    black: int
    moves: tuple[DatabaseMove, ...] = ()

    @property
    def total_games(self) -> int:
        return self.white + self.draws + self.black

    def to_dict(self) -> dict[str, Any]:
        return {
            "white": self.white,
            "draws": self.draws,
            "black": self.black,
            "moves": [
                {
                    "uci": m.uci,
                    "san": m.san,
                    "white": m.white,
                    "draws": m.draws,
                    "black": m.black,
                    "averageRating": m.average_rating,
                }
                for m in self.moves
            ],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DatabasePosition:
        """Build from the explorer's JSON shape (``averageRating`` key)."""
        return cls(
            white=int(data["white"]),
            draws=int(data["draws"]),
            black=int(data["black"]),
            moves=tuple(
                DatabaseMove(
                    uci=str(m["uci"]),
                    san=str(m["san"]),
                    white=int(m["white"]),
                    draws=int(m["draws"]),
                    black=int(m["black"]),
                    average_rating=int(m.get("averageRating", 0)),
                )
                for m in data.get("moves", ())
            ),
        )
