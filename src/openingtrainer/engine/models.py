"""Shared engine evaluation models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Score:
    """Engine score from the side to move's perspective.

    Exactly one of ``cp`` (centipawns) and ``mate`` (moves to mate, negative
    when the side to move is getting mated) is set.
    """

    cp: int | None = None
    mate: int | None = None

    def __post_init__(self) -> None:
        if (self.cp is None) == (self.mate is None):
            raise ValueError("Score needs exactly one of cp and mate")

    @classmethod
    def centipawns(cls, cp: int) -> Score:
        return cls(cp=cp)

    @classmethod
    def mate_in(cls, moves: int) -> Score:
        return cls(mate=moves)

    @property
    def is_mate(self) -> bool:
        return self.mate is not None

    def format(self) -> str:
        """Render as ``+0.35``, ``-1.20``, ``0.0``, ``#3`` or ``#-2``."""
        if self.mate is not None:
            return f"#{self.mate}"
        assert self.cp is not None
        if self.cp == 0:
            return "0.0"
        return f"{self.cp / 100:+.2f}"

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True, frozen=True)
class EvaluatedPosition:
    """Engine evaluation of one position."""

    fen: str
    score: Score
    best_move: str | None
    depth: int
    pv: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError("depth must be >= 0")
