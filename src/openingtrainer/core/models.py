"""Immutable value objects for positions, trees, chapters and lines."""

from __future__ import annotations

from dataclasses import dataclass, field

from openingtrainer.core.enums import Color
from openingtrainer.core.fen import STARTING_FEN, turn_of


@dataclass(frozen=True, slots=True)
class Move:
    """A single half-move in both SAN and UCI form."""

    san: str
    uci: str
    color: Color

    @property
    def from_square(self) -> str:
        return self.uci[:2]

    @property
    def to_square(self) -> str:
        return self.uci[2:4]

    @property
    def promotion(self) -> str | None:
        """Promotion piece letter (lower case) or ``None``."""
        return self.uci[4:] or None

    def __str__(self) -> str:
        return self.san


@dataclass(frozen=True, slots=True, eq=False)
class Position:
    """One board state plus the move that produced it.

    Identity is the FEN string: two positions with the same FEN are equal even
    when they were reached by different moves.
    """

    fen: str
    last_move: Move | None
    turn: Color

    @classmethod
    def initial(cls, fen: str = STARTING_FEN) -> Position:
        """Root position for a tree starting at *fen*."""
        return cls(fen=fen, last_move=None, turn=turn_of(fen))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.fen == other.fen

    def __hash__(self) -> int:
        return hash(self.fen)


@dataclass(slots=True)
class PositionNode:
    """Tree node owning its children; the first child is the main line."""

    position: Position
    children: list[PositionNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def main_child(self) -> PositionNode | None:
        return self.children[0] if self.children else None

    def child_for(self, san: str) -> PositionNode | None:
        """Return the child reached by the move written as *san*, if any."""
        for child in self.children:
            move = child.position.last_move
            if move is not None and move.san == san:
                return child
        return None


PositionTree = PositionNode


@dataclass(frozen=True, slots=True)
class Chapter:
    """One PGN game of a study, with its parsed position tree."""

    name: str
    study_name: str
    headers: dict[str, str]
    position_tree: PositionNode
    orientation: Color = Color.WHITE
    index: int = 0

    @property
    def root(self) -> Position:
        return self.position_tree.position


@dataclass(frozen=True, slots=True, eq=False)
class Line:
    """A root-to-leaf path through a chapter's tree.

    ``positions[0]`` is the chapter root; ``positions[i]`` is the position
    after the ``i``-th move.
    """

    chapter: Chapter
    positions: tuple[Position, ...]

    def __post_init__(self) -> None:
        if not self.positions:
            raise ValueError("A line needs at least the root position")
        if any(p.last_move is None for p in self.positions[1:]):
            raise ValueError("Every non-root position in a line needs a last move")

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(p.last_move for p in self.positions[1:])  # type: ignore[misc]

    @property
    def sans(self) -> tuple[str, ...]:
        return tuple(move.san for move in self.moves)

    @property
    def leaf_fen(self) -> str:
        return self.positions[-1].fen

    @property
    def study_name(self) -> str:
        return self.chapter.study_name

    @property
    def chapter_name(self) -> str:
        return self.chapter.name

    @property
    def line_id(self) -> str:
        """Stable identity: study, chapter and the SAN move sequence."""
        return f"{self.chapter.study_name}:{self.chapter.name}:{' '.join(self.sans)}"

    def movetext(self) -> str:
        """Numbered SAN movetext, e.g. ``1. e4 e5 2. Nf3``."""
        root_fen = self.positions[0].fen
        fullmove = int(root_fen.split()[5]) if len(root_fen.split()) == 6 else 1
        parts: list[str] = []
        for ply, move in enumerate(self.moves):
            if move.color == Color.WHITE:
                parts.append(f"{fullmove}.")
            elif ply == 0:
                parts.append(f"{fullmove}...")
            parts.append(move.san)
            if move.color == Color.BLACK:
                fullmove += 1
        return " ".join(parts)

    def __len__(self) -> int:
        return len(self.positions) - 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.line_id == other.line_id

    def __hash__(self) -> int:
        return hash(self.line_id)
