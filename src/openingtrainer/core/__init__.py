"""Core domain layer: value objects, errors and the move-legality collaborator.

Quick start::

    from openingtrainer.core import Position, apply_move

    root = Position.initial()
    after_e4 = apply_move(root, "e4")
    print(after_e4.fen)
"""

from openingtrainer.core.enums import AttemptOutcome, Color, LineStatus
from openingtrainer.core.errors import (
    IllegalMoveError,
    LineIntegrityError,
    NoLinesAvailable,
    OpeningTrainerError,
    ParseError,
)
from openingtrainer.core.fen import STARTING_FEN, fen_key, turn_of
from openingtrainer.core.models import (
    Chapter,
    Line,
    Move,
    Position,
    PositionNode,
    PositionTree,
)
from openingtrainer.core.rules import MoveApplier, apply_move, replay

__all__ = [
    # Enums
    "AttemptOutcome",
    "Color",
    "LineStatus",
    # Errors
    "IllegalMoveError",
    "LineIntegrityError",
    "NoLinesAvailable",
    "OpeningTrainerError",
    "ParseError",
    # FEN
    "STARTING_FEN",
    "fen_key",
    "turn_of",
    # Domain objects
    "Chapter",
    "Line",
    "Move",
    "Position",
    "PositionNode",
    "PositionTree",
    # Rules
    "MoveApplier",
    "apply_move",
    "replay",
]
