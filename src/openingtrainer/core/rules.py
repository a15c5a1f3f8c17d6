"""Move-legality collaborator backed by ``python-chess``.

The trainer never generates moves itself. Everything that needs to turn a
move token into a new position goes through a :data:`MoveApplier`, by default
:func:`apply_move`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import chess

from openingtrainer.core.enums import Color
from openingtrainer.core.errors import IllegalMoveError
from openingtrainer.core.models import Move, Position

MoveApplier = Callable[[Position, str], Position]


def _color(turn: chess.Color) -> Color:
    return Color.WHITE if turn == chess.WHITE else Color.BLACK


def _parse_move(board: chess.Board, move_text: str, fen: str) -> chess.Move:
    try:
        move = board.parse_san(move_text)
    except ValueError:
        try:
            move = chess.Move.from_uci(move_text)
        except ValueError as exc:
            raise IllegalMoveError(move_text, fen) from exc
        if not board.is_legal(move):
            raise IllegalMoveError(move_text, fen) from None
    # Null moves ("--") are accepted by python-chess but are not repertoire moves.
    if not move:
        raise IllegalMoveError(move_text, fen)
    return move


def apply_move(position: Position, move_text: str) -> Position:
    """Play *move_text* (SAN or UCI) from *position* and return the result.

    Raises:
        IllegalMoveError: The text is not a legal move in *position*.
    """
    board = chess.Board(position.fen)
    move = _parse_move(board, move_text, position.fen)
    played = Move(san=board.san(move), uci=move.uci(), color=_color(board.turn))
    board.push(move)
    return Position(fen=board.fen(), last_move=played, turn=_color(board.turn))


def replay(
    start: Position,
    moves: Iterable[Move | str],
    apply: MoveApplier = apply_move,
) -> Position:
    """Apply *moves* one after another from *start*."""
    position = start
    for move in moves:
        text = move.san if isinstance(move, Move) else move
        position = apply(position, text)
    return position
