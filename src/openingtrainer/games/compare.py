"""Compare a played-games tree against repertoire chapters."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from openingtrainer.core.enums import Color
from openingtrainer.core.fen import fen_key
from openingtrainer.core.models import Move, PositionNode
from openingtrainer.games.tree import GameNode, GameStats

_LOGGER = logging.getLogger(__name__)


class Deviator(StrEnum):
    PLAYER = "player"
    OPPONENT = "opponent"


@dataclass(frozen=True, slots=True)
class Deviation:
    """A move played in games where the repertoire expects something else.

    ``ply`` is the half-move number of the played move, counted from the
    start position (1 is White's first move).
    """

    fen: str
    played_move: Move
    expected_moves: tuple[Move, ...]
    deviated_by: Deviator
    stats: GameStats
    ply: int

    @property
    def occurrences(self) -> int:
        return self.stats.game_count


@dataclass(frozen=True, slots=True)
class ComparisonSummary:
    total_games: int
    games_with_deviations: int
    player_deviations: int
    opponent_deviations: int
    most_common_deviation: Deviation | None


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    deviations: tuple[Deviation, ...]
    tree: GameNode
    summary: ComparisonSummary


class _RepertoireIndex:
    """Repertoire nodes of every chapter, keyed by FEN without move counters."""

    __slots__ = ("_nodes",)

    def __init__(self, trees: Iterable[PositionNode]) -> None:
        self._nodes: dict[str, list[PositionNode]] = {}
        for tree in trees:
            stack = [tree]
            while stack:
                node = stack.pop()
                self._nodes.setdefault(fen_key(node.position.fen), []).append(node)
                stack.extend(node.children)

    def __contains__(self, fen: object) -> bool:
        return isinstance(fen, str) and fen_key(fen) in self._nodes

    def expected_moves(self, fen: str) -> tuple[Move, ...]:
        """Distinct repertoire moves at *fen* across every chapter."""
        moves: dict[str, Move] = {}
        for node in self._nodes.get(fen_key(fen), ()):
            for child in node.children:
                move = child.position.last_move
                if move is not None:
                    moves.setdefault(move.uci, move)
        return tuple(moves.values())


def _covers(expected: tuple[Move, ...], move: Move) -> bool:
    return any(m.san == move.san or m.uci == move.uci for m in expected)


def compare_to_repertoire(
    tree: GameNode, repertoire: Iterable[PositionNode], player: Color
) -> ComparisonResult:
    """Find where played games leave the repertoire.

    A move is a deviation when the position before it is in the repertoire
    with at least one expected move, no chapter contains the move, and the
    position after it is not reached anywhere in the repertoire (so
    transpositions are not reported). Deviations at the same position with
    the same move are merged. Each game node's ``in_repertoire`` flag is set
    to whether its position occurs in the repertoire.

    The result lists deviations by occurrences, most frequent first.
    """
    index = _RepertoireIndex(repertoire)
    found: dict[tuple[str, str], Deviation] = {}

    tree.in_repertoire = tree.position.fen in index
    stack: list[tuple[GameNode, int]] = [(tree, 0)]
    while stack:
        node, ply = stack.pop()
        expected = index.expected_moves(node.position.fen) if node.in_repertoire else ()
        for child in node.children:
            child.in_repertoire = child.position.fen in index
            move = child.move
            if move is None or not expected or child.in_repertoire:
                continue
            if _covers(expected, move):
                continue
            key = (fen_key(node.position.fen), move.san)
            if key in found:
                found[key].stats.merge(child.stats)
                continue
            found[key] = Deviation(
                fen=node.position.fen,
                played_move=move,
                expected_moves=expected,
                deviated_by=Deviator.PLAYER if move.color is player else Deviator.OPPONENT,
                stats=child.stats.copy(),
                ply=ply + 1,
            )
        for child in reversed(node.children):
            stack.append((child, ply + 1))

    deviations = sorted(
        found.values(),
        key=lambda d: d.occurrences,
        reverse=True,
    )
    _LOGGER.debug("Found %d deviation(s)", len(deviations))
    return ComparisonResult(
        deviations=tuple(deviations),
        tree=tree,
        summary=_summarize(tree, deviations),
    )


def _summarize(tree: GameNode, deviations: list[Deviation]) -> ComparisonSummary:
    total = tree.stats.game_count
    by_player = sum(d.occurrences for d in deviations if d.deviated_by is Deviator.PLAYER)
    by_opponent = sum(d.occurrences for d in deviations if d.deviated_by is Deviator.OPPONENT)
    return ComparisonSummary(
        total_games=total,
        # Approximate: one game can deviate more than once.
        games_with_deviations=min(by_player + by_opponent, total),
        player_deviations=by_player,
        opponent_deviations=by_opponent,
        most_common_deviation=deviations[0] if deviations else None,
    )
