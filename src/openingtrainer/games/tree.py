"""Played games merged into one position tree with per-move results."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from openingtrainer.core import rules
from openingtrainer.core.enums import Color
from openingtrainer.core.errors import IllegalMoveError
from openingtrainer.core.fen import STARTING_FEN, fen_key
from openingtrainer.core.models import Chapter, Move, Position, PositionNode
from openingtrainer.core.rules import MoveApplier
from openingtrainer.notation import parse_pgn_lenient

_LOGGER = logging.getLogger(__name__)


class GameResult(StrEnum):
    """Result of a played game from the player's side."""

    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


@dataclass(frozen=True, slots=True)
class PlayedGame:
    """Main-line moves of one game the player took part in."""

    sans: tuple[str, ...]
    color: Color
    result: GameResult


@dataclass(slots=True)
class GameStats:
    game_count: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0

    def record(self, result: GameResult) -> None:
        self.game_count += 1
        if result is GameResult.WIN:
            self.wins += 1
        elif result is GameResult.LOSS:
            self.losses += 1
        else:
            self.draws += 1

    def merge(self, other: GameStats) -> None:
        self.game_count += other.game_count
        self.wins += other.wins
        self.draws += other.draws
        self.losses += other.losses

    def copy(self) -> GameStats:
        return GameStats(self.game_count, self.wins, self.draws, self.losses)

    @property
    def win_rate(self) -> float:
        """Share of games won, 0.0 when there are none."""
        return self.wins / self.game_count if self.game_count else 0.0


@dataclass(slots=True, eq=False)
class GameNode:
    """Node of a played-games tree. ``in_repertoire`` is set by comparison."""

    position: Position
    stats: GameStats = field(default_factory=GameStats)
    children: list[GameNode] = field(default_factory=list)
    in_repertoire: bool = False

    @property
    def move(self) -> Move | None:
        return self.position.last_move

    def child_with_fen(self, fen: str) -> GameNode | None:
        for child in self.children:
            if child.position.fen == fen:
                return child
        return None

    def most_common_child(self) -> GameNode | None:
        """Child reached in most games; the first one wins ties."""
        if not self.children:
            return None
        return max(self.children, key=lambda child: child.stats.game_count)


def build_game_tree(
    games: Iterable[PlayedGame], *, apply_move: MoveApplier | None = None
) -> GameNode:
    """Merge *games* into one tree rooted at the standard start position.

    Every node counts the games that passed through it. A game stops at its
    first illegal move; the moves before it are kept.
    """
    apply = apply_move or rules.apply_move
    root = GameNode(Position.initial())
    for game in games:
        root.stats.record(game.result)
        node = root
        for san in game.sans:
            try:
                position = apply(node.position, san)
            except IllegalMoveError as exc:
                _LOGGER.warning("Stopping game at illegal move: %s", exc)
                break
            child = node.child_with_fen(position.fen)
            if child is None:
                child = GameNode(position)
                node.children.append(child)
            child.stats.record(game.result)
            node = child
    _LOGGER.debug("Built game tree from %d game(s)", root.stats.game_count)
    return root


# ── Reading played games from PGN ─────────────────────────────────────────


def _main_line_sans(tree: PositionNode) -> tuple[str, ...]:
    sans: list[str] = []
    node = tree.main_child
    while node is not None:
        assert node.position.last_move is not None
        sans.append(node.position.last_move.san)
        node = node.main_child
    return tuple(sans)


def _result_for(result_tag: str, color: Color) -> GameResult:
    # Unfinished or unknown results count as draws.
    if result_tag == "1-0":
        return GameResult.WIN if color is Color.WHITE else GameResult.LOSS
    if result_tag == "0-1":
        return GameResult.WIN if color is Color.BLACK else GameResult.LOSS
    return GameResult.DRAW


def _played_game(chapter: Chapter, player: str) -> PlayedGame | None:
    name = player.casefold()
    if chapter.headers.get("White", "").casefold() == name:
        color = Color.WHITE
    elif chapter.headers.get("Black", "").casefold() == name:
        color = Color.BLACK
    else:
        _LOGGER.debug("Skipping game %d: %s did not play", chapter.index, player)
        return None
    if fen_key(chapter.root.fen) != fen_key(STARTING_FEN):
        _LOGGER.debug("Skipping game %d: custom start position", chapter.index)
        return None
    return PlayedGame(
        sans=_main_line_sans(chapter.position_tree),
        color=color,
        result=_result_for(chapter.headers.get("Result", "*"), color),
    )


def played_games_from_pgn(pgn_text: str, player: str) -> list[PlayedGame]:
    """Games in *pgn_text* where *player* (any case) is White or Black.

    Malformed games are skipped with a warning, as are games starting from a
    custom position.
    """
    chapters, errors = parse_pgn_lenient(pgn_text)
    if errors:
        _LOGGER.warning("Skipped %d malformed game(s)", len(errors))
    games = [_played_game(chapter, player) for chapter in chapters]
    return [game for game in games if game is not None]
