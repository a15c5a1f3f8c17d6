"""Played games as a position tree, compared against the repertoire."""

from openingtrainer.games.compare import (
    ComparisonResult,
    ComparisonSummary,
    Deviation,
    Deviator,
    compare_to_repertoire,
)
from openingtrainer.games.tree import (
    GameNode,
    GameResult,
    GameStats,
    PlayedGame,
    build_game_tree,
    played_games_from_pgn,
)

__all__ = [
    # Game tree
    "GameNode",
    "GameResult",
    "GameStats",
    "PlayedGame",
    "build_game_tree",
    "played_games_from_pgn",
    # Comparison
    "ComparisonResult",
    "ComparisonSummary",
    "Deviation",
    "Deviator",
    "compare_to_repertoire",
]
